import json
import os
import sys

import pytest

# Add src to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))


@pytest.fixture
def fake_exiftool(tmp_path):
    """
    Build a shell script standing in for the exiftool binary.

    `body` is the script body; `records` is a shortcut that prints them as JSON.
    """
    counter = {"n": 0}

    def _make(body: str = None, records: list = None) -> str:
        if body is None:
            body = "cat <<'EOF'\n" + json.dumps(records if records is not None else []) + "\nEOF"
        counter["n"] += 1
        script = tmp_path / f"exiftool_{counter['n']}"
        script.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        script.chmod(0o755)
        return str(script)

    return _make


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * 60)
    return path
