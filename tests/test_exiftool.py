import asyncio
import json

import pytest

from geometa.metadata.exceptions import (
    ExifToolEmptyOutputError,
    ExifToolExecutionError,
    ExifToolParseError,
    ExifToolTimeoutError,
    ExifToolUnavailableError,
)
from geometa.metadata.exiftool import ExifTool
from geometa.metadata.extractor import MetadataExtractor

RECORD = {
    "SourceFile": "photo.jpg",
    "MIMEType": "image/jpeg",
    "Make": "Canon",
    "Model": "EOS R5",
    "DateTimeOriginal": "2025:10:16 22:44:35+05:30",
    "GPSLatitude": 37.5,
    "GPSLongitude": -122.25,
}


def _ready(binary: str, timeout: float = 5.0) -> ExifTool:
    tool = ExifTool(binary, timeout=timeout)
    assert tool.initialize().ready
    return tool


def test_initialize_missing_binary(tmp_path):
    tool = ExifTool(str(tmp_path / "nope" / "exiftool"))

    status = tool.initialize()

    assert status.ready is False
    assert "not found" in status.reason
    with pytest.raises(ExifToolUnavailableError):
        tool.ensure_ready()


def test_initialize_non_executable_binary(tmp_path):
    binary = tmp_path / "exiftool"
    binary.write_text("#!/bin/sh\n")
    binary.chmod(0o644)

    status = ExifTool(str(binary)).initialize()

    assert status.ready is False
    assert "not executable" in status.reason


def test_uninitialized_tool_is_not_ready(fake_exiftool):
    tool = ExifTool(fake_exiftool(records=[RECORD]))

    assert tool.status.ready is False
    with pytest.raises(ExifToolUnavailableError):
        tool.ensure_ready()


@pytest.mark.asyncio
async def test_run_passes_json_numeric_utf8_flags(fake_exiftool, sample_file, tmp_path):
    args_file = tmp_path / "args.txt"
    body = f"printf '%s\\n' \"$@\" > {args_file}\necho '[]'"
    tool = _ready(fake_exiftool(body))

    output = await tool.run(sample_file)

    assert output.records == []
    assert args_file.read_text().splitlines() == ["-json", "-n", "-charset", "filename=utf8", str(sample_file)]


@pytest.mark.asyncio
async def test_run_returns_first_record(fake_exiftool, sample_file):
    tool = _ready(fake_exiftool(records=[RECORD]))

    output = await tool.run(sample_file)

    assert output.first_record == RECORD
    assert json.loads(output.stdout) == [RECORD]


@pytest.mark.asyncio
async def test_run_tolerates_stderr_warnings(fake_exiftool, sample_file):
    body = "echo 'Warning: [minor] Bad MakerNotes' >&2\necho '[{\"Make\": \"Canon\"}]'"
    tool = _ready(fake_exiftool(body))

    output = await tool.run(sample_file)

    assert output.first_record == {"Make": "Canon"}
    assert "Bad MakerNotes" in output.stderr


@pytest.mark.asyncio
async def test_run_non_zero_exit(fake_exiftool, sample_file):
    tool = _ready(fake_exiftool("echo 'Error: File format error' >&2\nexit 1"))

    with pytest.raises(ExifToolExecutionError) as exc_info:
        await tool.run(sample_file)

    assert exc_info.value.returncode == 1
    assert "File format error" in str(exc_info.value)


@pytest.mark.asyncio
async def test_run_empty_output(fake_exiftool, sample_file):
    tool = _ready(fake_exiftool("exit 0"))

    with pytest.raises(ExifToolEmptyOutputError):
        await tool.run(sample_file)


@pytest.mark.asyncio
async def test_run_invalid_json(fake_exiftool, sample_file):
    tool = _ready(fake_exiftool("echo 'this is not json'\necho 'oops' >&2"))

    with pytest.raises(ExifToolParseError) as exc_info:
        await tool.run(sample_file)

    assert exc_info.value.stdout.strip() == "this is not json"
    assert exc_info.value.stderr.strip() == "oops"
    assert exc_info.value.details


@pytest.mark.asyncio
async def test_run_timeout(fake_exiftool, sample_file):
    tool = _ready(fake_exiftool("exec sleep 5"), timeout=0.3)

    with pytest.raises(ExifToolTimeoutError):
        await tool.run(sample_file)


class _ExitedProcess:
    returncode = None

    async def communicate(self):
        await asyncio.sleep(5)

    def kill(self):
        raise ProcessLookupError()

    async def wait(self):
        return 0


@pytest.mark.asyncio
async def test_run_timeout_when_process_already_exited(fake_exiftool, sample_file, monkeypatch):
    async def _spawn(*args, **kwargs):
        return _ExitedProcess()

    tool = _ready(fake_exiftool(records=[]), timeout=0.1)
    monkeypatch.setattr("geometa.metadata.exiftool.asyncio.create_subprocess_exec", _spawn)

    with pytest.raises(ExifToolTimeoutError):
        await tool.run(sample_file)


# --- MetadataExtractor -------------------------------------------------------


@pytest.mark.asyncio
async def test_extract_success(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool(records=[RECORD])))

    result = await extractor.extract(sample_file)

    assert result.success is True
    assert result.has_metadata is True
    assert result.camera.make == "Canon"
    assert result.gps.map_url == "https://www.google.com/maps?q=37.5,-122.25"
    assert result.timestamp.date_time_original == "2025-10-16T17:14:35.000Z"
    assert result.technical.file_size == sample_file.stat().st_size
    assert result.pdf_info is None
    assert result.raw == RECORD
    assert result.exiftool_stdout is None


@pytest.mark.asyncio
async def test_extract_empty_array_is_not_an_error(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool(records=[])))

    result = await extractor.extract(sample_file)

    assert result.success is True
    assert result.has_metadata is False
    assert result.error is None
    assert result.exiftool_stdout.strip() == "[]"
    for name in ("gps", "camera", "timestamp", "technical", "pdf_info", "raw"):
        assert getattr(result, name) is None


@pytest.mark.asyncio
async def test_extract_parse_failure_keeps_raw_streams(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool("echo '[{broken'")))

    result = await extractor.extract(sample_file)

    assert result.success is False
    assert result.has_metadata is False
    assert result.error == "Failed to parse exiftool JSON output"
    assert result.details
    assert result.exiftool_stdout.strip() == "[{broken"
    assert result.raw is None
    assert result.camera is None


@pytest.mark.asyncio
async def test_extract_empty_output(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool("true")))

    result = await extractor.extract(sample_file)

    assert result.success is False
    assert result.error == "ExifTool produced no output"


@pytest.mark.asyncio
async def test_extract_tool_failure(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool("exit 2")))

    result = await extractor.extract(sample_file)

    assert result.success is False
    assert "status 2" in result.error
    assert result.gps is None


@pytest.mark.asyncio
async def test_extract_timeout(fake_exiftool, sample_file):
    extractor = MetadataExtractor(_ready(fake_exiftool("exec sleep 5"), timeout=0.3))

    result = await extractor.extract(sample_file)

    assert result.success is False
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_extract_missing_input(fake_exiftool, tmp_path):
    extractor = MetadataExtractor(_ready(fake_exiftool(records=[RECORD])))
    missing = tmp_path / "missing.jpg"

    result = await extractor.extract(missing)

    assert result.success is False
    assert result.has_metadata is False
    assert result.error == f"Input file not found: {missing}"
    assert result.raw is None


@pytest.mark.asyncio
async def test_extract_requires_initialized_tool(sample_file, tmp_path):
    tool = ExifTool(str(tmp_path / "absent"))
    tool.initialize()
    extractor = MetadataExtractor(tool)

    with pytest.raises(ExifToolUnavailableError):
        await extractor.extract(sample_file)
