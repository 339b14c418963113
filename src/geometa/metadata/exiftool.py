import asyncio
import contextlib
import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from core.config import configs
from geometa.metadata.exceptions import (
    ExifToolEmptyOutputError,
    ExifToolExecutionError,
    ExifToolParseError,
    ExifToolTimeoutError,
    ExifToolUnavailableError,
)

logger = logging.getLogger(__name__)

# JSON output, numeric values, UTF-8 file names
EXIFTOOL_ARGS = ("-json", "-n", "-charset", "filename=utf8")


@dataclass(frozen=True)
class ToolStatus:
    ready: bool
    path: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class ExifToolOutput:
    records: List[Dict[str, Any]] = field(default_factory=list)
    stdout: str = ""
    stderr: str = ""

    @property
    def first_record(self) -> Optional[Dict[str, Any]]:
        return self.records[0] if self.records else None


class ExifTool:
    """Runs the ExifTool binary as a subprocess, one process per file."""

    def __init__(self, binary: str = configs.EXIFTOOL_PATH, timeout: float = configs.EXIFTOOL_TIMEOUT_SECONDS):
        self.binary = binary
        self.timeout = timeout
        self.status = ToolStatus(ready=False, reason="not initialized")

    def initialize(self) -> ToolStatus:
        """Locate the binary once. Call before the first run()."""
        resolved = shutil.which(self.binary)
        if resolved is not None:
            self.status = ToolStatus(ready=True, path=resolved)
        elif os.path.isfile(self.binary):
            self.status = ToolStatus(ready=False, path=self.binary, reason=f"ExifTool at {self.binary} is not executable")
        else:
            self.status = ToolStatus(ready=False, reason=f"ExifTool not found at {self.binary}")

        if self.status.ready:
            logger.info(f"ExifTool ready at {self.status.path}")
        else:
            logger.error(f"ExifTool unavailable: {self.status.reason}")
        return self.status

    def ensure_ready(self) -> str:
        if not self.status.ready:
            raise ExifToolUnavailableError(self.status.reason or "ExifTool is not available")
        return self.status.path

    async def run(self, file_path: Union[str, Path]) -> ExifToolOutput:
        binary = self.ensure_ready()
        args = [*EXIFTOOL_ARGS, str(file_path)]
        logger.debug(f"Running {binary} {' '.join(args)}")

        try:
            process = await asyncio.create_subprocess_exec(
                binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExifToolExecutionError(f"Failed to start ExifTool: {e}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            # The process may exit between the timeout and the kill
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise ExifToolTimeoutError(f"ExifTool timed out after {self.timeout}s") from e

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        if stderr.strip():
            logger.warning(f"ExifTool stderr for {file_path}: {stderr.strip()}")

        if process.returncode != 0:
            raise ExifToolExecutionError(
                f"ExifTool exited with status {process.returncode}: {stderr.strip() or 'no error output'}",
                returncode=process.returncode,
                stderr=stderr,
            )

        if not stdout.strip():
            raise ExifToolEmptyOutputError(stderr=stderr)

        return ExifToolOutput(records=self._parse(stdout, stderr), stdout=stdout, stderr=stderr)

    def _parse(self, stdout: str, stderr: str) -> List[Dict[str, Any]]:
        try:
            parsed = json.loads(stdout)
        except json.JSONDecodeError as e:
            logger.error(f"ExifTool JSON parse error: {e}")
            raise ExifToolParseError(
                "Failed to parse exiftool JSON output", stdout=stdout, stderr=stderr, details=str(e)
            ) from e

        if isinstance(parsed, dict):
            return [parsed]
        if not isinstance(parsed, list):
            raise ExifToolParseError(
                "Failed to parse exiftool JSON output",
                stdout=stdout,
                stderr=stderr,
                details=f"Expected a JSON array, got {type(parsed).__name__}",
            )
        return parsed
