from typing import Optional


class ExifToolError(Exception):
    """Base class for failures around the external ExifTool process."""


class ExifToolUnavailableError(ExifToolError):
    """The ExifTool binary could not be located or is not executable."""


class ExifToolExecutionError(ExifToolError):
    def __init__(self, message: str, returncode: Optional[int] = None, stderr: Optional[str] = None):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ExifToolTimeoutError(ExifToolExecutionError):
    pass


class ExifToolEmptyOutputError(ExifToolError):
    def __init__(self, message: str = "ExifTool produced no output", stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr


class ExifToolParseError(ExifToolError):
    """stdout was not a JSON array of records. Raw streams are kept for diagnosis."""

    def __init__(self, message: str, stdout: str, stderr: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.details = details


class UploadRejectedError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code
