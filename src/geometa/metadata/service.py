import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from core.config import configs
from core.storage.base import StorageService
from geometa.metadata.exceptions import UploadRejectedError
from geometa.metadata.extractor import MetadataExtractor
from geometa.metadata.formatters import build_display_summary
from geometa.metadata.schema import UploadResponse
from geometa.utils.performance import PerformanceMonitor

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MetadataService:
    def __init__(
        self,
        extractor: MetadataExtractor,
        storage: StorageService,
        allowed_extensions: Optional[Iterable[str]] = None,
        max_file_size: int = configs.MAX_FILE_SIZE,
    ):
        self.extractor = extractor
        self.storage = storage
        self.allowed_extensions = list(allowed_extensions or configs.allowed_extensions)
        self.max_file_size = max_file_size

    def validate_upload(self, filename: str, size: int):
        extension = Path(filename).suffix.lower().lstrip(".")
        if extension not in self.allowed_extensions:
            raise UploadRejectedError(
                f"File type .{extension} not allowed. Allowed types: {', '.join(self.allowed_extensions)}"
            )
        if size > self.max_file_size:
            raise UploadRejectedError(
                f"File is {size} bytes, the limit is {self.max_file_size} bytes", status_code=413
            )

    async def process_upload(self, data: bytes, filename: str, content_type: Optional[str] = None) -> UploadResponse:
        """Write the upload to a temporary file, extract its metadata, and always remove the file."""
        self.validate_upload(filename, len(data))
        self.extractor.exiftool.ensure_ready()

        temp_path = self.storage.temp_path(filename)
        logger.info(f"📥 Processing {filename} ({len(data)} bytes) as {temp_path.name}")

        try:
            await self.storage.write_file(temp_path, data)
            monitor = PerformanceMonitor()
            monitor.start()
            result = await self.extractor.extract(temp_path)
            monitor.stop()
        finally:
            await self._cleanup(temp_path)

        logger.info(f"✅ {monitor.report('extract_metadata')} success={result.success} has_metadata={result.has_metadata}")

        return UploadResponse(
            filename=filename,
            filesize=len(data),
            mimetype=content_type,
            upload_time=_utc_now_iso(),
            metadata=result,
            display=build_display_summary(len(data), result),
        )

    async def _cleanup(self, path: Path):
        try:
            await self.storage.delete_file(path)
        except Exception as e:
            logger.warning(f"Failed to remove temporary upload {path}: {e}")
