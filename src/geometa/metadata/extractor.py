import logging
import os
from pathlib import Path
from typing import Optional, Union

from geometa.metadata.exceptions import (
    ExifToolEmptyOutputError,
    ExifToolExecutionError,
    ExifToolParseError,
)
from geometa.metadata.exiftool import ExifTool
from geometa.metadata.normalizer import MetadataNormalizer
from geometa.metadata.schema import ExtractionResult

logger = logging.getLogger(__name__)


class MetadataExtractor:
    def __init__(self, exiftool: ExifTool, normalizer: Optional[MetadataNormalizer] = None):
        self.exiftool = exiftool
        self.normalizer = normalizer or MetadataNormalizer()

    async def extract(self, file_path: Union[str, Path]) -> ExtractionResult:
        """
        Run ExifTool on a local file and normalize its output.

        Raises ExifToolUnavailableError when the tool was never found; every other
        failure is reported through ``ExtractionResult.success``.
        """
        self.exiftool.ensure_ready()

        path = Path(file_path)
        if not path.is_file() or not os.access(path, os.R_OK):
            logger.warning(f"Input file not found: {path}")
            return ExtractionResult.failure(f"Input file not found: {path}")

        try:
            output = await self.exiftool.run(path)
        except ExifToolParseError as e:
            return ExtractionResult.failure(str(e), details=e.details, stdout=e.stdout, stderr=e.stderr)
        except (ExifToolExecutionError, ExifToolEmptyOutputError) as e:
            logger.error(f"ExifTool failed for {path}: {e}")
            return ExtractionResult.failure(str(e))

        record = output.first_record
        if record is None:
            logger.info(f"No metadata found in {path.name}")
            return ExtractionResult.no_metadata(stdout=output.stdout, stderr=output.stderr)

        return self.normalizer.normalize(record, path)
