import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from core.config import configs
from geometa.metadata.dates import convert_exif_date
from geometa.metadata.schema import (
    CameraInfo,
    ExtractionResult,
    GpsInfo,
    PdfInfo,
    TechnicalInfo,
    TimestampInfo,
)

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
PDF_FILE_TYPE = "PDF"

MAP_URL_TEMPLATE = "https://www.google.com/maps?q={lat},{lon}"
EMBED_URL_TEMPLATE = "https://maps.google.com/maps?q={lat},{lon}&t=&z={zoom}&ie=UTF8&iwloc=&output=embed"

# Logical timestamp -> ExifTool tags in priority order
TIMESTAMP_FIELDS = {
    "date_time_original": ("DateTimeOriginal", "CreateDate"),
    "create_date": ("CreateDate", "FileCreateDate"),
    "modify_date": ("ModifyDate", "FileModifyDate"),
    "gps_date_time": ("GPSDateTime",),
}


def first_match(record: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and not empty."""
    for key in keys:
        value = record.get(key)
        if value is None or value == "":
            continue
        return value
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _as_scalar(value: Any) -> Any:
    if value is None or isinstance(value, (int, float, str)):
        return value
    return str(value)


def _file_size(file_path: Union[str, Path]) -> Optional[int]:
    try:
        return os.stat(file_path).st_size
    except (OSError, TypeError, ValueError) as e:
        logger.debug(f"Could not stat {file_path}: {e}")
        return None


def is_pdf(record: Mapping[str, Any]) -> bool:
    return record.get("MIMEType") == PDF_MIME_TYPE or record.get("FileType") == PDF_FILE_TYPE


class MetadataNormalizer:
    """Maps a raw ExifTool record onto the UI-facing ExtractionResult shape."""

    def __init__(self, map_zoom: int = configs.MAP_ZOOM):
        self.map_zoom = map_zoom

    def normalize(self, raw_record: Optional[Mapping[str, Any]], file_path: Union[str, Path]) -> ExtractionResult:
        if raw_record is None:
            return ExtractionResult.no_metadata()

        try:
            record = dict(raw_record)
            pdf_info = self._build_pdf_info(record) if is_pdf(record) else None
            return ExtractionResult(
                success=True,
                has_metadata=True,
                gps=self._build_gps(record),
                camera=self._build_camera(record),
                timestamp=self._build_timestamp(record),
                technical=self._build_technical(record, file_path),
                pdf_info=pdf_info,
                raw=record,
            )
        except Exception as e:
            logger.error(f"Failed to normalize metadata for {file_path}: {e}", exc_info=True)
            return ExtractionResult.failure(str(e) or type(e).__name__)

    def _build_gps(self, record: Mapping[str, Any]) -> Optional[GpsInfo]:
        lat = record.get("GPSLatitude")
        lon = record.get("GPSLongitude")
        if not (_is_number(lat) and _is_number(lon)):
            return None

        altitude = record.get("GPSAltitude")
        return GpsInfo(
            latitude=lat,
            longitude=lon,
            altitude=altitude if _is_number(altitude) else None,
            map_url=MAP_URL_TEMPLATE.format(lat=lat, lon=lon),
            embed_url=EMBED_URL_TEMPLATE.format(lat=lat, lon=lon, zoom=self.map_zoom),
            raw={
                "GPSLatitude": lat,
                "GPSLongitude": lon,
                "GPSAltitude": altitude,
            },
        )

    def _build_camera(self, record: Mapping[str, Any]) -> CameraInfo:
        return CameraInfo(
            make=_as_text(first_match(record, "Make", "CameraMake")),
            model=_as_text(first_match(record, "Model", "CameraModel")),
            software=_as_text(first_match(record, "Software")),
            lens=_as_text(first_match(record, "Lens", "LensModel")),
            serial_number=_as_text(first_match(record, "SerialNumber", "BodySerialNumber")),
        )

    def _build_timestamp(self, record: Mapping[str, Any]) -> TimestampInfo:
        return TimestampInfo(
            **{name: convert_exif_date(first_match(record, *keys)) for name, keys in TIMESTAMP_FIELDS.items()}
        )

    def _build_technical(self, record: Mapping[str, Any], file_path: Union[str, Path]) -> TechnicalInfo:
        return TechnicalInfo(
            iso=_as_scalar(first_match(record, "ISO", "ISOValue")),
            aperture=_as_scalar(first_match(record, "FNumber", "Aperture")),
            shutter_speed=_as_scalar(first_match(record, "ExposureTime")),
            focal_length=_as_scalar(first_match(record, "FocalLength")),
            image_width=_as_scalar(first_match(record, "ImageWidth", "ExifImageWidth")),
            image_height=_as_scalar(first_match(record, "ImageHeight", "ExifImageHeight")),
            orientation=_as_scalar(first_match(record, "Orientation")),
            # Never taken from the tool output
            file_size=_file_size(file_path),
        )

    def _build_pdf_info(self, record: Mapping[str, Any]) -> PdfInfo:
        return PdfInfo(
            title=_as_text(first_match(record, "Title")),
            author=_as_text(first_match(record, "Author")),
            creator=_as_text(first_match(record, "Creator")),
            producer=_as_text(first_match(record, "Producer")),
            create_date=convert_exif_date(first_match(record, *TIMESTAMP_FIELDS["create_date"])),
            modify_date=convert_exif_date(first_match(record, *TIMESTAMP_FIELDS["modify_date"])),
            page_count=_as_scalar(first_match(record, "PageCount")),
            file_size=_as_scalar(first_match(record, "FileSize")),
            pdf_version=_as_text(first_match(record, "PDFVersion")),
        )
