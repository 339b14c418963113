from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Scalar = Union[int, float, str]


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GpsInfo(CamelModel):
    latitude: float
    longitude: float
    altitude: Optional[float] = None
    map_url: str
    embed_url: str
    raw: Dict[str, Any] = Field(default_factory=dict, description="GPSLatitude / GPSLongitude / GPSAltitude as reported")


class CameraInfo(CamelModel):
    make: Optional[str] = None
    model: Optional[str] = None
    software: Optional[str] = None
    lens: Optional[str] = None
    serial_number: Optional[str] = None


class TimestampInfo(CamelModel):
    date_time_original: Optional[str] = None
    create_date: Optional[str] = None
    modify_date: Optional[str] = None
    gps_date_time: Optional[str] = None


class TechnicalInfo(CamelModel):
    iso: Optional[Scalar] = None
    aperture: Optional[Scalar] = None
    shutter_speed: Optional[Scalar] = None
    focal_length: Optional[Scalar] = None
    image_width: Optional[Scalar] = None
    image_height: Optional[Scalar] = None
    orientation: Optional[Scalar] = None
    file_size: Optional[int] = Field(None, description="Bytes on disk, from os.stat")


class PdfInfo(CamelModel):
    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    create_date: Optional[str] = None
    modify_date: Optional[str] = None
    page_count: Optional[Scalar] = None
    file_size: Optional[Scalar] = None
    pdf_version: Optional[str] = None


class ExtractionResult(CamelModel):
    success: bool
    has_metadata: bool
    error: Optional[str] = None
    details: Optional[str] = None
    gps: Optional[GpsInfo] = None
    camera: Optional[CameraInfo] = None
    timestamp: Optional[TimestampInfo] = None
    technical: Optional[TechnicalInfo] = None
    pdf_info: Optional[PdfInfo] = None
    raw: Optional[Dict[str, Any]] = None
    exiftool_stdout: Optional[str] = None
    exiftool_stderr: Optional[str] = None

    @classmethod
    def failure(
        cls,
        error: str,
        details: Optional[str] = None,
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
    ) -> "ExtractionResult":
        return cls(
            success=False,
            has_metadata=False,
            error=error,
            details=details,
            exiftool_stdout=stdout,
            exiftool_stderr=stderr or None,
        )

    @classmethod
    def no_metadata(cls, stdout: Optional[str] = None, stderr: Optional[str] = None) -> "ExtractionResult":
        return cls(success=True, has_metadata=False, exiftool_stdout=stdout, exiftool_stderr=stderr or None)


class DisplaySummary(CamelModel):
    file_size: str = "N/A"
    date_time_original: str = "N/A"
    create_date: str = "N/A"
    modify_date: str = "N/A"
    gps_date_time: str = "N/A"


class UploadResponse(CamelModel):
    filename: str
    filesize: int
    mimetype: Optional[str] = None
    upload_time: str
    metadata: ExtractionResult
    display: DisplaySummary


class AnalyzeUrlRequest(CamelModel):
    image_url: Optional[str] = Field(None, description="Remote image URL")
