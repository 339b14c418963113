from datetime import datetime
from typing import Any, Optional

from geometa.metadata.dates import ParsedDate, parse_exif_date
from geometa.metadata.schema import DisplaySummary, ExtractionResult

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]
NOT_AVAILABLE = "N/A"


def format_file_size(size: Optional[float]) -> str:
    if size is None:
        return NOT_AVAILABLE
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    value = float(size)
    while value >= 1024 and exponent < len(SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[exponent]}"


def _to_datetime(value: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        parsed = parse_exif_date(value)
        return parsed.value if isinstance(parsed, ParsedDate) else None
    return dt if dt.tzinfo is not None else dt.astimezone()


def format_display_date(value: Any) -> str:
    """e.g. ``16 Oct 2025, 17:14:35 UTC``. Unparseable values are returned as given."""
    if value is None or value == "":
        return NOT_AVAILABLE
    if not isinstance(value, str):
        return str(value)

    dt = _to_datetime(value)
    if dt is None:
        return value
    return f"{dt.day} {dt.strftime('%b %Y, %H:%M:%S')} {dt.tzname()}"


def build_display_summary(filesize: Optional[int], result: ExtractionResult) -> DisplaySummary:
    # PDFs carry their own document dates
    dates = result.pdf_info or result.timestamp
    return DisplaySummary(
        file_size=format_file_size(filesize),
        date_time_original=format_display_date(getattr(result.timestamp, "date_time_original", None)),
        create_date=format_display_date(getattr(dates, "create_date", None)),
        modify_date=format_display_date(getattr(dates, "modify_date", None)),
        gps_date_time=format_display_date(getattr(result.timestamp, "gps_date_time", None)),
    )
