"""
ExifTool date parsing.

ExifTool reports dates as ``YYYY:MM:DD HH:MM:SS`` with an optional sub-second
fraction and an optional ``Z`` or ``+HH:MM`` / ``-HH:MM`` suffix, e.g.
``2025:10:16 22:44:35+05:30``. ``parse_exif_date`` turns such a value into a
``ParsedDate`` or, when the value does not follow that grammar, an
``UnparsedDate`` carrying the original value untouched.

Values without an offset are interpreted in the local timezone of the process.
"""
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

EXIF_DATE_PATTERN = re.compile(
    r"^(?P<year>\d{4}):(?P<month>\d{2}):(?P<day>\d{2})"
    r" (?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})?$"
)


@dataclass(frozen=True)
class ParsedDate:
    value: datetime
    has_offset: bool

    def to_iso(self) -> str:
        """UTC ISO-8601 with millisecond precision, e.g. ``2025-10-16T17:14:35.000Z``."""
        utc = self.value.astimezone(timezone.utc)
        return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class UnparsedDate:
    original: Any


ExifDate = Union[ParsedDate, UnparsedDate]


def _parse_offset(offset: Optional[str]) -> Optional[timezone]:
    if not offset:
        return None
    if offset == "Z":
        return timezone.utc
    sign = -1 if offset[0] == "-" else 1
    hours, minutes = int(offset[1:3]), int(offset[4:6])
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_exif_date(value: Any) -> ExifDate:
    if not isinstance(value, str):
        return UnparsedDate(original=value)

    match = EXIF_DATE_PATTERN.match(value.strip())
    if not match:
        return UnparsedDate(original=value)

    fraction = match.group("fraction") or ""
    try:
        tz = _parse_offset(match.group("offset"))
        dt = datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            int(fraction.ljust(6, "0")[:6]) if fraction else 0,
            tzinfo=tz,
        )
        if tz is None:
            # Naive wall time, pinned to the local timezone of this process
            dt = dt.astimezone()
        # Overflows for dates at the edge of the supported range
        dt.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        # 0000:00:00 00:00:00 and similar placeholders
        logger.debug(f"Unparseable ExifTool date {value!r}: {e}")
        return UnparsedDate(original=value)

    return ParsedDate(value=dt, has_offset=tz is not None)


def convert_exif_date(value: Any) -> Optional[str]:
    """ISO string for parseable dates, the original value for anything else."""
    if value is None:
        return None
    parsed = parse_exif_date(value)
    if isinstance(parsed, ParsedDate):
        return parsed.to_iso()
    original = parsed.original
    return original if isinstance(original, str) else str(original)
