from .misc import now_iso, now_millis
from .formatting import (
    convert_numeric_quality_to_string,
    convert_long_to_date_string,
    format_duration,
    format_nights,
)

__all__ = [
    "now_iso",
    "now_millis",
    "convert_numeric_quality_to_string",
    "convert_long_to_date_string",
    "format_duration",
    "format_nights",
]
