"""Case conversion and date helpers used by the normalizers."""

from datanorm.utils.case import CaseStyle, convert_case, detect_case, split_words
from datanorm.utils.dates import (
    convert_to_timezone,
    format_date,
    is_valid_date,
    local_offset,
    parse_date,
    to_epoch_ms,
)

__all__ = [
    "CaseStyle",
    "convert_case",
    "convert_to_timezone",
    "detect_case",
    "format_date",
    "is_valid_date",
    "local_offset",
    "parse_date",
    "split_words",
    "to_epoch_ms",
]
