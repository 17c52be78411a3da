"""DateNormalizer: converts date strings, timestamps and datetimes.

Example::

    normalizer = DateNormalizer({"output_format": "iso"})
    normalizer.normalize("2023-01-01")      # "2023-01-01T00:00:00.000Z"
    normalizer.normalize(1672531200)        # "2023-01-01T00:00:00.000Z"
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

import numpy as np

from datanorm.config import DateConfig, NormalizerType
from datanorm.errors import ParseError
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig
from datanorm.utils.dates import convert_to_timezone, format_date, parse_date

__all__ = ["DateNormalizer"]

_EPOCH_TOKEN = re.compile(r"^\d{10,13}$", re.ASCII)

_DATE_LIKE = (str, int, float, np.number, datetime, date, np.datetime64)


def _is_finite(value: Any) -> bool:
    if isinstance(value, (float, np.floating)):
        return bool(math.isfinite(value))
    return True


class DateNormalizer(BaseNormalizer):
    """Resolves date-like values to an instant and formats it.

    Loose mode only picks up values that parse; strict mode accepts every
    string, number and date and raises ``ParseError`` for the ones that do
    not.
    """

    type = NormalizerType.DATE

    def _accepts(self, value: Any, effective: EffectiveConfig) -> bool:
        if isinstance(value, bool):
            return False
        if self._is_strict(effective):
            return isinstance(value, _DATE_LIKE)
        if isinstance(value, (datetime, date)):
            return True
        if isinstance(value, np.datetime64):
            return not np.isnat(value)
        if isinstance(value, (int, float, np.number)):
            return _is_finite(value)
        if isinstance(value, str):
            text = value.strip()
            return bool(_EPOCH_TOKEN.match(text)) or parse_date(text) is not None
        return False

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        options: DateConfig = effective.options  # type: ignore[assignment]
        instant = parse_date(value)
        if instant is None:
            msg = f"Invalid date value: {value!r}"
            raise ParseError(msg, value=value)
        if options.timezone:
            instant = convert_to_timezone(instant, options.timezone)
        if isinstance(options.output_format, str):
            return format_date(instant, options.output_format)
        return instant
