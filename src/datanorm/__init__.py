"""datanorm - recursive normalization of dates, numbers, booleans, nulls and keys."""

from __future__ import annotations

from datanorm.api import normalize
from datanorm.config import (
    BooleanConfig,
    DateConfig,
    KeyConfig,
    Mode,
    NormalizerConfig,
    NormalizerType,
    NullConfig,
    NumberConfig,
    merge_config,
    resolve_config,
)
from datanorm.engine import NormalizationEngine
from datanorm.errors import (
    ConfigurationError,
    NormalizationError,
    ParseError,
    StructuralError,
    UnrecognizedValueError,
)
from datanorm.normalizers import (
    BooleanNormalizer,
    DateNormalizer,
    KeyNormalizer,
    NullNormalizer,
    NumberNormalizer,
)
from datanorm.protocols import Normalizer
from datanorm.utils import (
    CaseStyle,
    convert_case,
    convert_to_timezone,
    detect_case,
    format_date,
    is_valid_date,
    parse_date,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "BooleanConfig",
    "BooleanNormalizer",
    "CaseStyle",
    "ConfigurationError",
    "DateConfig",
    "DateNormalizer",
    "KeyConfig",
    "KeyNormalizer",
    "Mode",
    "NormalizationEngine",
    "NormalizationError",
    "Normalizer",
    "NormalizerConfig",
    "NormalizerType",
    "NullConfig",
    "NullNormalizer",
    "NumberConfig",
    "NumberNormalizer",
    "ParseError",
    "StructuralError",
    "UnrecognizedValueError",
    "convert_case",
    "convert_to_timezone",
    "detect_case",
    "format_date",
    "is_valid_date",
    "merge_config",
    "normalize",
    "parse_date",
    "resolve_config",
]
