"""Configuration model and the three-tier configuration merge.

Configuration is layered:

- built-in per-type defaults (``TYPE_DEFAULTS``)
- the configuration an engine or normalizer was constructed with
- an optional per-call override

``merge_config`` folds an override onto an already-resolved
``NormalizerConfig`` without mutating either. Per-type slots accept
``False`` (disable), ``True`` (enable with defaults) or a mapping of
overrides merged field by field. The token lists ``truthy_values``,
``falsy_values`` and ``custom_nulls`` only ever grow: every merge
concatenates and de-duplicates them.

Keys may be written in snake_case (``deep_clone``) or camelCase
(``deepClone``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from enum import StrEnum, auto
from types import MappingProxyType
from typing import Any

from datanorm.errors import ConfigurationError
from datanorm.utils.case import CaseStyle, convert_case

__all__ = [
    "ADDITIVE_FIELDS",
    "BooleanConfig",
    "DateConfig",
    "KeyConfig",
    "Mode",
    "NORMALIZATION_ORDER",
    "NullConfig",
    "NormalizerConfig",
    "NormalizerType",
    "NumberConfig",
    "TYPE_DEFAULTS",
    "TypeConfig",
    "canonical_key",
    "merge_config",
    "overlay",
    "resolve_config",
]


class Mode(StrEnum):
    """Error policy for a normalization pass.

    - STRICT: the first value that cannot be normalized aborts the call.
    - LOOSE:  failures are logged and the original value is kept.
    """

    STRICT = auto()
    LOOSE = auto()


class NormalizerType(StrEnum):
    """Tag identifying each typed normalizer."""

    DATE = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()
    KEY = auto()


# Fixed precedence for scalar values; the first normalizer that changes a
# value wins.
NORMALIZATION_ORDER: tuple[NormalizerType, ...] = (
    NormalizerType.DATE,
    NormalizerType.NUMBER,
    NormalizerType.BOOLEAN,
    NormalizerType.NULL,
)

ADDITIVE_FIELDS = frozenset({"truthy_values", "falsy_values", "custom_nulls"})

_GLOBAL_FIELDS = frozenset({"mode", "deep_clone", "logging", "strict_mode", "target_keys"})
_TYPE_NAMES = frozenset(t.value for t in NormalizerType)


def canonical_key(key: Any) -> str:
    """Return the snake_case field name for a configuration key."""
    if not isinstance(key, str):
        msg = f"configuration keys must be strings, got {key!r}"
        raise ConfigurationError(msg)
    return convert_case(key, CaseStyle.SNAKE)


def _as_tuple(name: str, value: Any) -> tuple[Any, ...]:
    if isinstance(value, (str, re.Pattern)):
        return (value,)
    if not isinstance(value, Iterable) or isinstance(value, Mapping):
        msg = f"{name} must be a list of values, got {value!r}"
        raise ConfigurationError(msg)
    return tuple(value)


def _dedupe(values: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(dict.fromkeys(values))


def _check_bool(name: str, value: Any, optional: bool = False) -> None:
    if optional and value is None:
        return
    if not isinstance(value, bool):
        msg = f"{name} must be a boolean, got {value!r}"
        raise ConfigurationError(msg)


def _check_strings(name: str, values: tuple[Any, ...]) -> None:
    for item in values:
        if not isinstance(item, str):
            msg = f"{name} entries must be strings, got {item!r}"
            raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class TypeConfig:
    """Settings shared by every typed normalizer.

    Attributes:
        strict_mode: Per-type strict flag. ``None`` inherits the global mode.
        target_keys: Keys this normalizer is restricted to. ``None`` or an
            empty tuple defers to the global ``target_keys``.
    """

    strict_mode: bool | None = None
    target_keys: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        _check_bool("strict_mode", self.strict_mode, optional=True)
        if self.target_keys is not None:
            keys = _as_tuple("target_keys", self.target_keys)
            _check_strings("target_keys", keys)
            object.__setattr__(self, "target_keys", keys)
        self._validate()

    def _validate(self) -> None:
        pass


@dataclass(frozen=True, slots=True)
class DateConfig(TypeConfig):
    """Date normalizer settings.

    Attributes:
        output_format: ``"iso"``, ``"timestamp"``, a shortcut or token
            template understood by ``format_date``, or ``None`` to return
            the parsed ``datetime``.
        timezone: ``"utc"``, ``"local"`` or a ``±HH[:]MM`` offset applied
            before formatting. ``None`` leaves the instant untouched.
    """

    output_format: str | None = "iso"
    timezone: str | None = None

    def _validate(self) -> None:
        for name in ("output_format", "timezone"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                msg = f"{name} must be a string, got {value!r}"
                raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class NumberConfig(TypeConfig):
    """Number normalizer settings.

    Attributes:
        allow_float: When False only the integer part is kept (truncated).
    """

    allow_float: bool = True

    def _validate(self) -> None:
        _check_bool("allow_float", self.allow_float)


@dataclass(frozen=True, slots=True)
class BooleanConfig(TypeConfig):
    """Boolean normalizer settings. Token matching is case-insensitive."""

    truthy_values: tuple[Any, ...] = ("true", "yes", "1")
    falsy_values: tuple[Any, ...] = ("false", "no", "0")

    def _validate(self) -> None:
        for name in ("truthy_values", "falsy_values"):
            values = _dedupe(_as_tuple(name, getattr(self, name)))
            for item in values:
                if not isinstance(item, (str, int, float)):
                    msg = f"{name} entries must be strings or numbers, got {item!r}"
                    raise ConfigurationError(msg)
            object.__setattr__(self, name, values)


@dataclass(frozen=True, slots=True)
class NullConfig(TypeConfig):
    """Null normalizer settings. Tokens are matched trimmed and lowercased."""

    custom_nulls: tuple[str, ...] = ("", "null", "undefined", "na", "n/a", "nan", "none", "-", "--")

    def _validate(self) -> None:
        values = _dedupe(_as_tuple("custom_nulls", self.custom_nulls))
        _check_strings("custom_nulls", values)
        object.__setattr__(self, "custom_nulls", values)


@dataclass(frozen=True, slots=True)
class KeyConfig(TypeConfig):
    """Key normalizer settings.

    Attributes:
        style: Target ``CaseStyle`` (or its string value).
        recursive: Rename keys at every depth, not only the outer object.
        preserve: Literal key names (case-insensitive) or compiled patterns
            (matched with ``search``) that are never renamed.
    """

    style: str = CaseStyle.CAMEL
    recursive: bool = True
    preserve: tuple[str | re.Pattern[str], ...] = ()

    def _validate(self) -> None:
        if not isinstance(self.style, str):
            msg = f"style must be a string, got {self.style!r}"
            raise ConfigurationError(msg)
        _check_bool("recursive", self.recursive)
        preserve = _as_tuple("preserve", self.preserve)
        for item in preserve:
            if not isinstance(item, (str, re.Pattern)):
                msg = f"preserve entries must be strings or patterns, got {item!r}"
                raise ConfigurationError(msg)
        object.__setattr__(self, "preserve", preserve)


TYPE_DEFAULTS: Mapping[NormalizerType, TypeConfig] = MappingProxyType(
    {
        NormalizerType.DATE: DateConfig(),
        NormalizerType.NUMBER: NumberConfig(),
        NormalizerType.BOOLEAN: BooleanConfig(),
        NormalizerType.NULL: NullConfig(),
        NormalizerType.KEY: KeyConfig(),
    }
)


@dataclass(frozen=True, slots=True)
class NormalizerConfig:
    """Fully resolved configuration for one normalization pass.

    Attributes:
        mode: ``Mode.STRICT`` or ``Mode.LOOSE``. ``None`` means unset, which
            behaves as loose unless ``strict_mode`` is True.
        deep_clone: Work on a deep copy instead of mutating the input.
        logging: Emit structured log records.
        strict_mode: Secondary strict flag, honored only when ``mode`` is unset.
        target_keys: Restrict value normalization to these keys.
        date, number, boolean, null, key: Per-type settings; ``None``
            disables that normalizer.
    """

    mode: Mode | None = None
    deep_clone: bool = True
    logging: bool = False
    strict_mode: bool = False
    target_keys: tuple[str, ...] | None = None
    date: DateConfig | None = None
    number: NumberConfig | None = None
    boolean: BooleanConfig | None = None
    null: NullConfig | None = None
    key: KeyConfig | None = None

    def __post_init__(self) -> None:
        if self.mode is not None:
            try:
                object.__setattr__(self, "mode", Mode(str(self.mode).lower()))
            except ValueError:
                msg = f"mode must be 'strict' or 'loose', got {self.mode!r}"
                raise ConfigurationError(msg) from None
        for name in ("deep_clone", "logging", "strict_mode"):
            _check_bool(name, getattr(self, name))
        if self.target_keys is not None:
            keys = _as_tuple("target_keys", self.target_keys)
            _check_strings("target_keys", keys)
            object.__setattr__(self, "target_keys", keys)
        for normalizer_type, default in TYPE_DEFAULTS.items():
            slot = getattr(self, normalizer_type.value)
            if slot is not None and type(slot) is not type(default):
                msg = f"{normalizer_type.value} must be a {type(default).__name__}, got {slot!r}"
                raise ConfigurationError(msg)

    @property
    def is_strict(self) -> bool:
        if self.mode is not None:
            return self.mode is Mode.STRICT
        return self.strict_mode

    def slot(self, normalizer_type: NormalizerType | str) -> TypeConfig | None:
        """Return the per-type settings, or ``None`` when disabled."""
        return getattr(self, NormalizerType(normalizer_type).value)

    def enabled_types(self) -> tuple[NormalizerType, ...]:
        return tuple(t for t in NormalizerType if self.slot(t) is not None)


def overlay(base: TypeConfig, patch: Mapping[str, Any] | TypeConfig) -> TypeConfig:
    """Merge ``patch`` onto ``base`` field by field.

    A mapping patch sets the fields it names. A ``TypeConfig`` patch sets
    only the fields that differ from its class defaults. Additive token
    lists are concatenated onto ``base`` rather than replaced.

    Raises:
        ConfigurationError: For unknown fields or a patch of the wrong type.
    """
    if isinstance(patch, TypeConfig):
        if type(patch) is not type(base):
            msg = f"cannot merge {type(patch).__name__} into {type(base).__name__}"
            raise ConfigurationError(msg)
        pristine = type(patch)()
        patch = {
            f.name: getattr(patch, f.name)
            for f in fields(patch)
            if getattr(patch, f.name) != getattr(pristine, f.name)
        }
    elif not isinstance(patch, Mapping):
        msg = f"expected a mapping of {type(base).__name__} fields, got {patch!r}"
        raise ConfigurationError(msg)

    known = {f.name for f in fields(base)}
    changes: dict[str, Any] = {}
    for raw_key, value in patch.items():
        name = canonical_key(raw_key)
        if name not in known:
            msg = f"unknown {type(base).__name__} option {raw_key!r}"
            raise ConfigurationError(msg)
        if name in ADDITIVE_FIELDS:
            value = (*getattr(base, name), *_as_tuple(name, value))
        changes[name] = value
    return replace(base, **changes)


def _merge_slot(default: TypeConfig, current: TypeConfig | None, value: Any, name: str) -> TypeConfig | None:
    if value is None or value is False:
        return None
    if value is True:
        return current if current is not None else default
    if isinstance(value, (Mapping, TypeConfig)):
        return overlay(current if current is not None else default, value)
    msg = f"{name} must be a boolean or a mapping, got {value!r}"
    raise ConfigurationError(msg)


def _with_defaults(
    defaults: Mapping[NormalizerType, TypeConfig], config: NormalizerConfig
) -> NormalizerConfig:
    # Slots of a hand-built config are laid over the built-ins so token lists
    # still only grow
    changes: dict[str, TypeConfig] = {}
    for normalizer_type in config.enabled_types():
        slot = config.slot(normalizer_type)
        merged = overlay(defaults[normalizer_type], slot)  # type: ignore[arg-type]
        if merged != slot:
            changes[normalizer_type.value] = merged
    return replace(config, **changes) if changes else config


def merge_config(
    defaults: Mapping[NormalizerType, TypeConfig],
    instance: NormalizerConfig,
    override: NormalizerConfig | Mapping[str, Any] | None,
) -> NormalizerConfig:
    """Fold ``override`` onto ``instance`` and return the effective config.

    Args:
        defaults: Built-in settings used when a type is first enabled.
        instance: The already-resolved configuration being overridden.
        override: A configuration mapping, or a resolved ``NormalizerConfig``
            which replaces ``instance`` outright. Its slots are still laid
            over ``defaults``, so built-in token lists are never dropped.

    Returns:
        A new ``NormalizerConfig``; neither input is modified.

    Raises:
        ConfigurationError: For unknown keys or malformed values.
    """
    if override is None:
        return instance
    if isinstance(override, NormalizerConfig):
        return _with_defaults(defaults, override)
    if not isinstance(override, Mapping):
        msg = f"configuration must be a mapping, got {override!r}"
        raise ConfigurationError(msg)

    changes: dict[str, Any] = {}
    for raw_key, value in override.items():
        name = canonical_key(raw_key)
        if name in _TYPE_NAMES:
            normalizer_type = NormalizerType(name)
            current = changes.get(name, instance.slot(normalizer_type))
            changes[name] = _merge_slot(defaults[normalizer_type], current, value, name)
        elif name in _GLOBAL_FIELDS:
            changes[name] = value
        else:
            msg = f"unknown configuration option {raw_key!r}"
            raise ConfigurationError(msg)
    return replace(instance, **changes)


def resolve_config(config: NormalizerConfig | Mapping[str, Any] | None = None) -> NormalizerConfig:
    """Resolve a user configuration against the built-in defaults.

    Types not mentioned in ``config`` stay disabled.

    Example::

        resolve_config({"mode": "strict", "date": True}).date   # DateConfig()
    """
    if isinstance(config, NormalizerConfig):
        return _with_defaults(TYPE_DEFAULTS, config)
    return merge_config(TYPE_DEFAULTS, NormalizerConfig(), config)
