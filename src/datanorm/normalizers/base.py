"""BaseNormalizer: the contract shared by every typed normalizer.

A normalizer holds three things:

- ``default_config``: the built-in ``TypeConfig`` for its type
- ``config``: defaults overlaid with the constructor configuration
- a global context (``NormalizerConfig``) carrying mode, logging and
  target keys from the constructor configuration

Every public method takes an optional per-call ``config``. It may be a
resolved ``NormalizerConfig`` (as passed by the engine, whose slot for this
type is used as is), a ``TypeConfig`` or a mapping. Mappings may be
type-specific (``{"allow_float": False}``) or global
(``{"mode": "strict", "number": {"allow_float": False}}``); top-level type
fields and the nested slice are both applied, nested last.

Subclasses implement ``_accepts`` (eligibility for a non-null value) and
``_convert`` (the transformation). ``_convert`` signals failure by raising
a ``NormalizationError``; ``normalize`` routes it through ``handle_error``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields
from typing import Any, ClassVar, NamedTuple

from datanorm.config import (
    TYPE_DEFAULTS,
    NormalizerConfig,
    NormalizerType,
    TypeConfig,
    canonical_key,
    merge_config,
    overlay,
    resolve_config,
)
from datanorm.errors import ConfigurationError, NormalizationError
from datanorm.log import get_logger

__all__ = ["BaseNormalizer", "EffectiveConfig"]

_CONTEXT_FIELDS = frozenset({"mode", "deep_clone", "logging", "strict_mode", "target_keys"})
_TYPE_NAMES = frozenset(t.value for t in NormalizerType)


class EffectiveConfig(NamedTuple):
    """Per-type options paired with the global context they run under."""

    options: TypeConfig
    context: NormalizerConfig


class BaseNormalizer:
    """Shared configuration handling, gating and error policy.

    Args:
        config: Constructor configuration; see the module docstring for the
            accepted shapes. ``None`` uses the type defaults.

    Raises:
        ConfigurationError: If ``config`` contains unknown or malformed options.
    """

    type: ClassVar[NormalizerType]

    def __init__(self, config: Any = None) -> None:
        self.default_config: TypeConfig = TYPE_DEFAULTS[self.type]
        if isinstance(config, NormalizerConfig):
            config = resolve_config(config)
        resolved = self._layer(config, self.default_config, NormalizerConfig())
        self.config: TypeConfig = resolved.options
        self._context = resolved.context

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def context(self) -> NormalizerConfig:
        """Global settings captured at construction."""
        return self._context

    def effective_config(self, config: Any = None) -> EffectiveConfig:
        """Return the options and context in force for a call with ``config``."""
        return self._layer(config, self.config, self._context)

    def _layer(self, config: Any, options: TypeConfig, context: NormalizerConfig) -> EffectiveConfig:
        if config is None:
            return EffectiveConfig(options, context)
        if isinstance(config, NormalizerConfig):
            slot = config.slot(self.type)
            return EffectiveConfig(slot if slot is not None else options, config)
        if isinstance(config, TypeConfig):
            return EffectiveConfig(overlay(options, config), context)
        if not isinstance(config, Mapping):
            msg = f"{self.type.value} normalizer configuration must be a mapping, got {config!r}"
            raise ConfigurationError(msg)

        known = {f.name for f in fields(options)}
        global_part: dict[str, Any] = {}
        type_part: dict[str, Any] = {}
        nested: Any = None
        for raw_key, value in config.items():
            name = canonical_key(raw_key)
            if name == self.type.value:
                nested = value
            elif name in _TYPE_NAMES:
                continue
            elif name in _CONTEXT_FIELDS:
                global_part[name] = value
            elif name in known:
                type_part[name] = value
            else:
                msg = f"unknown {self.type.value} normalizer option {raw_key!r}"
                raise ConfigurationError(msg)

        if type_part:
            options = overlay(options, type_part)
        if isinstance(nested, (Mapping, TypeConfig)):
            options = overlay(options, nested)
        elif nested is not None and not isinstance(nested, bool):
            msg = f"{self.type.value} must be a boolean or a mapping, got {nested!r}"
            raise ConfigurationError(msg)
        if global_part:
            context = merge_config(TYPE_DEFAULTS, context, global_part)
        return EffectiveConfig(options, context)

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def is_strict_mode(self, config: Any = None) -> bool:
        """True when the per-type ``strict_mode`` is set or the global configuration is strict.

        A per-type ``strict_mode=False`` does not relax a strict global ``mode``.
        """
        return self._is_strict(self.effective_config(config))

    def is_target_key(self, key: str | None = None, config: Any = None) -> bool:
        """True if no target keys are configured, ``key`` is None, or ``key`` is listed."""
        return self._is_target(key, self.effective_config(config))

    def should_normalize(self, value: Any, key: str | None = None, config: Any = None) -> bool:
        """Eligibility gate: would ``normalize`` attempt to convert ``value``?"""
        return self._should(value, key, self.effective_config(config))

    def normalize(self, value: Any, key: str | None = None, config: Any = None) -> Any:
        """Return the canonical form of ``value``, or ``value`` itself if ineligible.

        Raises:
            NormalizationError: In strict mode, when an eligible value cannot
                be converted.
        """
        effective = self.effective_config(config)
        if not self._should(value, key, effective):
            return value
        try:
            return self._convert(value, effective)
        except NormalizationError as error:
            return self._recover(error, value, key, effective)

    def handle_error(self, error: Exception, value: Any, key: str | None = None, config: Any = None) -> Any:
        """Re-raise ``error`` in strict mode; otherwise log it and return ``value``."""
        return self._recover(error, value, key, self.effective_config(config))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_strict(self, effective: EffectiveConfig) -> bool:
        return effective.options.strict_mode is True or effective.context.is_strict

    def _is_target(self, key: str | None, effective: EffectiveConfig) -> bool:
        if key is None:
            return True
        target_keys = effective.options.target_keys or effective.context.target_keys
        if not target_keys:
            return True
        return key in target_keys

    def _should(self, value: Any, key: str | None, effective: EffectiveConfig) -> bool:
        if value is None or not self._is_target(key, effective):
            return False
        return self._accepts(value, effective)

    def _recover(self, error: Exception, value: Any, key: str | None, effective: EffectiveConfig) -> Any:
        if self._is_strict(effective):
            if isinstance(error, NormalizationError) and error.key is None:
                error.key = key
            raise error
        get_logger(effective.context.logging).error(
            f"{self.type.value} normalizer failed",
            normalizer=self.type.value,
            key=key,
            value=value,
            error=str(error),
        )
        return value

    def _accepts(self, value: Any, effective: EffectiveConfig) -> bool:
        raise NotImplementedError

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        raise NotImplementedError
