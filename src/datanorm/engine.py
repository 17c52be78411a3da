"""NormalizationEngine: orchestrator that walks a data tree and applies the typed normalizers.

Architecture:
- Construction resolves the caller configuration against ``TYPE_DEFAULTS``
  and builds one normalizer per enabled type. Disabled types are never
  instantiated.
- ``normalize()`` folds an optional per-call override onto the instance
  configuration with ``merge_config`` (the instance is never mutated),
  deep-copies the input when ``deep_clone`` is on, and walks the copy.
- The walk mutates its working tree in place: lists element by element,
  dicts cleared and refilled after key renaming. With ``deep_clone=False``
  the caller's containers therefore keep their identity.
- Keys are renamed one object level at a time, before that level's values
  are visited. Keys matched by ``preserve`` also skip value normalization.
- String scalars are offered to the value normalizers in the fixed order
  date -> number -> boolean -> null; the first one that changes the value
  wins. NaN scalars only go to the null normalizer.
- Strict mode aborts the whole call on the first normalizer error, and on
  any string no enabled normalizer changes (unless the date normalizer
  returned it unchanged as already canonical). Loose mode logs failures and
  keeps the value; an unexpected error returns the original, pre-copy input.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from datanorm.config import (
    NORMALIZATION_ORDER,
    TYPE_DEFAULTS,
    NormalizerConfig,
    NormalizerType,
    merge_config,
    resolve_config,
)
from datanorm.errors import NormalizationError, StructuralError, UnrecognizedValueError
from datanorm.log import NormalizerLogger, get_logger
from datanorm.normalizers import NORMALIZER_CLASSES, KeyNormalizer
from datanorm.normalizers.null import is_nan

if TYPE_CHECKING:
    from datanorm.protocols import Normalizer

__all__ = ["NormalizationEngine"]


# Normalizers that can map a string to a string. An unchanged result from one
# of them means the value was already in its canonical form.
_STRING_OUTPUTS = frozenset({NormalizerType.DATE})


def _changed(original: Any, result: Any) -> bool:
    return type(original) is not type(result) or original != result


class _Walk:
    """State for a single top-level ``normalize`` call."""

    __slots__ = ("config", "explicit", "key_normalizer", "logger", "normalizers")

    def __init__(
        self,
        config: NormalizerConfig,
        normalizers: Mapping[NormalizerType, Normalizer],
        logger: NormalizerLogger,
        explicit: bool,
    ) -> None:
        self.config = config
        self.normalizers = normalizers
        self.logger = logger
        self.explicit = explicit
        key_normalizer = normalizers.get(NormalizerType.KEY)
        self.key_normalizer: KeyNormalizer | None = key_normalizer  # type: ignore[assignment]

    def value(self, value: Any, key: Any = None, at_root: bool = False, nested: bool = False) -> Any:
        if value is None:
            return None
        if isinstance(value, list):
            for index, item in enumerate(value):
                value[index] = self.value(item, key, nested=nested)
            return value
        if isinstance(value, tuple):
            return tuple(self.value(item, key, nested=nested) for item in value)
        if isinstance(value, MutableMapping):
            return self.mapping(value, nested)
        return self.scalar(value, key, at_root)

    def mapping(self, obj: MutableMapping[Any, Any], nested: bool) -> MutableMapping[Any, Any]:
        key_normalizer = self.key_normalizer
        if key_normalizer is not None:
            options = self.config.key
            if options is not None and (options.recursive or not nested):
                renamed = key_normalizer.rename_keys(obj, self.config)
                obj.clear()
                obj.update(renamed)

        for name in list(obj):
            if key_normalizer is not None and key_normalizer.is_preserved(name, self.config):
                continue
            obj[name] = self.value(obj[name], name, nested=True)
        return obj

    def scalar(self, value: Any, key: Any, at_root: bool) -> Any:
        if at_root and key is None and not self.explicit:
            return value
        target_keys = self.config.target_keys
        if target_keys and key not in target_keys:
            return value

        if isinstance(value, str):
            order = NORMALIZATION_ORDER
        elif is_nan(value):
            order = (NormalizerType.NULL,)
        else:
            return value

        strict = self.config.is_strict
        canonical = False
        failure: NormalizationError | None = None
        for normalizer_type in order:
            normalizer = self.normalizers.get(normalizer_type)
            if normalizer is None:
                continue
            if not normalizer.should_normalize(value, key, self.config):
                continue
            try:
                result = normalizer.normalize(value, key, self.config)
            except NormalizationError as error:
                if strict:
                    raise
                failure = failure or error
                continue
            if _changed(value, result):
                if key is not None:
                    self.logger.info(
                        "value normalized",
                        key=key,
                        normalizer=normalizer_type.value,
                        original=value,
                        normalized=result,
                    )
                return result
            canonical = canonical or normalizer_type in _STRING_OUTPUTS

        if strict and isinstance(value, str) and not canonical:
            msg = f"Strict mode: could not normalize value for key {key!r}: {value!r}"
            raise UnrecognizedValueError(msg, key=key, value=value)
        if failure is not None:
            self.logger.error("could not normalize value", key=key, value=value, error=str(failure))
        return value


class NormalizationEngine:
    """Reusable normalizer for nested dicts, lists and scalars.

    Example::

        engine = NormalizationEngine({"number": True, "boolean": True, "key": {"style": "camel"}})
        engine.normalize({"unit_price": "1,000.50", "in_stock": "yes"})
        # {"unitPrice": 1000.5, "inStock": True}

    Args:
        config: A configuration mapping, a resolved ``NormalizerConfig``, or
            None. Types not mentioned stay disabled.

    Raises:
        ConfigurationError: If ``config`` is malformed.
    """

    def __init__(self, config: NormalizerConfig | Mapping[str, Any] | None = None) -> None:
        self._config = resolve_config(config)
        self._normalizers: Mapping[NormalizerType, Normalizer] = MappingProxyType(
            {t: NORMALIZER_CLASSES[t](self._config) for t in self._config.enabled_types()}
        )

    def __repr__(self) -> str:
        return f"NormalizationEngine({self._config!r})"

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> NormalizerConfig:
        """The resolved instance configuration."""
        return self._config

    @property
    def normalizers(self) -> Mapping[NormalizerType, Normalizer]:
        """Normalizers built at construction, keyed by type."""
        return self._normalizers

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(self, data: Any, config: NormalizerConfig | Mapping[str, Any] | None = None) -> Any:
        """Normalize ``data`` and return the result.

        Args:
            data:   Any nesting of dicts, lists, tuples and scalars.
            config: Per-call override merged onto the instance configuration.
                A bare scalar at the root is only normalized when this is given.

        Returns:
            The normalized tree. With ``deep_clone`` on it shares no containers
            with ``data``; with it off, ``data`` itself is mutated and returned.
            In loose mode a failure returns ``data`` unchanged.

        Raises:
            ConfigurationError: If ``config`` is malformed, in any mode.
            NormalizationError: In strict mode, for the first value that
                cannot be normalized.
        """
        effective = merge_config(TYPE_DEFAULTS, self._config, config)
        logger = get_logger(effective.logging)
        walk = _Walk(effective, self._normalizers_for(effective), logger, config is not None)
        try:
            working = copy.deepcopy(data) if effective.deep_clone else data
            return walk.value(working, at_root=True)
        except NormalizationError as error:
            if effective.is_strict:
                raise
            logger.error("error during normalization", error=str(error))
            return data
        except Exception as error:
            if effective.is_strict:
                msg = f"normalization failed: {error}"
                raise StructuralError(msg, value=data) from error
            logger.error("error during normalization", error=str(error))
            return data

    def _normalizers_for(self, config: NormalizerConfig) -> Mapping[NormalizerType, Normalizer]:
        # Types enabled only for this call get a throwaway instance
        return {
            t: self._normalizers[t] if t in self._normalizers else NORMALIZER_CLASSES[t](config)
            for t in config.enabled_types()
        }
