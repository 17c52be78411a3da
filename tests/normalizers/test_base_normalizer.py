"""Tests for the shared normalizer contract.

Exercised through the concrete normalizers, since BaseNormalizer itself
implements no conversion.
"""

from __future__ import annotations

import pytest

from datanorm.config import Mode, NormalizerConfig, NumberConfig, resolve_config
from datanorm.errors import ConfigurationError, ParseError
from datanorm.normalizers import (
    BooleanNormalizer,
    DateNormalizer,
    KeyNormalizer,
    NullNormalizer,
    NumberNormalizer,
)
from datanorm.protocols import Normalizer

ALL_NORMALIZERS = [DateNormalizer, NumberNormalizer, BooleanNormalizer, NullNormalizer, KeyNormalizer]


class TestProtocolConformance:
    @pytest.mark.parametrize("cls", ALL_NORMALIZERS)
    def test_isinstance_normalizer(self, cls: type) -> None:
        assert isinstance(cls(), Normalizer)

    def test_plain_object_does_not_conform(self) -> None:
        assert not isinstance(object(), Normalizer)


class TestConstruction:
    def test_defaults(self) -> None:
        normalizer = NumberNormalizer()
        assert normalizer.default_config == NumberConfig()
        assert normalizer.config == NumberConfig()

    def test_from_type_config(self) -> None:
        normalizer = NumberNormalizer(NumberConfig(allow_float=False))
        assert normalizer.config.allow_float is False  # type: ignore[attr-defined]

    def test_from_type_mapping_camel_case(self) -> None:
        normalizer = NumberNormalizer({"allowFloat": False})
        assert normalizer.config.allow_float is False  # type: ignore[attr-defined]

    def test_from_global_mapping(self) -> None:
        normalizer = NumberNormalizer({"mode": "strict", "number": {"allow_float": False}, "date": True})
        assert normalizer.config.allow_float is False  # type: ignore[attr-defined]
        assert normalizer.is_strict_mode() is True

    def test_from_resolved_config(self) -> None:
        config = resolve_config({"mode": "strict", "number": {"allow_float": False}})
        normalizer = NumberNormalizer(config)
        assert normalizer.config.allow_float is False  # type: ignore[attr-defined]
        assert normalizer.context is config
        assert normalizer.is_strict_mode() is True

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError):
            NumberNormalizer({"bogus": 1})

    def test_non_mapping(self) -> None:
        with pytest.raises(ConfigurationError):
            NumberNormalizer(42)

    def test_repr_names_class(self) -> None:
        assert repr(NumberNormalizer()).startswith("NumberNormalizer(")


class TestIsStrictMode:
    def test_default_is_loose(self) -> None:
        assert NumberNormalizer().is_strict_mode() is False

    def test_global_mode(self) -> None:
        assert NumberNormalizer({"mode": "strict"}).is_strict_mode() is True

    def test_secondary_strict_flag(self) -> None:
        assert NumberNormalizer({"strict_mode": True}).is_strict_mode() is True

    def test_explicit_mode_beats_secondary_flag(self) -> None:
        assert NumberNormalizer({"mode": "loose", "strict_mode": True}).is_strict_mode() is False

    def test_per_type_flag_cannot_relax_global_mode(self) -> None:
        normalizer = NumberNormalizer()
        relaxed = NormalizerConfig(mode=Mode.STRICT, number=NumberConfig(strict_mode=False))
        inherited = NormalizerConfig(mode=Mode.STRICT, number=NumberConfig())
        assert normalizer.is_strict_mode(relaxed) is True
        assert normalizer.is_strict_mode(inherited) is True

    def test_per_type_flag_tightens_loose_mode(self) -> None:
        config = NormalizerConfig(mode=Mode.LOOSE, number=NumberConfig(strict_mode=True))
        assert NumberNormalizer().is_strict_mode(config) is True

    def test_call_config_does_not_stick(self) -> None:
        normalizer = NumberNormalizer()
        assert normalizer.is_strict_mode({"mode": "strict"}) is True
        assert normalizer.is_strict_mode() is False


class TestIsTargetKey:
    def test_no_targets(self) -> None:
        assert NumberNormalizer().is_target_key("anything") is True

    def test_missing_key_is_target(self) -> None:
        assert NumberNormalizer({"target_keys": ["price"]}).is_target_key() is True

    def test_listed_and_unlisted(self) -> None:
        normalizer = NumberNormalizer({"target_keys": ["price"]})
        assert normalizer.is_target_key("price") is True
        assert normalizer.is_target_key("qty") is False

    def test_per_type_targets_take_precedence(self) -> None:
        normalizer = NumberNormalizer({"target_keys": ["price"], "number": {"target_keys": ["qty"]}})
        assert normalizer.is_target_key("qty") is True
        assert normalizer.is_target_key("price") is False

    def test_empty_per_type_targets_defer_to_global(self) -> None:
        normalizer = NumberNormalizer({"target_keys": ["price"], "number": {"target_keys": []}})
        assert normalizer.is_target_key("price") is True
        assert normalizer.is_target_key("qty") is False

    def test_gates_should_normalize(self) -> None:
        normalizer = NumberNormalizer({"target_keys": ["price"]})
        assert normalizer.should_normalize("10", "qty") is False
        assert normalizer.normalize("10", "qty") == "10"
        assert normalizer.normalize("10", "price") == 10


class TestHandleError:
    def test_loose_returns_value(self) -> None:
        normalizer = NumberNormalizer()
        error = ParseError("boom")
        assert normalizer.handle_error(error, "raw", "key") == "raw"

    def test_strict_reraises_same_error(self) -> None:
        normalizer = NumberNormalizer({"mode": "strict"})
        error = ParseError("boom")
        with pytest.raises(ParseError) as excinfo:
            normalizer.handle_error(error, "raw")
        assert excinfo.value is error

    def test_none_is_never_eligible(self) -> None:
        assert NumberNormalizer().should_normalize(None) is False
        assert NumberNormalizer({"mode": "strict"}).normalize(None) is None
