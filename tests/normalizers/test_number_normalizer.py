"""Tests for NumberNormalizer parsing, truncation and error policy."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from datanorm.errors import ParseError
from datanorm.normalizers import NumberNormalizer


@pytest.fixture
def normalizer() -> NumberNormalizer:
    return NumberNormalizer()


class TestParsing:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1,000.50", 1000.5),
            ("-1,234", -1234),
            (" 3.14 ", 3.14),
            ("1 000", 1000),
            ("0", 0),
        ],
    )
    def test_converts(self, normalizer: NumberNormalizer, text: str, expected: float) -> None:
        assert normalizer.normalize(text) == pytest.approx(expected)

    def test_integer_text_gives_int(self, normalizer: NumberNormalizer) -> None:
        result = normalizer.normalize("42")
        assert result == 42
        assert isinstance(result, int)

    def test_decimal_text_gives_float(self, normalizer: NumberNormalizer) -> None:
        assert isinstance(normalizer.normalize("42.0"), float)

    @pytest.mark.parametrize(("text", "expected"), [("3.99", 3), ("-3.99", -3), ("1,234.56", 1234)])
    def test_allow_float_false_truncates(self, text: str, expected: int) -> None:
        assert NumberNormalizer({"allow_float": False}).normalize(text) == expected


class TestEligibility:
    @pytest.mark.parametrize("value", [42, 4.2, True, None, "abc", "", "   ", "2023-01-01"])
    def test_ineligible(self, normalizer: NumberNormalizer, value: object) -> None:
        assert normalizer.should_normalize(value) is False
        assert normalizer.normalize(value) is value

    def test_number_ish_text_is_eligible(self, normalizer: NumberNormalizer) -> None:
        assert normalizer.should_normalize("1.2.3") is True

    def test_strict_accepts_any_string(self) -> None:
        assert NumberNormalizer({"mode": "strict"}).should_normalize("abc") is True


class TestErrors:
    def test_loose_unparseable_returns_original(self, normalizer: NumberNormalizer) -> None:
        assert normalizer.normalize("1.2.3") == "1.2.3"

    @pytest.mark.parametrize("text", ["1.2.3", "abc", ""])
    def test_strict_raises(self, text: str) -> None:
        with pytest.raises(ParseError):
            NumberNormalizer({"mode": "strict"}).normalize(text)

    def test_loose_failure_is_logged_when_enabled(self) -> None:
        with capture_logs() as logs:
            NumberNormalizer({"logging": True}).normalize("1.2.3", key="price")
        assert len(logs) == 1
        entry = logs[0]
        assert entry["log_level"] == "error"
        assert entry["event"].startswith("[datanorm]")
        assert entry["library"] == "datanorm"
        assert entry["normalizer"] == "number"
        assert entry["key"] == "price"
        assert entry["value"] == "1.2.3"

    def test_no_logs_when_disabled(self, normalizer: NumberNormalizer) -> None:
        with capture_logs() as logs:
            normalizer.normalize("1.2.3")
        assert logs == []
