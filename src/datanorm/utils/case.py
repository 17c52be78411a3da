"""Case conversion and case detection for object keys.

Every conversion goes through the same word-splitting step:

1. Insert a boundary at each lowercase->uppercase transition
   (e.g. "firstName" -> "first Name").
2. Treat ``_``, ``-``, ``.`` and ``/`` as separators.
3. Split on whitespace and drop empty tokens.

The words are then re-joined according to the target ``CaseStyle``.
Unknown styles leave the input untouched.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from enum import StrEnum

__all__ = ["CaseStyle", "convert_case", "detect_case", "split_words"]


class CaseStyle(StrEnum):
    """Supported key case styles.

    ``PARAM`` is an alias of ``KEBAB``; ``NO`` is lowercase words joined by
    single spaces ("no case").
    """

    CAMEL = "camel"
    SNAKE = "snake"
    KEBAB = "kebab"
    PASCAL = "pascal"
    CONSTANT = "constant"
    DOT = "dot"
    PATH = "path"
    PASCAL_SNAKE = "pascal-snake"
    CAPITAL = "capital"
    HEADER = "header"
    NO = "no"
    PARAM = "param"


# Matches camelCase boundary: lowercase letter followed by uppercase letter
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")

# Matches every separator character that splits words
_SEP = re.compile(r"[_\-./]")

# Whole-string detection patterns, tested in this order
_DETECTORS: tuple[tuple[CaseStyle, re.Pattern[str]], ...] = (
    (CaseStyle.CAMEL, re.compile(r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)*$")),
    (CaseStyle.SNAKE, re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")),
    (CaseStyle.PASCAL, re.compile(r"^[A-Z][a-z0-9]*(?:[A-Z][a-z0-9]*)*$")),
    (CaseStyle.KEBAB, re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")),
    (CaseStyle.DOT, re.compile(r"^[a-z][a-z0-9]*(?:\.[a-z0-9]+)*$")),
    (CaseStyle.CONSTANT, re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$")),
)


def split_words(text: str) -> list[str]:
    """Split ``text`` into words on case boundaries and separators.

    Args:
        text: Any key-like string.

    Returns:
        The non-empty words, original casing preserved.
    """
    if not text:
        return []
    spaced = _LOWER_UPPER.sub(r"\1 \2", text)
    return _SEP.sub(" ", spaced).split()


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _camel(words: list[str]) -> str:
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(w) for w in words[1:])


def _joined(sep: str, fn: Callable[[str], str]) -> Callable[[list[str]], str]:
    def join(words: list[str]) -> str:
        return sep.join(fn(w) for w in words)

    return join


_CONVERTERS: dict[str, Callable[[list[str]], str]] = {
    CaseStyle.CAMEL: _camel,
    CaseStyle.SNAKE: _joined("_", str.lower),
    CaseStyle.KEBAB: _joined("-", str.lower),
    CaseStyle.PASCAL: _joined("", _capitalize),
    CaseStyle.CONSTANT: _joined("_", str.upper),
    CaseStyle.DOT: _joined(".", str.lower),
    CaseStyle.PATH: _joined("/", str.lower),
    CaseStyle.PASCAL_SNAKE: _joined("_", _capitalize),
    CaseStyle.CAPITAL: _joined(" ", _capitalize),
    CaseStyle.HEADER: _joined("-", _capitalize),
    CaseStyle.NO: _joined(" ", str.lower),
    CaseStyle.PARAM: _joined("-", str.lower),
}
_CONVERTERS["no-case"] = _CONVERTERS[CaseStyle.NO]


def convert_case(text: str, style: CaseStyle | str) -> str:
    """Convert ``text`` to the given case style.

    Args:
        text:  The string to convert.
        style: A ``CaseStyle`` member or its string value.

    Returns:
        The converted string. Empty input and unknown styles return ``text``
        unchanged.

    Example::

        convert_case("first_name", "pascal")   # "FirstName"
        convert_case("FirstName", "snake")     # "first_name"
    """
    if not text:
        return text
    converter = _CONVERTERS.get(style)
    if converter is None:
        return text
    return converter(split_words(text))


def detect_case(text: str) -> CaseStyle | None:
    """Return the first case style whose pattern matches the whole string.

    Patterns are tried in the order camel, snake, pascal, kebab, dot,
    constant, so a single lowercase word ("name") reports ``CAMEL``.

    Returns:
        The detected ``CaseStyle``, or ``None`` when undetermined (empty,
        mixed, or space-separated input).
    """
    if not text:
        return None
    for style, pattern in _DETECTORS:
        if pattern.fullmatch(text):
            return style
    return None
