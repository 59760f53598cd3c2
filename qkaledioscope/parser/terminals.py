# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical shapes of the atomic terminals.

The grammar compiles these as `pe` `Regex` terminals, which take `re` syntax.
`re` has no Unicode property classes, so the identifier classes (Unicode XID,
plus `_` as a start character) are read off `regex` once and spelled out as
explicit code point ranges.
"""

from __future__ import annotations

import functools
import sys
from typing import Tuple

import regex

RESERVED_WORDS = frozenset(
	{
		"def",
		"extern",
		"if",
		"else",
		"while",
		"var",
		"return",
		"true",
		"false",
	}
)

# `3`, `3.14`, `.5` and `3.` but never a bare `.`
NUMBER_PATTERN = r"[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+"
DIGITS_PATTERN = r"[0-9]+"
# spaces, tabs, newlines and `#` line comments
TRIVIA_PATTERN = r"(?:[ \t\r\n]|#[^\n]*)*"

_WORD_RE = regex.compile(r"[\p{XID_Start}_]\p{XID_Continue}*")
_DIGITS_RE = regex.compile(DIGITS_PATTERN)


def _ranges(prop_pattern: str, chars: str) -> str:
	return "".join(
		f"\\U{m.start():08x}-\\U{m.end() - 1:08x}" for m in regex.finditer(prop_pattern, chars)
	)


@functools.lru_cache(maxsize=None)
def _word_classes() -> Tuple[str, str]:
	"""`re` class bodies for identifier start and continue characters."""
	chars = "".join(map(chr, range(sys.maxunicode + 1)))
	return _ranges(r"[\p{XID_Start}_]+", chars), _ranges(r"\p{XID_Continue}+", chars)


def identifier_pattern() -> str:
	start, cont = _word_classes()
	return f"[{start}][{cont}]*"


def word_continue_pattern() -> str:
	return f"[{_word_classes()[1]}]"


def reserved_pattern() -> str:
	"""A reserved word that is the whole identifier-shaped run, so `iffy` is not `if`."""
	words = "|".join(sorted(RESERVED_WORDS, key=len, reverse=True))
	return f"(?:{words})(?!{word_continue_pattern()})"


def is_identifier(name: str) -> bool:
	return _WORD_RE.fullmatch(name) is not None and name not in RESERVED_WORDS


def number_value(text: str) -> float:
	return float(text)


def qubit_index(text: str) -> int:
	"""Register index of a `%<digits>` literal."""
	if not text.startswith("%") or _DIGITS_RE.fullmatch(text, 1) is None:
		raise ValueError(f"not a qubit literal: {text!r}")
	return int(text[1:])


__all__ = [
	"DIGITS_PATTERN",
	"NUMBER_PATTERN",
	"RESERVED_WORDS",
	"TRIVIA_PATTERN",
	"identifier_pattern",
	"is_identifier",
	"number_value",
	"qubit_index",
	"reserved_pattern",
	"word_continue_pattern",
]
