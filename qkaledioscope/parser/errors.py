# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Errors raised by the QKaledioscope front end.

`ParseSyntaxError` is the only user-facing error: the source does not conform
to the grammar. It subclasses lark's `UnexpectedInput` so callers that already
handle lark parse failures (and lark's `get_context` excerpt) keep working.

`BuilderInvariantError` means a successful grammar match did not have the
shape the AST builder expects. That is a bug in this package, never a problem
with the user's source, and the driver adapter lets it propagate.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from lark.exceptions import LarkError, UnexpectedInput

from qkaledioscope.core.span import SourceSpan


class ParseError(LarkError):
	"""Base class for everything the front end raises."""


class ParseSyntaxError(ParseError, UnexpectedInput):
	"""
	The source text does not match the grammar.

	`pos_in_stream` is the furthest offset any alternative reached, and
	`expected` names the literals/terminals that were tried there.
	"""

	def __init__(
		self,
		source: str,
		pos: int,
		expected: Iterable[str],
		*,
		line: int,
		column: int,
		message: Optional[str] = None,
	) -> None:
		self.pos_in_stream = pos
		self.line = line
		self.column = column
		self.expected: Tuple[str, ...] = tuple(sorted(set(expected)))
		self.span = SourceSpan.point(pos)
		self.found = source[pos] if pos < len(source) else None
		self.message = message or self._describe()
		self._context = self.get_context(source)
		super().__init__(self.message)

	def _describe(self) -> str:
		found = "end of input" if self.found is None else repr(self.found)
		if not self.expected:
			return f"unexpected {found}"
		if len(self.expected) == 1:
			return f"expected {self.expected[0]}, found {found}"
		return f"expected one of {', '.join(self.expected)}; found {found}"

	def __str__(self) -> str:
		return f"syntax error at line {self.line}, column {self.column}: {self.message}\n\n{self._context}"


class NestingTooDeepError(ParseSyntaxError):
	"""Bracket nesting exceeded `ParseOptions.max_depth`."""


class BuilderInvariantError(ParseError):
	"""A grammar match had a shape the AST builder does not understand."""

	def __init__(self, message: str, *, rule: str | None = None, span: SourceSpan | None = None) -> None:
		detail = message
		if rule is not None:
			detail += f" (rule {rule!r}"
			if span is not None:
				detail += f" at [{span.start}, {span.end})"
			detail += ")"
		super().__init__(detail)
		self.rule = rule
		self.span = span


__all__ = [
	"BuilderInvariantError",
	"NestingTooDeepError",
	"ParseError",
	"ParseSyntaxError",
]
