# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span representation shared by the parser, the AST and diagnostics.

A span is a half-open `[start, end)` range of character offsets into the
original source text. Line/column information is derived on demand from the
source rather than stored, so spans stay cheap to create and compare.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, List, Tuple


@dataclass(frozen=True)
class SourceSpan:
	"""Half-open offset range into the source text."""

	start: int
	end: int

	def __post_init__(self) -> None:
		if self.start < 0 or self.end < self.start:
			raise ValueError(f"invalid span [{self.start}, {self.end})")

	@classmethod
	def point(cls, offset: int) -> "SourceSpan":
		return cls(offset, offset)

	@classmethod
	def from_loc(cls, loc: Any) -> "SourceSpan":
		"""
		Construct a span from a lark `Tree.meta` or `Token`.

		Both carry `start_pos`/`end_pos` when produced by our grammar engine.
		"""
		if isinstance(loc, cls):
			return loc
		start = getattr(loc, "start_pos", None)
		end = getattr(loc, "end_pos", None)
		if start is None or end is None:
			raise ValueError(f"location object {loc!r} carries no offsets")
		return cls(start, end)

	def __len__(self) -> int:
		return self.end - self.start

	def text(self, source: str) -> str:
		return source[self.start : self.end]

	def line_column(self, source: str) -> Tuple[int, int]:
		"""1-based (line, column) of the span start."""
		return LineIndex(source).line_column(self.start)


class LineIndex:
	"""Offset -> (line, column) lookup over a fixed source text."""

	def __init__(self, source: str) -> None:
		self._line_starts: List[int] = [0]
		for idx, ch in enumerate(source):
			if ch == "\n":
				self._line_starts.append(idx + 1)

	def line_column(self, offset: int) -> Tuple[int, int]:
		line = bisect_right(self._line_starts, offset)
		return line, offset - self._line_starts[line - 1] + 1


__all__ = ["LineIndex", "SourceSpan"]
