from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class ParseOptions:
	# Deepest allowed nesting of `(` and `{` brackets; exceeded -> NestingTooDeepError.
	max_depth: int = DEFAULT_MAX_DEPTH
	# Log every rule match and every recorded expectation at DEBUG level.
	trace: bool = False

	def __post_init__(self) -> None:
		if self.max_depth < 1:
			raise ValueError("max_depth must be positive")


DEFAULT_OPTIONS = ParseOptions()

__all__ = ["DEFAULT_MAX_DEPTH", "DEFAULT_OPTIONS", "ParseOptions"]
