"""
Common diagnostic structure for the front end.

Raised parse errors are converted into this shape by the driver-facing
adapter so callers that collect diagnostics never see a raw exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .span import SourceSpan


@dataclass
class Diagnostic:
	"""Represents a front-end diagnostic (error/warning/etc.)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	file: Optional[str] = None
	span: Optional[SourceSpan] = None
	line: Optional[int] = None
	column: Optional[int] = None
	notes: list[str] = field(default_factory=list)

	def location(self) -> str:
		"""Format as `file:line:column`, dropping the parts that are unknown."""
		parts = [self.file or "<input>"]
		if self.line is not None:
			parts.append(str(self.line))
			if self.column is not None:
				parts.append(str(self.column))
		return ":".join(parts)

	def __str__(self) -> str:
		prefix = f"{self.location()}: {self.severity}"
		if self.code:
			prefix += f"[{self.code}]"
		return f"{prefix}: {self.message}"


__all__ = ["Diagnostic"]
