# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
QKaledioscope front end: source text -> AST.

`parse` is the entry point consumers use; it raises on the first syntax
error. `parse_to_diagnostics` is the driver-facing variant that reports
syntax errors as `Diagnostic` records instead.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from qkaledioscope.core.diagnostics import Diagnostic

from . import ast
from .errors import BuilderInvariantError, NestingTooDeepError, ParseError, ParseSyntaxError
from .options import DEFAULT_OPTIONS, ParseOptions
from .parser import parse_expression, parse_program, parse_statement, parse_tree
from .printer import dump_parse_tree, parse_tree_to_json, render_program

logger = logging.getLogger(__name__)


def parse(source: str, options: Optional[ParseOptions] = None) -> ast.Program:
	"""Parse a whole source unit. All-or-nothing: no partial trees on failure."""
	return parse_program(source, options)


def parse_to_diagnostics(
	source: str,
	*,
	file: Optional[str] = None,
	options: Optional[ParseOptions] = None,
) -> Tuple[Optional[ast.Program], List[Diagnostic]]:
	"""
	Parse `source`, returning `(program, [])` or `(None, [diagnostic])`.

	Only user-facing syntax errors become diagnostics. A
	`BuilderInvariantError` is a defect in this package and propagates.
	"""
	try:
		return parse_program(source, options), []
	except ParseSyntaxError as err:
		logger.debug("syntax error in %s at offset %d", file or "<input>", err.pos_in_stream)
		code = "E-PARSE-DEPTH" if isinstance(err, NestingTooDeepError) else "E-PARSE"
		notes = [f"expected: {', '.join(err.expected)}"] if err.expected else []
		diag = Diagnostic(
			message=err.message,
			code=code,
			phase="parser",
			file=file,
			span=err.span,
			line=err.line,
			column=err.column,
			notes=notes,
		)
		return None, [diag]


__all__ = [
	"BuilderInvariantError",
	"DEFAULT_OPTIONS",
	"NestingTooDeepError",
	"ParseError",
	"ParseOptions",
	"ParseSyntaxError",
	"ast",
	"dump_parse_tree",
	"parse",
	"parse_expression",
	"parse_statement",
	"parse_to_diagnostics",
	"parse_tree",
	"parse_tree_to_json",
	"render_program",
]
