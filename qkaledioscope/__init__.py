# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
qkaledioscope: front end for a small quantum-flavoured Kaleidoscope dialect.

Stages:
  parser: PEG grammar engine, AST builder, canonical printer
  core: source spans and diagnostics shared with later stages
"""

from qkaledioscope.parser import ParseError, ParseOptions, ParseSyntaxError, parse

__version__ = "0.1.0"

__all__ = ["ParseError", "ParseOptions", "ParseSyntaxError", "parse"]
