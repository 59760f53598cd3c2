# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging

import pytest

from qkaledioscope import ParseOptions
from qkaledioscope.parser import BuilderInvariantError, parse, parse_to_diagnostics
from qkaledioscope.parser import parser as parser_mod


def test_success_has_no_diagnostics() -> None:
	program, diags = parse_to_diagnostics("extern f();", file="ok.qk")
	assert diags == []
	assert program == parse("extern f();")


def test_syntax_error_becomes_diagnostic() -> None:
	program, diags = parse_to_diagnostics("extern f(", file="bad.qk")
	assert program is None
	(diag,) = diags
	assert diag.code == "E-PARSE"
	assert diag.phase == "parser"
	assert diag.severity == "error"
	assert (diag.line, diag.column) == (1, 10)
	assert diag.span is not None and diag.span.start == 9
	assert str(diag).startswith("bad.qk:1:10: error[E-PARSE]: ")
	assert diag.notes and diag.notes[0].startswith("expected: ")


def test_depth_error_has_its_own_code() -> None:
	src = "def f() { x = " + "(" * 200 + "1" + ")" * 200 + "; }"
	program, diags = parse_to_diagnostics(src)
	assert program is None
	assert diags[0].code == "E-PARSE-DEPTH"
	assert str(diags[0]).startswith("<input>:1:")


def test_builder_defects_propagate(monkeypatch: pytest.MonkeyPatch) -> None:
	def boom(tree):
		raise BuilderInvariantError("synthetic defect", rule="program")

	monkeypatch.setattr(parser_mod, "_build_program", boom)
	with pytest.raises(BuilderInvariantError):
		parse_to_diagnostics("extern f();")


def test_trace_logs_rule_calls(caplog: pytest.LogCaptureFixture) -> None:
	caplog.set_level(logging.DEBUG, logger="qkaledioscope.parser.peg")
	parse("def f() { g(); }", ParseOptions(trace=True))
	messages = [rec.getMessage() for rec in caplog.records if rec.name == "qkaledioscope.parser.peg"]
	assert any("call_expr matched" in msg for msg in messages)


def test_trace_is_off_by_default(caplog: pytest.LogCaptureFixture) -> None:
	caplog.set_level(logging.DEBUG, logger="qkaledioscope.parser.peg")
	parse("def f() { g(); }")
	messages = [rec.getMessage() for rec in caplog.records if rec.name == "qkaledioscope.parser.peg"]
	assert not any("call_expr" in msg for msg in messages)
