# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from qkaledioscope import parse
from qkaledioscope.core.span import SourceSpan
from qkaledioscope.parser import ParseSyntaxError, parse_statement
from qkaledioscope.parser import ast as A

_S = SourceSpan(0, 0)


def _body(src: str) -> tuple[A.Stmt, ...]:
	prog = parse(f"def main() {{\n{src}\n}}")
	return prog.items[0].body


def test_var_decl_with_number() -> None:
	stmt = parse_statement("var x: number = 3.14;")
	assert stmt == A.VarDecl(span=_S, name="x", type=A.Type.NUMBER, init=A.NumberLiteral(span=_S, text="3.14"))
	assert stmt.init.value == 3.14


def test_var_decl_with_qubit() -> None:
	stmt = parse_statement("var q: qubit = %1;")
	assert stmt == A.VarDecl(span=_S, name="q", type=A.Type.QUBIT, init=A.QubitLiteral(span=_S, index=1))


def test_var_decl_type_is_not_checked_against_initializer() -> None:
	stmt = parse_statement("var b: bit = 2;")
	assert isinstance(stmt, A.VarDecl)
	assert stmt.type is A.Type.BIT
	assert stmt.init == A.NumberLiteral(span=_S, text="2")


def test_assignment() -> None:
	stmt = parse_statement("x = m(%0);")
	assert stmt == A.Assign(
		span=_S,
		target="x",
		value=A.Call(span=_S, callee="m", args=(A.QubitLiteral(span=_S, index=0),)),
	)


def test_call_statement() -> None:
	stmt = parse_statement("cnot(%0, %1);")
	assert isinstance(stmt, A.CallStmt)
	assert stmt.call.callee == "cnot"
	assert [arg.index for arg in stmt.call.args] == [0, 1]


def test_return_requires_expression() -> None:
	assert parse_statement("return 0;") == A.Return(span=_S, value=A.NumberLiteral(span=_S, text="0"))
	with pytest.raises(ParseSyntaxError):
		parse_statement("return;")


def test_return_with_parenthesized_value_is_not_a_call() -> None:
	assert parse_statement("return(x);") == A.Return(span=_S, value=A.Identifier(span=_S, name="x"))


def test_simple_statements_require_semicolon() -> None:
	for src in ("x = 1", "f()", "var x: bit = true", "return 1"):
		with pytest.raises(ParseSyntaxError):
			parse_statement(src)


def test_nested_control_flow() -> None:
	(stmt,) = _body("if true { while false { } } else { return 0; }")
	assert stmt == A.If(
		span=_S,
		condition=A.BoolLiteral(span=_S, value=True),
		then_body=(A.While(span=_S, condition=A.BoolLiteral(span=_S, value=False), body=()),),
		else_body=(A.Return(span=_S, value=A.NumberLiteral(span=_S, text="0")),),
	)


def test_if_without_else_differs_from_empty_else() -> None:
	(no_else,) = _body("if c { }")
	(empty_else,) = _body("if c { } else { }")
	assert no_else.else_body is None
	assert empty_else.else_body == ()
	assert no_else != empty_else


def test_while_with_call_condition_and_body() -> None:
	(stmt,) = _body("while m(%2) {\n  x(%2);\n  n = 1;\n}")
	assert isinstance(stmt, A.While)
	assert stmt.condition == A.Call(span=_S, callee="m", args=(A.QubitLiteral(span=_S, index=2),))
	assert [type(s).__name__ for s in stmt.body] == ["CallStmt", "Assign"]


def test_control_flow_takes_no_semicolon() -> None:
	with pytest.raises(ParseSyntaxError):
		_body("while true { };")


def test_statement_spans() -> None:
	src = "def f() {\n  var x: number = 1;\n  x = 2;\n}"
	decl, assign = parse(src).items[0].body
	assert decl.span.text(src) == "var x: number = 1"
	assert decl.span.line_column(src) == (2, 3)
	assert assign.span.text(src) == "x = 2"
	assert assign.value.span.text(src) == "2"


def test_if_span_covers_else_block() -> None:
	src = "def f() { if a { } else { b(); } }"
	(stmt,) = parse(src).items[0].body
	assert stmt.span.text(src) == "if a { } else { b(); }"
