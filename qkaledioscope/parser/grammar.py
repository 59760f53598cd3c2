# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
QKaledioscope grammar.

    program      := (declaration | definition)*
    declaration  := "extern" prototype ";"
    definition   := "def" prototype "{" statement* "}"
    prototype    := IDENT "(" (IDENT ":" type ","?)* ")" ("->" type)?
    type         := "number" | "qubit" | "bit"
    statement    := (variable_declaration | assignment | call_expr | return_stmt) ";"
                  | if_stmt | while_stmt
    expr         := "(" expr ")" | call_expr | literal | IDENT
    call_expr    := IDENT "(" (expr ","?)* ")"
    literal      := NUMBER | QUBIT | "true" | "false"

Whitespace and `#` line comments may appear between any two tokens; `WS`
below marks every place they are allowed.

Rule names double as the `Tree.data` / `Token.type` values the AST builder
dispatches on.
"""

from __future__ import annotations

from typing import Any, Optional

from pe.operators import Choice as Ch
from pe.operators import Dot as DOT
from pe.operators import Literal as Lit
from pe.operators import Nonterminal as NT
from pe.operators import Not
from pe.operators import Optional as Opt
from pe.operators import Regex
from pe.operators import Sequence as Seq
from pe.operators import Star

from . import terminals
from .peg import END_OF_INPUT, RuleTable

PROGRAM = "program"
EXPR_INPUT = "expr_input"
STATEMENT_INPUT = "statement_input"

WS = NT("TRIVIA")

_grammar: Optional[RuleTable] = None


def _build_grammar() -> RuleTable:
	g = RuleTable()

	def kw(word: str) -> Any:
		return g.expect(f'"{word}"', Seq(Lit(word), Not(NT("WORD_CONTINUE"))))

	lit = g.literal
	end = g.expect(END_OF_INPUT, Not(DOT()))

	# -- trivia and word boundaries (never visible) ---------------------------
	g.rule("TRIVIA", Regex(terminals.TRIVIA_PATTERN), silent=True)
	g.rule("WORD_CONTINUE", Regex(terminals.word_continue_pattern()), silent=True)
	g.rule("RESERVED", Regex(terminals.reserved_pattern()), silent=True)

	# -- terminals ------------------------------------------------------------
	g.rule(
		"IDENT",
		g.expect("identifier", Seq(Not(NT("RESERVED")), Regex(terminals.identifier_pattern()))),
		atomic=True,
	)
	g.rule("NUMBER", g.expect("number", Regex(terminals.NUMBER_PATTERN)), atomic=True)
	g.rule("QUBIT", Seq(lit("%"), g.expect("digit", Regex(terminals.DIGITS_PATTERN))), atomic=True)
	g.rule("TRUE", kw("true"), atomic=True)
	g.rule("FALSE", kw("false"), atomic=True)

	# -- expressions ----------------------------------------------------------
	g.rule(
		"expr",
		Ch(
			Seq(lit("("), WS, NT("expr"), WS, lit(")")),
			# before IDENT: both start with an identifier
			NT("call_expr"),
			NT("literal"),
			NT("IDENT"),
		),
		silent=True,
	)
	g.rule(
		"call_expr",
		Seq(
			NT("IDENT"),
			WS,
			lit("("),
			Star(Seq(WS, NT("expr"), Opt(Seq(WS, lit(","))))),
			WS,
			lit(")"),
		),
	)
	g.rule("literal", Ch(NT("NUMBER"), NT("QUBIT"), NT("TRUE"), NT("FALSE")), silent=True)

	# -- types ----------------------------------------------------------------
	g.rule("type", Ch(NT("number_type"), NT("qubit_type"), NT("bit_type")), silent=True)
	g.rule("number_type", kw("number"))
	g.rule("qubit_type", kw("qubit"))
	g.rule("bit_type", kw("bit"))

	# -- statements -----------------------------------------------------------
	g.rule(
		"statement",
		Ch(
			Seq(
				Ch(NT("variable_declaration"), NT("assignment"), NT("call_expr"), NT("return_stmt")),
				WS,
				lit(";"),
			),
			NT("if_stmt"),
			NT("while_stmt"),
		),
		silent=True,
	)
	g.rule(
		"variable_declaration",
		Seq(kw("var"), WS, NT("IDENT"), WS, lit(":"), WS, NT("type"), WS, lit("="), WS, NT("expr")),
	)
	g.rule("assignment", Seq(NT("IDENT"), WS, lit("="), WS, NT("expr")))
	g.rule("return_stmt", Seq(kw("return"), WS, NT("expr")))
	g.rule("if_stmt", Seq(NT("if_block"), Opt(Seq(WS, NT("else_block")))))
	g.rule("if_block", Seq(kw("if"), WS, NT("expr"), WS, NT("block")))
	g.rule("else_block", Seq(kw("else"), WS, NT("block")))
	g.rule("while_stmt", Seq(kw("while"), WS, NT("expr"), WS, NT("block")))
	g.rule("block", Seq(lit("{"), Star(Seq(WS, NT("statement"))), WS, lit("}")), silent=True)

	# -- top level ------------------------------------------------------------
	g.rule(
		"prototype",
		Seq(
			NT("IDENT"),
			WS,
			lit("("),
			WS,
			NT("arg_decls"),
			WS,
			lit(")"),
			Opt(Seq(WS, NT("return_decl"))),
		),
	)
	g.rule("arg_decls", Opt(Seq(NT("arg_decl"), Star(Seq(WS, NT("arg_decl"))))))
	g.rule("arg_decl", Seq(NT("IDENT"), WS, lit(":"), WS, NT("type"), Opt(Seq(WS, lit(",")))))
	g.rule("return_decl", Seq(lit("->"), WS, NT("type")))
	g.rule("declaration", Seq(kw("extern"), WS, NT("prototype"), WS, lit(";")))
	g.rule("definition", Seq(kw("def"), WS, NT("prototype"), WS, NT("block")))
	g.rule("file_element", Ch(NT("declaration"), NT("definition")), silent=True)
	g.rule(PROGRAM, Seq(WS, Star(Seq(NT("file_element"), WS)), Not(DOT())))

	# -- fragment entry points -------------------------------------------------
	g.entry(EXPR_INPUT, Seq(WS, NT("expr"), WS, end))
	g.entry(STATEMENT_INPUT, Seq(WS, NT("statement"), WS, end))
	return g


def get_grammar() -> RuleTable:
	"""The grammar's rule table, built on first use."""
	global _grammar
	if _grammar is None:
		_grammar = _build_grammar()
	return _grammar


__all__ = ["EXPR_INPUT", "PROGRAM", "STATEMENT_INPUT", "get_grammar"]
