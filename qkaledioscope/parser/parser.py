# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from lark import Token, Tree

from qkaledioscope.core.span import SourceSpan

from . import terminals
from .ast import (
	Assign,
	BoolLiteral,
	Call,
	CallStmt,
	Declaration,
	Definition,
	Expr,
	Identifier,
	If,
	NumberLiteral,
	Param,
	Program,
	Prototype,
	QubitLiteral,
	Return,
	Stmt,
	TopLevelItem,
	Type,
	VarDecl,
	While,
)
from .errors import BuilderInvariantError
from .grammar import EXPR_INPUT, PROGRAM, STATEMENT_INPUT, get_grammar
from .options import DEFAULT_OPTIONS, ParseOptions
from .peg import Node, assemble_program, match_fragment

logger = logging.getLogger(__name__)

_TYPE_RULES = {
	"number_type": Type.NUMBER,
	"qubit_type": Type.QUBIT,
	"bit_type": Type.BIT,
}


def parse_tree(source: str, options: Optional[ParseOptions] = None) -> Tree:
	"""Raw grammar match for a whole source file, as a `lark.Tree`."""
	return assemble_program(get_grammar(), source, root=PROGRAM, options=options or DEFAULT_OPTIONS)


def parse_program(source: str, options: Optional[ParseOptions] = None) -> Program:
	tree = parse_tree(source, options)
	program = _build_program(tree)
	logger.debug("built program with %d item(s)", len(program.items))
	return program


def parse_expression(source: str, options: Optional[ParseOptions] = None) -> Expr:
	"""Parse a single expression; the whole input must be consumed."""
	nodes = match_fragment(get_grammar(), source, EXPR_INPUT, options=options or DEFAULT_OPTIONS)
	if len(nodes) != 1:
		raise BuilderInvariantError(f"expression matched {len(nodes)} nodes", rule="expr")
	return _build_expr(nodes[0])


def parse_statement(source: str, options: Optional[ParseOptions] = None) -> Stmt:
	"""Parse a single statement (including its `;` where one is required)."""
	nodes = match_fragment(get_grammar(), source, STATEMENT_INPUT, options=options or DEFAULT_OPTIONS)
	if len(nodes) != 1:
		raise BuilderInvariantError(f"statement matched {len(nodes)} nodes", rule="statement")
	return _build_stmt(nodes[0])


def _build_program(tree: Tree) -> Program:
	items: List[TopLevelItem] = []
	for child in tree.children:
		kind = _name(child)
		if kind == "declaration":
			items.append(_build_declaration(child))
		elif kind == "definition":
			items.append(_build_definition(child))
		else:
			raise _invariant("expected declaration or definition", child)
	return Program(span=_loc(tree), items=tuple(items))


def _build_declaration(tree: Tree) -> Declaration:
	children = list(tree.children)
	if len(children) != 1:
		raise _invariant("declaration must hold exactly a prototype", tree)
	return Declaration(span=_loc(tree), prototype=_build_prototype(children[0]))


def _build_definition(tree: Tree) -> Definition:
	children = list(tree.children)
	if not children:
		raise _invariant("definition missing prototype", tree)
	prototype = _build_prototype(children[0])
	body = _build_statements(children[1:])
	return Definition(span=_loc(tree), prototype=prototype, body=body)


def _build_prototype(tree: Node) -> Prototype:
	_expect(tree, "prototype")
	children = list(tree.children)
	if len(children) not in (2, 3):
		raise _invariant("prototype expects name, arguments and optional return type", tree)
	name_token = _expect_token(children[0], "IDENT")
	args_node = _expect(children[1], "arg_decls")
	params = tuple(_build_param(arg) for arg in args_node.children)
	return_type = None
	if len(children) == 3:
		return_node = _expect(children[2], "return_decl")
		if len(return_node.children) != 1:
			raise _invariant("return_decl missing its type", return_node)
		return_type = _build_type(return_node.children[0])
	return Prototype(span=_loc(tree), name=name_token.value, params=params, return_type=return_type)


def _build_param(tree: Node) -> Param:
	_expect(tree, "arg_decl")
	if len(tree.children) != 2:
		raise _invariant("arg_decl expects a name and a type", tree)
	name_token = _expect_token(tree.children[0], "IDENT")
	return Param(span=_loc(tree), name=name_token.value, type=_build_type(tree.children[1]))


def _build_type(node: Node) -> Type:
	kind = _name(node)
	if not isinstance(node, Tree) or kind not in _TYPE_RULES:
		raise _invariant("expected a type", node)
	return _TYPE_RULES[kind]


def _build_statements(nodes: Sequence[Node]) -> tuple[Stmt, ...]:
	return tuple(_build_stmt(node) for node in nodes)


def _build_stmt(node: Node) -> Stmt:
	kind = _name(node)
	if kind == "variable_declaration":
		return _build_var_decl(node)
	if kind == "assignment":
		return _build_assign(node)
	if kind == "call_expr":
		return CallStmt(span=_loc(node), call=_build_call(node))
	if kind == "return_stmt":
		if len(node.children) != 1:
			raise _invariant("return requires exactly one expression", node)
		return Return(span=_loc(node), value=_build_expr(node.children[0]))
	if kind == "if_stmt":
		return _build_if(node)
	if kind == "while_stmt":
		return _build_while(node)
	raise _invariant("expected a statement", node)


def _build_var_decl(tree: Tree) -> VarDecl:
	if len(tree.children) != 3:
		raise _invariant("variable declaration expects name, type and initializer", tree)
	name_token, type_node, init_node = tree.children
	return VarDecl(
		span=_loc(tree),
		name=_expect_token(name_token, "IDENT").value,
		type=_build_type(type_node),
		init=_build_expr(init_node),
	)


def _build_assign(tree: Tree) -> Assign:
	if len(tree.children) != 2:
		raise _invariant("assignment expects a target and a value", tree)
	target, value = tree.children
	return Assign(span=_loc(tree), target=_expect_token(target, "IDENT").value, value=_build_expr(value))


def _build_if(tree: Tree) -> If:
	children = list(tree.children)
	if not 1 <= len(children) <= 2:
		raise _invariant("if statement expects an if block and optional else block", tree)
	if_block = _expect(children[0], "if_block")
	if not if_block.children:
		raise _invariant("if block missing its condition", if_block)
	condition = _build_expr(if_block.children[0])
	then_body = _build_statements(if_block.children[1:])
	else_body = None
	if len(children) == 2:
		else_block = _expect(children[1], "else_block")
		else_body = _build_statements(else_block.children)
	return If(span=_loc(tree), condition=condition, then_body=then_body, else_body=else_body)


def _build_while(tree: Tree) -> While:
	if not tree.children:
		raise _invariant("while statement missing its condition", tree)
	condition = _build_expr(tree.children[0])
	return While(span=_loc(tree), condition=condition, body=_build_statements(tree.children[1:]))


def _build_expr(node: Node) -> Expr:
	if isinstance(node, Token):
		loc = _loc_from_token(node)
		if node.type == "IDENT":
			return Identifier(span=loc, name=node.value)
		if node.type == "NUMBER":
			return NumberLiteral(span=loc, text=node.value)
		if node.type == "QUBIT":
			return QubitLiteral(span=loc, index=terminals.qubit_index(node.value))
		if node.type == "TRUE":
			return BoolLiteral(span=loc, value=True)
		if node.type == "FALSE":
			return BoolLiteral(span=loc, value=False)
		raise _invariant("unexpected token in expression", node)
	if _name(node) == "call_expr":
		return _build_call(node)
	raise _invariant("expected an expression", node)


def _build_call(tree: Tree) -> Call:
	if not tree.children:
		raise _invariant("call missing its callee", tree)
	callee = _expect_token(tree.children[0], "IDENT")
	args = tuple(_build_expr(arg) for arg in tree.children[1:])
	return Call(span=_loc(tree), callee=callee.value, args=args)


def _expect(node: Node, kind: str) -> Tree:
	if not isinstance(node, Tree) or _name(node) != kind:
		raise _invariant(f"expected {kind}", node)
	return node


def _expect_token(node: Node, kind: str) -> Token:
	if not isinstance(node, Token) or node.type != kind:
		raise _invariant(f"expected {kind} token", node)
	return node


def _invariant(message: str, node: Node) -> BuilderInvariantError:
	span = None
	if isinstance(node, Token) and node.start_pos is not None:
		span = _loc_from_token(node)
	elif isinstance(node, Tree) and not node.meta.empty:
		span = _loc(node)
	return BuilderInvariantError(message, rule=_name(node), span=span)


def _loc(tree: Tree) -> SourceSpan:
	return SourceSpan.from_loc(tree.meta)


def _loc_from_token(token: Token) -> SourceSpan:
	return SourceSpan.from_loc(token)


def _name(node: Node) -> str:
	if isinstance(node, Tree):
		data = node.data
		if isinstance(data, Token):
			return data.value
		return data
	if isinstance(node, Token):
		return node.type
	return str(node)


__all__ = ["parse_expression", "parse_program", "parse_statement", "parse_tree"]
