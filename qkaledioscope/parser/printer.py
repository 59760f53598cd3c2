from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from lark import Token, Tree

from . import ast
from .terminals import is_identifier

INDENT = "    "


def format_name(name: str) -> str:
    if not is_identifier(name):
        raise ValueError(f"cannot render {name!r} as an identifier")
    return name


def format_type(ty: ast.Type) -> str:
    return ty.value


def format_expr(expr: ast.Expr) -> str:
    if isinstance(expr, ast.NumberLiteral):
        return expr.text
    if isinstance(expr, ast.QubitLiteral):
        return f"%{expr.index}"
    if isinstance(expr, ast.BoolLiteral):
        return "true" if expr.value else "false"
    if isinstance(expr, ast.Identifier):
        return format_name(expr.name)
    if isinstance(expr, ast.Call):
        args = ", ".join(format_expr(arg) for arg in expr.args)
        return f"{format_name(expr.callee)}({args})"
    raise TypeError(f"cannot format expression {expr!r}")


def format_prototype(proto: ast.Prototype) -> str:
    params = ", ".join(f"{format_name(p.name)}: {format_type(p.type)}" for p in proto.params)
    text = f"{format_name(proto.name)}({params})"
    if proto.return_type is not None:
        text += f" -> {format_type(proto.return_type)}"
    return text


def _format_body(stmts: Iterable[ast.Stmt], depth: int) -> List[str]:
    lines: List[str] = []
    for stmt in stmts:
        lines.extend(format_stmt(stmt, depth))
    return lines


def format_stmt(stmt: ast.Stmt, depth: int = 0) -> List[str]:
    pad = INDENT * depth
    if isinstance(stmt, ast.VarDecl):
        return [f"{pad}var {format_name(stmt.name)}: {format_type(stmt.type)} = {format_expr(stmt.init)};"]
    if isinstance(stmt, ast.Assign):
        return [f"{pad}{format_name(stmt.target)} = {format_expr(stmt.value)};"]
    if isinstance(stmt, ast.CallStmt):
        return [f"{pad}{format_expr(stmt.call)};"]
    if isinstance(stmt, ast.Return):
        return [f"{pad}return {format_expr(stmt.value)};"]
    if isinstance(stmt, ast.While):
        lines = [f"{pad}while {format_expr(stmt.condition)} {{"]
        lines.extend(_format_body(stmt.body, depth + 1))
        lines.append(f"{pad}}}")
        return lines
    if isinstance(stmt, ast.If):
        lines = [f"{pad}if {format_expr(stmt.condition)} {{"]
        lines.extend(_format_body(stmt.then_body, depth + 1))
        if stmt.else_body is None:
            lines.append(f"{pad}}}")
        else:
            lines.append(f"{pad}}} else {{")
            lines.extend(_format_body(stmt.else_body, depth + 1))
            lines.append(f"{pad}}}")
        return lines
    raise TypeError(f"cannot format statement {stmt!r}")


def format_item(item: ast.TopLevelItem) -> str:
    if isinstance(item, ast.Declaration):
        return f"extern {format_prototype(item.prototype)};"
    if isinstance(item, ast.Definition):
        lines = [f"def {format_prototype(item.prototype)} {{"]
        lines.extend(_format_body(item.body, 1))
        lines.append("}")
        return "\n".join(lines)
    raise TypeError(f"cannot format top-level item {item!r}")


def render_program(program: ast.Program) -> str:
    """Canonical source text; parsing it back yields an equal Program."""
    if not program.items:
        return ""
    return "\n\n".join(format_item(item) for item in program.items) + "\n"


def dump_parse_tree(node: Tree | Token) -> Dict[str, Any]:
    """
    Plain-data view of a grammar match.

    Trees become `{"rule", "span", "inner"}` and tokens
    `{"rule", "span", "text"}`; spans are `[start, end]` offsets.
    """
    if isinstance(node, Token):
        return {"rule": node.type, "span": [node.start_pos, node.end_pos], "text": str(node)}
    meta = node.meta
    span: Optional[List[int]] = None if meta.empty else [meta.start_pos, meta.end_pos]
    return {
        "rule": str(node.data),
        "span": span,
        "inner": [dump_parse_tree(child) for child in node.children],
    }


def parse_tree_to_json(node: Tree | Token, indent: Optional[int] = None) -> str:
    return json.dumps(dump_parse_tree(node), indent=indent, ensure_ascii=False)


__all__ = [
    "dump_parse_tree",
    "format_expr",
    "format_item",
    "format_name",
    "format_prototype",
    "format_stmt",
    "format_type",
    "parse_tree_to_json",
    "render_program",
]
