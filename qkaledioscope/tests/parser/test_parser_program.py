# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from qkaledioscope import parse
from qkaledioscope.core.span import SourceSpan
from qkaledioscope.parser import ast as A
from qkaledioscope.parser import ParseSyntaxError


def _params(proto: A.Prototype) -> list[tuple[str, A.Type]]:
	return [(p.name, p.type) for p in proto.params]


def test_extern_declaration_with_return_type() -> None:
	prog = parse("extern m(q: qubit) -> bit;")
	(item,) = prog.items
	assert isinstance(item, A.Declaration)
	proto = item.prototype
	assert proto.name == "m"
	assert _params(proto) == [("q", A.Type.QUBIT)]
	assert proto.return_type is A.Type.BIT


def test_declaration_spans() -> None:
	prog = parse("extern m(q: qubit) -> bit;")
	(item,) = prog.items
	assert item.span == SourceSpan(0, 26)
	assert item.prototype.span == SourceSpan(7, 25)
	assert item.prototype.params[0].span == SourceSpan(9, 17)
	assert prog.span == SourceSpan(0, 26)


def test_definition_without_return_type_or_params() -> None:
	prog = parse("def qmain() { }")
	(item,) = prog.items
	assert isinstance(item, A.Definition)
	assert item.name == "qmain"
	assert item.prototype.params == ()
	assert item.prototype.return_type is None
	assert item.body == ()


def test_parameter_separators_are_optional() -> None:
	prog = parse("extern g(a: number, b: qubit c: bit,);")
	assert _params(prog.items[0].prototype) == [
		("a", A.Type.NUMBER),
		("b", A.Type.QUBIT),
		("c", A.Type.BIT),
	]


def test_duplicate_parameter_names_are_syntactically_valid() -> None:
	prog = parse("extern cx(q: qubit, q: qubit);")
	assert [p.name for p in prog.items[0].prototype.params] == ["q", "q"]


def test_type_names_may_be_used_as_identifiers() -> None:
	prog = parse("def bit(qubit: qubit) -> number { return qubit; }")
	(item,) = prog.items
	assert item.name == "bit"
	assert _params(item.prototype) == [("qubit", A.Type.QUBIT)]
	assert item.body == (A.Return(span=SourceSpan(0, 0), value=A.Identifier(span=SourceSpan(0, 0), name="qubit")),)


def test_items_keep_source_order() -> None:
	prog = parse(
		"""
# gate intrinsics
extern h(q: qubit);
extern m(q: qubit) -> bit;

def qmain() {
	h(%0);
}
extern x(q: qubit);
"""
	)
	assert [type(item).__name__ for item in prog.items] == ["Declaration", "Declaration", "Definition", "Declaration"]
	assert [item.name for item in prog.items] == ["h", "m", "qmain", "x"]
	assert [d.name for d in prog.declarations] == ["h", "m", "x"]
	assert [d.name for d in prog.definitions] == ["qmain"]


@pytest.mark.parametrize("src", ["", "   \n\t", "# nothing here", "# one\n# two\n"])
def test_empty_sources_parse_to_empty_program(src: str) -> None:
	assert parse(src).items == ()


def test_whitespace_and_comments_do_not_change_the_ast() -> None:
	compact = parse("def g(){h();}")
	spread = parse("def g ( ) { # comment\n h ( ) ; }")
	assert compact == spread
	assert compact.items[0].span != spread.items[0].span


def test_crlf_and_tabs_are_whitespace() -> None:
	prog = parse("def f()\r\n{\r\n\treturn 1;\r\n}\r\n")
	assert len(prog.items[0].body) == 1


def test_comment_at_end_of_file_without_newline() -> None:
	prog = parse("extern f(); # trailing")
	assert [item.name for item in prog.items] == ["f"]


@pytest.mark.parametrize(
	"src",
	[
		"def if() {}",
		"extern var(q: qubit);",
		"def f(true: bit) {}",
		"define f() {}",
		"externf();",
	],
)
def test_reserved_words_and_glued_keywords_are_rejected(src: str) -> None:
	with pytest.raises(ParseSyntaxError):
		parse(src)


def test_declaration_requires_semicolon() -> None:
	with pytest.raises(ParseSyntaxError):
		parse("extern f(q: qubit)")


def test_definition_requires_body() -> None:
	with pytest.raises(ParseSyntaxError):
		parse("def f(q: qubit);")


def test_unknown_type_is_rejected() -> None:
	with pytest.raises(ParseSyntaxError) as excinfo:
		parse("extern f(q: int);")
	assert excinfo.value.pos_in_stream == 12
	assert set(excinfo.value.expected) == {'"number"', '"qubit"', '"bit"'}


def test_program_is_immutable() -> None:
	prog = parse("extern f();")
	with pytest.raises(AttributeError):
		prog.items = ()  # type: ignore[misc]
