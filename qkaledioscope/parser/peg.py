# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Packrat (PEG) runtime built on `pe`.

Rules are `pe.operators` expressions registered in a `RuleTable`; matching is
done by `pe.packrat.PackratParser`, which memoizes every rule per offset. The
kind a rule is registered with decides what a successful match contributes:

- normal rules produce `lark.Tree(rule_name, children)`,
- atomic rules produce a single `lark.Token(rule_name, text)` and drop
  whatever their body produced,
- silent rules produce nothing of their own; their children pass straight
  through to the caller.

Whitespace and comments are an ordinary silent rule that the grammar places
between the items of a sequence and at the head of optional or repeated
tails, so a node span never starts or ends on trivia.

pe only reports where a failed parse gave up. The labels behind
"expected ..." come from `RuleTable.expect`: a labelled terminal is an
ordered choice between the terminal and a zero-width marker rule whose action
records the label at the current offset and then fails.
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from contextvars import ContextVar
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Type, Union

import pe
from lark import Token, Tree
from lark.tree import Meta
from pe._grammar import Grammar
from pe.actions import Action
from pe.operators import Choice as Ch
from pe.operators import Literal as Lit
from pe.operators import Nonterminal as NT
from pe.operators import Regex
from pe.operators import Sequence as Seq
from pe.packrat import PackratParser

from qkaledioscope.core.span import LineIndex

from .errors import NestingTooDeepError, ParseSyntaxError
from .options import DEFAULT_OPTIONS, ParseOptions

logger = logging.getLogger(__name__)

Node = Union[Tree, Token]
ActionResult = Tuple[Tuple[object, ...], Optional[Dict[str, object]]]

END_OF_INPUT = "end of input"

_NEVER = Regex("(?!)")
_BRACKETS_RE = re.compile(r"#[^\n]*|[(){}]")

# Python frames pe's recursive matcher may spend per bracket level
_FRAMES_PER_LEVEL = 64
_BASE_FRAMES = 1000
_limit_lock = threading.Lock()


class MatchState:
	"""Per-parse bookkeeping shared by the rule actions of one match call."""

	def __init__(self, text: str, options: ParseOptions = DEFAULT_OPTIONS) -> None:
		self.text = text
		self.options = options
		self.lines = LineIndex(text)
		self.furthest = -1
		self.expected: Set[str] = set()

	def fail(self, pos: int, label: str) -> None:
		if self.options.trace:
			logger.debug("expected %s at %d", label, pos)
		if pos > self.furthest:
			self.furthest = pos
			self.expected = {label}
		elif pos == self.furthest:
			self.expected.add(label)

	def _meta(self, start: int, end: int) -> Meta:
		meta = Meta()
		meta.empty = False
		meta.start_pos = start
		meta.end_pos = end
		meta.line, meta.column = self.lines.line_column(start)
		meta.end_line, meta.end_column = self.lines.line_column(end)
		return meta

	def tree(self, name: str, children: List[Node], start: int, end: int) -> Tree:
		return Tree(name, children, self._meta(start, end))

	def token(self, name: str, start: int, end: int) -> Token:
		line, column = self.lines.line_column(start)
		end_line, end_column = self.lines.line_column(end)
		return Token(
			name,
			self.text[start:end],
			start_pos=start,
			line=line,
			column=column,
			end_line=end_line,
			end_column=end_column,
			end_pos=end,
		)

	def syntax_error(
		self,
		pos: Optional[int] = None,
		expected: Optional[Iterable[str]] = None,
		*,
		error_cls: Type[ParseSyntaxError] = ParseSyntaxError,
		message: Optional[str] = None,
	) -> ParseSyntaxError:
		if pos is None:
			pos = max(self.furthest, 0)
			expected = self.expected
		line, column = self.lines.line_column(pos)
		return error_cls(self.text, pos, expected or (), line=line, column=column, message=message)


_active: ContextVar[Optional[MatchState]] = ContextVar("qkaledioscope_match_state", default=None)


def _state() -> MatchState:
	state = _active.get()
	if state is None:
		raise RuntimeError("grammar action invoked outside of a match call")
	return state


class _TreeAction(Action):  # type: ignore[misc]
	def __init__(self, name: str) -> None:
		self.name = name

	def __call__(self, s: str, pos: int, end: int, args: Tuple[object, ...], kwargs: Dict[str, object]) -> ActionResult:
		state = _state()
		if state.options.trace:
			logger.debug("%s matched [%d, %d)", self.name, pos, end)
		return (state.tree(self.name, list(args), pos, end),), None


class _TokenAction(Action):  # type: ignore[misc]
	def __init__(self, name: str) -> None:
		self.name = name

	def __call__(self, s: str, pos: int, end: int, args: Tuple[object, ...], kwargs: Dict[str, object]) -> ActionResult:
		state = _state()
		if state.options.trace:
			logger.debug("%s matched [%d, %d)", self.name, pos, end)
		return (state.token(self.name, pos, end),), None


class _CollectAction(Action):  # type: ignore[misc]
	"""Hand every value of an entry rule back as one list."""

	def __call__(self, s: str, pos: int, end: int, args: Tuple[object, ...], kwargs: Dict[str, object]) -> ActionResult:
		return (list(args),), None


class _ExpectAction(Action):  # type: ignore[misc]
	def __init__(self, label: str) -> None:
		self.label = label

	def __call__(self, s: str, pos: int, end: int, args: Tuple[object, ...], kwargs: Dict[str, object]) -> ActionResult:
		_state().fail(pos, self.label)
		return (), None


class RuleTable:
	"""
	Named `pe` expressions plus the actions that give each rule its kind.

	Parsers are compiled lazily, one per start rule, and cached; the table
	must not change once a parser has been requested.
	"""

	def __init__(self) -> None:
		self._definitions: Dict[str, Any] = {}
		self._actions: Dict[str, Action] = {}
		self._markers: Dict[str, str] = {}
		self._parsers: Dict[str, PackratParser] = {}

	def __contains__(self, name: str) -> bool:
		return name in self._definitions

	def rule(self, name: str, expr: Any, *, silent: bool = False, atomic: bool = False) -> None:
		self._define(name, expr)
		if silent:
			return
		self._actions[name] = _TokenAction(name) if atomic else _TreeAction(name)

	def entry(self, name: str, expr: Any) -> None:
		"""A start rule whose match value is the list of nodes it produced."""
		self._define(name, expr)
		self._actions[name] = _CollectAction()

	def expect(self, label: str, expr: Any) -> Any:
		"""`expr`, reporting `label` as expected wherever it fails."""
		marker = self._markers.get(label)
		if marker is None:
			marker = f"_expect_{len(self._markers)}"
			self._define(marker, Regex(""))
			self._actions[marker] = _ExpectAction(label)
			self._markers[label] = marker
		return Ch(expr, Seq(NT(marker), _NEVER))

	def literal(self, text: str) -> Any:
		return self.expect(f'"{text}"', Lit(text))

	def parser(self, start: str) -> PackratParser:
		parser = self._parsers.get(start)
		if parser is None:
			if start not in self._definitions:
				raise KeyError(f"no rule named {start!r}")
			grammar = Grammar(dict(self._definitions), actions=dict(self._actions), start=start)
			parser = PackratParser(grammar)
			self._parsers[start] = parser
			logger.debug("compiled %s parser over %d rules", start, len(self._definitions))
		return parser

	def _define(self, name: str, expr: Any) -> None:
		if name in self._definitions:
			raise ValueError(f"duplicate rule {name!r}")
		self._definitions[name] = expr


def check_nesting(text: str, max_depth: int) -> None:
	"""Reject `(`/`{` nesting deeper than `max_depth`; comments are skipped."""
	depth = 0
	for m in _BRACKETS_RE.finditer(text):
		ch = m.group()
		if ch in "({":
			depth += 1
			if depth > max_depth:
				line, column = LineIndex(text).line_column(m.start())
				raise NestingTooDeepError(
					text,
					m.start(),
					(),
					line=line,
					column=column,
					message=f"nesting exceeds {max_depth} levels",
				)
		elif ch in ")}":
			depth = max(depth - 1, 0)


def _ensure_recursion_limit(max_depth: int) -> None:
	# raised only, never lowered: concurrent parses share the interpreter limit
	needed = _BASE_FRAMES + _FRAMES_PER_LEVEL * (max_depth + 1)
	with _limit_lock:
		if sys.getrecursionlimit() < needed:
			sys.setrecursionlimit(needed)


def _error_offset(text: str, exc: pe.ParseError) -> int:
	# pe reports 0-based (lineno, offset)
	if exc.lineno is None or exc.offset is None:
		return 0
	lines = text.split("\n")
	return sum(len(line) + 1 for line in lines[: exc.lineno]) + exc.offset


def _run(table: RuleTable, start: str, text: str, options: ParseOptions) -> Any:
	check_nesting(text, options.max_depth)
	_ensure_recursion_limit(options.max_depth)
	parser = table.parser(start)
	state = MatchState(text, options)
	token = _active.set(state)
	try:
		match = parser.match(text)
	except pe.ParseError as exc:
		if state.furthest < 0:
			raise state.syntax_error(_error_offset(text, exc), ()) from exc
		raise state.syntax_error() from exc
	finally:
		_active.reset(token)
	if match is None:
		raise state.syntax_error()
	return match.value()


def assemble_program(
	table: RuleTable,
	text: str,
	*,
	root: str = "program",
	options: ParseOptions = DEFAULT_OPTIONS,
) -> Tree:
	"""
	Match the whole of `text` with the `root` rule.

	The root rule consumes leading and trailing trivia and ends in an
	end-of-input check; leftover text is a syntax error at the furthest
	offset reached, never a silently truncated tree.
	"""
	tree = _run(table, root, text, options)
	logger.debug("assembled %d top-level item(s) from %d characters", len(tree.children), len(text))
	return tree


def match_fragment(
	table: RuleTable,
	text: str,
	entry: str,
	*,
	options: ParseOptions = DEFAULT_OPTIONS,
) -> List[Node]:
	"""Match an entry rule registered with `RuleTable.entry` against all of `text`."""
	return _run(table, entry, text, options)


__all__ = [
	"END_OF_INPUT",
	"MatchState",
	"Node",
	"RuleTable",
	"assemble_program",
	"check_nesting",
	"match_fragment",
]
