from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from qkaledioscope.core.span import SourceSpan

from .terminals import number_value

# `span` never takes part in equality: two trees parsed from differently
# formatted sources compare equal when their structure matches.


class Type(Enum):
    NUMBER = "number"
    QUBIT = "qubit"
    BIT = "bit"

    def __str__(self) -> str:
        return self.value


class Expr:
    span: SourceSpan


@dataclass(frozen=True)
class NumberLiteral(Expr):
    span: SourceSpan = field(compare=False)
    text: str

    @property
    def value(self) -> float:
        return number_value(self.text)


@dataclass(frozen=True)
class QubitLiteral(Expr):
    span: SourceSpan = field(compare=False)
    index: int


@dataclass(frozen=True)
class BoolLiteral(Expr):
    span: SourceSpan = field(compare=False)
    value: bool


@dataclass(frozen=True)
class Identifier(Expr):
    span: SourceSpan = field(compare=False)
    name: str


@dataclass(frozen=True)
class Call(Expr):
    span: SourceSpan = field(compare=False)
    callee: str
    args: Tuple[Expr, ...] = ()


class Stmt:
    span: SourceSpan


@dataclass(frozen=True)
class VarDecl(Stmt):
    span: SourceSpan = field(compare=False)
    name: str
    type: Type
    init: Expr


@dataclass(frozen=True)
class Assign(Stmt):
    span: SourceSpan = field(compare=False)
    target: str
    value: Expr


@dataclass(frozen=True)
class CallStmt(Stmt):
    span: SourceSpan = field(compare=False)
    call: Call


@dataclass(frozen=True)
class Return(Stmt):
    span: SourceSpan = field(compare=False)
    value: Expr


@dataclass(frozen=True)
class If(Stmt):
    span: SourceSpan = field(compare=False)
    condition: Expr
    then_body: Tuple[Stmt, ...]
    # None when there is no `else`; () for `else {}`
    else_body: Optional[Tuple[Stmt, ...]] = None


@dataclass(frozen=True)
class While(Stmt):
    span: SourceSpan = field(compare=False)
    condition: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Param:
    span: SourceSpan = field(compare=False)
    name: str
    type: Type


@dataclass(frozen=True)
class Prototype:
    span: SourceSpan = field(compare=False)
    name: str
    params: Tuple[Param, ...] = ()
    return_type: Optional[Type] = None


@dataclass(frozen=True)
class Declaration:
    """`extern` prototype: an operation supplied by the runtime."""

    span: SourceSpan = field(compare=False)
    prototype: Prototype

    @property
    def name(self) -> str:
        return self.prototype.name


@dataclass(frozen=True)
class Definition:
    span: SourceSpan = field(compare=False)
    prototype: Prototype
    body: Tuple[Stmt, ...] = ()

    @property
    def name(self) -> str:
        return self.prototype.name


TopLevelItem = Union[Declaration, Definition]


@dataclass(frozen=True)
class Program:
    span: SourceSpan = field(compare=False)
    items: Tuple[TopLevelItem, ...] = ()

    @property
    def declarations(self) -> Tuple[Declaration, ...]:
        return tuple(item for item in self.items if isinstance(item, Declaration))

    @property
    def definitions(self) -> Tuple[Definition, ...]:
        return tuple(item for item in self.items if isinstance(item, Definition))
