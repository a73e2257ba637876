"""Syntax tree for Lox programs.

Two closed families of plain immutable records: `Expr` and `Stmt`. Nodes carry
no behavior; consumers (resolver, interpreter, printer) dispatch on the class
name (`eval_Binary`, `resolve_Binary`, ...), so a new pass never has to touch
these definitions.

Nodes compare and hash by identity. The resolver's scope table is keyed on the
node object itself, and two textually identical `Variable` uses must stay
distinct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .tokens import Token, TokenType


class Expr:
    __slots__ = ()


class Stmt:
    __slots__ = ()


# ----- statements -----
# Function comes first since Lambda and Class refer to it.


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Optional[Token]
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Import(Stmt):
    keyword: Token
    name: Token
    alias: Optional[Token] = None

    @property
    def module_name(self) -> str:
        """The import name without the quotes of a string-literal spelling."""
        if self.name.type is TokenType.STRING:
            return self.name.literal
        return self.name.lexeme

    @property
    def binding_name(self) -> str:
        if self.alias is not None:
            return self.alias.lexeme
        return self.module_name


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None
    kind: TokenType = TokenType.VAR

    @property
    def is_const(self) -> bool:
        return self.kind is TokenType.CONST


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
    # Set only for desugared `for` loops; runs after every iteration,
    # including ones cut short by `continue`.
    increment: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Break(Stmt):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Continue(Stmt):
    keyword: Token


# ----- expressions -----


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Lambda(Expr):
    function: Function


@dataclass(frozen=True, eq=False)
class Get(Expr):
    obj: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set(Expr):
    obj: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable] = None
    methods: tuple[Function, ...] = field(default_factory=tuple)
