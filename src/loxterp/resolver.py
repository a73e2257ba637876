from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Set

from . import nodes
from .module_info import ModuleInfo
from .tokens import Token

logger = logging.getLogger(__name__)

_IMPORT_SEPARATORS = frozenset("\\/-.")
_IMPORT_PUNCTUATION = frozenset("\\/-_.")
_IMPORT_BAD_LEADING = frozenset("\\/-")
_IMPORT_BAD_TRAILING = frozenset("\\/")


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    LAMBDA = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


def import_name_error(name: str, has_alias: bool) -> Optional[str]:
    """Return the diagnostic for a malformed import name, or None if it is usable."""
    if not name:
        return "Import name cannot be empty."
    for c in name:
        if not ((c.isascii() and c.isalnum()) or c in _IMPORT_PUNCTUATION):
            return "Import name must be a valid module name."
    if name[0] in _IMPORT_BAD_LEADING:
        return "Import name must not start with a separator."
    if name[-1] in _IMPORT_BAD_TRAILING:
        return "Import name must not end with a slash."
    if not has_alias and any(c in _IMPORT_SEPARATORS for c in name):
        return (
            "Expected alias: Import name contains one or more of following "
            "characters: '\\', '/', '-', '.'."
        )
    return None


class Resolver:
    """
    Static pass between parsing and evaluation.

    Computes, for every variable use, how many scopes separate it from its
    declaration (`locals`; absent means global) and reports scoping errors:
    duplicate declarations, constant reassignment, misplaced
    return/break/continue/this/super, self-inheritance and bad import names.
    Errors are reported through `module_info` and the pass carries on.
    """

    def __init__(
        self,
        module_info: ModuleInfo,
        *,
        known_globals: Iterable[str] = (),
        global_constants: Optional[Set[str]] = None,
    ):
        self.module_info = module_info
        self.locals: Dict[nodes.Expr, int] = {}

        # name -> True once defined, False while only declared
        self.scopes: List[Dict[str, bool]] = []
        self.constants: List[Set[str]] = []

        self.globals: Set[str] = set(known_globals)
        self.global_constants: Set[str] = set() if global_constants is None else global_constants
        self._initializing_globals: Set[str] = set()

        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.in_loop = False

    # ----- entry points -----

    def resolve(self, statements: Iterable[nodes.Stmt]) -> Dict[nodes.Expr, int]:
        for stmt in statements:
            self.resolve_node(stmt)
        return self.locals

    def resolve_node(self, node: nodes.Stmt | nodes.Expr) -> None:
        m = getattr(self, f"resolve_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Node not supported: {node.__class__.__name__}")
        m(node)

    # ----- statements -----

    def resolve_Import(self, stmt: nodes.Import) -> None:
        message = import_name_error(stmt.module_name, stmt.alias is not None)
        if message is not None:
            self.module_info.error(stmt.name, message)
            return

        binding = stmt.alias if stmt.alias is not None else stmt.name
        self._declare(binding, stmt.binding_name)
        self._define(stmt.binding_name)

    def resolve_Block(self, stmt: nodes.Block) -> None:
        self._begin_scope()
        self.resolve(stmt.statements)
        self._end_scope()

    def resolve_Class(self, stmt: nodes.Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name.lexeme)

        superclass = stmt.superclass
        if superclass is not None:
            if superclass.name.lexeme == stmt.name.lexeme:
                self.module_info.error(superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_node(superclass)

            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            declaration = FunctionType.METHOD
            if method.name is not None and method.name.lexeme == "init":
                declaration = FunctionType.INITIALIZER
            self._resolve_function(method, declaration)

        self._end_scope()
        if superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def resolve_Expression(self, stmt: nodes.Expression) -> None:
        self.resolve_node(stmt.expression)

    def resolve_Function(self, stmt: nodes.Function) -> None:
        assert stmt.name is not None
        self._declare(stmt.name)
        self._define(stmt.name.lexeme)
        self._resolve_function(stmt, FunctionType.FUNCTION)

    def resolve_If(self, stmt: nodes.If) -> None:
        self.resolve_node(stmt.condition)
        self.resolve_node(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve_node(stmt.else_branch)

    def resolve_Print(self, stmt: nodes.Print) -> None:
        self.resolve_node(stmt.expression)

    def resolve_Return(self, stmt: nodes.Return) -> None:
        if self.current_function is FunctionType.NONE:
            self.module_info.error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function is FunctionType.INITIALIZER:
                self.module_info.error(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve_node(stmt.value)

    def resolve_Var(self, stmt: nodes.Var) -> None:
        name = stmt.name.lexeme
        self._declare(stmt.name)
        if stmt.initializer is not None:
            if not self.scopes:
                self._initializing_globals.add(name)
            try:
                self.resolve_node(stmt.initializer)
            finally:
                self._initializing_globals.discard(name)
        self._define(name)

        constants = self.constants[-1] if self.constants else self.global_constants
        if stmt.is_const:
            constants.add(name)
        else:
            constants.discard(name)

    def resolve_While(self, stmt: nodes.While) -> None:
        enclosing_loop = self.in_loop
        self.in_loop = True
        self.resolve_node(stmt.condition)
        self.resolve_node(stmt.body)
        if stmt.increment is not None:
            self.resolve_node(stmt.increment)
        self.in_loop = enclosing_loop

    def resolve_Break(self, stmt: nodes.Break) -> None:
        if not self.in_loop:
            self.module_info.error(stmt.keyword, "Can't use 'break' outside of a loop.")

    def resolve_Continue(self, stmt: nodes.Continue) -> None:
        if not self.in_loop:
            self.module_info.error(stmt.keyword, "Can't use 'continue' outside of a loop.")

    # ----- expressions -----

    def resolve_Assign(self, expr: nodes.Assign) -> None:
        self.resolve_node(expr.value)
        if self._is_constant(expr.name.lexeme):
            self.module_info.error(expr.name, "Cannot reassign a constant.")
        self._resolve_local(expr, expr.name)

    def resolve_Binary(self, expr: nodes.Binary) -> None:
        self.resolve_node(expr.left)
        self.resolve_node(expr.right)

    def resolve_Call(self, expr: nodes.Call) -> None:
        self.resolve_node(expr.callee)
        for argument in expr.arguments:
            self.resolve_node(argument)

    def resolve_Lambda(self, expr: nodes.Lambda) -> None:
        self._resolve_function(expr.function, FunctionType.LAMBDA)

    def resolve_Get(self, expr: nodes.Get) -> None:
        self.resolve_node(expr.obj)

    def resolve_Grouping(self, expr: nodes.Grouping) -> None:
        self.resolve_node(expr.expression)

    def resolve_Literal(self, expr: nodes.Literal) -> None:
        return

    def resolve_Logical(self, expr: nodes.Logical) -> None:
        self.resolve_node(expr.left)
        self.resolve_node(expr.right)

    def resolve_Set(self, expr: nodes.Set) -> None:
        self.resolve_node(expr.value)
        if isinstance(expr.obj, nodes.Variable) and self._is_constant(expr.obj.name.lexeme):
            self.module_info.error(expr.name, "Cannot modify a field of a constant object.")
        self.resolve_node(expr.obj)

    def resolve_Super(self, expr: nodes.Super) -> None:
        if self.current_class is ClassType.NONE:
            self.module_info.error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class is not ClassType.SUBCLASS:
            self.module_info.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
        self._resolve_local(expr, expr.keyword)

    def resolve_This(self, expr: nodes.This) -> None:
        if self.current_class is ClassType.NONE:
            self.module_info.error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        self._resolve_local(expr, expr.keyword)

    def resolve_Unary(self, expr: nodes.Unary) -> None:
        self.resolve_node(expr.right)

    def resolve_Variable(self, expr: nodes.Variable) -> None:
        name = expr.name.lexeme
        if self.scopes and self.scopes[-1].get(name) is False:
            # `var x = x;` may only read an outer `x`.
            if not self._resolve_enclosing(expr, name):
                self.module_info.error(
                    expr.name, "Can't read local variable in its own initializer."
                )
            return
        if not self.scopes and name in self._initializing_globals and name not in self.globals:
            self.module_info.error(expr.name, "Can't read local variable in its own initializer.")
            return
        self._resolve_local(expr, expr.name)

    # ----- helpers -----

    def _resolve_function(self, function: nodes.Function, kind: FunctionType) -> None:
        enclosing_function = self.current_function
        enclosing_loop = self.in_loop
        self.current_function = kind
        self.in_loop = False

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param.lexeme)
        self.resolve(function.body)
        self._end_scope()

        self.current_function = enclosing_function
        self.in_loop = enclosing_loop

    def _begin_scope(self) -> None:
        self.scopes.append({})
        self.constants.append(set())

    def _end_scope(self) -> None:
        self.scopes.pop()
        self.constants.pop()

    def _declare(self, token: Token, name: Optional[str] = None) -> None:
        if name is None:
            name = token.lexeme
        if not self.scopes:
            if name in self.global_constants:
                self.module_info.error(token, "Already a constant with this name.")
            return

        scope = self.scopes[-1]
        if name in scope:
            self.module_info.error(token, "Already a variable with this name in this scope.")
        scope[name] = False

    def _define(self, name: str) -> None:
        if not self.scopes:
            self.globals.add(name)
            return
        self.scopes[-1][name] = True

    def _is_constant(self, name: str) -> bool:
        for i in range(len(self.scopes) - 1, -1, -1):
            if name in self.scopes[i]:
                return name in self.constants[i]
        return name in self.global_constants

    def _resolve_local(self, expr: nodes.Expr, name: Token) -> None:
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.locals[expr] = len(self.scopes) - 1 - i
                return
        # Not found: left for the global environment at run time.

    def _resolve_enclosing(self, expr: nodes.Expr, name: str) -> bool:
        for i in range(len(self.scopes) - 2, -1, -1):
            if name in self.scopes[i]:
                self.locals[expr] = len(self.scopes) - 1 - i
                return True
        if name in self.globals:
            logger.debug("initializer of local %r reads the global binding", name)
            return True
        return False
