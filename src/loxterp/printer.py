"""Debug rendering of syntax trees as parenthesized prefix text."""

from __future__ import annotations

from typing import Iterable

from . import nodes


class AstPrinter:
    def __init__(self, indent: str = "  "):
        self.indent = indent
        self._depth = 0

    def print(self, node: nodes.Stmt | nodes.Expr) -> str:
        m = getattr(self, f"print_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Node not supported: {node.__class__.__name__}")
        return m(node)

    def print_program(self, statements: Iterable[nodes.Stmt]) -> str:
        return "\n".join(self.print(stmt) for stmt in statements)

    # ----- statements -----

    def print_Block(self, stmt: nodes.Block) -> str:
        return self._block(stmt.statements)

    def print_Expression(self, stmt: nodes.Expression) -> str:
        return self.print(stmt.expression)

    def print_Print(self, stmt: nodes.Print) -> str:
        return self._parenthesize("out", stmt.expression)

    def print_Var(self, stmt: nodes.Var) -> str:
        keyword = "const" if stmt.is_const else "new"
        value = "nil" if stmt.initializer is None else self.print(stmt.initializer)
        return f"({keyword} {stmt.name.lexeme} = {value})"

    def print_If(self, stmt: nodes.If) -> str:
        parts = [self.print(stmt.condition), self.print(stmt.then_branch)]
        if stmt.else_branch is not None:
            parts.append(self.print(stmt.else_branch))
        return f"(if {' '.join(parts)})"

    def print_While(self, stmt: nodes.While) -> str:
        parts = [self.print(stmt.condition), self.print(stmt.body)]
        if stmt.increment is not None:
            parts.append(self.print(stmt.increment))
        return f"(while {' '.join(parts)})"

    def print_Function(self, stmt: nodes.Function) -> str:
        name = "lambda" if stmt.name is None else stmt.name.lexeme
        params = " ".join(p.lexeme for p in stmt.params)
        return f"(fun {name} ({params}) {self._block(stmt.body)})"

    def print_Class(self, stmt: nodes.Class) -> str:
        head = stmt.name.lexeme
        if stmt.superclass is not None:
            head += f" : {stmt.superclass.name.lexeme}"
        return f"(class {head} {self._block(stmt.methods)})"

    def print_Return(self, stmt: nodes.Return) -> str:
        if stmt.value is None:
            return "(return)"
        return self._parenthesize("return", stmt.value)

    def print_Break(self, stmt: nodes.Break) -> str:
        return "(break)"

    def print_Continue(self, stmt: nodes.Continue) -> str:
        return "(continue)"

    def print_Import(self, stmt: nodes.Import) -> str:
        if stmt.alias is None:
            return f"(import {stmt.name.lexeme})"
        return f"(import {stmt.name.lexeme} as {stmt.alias.lexeme})"

    # ----- expressions -----

    def print_Assign(self, expr: nodes.Assign) -> str:
        return f"(let {expr.name.lexeme} = {self.print(expr.value)})"

    def print_Binary(self, expr: nodes.Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def print_Logical(self, expr: nodes.Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def print_Call(self, expr: nodes.Call) -> str:
        return self._parenthesize("call", expr.callee, *expr.arguments)

    def print_Lambda(self, expr: nodes.Lambda) -> str:
        return self.print(expr.function)

    def print_Get(self, expr: nodes.Get) -> str:
        return f"(. {self.print(expr.obj)} {expr.name.lexeme})"

    def print_Set(self, expr: nodes.Set) -> str:
        return f"(.= {self.print(expr.obj)} {expr.name.lexeme} {self.print(expr.value)})"

    def print_Grouping(self, expr: nodes.Grouping) -> str:
        return self._parenthesize("par", expr.expression)

    def print_Literal(self, expr: nodes.Literal) -> str:
        if expr.value is None:
            return "nil"
        if isinstance(expr.value, bool):
            return "true" if expr.value else "false"
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return str(expr.value)

    def print_Super(self, expr: nodes.Super) -> str:
        return f"(super {expr.method.lexeme})"

    def print_This(self, expr: nodes.This) -> str:
        return "this"

    def print_Unary(self, expr: nodes.Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def print_Variable(self, expr: nodes.Variable) -> str:
        return expr.name.lexeme

    # ----- helpers -----

    def _block(self, statements: Iterable[nodes.Stmt]) -> str:
        self._depth += 1
        lines = ["{"]
        for stmt in statements:
            lines.append(self.indent * self._depth + self.print(stmt))
        self._depth -= 1
        lines.append(self.indent * self._depth + "}")
        return "\n".join(lines)

    def _parenthesize(self, name: str, *exprs: nodes.Expr) -> str:
        parts = [name]
        parts.extend(self.print(expr) for expr in exprs)
        return f"({' '.join(parts)})"
