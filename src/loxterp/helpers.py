from __future__ import annotations

import sys
from typing import Any, List

from . import nodes
from .common import LoxRuntimeError, ReturnSignal
from .functions import UserFunction
from .scopes import Environment
from .tokens import Token


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is b
    # Python would have true == 1.0.
    if type(a) is not type(b):
        return False
    return a == b


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def stringify(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class HelperMixin:
    def _check_number_operand(self, operator: Token, operand: Any) -> None:
        if not is_number(operand):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")

    def _lookup_variable(self, name: Token, expr: nodes.Expr, env: Environment) -> Any:
        distance = self.locals.get(expr)
        if distance is None:
            return self.globals.load(name)
        return env.load_at(distance, name.lexeme)

    def _write_line(self, text: str) -> None:
        stream = self.stdout if self.stdout is not None else sys.stdout
        print(text, file=stream)

    def _call_user_function(self, func: UserFunction, arguments: List[Any]) -> Any:
        env = Environment(func.closure)
        for param, argument in zip(func.declaration.params, arguments):
            env.define(param.lexeme, argument)

        try:
            self.exec_block(func.declaration.body, env)
        except ReturnSignal as signal:
            if func.is_initializer:
                return func.closure.load_at(0, "this")
            return signal.value

        if func.is_initializer:
            return func.closure.load_at(0, "this")
        return None
