from __future__ import annotations

import math
import operator
from typing import Any, Callable, Dict

from . import nodes
from .common import LoxRuntimeError
from .functions import LoxCallable, LoxInstance, LoxModule, UserFunction
from .helpers import is_equal, is_number, is_truthy
from .scopes import Environment
from .tokens import TokenType

_COMPARISONS: Dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.GREATER: operator.gt,
    TokenType.GREATER_EQUAL: operator.ge,
    TokenType.LESS: operator.lt,
    TokenType.LESS_EQUAL: operator.le,
}


class ExpressionMixin:
    def eval_Literal(self, node: nodes.Literal, env: Environment) -> Any:
        return node.value

    def eval_Grouping(self, node: nodes.Grouping, env: Environment) -> Any:
        return self.eval_expr(node.expression, env)

    def eval_Variable(self, node: nodes.Variable, env: Environment) -> Any:
        return self._lookup_variable(node.name, node, env)

    def eval_This(self, node: nodes.This, env: Environment) -> Any:
        return self._lookup_variable(node.keyword, node, env)

    def eval_Assign(self, node: nodes.Assign, env: Environment) -> Any:
        value = self.eval_expr(node.value, env)
        distance = self.locals.get(node)
        if distance is None:
            return self.globals.store(node.name, value)
        return env.store_at(distance, node.name, value)

    def eval_Logical(self, node: nodes.Logical, env: Environment) -> Any:
        left = self.eval_expr(node.left, env)
        if node.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.eval_expr(node.right, env)

    def eval_Unary(self, node: nodes.Unary, env: Environment) -> Any:
        right = self.eval_expr(node.right, env)
        if node.operator.type is TokenType.BANG:
            return not is_truthy(right)
        self._check_number_operand(node.operator, right)
        return -right

    def eval_Binary(self, node: nodes.Binary, env: Environment) -> Any:
        left = self.eval_expr(node.left, env)
        right = self.eval_expr(node.right, env)
        op = node.operator
        kind = op.type

        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if kind is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

        self._check_number_operands(op, left, right)
        comparison = _COMPARISONS.get(kind)
        if comparison is not None:
            return comparison(left, right)
        if kind is TokenType.MINUS:
            return left - right
        if kind is TokenType.STAR:
            return left * right
        if kind in (TokenType.SLASH, TokenType.PERCENT):
            if right == 0:
                raise LoxRuntimeError(op, "Division by zero.")
            if kind is TokenType.SLASH:
                return left / right
            return math.fmod(left, right)
        raise NotImplementedError(f"Binary operator not supported: {kind.name}")

    def eval_Call(self, node: nodes.Call, env: Environment) -> Any:
        callee = self.eval_expr(node.callee, env)
        arguments = [self.eval_expr(argument, env) for argument in node.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(node.paren, "Can only call functions and classes.")
        arity = callee.arity()
        if len(arguments) != arity:
            raise LoxRuntimeError(
                node.paren, f"Expected {arity} arguments but got {len(arguments)}."
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(node.paren, "Stack overflow.") from None

    def eval_Lambda(self, node: nodes.Lambda, env: Environment) -> Any:
        return UserFunction(node.function, env, self)

    def eval_Get(self, node: nodes.Get, env: Environment) -> Any:
        obj = self.eval_expr(node.obj, env)
        if isinstance(obj, (LoxInstance, LoxModule)):
            return obj.get(node.name)
        raise LoxRuntimeError(node.name, "Only instances have properties.")

    def eval_Set(self, node: nodes.Set, env: Environment) -> Any:
        obj = self.eval_expr(node.obj, env)
        if not isinstance(obj, (LoxInstance, LoxModule)):
            raise LoxRuntimeError(node.name, "Only instances have fields.")
        value = self.eval_expr(node.value, env)
        return obj.set(node.name, value)

    def eval_Super(self, node: nodes.Super, env: Environment) -> Any:
        distance = self.locals[node]
        superclass = env.load_at(distance, "super")
        # `this` is always bound one scope inside `super`.
        instance = env.load_at(distance - 1, "this")

        method = superclass.find_method(node.method.lexeme)
        if method is None:
            raise LoxRuntimeError(node.method, f"Undefined property '{node.method.lexeme}'.")
        return method.bind(instance)
