from __future__ import annotations

from typing import Optional

from . import nodes
from .common import BreakSignal, ContinueSignal, LoxRuntimeError, ReturnSignal
from .functions import LoxClass, UserFunction
from .helpers import is_truthy, stringify
from .scopes import Environment


class StatementMixin:
    def exec_Expression(self, node: nodes.Expression, env: Environment) -> None:
        self.eval_expr(node.expression, env)

    def exec_Print(self, node: nodes.Print, env: Environment) -> None:
        value = self.eval_expr(node.expression, env)
        self._write_line(stringify(value))

    def exec_Var(self, node: nodes.Var, env: Environment) -> None:
        value = None
        if node.initializer is not None:
            value = self.eval_expr(node.initializer, env)
        env.define(node.name.lexeme, value)

    def exec_Block(self, node: nodes.Block, env: Environment) -> None:
        self.exec_block(node.statements, Environment(env))

    def exec_If(self, node: nodes.If, env: Environment) -> None:
        if is_truthy(self.eval_expr(node.condition, env)):
            self.exec_stmt(node.then_branch, env)
        elif node.else_branch is not None:
            self.exec_stmt(node.else_branch, env)

    def exec_While(self, node: nodes.While, env: Environment) -> None:
        while is_truthy(self.eval_expr(node.condition, env)):
            try:
                self.exec_stmt(node.body, env)
            except BreakSignal:
                break
            except ContinueSignal:
                pass
            if node.increment is not None:
                self.eval_expr(node.increment, env)

    def exec_Break(self, node: nodes.Break, env: Environment) -> None:
        raise BreakSignal()

    def exec_Continue(self, node: nodes.Continue, env: Environment) -> None:
        raise ContinueSignal()

    def exec_Return(self, node: nodes.Return, env: Environment) -> None:
        value = self.eval_expr(node.value, env) if node.value is not None else None
        raise ReturnSignal(value)

    def exec_Function(self, node: nodes.Function, env: Environment) -> None:
        assert node.name is not None
        env.define(node.name.lexeme, UserFunction(node, env, self))

    def exec_Class(self, node: nodes.Class, env: Environment) -> None:
        superclass: Optional[LoxClass] = None
        if node.superclass is not None:
            value = self.eval_expr(node.superclass, env)
            if not isinstance(value, LoxClass):
                raise LoxRuntimeError(node.superclass.name, "Superclass must be a class.")
            superclass = value

        env.define(node.name.lexeme, None)

        method_env = env
        if superclass is not None:
            method_env = Environment(env)
            method_env.define("super", superclass)

        methods = {}
        for method in node.methods:
            assert method.name is not None
            name = method.name.lexeme
            methods[name] = UserFunction(
                method, method_env, self, is_initializer=name == "init"
            )

        env.define(node.name.lexeme, LoxClass(node.name.lexeme, superclass, methods))

    def exec_Import(self, node: nodes.Import, env: Environment) -> None:
        module = self.loader.import_module(self, node)
        env.define(node.binding_name, module)
