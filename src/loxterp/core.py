from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, TextIO

from . import nodes
from .code import ModuleCode
from .common import LoxRuntimeError
from .lib import ModuleLoader, install_builtins
from .module_info import ModuleInfo
from .scopes import Environment

logger = logging.getLogger(__name__)

# Each Lox call costs about ten Python frames, each nesting level of source
# up to fifteen.
RECURSION_LIMIT = 20_000


def raise_recursion_limit(limit: int = RECURSION_LIMIT) -> None:
    if sys.getrecursionlimit() < limit:
        logger.debug("raising recursion limit to %d", limit)
        sys.setrecursionlimit(limit)


class LoxStaticError(Exception):
    """Raised by `RunResult.raise_for_error()` when a unit did not compile."""


@dataclass
class RunResult:
    code: ModuleCode
    module_info: ModuleInfo
    globals: Environment
    error: Optional[LoxRuntimeError] = None

    @property
    def ok(self) -> bool:
        return self.code.ok and self.error is None

    @property
    def executed(self) -> bool:
        return self.code.ok

    def raise_for_error(self) -> None:
        if not self.code.ok:
            raise LoxStaticError(
                f"{self.code.filename}: {self.code.error_count} static error(s)"
            )
        if self.error is not None:
            raise self.error


class InterpreterCore:
    def __init__(
        self,
        module_info: Optional[ModuleInfo] = None,
        *,
        stdout: Optional[TextIO] = None,
        search_paths: Optional[Iterable[str | Path]] = None,
        loader: Optional[ModuleLoader] = None,
    ):
        """
        module_info:
          - diagnostics sink and unit identity; a fresh `__main__` one by default
        stdout:
          - where `print` writes; `sys.stdout` at the time of printing by default
        search_paths:
          - extra directories searched for imports (ignored when `loader` is given)
        loader:
          - a shared ModuleLoader, so child interpreters reuse one module cache
        """
        raise_recursion_limit()
        self.module_info = module_info if module_info is not None else ModuleInfo()
        self.stdout = stdout
        self.loader = loader if loader is not None else ModuleLoader(search_paths=search_paths)

        self.globals = Environment()
        install_builtins(self.globals)

        # Resolver output accumulated over every unit run by this interpreter;
        # closures from earlier REPL lines still look their variables up here.
        self.locals: Dict[nodes.Expr, int] = {}
        self.global_constants: Set[str] = set()
        self.filename: Optional[str] = None

    # ----- run -----

    def compile(self, source: str, filename: str = "<lox>") -> ModuleCode:
        return ModuleCode(
            source,
            self.module_info,
            filename,
            known_globals=self.globals,
            global_constants=self.global_constants,
        )

    def execute(self, code: ModuleCode) -> RunResult:
        result = RunResult(code, self.module_info, self.globals)
        if not code.ok:
            logger.debug("%s: not executed, %d static error(s)", code.filename, code.error_count)
            return result

        self.global_constants = code.global_constants
        self.filename = code.filename
        self.locals.update(code.locals)
        result.error = self.interpret(code.statements)
        return result

    def run(self, source: str, filename: str = "<lox>") -> RunResult:
        """
        Compile and execute `source` against this interpreter's globals.

        Diagnostics go to `module_info`; the returned result says whether the
        unit compiled and whether it finished without a runtime error.
        """
        return self.execute(self.compile(source, filename))

    def interpret(self, statements: List[nodes.Stmt]) -> Optional[LoxRuntimeError]:
        try:
            for stmt in statements:
                self.exec_stmt(stmt, self.globals)
        except LoxRuntimeError as error:
            self.module_info.runtime_error(error)
            return error
        return None

    # ----- dispatch -----

    def exec_block(self, statements: Iterable[nodes.Stmt], env: Environment) -> None:
        for stmt in statements:
            self.exec_stmt(stmt, env)

    def exec_stmt(self, node: nodes.Stmt, env: Environment) -> None:
        m = getattr(self, f"exec_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Statement not supported: {node.__class__.__name__}")
        m(node, env)

    def eval_expr(self, node: nodes.Expr, env: Environment) -> Any:
        m = getattr(self, f"eval_{node.__class__.__name__}", None)
        if m is None:
            raise NotImplementedError(f"Expression not supported: {node.__class__.__name__}")
        return m(node, env)
