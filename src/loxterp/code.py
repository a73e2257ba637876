from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set

from . import nodes
from .module_info import ModuleInfo
from .parser import Parser
from .resolver import Resolver
from .scanner import Scanner
from .tokens import Token

logger = logging.getLogger(__name__)

TOO_DEEP = "Too much nesting."


class ModuleCode:
    """
    One compiled unit of Lox source.

    Holds:
      - the token list
      - the parsed statements
      - the resolver's scope table (expression -> hop count)
      - the global constant names as of the end of this unit

    Source nested deeper than the host stack allows is reported as a static
    error ("Too much nesting.") instead of crashing the pipeline.

    Resolution is skipped when lexing or parsing reported an error, and `ok`
    is False whenever any static error was reported for this unit: such a
    unit must never be executed.
    """

    def __init__(
        self,
        source: str,
        module_info: ModuleInfo,
        filename: str = "<lox>",
        *,
        known_globals: Iterable[str] = (),
        global_constants: Optional[Set[str]] = None,
    ):
        self.source = source
        self.filename = filename
        self.module_info = module_info

        errors_before = module_info.error_count
        self.tokens: List[Token] = Scanner(source, module_info).scan_tokens()
        parser = Parser(self.tokens, module_info)
        try:
            self.statements: List[nodes.Stmt] = parser.parse()
        except RecursionError:
            self.statements = []
            module_info.error(parser.current_token, TOO_DEEP)
        self.locals: Dict[nodes.Expr, int] = {}
        self.global_constants: Set[str] = set(global_constants or ())

        if module_info.error_count > errors_before:
            logger.debug("%s: syntax errors, skipping resolution", filename)
        else:
            resolver = Resolver(
                module_info,
                known_globals=known_globals,
                global_constants=self.global_constants,
            )
            try:
                self.locals = resolver.resolve(self.statements)
            except RecursionError:
                self.locals = {}
                module_info.error(self.tokens[-1].line, TOO_DEEP)

        self.error_count = module_info.error_count - errors_before

    @property
    def ok(self) -> bool:
        return self.error_count == 0
