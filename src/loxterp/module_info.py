from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .tokens import Token, TokenType

if TYPE_CHECKING:
    from .common import LoxRuntimeError

MAIN_MODULE = "__main__"


class ModuleInfo:
    """
    Diagnostic sink and identity of one compilation unit.

    `had_error` gates the pipeline (a unit with lexical, syntax or resolution
    errors never runs); `had_runtime_error` is the final disposition used by
    the driver. Both survive across pipeline stages and are cleared with
    `reset()` between independent REPL inputs.
    """

    def __init__(
        self,
        name: str = MAIN_MODULE,
        *,
        stream: TextIO | None = None,
    ):
        self.name = name
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        # static diagnostics reported over this object's lifetime
        self.error_count = 0

    @property
    def is_main(self) -> bool:
        return self.name == MAIN_MODULE

    def reset(self) -> None:
        self.had_error = False
        self.had_runtime_error = False

    def error(self, where: Token | int, message: str) -> None:
        if isinstance(where, Token):
            if where.type is TokenType.EOF:
                self._report(where.line, " at end", message)
            else:
                self._report(where.line, f" at '{where.lexeme}'", message)
        else:
            self._report(where, "", message)

    def runtime_error(self, error: "LoxRuntimeError") -> None:
        self.report_runtime_error(error.message, error.token.line)

    def report_runtime_error(self, message: str, line: int) -> None:
        if self.is_main:
            self._write(f"{message}\n[line {line}]")
        else:
            self._write(f"{message}\n[line {line}] in module '{self.name}'")
        self.had_runtime_error = True

    def _report(self, line: int, where: str, message: str) -> None:
        if self.is_main:
            self._write(f"[line {line}] Error{where}: {message}")
        else:
            self._write(f"In module '{self.name}' on [line {line}] Error{where}: {message}")
        self.had_error = True
        self.error_count += 1

    def _write(self, text: str) -> None:
        # Resolve the default lazily so pytest's capsys sees the output.
        stream = self.stream if self.stream is not None else sys.stderr
        print(text, file=stream)
