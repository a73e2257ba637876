from __future__ import annotations

from typing import Any

from .tokens import Token


class LoxRuntimeError(Exception):
    """A language-level runtime fault, reported against the offending token."""

    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ControlFlowSignal(BaseException):
    """Internal non-user exceptions used for control flow (return/break/continue)."""


class ReturnSignal(ControlFlowSignal):
    def __init__(self, value: Any):
        self.value = value


class BreakSignal(ControlFlowSignal):
    pass


class ContinueSignal(ControlFlowSignal):
    pass
