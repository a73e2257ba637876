from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from .common import LoxRuntimeError
from .tokens import Token


class Environment:
    """
    One lexical scope: a name -> value mapping plus a link to the enclosing scope.

    Environments are shared by reference. A closure keeps the environment it was
    created in (and so every ancestor) alive, and every closure over the same
    environment sees the others' writes.
    """

    __slots__ = ("values", "enclosing")

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing = enclosing

    def __repr__(self) -> str:
        return f"<Environment {sorted(self.values)} depth={self.depth()}>"

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def depth(self) -> int:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return depth

    def define(self, name: str, value: Any) -> None:
        self.values[name] = value

    def load(self, name: Token) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def store(self, name: Token, value: Any) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return value
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> "Environment":
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise RuntimeError(f"scope chain is shorter than resolved distance {distance}")
            env = env.enclosing
        return env

    def load_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def store_at(self, distance: int, name: Token, value: Any) -> Any:
        self.ancestor(distance).values[name.lexeme] = value
        return value
