from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from . import nodes
from .common import LoxRuntimeError
from .scopes import Environment
from .tokens import Token

if TYPE_CHECKING:
    from .main import Interpreter


class LoxCallable:
    """Anything a call expression can invoke."""

    __slots__ = ()

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        raise NotImplementedError


class NativeFunction(LoxCallable):
    __slots__ = ("name", "_arity", "_fn")

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self._fn = fn

    def __repr__(self) -> str:
        return f"<NativeFunction {self.name}>"

    def __str__(self) -> str:
        return "<native fn>"

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self._fn(*arguments)


class UserFunction(LoxCallable):
    """
    A function declared in Lox source: the declaration plus the environment it
    closed over. Lambdas are anonymous functions (`name` is None).

    Calls always run on the interpreter that defined the function, so a
    function imported from another module keeps seeing that module's globals.
    """

    __slots__ = ("declaration", "closure", "interpreter", "is_initializer")

    def __init__(
        self,
        declaration: nodes.Function,
        closure: Environment,
        interpreter: "Interpreter",
        is_initializer: bool = False,
    ):
        self.declaration = declaration
        self.closure = closure
        self.interpreter = interpreter
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        if self.declaration.name is None:
            return "lambda"
        return self.declaration.name.lexeme

    def __repr__(self) -> str:
        return f"<UserFunction {self.name}>"

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: "LoxInstance") -> "UserFunction":
        environment = Environment(self.closure)
        environment.define("this", instance)
        return UserFunction(self.declaration, environment, self.interpreter, self.is_initializer)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self.interpreter._call_user_function(self, arguments)


class LoxClass(LoxCallable):
    __slots__ = ("name", "superclass", "methods")

    def __init__(
        self,
        name: str,
        superclass: Optional["LoxClass"],
        methods: Dict[str, UserFunction],
    ):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def __repr__(self) -> str:
        return f"<LoxClass {self.name}>"

    def __str__(self) -> str:
        return self.name

    def find_method(self, name: str) -> Optional[UserFunction]:
        klass: Optional[LoxClass] = self
        while klass is not None:
            method = klass.methods.get(name)
            if method is not None:
                return method
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return 0 if initializer is None else initializer.arity()

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance


class LoxInstance:
    __slots__ = ("klass", "fields")

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<LoxInstance of {self.klass.name}>"

    def __str__(self) -> str:
        return f"{self.klass.name} instance"

    def get(self, name: Token) -> Any:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> Any:
        self.fields[name.lexeme] = value
        return value


class LoxModule:
    """An imported unit; its properties are the globals of the interpreter that ran it."""

    __slots__ = ("name", "path", "interpreter")

    def __init__(self, name: str, path: str, interpreter: "Interpreter"):
        self.name = name
        self.path = path
        self.interpreter = interpreter

    def __repr__(self) -> str:
        return f"<LoxModule {self.name} from {self.path!r}>"

    def __str__(self) -> str:
        return f"<module {self.name}>"

    def get(self, name: Token) -> Any:
        members = self.interpreter.globals
        if name.lexeme not in members:
            raise LoxRuntimeError(name, f"Module '{self.name}' has no member '{name.lexeme}'.")
        return members.values[name.lexeme]

    def set(self, name: Token, value: Any) -> Any:
        members = self.interpreter.globals
        if name.lexeme not in members:
            raise LoxRuntimeError(name, f"Module '{self.name}' has no member '{name.lexeme}'.")
        return members.store(name, value)
