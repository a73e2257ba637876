"""loxterp: a tree-walking interpreter for the Lox scripting language."""

from .common import LoxRuntimeError
from .core import LoxStaticError, RunResult
from .main import Interpreter
from .module_info import ModuleInfo
from .parser import Parser
from .printer import AstPrinter
from .resolver import Resolver
from .scanner import Scanner, scan

__version__ = "0.1.0"

__all__ = [
    "AstPrinter",
    "Interpreter",
    "LoxRuntimeError",
    "LoxStaticError",
    "ModuleInfo",
    "Parser",
    "Resolver",
    "RunResult",
    "Scanner",
    "scan",
]
