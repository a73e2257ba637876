from .builtins import install_builtins, make_builtins
from .module_loader import ModuleLoader

__all__ = [
    "ModuleLoader",
    "install_builtins",
    "make_builtins",
]
