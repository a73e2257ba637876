from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from ..common import LoxRuntimeError
from ..functions import LoxModule
from ..module_info import ModuleInfo
from ..nodes import Import

if TYPE_CHECKING:
    from ..main import Interpreter

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".lox"


class ModuleLoader:
    """
    Import hook that runs Lox modules through child Interpreter instances.

    Modules are cached by resolved file path, so each distinct file is
    evaluated at most once per loader no matter how many units import it or
    under which alias. Child interpreters share their parent's loader.
    """

    def __init__(self, *, search_paths: Optional[Iterable[str | Path]] = None):
        self.search_paths: List[Path] = [Path(p) for p in (search_paths or ())]
        self.modules: Dict[Path, LoxModule] = {}

    def import_module(self, interpreter: "Interpreter", node: Import) -> LoxModule:
        name = node.module_name
        module_path = self._module_path(name, interpreter.filename)
        if module_path is None:
            raise LoxRuntimeError(node.name, f"Cannot find module '{name}'.")

        existing = self.modules.get(module_path)
        if existing is not None:
            logger.debug("module %r already loaded from %s", name, module_path)
            return existing

        try:
            source = module_path.read_text()
        except OSError as exc:
            raise LoxRuntimeError(
                node.name, f"Error reading module '{name}': {exc.strerror}."
            ) from exc

        logger.debug("loading module %r from %s", name, module_path)
        info = ModuleInfo(name, stream=interpreter.module_info.stream)
        child = type(interpreter)(info, stdout=interpreter.stdout, loader=self)
        module = LoxModule(name, str(module_path), child)

        # Registered before running so a circular import sees the partial module.
        self.modules[module_path] = module
        result = child.run(source, filename=str(module_path))
        if not result.executed:
            self.modules.pop(module_path, None)
            raise LoxRuntimeError(node.name, f"Module '{name}' has errors.")
        if result.error is not None:
            self.modules.pop(module_path, None)
            raise LoxRuntimeError(node.name, f"Module '{name}' failed to run.")
        return module

    def _candidates(self, importer: Optional[str]) -> List[Path]:
        dirs: List[Path] = []
        if importer is not None and not importer.startswith("<"):
            dirs.append(Path(importer).resolve().parent)
        dirs.extend(self.search_paths)
        dirs.append(Path.cwd())
        return dirs

    def _module_path(self, name: str, importer: Optional[str]) -> Optional[Path]:
        relative = name.replace("\\", "/")
        if not relative.endswith(SOURCE_SUFFIX):
            relative += SOURCE_SUFFIX

        for directory in self._candidates(importer):
            candidate = directory / relative
            if candidate.is_file():
                return candidate.resolve()
        return None
