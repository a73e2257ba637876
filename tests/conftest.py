from __future__ import annotations

import io
import sys
from dataclasses import dataclass
from pathlib import Path

# Allow importing the package when running plain `pytest` without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

import pytest

from loxterp import Interpreter, ModuleInfo, RunResult


@dataclass
class LoxRun:
    result: RunResult
    stdout: str
    stderr: str

    @property
    def lines(self) -> list[str]:
        return self.stdout.splitlines()

    @property
    def errors(self) -> list[str]:
        return self.stderr.splitlines()


@pytest.fixture
def run_lox():
    def _run(source: str, *, filename: str = "<test>", search_paths=None) -> LoxRun:
        out = io.StringIO()
        err = io.StringIO()
        interpreter = Interpreter(
            ModuleInfo(stream=err), stdout=out, search_paths=search_paths
        )
        result = interpreter.run(source, filename=filename)
        return LoxRun(result, out.getvalue(), err.getvalue())

    return _run


@pytest.fixture
def lox_output(run_lox):
    """Run a program that must succeed and return its printed lines."""

    def _run(source: str, **kwargs) -> list[str]:
        run = run_lox(source, **kwargs)
        assert run.stderr == ""
        run.result.raise_for_error()
        return run.lines

    return _run
