from __future__ import annotations

import time
from typing import Dict

from ..functions import NativeFunction
from ..scopes import Environment


def _clock() -> float:
    return float(time.time())


def make_builtins() -> Dict[str, NativeFunction]:
    return {
        "clock": NativeFunction("clock", 0, _clock),
    }


def install_builtins(env: Environment) -> Environment:
    for name, fn in make_builtins().items():
        env.define(name, fn)
    return env
