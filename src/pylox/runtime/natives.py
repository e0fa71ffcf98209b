"""
Host-injected native functions, registered in the global environment before
any user code runs.
"""

import time
from typing import List

from .callables import NativeFunction
from .environment import Environment


def _clock() -> float:
    return time.time()


def native_functions() -> List[NativeFunction]:
    return [
        NativeFunction("clock", 0, _clock),
    ]


def define_natives(globals_env: Environment) -> None:
    for native in native_functions():
        globals_env.define(native.name, native)
