"""Native functions available to every Lox program.

Each native is a callable of signature (interpreter, args: list[LoxValue]) -> LoxValue,
registered as a global before any user code runs.
"""
from __future__ import annotations

import time as _time
from typing import TYPE_CHECKING

from .types import LoxValue, lox_number

if TYPE_CHECKING:
    from .runtime import Interpreter


def _clock(interp: Interpreter, args: list[LoxValue]) -> LoxValue:
    """Seconds since the epoch. The one time-varying built-in."""
    return lox_number(_time.time())


NATIVES = {
    "clock": (0, _clock),
}


def install_natives(interp: Interpreter):
    for name, (arity, fn) in NATIVES.items():
        interp.define_native(name, arity, fn)
