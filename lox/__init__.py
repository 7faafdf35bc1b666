# Lox: a tree-walking interpreter for a small class-based scripting language.
__version__ = "0.1.0"

import logging

from .runtime import Interpreter, Completed, RuntimeFailure
from .errors import LoxRuntimeError, ErrorReporter
from .types import LoxValue, LoxType
from .driver import Lox

logging.getLogger(__name__).addHandler(logging.NullHandler())
