# Lox language package
# This package provides a scanner, parser and tree-walking interpreter for Lox.
from .errors import (
    LoxError, ScanError, ParseError, ParseErrors, LoxRuntimeError,
    InterpreterError, StackDepthError,
)
from .interpreter import run_program, Interpreter
from .parser import parse_program, Parser
from .scanner import scan_tokens

__all__ = [
    'run_program',
    'parse_program',
    'scan_tokens',
    'Interpreter',
    'Parser',
    'LoxError',
    'ScanError',
    'ParseError',
    'ParseErrors',
    'LoxRuntimeError',
    'InterpreterError',
    'StackDepthError',
]
