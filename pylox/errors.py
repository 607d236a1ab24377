from dataclasses import dataclass
from typing import Any, List, Optional

from pylox.tokens import Token, TokenType


class LoxError(Exception):
    """Base class for every error the Lox toolchain reports."""


class ScanError(LoxError):
    """Raised when the source text cannot be split into tokens."""
    def __init__(self, line: int, column: int, message: str):
        super().__init__(f"[line {line}] Error: {message}")
        self.line = line
        self.column = column
        self.message = message


class ParseError(LoxError):
    """A single syntax diagnostic, anchored at the offending token."""
    def __init__(self, token: Token, position: int, message: str):
        if token.type == TokenType.EOF:
            where = ' at end'
        else:
            where = f" at '{token.lexeme}'"
        super().__init__(f"[line {token.line}] Error{where}: {message}")
        self.token = token
        self.position = position
        self.message = message


class ParseErrors(LoxError):
    """Raised by the parser once all diagnostics for a program are collected."""
    def __init__(self, errors: List[ParseError]):
        super().__init__('\n'.join(str(e) for e in errors))
        self.errors = errors


class LoxRuntimeError(LoxError):
    """Name resolution failure: reading or assigning an undefined variable."""
    def __init__(self, token: Token, message: str):
        super().__init__(f"{message}\n[line {token.line}]")
        self.token = token
        self.name = token.lexeme
        self.message = message


class InterpreterError(LoxError):
    """Well-formed program, bad runtime types: operands, callee or arity."""
    def __init__(self, token: Optional[Token], message: str):
        line = f"\n[line {token.line}]" if token is not None else ''
        super().__init__(f"{message}{line}")
        self.token = token
        self.message = message


class StackDepthError(InterpreterError):
    """Raised when nested calls exceed the interpreter's call-depth ceiling."""


@dataclass
class ReturnSignal:
    """Result of executing a `return` statement.

    Threaded back through statement execution until the enclosing
    function call unwraps it.
    """
    value: Any
