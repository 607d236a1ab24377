from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from pylox.ast import Function
from pylox.environment import Environment
from pylox.errors import ReturnSignal
from pylox.values import NIL

if TYPE_CHECKING:
    from pylox.interpreter import Interpreter


class LoxCallable:
    """Capability shared by every value that can appear as a callee."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """A user-defined function together with the scope it was declared in."""
    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        # Parameters live in a scope enclosed by the closure, not by the caller.
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)
        result = interpreter.execute_block(self.declaration.body, environment)
        if isinstance(result, ReturnSignal):
            return result.value
        return NIL

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


@dataclass
class NativeFunction(LoxCallable):
    """A host function exposed to Lox programs under a global name.

    `fn` receives the evaluated argument list and must return a Lox
    value. Natives never touch the interpreter's scopes.
    """
    name: str
    native_arity: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.native_arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return '<native fn>'


def _clock(args: List[Any]) -> float:
    return time.time()


def default_natives() -> List[NativeFunction]:
    return [NativeFunction('clock', 0, _clock)]
