"""Tree-walking interpreter for the Lox language.

The interpreter executes the statement list produced by `pylox.parser`.
Statements are run for effect by `execute`, expressions are reduced to
values by `evaluate`; both dispatch on the node class.

There is exactly one current scope (`self.environment`) at any time. It
only changes on block entry and function calls, and `execute_block`
restores the previous scope on every way out, including when an error
is propagating. Errors are never caught here otherwise: they travel up to
whoever called `interpret`.

A `return` statement does not raise. `execute` hands a `ReturnSignal`
back up through the enclosing blocks and loops until the function call
that owns it unwraps the value.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Expr, Binary, Grouping, Literal, Unary, Variable, Assign, Logical, Call,
    Stmt, Expression, Print, Var, Block, If, While, Function, Return,
)
from .callables import LoxCallable, LoxFunction, NativeFunction, default_natives
from .environment import Environment
from .errors import InterpreterError, LoxError, ReturnSignal, StackDepthError
from .parser import parse_program
from .tokens import Token, TokenType
from .values import NIL, is_number, is_truthy, to_string, type_name, values_equal

DEFAULT_MAX_CALL_DEPTH = 200
# Host frames a single Lox call may take, nested blocks and loops included.
FRAMES_PER_CALL = 30
RECURSION_LIMIT_CAP = 20000


def divide(a: float, b: float) -> float:
    """IEEE-754 division; Python raises on a zero divisor instead."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


class Interpreter:
    """Core interpreter that executes Lox statements."""
    def __init__(
        self,
        natives: Optional[Dict[str, NativeFunction]] = None,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
        out: Optional[TextIO] = None,
    ):
        self.globals = Environment()
        self.environment = self.globals
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.last_call: Optional[Token] = None
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        for native in default_natives():
            self.define_native(native)
        if natives:
            for name, native in natives.items():
                self.globals.define(name, native)

    def debug(self, level: int, msg: str):
        if self.debug_level >= level and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def define_native(self, native: NativeFunction):
        self.globals.define(native.name, native)

    # Public API
    def run(self, statements: List[Stmt]):
        """Interpret a whole program, then release the debug trace file."""
        try:
            self.interpret(statements)
        finally:
            self.close()

    def interpret(self, statements: List[Stmt]):
        self.debug(1, f"interpret {len(statements)} statement(s)")
        previous_limit = sys.getrecursionlimit()
        wanted = min(previous_limit + self.max_call_depth * FRAMES_PER_CALL, RECURSION_LIMIT_CAP)
        if wanted > previous_limit:
            sys.setrecursionlimit(wanted)
        try:
            for stmt in statements:
                # A top-level return (only reachable from a loaded AST) ends the program.
                if isinstance(self.execute(stmt), ReturnSignal):
                    break
        except RecursionError:
            self.debug(1, 'error: host recursion limit reached')
            raise StackDepthError(self.last_call, 'Stack overflow.') from None
        except LoxError as e:
            self.debug(1, f"error: {type(e).__name__}: {e}")
            raise
        finally:
            sys.setrecursionlimit(previous_limit)
            self.last_call = None
        self.debug(1, 'finished')

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Optional[ReturnSignal]:
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                result = self.execute(stmt)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        finally:
            self.environment = previous

    def execute(self, stmt: Stmt) -> Optional[ReturnSignal]:
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)
            return None
        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expression)
            print(to_string(value), file=self.out)
            return None
        if isinstance(stmt, Var):
            value = self.evaluate(stmt.initializer) if stmt.initializer is not None else NIL
            self.environment.define(stmt.name.lexeme, value)
            self.debug(2, f"define {stmt.name.lexeme} = {to_string(value)}")
            return None
        if isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self.environment))
        if isinstance(stmt, If):
            truthy = is_truthy(self.evaluate(stmt.condition))
            self.debug(3, f"if condition -> {truthy}")
            if truthy:
                return self.execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None
        if isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                result = self.execute(stmt.body)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(stmt, Function):
            function = LoxFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, function)
            self.debug(2, f"define function {stmt.name.lexeme}/{function.arity()}")
            return None
        if isinstance(stmt, Return):
            value = self.evaluate(stmt.value) if stmt.value is not None else NIL
            return ReturnSignal(value)
        raise NotImplementedError(f"execute: unexpected node type {type(stmt)}")

    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        if isinstance(expr, Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value
        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)
        if isinstance(expr, Unary):
            right = self.evaluate(expr.right)
            if expr.operator.type == TokenType.BANG:
                return not is_truthy(right)
            if expr.operator.type == TokenType.MINUS:
                if not is_number(right):
                    raise InterpreterError(expr.operator, f"Operand must be a number, got {type_name(right)}.")
                return -right
            raise InterpreterError(expr.operator, f"Unsupported unary operator {expr.operator.lexeme}.")
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self.apply_binary_op(expr.operator, left, right)
        if isinstance(expr, Call):
            callee = self.evaluate(expr.callee)
            arguments = [self.evaluate(argument) for argument in expr.arguments]
            return self.call_function(callee, arguments, expr.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr)}")

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise InterpreterError(paren, f"Can only call functions, got {type_name(callee)}.")
        if len(arguments) != callee.arity():
            raise InterpreterError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.call_depth >= self.max_call_depth:
            raise StackDepthError(paren, 'Stack overflow.')
        self.call_depth += 1
        self.last_call = paren
        self.debug(3, f"call {callee!r} depth={self.call_depth}")
        try:
            result = callee.call(self, arguments)
        finally:
            self.call_depth -= 1
        self.debug(3, f"return {to_string(result)} from {callee!r}")
        return result

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return values_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not values_equal(a, b)
        if op == TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise InterpreterError(
                operator,
                f"Operands must be two numbers or two strings, got {type_name(a)} and {type_name(b)}.",
            )
        if not (is_number(a) and is_number(b)):
            raise InterpreterError(operator, f"Operands must be numbers, got {type_name(a)} and {type_name(b)}.")
        if op == TokenType.MINUS:
            return a - b
        if op == TokenType.STAR:
            return a * b
        if op == TokenType.SLASH:
            return divide(a, b)
        if op == TokenType.GREATER:
            return a > b
        if op == TokenType.GREATER_EQUAL:
            return a >= b
        if op == TokenType.LESS:
            return a < b
        if op == TokenType.LESS_EQUAL:
            return a <= b
        raise InterpreterError(operator, f"Unknown operator {operator.lexeme}.")


def run_program(source: str, **options: Any) -> Interpreter:
    """Convenience function to scan, parse and run a Lox program from source.

    Keyword options are passed to the Interpreter constructor. Returns the
    interpreter so callers can inspect its global scope.
    """
    statements = parse_program(source)
    interpreter = Interpreter(**options)
    interpreter.run(statements)
    return interpreter
