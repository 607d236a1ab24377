from typing import Any, Dict, Optional

from pylox.errors import LoxRuntimeError
from pylox.tokens import Token


class Environment:
    """A scope mapping variable names to values, chained to its enclosing scope.

    Blocks and function calls each get a fresh Environment whose
    `enclosing` link points outward. A closure holds a reference to the
    Environment it was defined in, so that scope outlives the block that
    created it and stays shared with every other holder.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def depth(self) -> int:
        """Number of enclosing links between this scope and the global scope."""
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return depth

    def define(self, name: str, value: Any):
        # Redefinition in the same scope simply rebinds.
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
