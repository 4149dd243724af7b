"""Lexical environments for the keel front end.

An Environment stores bindings of Symbols to evaluated values and supports
nested scopes via an `outer` link. The root of every chain belongs to an
evaluation pass: once the lexical chain is exhausted, lookups fall through to
the pass segment (pass locals, namespace exports, persisted locals) and finally
to the builtin table.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional, TYPE_CHECKING

from keel import Value
from keel.errors import InvalidSymbolError, UnboundSymbolError
from keel.types.symbol import Symbol

if TYPE_CHECKING:
    from keel.context import PassContext, Segment


class Environment:
    """Hierarchical mapping from Symbols to values, rooted in a pass segment."""

    __slots__ = ("vars", "outer", "context", "segment", "builtins")

    def __init__(
        self,
        outer: Optional[Environment] = None,
        context: Optional[PassContext] = None,
        builtins: Optional[dict[str, Value]] = None,
    ):
        self.vars: dict[Symbol, Value] = {}
        self.outer: Environment | None = outer
        # Children share the root's context, segment and builtins
        segment = None
        if outer is not None:
            context = context if context is not None else outer.context
            builtins = builtins if builtins is not None else outer.builtins
            segment = outer.segment
        elif context is not None:
            segment = context.segment
        self.context: PassContext | None = context
        self.segment: Segment | None = segment
        self.builtins: dict[str, Value] = builtins if builtins is not None else {}

    def child(self) -> Environment:
        return Environment(outer=self)

    def define(self, name: Symbol, value: Value) -> None:
        """Bind `name` to `value` in this frame.

        Raises InvalidSymbolError if `name` is not a plain Symbol.
        """
        if not isinstance(name, Symbol) or name.is_dotted:
            raise InvalidSymbolError(f"Cannot bind {name!r} as a local name")
        self.vars[name] = value

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol) -> Value:
        """Look up the value bound to `name`.

        Order of resolution:
        1) Lexical chain (let bindings, fn parameters)
        2) Pass segment: pass locals, namespace exports, persisted locals
        3) Builtins
        Raises UnboundSymbolError if not found.
        """
        env = self.find(name)
        if env is not None:
            return env.vars[name]
        segment = self.segment
        # While the pass runs, follow its current namespace across (module ...) switches
        if self.context is not None and not self.context.closed and self.context.segment is not None:
            segment = self.context.segment
        if segment is not None:
            try:
                return segment.lookup(name.id)
            except KeyError:
                pass
        if name.id in self.builtins:
            return self.builtins[name.id]
        raise UnboundSymbolError(f"Cannot lookup unbound symbol {name}")

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v!r}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            chain = []
            env = self
            while env is not None:
                with StringIO() as frame:
                    env._write_vars(frame)
                    chain.append(frame.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
