from __future__ import annotations
import sys


class Symbol:
    __slots__ = ("id",)

    def __init__(self, name: str):
        # Intern to ensure fast equality/hash and reduce memory
        self.id = sys.intern(name)

    @property
    def is_dotted(self) -> bool:
        """True for path symbols like `core.inc` (but not for `.` itself)."""
        return "." in self.id.strip(".")

    @property
    def parts(self) -> list[str]:
        return self.id.split(".")

    def __eq__(self, other: Symbol) -> bool:
        return isinstance(other, Symbol) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id


class Vector(list):
    """Bracketed `[a b c]` form; evaluates element-wise instead of as a call."""

    __slots__ = ()

    def __repr__(self):
        return "[" + " ".join(repr(x) for x in self) + "]"
