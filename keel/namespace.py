"""Namespace objects backing named modules.

A Namespace is created once per name and then found again on every later
evaluation pass. It carries two mapping surfaces:

- `exports` is the public name -> value table written by definition operators
  and read by anyone who requires the namespace.

- `locals` is the persisted-locals slot: the local bindings captured at the end
  of each successful pass, read back by the next pass.

`aliases` records which persisted locals came from alias resolution, so a later
pass can restore them without invoking the action again.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator

from keel import Value
from keel.errors import KeelTypeError


@dataclass(frozen=True)
class AliasBinding:
    """A local alias bound to the result of `action(target)` during one pass."""

    alias: str
    action: str
    target: str
    value: Value = field(compare=False, repr=False)


class Namespace:
    """The persistent object behind one named module."""

    __slots__ = ("_name", "exports", "locals", "aliases")

    def __init__(self, name: str, exports: dict[str, Value] | None = None):
        self._name = name
        self.exports: dict[str, Value] = dict(exports) if exports else {}
        self.locals: dict[str, Value] = {}
        self.aliases: dict[str, AliasBinding] = {}

    @property
    def name(self) -> str:
        return self._name

    def define(self, name: str, value: Value) -> Value:
        """Write `name` into the exports, replacing any previous value."""
        self.exports[name] = value
        return value

    def define_once(self, name: str, value: Value) -> Value:
        """Write `name` only if it is not exported yet; return the live value."""
        if name in self.exports:
            return self.exports[name]
        self.exports[name] = value
        return value

    def get(self, name: str, default: Value = None) -> Value:
        return self.exports.get(name, default)

    def __getitem__(self, name: str) -> Value:
        return self.exports[name]

    def __contains__(self, name: object) -> bool:
        return name in self.exports

    def __iter__(self) -> Iterator[str]:
        return iter(self.exports)

    def __repr__(self) -> str:
        return f"<Namespace {self._name}>"


def exports_from_base(base: Value) -> dict[str, Value]:
    """Initial exports for a namespace declared with a base value."""
    if base is None:
        return {}
    if isinstance(base, Namespace):
        return dict(base.exports)
    if isinstance(base, Mapping):
        return {str(k): v for k, v in base.items()}
    if isinstance(base, types.ModuleType):
        # Lazy import: loader is the only place that knows how to wrap modules
        from keel.loader import module_exports
        return module_exports(base)
    raise KeelTypeError(f"Cannot use {base!r} as a namespace base")
