"""Evaluation pass context and end-of-pass capture.

Every pass gets one PassContext. Namespace entry, alias resolution and the
definition operators all bind names through it, so at the end of the pass the
context holds exactly the local state the pass introduced. `commit` merges that
state into the namespaces' persisted-locals slots; `discard` drops it and puts
the exports back as the pass found them, which is what happens when a pass is
aborted by an error.

A pass may enter more than one namespace (e.g. a buffer with two module forms).
Each namespace gets its own segment; re-entering a namespace resumes its
segment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from keel import Value
from keel.errors import KeelError
from keel.namespace import AliasBinding, Namespace

if TYPE_CHECKING:
    from keel.actions import ActionTable
    from keel.registry import NamespaceRegistry

logger = logging.getLogger(__name__)


@dataclass
class Segment:
    """The part of a pass spent in one namespace."""

    namespace: Namespace
    bindings: dict[str, Value] = field(default_factory=dict)
    aliases: dict[str, AliasBinding] = field(default_factory=dict)
    # Exports as they were when the pass first entered the namespace
    snapshot: dict[str, Value] = field(default_factory=dict)
    open: bool = True

    def lookup(self, name: str) -> Value:
        """Resolve `name` against pass locals, then exports, then persisted locals.

        Once the pass is over only the namespace is consulted, so functions
        defined in an earlier pass see later redefinitions. Raises KeyError
        when the name is bound nowhere.
        """
        if self.open and name in self.bindings:
            return self.bindings[name]
        ns = self.namespace
        if name in ns.exports:
            return ns.exports[name]
        return ns.locals[name]


class PassContext:
    """Bindings accumulated by one evaluation pass.

    `registry` and `actions` are the collaborators namespace entry needs; the
    interpreter supplies its own.
    """

    def __init__(
        self,
        registry: Optional[NamespaceRegistry] = None,
        actions: Optional[ActionTable] = None,
    ):
        self.registry = registry
        self.actions = actions
        self._segments: list[Segment] = []
        self._current: Optional[Segment] = None
        self.closed = False

    @property
    def namespace(self) -> Optional[Namespace]:
        return self._current.namespace if self._current is not None else None

    @property
    def segment(self) -> Optional[Segment]:
        return self._current

    @property
    def segments(self) -> list[Segment]:
        return list(self._segments)

    def enter(self, namespace: Namespace) -> Segment:
        """Make `namespace` the target of subsequent bindings."""
        if self.closed:
            raise KeelError("Cannot enter a namespace in a finished pass")
        for seg in self._segments:
            if seg.namespace is namespace:
                self._current = seg
                return seg
        seg = Segment(namespace, snapshot=dict(namespace.exports))
        self._segments.append(seg)
        self._current = seg
        return seg

    def _require_segment(self) -> Segment:
        if self.closed:
            raise KeelError("Cannot bind locals in a finished pass")
        if self._current is None:
            raise KeelError("No namespace has been entered in this pass")
        return self._current

    def bind(self, name: str, value: Value) -> Value:
        self._require_segment().bindings[name] = value
        return value

    def bind_alias(self, binding: AliasBinding) -> Value:
        seg = self._require_segment()
        seg.bindings[binding.alias] = binding.value
        seg.aliases[binding.alias] = binding
        return binding.value

    def lookup(self, name: str) -> Value:
        if self._current is None:
            raise KeyError(name)
        return self._current.lookup(name)

    def close(self) -> None:
        self.closed = True
        for seg in self._segments:
            seg.open = False


def capture_locals(context: PassContext) -> dict[str, Value]:
    """Local bindings of the pass for its current namespace.

    Returns an empty mapping when the context can no longer be inspected; the
    pass still succeeds, it only loses incremental state.
    """
    if context.closed or context.segment is None:
        logger.warning("Pass context unavailable; skipping local-state capture")
        return {}
    return dict(context.segment.bindings)


def _persist(segment: Segment, captured: dict[str, Value]) -> None:
    ns = segment.namespace
    ns.locals.update(captured)
    for name, value in captured.items():
        binding = segment.aliases.get(name)
        # Only aliases whose local still holds the resolved value stay restorable
        if binding is not None and binding.value is value:
            ns.aliases[name] = binding
        else:
            ns.aliases.pop(name, None)


def commit(context: PassContext) -> None:
    """Persist every segment's locals onto its namespace and close the context."""
    if context.closed:
        logger.warning("Pass context already closed; nothing to commit")
        return
    for seg in context.segments:
        context.enter(seg.namespace)
        captured = capture_locals(context)
        _persist(seg, captured)
        logger.debug("Captured %d locals into %s", len(captured), seg.namespace.name)
    context.close()


def discard(context: PassContext) -> None:
    """Close the context, rolling every entered namespace's exports back.

    Persisted locals are never written before `commit`, so they need no undo.
    """
    if not context.closed:
        logger.debug("Discarding pass context (%d segments)", len(context.segments))
        for seg in context.segments:
            exports = seg.namespace.exports
            exports.clear()
            exports.update(seg.snapshot)
    context.close()
