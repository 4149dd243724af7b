from __future__ import annotations

from typing import Optional

from keel import Value
from keel.actions import ActionTable, AliasRequests, resolve_aliases
from keel.context import PassContext
from keel.namespace import Namespace
from keel.registry import NamespaceRegistry


def enter_namespace(
    context: PassContext,
    registry: NamespaceRegistry,
    actions: ActionTable,
    name: str,
    requests: Optional[AliasRequests] = None,
    base: Value = None,
) -> Namespace:
    """
    Namespace entry point, called first by every source unit.

    - Creates the namespace on first use (seeded from `base`), otherwise
      returns the existing one unchanged.
    - Makes it the pass's current namespace and binds `*module*` and
      `*module-name*` as pass locals.
    - Resolves explicit alias requests and restores persisted aliases.
    """
    ns = registry.ensure(name, base)
    context.enter(ns)
    context.bind("*module-name*", ns.name)
    context.bind("*module*", ns)
    resolve_aliases(context, requests, actions)
    return ns
