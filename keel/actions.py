"""Alias actions and the alias resolver.

An alias request table maps an action name to `{alias: target}` pairs, e.g.::

    {"require": {"core": "app.core"}, "import": {"os": "os"}}

Every action name must have a handler registered in an ActionTable. Handlers
take the target name and return the value the alias is bound to.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, Dict, Iterator, Optional

from keel import Value
from keel.context import PassContext
from keel.definitions import check_identifier
from keel.errors import ConfigurationError, KeelTypeError
from keel.namespace import AliasBinding
from keel.types.symbol import Symbol

logger = logging.getLogger(__name__)

ActionHandler = Callable[[str], Value]
AliasRequests = Mapping[str, Mapping[str, str]]


def _to_name(x) -> str:
    if isinstance(x, Symbol):
        return x.id
    if isinstance(x, str):
        return x
    raise KeelTypeError(f"Expected a name or symbol, got: {x!r}")


class ActionTable:
    """Registered alias actions, looked up by name at resolution time."""

    def __init__(self, handlers: Optional[Dict[str, ActionHandler]] = None):
        self._handlers: Dict[str, ActionHandler] = dict(handlers or {})

    def register(self, name: str, handler: ActionHandler) -> None:
        if not callable(handler):
            raise KeelTypeError(f"Handler for action '{name}' is not callable")
        self._handlers[name] = handler

    def get(self, name: str) -> Optional[ActionHandler]:
        return self._handlers.get(name)

    def handler(self, name: str) -> ActionHandler:
        h = self._handlers.get(name)
        if h is None:
            raise ConfigurationError(f"No handler registered for alias action '{name}'")
        return h

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self._handlers)


def normalize_requests(requests: Optional[Mapping]) -> list[tuple[str, str, str]]:
    """Flatten a request table into (action, alias, target) triples."""
    triples: list[tuple[str, str, str]] = []
    if not requests:
        return triples
    if not isinstance(requests, Mapping):
        raise KeelTypeError(f"Alias requests must be a table, got: {requests!r}")
    for action, pairs in requests.items():
        if not isinstance(pairs, Mapping):
            raise KeelTypeError(f"Aliases for '{_to_name(action)}' must be a table")
        for alias, target in pairs.items():
            triples.append((_to_name(action), check_identifier(_to_name(alias)), _to_name(target)))
    return triples


def resolve_aliases(
    context: PassContext,
    requests: Optional[AliasRequests],
    actions: ActionTable,
) -> dict[str, Value]:
    """Bind the aliases of the namespace the pass has entered.

    Explicit requests always invoke their action. Aliases persisted by earlier
    passes and not requested again are restored from the captured locals
    without invoking anything.
    """
    ns = context.namespace
    triples = normalize_requests(requests)
    # Every action must be resolvable before any handler runs
    handlers = {action: actions.handler(action) for action, _, _ in triples}

    resolved: dict[str, Value] = {}
    for action, alias, target in triples:
        value = handlers[action](target)
        context.bind_alias(AliasBinding(alias, action, target, value))
        resolved[alias] = value
        logger.debug("%s: %s -> (%s %s)", ns.name, alias, action, target)

    for alias, binding in ns.aliases.items():
        if alias in resolved or alias not in ns.locals:
            continue
        value = ns.locals[alias]
        context.bind_alias(AliasBinding(alias, binding.action, binding.target, value))
        resolved[alias] = value
        logger.debug("%s: restored %s from previous pass", ns.name, alias)
    return resolved
