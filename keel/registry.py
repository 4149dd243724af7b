from __future__ import annotations
import logging
import re
from typing import Dict, Iterator, List, Optional

from keel import Value
from keel.errors import NamespaceNameError
from keel.namespace import Namespace, exports_from_base

logger = logging.getLogger(__name__)

_SEGMENT = r"[A-Za-z_][A-Za-z0-9_\-!?*]*"
NAME_RE = re.compile(rf"{_SEGMENT}(?:\.{_SEGMENT})*\Z")


def check_name(name: str) -> str:
    if not isinstance(name, str) or not NAME_RE.match(name):
        raise NamespaceNameError(f"Invalid namespace name: {name!r}")
    return name


class NamespaceRegistry:
    """Table of live namespaces, at most one per dotted name.

    Entries are never removed; a namespace lives as long as the registry that
    owns it.
    """

    def __init__(self):
        self._namespaces: Dict[str, Namespace] = {}

    def get(self, name: str) -> Optional[Namespace]:
        return self._namespaces.get(name)

    def ensure(self, name: str, base: Value = None) -> Namespace:
        """Return the namespace registered as `name`, creating it on first use.

        `base` only seeds the exports of a namespace created by this call.
        """
        ns = self._namespaces.get(name)
        if ns is None:
            check_name(name)
            ns = Namespace(name, exports_from_base(base))
            self._namespaces[name] = ns
            logger.debug("Created namespace %s with %d base exports", name, len(ns.exports))
        return ns

    def names(self) -> List[str]:
        return list(self._namespaces)

    def all(self) -> Dict[str, Namespace]:
        return self._namespaces

    def __contains__(self, name: object) -> bool:
        return name in self._namespaces

    def __iter__(self) -> Iterator[Namespace]:
        return iter(self._namespaces.values())

    def __len__(self) -> int:
        return len(self._namespaces)
