"""Resolution of dotted symbols such as `core.inc` or `os.path.join`.

The first segment is looked up like any other symbol; every later segment
walks into the value found so far: namespace exports for namespaces, keys for
tables, attributes for everything else.
"""
from collections.abc import Mapping
from typing import Any

from keel.errors import UnboundSymbolError
from keel.namespace import Namespace
from keel.types.environment import Environment
from keel.types.symbol import Symbol


def get_member(obj: Any, key: Any) -> Any:
    """Step one segment into `obj`."""
    if isinstance(obj, Namespace):
        if key not in obj.exports:
            raise UnboundSymbolError(f"{obj.name} does not export {key}")
        return obj.exports[key]
    if isinstance(obj, Mapping):
        return obj[key]
    if isinstance(key, int):
        return obj[key]
    return getattr(obj, key)


def resolve_path(env: Environment, path: Symbol) -> Any:
    first, *rest = path.parts
    obj = env.lookup(Symbol(first))
    for attr in rest:
        obj = get_member(obj, attr)
    return obj
