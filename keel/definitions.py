"""Definition operators.

Each operator writes into the namespace the pass has entered and also binds the
name as a pass local, so later forms in the same pass (and, after capture, later
passes) see it without going through the exports.

Private variants (`private=True`) bind and persist the local only.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from keel import Form, Value
from keel.context import PassContext
from keel.errors import InvalidSymbolError, KeelError
from keel.namespace import Namespace
from keel.types.environment import Environment
from keel.types.lambda_fn import Lambda
from keel.types.symbol import Symbol

logger = logging.getLogger(__name__)

# No whitespace, delimiters or path dots; must not look like a :keyword
IDENTIFIER_RE = re.compile(r"[^\s()\[\]{}\"';,.:][^\s()\[\]{}\"';,.]*\Z")


def check_identifier(name: str | Symbol) -> str:
    if isinstance(name, Symbol):
        name = name.id
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise InvalidSymbolError(f"Invalid definition name: {name!r}")
    return name


def _target(context: PassContext) -> Namespace:
    if context.closed:
        raise KeelError("define in a finished pass")
    ns = context.namespace
    if ns is None:
        raise KeelError("define outside of a namespace; enter one first")
    return ns


def is_defined(context: PassContext, name: str | Symbol, private: bool = False) -> bool:
    name = check_identifier(name)
    ns = _target(context)
    if private:
        return name in context.segment.bindings or name in ns.locals
    return name in ns.exports


def define(context: PassContext, name: str | Symbol, value: Value, private: bool = False) -> Value:
    name = check_identifier(name)
    ns = _target(context)
    if not private:
        ns.define(name, value)
    return context.bind(name, value)


def define_once(context: PassContext, name: str | Symbol, value: Value, private: bool = False) -> Value:
    """Like `define`, but keep the existing value if `name` is already defined."""
    name = check_identifier(name)
    ns = _target(context)
    if not is_defined(context, name, private):
        return define(context, name, value, private=private)
    logger.debug("defonce %s/%s already defined; keeping it", ns.name, name)
    if private:
        bindings = context.segment.bindings
        existing = bindings[name] if name in bindings else ns.locals[name]
        return context.bind(name, existing)
    return context.bind(name, ns.exports[name])


def define_function(
    context: PassContext,
    name: str | Symbol,
    params: Iterable[Symbol | str],
    body: list[Form],
    env: Optional[Environment] = None,
    private: bool = False,
) -> Lambda:
    name = check_identifier(name)
    if env is None:
        env = Environment(context=context)
    return define(context, name, Lambda(params, body, env, name=name), private=private)
