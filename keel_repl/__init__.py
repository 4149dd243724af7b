"""REPL integration for keel.

A small TCP server keeps one Interpreter alive so editors can send evaluation
passes (a form, a selection, a buffer) and have namespace state persist
between them.
"""

__all__ = [
    "repl_server",
]
