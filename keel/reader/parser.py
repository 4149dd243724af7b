"""
  Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits Python primitives instead of Cons cells:

    - nil -> None, true/false -> True/False
    - (...) lists -> Python list (calls and special forms)
    - [...] vectors -> Vector (a list subclass)
    - {...} tables -> dict of unevaluated key/value forms
    - symbols -> Symbol
    - :keyword -> str (a keyword is just a string literal)
    - strings -> str
    - numbers -> int/float
"""

from __future__ import annotations

import ast
import re
from typing import Iterator, Optional

from keel import Form
from keel.errors import KeelSyntaxError
from keel.types.symbol import Symbol, Vector


TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbracket>\[)"  # [
    r"|(?P<rbracket>\])"  # ]
    r"|(?P<lbrace>\{)"  # {
    r"|(?P<rbrace>\})"  # }
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r"|(?P<keyword>:[^\s()\[\]{}\"',;]+)"  # :keyword
    r'|(?P<symbol>[^\s()\[\]{}\'",;]+)',  # fallback: symbols and numbers
    re.DOTALL,
)

NUMBER_RE = re.compile(r"[+-]?(?:\d+(?P<frac>\.\d*)?(?P<exp>[eE][+-]?\d+)?|\.\d+)\Z")

_CLOSERS = {"lparen": "rparen", "lbracket": "rbracket", "lbrace": "rbrace"}

_LITERALS = {"nil": None, "true": True, "false": False}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m or m.end() == pos:
            raise KeelSyntaxError(f"Unexpected char at {pos}: {source[pos]!r}")
        pos = m.end()
        kind = m.lastgroup
        if kind == "comment":
            continue
        yield kind, m.group(kind)


def _atom(tok_val: str) -> Form:
    if tok_val in _LITERALS:
        return _LITERALS[tok_val]
    m = NUMBER_RE.match(tok_val)
    if m is None:
        return Symbol(tok_val)
    if m.group("frac") is None and m.group("exp") is None and "." not in tok_val:
        return int(tok_val)
    return float(tok_val)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def at_end(self) -> bool:
        return self.peek()[0] is None

    def _parse_seq(self, opener: str) -> list[Form]:
        closer = _CLOSERS[opener]
        items: list[Form] = []
        while True:
            tok_type, tok_val = self.peek()
            if tok_type is None:
                raise KeelSyntaxError(f"Unexpected EOF: unclosed {opener}")
            if tok_type == closer:
                self.advance()
                return items
            if tok_type in ("rparen", "rbracket", "rbrace"):
                raise KeelSyntaxError(f"Mismatched {tok_val!r} while reading {opener}")
            items.append(self.parse_expr())

    def parse_expr(self) -> Form:
        """Read one form. Raises KeelSyntaxError at end of input."""
        tok_type, tok_val = self.advance()
        if tok_type is None:
            raise KeelSyntaxError("Unexpected EOF")

        if tok_type == "symbol":
            return _atom(tok_val)

        if tok_type == "keyword":
            return tok_val[1:]

        if tok_type == "string":
            try:
                return ast.literal_eval(tok_val)
            except (SyntaxError, ValueError) as ex:
                raise KeelSyntaxError(f"Bad string literal {tok_val}: {ex}") from ex

        if tok_type == "lparen":
            return self._parse_seq("lparen")

        if tok_type == "lbracket":
            return Vector(self._parse_seq("lbracket"))

        if tok_type == "lbrace":
            items = self._parse_seq("lbrace")
            if len(items) % 2:
                raise KeelSyntaxError("Table literal needs an even number of forms")
            return {_table_key(k): v for k, v in zip(items[::2], items[1::2])}

        raise KeelSyntaxError(f"Unexpected token: {tok_type} {tok_val}")

    def parse_all(self) -> Iterator[Form]:
        while not self.at_end():
            yield self.parse_expr()


def _table_key(k: Form) -> Form:
    # Lists and tables are unhashable
    if isinstance(k, (list, dict)):
        raise KeelSyntaxError(f"Table key must be an atom, got {k!r}")
    return k


def read_all(source: str) -> list[Form]:
    """Read every top-level form in `source`."""
    return list(TokenStream(lex(source)).parse_all())
