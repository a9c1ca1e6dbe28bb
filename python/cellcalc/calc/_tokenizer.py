"""Tokenizer: regex-based lexing of infix arithmetic expressions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenKind(Enum):
    """Lexical class of a token."""

    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    OPERATOR = auto()
    VARIABLE = auto()
    NUMBER = auto()
    INVALID = auto()


@dataclass(frozen=True)
class Token:
    """A single classified lexical unit."""

    text: str
    kind: TokenKind

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r})"


# ---------------------------------------------------------------------------
# Token pattern
# ---------------------------------------------------------------------------

# Alternatives are tried left to right, so the order is the classification
# priority. Anything unmatched falls through to a one-character INVALID token.
_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<op>[+\-*/])
    | (?P<var>[A-Za-z][A-Za-z0-9]*)
    | (?P<num>(?:\d+\.\d*|\d*\.\d+|\d+)(?:e[+-]?\d+)?)
    | (?P<invalid>.)
    """,
    re.VERBOSE | re.DOTALL | re.ASCII,
)

_GROUP_KINDS: dict[str, TokenKind] = {
    "lparen": TokenKind.LEFT_PAREN,
    "rparen": TokenKind.RIGHT_PAREN,
    "op": TokenKind.OPERATOR,
    "var": TokenKind.VARIABLE,
    "num": TokenKind.NUMBER,
    "invalid": TokenKind.INVALID,
}


class Tokenizer:
    """Restartable token stream over an expression string.

    Every call to ``iter()`` rescans the source from the beginning, so the
    same Tokenizer can be walked more than once::

        stream = tokenize("(x1 + 2) * 3")
        kinds = [t.kind for t in stream]
        texts = [t.text for t in stream]
    """

    __slots__ = ("source",)

    def __init__(self, source: str) -> None:
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        for m in _TOKEN_RE.finditer(self.source):
            group = m.lastgroup
            if group == "space":
                continue
            yield Token(m.group(), _GROUP_KINDS[group])

    def tokens(self) -> tuple[Token, ...]:
        """Snapshot of the full token sequence."""
        return tuple(self)

    def __repr__(self) -> str:
        return f"Tokenizer({self.source!r})"


def tokenize(source: str) -> Tokenizer:
    """Return a lazy, restartable token stream for *source*."""
    return Tokenizer(source)
