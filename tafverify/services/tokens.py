"""Tokenisation and a forward-only cursor shared by the report decoders."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

_WHITESPACE_RE = re.compile(r"\s+")


def tokenize(text: str) -> tuple[str, list[str]]:
    """Normalise report text and split it into tokens.

    Returns the cleaned report (whitespace collapsed, '=' terminator removed)
    along with its tokens.
    """

    cleaned = _WHITESPACE_RE.sub(" ", text).strip()
    cleaned = cleaned.rstrip("=").strip()
    return cleaned, cleaned.split() if cleaned else []


@dataclass
class TokenCursor:
    """Read position over a token list; only ever moves forward."""

    tokens: list[str]
    position: int = 0

    def peek(self) -> Optional[str]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def peek_next(self) -> Optional[str]:
        if self.position + 1 < len(self.tokens):
            return self.tokens[self.position + 1]
        return None

    def advance(self, count: int = 1) -> None:
        self.position = min(self.position + count, len(self.tokens))

    def accept(self, predicate: Callable[[str], bool]) -> Optional[str]:
        """Consume and return the current token if it satisfies ``predicate``."""

        token = self.peek()
        if token is not None and predicate(token):
            self.position += 1
            return token
        return None

    def accept_literal(self, *literals: str) -> Optional[str]:
        return self.accept(lambda token: token in literals)

    def accept_all(self, predicate: Callable[[str], bool]) -> list[str]:
        """Consume tokens greedily while they satisfy ``predicate``."""

        accepted: list[str] = []
        token = self.accept(predicate)
        while token is not None:
            accepted.append(token)
            token = self.accept(predicate)
        return accepted

    def remaining(self) -> list[str]:
        rest = self.tokens[self.position:]
        self.position = len(self.tokens)
        return rest

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self.tokens)


__all__ = ["TokenCursor", "tokenize"]
