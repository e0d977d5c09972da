"""Whitespace-delimited token reader.

API
---
Scanner(stream)       wraps a binary or text stream (e.g. sys.stdin.buffer)
read(kind=str)        -> one token parsed with *kind*
vec(n, kind=str)      -> list of n tokens
chars()               -> one token as a list of characters
"""

from __future__ import annotations

from collections import deque
from typing import IO, Any, Callable, Deque, List, TypeVar, Union

T = TypeVar("T")


class Scanner:
    """Reads tokens lazily, one input line at a time."""

    def __init__(self, stream: Union[IO[bytes], IO[str]]) -> None:
        self._stream = stream
        self._tokens: Deque[str] = deque()

    def _next_token(self) -> str:
        while not self._tokens:
            line: Any = self._stream.readline()
            if not line:
                raise EOFError("Input exhausted while reading a token")
            if isinstance(line, bytes):
                line = line.decode()
            self._tokens.extend(line.split())
        return self._tokens.popleft()

    def read(self, kind: Callable[[str], T] = str) -> T:
        """Read one token and convert it with *kind*.

        Raises ``ValueError`` if the token cannot be parsed.
        """
        token = self._next_token()
        try:
            return kind(token)
        except ValueError as e:
            name = getattr(kind, "__name__", repr(kind))
            raise ValueError(f"Can't parse token {token!r} as {name}") from e

    def vec(self, n: int, kind: Callable[[str], T] = str) -> List[T]:
        """Read *n* tokens into a list."""
        return [self.read(kind) for _ in range(n)]

    def chars(self) -> List[str]:
        """Read one token and split it into characters."""
        return list(self.read())
