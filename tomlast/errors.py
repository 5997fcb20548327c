"""Errors raised while scanning and parsing TOML documents."""

from __future__ import annotations

from collections.abc import Iterable

from tomlast.ast import Range


class ParserError(Exception):
    """An error located at a range of bytes in the document."""

    def __init__(
        self,
        message: str,
        highlight: Range,
        key: Iterable[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.highlight = highlight
        self.key = list(key) if key is not None else []

    def __str__(self) -> str:
        return self.message