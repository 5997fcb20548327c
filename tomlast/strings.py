"""Decoding of TOML string tokens.

Each parser takes a ``bytes`` document and the offset of the opening
delimiter. It returns the decoded value together with the offset just past
the closing delimiter. Errors raise :class:`ParserError` whose highlight
points into the document.
"""

from __future__ import annotations

from typing import NamedTuple

from tomlast.ast import Range
from tomlast.errors import ParserError
from tomlast.scanner import (
    scan_basic_string,
    scan_literal_string,
    scan_multiline_basic_string,
    scan_multiline_literal_string,
    utf8_valid_next,
)

_TAB = 0x09
_LF = 0x0A
_CR = 0x0D
_SPACE = 0x20
_BACKSLASH = 0x5C

_MAX_RUNE = 0x10FFFF

_SIMPLE_ESCAPES = {
    ord('"'): b'"',
    ord("\\"): b"\\",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
    ord("e"): b"\x1b",
}


class ParsedString(NamedTuple):
    """A decoded string token."""

    value: bytes
    end: int


def _describe(byte: int) -> str:
    ch = chr(byte)
    if ch.isprintable():
        return f"U+{byte:04X} '{ch}'"
    return f"U+{byte:04X}"


def hex_to_rune(data: bytes, start: int, length: int) -> int:
    """Decode ``length`` hex digits at ``start`` into a Unicode code point.

    The digits must fit before the end of ``data``; callers pass a document
    cut at the furthest byte the escape may reach.
    """
    available = max(len(data) - start, 0)
    if available < length:
        raise ParserError(
            f"unicode point needs {length} character, not {available}",
            Range(start, available),
        )
    value = 0
    for offset, c in enumerate(data[start : start + length]):
        if 0x30 <= c <= 0x39:
            digit = c - 0x30
        elif 0x61 <= c <= 0x66:
            digit = c - 0x61 + 10
        elif 0x41 <= c <= 0x46:
            digit = c - 0x41 + 10
        else:
            raise ParserError("non-hex character", Range(start + offset, 1))
        value = value * 16 + digit
    if value > _MAX_RUNE or 0xD800 <= value < 0xE000:
        raise ParserError(
            "escape sequence is invalid Unicode code point", Range(start, length)
        )
    return value


def _validate(data: bytes, start: int, end: int, allow_cr: bool) -> None:
    """Check that ``data[start:end]`` holds only valid TOML characters."""
    i = start
    while i < end:
        if allow_cr and data[i] == _CR:
            i += 1
            continue
        size = utf8_valid_next(data, i)
        if size == 0 or i + size > end:
            raise ParserError("invalid UTF-8", Range(i, 1))
        i += size


def _skip_leading_newline(data: bytes, i: int) -> int:
    if data[i] == _LF:
        return i + 1
    if data[i] == _CR and data[i + 1] == _LF:
        return i + 2
    return i


def parse_literal_string(data: bytes, start: int) -> ParsedString:
    """Parse a single-line literal string starting at ``start``."""
    end = scan_literal_string(data, start)
    return ParsedString(data[start + 1 : end - 1], end)


def parse_multiline_literal_string(data: bytes, start: int) -> ParsedString:
    """Parse a multiline literal string starting at ``start``."""
    end = scan_multiline_literal_string(data, start)
    body = _skip_leading_newline(data, start + 3)
    return ParsedString(data[body : end - 3], end)


def _decode_escape(
    data: bytes, i: int, hex_limit: int, out: bytearray
) -> int:
    """Decode the escape whose letter is at ``i``; return the next offset."""
    c = data[i]
    simple = _SIMPLE_ESCAPES.get(c)
    if simple is not None:
        out += simple
        return i + 1
    if c in (ord("u"), ord("U")):
        length = 4 if c == ord("u") else 8
        code = hex_to_rune(data[:hex_limit], i + 1, length)
        out += chr(code).encode("utf-8")
        return i + 1 + length
    raise ParserError(f"invalid escaped character {_describe(c)}", Range(i, 1))


def parse_basic_string(data: bytes, start: int) -> ParsedString:
    """Parse a single-line basic string starting at ``start``."""
    end, escaped = scan_basic_string(data, start)
    body_start = start + 1
    body_end = end - 1

    if not escaped:
        _validate(data, body_start, body_end, allow_cr=False)
        return ParsedString(data[body_start:body_end], end)

    out = bytearray()
    i = body_start
    while i < body_end:
        c = data[i]
        if c == _BACKSLASH:
            i = _decode_escape(data, i + 1, body_end, out)
        else:
            size = utf8_valid_next(data, i)
            if size == 0:
                raise ParserError(
                    f"invalid character {_describe(c)}", Range(i, 1)
                )
            out += data[i : i + size]
            i += size
    return ParsedString(bytes(out), end)


def parse_multiline_basic_string(data: bytes, start: int) -> ParsedString:
    """Parse a multiline basic string starting at ``start``."""
    end, escaped = scan_multiline_basic_string(data, start)
    body_start = _skip_leading_newline(data, start + 3)
    body_end = end - 3

    if not escaped:
        _validate(data, body_start, body_end, allow_cr=True)
        return ParsedString(data[body_start:body_end], end)

    out = bytearray()
    i = body_start
    while i < body_end:
        c = data[i]
        if c == _BACKSLASH:
            # A backslash ending a line trims all whitespace and newlines
            # up to the next non-whitespace character.
            at_line_end = False
            j = 1
            while j < body_end - i:
                b = data[i + j]
                if b in (_SPACE, _TAB):
                    j += 1
                    continue
                if b == _CR and data[i + j + 1] == _LF:
                    j += 1
                    continue
                if b == _LF:
                    at_line_end = True
                break
            if at_line_end:
                i += j
                while i < body_end and data[i] in (_LF, _CR, _SPACE, _TAB):
                    i += 1
                continue
            i = _decode_escape(data, i + 1, end, out)
        elif c == _CR:
            # The scanner guarantees a line feed follows.
            out.append(c)
            i += 1
        else:
            size = utf8_valid_next(data, i)
            if size == 0:
                raise ParserError(
                    f"invalid character {_describe(c)}", Range(i, 1)
                )
            out += data[i : i + size]
            i += size
    return ParsedString(bytes(out), end)