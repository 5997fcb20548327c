"""Low-level scanning of TOML tokens.

Every function works on a ``bytes`` document and a start offset and returns
offsets into that same document. Errors raise :class:`ParserError`.
"""

from __future__ import annotations

from tomlast.ast import Range
from tomlast.errors import ParserError

_TAB = 0x09
_LF = 0x0A
_CR = 0x0D
_QUOTE = 0x22
_APOSTROPHE = 0x27
_BACKSLASH = 0x5C


def _error(message: str, start: int, end: int) -> ParserError:
    return ParserError(message, Range(start, end - start))


def utf8_valid_next(data: bytes, start: int) -> int:
    """Return the size of the valid character at ``start``, or 0.

    ASCII control characters other than tab and line feed are not valid.
    """
    c = data[start]
    if c < 0x80:
        if c in (_TAB, _LF) or 0x20 <= c < 0x7F:
            return 1
        return 0
    if 0xC2 <= c <= 0xDF:
        size = 2
    elif 0xE0 <= c <= 0xEF:
        size = 3
    elif 0xF0 <= c <= 0xF4:
        size = 4
    else:
        return 0
    chunk = data[start : start + size]
    if len(chunk) < size:
        return 0
    try:
        chunk.decode("utf-8")
    except UnicodeDecodeError:
        return 0
    return size


def scan_follows(data: bytes, start: int, pattern: bytes) -> bool:
    """Return True if ``pattern`` occurs at ``start``."""
    return data.startswith(pattern, start)


def is_unquoted_key_char(byte: int) -> bool:
    """Return True if the byte may appear in an unquoted key."""
    return (
        0x41 <= byte <= 0x5A
        or 0x61 <= byte <= 0x7A
        or 0x30 <= byte <= 0x39
        or byte in (0x2D, 0x5F)
    )


def scan_unquoted_key(data: bytes, start: int) -> int:
    """Return the end offset of the unquoted key starting at ``start``."""
    end = start
    while end < len(data) and is_unquoted_key_char(data[end]):
        end += 1
    return end


def scan_literal_string(data: bytes, start: int) -> int:
    """Return the end offset of the literal string, closing quote included."""
    n = len(data)
    i = start + 1
    while i < n:
        c = data[i]
        if c == _APOSTROPHE:
            return i + 1
        if c in (_LF, _CR):
            raise _error("literal strings cannot have new lines", i, i + 1)
        size = utf8_valid_next(data, i)
        if size == 0:
            raise _error("invalid character", i, i + 1)
        i += size
    raise _error("unterminated literal string", n, n)


def scan_multiline_literal_string(data: bytes, start: int) -> int:
    """Return the end offset of the multiline literal string."""
    n = len(data)
    i = start + 3
    while i < n:
        c = data[i]
        if c == _APOSTROPHE and scan_follows(data, i, b"'''"):
            i += 3
            # Up to two extra apostrophes belong to the string's content.
            if i >= n or data[i] != _APOSTROPHE:
                return i
            i += 1
            if i >= n or data[i] != _APOSTROPHE:
                return i
            i += 1
            if i < n and data[i] == _APOSTROPHE:
                raise _error(
                    "''' not allowed in multiline literal string", i - 3, i + 1
                )
            return i
        if c == _CR:
            if n < i + 2:
                raise _error(r"need a \n after \r", n, n)
            if data[i + 1] != _LF:
                raise _error(r"need a \n after \r", i, i + 2)
            i += 2
            continue
        size = utf8_valid_next(data, i)
        if size == 0:
            raise _error("invalid character", i, i + 1)
        i += size
    raise _error("multiline literal string not terminated by '''", n, n)


def scan_windows_newline(data: bytes, start: int) -> int:
    """Return the offset after the CRLF at ``start``."""
    n = len(data)
    if n - start < 2:
        raise _error("windows new line expected", start, n)
    if data[start + 1] != _LF:
        raise _error(r"windows new line should be \r\n", start, n)
    return start + 2


def scan_whitespace(data: bytes, start: int) -> int:
    """Return the offset of the first byte that is not a space or tab."""
    end = start
    while end < len(data) and data[end] in (0x20, _TAB):
        end += 1
    return end


def scan_comment(data: bytes, start: int) -> int:
    """Return the end offset of the comment starting at ``start``."""
    n = len(data)
    i = start + 1
    while i < n:
        c = data[i]
        if c == _LF:
            return i
        if c == _CR:
            if i + 1 < n and data[i + 1] == _LF:
                return i + 1
            raise _error("invalid character in comment", i, i + 1)
        size = utf8_valid_next(data, i)
        if size == 0:
            raise _error("invalid character in comment", i, i + 1)
        i += size
    return n


def scan_basic_string(data: bytes, start: int) -> tuple[int, bool]:
    """Return the end offset of the basic string and whether it has escapes."""
    n = len(data)
    escaped = False
    i = start + 1
    while i < n:
        c = data[i]
        if c == _QUOTE:
            return i + 1, escaped
        if c in (_LF, _CR):
            raise _error("basic strings cannot have new lines", i, i + 1)
        if c == _BACKSLASH:
            if n < i + 2:
                raise _error("need a character after \\", i, i + 1)
            escaped = True
            i += 1
        i += 1
    raise _error('basic string not terminated by "', n, n)


def scan_multiline_basic_string(data: bytes, start: int) -> tuple[int, bool]:
    """Return the end offset of the multiline basic string and whether it has escapes."""
    n = len(data)
    escaped = False
    i = start + 3
    while i < n:
        c = data[i]
        if c == _QUOTE and scan_follows(data, i, b'"""'):
            i += 3
            # Up to two extra quotes belong to the string's content.
            if i >= n or data[i] != _QUOTE:
                return i, escaped
            i += 1
            if i >= n or data[i] != _QUOTE:
                return i, escaped
            i += 1
            if i < n and data[i] == _QUOTE:
                raise _error(
                    '""" not allowed in multiline basic string', i - 3, i + 1
                )
            return i, escaped
        if c == _BACKSLASH:
            if n < i + 2:
                raise _error("need a character after \\", n, n)
            escaped = True
            i += 1
        elif c == _CR:
            if n < i + 2:
                raise _error(r"need a \n after \r", n, n)
            if data[i + 1] != _LF:
                raise _error(r"need a \n after \r", i, i + 2)
            i += 1
        i += 1
    raise _error('multiline basic string not terminated by """', n, n)