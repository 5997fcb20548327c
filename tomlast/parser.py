"""Parser turning a TOML document into a sequence of expression trees."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from tomlast.ast import Node, Range
from tomlast.errors import ParserError
from tomlast.kind import Kind
from tomlast.scanner import (
    is_unquoted_key_char,
    scan_comment,
    scan_follows,
    scan_unquoted_key,
    scan_whitespace,
    scan_windows_newline,
)
from tomlast.strings import (
    ParsedString,
    parse_basic_string,
    parse_literal_string,
    parse_multiline_basic_string,
    parse_multiline_literal_string,
)

_LF = 0x0A
_CR = 0x0D


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def _is_hex(byte: int) -> bool:
    return (
        0x61 <= byte <= 0x66
        or 0x41 <= byte <= 0x46
        or _is_digit(byte)
        or byte == 0x5F
    )


def _is_octal(byte: int) -> bool:
    return 0x30 <= byte <= 0x37 or byte == 0x5F


def _is_binary(byte: int) -> bool:
    return byte in (0x30, 0x31, 0x5F)


_PREFIXED_INTEGERS: dict[int, Callable[[int], bool]] = {
    ord("x"): _is_hex,
    ord("o"): _is_octal,
    ord("b"): _is_binary,
}


def _describe(byte: int) -> str:
    ch = chr(byte)
    if ch.isprintable():
        return f"U+{byte:04X} '{ch}'"
    return f"U+{byte:04X}"


@dataclass(frozen=True)
class Position:
    """A position in the input."""

    offset: int
    line: int
    column: int


@dataclass(frozen=True)
class Shape:
    """The start and end positions of a range in the input."""

    start: Position
    end: Position


class Parser:
    """Scans a TOML document and yields one tree per top-level expression.

    Call :meth:`reset` with a document, then call :meth:`next_expression`
    repeatedly or iterate over the parser.
    """

    def __init__(self, keep_comments: bool = False) -> None:
        self.keep_comments = keep_comments
        self._data = b""
        self._pos = 0
        self._first = True
        self._error: ParserError | None = None

    @property
    def data(self) -> bytes:
        """The document given to the last call to :meth:`reset`."""
        return self._data

    def reset(self, data: bytes | str) -> None:
        """Prepare the parser for a new document."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._pos = 0
        self._first = True
        self._error = None

    def next_expression(self) -> Node | None:
        """Parse the next top-level expression.

        Returns None at the end of the document. Raises :class:`ParserError`
        on malformed input; later calls raise the same error again.
        """
        if self._error is not None:
            raise self._error
        try:
            return self._next_expression()
        except ParserError as err:
            self._error = err
            raise

    def __iter__(self) -> Iterator[Node]:
        while (node := self.next_expression()) is not None:
            yield node

    def raw(self, rng: Range) -> bytes:
        """Return the bytes of the document covered by ``rng``."""
        return self._data[rng.offset : rng.offset + rng.length]

    def shape(self, rng: Range) -> Shape:
        """Return the start and end positions of ``rng`` in the document."""
        if rng.offset + rng.length > len(self._data):
            raise IndexError("range is outside of the document")
        return Shape(
            start=self._position(rng.offset),
            end=self._position(rng.offset + rng.length),
        )

    # -- internals ---------------------------------------------------------

    def _position(self, offset: int) -> Position:
        lead = self._data[:offset]
        return Position(
            offset=offset,
            line=lead.count(b"\n") + 1,
            column=offset - lead.rfind(b"\n"),
        )

    def _next_expression(self) -> Node | None:
        n = len(self._data)
        while True:
            if self._pos >= n:
                return None
            if not self._first:
                self._pos = self._parse_newline(self._pos)
            if self._pos >= n:
                return None
            node, self._pos = self._parse_expression(self._pos)
            self._first = False
            if node is not None:
                return node

    def _ws(self, i: int) -> int:
        return scan_whitespace(self._data, i)

    def _expect(self, char: str, i: int) -> int:
        data = self._data
        if i >= len(data):
            raise ParserError(
                f"expected character {char} but the document ended here",
                Range(len(data), 0),
            )
        if data[i] != ord(char):
            raise ParserError(f"expected character {char}", Range(i, 1))
        return i + 1

    def _parse_newline(self, i: int) -> int:
        c = self._data[i]
        if c == _LF:
            return i + 1
        if c == _CR:
            return scan_windows_newline(self._data, i)
        raise ParserError(f"expected newline but got {_describe(c)}", Range(i, 1))

    def _parse_comment(self, i: int) -> tuple[Node | None, int]:
        end = scan_comment(self._data, i)
        if not self.keep_comments:
            return None, end
        node = Node(Kind.COMMENT, Range(i, end - i), self._data[i:end])
        return node, end

    def _parse_expression(self, i: int) -> tuple[Node | None, int]:
        data = self._data
        i = self._ws(i)
        if i >= len(data):
            return None, i
        c = data[i]
        if c == ord("#"):
            return self._parse_comment(i)
        if c in (_LF, _CR):
            return None, i

        if c == ord("["):
            node, i = self._parse_table(i)
        else:
            node, i = self._parse_keyval(i)

        i = self._ws(i)
        if i < len(data) and data[i] == ord("#"):
            comment, i = self._parse_comment(i)
            if comment is not None:
                node.next = comment
        return node, i

    def _parse_table(self, i: int) -> tuple[Node, int]:
        data = self._data
        if i + 1 < len(data) and data[i + 1] == ord("["):
            return self._parse_array_table(i)
        return self._parse_std_table(i)

    def _parse_array_table(self, i: int) -> tuple[Node, int]:
        node = Node(Kind.ARRAY_TABLE)
        i = self._ws(i + 2)
        key, i = self._parse_key(i)
        node.child = key
        i = self._ws(i)
        i = self._expect("]", i)
        return node, self._expect("]", i)

    def _parse_std_table(self, i: int) -> tuple[Node, int]:
        node = Node(Kind.TABLE)
        i = self._ws(i + 1)
        key, i = self._parse_key(i)
        node.child = key
        i = self._ws(i)
        return node, self._expect("]", i)

    def _parse_keyval(self, i: int) -> tuple[Node, int]:
        node = Node(Kind.KEY_VALUE)
        key, i = self._parse_key(i)
        i = self._ws(i)
        if i >= len(self._data):
            raise ParserError(
                "expected = after a key, but the document ends there",
                Range(len(self._data), 0),
            )
        i = self._expect("=", i)
        i = self._ws(i)
        value, i = self._parse_val(i)
        value.next = key
        node.child = value
        return node, i

    def _parse_key(self, i: int) -> tuple[Node, int]:
        data = self._data
        start, value, i = self._parse_simple_key(i)
        first = Node(Kind.KEY, Range(start, i - start), value)
        last = first
        while True:
            i = self._ws(i)
            if i < len(data) and data[i] == ord("."):
                i = self._ws(i + 1)
                start, value, i = self._parse_simple_key(i)
                part = Node(Kind.KEY, Range(start, i - start), value)
                last.next = part
                last = part
            else:
                return first, i

    def _parse_simple_key(self, i: int) -> tuple[int, bytes, int]:
        data = self._data
        if i >= len(data):
            raise ParserError("expected key but found none", Range(len(data), 0))
        c = data[i]
        if c == ord("'"):
            parsed = parse_literal_string(data, i)
            return i, parsed.value, parsed.end
        if c == ord('"'):
            parsed = parse_basic_string(data, i)
            return i, parsed.value, parsed.end
        if is_unquoted_key_char(c):
            end = scan_unquoted_key(data, i)
            return i, data[i:end], end
        raise ParserError(f"invalid character at start of key: {chr(c)}", Range(i, 1))

    def _string_node(self, i: int, parsed: ParsedString) -> tuple[Node, int]:
        return Node(Kind.STRING, Range(i, parsed.end - i), parsed.value), parsed.end

    def _parse_val(self, i: int) -> tuple[Node, int]:
        data = self._data
        n = len(data)
        if i >= n:
            raise ParserError("expected value, not eof", Range(n, 0))
        c = data[i]
        if c == ord('"'):
            if scan_follows(data, i, b'"""'):
                return self._string_node(i, parse_multiline_basic_string(data, i))
            return self._string_node(i, parse_basic_string(data, i))
        if c == ord("'"):
            if scan_follows(data, i, b"'''"):
                return self._string_node(i, parse_multiline_literal_string(data, i))
            return self._string_node(i, parse_literal_string(data, i))
        if c == ord("t"):
            if not scan_follows(data, i, b"true"):
                raise ParserError("expected 'true'", Range(i, min(4, n - i)))
            return Node(Kind.BOOL, data=data[i : i + 4]), i + 4
        if c == ord("f"):
            if not scan_follows(data, i, b"false"):
                raise ParserError("expected 'false'", Range(i, min(5, n - i)))
            return Node(Kind.BOOL, data=data[i : i + 5]), i + 5
        if c == ord("["):
            return self._parse_val_array(i)
        if c == ord("{"):
            return self._parse_inline_table(i)
        return self._parse_int_or_float_or_date_time(i)

    def _parse_inline_table(self, i: int) -> tuple[Node, int]:
        data = self._data
        n = len(data)
        parent = Node(Kind.INLINE_TABLE, Range(i, 1))
        last: Node | None = None
        i += 1
        while i < n:
            previous = i
            i = self._ws(i)
            if i >= n:
                raise ParserError("inline table is incomplete", Range(previous, 1))
            if data[i] == ord("}"):
                break
            if last is not None:
                i = self._expect(",", i)
                i = self._ws(i)
            kv, i = self._parse_keyval(i)
            if last is None:
                parent.child = kv
            else:
                last.next = kv
            last = kv
        return parent, self._expect("}", i)

    def _parse_val_array(self, i: int) -> tuple[Node, int]:
        data = self._data
        n = len(data)
        array_start = i
        i += 1
        parent = Node(Kind.ARRAY)
        first = True
        last: Node | None = None

        def add_child(node: Node | None) -> None:
            nonlocal last
            if node is None:
                return
            if last is None:
                parent.child = node
            else:
                last.next = node
            last = node

        while i < n:
            comment, i = self._parse_ws_comment_newline(i)
            add_child(comment)
            if i >= n:
                raise ParserError("array is incomplete", Range(array_start, 1))
            if data[i] == ord("]"):
                break
            if data[i] == ord(","):
                if first:
                    raise ParserError("array cannot start with comma", Range(i, 1))
                comment, i = self._parse_ws_comment_newline(i + 1)
                add_child(comment)
            elif not first:
                raise ParserError(
                    "array elements must be separated by commas", Range(i, 1)
                )
            # Trailing commas are allowed.
            if i < n and data[i] == ord("]"):
                break
            value, i = self._parse_val(i)
            add_child(value)
            comment, i = self._parse_ws_comment_newline(i)
            add_child(comment)
            first = False

        return parent, self._expect("]", i)

    def _parse_ws_comment_newline(self, i: int) -> tuple[Node | None, int]:
        data = self._data
        n = len(data)
        root: Node | None = None
        latest: Node | None = None
        while i < n:
            i = self._ws(i)
            if i < n and data[i] == ord("#"):
                comment, i = self._parse_comment(i)
                if comment is not None:
                    if root is None:
                        root = comment
                    elif latest is None:
                        root.child = comment
                        latest = comment
                    else:
                        latest.next = comment
                        latest = comment
            if i >= n:
                break
            if data[i] in (_LF, _CR):
                i = self._parse_newline(i)
            else:
                break
        return root, i

    def _float_keyword(self, i: int, word: bytes) -> tuple[Node, int]:
        data = self._data
        if not scan_follows(data, i, word):
            raise ParserError(
                f"expected '{word.decode()}'", Range(i, min(3, len(data) - i))
            )
        return Node(Kind.FLOAT, Range(i, 3), data[i : i + 3]), i + 3

    def _parse_int_or_float_or_date_time(self, i: int) -> tuple[Node, int]:
        data = self._data
        c = data[i]
        if c == ord("i"):
            return self._float_keyword(i, b"inf")
        if c == ord("n"):
            return self._float_keyword(i, b"nan")
        if c in (ord("+"), ord("-")):
            return self._scan_int_or_float(i)
        if len(data) - i < 3:
            return self._scan_int_or_float(i)
        for idx, byte in enumerate(data[i : i + 5]):
            if _is_digit(byte):
                continue
            if (idx == 2 and byte == ord(":")) or (idx == 4 and byte == ord("-")):
                return self._scan_date_time(i)
            break
        return self._scan_int_or_float(i)

    def _scan_date_time(self, i: int) -> tuple[Node, int]:
        # Contiguous characters in [0-9Tt:.+Zz-], and at most one space
        # followed by a digit.
        data = self._data
        rem = len(data) - i
        has_date = has_time = has_tz = seen_space = False
        k = 0
        while k < rem:
            c = data[i + k]
            if _is_digit(c):
                pass
            elif c == ord("-"):
                has_date = True
                if k >= 8:
                    has_tz = True
            elif c in (ord("T"), ord("t"), ord(":"), ord(".")):
                has_time = True
            elif c in (ord("+"), ord("Z"), ord("z")):
                has_tz = True
            elif c == ord(" "):
                if not seen_space and k + 1 < rem and _is_digit(data[i + k + 1]):
                    k += 2
                    if k >= rem:
                        k -= 1
                    seen_space = True
                    has_time = True
                else:
                    break
            else:
                break
            k += 1

        if has_time:
            if has_date:
                kind = Kind.DATE_TIME if has_tz else Kind.LOCAL_DATE_TIME
            else:
                kind = Kind.LOCAL_TIME
        else:
            kind = Kind.LOCAL_DATE
        return Node(kind, data=data[i : i + k]), i + k

    def _number_node(self, kind: Kind, i: int, length: int) -> tuple[Node, int]:
        return Node(kind, Range(i, length), self._data[i : i + length]), i + length

    def _scan_int_or_float(self, i: int) -> tuple[Node, int]:
        data = self._data
        rem = len(data) - i

        if rem > 2 and data[i] == ord("0") and data[i + 1] not in b".eE":
            is_valid = _PREFIXED_INTEGERS.get(data[i + 1])
            if is_valid is None:
                k = 1
            else:
                k = 2
                while k < rem and is_valid(data[i + k]):
                    k += 1
            return self._number_node(Kind.INTEGER, i, k)

        is_float = False
        k = 0
        while k < rem:
            c = data[i + k]
            if _is_digit(c) or c in b"+-_":
                k += 1
                continue
            if c in b".eE":
                is_float = True
                k += 1
                continue
            if c in b"in":
                word = b"inf" if c == ord("i") else b"nan"
                if scan_follows(data, i + k, word):
                    return self._number_node(Kind.FLOAT, i, k + 3)
                raise ParserError(
                    f"unexpected character '{chr(c)}' while scanning for a number",
                    Range(i + k, 1),
                )
            break

        if k == 0:
            raise ParserError("incomplete number", Range(i, rem))
        return self._number_node(Kind.FLOAT if is_float else Kind.INTEGER, i, k)


def parse(data: bytes | str, keep_comments: bool = False) -> list[Node]:
    """Parse a whole document into its list of top-level expressions."""
    parser = Parser(keep_comments)
    parser.reset(data)
    return list(parser)