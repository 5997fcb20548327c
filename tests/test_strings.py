import pytest

from tomlast.ast import Range
from tomlast.errors import ParserError
from tomlast.strings import (
    hex_to_rune,
    parse_basic_string,
    parse_literal_string,
    parse_multiline_basic_string,
    parse_multiline_literal_string,
)

VALID_10_ASCII = b"1234567890"
VALID_10_UTF8 = "日本語a".encode()
VALID_1K_UTF8 = "0123456789日本語日本語日本語日abcdefghijklmnopqrstuvwx".encode() * 16
VALID_1K_ASCII = b"012345678998jhjklasDJKLAAdjdfjsdklfjdslkabcdefghijklmnopqrstuvwx" * 16


@pytest.mark.parametrize(
    "content", [VALID_10_ASCII, VALID_10_UTF8, VALID_1K_UTF8, VALID_1K_ASCII]
)
def test_literal_string_valid(content):
    doc = b"'" + content + b"'"
    result = parse_literal_string(doc, 0)
    assert result.value == content
    assert result.end == len(doc)


def test_literal_string_with_offset_and_rest():
    doc = b"a = 'C:\\Users' # c"
    result = parse_literal_string(doc, 4)
    assert result.value == b"C:\\Users"
    assert doc[result.end :] == b" # c"


def test_literal_string_unterminated():
    with pytest.raises(ParserError, match="unterminated literal string"):
        parse_literal_string(b"'abc", 0)


def test_multiline_literal_trims_first_newline():
    doc = b"'''\nThe first newline is\ntrimmed.\n'''"
    result = parse_multiline_literal_string(doc, 0)
    assert result.value == b"The first newline is\ntrimmed.\n"
    assert result.end == len(doc)


def test_multiline_literal_trims_crlf():
    result = parse_multiline_literal_string(b"'''\r\nabc'''", 0)
    assert result.value == b"abc"


def test_multiline_literal_extra_quotes():
    result = parse_multiline_literal_string(b"'''a'''''", 0)
    assert result.value == b"a''"
    assert result.end == 9


def test_basic_string_fast_path():
    result = parse_basic_string(b'"hello" rest', 0)
    assert result.value == b"hello"
    assert result.end == 7


def test_basic_string_escapes():
    doc = b'"a\\"b\\\\c\\td\\ne\\rf\\bg\\fh\\ei"'
    assert parse_basic_string(doc, 0).value == b'a"b\\c\td\ne\rf\bg\fh\x1bi'


def test_basic_string_unicode_escapes():
    doc = b'"\\u1234\\u5678\\u9ABC"'
    expected = "\u1234\u5678\u9abc".encode()
    assert parse_basic_string(doc, 0).value == expected


def test_basic_string_short_unicode_followed_by_digits():
    doc = b'"\\u12345678\\u9ABCDEF0"'
    expected = "\u12345678\u9abcDEF0".encode()
    assert parse_basic_string(doc, 0).value == expected


def test_basic_string_long_unicode_escape():
    assert parse_basic_string(b'"\\U0001F600"', 0).value == "\U0001f600".encode()


def test_basic_string_name_with_accent():
    doc = b'"Name\\tJos\\u00E9\\nLocation\\tSF."'
    assert parse_basic_string(doc, 0).value == "Name\tJos\u00e9\nLocation\tSF.".encode()


def test_basic_string_invalid_escape():
    with pytest.raises(ParserError, match="invalid escaped character U\\+0078 'x'") as info:
        parse_basic_string(b'"a\\xb"', 0)
    assert info.value.highlight == Range(3, 1)


def test_basic_string_control_character_rejected():
    with pytest.raises(ParserError, match="invalid UTF-8") as info:
        parse_basic_string(b'"a\x01b"', 0)
    assert info.value.highlight == Range(2, 1)


def test_basic_string_unicode_too_short():
    with pytest.raises(ParserError, match="unicode point needs 4 character, not 2"):
        parse_basic_string(b'"\\u12"', 0)


def test_basic_string_surrogate_rejected():
    with pytest.raises(ParserError, match="invalid Unicode code point"):
        parse_basic_string(b'"\\uD800"', 0)


def test_hex_to_rune_values():
    assert hex_to_rune(b"00e9", 0, 4) == 0xE9
    assert hex_to_rune(b"xx0010FFFF", 2, 8) == 0x10FFFF


def test_hex_to_rune_non_hex():
    with pytest.raises(ParserError, match="non-hex character") as info:
        hex_to_rune(b"12G4", 0, 4)
    assert info.value.highlight == Range(2, 1)


def test_hex_to_rune_out_of_range():
    with pytest.raises(ParserError, match="invalid Unicode code point"):
        hex_to_rune(b"00110000", 0, 8)


def test_multiline_basic_plain():
    doc = b'"""\nOne\nTwo"""'
    result = parse_multiline_basic_string(doc, 0)
    assert result.value == b"One\nTwo"
    assert result.end == len(doc)


def test_multiline_basic_crlf_kept():
    result = parse_multiline_basic_string(b'"""\r\nab\r\ncd"""', 0)
    assert result.value == b"ab\r\ncd"


def test_multiline_basic_line_continuation():
    doc = b'"""\nThe quick brown \\\n\n  fox jumps over \\\n    the lazy dog."""'
    result = parse_multiline_basic_string(doc, 0)
    assert result.value == b"The quick brown fox jumps over the lazy dog."


def test_multiline_basic_continuation_with_trailing_spaces_and_crlf():
    result = parse_multiline_basic_string(b'"""a\\  \r\n  b"""', 0)
    assert result.value == b"ab"


def test_multiline_basic_escapes():
    result = parse_multiline_basic_string(b'"""a\\tb\\u00E9"""', 0)
    assert result.value == "a\tb\u00e9".encode()


def test_multiline_basic_extra_quotes():
    result = parse_multiline_basic_string(b'"""a"""""', 0)
    assert result.value == b'a""'


def test_multiline_basic_invalid_escape():
    with pytest.raises(ParserError, match="invalid escaped character"):
        parse_multiline_basic_string(b'"""\\q"""', 0)