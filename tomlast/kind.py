"""Kinds of nodes in a TOML expression tree."""

from __future__ import annotations

from enum import Enum


class Kind(Enum):
    """Type of TOML structure held by a node."""

    # Meta
    INVALID = 0
    COMMENT = 1
    KEY = 2

    # Top level structures
    TABLE = 3
    ARRAY_TABLE = 4
    KEY_VALUE = 5

    # Container values
    ARRAY = 6
    INLINE_TABLE = 7

    # Values
    STRING = 8
    BOOL = 9
    FLOAT = 10
    INTEGER = 11
    LOCAL_DATE = 12
    LOCAL_TIME = 13
    LOCAL_DATE_TIME = 14
    DATE_TIME = 15

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Kind.INVALID: "Invalid",
    Kind.COMMENT: "Comment",
    Kind.KEY: "Key",
    Kind.TABLE: "Table",
    Kind.ARRAY_TABLE: "ArrayTable",
    Kind.KEY_VALUE: "KeyValue",
    Kind.ARRAY: "Array",
    Kind.INLINE_TABLE: "InlineTable",
    Kind.STRING: "String",
    Kind.BOOL: "Bool",
    Kind.FLOAT: "Float",
    Kind.INTEGER: "Integer",
    Kind.LOCAL_DATE: "LocalDate",
    Kind.LOCAL_TIME: "LocalTime",
    Kind.LOCAL_DATE_TIME: "LocalDateTime",
    Kind.DATE_TIME: "DateTime",
}