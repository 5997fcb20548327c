"""Nodes of a TOML expression tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from tomlast.kind import Kind


@dataclass(frozen=True)
class Range:
    """A range of bytes in the input document."""

    offset: int = 0
    length: int = 0


@dataclass(eq=False)
class Node:
    """A node of a TOML expression.

    Children are read differently depending on the kind:

    - ``ARRAY`` has one child per element.
    - ``INLINE_TABLE`` has one ``KEY_VALUE`` child per entry.
    - ``KEY_VALUE`` has the value as first child, followed by the parts of a
      potentially dotted key.
    - ``TABLE`` and ``ARRAY_TABLE`` children are the parts of a dotted key.
    """

    kind: Kind
    raw: Range = field(default_factory=Range)
    data: bytes = b""
    child: Node | None = field(default=None, repr=False)
    next: Node | None = field(default=None, repr=False)

    def siblings(self) -> Iterator[Node]:
        """Iterate over this node and every node chained after it."""
        node: Node | None = self
        while node is not None:
            yield node
            node = node.next

    def children(self) -> Iterator[Node]:
        """Iterate over the children of this node."""
        if self.child is not None:
            yield from self.child.siblings()

    def is_last(self) -> bool:
        """Return True if no node is chained after this one."""
        return self.next is None

    @property
    def value(self) -> Node | None:
        """The value node of a key-value."""
        return self.child

    def key(self) -> Iterator[Node]:
        """Iterate over the key parts of a key-value or table node."""
        if self.kind is Kind.KEY_VALUE:
            if self.child is None:
                raise ValueError("KeyValue should have at least two children")
            start = self.child.next
        elif self.kind in (Kind.TABLE, Kind.ARRAY_TABLE):
            start = self.child
        else:
            raise TypeError(f"key() is not supported on a {self.kind}")
        if start is None:
            return iter(())
        return start.siblings()