import pytest

from tomlast.ast import Node, Range
from tomlast.kind import Kind


def _key_value(value, *keys):
    kv = Node(Kind.KEY_VALUE)
    kv.child = value
    previous = value
    for name in keys:
        node = Node(Kind.KEY, data=name)
        previous.next = node
        previous = node
    return kv


def test_range_defaults_and_equality():
    assert Range() == Range(0, 0)
    assert Range(3, 4) == Range(offset=3, length=4)


def test_node_defaults():
    node = Node(Kind.COMMENT)
    assert node.data == b""
    assert node.raw == Range()
    assert node.child is None
    assert node.is_last()


def test_children_in_chain_order():
    items = [Node(Kind.INTEGER, data=d) for d in (b"1", b"2", b"3")]
    items[0].next = items[1]
    items[1].next = items[2]
    array = Node(Kind.ARRAY, child=items[0])
    assert [n.data for n in array.children()] == [b"1", b"2", b"3"]
    assert [n.is_last() for n in array.children()] == [False, False, True]


def test_children_empty_without_child():
    assert list(Node(Kind.ARRAY).children()) == []


def test_siblings_starts_with_self():
    a = Node(Kind.STRING, data=b"hello")
    b = Node(Kind.STRING, data=b"world")
    a.next = b
    assert list(a.siblings()) == [a, b]
    assert list(b.siblings()) == [b]


def test_key_value_key_and_value():
    value = Node(Kind.STRING, data=b"hello")
    kv = _key_value(value, b"a", b"b")
    assert kv.value is value
    assert [k.data for k in kv.key()] == [b"a", b"b"]
    assert all(k.kind is Kind.KEY for k in kv.key())


def test_key_value_children_include_value_then_key():
    value = Node(Kind.BOOL, data=b"true")
    kv = _key_value(value, b"A")
    assert [n.kind for n in kv.children()] == [Kind.BOOL, Kind.KEY]


@pytest.mark.parametrize("kind", [Kind.TABLE, Kind.ARRAY_TABLE])
def test_table_key(kind):
    first = Node(Kind.KEY, data=b"root")
    first.next = Node(Kind.KEY, data=b"nested")
    table = Node(kind, child=first)
    assert [k.data for k in table.key()] == [b"root", b"nested"]


def test_key_on_key_value_without_children():
    with pytest.raises(ValueError, match="at least two children"):
        Node(Kind.KEY_VALUE).key()


@pytest.mark.parametrize("kind", [Kind.STRING, Kind.ARRAY, Kind.COMMENT])
def test_key_unsupported_kind(kind):
    with pytest.raises(TypeError, match=f"not supported on a {kind}"):
        Node(kind).key()


def test_nodes_compare_by_identity():
    a = Node(Kind.KEY, data=b"x")
    b = Node(Kind.KEY, data=b"x")
    assert a == a
    assert not (a == b)