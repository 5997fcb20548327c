# tomlast

`tomlast` is a low-level TOML parser. It reads a document one top-level
expression at a time and returns a small syntax tree for each one. Every
node has a kind, its bytes (the decoded string or the literal text of the
value) and, for most nodes, the byte range it came from in the input. The
parser can also keep comments. This suits linters, formatters and editors
that need exact source positions.

It needs Python 3.10 or later and has no runtime dependencies.

## Parsing a document

```python
from tomlast.parser import Parser

doc = b'''
hello = "world"
value = 42
'''

parser = Parser()
parser.reset(doc)
for expr in parser:
    print(expr.kind)            # KeyValue
    value = expr.value          # the first child is the value
    key = next(expr.key())      # then the parts of a (possibly dotted) key
    print(key.data, value.kind, value.data)
```

`Parser.reset(data)` takes `bytes` or `str`. A `str` is encoded as UTF-8.
`Parser.next_expression()` returns the root node of the next top-level
expression. It returns `None` at the end of the document. Iterating over the
parser yields every remaining expression.

A malformed document raises `tomlast.errors.ParserError`. Its `message` is
the text of the error, and its `highlight` is a `Range` of the bytes where
the problem was found. Once a parser has raised an error, later calls to
`next_expression()` raise the same error again until `reset()` is called.

The shortcut `tomlast.parser.parse(data, keep_comments=False)` parses a
whole document and returns the list of its expressions.

## Tree shape

Each node is a `tomlast.ast.Node`. It has `kind` (a `tomlast.kind.Kind`),
`raw` (a `Range` with `offset` and `length`), `data` (bytes), and the links
`child` and `next`.

- **KeyValue**: its first child is the value (also `node.value`). The other
  children are the parts of the dotted key, which `node.key()` iterates.
- **Table** and **ArrayTable**: the children are the parts of the key.
  `node.key()` iterates them as well.
- **Array**: one child per element. Comments kept inside the array show up
  as `Comment` children. Further comments on the lines after one become its
  children.
- **InlineTable**: one `KeyValue` child per entry.
- Scalars (**String**, **Bool**, **Integer**, **Float**, **LocalDate**,
  **LocalTime**, **LocalDateTime**, **DateTime**): `data` holds the decoded
  string bytes or the literal text of the value.

`node.children()` iterates the children. `node.siblings()` iterates the node
itself and every node chained after it. `node.is_last()` tells whether
anything follows. `str(kind)` gives names such as `KeyValue` and
`InlineTable`.

Keys, strings, numbers, comments and inline tables (the opening brace) carry
a real range. KeyValue, Table, ArrayTable, Array, Bool and date/time nodes
keep the default empty range at offset 0.

## Comments and positions

```python
from tomlast.parser import Parser

parser = Parser(keep_comments=True)
parser.reset(b"[table] # next to table\n")
for expr in parser:
    for node in expr.siblings():
        shape = parser.shape(node.raw)
        print(node.kind, shape.start.line, shape.start.column, node.data)
```

With `keep_comments=True`, a comment on a line of its own is returned as a
`Comment` expression. A comment after a table or key-value is chained as the
`next` node of that expression.

`Parser.shape(rng)` turns a `Range` into a `Shape` with `start` and `end`
`Position`s. Each position has a byte `offset`, a 1-based `line` and a
1-based `column`. It raises `IndexError` for a range outside the document.
`Parser.raw(rng)` returns the input bytes a range covers.

## Lower-level helpers

`tomlast.scanner` has the tokenising functions. Each takes the document and
a start offset and returns offsets into the document. Examples are
`scan_basic_string`, `scan_comment`, `scan_whitespace` and
`scan_unquoted_key`.

`tomlast.strings` decodes string literals with `parse_basic_string`,
`parse_multiline_basic_string`, `parse_literal_string` and
`parse_multiline_literal_string`. Each returns a `ParsedString` that holds
the decoded `value` and the `end` offset past the closing delimiter.
`hex_to_rune` decodes the hex digits of a `\u` or `\U` escape.

## What it does not do

`tomlast` only builds syntax trees. It does not turn documents into Python
dictionaries or values. It does not convert numbers or dates. It does not
check for duplicate keys or tables, and it does not write TOML. It has no
command-line tool.