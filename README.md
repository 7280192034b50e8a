# tinyxmlkit

A compact XML document model for Python. It parses a document into a tree
of nodes, lets you walk and edit that tree, reads attribute and text
values as typed numbers and booleans, and writes the tree back out either
indented or compact. It has no dependencies outside the standard library.

## Modules

- `tinyxmlkit.document`: `XMLDocument`, the root of a tree; parsing,
  files, node factories and error state.
- `tinyxmlkit.element`: `XMLElement` and `ClosingType`.
- `tinyxmlkit.nodes`: `XMLNode`, `XMLText`, `XMLComment`,
  `XMLDeclaration`, `XMLUnknown`, `XMLAttribute` and the `XMLVisitor`
  base class.
- `tinyxmlkit.printer`: `XMLPrinter`, which renders a tree as text.
- `tinyxmlkit.util`: `XMLError`, `XMLException`, `Whitespace`,
  `TextFlags` and the helpers for character classes, entity decoding,
  number formatting and number parsing.

## Parsing

```python
from tinyxmlkit.document import XMLDocument

doc = XMLDocument()
doc.parse('<config><port value="8080"/><name>demo</name></config>')

root = doc.root_element                      # first child element
port = root.first_child_element("port").int_attribute("value", 0)
name = root.first_child_element("name").get_text()
```

`parse` takes a `str` or UTF-8 `bytes`. On malformed input it raises
`tinyxmlkit.util.XMLException` and leaves the document empty. The
exception has `error` (an `XMLError` code), `line` (the line the problem
was found on) and `detail`. Its message looks like
`Error=XML_ERROR_MISMATCHED_ELEMENT ErrorID=14 (0xe) Line number=1: XMLElement name=a`.

The document keeps the last error too: `error`, `error_id`,
`error_line_num`, `error_str` and `error_name`; `clear_error()` forgets
it and `print_error()` writes the message to standard output.
`XMLDocument.error_id_to_name(code)` turns a code into its name, such as
`XML_ERROR_PARSING`.

Elements nested 500 deep (`tinyxmlkit.document.MAX_ELEMENT_DEPTH`) fail
with `XMLError.ELEMENT_DEPTH_EXCEEDED`. Duplicate attributes, mismatched
end tags and declarations after other content are all errors.

Files are read with `load_file` and written as UTF-8 with `save_file`:

```python
doc.load_file("settings.xml")
doc.save_file("settings.out.xml", compact=False)
```

A missing file raises `XMLException` with `XMLError.ERROR_FILE_NOT_FOUND`,
an empty one with `XMLError.ERROR_EMPTY_DOCUMENT`.

## Building a document

```python
doc = XMLDocument()
doc.insert_end_child(doc.new_declaration(None))   # xml version="1.0" encoding="UTF-8"
root = doc.new_element("library")
doc.insert_end_child(root)

book = root.insert_new_child_element("book")
book.set_attribute("id", 7)
book.set_text("A Tale of Two Trees")
root.insert_new_comment("more to come")
```

Nodes can be moved with `insert_end_child`, `insert_first_child` and
`insert_after_child`, and removed with `delete_child`, `delete_children`
or `XMLDocument.delete_node`. A node can only be inserted into the
document that created it. `deep_clone(target)` copies a subtree into
another document and `XMLDocument.deep_copy(target)` replaces the contents
of another document with a copy. `shallow_equal` compares two nodes
without their children.

Navigation: `children()`, `first_child`, `last_child`, `next_sibling`,
`previous_sibling`, `parent`, `first_child_element(name)`,
`last_child_element(name)`, `next_sibling_element(name)`,
`previous_sibling_element(name)` and `child_element_count(name)`, where
`name` may be left out to match any element.

## Reading typed values

Elements offer typed accessors for attributes and text:
`int_attribute`, `unsigned_attribute`, `int64_attribute`,
`unsigned64_attribute`, `bool_attribute`, `float_attribute`,
`double_attribute`, and the matching `int_text`, `unsigned_text`,
`int64_text`, `unsigned64_text`, `bool_text`, `float_text` and
`double_text`. Each takes a default that is returned when the value is
missing or cannot be converted. The `query_*` forms raise `XMLException`
instead: `NO_ATTRIBUTE` or `WRONG_ATTRIBUTE_TYPE` for attributes,
`NO_TEXT_NODE` or `CAN_NOT_CONVERT_TEXT` for text.

Integers may be decimal or hexadecimal with a `0x` prefix, and are
wrapped to 32 or 64 bits as the accessor's name says. Booleans accept a
number (non-zero is true) or `true`/`True`/`TRUE`/`false`/`False`/`FALSE`.
Floats read with the `float` accessors are rounded to single precision.

`get_text()` returns the text of the first child that is not a comment,
or `None` when that child is not text. `set_text(value)` and
`set_attribute(name, value)` take a string, bool, integer or float.

## Printing

`XMLPrinter` is a visitor that renders a tree to text:

```python
from tinyxmlkit.printer import XMLPrinter

printer = XMLPrinter(compact=False)
doc.print(printer)
print(printer.getvalue())
```

Pass a text stream as `XMLPrinter(file)` to write there instead of to the
internal buffer; `doc.print()` with no printer writes to standard output.
Pretty output indents each level by four spaces. The printer can also be
driven directly with `open_element`, `push_attribute`, `push_text`,
`close_element`, `push_comment`, `push_declaration`, `push_unknown` and
`push_header`.

Attribute values are written with all five entities `&amp;`, `&lt;`,
`&gt;`, `&quot;` and `&apos;`; text escapes only `&`, `<` and `>`. A
document created with `process_entities=False` is printed without
escaping. A byte order mark read from the input is written back. Floats
are written with 17 significant digits, and the words used for booleans
can be changed with `tinyxmlkit.util.set_bool_serialization` (passing
`None` restores `true`/`false`).

## Visitors

Subclass `tinyxmlkit.nodes.XMLVisitor` and override any of
`visit_enter_document`, `visit_exit_document`, `visit_enter_element`,
`visit_exit_element`, `visit_text`, `visit_comment`, `visit_declaration`
and `visit_unknown`, then pass an instance to `accept` on a document or
node. Returning `False` from a `visit_enter_*` method skips that node's
children; returning `False` from any other method stops the visit of the
remaining siblings.

## Entities and whitespace

While parsing, the five predefined entities and numeric character
references (`&#20013;`, `&#x4e2d;`) are decoded in text and attribute
values; any other `&` is kept as it is. `XMLDocument(process_entities=False)`
leaves them undecoded. Line endings are normalised to `\n`.

`XMLDocument` also takes a `Whitespace` mode:
`PRESERVE_WHITESPACE` (the default) keeps text as found,
`COLLAPSE_WHITESPACE` trims text and squeezes runs of whitespace to one
space, and `PEDANTIC_WHITESPACE` additionally keeps whitespace-only text
that sits between an opening tag and its closing tag.

## What it does not do

This is a tree model and nothing more. It does not validate against a
DTD or schema, does not resolve namespaces, and does not expand entities
declared in a document type declaration; such declarations are kept as
`XMLUnknown` nodes. It has no command-line tool.