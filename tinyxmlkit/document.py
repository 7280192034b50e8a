"""The document: parsing XML text into a node tree, loading and saving files."""

from __future__ import annotations

import sys

from .element import ClosingType, XMLElement
from .nodes import (
    XMLComment,
    XMLDeclaration,
    XMLNode,
    XMLText,
    XMLUnknown,
    XMLVisitor,
)
from .nodes import XMLAttribute
from .printer import XMLPrinter
from .util import (
    TextFlags,
    Whitespace,
    XMLError,
    XMLException,
    decode_text,
    is_name_char,
    is_name_start_char,
    skip_whitespace,
)

__all__ = ["MAX_ELEMENT_DEPTH", "XMLDocument"]

MAX_ELEMENT_DEPTH = 500
_DEFAULT_DECLARATION = 'xml version="1.0" encoding="UTF-8"'
_BOM = "\ufeff"


class _Parser:
    """Recursive-descent reader that builds nodes into a document."""

    def __init__(self, document: XMLDocument, text: str):
        self.doc = document
        self.text = text
        self.end = len(text)
        self.line = 1
        self.depth = 0

    @property
    def failed(self) -> bool:
        return self.doc.error

    def fail(self, error: XMLError, line: int, detail: str | None = None) -> None:
        self.doc._set_error(error, line, detail)

    # --- low-level scanning ------------------------------------------

    def skip_ws(self, pos: int) -> int:
        pos, newlines = skip_whitespace(self.text, pos)
        self.line += newlines
        return pos

    def parse_text(self, pos: int, end_tag: str, flags: TextFlags):
        found = self.text.find(end_tag, pos)
        if found < 0:
            self.line += self.text.count("\n", pos)
            return None
        self.line += self.text.count("\n", pos, found)
        return decode_text(self.text[pos:found], flags), found + len(end_tag)

    def parse_name(self, pos: int):
        if pos >= self.end or not is_name_start_char(self.text[pos]):
            return None
        start = pos
        pos += 1
        while pos < self.end and is_name_char(self.text[pos]):
            pos += 1
        return self.text[start:pos], pos

    # --- document ------------------------------------------------------

    def run(self) -> None:
        doc = self.doc
        doc.line_num = 1
        pos = self.skip_ws(0)
        if self.text.startswith(_BOM, pos):
            doc.has_bom = True
            pos += len(_BOM)
        else:
            doc.has_bom = False
        if pos >= self.end:
            self.fail(XMLError.ERROR_EMPTY_DOCUMENT, 0)
            return
        self.parse_deep(doc, pos)

    def identify(self, pos: int, first: bool):
        text = self.text
        start, start_line = pos, self.line
        pos = self.skip_ws(pos)
        if pos >= self.end:
            return None, pos

        doc = self.doc
        if text.startswith("<?", pos):
            node, pos = XMLDeclaration("", doc), pos + 2
        elif text.startswith("<!--", pos):
            node, pos = XMLComment("", doc), pos + 4
        elif text.startswith("<![CDATA[", pos):
            node, pos = XMLText("", doc, cdata=True), pos + 9
        elif text.startswith("<!", pos):
            node, pos = XMLUnknown("", doc), pos + 2
        elif text.startswith("<", pos):
            if (
                doc.whitespace_mode is Whitespace.PEDANTIC_WHITESPACE
                and first
                and pos != start
                and text.startswith("/", pos + 1)
            ):
                node = XMLText("", doc)
                node.line_num = start_line
                self.line = start_line
                return node, start
            node, pos = XMLElement("", doc), pos + 1
        else:
            node = XMLText("", doc)
            node.line_num = self.line
            self.line = start_line
            return node, start
        node.line_num = self.line
        return node, pos

    # --- leaf nodes ----------------------------------------------------

    def parse_leaf(self, node: XMLNode, pos: int):
        if node.to_text() is not None:
            return self.parse_text_node(node, pos)
        if node.to_comment() is not None:
            end_tag, flags, error = "-->", TextFlags.COMMENT, XMLError.ERROR_PARSING_COMMENT
        elif node.to_declaration() is not None:
            end_tag, flags, error = (
                "?>",
                TextFlags.NEEDS_NEWLINE_NORMALIZATION,
                XMLError.ERROR_PARSING_DECLARATION,
            )
        else:
            end_tag, flags, error = (
                ">",
                TextFlags.NEEDS_NEWLINE_NORMALIZATION,
                XMLError.ERROR_PARSING_UNKNOWN,
            )
        result = self.parse_text(pos, end_tag, flags)
        if result is None:
            self.fail(error, node.line_num)
            return None
        node._value, pos = result
        return pos

    def parse_text_node(self, node: XMLText, pos: int):
        if node.cdata:
            result = self.parse_text(pos, "]]>", TextFlags.NEEDS_NEWLINE_NORMALIZATION)
            if result is None:
                self.fail(XMLError.ERROR_PARSING_CDATA, node.line_num)
                return None
            node._value, pos = result
            return pos

        doc = self.doc
        flags = (
            TextFlags.TEXT_ELEMENT
            if doc.process_entities
            else TextFlags.TEXT_ELEMENT_LEAVE_ENTITIES
        )
        if doc.whitespace_mode is Whitespace.COLLAPSE_WHITESPACE:
            flags |= TextFlags.NEEDS_WHITESPACE_COLLAPSING
        result = self.parse_text(pos, "<", flags)
        if result is None:
            self.fail(XMLError.ERROR_PARSING_TEXT, node.line_num)
            return None
        node._value, pos = result
        if pos < self.end:
            return pos - 1
        return None

    # --- elements ------------------------------------------------------

    def parse_attribute(self, pos: int):
        named = self.parse_name(pos)
        if named is None:
            return None
        name, pos = named
        if pos >= self.end:
            return None
        pos = self.skip_ws(pos)
        if not self.text.startswith("=", pos):
            return None
        pos = self.skip_ws(pos + 1)
        if pos >= self.end or self.text[pos] not in "\"'":
            return None
        quote = self.text[pos]
        flags = (
            TextFlags.ATTRIBUTE_VALUE
            if self.doc.process_entities
            else TextFlags.ATTRIBUTE_VALUE_LEAVE_ENTITIES
        )
        result = self.parse_text(pos + 1, quote, flags)
        if result is None:
            return None
        value, pos = result
        return name, value, pos

    def parse_attributes(self, element: XMLElement, pos: int):
        detail = f"XMLElement name={element.name}"
        while True:
            pos = self.skip_ws(pos)
            if pos >= self.end:
                self.fail(XMLError.ERROR_PARSING_ELEMENT, element.line_num, detail)
                return None
            ch = self.text[pos]
            if is_name_start_char(ch):
                attr_line = self.line
                parsed = self.parse_attribute(pos)
                if parsed is None or element.find_attribute(parsed[0]) is not None:
                    self.fail(XMLError.ERROR_PARSING_ATTRIBUTE, attr_line, detail)
                    return None
                name, value, pos = parsed
                element._attributes.append(XMLAttribute(name, value, attr_line))
            elif ch == ">":
                return pos + 1
            elif self.text.startswith("/>", pos):
                element.closing_type = ClosingType.CLOSED
                return pos + 2
            else:
                self.fail(XMLError.ERROR_PARSING_ELEMENT, element.line_num)
                return None

    def parse_element_head(self, element: XMLElement, pos: int):
        pos = self.skip_ws(pos)
        if self.text.startswith("/", pos):
            element.closing_type = ClosingType.CLOSING
            pos += 1
        named = self.parse_name(pos)
        if named is None:
            return None
        element._value, pos = named
        return self.parse_attributes(element, pos)

    # --- children ------------------------------------------------------

    def parse_deep(self, parent: XMLNode, pos: int):
        """Parse children of *parent*; returns (pos, end tag name) on a close tag."""
        self.depth += 1
        try:
            if self.depth == MAX_ELEMENT_DEPTH:
                self.fail(
                    XMLError.ELEMENT_DEPTH_EXCEEDED,
                    self.line,
                    "Element nesting is too deep.",
                )
            if self.failed:
                return None, None
            return self._parse_children(parent, pos)
        finally:
            self.depth -= 1

    def _parse_children(self, parent: XMLNode, pos):
        first = True
        while pos is not None and pos < self.end:
            node, pos = self.identify(pos, first)
            if node is None:
                break
            first = False
            initial_line = node.line_num

            end_tag = None
            element = node.to_element()
            if element is not None:
                pos = self.parse_element_head(element, pos)
                if (
                    pos is not None
                    and pos < self.end
                    and element.closing_type is ClosingType.OPEN
                ):
                    pos, end_tag = self.parse_deep(element, pos)
            else:
                pos = self.parse_leaf(node, pos)

            if pos is None:
                if not self.failed:
                    self.fail(XMLError.ERROR_PARSING, initial_line)
                break

            declaration = node.to_declaration()
            if declaration is not None:
                well_located = False
                if parent.to_document() is not None:
                    first_child, last_child = parent.first_child, parent.last_child
                    well_located = first_child is None or (
                        first_child.to_declaration() is not None
                        and last_child.to_declaration() is not None
                    )
                if not well_located:
                    self.fail(
                        XMLError.ERROR_PARSING_DECLARATION,
                        initial_line,
                        f"XMLDeclaration value={declaration.value}",
                    )
                    break

            if element is not None:
                if element.closing_type is ClosingType.CLOSING:
                    return pos, element.name
                if end_tag is None:
                    mismatch = element.closing_type is ClosingType.OPEN
                else:
                    mismatch = (
                        element.closing_type is not ClosingType.OPEN
                        or end_tag != element.name
                    )
                if mismatch:
                    self.fail(
                        XMLError.ERROR_MISMATCHED_ELEMENT,
                        initial_line,
                        f"XMLElement name={element.name}",
                    )
                    break

            parent.insert_end_child(node)
        return None, None


class XMLDocument(XMLNode):
    """The root of a tree: parses, owns, prints and saves XML."""

    def __init__(
        self,
        process_entities: bool = True,
        whitespace: Whitespace = Whitespace.PRESERVE_WHITESPACE,
    ):
        super().__init__(None)
        self._document = self
        self._process_entities = process_entities
        self._whitespace = Whitespace(whitespace)
        self.has_bom = False
        self._error: XMLException | None = None

    # --- properties ----------------------------------------------------

    @property
    def value(self) -> None:
        """Documents have no value."""
        return None

    @property
    def process_entities(self) -> bool:
        return self._process_entities

    @property
    def whitespace_mode(self) -> Whitespace:
        return self._whitespace

    def to_document(self):
        return self

    @property
    def root_element(self) -> XMLElement | None:
        return self.first_child_element()

    # --- errors --------------------------------------------------------

    @property
    def error(self) -> bool:
        return self._error is not None

    @property
    def error_id(self) -> XMLError:
        return self._error.error if self._error is not None else XMLError.SUCCESS

    @property
    def error_line_num(self) -> int:
        return self._error.line if self._error is not None else 0

    @property
    def error_str(self) -> str:
        return self._error.message if self._error is not None else ""

    @property
    def error_name(self) -> str:
        return self.error_id.label

    def _set_error(
        self, error: XMLError, line: int, detail: str | None = None
    ) -> XMLException:
        self._error = XMLException(error, line, detail)
        return self._error

    def clear_error(self) -> None:
        """Forget the last error."""
        self._error = None

    @staticmethod
    def error_id_to_name(error_id) -> str:
        """The conventional name of an error code, such as ``XML_ERROR_PARSING``."""
        return XMLError(error_id).label

    def print_error(self) -> None:
        """Write the last error message to standard output."""
        print(self.error_str)

    # --- parsing and files ---------------------------------------------

    def _parse_buffer(self, text: str) -> None:
        _Parser(self, text).run()

    def parse(self, xml) -> None:
        """Replace the contents with the tree parsed from *xml* (str or bytes).

        Raises :class:`XMLException` on malformed input; the document is then empty.
        """
        self.clear()
        if isinstance(xml, (bytes, bytearray)):
            xml = bytes(xml).decode("utf-8", errors="replace")
        if not xml:
            raise self._set_error(XMLError.ERROR_EMPTY_DOCUMENT, 0)
        self._parse_buffer(xml)
        if self._error is not None:
            self.delete_children()
            raise self._error

    def load_file(self, filename) -> None:
        """Parse the file at *filename*; raises :class:`XMLException` on failure."""
        if filename is None:
            raise self._set_error(
                XMLError.ERROR_FILE_COULD_NOT_BE_OPENED, 0, "filename=<null>"
            )
        self.clear()
        try:
            fp = open(filename, "rb")
        except OSError:
            raise self._set_error(
                XMLError.ERROR_FILE_NOT_FOUND, 0, f"filename={filename}"
            ) from None
        with fp:
            try:
                data = fp.read()
            except OSError:
                raise self._set_error(XMLError.ERROR_FILE_READ_ERROR, 0) from None
        if not data:
            raise self._set_error(XMLError.ERROR_EMPTY_DOCUMENT, 0)
        self._parse_buffer(data.decode("utf-8", errors="replace"))
        if self._error is not None:
            raise self._error

    def save_file(self, filename, compact: bool = False) -> None:
        """Write the document to *filename* as UTF-8."""
        if filename is None:
            raise self._set_error(
                XMLError.ERROR_FILE_COULD_NOT_BE_OPENED, 0, "filename=<null>"
            )
        try:
            fp = open(filename, "w", encoding="utf-8")
        except OSError:
            raise self._set_error(
                XMLError.ERROR_FILE_COULD_NOT_BE_OPENED, 0, f"filename={filename}"
            ) from None
        with fp:
            self.clear_error()
            self.print(XMLPrinter(fp, compact))

    def print(self, printer: XMLPrinter | None = None) -> XMLPrinter:
        """Print through *printer*, or to standard output when none is given."""
        if printer is None:
            printer = XMLPrinter(sys.stdout)
        self.accept(printer)
        return printer

    # --- node factories ------------------------------------------------

    def new_element(self, name: str) -> XMLElement:
        return XMLElement(name, self)

    def new_comment(self, text: str) -> XMLComment:
        return XMLComment(text, self)

    def new_text(self, text: str) -> XMLText:
        return XMLText(text, self)

    def new_declaration(self, text: str | None = None) -> XMLDeclaration:
        return XMLDeclaration(text if text is not None else _DEFAULT_DECLARATION, self)

    def new_unknown(self, text: str) -> XMLUnknown:
        return XMLUnknown(text, self)

    def delete_node(self, node: XMLNode) -> None:
        """Remove *node* from the tree, wherever it sits."""
        if node.document is not self:
            raise ValueError("node belongs to a different document")
        if node.parent is not None:
            node.parent.delete_child(node)

    def clear(self) -> None:
        """Remove all content and forget any error."""
        self.delete_children()
        self.clear_error()

    def deep_copy(self, target: XMLDocument) -> None:
        """Replace the contents of *target* with a copy of this document."""
        if target is self:
            return
        target.clear()
        for child in self.children():
            target.insert_end_child(child.deep_clone(target))

    # --- node protocol -------------------------------------------------

    def shallow_clone(self, target=None):
        return None

    def shallow_equal(self, other: XMLNode) -> bool:
        return False

    def accept(self, visitor: XMLVisitor) -> bool:
        if visitor.visit_enter_document(self):
            for child in self.children():
                if not child.accept(visitor):
                    break
        return visitor.visit_exit_document(self)

    def __repr__(self) -> str:
        return f"XMLDocument(children={len(self._children)})"