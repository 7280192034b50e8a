"""Serialisation of a node tree to XML text, pretty-printed or compact."""

from __future__ import annotations

from typing import TextIO

from .nodes import XMLVisitor
from .util import ENTITIES, format_value

__all__ = ["XMLPrinter"]

_INDENT = "    "
_BOM = "\ufeff"

# Attribute values escape all five predefined entities; text escapes only
# the characters that would otherwise break the markup.
_ESCAPE_ALL = {ord(value): f"&{pattern};" for pattern, value in ENTITIES}
_ESCAPE_RESTRICTED = {
    ord(value): f"&{pattern};" for pattern, value in ENTITIES if value in "&<>"
}


class XMLPrinter(XMLVisitor):
    """Writes XML either to a text stream or to an internal buffer.

    Without a *file*, output is collected and returned by :meth:`getvalue`.
    The printer can be driven directly (``open_element``, ``push_text``...)
    or used as a visitor with ``node.accept(printer)``.
    """

    def __init__(self, file: TextIO | None = None, compact: bool = False, depth: int = 0):
        self._file = file
        self._compact = compact
        self._depth = depth
        self._text_depth = -1
        self._element_just_opened = False
        self._first_element = True
        self._process_entities = True
        self._stack: list[str] = []
        self._buffer: list[str] = []

    # --- low-level output ----------------------------------------------

    def _write(self, data: str) -> None:
        if self._file is not None:
            self._file.write(data)
        else:
            self._buffer.append(data)

    def _print_space(self, depth: int) -> None:
        self._write(_INDENT * depth)

    def _print_string(self, text: str, restricted: bool) -> None:
        if not self._process_entities:
            self._write(text)
            return
        table = _ESCAPE_RESTRICTED if restricted else _ESCAPE_ALL
        self._write(text.translate(table))

    def getvalue(self) -> str:
        """Everything written so far when printing to the internal buffer."""
        return "".join(self._buffer)

    @property
    def compact(self) -> bool:
        return self._compact

    def compact_mode(self, element) -> bool:
        """Whether the children of *element* are printed compactly."""
        return self._compact

    # --- structure -----------------------------------------------------

    def _seal_element_if_just_opened(self) -> None:
        if not self._element_just_opened:
            return
        self._element_just_opened = False
        self._write(">")

    def _prepare_for_new_node(self, compact_mode: bool) -> None:
        self._seal_element_if_just_opened()
        if compact_mode:
            return
        if self._first_element:
            self._print_space(self._depth)
        elif self._text_depth < 0:
            self._write("\n")
            self._print_space(self._depth)
        self._first_element = False

    def push_header(self, write_bom: bool, write_dec: bool) -> None:
        """Write a byte order mark and/or a standard XML declaration."""
        if write_bom:
            self._write(_BOM)
        if write_dec:
            self.push_declaration('xml version="1.0"')

    def open_element(self, name: str, compact_mode: bool | None = None) -> None:
        """Start an element; attributes may follow until content is pushed."""
        if compact_mode is None:
            compact_mode = self._compact
        self._prepare_for_new_node(compact_mode)
        self._stack.append(name)
        self._write("<")
        self._write(name)
        self._element_just_opened = True
        self._depth += 1

    def push_attribute(self, name: str, value) -> None:
        """Write an attribute of the element just opened."""
        if not self._element_just_opened:
            raise RuntimeError("attributes can only follow an opened element")
        self._write(" ")
        self._write(name)
        self._write('="')
        self._print_string(format_value(value), False)
        self._write('"')

    def close_element(self, compact_mode: bool | None = None) -> None:
        """Close the most recently opened element."""
        if compact_mode is None:
            compact_mode = self._compact
        if not self._stack:
            raise IndexError("no open element to close")
        self._depth -= 1
        name = self._stack.pop()

        if self._element_just_opened:
            self._write("/>")
        else:
            if self._text_depth < 0 and not compact_mode:
                self._write("\n")
                self._print_space(self._depth)
            self._write("</")
            self._write(name)
            self._write(">")

        if self._text_depth == self._depth:
            self._text_depth = -1
        if self._depth == 0 and not compact_mode:
            self._write("\n")
        self._element_just_opened = False

    def push_text(self, text, cdata: bool = False) -> None:
        """Write text content; non-string values are formatted first."""
        self._text_depth = self._depth - 1
        self._seal_element_if_just_opened()
        content = format_value(text)
        if cdata:
            self._write("<![CDATA[")
            self._write(content)
            self._write("]]>")
        else:
            self._print_string(content, True)

    def push_comment(self, comment: str) -> None:
        self._prepare_for_new_node(self._compact)
        self._write("<!--")
        self._write(comment)
        self._write("-->")

    def push_declaration(self, value: str) -> None:
        self._prepare_for_new_node(self._compact)
        self._write("<?")
        self._write(value)
        self._write("?>")

    def push_unknown(self, value: str) -> None:
        self._prepare_for_new_node(self._compact)
        self._write("<!")
        self._write(value)
        self._write(">")

    # --- visitor interface ---------------------------------------------

    def visit_enter_document(self, document) -> bool:
        self._process_entities = getattr(document, "process_entities", True)
        if getattr(document, "has_bom", False):
            self.push_header(True, False)
        return True

    def visit_exit_document(self, document) -> bool:
        return True

    def visit_enter_element(self, element, attributes) -> bool:
        parent = element.parent
        parent_element = parent.to_element() if parent is not None else None
        if parent_element is not None:
            compact_mode = self.compact_mode(parent_element)
        else:
            compact_mode = self._compact
        self.open_element(element.name, compact_mode)
        for attribute in attributes:
            self.push_attribute(attribute.name, attribute.value)
        return True

    def visit_exit_element(self, element) -> bool:
        self.close_element(self.compact_mode(element))
        return True

    def visit_text(self, text) -> bool:
        self.push_text(text.value, text.cdata)
        return True

    def visit_comment(self, comment) -> bool:
        self.push_comment(comment.value)
        return True

    def visit_declaration(self, declaration) -> bool:
        self.push_declaration(declaration.value)
        return True

    def visit_unknown(self, unknown) -> bool:
        self.push_unknown(unknown.value)
        return True