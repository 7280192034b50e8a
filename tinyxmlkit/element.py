"""Elements: named nodes carrying ordered attributes and child nodes."""

from __future__ import annotations

import enum
from typing import Callable, Iterator

from .nodes import (
    XMLAttribute,
    XMLComment,
    XMLDeclaration,
    XMLNode,
    XMLText,
    XMLUnknown,
    XMLVisitor,
)
from .util import (
    XMLError,
    XMLException,
    format_value,
    to_bool,
    to_double,
    to_float,
    to_int,
    to_int64,
    to_unsigned,
    to_unsigned64,
)

__all__ = ["ClosingType", "XMLElement"]


class ClosingType(enum.Enum):
    """How an element tag was closed in the source text."""

    OPEN = 0  # <foo>
    CLOSED = 1  # <foo/>
    CLOSING = 2  # </foo>


class XMLElement(XMLNode):
    """An element with a name, ordered attributes and children."""

    def __init__(self, name: str = "", document=None):
        super().__init__(document)
        self.set_value(name)
        self.closing_type = ClosingType.OPEN
        self._attributes: list[XMLAttribute] = []

    def to_element(self):
        return self

    @property
    def name(self) -> str:
        return self.value

    @name.setter
    def name(self, text: str) -> None:
        self.set_value(text)

    # --- attributes ----------------------------------------------------

    def find_attribute(self, name: str) -> XMLAttribute | None:
        """Return the attribute called *name*, or ``None``."""
        for attribute in self._attributes:
            if attribute.name == name:
                return attribute
        return None

    def attribute(self, name: str, value: str | None = None) -> str | None:
        """Return the value of *name*; if *value* is given, only when it matches."""
        found = self.find_attribute(name)
        if found is None:
            return None
        if value is None or found.value == value:
            return found.value
        return None

    def attributes(self) -> Iterator[XMLAttribute]:
        """Iterate over a snapshot of the attributes in document order."""
        return iter(tuple(self._attributes))

    @property
    def first_attribute(self) -> XMLAttribute | None:
        return self._attributes[0] if self._attributes else None

    def _find_or_create_attribute(self, name: str) -> XMLAttribute:
        found = self.find_attribute(name)
        if found is None:
            found = XMLAttribute(name)
            self._attributes.append(found)
        return found

    def set_attribute(self, name: str, value) -> None:
        """Set attribute *name* from a string, bool, integer or float."""
        self._find_or_create_attribute(name).set_attribute(value)

    def delete_attribute(self, name: str) -> None:
        """Remove the attribute called *name*, if there is one."""
        for index, attribute in enumerate(self._attributes):
            if attribute.name == name:
                del self._attributes[index]
                return

    def _query_attribute(self, name: str, parse: Callable[[XMLAttribute], object]):
        found = self.find_attribute(name)
        if found is None:
            raise XMLException(
                XMLError.NO_ATTRIBUTE, self.line_num, f"XMLElement name={self.name}"
            )
        return parse(found)

    def query_int_attribute(self, name: str) -> int:
        return self._query_attribute(name, XMLAttribute.query_int_value)

    def query_unsigned_attribute(self, name: str) -> int:
        return self._query_attribute(name, XMLAttribute.query_unsigned_value)

    def query_int64_attribute(self, name: str) -> int:
        return self._query_attribute(name, XMLAttribute.query_int64_value)

    def query_unsigned64_attribute(self, name: str) -> int:
        return self._query_attribute(name, XMLAttribute.query_unsigned64_value)

    def query_bool_attribute(self, name: str) -> bool:
        return self._query_attribute(name, XMLAttribute.query_bool_value)

    def query_float_attribute(self, name: str) -> float:
        return self._query_attribute(name, XMLAttribute.query_float_value)

    def query_double_attribute(self, name: str) -> float:
        return self._query_attribute(name, XMLAttribute.query_double_value)

    @staticmethod
    def _or_default(query: Callable[[], object], default):
        try:
            return query()
        except XMLException:
            return default

    def int_attribute(self, name: str, default: int = 0) -> int:
        return self._or_default(lambda: self.query_int_attribute(name), default)

    def unsigned_attribute(self, name: str, default: int = 0) -> int:
        return self._or_default(lambda: self.query_unsigned_attribute(name), default)

    def int64_attribute(self, name: str, default: int = 0) -> int:
        return self._or_default(lambda: self.query_int64_attribute(name), default)

    def unsigned64_attribute(self, name: str, default: int = 0) -> int:
        return self._or_default(lambda: self.query_unsigned64_attribute(name), default)

    def bool_attribute(self, name: str, default: bool = False) -> bool:
        return self._or_default(lambda: self.query_bool_attribute(name), default)

    def float_attribute(self, name: str, default: float = 0.0) -> float:
        return self._or_default(lambda: self.query_float_attribute(name), default)

    def double_attribute(self, name: str, default: float = 0.0) -> float:
        return self._or_default(lambda: self.query_double_attribute(name), default)

    # --- text ----------------------------------------------------------

    def get_text(self) -> str | None:
        """Text of the first child that is not a comment, if that child is text."""
        for child in self._children:
            if child.to_comment() is not None:
                continue
            if child.to_text() is not None:
                return child.value
            return None
        return None

    def set_text(self, value) -> None:
        """Replace the leading text child, or insert one if there is none."""
        text = format_value(value)
        first = self.first_child
        if first is not None and first.to_text() is not None:
            first.set_value(text)
        else:
            self.insert_first_child(self._new_node(XMLText, "new_text", text))

    def _query_text(self, parse: Callable[[str], object]):
        first = self.first_child
        if first is None or first.to_text() is None:
            raise XMLException(
                XMLError.NO_TEXT_NODE, self.line_num, f"XMLElement name={self.name}"
            )
        try:
            return parse(first.value)
        except ValueError:
            raise XMLException(
                XMLError.CAN_NOT_CONVERT_TEXT,
                self.line_num,
                f"XMLElement name={self.name}",
            ) from None

    def query_int_text(self) -> int:
        return self._query_text(to_int)

    def query_unsigned_text(self) -> int:
        return self._query_text(to_unsigned)

    def query_int64_text(self) -> int:
        return self._query_text(to_int64)

    def query_unsigned64_text(self) -> int:
        return self._query_text(to_unsigned64)

    def query_bool_text(self) -> bool:
        return self._query_text(to_bool)

    def query_float_text(self) -> float:
        return self._query_text(to_float)

    def query_double_text(self) -> float:
        return self._query_text(to_double)

    def int_text(self, default: int = 0) -> int:
        return self._or_default(self.query_int_text, default)

    def unsigned_text(self, default: int = 0) -> int:
        return self._or_default(self.query_unsigned_text, default)

    def int64_text(self, default: int = 0) -> int:
        return self._or_default(self.query_int64_text, default)

    def unsigned64_text(self, default: int = 0) -> int:
        return self._or_default(self.query_unsigned64_text, default)

    def bool_text(self, default: bool = False) -> bool:
        return self._or_default(self.query_bool_text, default)

    def float_text(self, default: float = 0.0) -> float:
        return self._or_default(self.query_float_text, default)

    def double_text(self, default: float = 0.0) -> float:
        return self._or_default(self.query_double_text, default)

    # --- building children ---------------------------------------------

    def _new_node(self, kind, factory: str, value):
        if self._document is not None:
            return getattr(self._document, factory)(value)
        return kind(value)

    def insert_new_child_element(self, name: str) -> XMLElement:
        return self.insert_end_child(self._new_node(XMLElement, "new_element", name))

    def insert_new_comment(self, comment: str) -> XMLComment:
        return self.insert_end_child(self._new_node(XMLComment, "new_comment", comment))

    def insert_new_text(self, text: str) -> XMLText:
        return self.insert_end_child(self._new_node(XMLText, "new_text", text))

    def insert_new_declaration(self, text: str | None = None) -> XMLDeclaration:
        if self._document is not None:
            node = self._document.new_declaration(text)
        else:
            node = XMLDeclaration(
                text if text is not None else 'xml version="1.0" encoding="UTF-8"'
            )
        return self.insert_end_child(node)

    def insert_new_unknown(self, text: str) -> XMLUnknown:
        return self.insert_end_child(self._new_node(XMLUnknown, "new_unknown", text))

    # --- cloning, comparison and visiting ------------------------------

    def shallow_clone(self, target=None):
        owner = self._owner(target)
        if owner is None:
            element = XMLElement(self.value)
        else:
            element = owner.new_element(self.value)
        for attribute in self._attributes:
            element.set_attribute(attribute.name, attribute.value)
        return element

    def shallow_equal(self, other: XMLNode) -> bool:
        element = other.to_element()
        if element is None or element.name != self.name:
            return False
        if len(element._attributes) != len(self._attributes):
            return False
        return all(
            mine.value == theirs.value
            for mine, theirs in zip(self._attributes, element._attributes)
        )

    def accept(self, visitor: XMLVisitor) -> bool:
        if visitor.visit_enter_element(self, tuple(self._attributes)):
            for child in self.children():
                if not child.accept(visitor):
                    break
        return visitor.visit_exit_element(self)

    def __repr__(self) -> str:
        return f"XMLElement({self.name!r})"