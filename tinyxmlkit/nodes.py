"""The node tree: the visitor interface, leaf node types and attributes."""

from __future__ import annotations

import abc
from typing import Iterator

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

__all__ = [
    "XMLVisitor",
    "XMLNode",
    "XMLText",
    "XMLComment",
    "XMLDeclaration",
    "XMLUnknown",
    "XMLAttribute",
]


class XMLVisitor:
    """Callbacks for walking a tree with ``accept``.

    Every method returns ``True`` to keep walking; returning ``False`` from an
    enter method skips the children, and from the others stops visiting the
    remaining siblings.
    """

    def visit_enter_document(self, document) -> bool:
        return True

    def visit_exit_document(self, document) -> bool:
        return True

    def visit_enter_element(self, element, attributes) -> bool:
        return True

    def visit_exit_element(self, element) -> bool:
        return True

    def visit_text(self, text) -> bool:
        return True

    def visit_comment(self, comment) -> bool:
        return True

    def visit_declaration(self, declaration) -> bool:
        return True

    def visit_unknown(self, unknown) -> bool:
        return True


class XMLNode(abc.ABC):
    """Base of every node in the tree."""

    def __init__(self, document=None):
        self._document = document
        self._parent: XMLNode | None = None
        self._children: list[XMLNode] = []
        self._value = ""
        self.line_num = 0
        self.user_data = None

    # --- identity and type hooks ---------------------------------------

    @property
    def document(self):
        """The document that owns this node, or ``None`` for a free node."""
        return self._document

    @property
    def parent(self) -> XMLNode | None:
        return self._parent

    @property
    def value(self) -> str | None:
        return self._value

    @value.setter
    def value(self, text: str) -> None:
        self.set_value(text)

    def set_value(self, text: str) -> None:
        """Replace the node's value (element name, text, comment body...)."""
        if not isinstance(text, str):
            raise TypeError("node value must be a string")
        self._value = text

    def to_element(self):
        return None

    def to_text(self):
        return None

    def to_comment(self):
        return None

    def to_declaration(self):
        return None

    def to_unknown(self):
        return None

    def to_document(self):
        return None

    def _element_named(self, name: str | None):
        element = self.to_element()
        if element is None:
            return None
        if name is None or element.value == name:
            return element
        return None

    # --- navigation ----------------------------------------------------

    def children(self) -> Iterator[XMLNode]:
        """Iterate over a snapshot of the direct children."""
        return iter(tuple(self._children))

    def no_children(self) -> bool:
        return not self._children

    @property
    def first_child(self) -> XMLNode | None:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> XMLNode | None:
        return self._children[-1] if self._children else None

    def _index_in_parent(self) -> int | None:
        if self._parent is None:
            return None
        for index, child in enumerate(self._parent._children):
            if child is self:
                return index
        return None

    @property
    def previous_sibling(self) -> XMLNode | None:
        index = self._index_in_parent()
        if not index:
            return None
        return self._parent._children[index - 1]

    @property
    def next_sibling(self) -> XMLNode | None:
        index = self._index_in_parent()
        if index is None or index + 1 >= len(self._parent._children):
            return None
        return self._parent._children[index + 1]

    def child_element_count(self, name: str | None = None) -> int:
        """Count child elements, optionally only those called *name*."""
        return sum(1 for child in self._children if child._element_named(name))

    def first_child_element(self, name: str | None = None):
        for child in self._children:
            element = child._element_named(name)
            if element is not None:
                return element
        return None

    def last_child_element(self, name: str | None = None):
        for child in reversed(self._children):
            element = child._element_named(name)
            if element is not None:
                return element
        return None

    def next_sibling_element(self, name: str | None = None):
        index = self._index_in_parent()
        if index is None:
            return None
        for node in self._parent._children[index + 1:]:
            element = node._element_named(name)
            if element is not None:
                return element
        return None

    def previous_sibling_element(self, name: str | None = None):
        index = self._index_in_parent()
        if index is None:
            return None
        for node in reversed(self._parent._children[:index]):
            element = node._element_named(name)
            if element is not None:
                return element
        return None

    # --- tree editing --------------------------------------------------

    def _check_insertable(self, node: XMLNode) -> None:
        if node._document is not self._document:
            raise ValueError("node belongs to a different document")
        ancestor: XMLNode | None = self
        while ancestor is not None:
            if ancestor is node:
                raise ValueError("cannot insert a node into itself or its descendant")
            ancestor = ancestor._parent

    def _unlink(self, child: XMLNode) -> None:
        index = child._index_in_parent()
        if child._parent is not self or index is None:
            raise ValueError("node is not a child of this node")
        del self._children[index]
        child._parent = None

    def _detach(self, node: XMLNode) -> None:
        self._check_insertable(node)
        if node._parent is not None:
            node._parent._unlink(node)

    def insert_end_child(self, node: XMLNode) -> XMLNode:
        """Append *node* as the last child, moving it if already in the tree."""
        self._detach(node)
        self._children.append(node)
        node._parent = self
        return node

    def insert_first_child(self, node: XMLNode) -> XMLNode:
        """Insert *node* as the first child, moving it if already in the tree."""
        self._detach(node)
        self._children.insert(0, node)
        node._parent = self
        return node

    def insert_after_child(self, after: XMLNode, node: XMLNode) -> XMLNode:
        """Insert *node* directly after the child *after*."""
        if node._document is not self._document:
            raise ValueError("node belongs to a different document")
        if after._parent is not self:
            raise ValueError("'after' is not a child of this node")
        if after is node:
            return node
        if after is self._children[-1]:
            return self.insert_end_child(node)
        self._detach(node)
        index = after._index_in_parent()
        self._children.insert(index + 1, node)
        node._parent = self
        return node

    def delete_child(self, node: XMLNode) -> None:
        """Remove the child *node* from this node."""
        self._unlink(node)

    def delete_children(self) -> None:
        """Remove every child of this node."""
        for child in self._children:
            child._parent = None
        self._children.clear()

    # --- cloning, comparison and visiting ------------------------------

    def _owner(self, target):
        return target if target is not None else self._document

    def deep_clone(self, target=None):
        """Copy this node and its whole subtree into *target* (or its own document)."""
        clone = self.shallow_clone(target)
        if clone is None:
            return None
        for child in self._children:
            clone.insert_end_child(child.deep_clone(target))
        return clone

    @abc.abstractmethod
    def shallow_clone(self, target=None):
        """Copy this node without its children."""

    @abc.abstractmethod
    def shallow_equal(self, other: XMLNode) -> bool:
        """Compare this node with *other*, ignoring children."""

    @abc.abstractmethod
    def accept(self, visitor: XMLVisitor) -> bool:
        """Walk this node (and its subtree) with *visitor*."""


class XMLText(XMLNode):
    """Character data, plain or CDATA."""

    def __init__(self, value: str = "", document=None, *, cdata: bool = False):
        super().__init__(document)
        self.set_value(value)
        self.cdata = cdata

    def to_text(self):
        return self

    def shallow_clone(self, target=None):
        owner = self._owner(target)
        if owner is None:
            return XMLText(self.value, cdata=self.cdata)
        text = owner.new_text(self.value)
        text.cdata = self.cdata
        return text

    def shallow_equal(self, other: XMLNode) -> bool:
        text = other.to_text()
        return text is not None and text.value == self.value

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_text(self)

    def __repr__(self) -> str:
        return f"XMLText({self.value!r}, cdata={self.cdata})"


class XMLComment(XMLNode):
    """A ``<!-- ... -->`` comment."""

    def __init__(self, value: str = "", document=None):
        super().__init__(document)
        self.set_value(value)

    def to_comment(self):
        return self

    def shallow_clone(self, target=None):
        owner = self._owner(target)
        if owner is None:
            return XMLComment(self.value)
        return owner.new_comment(self.value)

    def shallow_equal(self, other: XMLNode) -> bool:
        comment = other.to_comment()
        return comment is not None and comment.value == self.value

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_comment(self)

    def __repr__(self) -> str:
        return f"XMLComment({self.value!r})"


class XMLDeclaration(XMLNode):
    """A ``<? ... ?>`` declaration."""

    def __init__(self, value: str = "", document=None):
        super().__init__(document)
        self.set_value(value)

    def to_declaration(self):
        return self

    def shallow_clone(self, target=None):
        owner = self._owner(target)
        if owner is None:
            return XMLDeclaration(self.value)
        return owner.new_declaration(self.value)

    def shallow_equal(self, other: XMLNode) -> bool:
        declaration = other.to_declaration()
        return declaration is not None and declaration.value == self.value

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_declaration(self)

    def __repr__(self) -> str:
        return f"XMLDeclaration({self.value!r})"


class XMLUnknown(XMLNode):
    """Any ``<! ... >`` construct that is not otherwise understood, such as a DTD."""

    def __init__(self, value: str = "", document=None):
        super().__init__(document)
        self.set_value(value)

    def to_unknown(self):
        return self

    def shallow_clone(self, target=None):
        owner = self._owner(target)
        if owner is None:
            return XMLUnknown(self.value)
        return owner.new_unknown(self.value)

    def shallow_equal(self, other: XMLNode) -> bool:
        unknown = other.to_unknown()
        return unknown is not None and unknown.value == self.value

    def accept(self, visitor: XMLVisitor) -> bool:
        return visitor.visit_unknown(self)

    def __repr__(self) -> str:
        return f"XMLUnknown({self.value!r})"


class XMLAttribute:
    """A name/value pair on an element."""

    def __init__(self, name: str, value: str = "", line_num: int = 0):
        self.name = name
        self.value = value
        self.line_num = line_num

    def _convert(self, parse):
        try:
            return parse(self.value)
        except ValueError:
            raise XMLException(
                XMLError.WRONG_ATTRIBUTE_TYPE, self.line_num, f"attribute name={self.name}"
            ) from None

    def query_int_value(self) -> int:
        return self._convert(to_int)

    def query_unsigned_value(self) -> int:
        return self._convert(to_unsigned)

    def query_int64_value(self) -> int:
        return self._convert(to_int64)

    def query_unsigned64_value(self) -> int:
        return self._convert(to_unsigned64)

    def query_bool_value(self) -> bool:
        return self._convert(to_bool)

    def query_float_value(self) -> float:
        return self._convert(to_float)

    def query_double_value(self) -> float:
        return self._convert(to_double)

    def set_attribute(self, value) -> None:
        """Set the value from a string, bool, integer or float."""
        self.value = format_value(value)

    def __repr__(self) -> str:
        return f"XMLAttribute({self.name!r}, {self.value!r})"