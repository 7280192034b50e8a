import pytest

from tinyxmlkit.element import ClosingType, XMLElement
from tinyxmlkit.nodes import XMLComment, XMLText, XMLVisitor
from tinyxmlkit.util import XMLError, XMLException


def test_new_element_is_open_and_named():
    element = XMLElement("root")
    assert element.name == "root"
    assert element.closing_type is ClosingType.OPEN
    assert element.to_element() is element


def test_set_and_read_attribute():
    element = XMLElement("e")
    element.set_attribute("a", "one")
    assert element.attribute("a") == "one"
    assert element.attribute("a", "one") == "one"
    assert element.attribute("a", "two") is None
    assert element.attribute("missing") is None


def test_set_attribute_overwrites_in_place():
    element = XMLElement("e")
    element.set_attribute("a", "1")
    element.set_attribute("b", "2")
    element.set_attribute("a", "3")
    assert [(a.name, a.value) for a in element.attributes()] == [("a", "3"), ("b", "2")]


def test_bool_attribute_is_written_as_true():
    element = XMLElement("e")
    element.set_attribute("flag", True)
    assert element.attribute("flag") == "true"
    assert element.bool_attribute("flag") is True


def test_delete_attribute():
    element = XMLElement("e")
    element.set_attribute("a", "1")
    element.set_attribute("b", "2")
    element.delete_attribute("a")
    element.delete_attribute("absent")
    assert [a.name for a in element.attributes()] == ["b"]
    assert element.find_attribute("a") is None


@pytest.mark.parametrize("value", [0, -42, 2147483647])
def test_int_attribute_round_trip(value):
    element = XMLElement("e")
    element.set_attribute("n", value)
    assert element.query_int_attribute("n") == value
    assert element.int_attribute("n", 7) == value


def test_hex_attribute_parsed():
    element = XMLElement("e")
    element.set_attribute("n", "0x10")
    assert element.query_unsigned_attribute("n") == 16
    assert element.query_int64_attribute("n") == 16


def test_int64_and_unsigned64_round_trip():
    element = XMLElement("e")
    element.set_attribute("big", -(1 << 62))
    element.set_attribute("ubig", (1 << 64) - 1)
    assert element.query_int64_attribute("big") == -(1 << 62)
    assert element.query_unsigned64_attribute("ubig") == (1 << 64) - 1


def test_double_attribute_round_trip():
    element = XMLElement("e")
    element.set_attribute("d", 0.1)
    assert element.query_double_attribute("d") == 0.1
    assert element.double_attribute("d", 9.0) == 0.1


def test_missing_attribute_raises_no_attribute():
    element = XMLElement("e")
    with pytest.raises(XMLException) as info:
        element.query_int_attribute("nope")
    assert info.value.error is XMLError.NO_ATTRIBUTE


def test_wrong_type_attribute_raises_and_defaults():
    element = XMLElement("e")
    element.set_attribute("n", "abc")
    with pytest.raises(XMLException) as info:
        element.query_int_attribute("n")
    assert info.value.error is XMLError.WRONG_ATTRIBUTE_TYPE
    assert element.int_attribute("n", 5) == 5
    assert element.float_attribute("missing", 2.5) == 2.5
    assert element.bool_attribute("n", True) is True


def test_set_text_creates_and_replaces():
    element = XMLElement("e")
    element.set_text("hello")
    assert element.get_text() == "hello"
    element.set_text("bye")
    assert element.get_text() == "bye"
    assert len(list(element.children())) == 1


def test_set_text_inserts_before_existing_element():
    element = XMLElement("e")
    child = element.insert_new_child_element("c")
    element.set_text("t")
    assert element.first_child.value == "t"
    assert element.last_child is child


def test_get_text_skips_comments():
    element = XMLElement("e")
    element.insert_new_comment("note")
    element.insert_new_text("body")
    assert element.get_text() == "body"


def test_get_text_none_when_first_is_element():
    element = XMLElement("e")
    element.insert_new_child_element("c")
    element.insert_new_text("later")
    assert element.get_text() is None


def test_text_queries_round_trip():
    element = XMLElement("e")
    element.set_text(123)
    assert element.query_int_text() == 123
    assert element.int64_text() == 123
    element.set_text(False)
    assert element.query_bool_text() is False
    element.set_text(1.5)
    assert element.query_double_text() == 1.5
    assert element.float_text() == 1.5


def test_text_query_errors():
    element = XMLElement("e")
    with pytest.raises(XMLException) as info:
        element.query_int_text()
    assert info.value.error is XMLError.NO_TEXT_NODE
    element.set_text("words")
    with pytest.raises(XMLException) as info:
        element.query_unsigned_text()
    assert info.value.error is XMLError.CAN_NOT_CONVERT_TEXT
    assert element.unsigned_text(3) == 3
    assert element.double_text(1.25) == 1.25


def test_insert_new_nodes_appends_in_order():
    element = XMLElement("e")
    child = element.insert_new_child_element("c")
    comment = element.insert_new_comment("x")
    text = element.insert_new_text("t")
    unknown = element.insert_new_unknown("DOCTYPE")
    decl = element.insert_new_declaration()
    assert list(element.children()) == [child, comment, text, unknown, decl]
    assert isinstance(comment, XMLComment)
    assert isinstance(text, XMLText)
    assert decl.value == 'xml version="1.0" encoding="UTF-8"'
    assert child.parent is element


def test_shallow_clone_copies_attributes_not_children():
    element = XMLElement("e")
    element.set_attribute("a", "1")
    element.insert_new_child_element("c")
    clone = element.shallow_clone()
    assert clone is not element
    assert clone.name == "e"
    assert clone.attribute("a") == "1"
    assert clone.no_children()
    assert clone.shallow_equal(element)


def test_deep_clone_copies_subtree():
    element = XMLElement("e")
    element.insert_new_child_element("c").set_text("inner")
    clone = element.deep_clone()
    inner = clone.first_child_element("c")
    assert inner is not None
    assert inner.get_text() == "inner"
    assert inner is not element.first_child_element("c")


def test_shallow_equal_compares_name_and_attribute_values():
    a = XMLElement("e")
    b = XMLElement("e")
    a.set_attribute("x", "1")
    b.set_attribute("x", "1")
    assert a.shallow_equal(b)
    b.set_attribute("y", "2")
    assert not a.shallow_equal(b)
    assert not a.shallow_equal(XMLElement("other"))
    assert not a.shallow_equal(XMLText("e"))


class _Recorder(XMLVisitor):
    def __init__(self, skip=None):
        self.events = []
        self.skip = skip

    def visit_enter_element(self, element, attributes):
        self.events.append(("enter", element.name, [a.name for a in attributes]))
        return element.name != self.skip

    def visit_exit_element(self, element):
        self.events.append(("exit", element.name))
        return True

    def visit_text(self, text):
        self.events.append(("text", text.value))
        return True


def test_accept_walks_in_document_order():
    root = XMLElement("r")
    root.set_attribute("k", "v")
    root.insert_new_child_element("c").set_text("t")
    recorder = _Recorder()
    assert root.accept(recorder) is True
    assert recorder.events == [
        ("enter", "r", ["k"]),
        ("enter", "c", []),
        ("text", "t"),
        ("exit", "c"),
        ("exit", "r"),
    ]


def test_accept_skips_children_when_enter_returns_false():
    root = XMLElement("r")
    root.insert_new_child_element("c")
    recorder = _Recorder(skip="r")
    root.accept(recorder)
    assert recorder.events == [("enter", "r", []), ("exit", "r")]