import io
import types

import pytest

from tinyxmlkit.element import XMLElement
from tinyxmlkit.nodes import XMLComment, XMLText
from tinyxmlkit.printer import XMLPrinter
from tinyxmlkit.util import set_bool_serialization


def _tree():
    root = XMLElement("a")
    child = root.insert_new_child_element("b")
    child.set_attribute("k", "v")
    root.insert_new_comment("note")
    inner = root.insert_new_child_element("c")
    inner.insert_new_text("hello")
    return root


def _render(node, **kwargs):
    printer = XMLPrinter(**kwargs)
    node.accept(printer)
    return printer.getvalue()


def test_empty_element_is_self_closed():
    assert _render(XMLElement("a")) == "<a" + "/>" + "\n"


def test_nested_element_is_indented():
    root = XMLElement("a")
    root.insert_new_child_element("b")
    assert _render(root) == "<a>\n" + "    " + "<b/>\n</a>\n"


def test_text_stays_on_the_element_line():
    root = XMLElement("a")
    root.insert_new_text("hi")
    assert _render(root) == "<a>hi</a>\n"


def test_compact_equals_pretty_without_layout():
    pretty = _render(_tree())
    compact = _render(_tree(), compact=True)
    stripped = "".join(line.strip() for line in pretty.splitlines())
    assert compact == stripped
    assert "\n" not in compact


def test_file_output_matches_buffer_output():
    stream = io.StringIO()
    printer = XMLPrinter(stream)
    _tree().accept(printer)
    assert stream.getvalue() == _render(_tree())
    assert printer.getvalue() == ""


def test_attribute_value_escapes_all_entities():
    root = XMLElement("a")
    root.set_attribute("x", "\"'<>&")
    out = _render(root)
    assert 'x="&quot;&apos;&lt;&gt;&amp;"' in out


def test_text_escapes_only_markup_characters():
    root = XMLElement("a")
    root.insert_new_text("1 < 2 & \"q\" 'p'")
    out = _render(root)
    assert "1 &lt; 2 &amp; \"q\" 'p'" in out


def test_cdata_is_written_verbatim():
    root = XMLElement("a")
    root.insert_end_child(XMLText("x<y&z", cdata=True))
    out = _render(root)
    assert "<![CDATA[" + "x<y&z" + "]]>" in out


def test_comment_declaration_and_unknown():
    printer = XMLPrinter(compact=True)
    printer.push_header(False, True)
    printer.push_comment("c")
    printer.push_unknown("DOCTYPE x")
    assert printer.getvalue() == '<?xml version="1.0"?>' + "<!--c-->" + "<!DOCTYPE x>"


def test_bom_from_document_is_written_first():
    printer = XMLPrinter()
    doc = types.SimpleNamespace(process_entities=True, has_bom=True)
    assert printer.visit_enter_document(doc) is True
    printer.open_element("a")
    printer.close_element()
    assert printer.getvalue().startswith("\ufeff<a")


def test_entities_are_left_alone_when_document_disables_them():
    printer = XMLPrinter()
    printer.visit_enter_document(
        types.SimpleNamespace(process_entities=False, has_bom=False)
    )
    root = XMLElement("a")
    root.insert_new_text("&amp;<")
    root.accept(printer)
    assert "&amp;<" in printer.getvalue()
    assert "&amp;amp;" not in printer.getvalue()


def test_initial_depth_indents_first_element():
    printer = XMLPrinter(depth=2)
    XMLElement("a").accept(printer)
    assert printer.getvalue().startswith("    " * 2 + "<a")


def test_non_string_values_are_formatted():
    printer = XMLPrinter(compact=True)
    printer.open_element("n")
    printer.push_attribute("count", 42)
    printer.push_text(7)
    printer.close_element()
    assert printer.getvalue() == '<n count="42">7</n>'


def test_bool_serialization_is_used_for_attributes():
    set_bool_serialization("yes", "no")
    try:
        printer = XMLPrinter(compact=True)
        printer.open_element("f")
        printer.push_attribute("on", True)
        printer.push_attribute("off", False)
        printer.close_element()
        out = printer.getvalue()
    finally:
        set_bool_serialization(None, None)
    assert 'on="yes"' in out
    assert 'off="no"' in out


def test_close_without_open_raises():
    with pytest.raises(IndexError):
        XMLPrinter().close_element()


def test_attribute_after_content_raises():
    printer = XMLPrinter()
    printer.open_element("a")
    printer.push_text("t")
    with pytest.raises(RuntimeError):
        printer.push_attribute("k", "v")


def test_comment_inside_element_visited():
    root = XMLElement("a")
    root.insert_end_child(XMLComment("inside"))
    out = _render(root, compact=True)
    assert out == "<a>" + "<!--inside-->" + "</a>"


def test_compact_mode_reports_setting():
    assert XMLPrinter(compact=True).compact_mode(XMLElement("x")) is True
    assert XMLPrinter().compact_mode(XMLElement("x")) is False