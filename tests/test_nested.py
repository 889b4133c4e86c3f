from __future__ import annotations

from element_finder import CssExpression, Document, DocumentKind, ParseOption


def test_object_wraps_each_match(page: Document):
    items = page.object('//div[@class="news"]')

    assert len(items) == 2
    assert items[0].value("//a") == ["First story"]
    assert items[1].attribute("//a/@href") == ["/story-2"]
    assert items[1].value("//p") == []


def test_object_with_empty_content_uses_placeholder():
    document = Document('<ul><li><a href="/1">One</a></li><li></li><li>   </li></ul>')

    items = document.object("//li")

    assert len(items) == 3
    for empty in items[1:]:
        assert empty.value(".") == [""]
        assert empty.html("//a") == []
        assert empty.attribute("/html/@data-document-is-empty") == [""]


def test_object_outer_keeps_matched_element():
    document = Document("<feed><entry id='1'><t>a</t></entry><entry id='2'/></feed>", DocumentKind.XML)

    entries = document.object("//entry", outer=True)

    assert [entry.attribute("/entry/@id").first() for entry in entries] == ["1", "2"]
    assert entries[0].value("/entry/t") == ["a"]
    assert entries[1].value("/entry/t") == []


def test_nested_documents_inherit_settings():
    options = ParseOption.NOWARNING | ParseOption.NOBLANKS
    document = Document("<r><a><b>1</b></a></r>", DocumentKind.XML, options=options)
    document.translator = CssExpression(html=False)

    nested = document.object("a", outer=True).first()

    assert nested.kind is DocumentKind.XML
    assert nested.options == options
    assert nested.translator is document.translator
    assert nested.value("b") == ["1"]


def test_nested_documents_are_independent(page: Document):
    first = page.object('//div[@class="news"]').first()

    first.remove("//a")
    page.remove("//p")

    assert first.value("//a") == []
    assert first.value("//p") == ["Call 12345 today"]
    assert page.value("//a") == ["First story", "Second story"]


def test_object_without_matches_is_empty(page: Document):
    assert page.object("//table") == []
    assert page.object("//table").first() is None


def test_get_node_items_projects_fields(page: Document):
    items = page.get_node_items(
        '//div[@class="news"]',
        {"title": "//a", "link": "//a/@href", "text": "//p"},
    )

    assert items == {
        0: {"title": "First story", "link": "/story-1", "text": "Call 12345 today"},
        1: {"title": "Second story", "link": "/story-2", "text": None},
    }


def test_get_node_items_keeps_first_match_only():
    document = Document("<ul><li><b>a</b><b>b</b></li></ul>")

    assert document.get_node_items("//li", {"bold": "//b"}) == {0: {"bold": "a"}}


def test_get_node_items_without_matches():
    assert Document("<p>x</p>").get_node_items("//li", {"bold": "//b"}) == {}


def test_get_node_items_over_xml_rows_with_several_children():
    document = Document(
        "<rows><row><k>a</k><v>1</v></row><row><k>b</k><v>2</v></row></rows>",
        DocumentKind.XML,
    )

    items = document.get_node_items("//row", {"k": "//k", "v": "//v"})

    assert items == {0: {"k": "a", "v": "1"}, 1: {"k": "b", "v": "2"}}


def test_xml_inner_markup_gets_synthetic_root():
    document = Document("<r><item><a>1</a><b>2</b></item></r>", DocumentKind.XML)

    nested = document.object("//item").first()

    assert nested.attribute("/root/@data-document-is-nested") == [""]
    assert nested.value("/root/*") == ["1", "2"]
