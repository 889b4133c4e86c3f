from __future__ import annotations

import pytest

from element_finder import Document, DocumentKind, InvalidInput, ReparseError, StaleNodeError


def test_remove_detaches_matches():
    document = Document("<html><body><p>Hi</p></body></html>")

    assert document.remove("//p") is document
    assert document.value("//p") == []


def test_remove_without_matches_is_a_no_op(page: Document):
    before = str(page)

    page.remove("//table")

    assert str(page) == before


def test_remove_keeps_following_text():
    document = Document("<div><i>a</i><b>x</b> tail</div>")

    document.remove("//b")

    assert document.html("//div") == ["<i>a</i> tail"]

    document.remove("//i")

    assert document.html("//div") == [" tail"]


def test_remove_nested_matches_in_one_pass():
    document = Document("<div class='x'><div class='x'>inner</div></div><p>after</p>")

    document.remove("//div[@class='x']")

    assert document.value("//div") == []
    assert document.value("//p") == ["after"]


def test_remove_attribute_results():
    document = Document('<a href="/x" title="t">x</a>')

    document.remove("//a/@href")

    assert document.attribute("//a/@href") == []
    assert document.attribute("//a/@title") == ["t"]
    assert document.value("//a") == ["x"]


def test_remove_root_empties_document():
    document = Document("<r><a>1</a></r>", DocumentKind.XML)

    document.remove(".")

    assert document.is_empty
    assert document.value("//a") == []


def test_remove_keeps_unrelated_handles_valid(page: Document):
    handle = page.elements("//span").first()
    epoch = page.epoch

    page.remove("//p")

    assert page.epoch == epoch
    assert not handle.is_stale
    assert handle.text() == "unrelated"


def test_handle_remove_detaches_node(page: Document):
    page.elements("//span").first().remove()

    assert page.value("//span") == []


def test_replace_rewrites_and_reparses():
    document = Document("<html><body><p>foo</p></body></html>")

    assert document.replace("foo", "bar") is document
    assert document.value("//p") == ["bar"]

    snapshot = str(document)
    document.replace("foo", "bar")

    assert str(document) == snapshot
    assert document.value("//p") == ["bar"]


def test_replace_supports_group_references_and_callables():
    document = Document("<p>2024-01-31</p>")

    document.replace(r"(\d{4})-(\d{2})-(\d{2})", r"\3/\2/\1")
    assert document.value("//p") == ["31/01/2024"]

    document.replace(r"\d+", lambda found: str(int(found.group(0)) + 1))
    assert document.value("//p") == ["32/2/2025"]


def test_replace_can_repair_structure():
    document = Document("<ul><li>one<li>two</ul>")

    document.replace(r"<li>", "<li class='item'>")

    assert document.attribute("//li/@class") == ["item", "item"]


def test_replace_invalidates_previous_handles(page: Document):
    handle = page.elements("//span").first()
    epoch = page.epoch

    page.replace("unrelated", "related")

    assert page.epoch == epoch + 1
    assert handle.is_stale
    with pytest.raises(StaleNodeError):
        handle.text()
    assert page.value("//span") == ["related"]


def test_replace_to_blank_uses_placeholder():
    document = Document("<html><body><p>foo</p></body></html>")

    document.replace(r"(?s).*", "")

    assert not document.is_empty
    assert document.value(".") == [""]
    assert document.attribute("/html/@data-document-is-empty") == [""]


def test_replace_keeps_previous_tree_when_reparse_yields_nothing():
    document = Document("<r><a>1</a></r>", DocumentKind.XML)
    handle = document.elements("//a").first()
    epoch = document.epoch

    with pytest.raises(ReparseError):
        document.replace(r"<[^>]+>", "")

    assert document.epoch == epoch
    assert document.value("//a") == ["1"]
    assert handle.text() == "1"


def test_replace_with_invalid_group_reference_keeps_document():
    document = Document("<p>x</p>")
    epoch = document.epoch

    with pytest.raises(InvalidInput):
        document.replace("x", r"\5")

    assert document.epoch == epoch
    assert document.value("//p") == ["x"]


def test_replace_does_not_touch_nested_documents(page: Document):
    nested = page.object('//div[@class="news"]')

    page.replace("story", "article")

    assert page.value("//a") == ["First article", "Second article"]
    assert nested.value("//a") == ["First story", "Second story"]
