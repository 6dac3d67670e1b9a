import pytest

from xmlfield_toolkit.core.tree import DocumentTree, rename_element


@pytest.fixture
def tree():
    return DocumentTree.from_html_fragment(
        '<p id="a" class="b">one <b>two</b> three <i>four</i> five</p>after'
    )


def test_fragment_is_wrapped_in_envelope(tree):
    assert tree.root.tag == "html"
    body = tree.find_first("body")
    assert body is not None
    assert [child.tag for child in body] == ["p"]


def test_rename_preserves_children_order_without_copies(tree):
    p = tree.select("p")[0]
    children = list(p)

    renamed = tree.rename(p, "paragraph")

    assert renamed.tag == "paragraph"
    assert len(renamed) == len(children) == 2
    assert all(new is old for new, old in zip(renamed, children))
    assert renamed.text == "one "
    assert children[0].tail == " three "
    assert children[1].tail == " five"
    assert tree.select("b", "i") == children


def test_rename_copies_attributes_by_default(tree):
    renamed = tree.rename(tree.select("p")[0], "paragraph")
    assert dict(renamed.attrib) == {"id": "a", "class": "b"}


def test_rename_can_skip_attribute_copy(tree):
    renamed = tree.rename(tree.select("p")[0], "paragraph", skip_attribute_copy=True)
    assert dict(renamed.attrib) == {}


def test_rename_keeps_position_and_tail(tree):
    body = tree.find_first("body")
    renamed = tree.rename(tree.select("p")[0], "paragraph")
    assert renamed.getparent() is body
    assert body.index(renamed) == 0
    assert renamed.tail == "after"


def test_rename_middle_sibling():
    tree = DocumentTree.from_html_fragment("<p>1</p><p>2</p><p>3</p>")
    body = tree.find_first("body")
    rename_element(tree.select("p")[1], "paragraph")
    assert [child.tag for child in body] == ["p", "paragraph", "p"]
    assert [child.text for child in body] == ["1", "2", "3"]


def test_rename_with_namespace_map():
    tree = DocumentTree.from_html_fragment("<p>x</p>")
    section = tree.rename(tree.find_first("body"), "section", nsmap={"custom": "http://example.com/custom/"})
    assert section.nsmap == {"custom": "http://example.com/custom/"}
    assert section[0].tag == "p"


def test_rename_root_raises(tree):
    with pytest.raises(ValueError):
        tree.rename(tree.root, "document")


def test_select_is_a_snapshot():
    tree = DocumentTree.from_html_fragment("<p>x<b>y</b></p>")
    nodes = tree.select("p", "b")
    assert [n.tag for n in nodes] == ["p", "b"]

    paragraph = tree.rename(nodes[0], "paragraph")
    strong = tree.rename(nodes[1], "strong")

    assert strong.getparent() is paragraph
    assert tree.select("p", "b") == []


def test_find_first_missing_tag(tree):
    assert tree.find_first("section") is None
