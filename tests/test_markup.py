"""Tests for the markup tree and serializer."""

from arscene.document.markup import MarkupNode, RawText, Text, element, render, render_attributes, render_document


class TestElement:
    """Test element construction."""

    def test_attribute_names(self):
        """Test underscores become dashes and trailing underscores drop."""
        node = element("div", class_="loading", data_audio_id="a", look_controls="enabled: false")
        assert list(node.attributes) == ["class", "data-audio-id", "look-controls"]

    def test_string_children(self):
        """Test plain strings become text nodes."""
        node = element("title", "Hello")
        assert node.children == [Text("Hello")]
        assert node.text == "Hello"

    def test_append_returns_element(self):
        """Test append returns the appended element for nesting."""
        root = element("a-scene")
        child = root.append(element("a-assets"))
        assert child.tag == "a-assets"
        assert root.children == [child]

    def test_iter_and_find(self):
        """Test depth-first traversal and attribute lookup."""
        root = element(
            "body",
            element("a-entity", element("a-image", src="#x"), mindar_image_target="targetIndex: 0"),
            element("a-entity", mindar_image_target="targetIndex: 1"),
        )
        assert [n.tag for n in root.iter()] == ["body", "a-entity", "a-image", "a-entity"]
        assert len(root.find_all("mindar-image-target")) == 2
        assert [n.get("src") for n in root.iter("a-image")] == ["#x"]


class TestRenderAttributes:
    """Test attribute serialization."""

    def test_boolean_attributes(self):
        """Test True is bare and False/None are omitted."""
        assert render_attributes({"loop": True, "muted": False, "id": None, "crossorigin": "anonymous"}) == (
            ' loop crossorigin="anonymous"'
        )

    def test_escaping(self):
        """Test attribute values are escaped."""
        assert render_attributes({"src": 'a"b<c>&d'}) == ' src="a&quot;b&lt;c&gt;&amp;d"'

    def test_numbers(self):
        """Test numeric values."""
        assert render_attributes({"intensity": 1.0, "n": 3, "f": 0.5}) == ' intensity="1" n="3" f="0.5"'


class TestRender:
    """Test tree serialization."""

    def test_void_element(self):
        """Test void elements are self-closing."""
        assert render(element("meta", charset="utf-8")) == '<meta charset="utf-8" />'

    def test_empty_element(self):
        """Test empty non-void elements close explicitly."""
        assert render(element("a-image", src="#a")) == '<a-image src="#a"></a-image>'

    def test_inline_text(self):
        """Test text-only elements render on one line, escaped."""
        assert render(element("title", "AR Experience - <Tom & Jerry>")) == (
            "<title>AR Experience - &lt;Tom &amp; Jerry&gt;</title>"
        )

    def test_nesting(self):
        """Test children are indented one level per depth."""
        tree = element("a-scene", element("a-assets", element("img", id="a")), element("a-camera"))
        assert render(tree) == (
            "<a-scene>\n"
            "  <a-assets>\n"
            '    <img id="a" />\n'
            "  </a-assets>\n"
            "  <a-camera></a-camera>\n"
            "</a-scene>"
        )

    def test_raw_text_reindented(self):
        """Test script blocks are dedented, reindented and not escaped."""
        script = MarkupNode("script", children=[RawText("\n        if (a < b && c) {\n          go();\n        }\n")])
        body = element("body", script)
        assert render(body) == (
            "<body>\n"
            "  <script>\n"
            "    if (a < b && c) {\n"
            "      go();\n"
            "    }\n"
            "  </script>\n"
            "</body>"
        )

    def test_document(self):
        """Test doctype and trailing newline."""
        text = render_document(element("html", element("head"), lang="en"))
        assert text.startswith("<!DOCTYPE html>\n<html lang=\"en\">\n")
        assert text.endswith("</html>\n")
