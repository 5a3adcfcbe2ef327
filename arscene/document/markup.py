"""Typed markup tree and its HTML serializer.

Documents are built as a tree of :class:`MarkupNode` elements and turned
into text in one final step, so structure (anchors, asset ids, element
order) can be inspected without parsing the output.
"""

from __future__ import annotations

import html
import textwrap
from dataclasses import dataclass, field
from typing import Iterator, Union

# Elements serialized without a closing tag
VOID_ELEMENTS = frozenset({"meta", "img", "link", "br", "hr", "input", "source"})

AttributeValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class Text:
    """Character data, escaped on output."""

    value: str


@dataclass(frozen=True)
class RawText:
    """Verbatim block content for <script> and <style> elements.

    Leading indentation common to all lines is removed and the block is
    re-indented to its position in the tree.
    """

    value: str


@dataclass
class MarkupNode:
    """An element with ordered attributes and children.

    Attribute values of ``True`` are written as bare boolean attributes;
    ``False`` and ``None`` omit the attribute.
    """

    tag: str
    attributes: dict[str, AttributeValue] = field(default_factory=dict)
    children: list[MarkupNode | Text | RawText] = field(default_factory=list)

    def append(self, child: MarkupNode | Text | RawText) -> MarkupNode:
        """Append a child and return it (for chaining into nested builds)."""
        self.children.append(child)
        if isinstance(child, MarkupNode):
            return child
        return self

    def extend(self, children: list[MarkupNode | Text | RawText]) -> None:
        """Append several children in order."""
        self.children.extend(children)

    def get(self, name: str, default: AttributeValue = None) -> AttributeValue:
        """Get an attribute value."""
        return self.attributes.get(name, default)

    def iter(self, tag: str | None = None) -> Iterator[MarkupNode]:
        """Iterate over this element and all descendant elements, depth-first.

        Args:
            tag: Only yield elements with this tag
        """
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, MarkupNode):
                yield from child.iter(tag)

    def find_all(self, attribute: str) -> list[MarkupNode]:
        """All descendant elements (including self) carrying ``attribute``."""
        return [node for node in self.iter() if attribute in node.attributes]

    @property
    def text(self) -> str:
        """Concatenated direct text children."""
        return "".join(c.value for c in self.children if isinstance(c, (Text, RawText)))

    def __repr__(self) -> str:
        return f"MarkupNode(<{self.tag}>, {len(self.attributes)} attrs, {len(self.children)} children)"


def element(tag: str, *children: MarkupNode | Text | RawText | str, **attributes: AttributeValue) -> MarkupNode:
    """Shorthand constructor.

    Plain strings become :class:`Text`. Keyword names map underscores to
    dashes (``data_audio_id`` -> ``data-audio-id``); a trailing underscore is
    dropped (``class_`` -> ``class``).
    """
    attrs = {_attribute_name(k): v for k, v in attributes.items()}
    nodes = [Text(c) if isinstance(c, str) else c for c in children]
    return MarkupNode(tag, attrs, nodes)


def _attribute_name(name: str) -> str:
    return name.rstrip("_").replace("_", "-")


def _format_attribute_value(value: AttributeValue) -> str:
    if isinstance(value, float):
        return repr(value) if not value.is_integer() else str(int(value))
    return str(value)


def render_attributes(attributes: dict[str, AttributeValue]) -> str:
    """Serialize attributes in insertion order."""
    parts = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(_format_attribute_value(value), quote=True)}"')
    return "".join(parts)


def _render(node: MarkupNode, depth: int, indent: str, lines: list[str]) -> None:
    pad = indent * depth
    attrs = render_attributes(node.attributes)

    if node.tag in VOID_ELEMENTS:
        lines.append(f"{pad}<{node.tag}{attrs} />")
        return

    open_tag = f"<{node.tag}{attrs}>"
    close_tag = f"</{node.tag}>"

    if not node.children:
        lines.append(f"{pad}{open_tag}{close_tag}")
        return

    if all(isinstance(c, Text) for c in node.children):
        lines.append(f"{pad}{open_tag}{html.escape(node.text, quote=False)}{close_tag}")
        return

    lines.append(f"{pad}{open_tag}")
    inner = indent * (depth + 1)
    for child in node.children:
        if isinstance(child, MarkupNode):
            _render(child, depth + 1, indent, lines)
        elif isinstance(child, RawText):
            for line in textwrap.dedent(child.value).strip("\n").splitlines():
                lines.append(f"{inner}{line}" if line.strip() else "")
        else:
            lines.append(f"{inner}{html.escape(child.value, quote=False)}")
    lines.append(f"{pad}{close_tag}")


def render(node: MarkupNode, indent: str = "  ") -> str:
    """Serialize a tree to indented markup text (no trailing newline)."""
    lines: list[str] = []
    _render(node, 0, indent, lines)
    return "\n".join(lines)


def render_document(root: MarkupNode, indent: str = "  ") -> str:
    """Serialize a full HTML document, with doctype and trailing newline."""
    return f"<!DOCTYPE html>\n{render(root, indent)}\n"
