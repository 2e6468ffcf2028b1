"""Serialization of element trees and token forests."""

# ruff: noqa: PERF401

from __future__ import annotations

from typing import Any

from .node import Element, Fragment
from .tokens import TagToken

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value).replace("&", "&amp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, Any] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        # Handlers can set booleans the way UI element models accept them.
        if value is None or value is False:
            continue
        if value is True:
            parts.extend([" ", key])
            continue
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Any) -> str:
    """Render the output of a formatter (or any part of it) as HTML.

    Strings are escaped, ``None`` renders as nothing, fragments and lists
    render their items in order.
    """
    parts: list[str] = []
    _node_to_html(node, parts)
    return "".join(parts)


def _node_to_html(node: Any, parts: list[str]) -> None:
    if node is None or node is False or node is True:
        return

    if isinstance(node, str):
        parts.append(_escape_text(node))
        return

    if isinstance(node, Fragment):
        for child in node.children:
            _node_to_html(child, parts)
        return

    if isinstance(node, Element):
        name = node.name
        parts.append(serialize_start_tag(name, node.attrs))
        if name in VOID_ELEMENTS and not node.children:
            return
        for child in node.children:
            _node_to_html(child, parts)
        parts.append(serialize_end_tag(name))
        return

    if isinstance(node, (list, tuple)):
        for child in node:
            _node_to_html(child, parts)
        return

    # Numbers and other scalars a handler may return.
    parts.append(_escape_text(str(node)))


def to_test_format(tokens: Any, indent: int = 0) -> str:
    """Convert a token forest to html5lib-style test format.

    One node per line, ``| `` prefixed, children indented by two spaces::

        | <A>
        |   href="url"
        |   "some "
    """
    if isinstance(tokens, (str, TagToken)):
        return _token_to_test_format(tokens, indent)
    return "\n".join(_token_to_test_format(token, indent) for token in tokens)


def _token_to_test_format(token: Any, indent: int) -> str:
    if isinstance(token, str):
        return f'| {" " * indent}"{token}"'

    sections = [f"| {' ' * indent}<{token.name}>"]
    padding = " " * (indent + 2)
    # Attributes keep their source order; it is part of what gets checked.
    for name, value in token.attrs.items():
        sections.append(f'| {padding}{name}="{value}"')
    for child in token.children:
        sections.append(_token_to_test_format(child, indent + 2))
    return "\n".join(sections)
