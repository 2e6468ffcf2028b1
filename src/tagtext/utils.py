"""Helpers for writing tag handlers."""

from __future__ import annotations

from typing import Any

from .node import Fragment


def get_only_plain_text_child(children: list[Any]) -> str | None:
    """Return the text of a tag whose only content is one plain text run.

    Tag handlers receive formatted children. A single text run formatted with
    the default text handler looks like ``[Fragment([Fragment(["text"])])]``;
    for that shape the string is returned. Any other shape (no children,
    several children, a non-text child) gives ``None``.
    """
    if len(children) != 1:
        return None

    inner = getattr(children[0], "children", None)
    if not inner or len(inner) != 1:
        return None

    fragment = inner[0]
    if not isinstance(fragment, Fragment) or len(fragment.children) != 1:
        return None

    text = fragment.children[0]
    return text if isinstance(text, str) else None
