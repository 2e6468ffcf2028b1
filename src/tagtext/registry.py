"""Case-insensitive tag handler registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .format import TagHandler


def canonical_tag_name(name: str) -> str:
    """Return the single-case form used for tag matching and lookup."""
    return str(name).upper()


def resolve_tag_handlers(tag_handlers: Mapping[str, TagHandler] | None) -> dict[str, TagHandler]:
    """Re-key caller supplied handlers by canonical tag name.

    When two names collapse to the same canonical name the later one wins.
    """
    if not tag_handlers:
        return {}

    resolved: dict[str, TagHandler] = {}
    for name, handler in tag_handlers.items():
        if not callable(handler):
            msg = f"Handler for tag {name!r} is not callable: {handler!r}"
            raise TypeError(msg)
        resolved[canonical_tag_name(name)] = handler
    return resolved
