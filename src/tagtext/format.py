"""Formatting walk: token forest + handlers -> element tree.

Handlers all take the auxiliary state as their last argument. It is ``None``
unless the caller configured a producer for it.

Resolution order for a tag token:

1. the handler registered for its canonical name,
2. the default tag handler,
3. literal markup, when unknown tags are kept,
4. its formatted children in a transparent :class:`~tagtext.node.Fragment`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .node import Element, Fragment
from .tokens import TagToken

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from typing import Protocol

    class TextHandler(Protocol):
        def __call__(self, index: int, text: str | None, aux_state: Any) -> Any: ...

    class TagHandler(Protocol):
        def __call__(self, index: int, tag: TagData, aux_state: Any) -> Any: ...


LITERAL_CONTAINER = "pre"
LITERAL_STYLE = "display: inline;"


@dataclass(slots=True)
class TagData:
    """What a tag handler gets to see of a tag.

    ``children`` are already formatted. ``attrs`` is a private copy, handlers
    may change it freely.
    """

    name: str
    children: list[Any] = field(default_factory=list)
    attrs: dict[str, str] = field(default_factory=dict)


def default_text_handler(index: int, text: str | None, aux_state: Any = None) -> Fragment:
    """Pass the text through unchanged."""
    return Fragment([text], key=index)


class _FormatPass:
    __slots__ = ("aux_state", "default_tag_handler", "keep_unknown_tags", "tag_handlers", "text_handler")

    def __init__(self, text_handler, tag_handlers, default_tag_handler, keep_unknown_tags, aux_state):
        self.text_handler = text_handler
        self.tag_handlers = tag_handlers
        self.default_tag_handler = default_tag_handler
        self.keep_unknown_tags = keep_unknown_tags
        self.aux_state = aux_state

    def format(self, tokens, index):
        if isinstance(tokens, (str, TagToken)):
            return self.format_token(tokens, index)
        return Fragment([self.format(token, position) for position, token in enumerate(tokens)], key=index)

    def format_token(self, token, index):
        if isinstance(token, str):
            return Fragment([self.text_handler(index, token, self.aux_state)], key=index)

        children = [self.format(child, position) for position, child in enumerate(token.children)]
        tag = TagData(token.name, children, dict(token.attrs))

        handler = self.tag_handlers.get(token.name)
        if handler is not None:
            return handler(index, tag, self.aux_state)
        if self.default_tag_handler is not None:
            return self.default_tag_handler(index, tag, self.aux_state)
        if self.keep_unknown_tags:
            return literal_markup(token.name, token.attrs, children, index)
        return Fragment(children, key=index)


def format_tokens(
    tokens: Sequence[str | TagToken] | str | TagToken,
    index: int = 0,
    *,
    text_handler: TextHandler = default_text_handler,
    tag_handlers: Mapping[str, TagHandler] | None = None,
    default_tag_handler: TagHandler | None = None,
    keep_unknown_tags: bool = False,
    aux_state: Any = None,
) -> Any:
    """Format a token forest (or a single token) at position ``index``.

    ``tag_handlers`` must already be keyed by canonical tag name, see
    :func:`tagtext.registry.resolve_tag_handlers`. Handler exceptions are not
    caught.
    """
    walk = _FormatPass(
        text_handler,
        tag_handlers or {},
        default_tag_handler,
        bool(keep_unknown_tags),
        aux_state,
    )
    return walk.format(tokens, index)


def attrs_to_string(attrs: Mapping[str, str]) -> str:
    return " ".join(f'{name}="{value}"' for name, value in attrs.items())


def literal_markup(name: str, attrs: Mapping[str, str], children: list[Any], index: int | None = None) -> Fragment:
    """Render a tag as visible markup around its formatted children.

    Without children the opening tag is written self-closing: ``<NAME/>`` or
    ``<NAME attr="v" />``.
    """
    attrs_text = attrs_to_string(attrs)
    opening = f"<{name} {attrs_text}" if attrs_text else f"<{name}"
    if children:
        opening += ">"
    else:
        opening += " />" if attrs_text else "/>"

    parts = [_literal(opening, 0), *children]
    if children:
        parts.append(_literal(f"</{name}>", 2))
    return Fragment(parts, key=index)


def _literal(text, key):
    return Element(LITERAL_CONTAINER, {"style": LITERAL_STYLE}, [text], key=key)
