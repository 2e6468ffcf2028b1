"""Configured text formatters.

A :class:`TextFormat` is built once from a :class:`TextFormatConfig` and then
called with strings::

    fmt = create_text_format(
        tag_handlers={"b": lambda index, tag, aux: Element("strong", children=tag.children, key=index)},
    )
    to_html(fmt("a <b>bold</b> c"))  # 'a <strong>bold</strong> c'

Each call parses the string and formats the tokens in one pass. Nothing is
cached between calls; identical input gives an equal tree, so callers can
memoize on the input themselves.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .format import default_text_handler, format_tokens
from .registry import resolve_tag_handlers
from .tokenizer import Tokenizer

if TYPE_CHECKING:
    from .format import TagHandler, TextHandler

logger = logging.getLogger(__name__)

AuxStateProducer = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class TextFormatConfig:
    """Options of a :class:`TextFormat`.

    - ``text_handler`` renders plain text runs. Defaults to passing the text
      through in a :class:`~tagtext.node.Fragment`.
    - ``tag_handlers`` maps tag names (any case) to handlers.
    - ``default_tag_handler`` renders tags missing from ``tag_handlers``.
    - ``keep_unknown_tags`` shows unhandled tags as literal markup instead of
      dropping them. Has no effect when ``default_tag_handler`` is set.
    - ``aux_state`` is called once per formatting pass; its result is handed to
      every handler call of that pass.
    """

    text_handler: TextHandler | None = None
    tag_handlers: Mapping[str, TagHandler] = field(default_factory=dict)
    default_tag_handler: TagHandler | None = None
    keep_unknown_tags: bool = False
    aux_state: AuxStateProducer | None = None

    def __post_init__(self) -> None:
        for option in ("text_handler", "default_tag_handler", "aux_state"):
            value = getattr(self, option)
            if value is not None and not callable(value):
                msg = f"{option} must be callable, got {value!r}"
                raise TypeError(msg)

        # Accept any mapping (or None) from user code, normalize for internal use.
        tag_handlers = self.tag_handlers
        if tag_handlers is None:
            object.__setattr__(self, "tag_handlers", {})
        elif not isinstance(tag_handlers, Mapping):
            msg = f"tag_handlers must be a mapping, got {type(tag_handlers).__name__}"
            raise TypeError(msg)
        else:
            object.__setattr__(self, "tag_handlers", dict(tag_handlers))

        object.__setattr__(self, "keep_unknown_tags", bool(self.keep_unknown_tags))


class TextFormat:
    """Callable that turns tagged text into an element tree."""

    __slots__ = ("config", "tag_handlers", "text_handler")

    def __init__(self, config: TextFormatConfig | None = None) -> None:
        self.config = config or TextFormatConfig()
        self.text_handler = self.config.text_handler or default_text_handler
        self.tag_handlers = resolve_tag_handlers(self.config.tag_handlers)
        logger.debug(
            "TextFormat created with %d tag handler(s), default handler: %s, keep unknown tags: %s",
            len(self.tag_handlers),
            self.config.default_tag_handler is not None,
            self.config.keep_unknown_tags,
        )

    def __call__(self, text: str | None = None) -> Any:
        tokens = Tokenizer().parse(text or "")
        producer = self.config.aux_state
        aux_state = producer() if producer is not None else None
        return format_tokens(
            tokens,
            0,
            text_handler=self.text_handler,
            tag_handlers=self.tag_handlers,
            default_tag_handler=self.config.default_tag_handler,
            keep_unknown_tags=self.config.keep_unknown_tags,
            aux_state=aux_state,
        )

    def __repr__(self) -> str:
        return f"TextFormat(tags={sorted(self.tag_handlers)!r})"


def create_text_format(config: TextFormatConfig | None = None, **options: Any) -> TextFormat:
    """Build a :class:`TextFormat` from a config object or keyword options."""
    if config is not None and options:
        msg = "Pass either a TextFormatConfig or keyword options, not both"
        raise TypeError(msg)
    if config is None:
        config = TextFormatConfig(**options)
    return TextFormat(config)
