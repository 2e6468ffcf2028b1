from .format import TagData, default_text_handler, format_tokens, literal_markup
from .formatter import TextFormat, TextFormatConfig, create_text_format
from .node import Element, Fragment
from .registry import canonical_tag_name, resolve_tag_handlers
from .serialize import to_html, to_test_format
from .tokenizer import Tokenizer, parse
from .tokens import ParseError, TagToken, is_text_token
from .utils import get_only_plain_text_child

__all__ = [
    "Element",
    "Fragment",
    "ParseError",
    "TagData",
    "TagToken",
    "TextFormat",
    "TextFormatConfig",
    "Tokenizer",
    "canonical_tag_name",
    "create_text_format",
    "default_text_handler",
    "format_tokens",
    "get_only_plain_text_child",
    "is_text_token",
    "literal_markup",
    "parse",
    "resolve_tag_handlers",
    "to_html",
    "to_test_format",
]
