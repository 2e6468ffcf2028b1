"""Token types produced by the tokenizer.

A parsed string is an ordered forest of tokens. Text runs are plain ``str``
values taken verbatim from the input; tags are :class:`TagToken` instances whose
``children`` are themselves a forest.
"""

from __future__ import annotations


class TagToken:
    __slots__ = ("attrs", "children", "name")

    def __init__(self, name, attrs=None, children=None):
        self.name = name
        self.attrs = attrs if attrs is not None else {}
        self.children = children if children is not None else []

    def __eq__(self, other):
        if not isinstance(other, TagToken):
            return NotImplemented
        return self.name == other.name and self.attrs == other.attrs and self.children == other.children

    __hash__ = None  # Unhashable since we define __eq__

    def __repr__(self):
        return f"TagToken({self.name!r}, {self.attrs!r}, {self.children!r})"


def is_text_token(token):
    """Return True for plain text tokens, False for tags."""
    return isinstance(token, str)


class ParseError:
    """A recovered anomaly in the input.

    ``offset`` is the 0-based position in the input where the offending markup
    starts; ``line`` and ``column`` are the same position, 1-based.
    """

    __slots__ = ("code", "column", "line", "message", "offset")

    def __init__(self, code, offset=None, line=None, column=None, message=None):
        self.code = code
        self.offset = offset
        self.line = line
        self.column = column
        self.message = message or code

    @property
    def location(self):
        """``"line:column"``, or ``None`` when the position is unknown."""
        if self.line is None or self.column is None:
            return None
        return f"{self.line}:{self.column}"

    def __repr__(self):
        return f"ParseError({self.code!r}, offset={self.offset!r})"

    def __str__(self):
        text = self.code if self.message == self.code else f"{self.code}: {self.message}"
        location = self.location
        return f"{location}: {text}" if location else text

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.code, self.offset, self.line, self.column) == (other.code, other.offset, other.line, other.column)

    __hash__ = None
