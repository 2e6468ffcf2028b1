"""Single-pass recursive-descent tokenizer for HTML-like tagged text.

The input::

    <a href="url">some <b>bold</b> text</a>

becomes::

    [TagToken("A", {"href": "url"}, ["some ", TagToken("B", {}, ["bold"]), " text"])]

Markup pieces recognised by the scanner::

                   quotes
                   v     v
    <TagName attr="value">content</TagName>
    ^            ^       ^       ^        ^
    tag open   assign  tag end  end tag  tag end

    <SelfClosing />
    ^            ^
    tag open   self-closing end

Malformed input never raises. Every anomaly resolves to text, a dropped tag or
an implicitly closed tag. Inside :data:`MAX_NESTING_DEPTH` open tags a further
``<`` is read as text, so recursion stays within Python's stack. With
``collect_errors=True`` each recovery is also recorded as a
:class:`~tagtext.tokens.ParseError`.
"""

from __future__ import annotations

import logging
import re

from .tokens import ParseError, TagToken

logger = logging.getLogger(__name__)

_TAG_OPEN = "<"
_END_TAG_OPEN = "</"
_TAG_END = ">"
_SELF_CLOSING_TAG_END = "/>"
_ATTR_ASSIGN = "="
_VALUE_QUOTES = "'\""

_TAG_NAME_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")

_TAG_NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")
_SPACE_PATTERN = re.compile(r"\s*")
# Whitespace and stray "=" are skipped while looking for the next attribute.
_BEFORE_ATTR_PATTERN = re.compile(r"[\s=]*")
_ATTR_NAME_PATTERN = re.compile(r"[^\s=/>]+")
_UNQUOTED_VALUE_PATTERN = re.compile(r"[^\s/>]*")

# Each open tag costs two Python frames while parsing and two while formatting.
MAX_NESTING_DEPTH = 256


class _MalformedTag(Exception):
    """Raised inside attribute parsing; the enclosing tag is dropped."""

    def __init__(self, code, message):
        super().__init__(message)
        self.code = code
        self.message = message


class Tokenizer:
    """Turn a string into a forest of text and tag tokens.

    Scanning state (input, cursor and the stack of open tag names) lives on the
    instance and is reset by every :meth:`parse` call, so one tokenizer can be
    reused but not shared between threads.
    """

    __slots__ = ("buffer", "collect_errors", "errors", "length", "open_tags", "pos")

    def __init__(self, collect_errors=False):
        self.collect_errors = bool(collect_errors)
        self.errors = []
        self.buffer = ""
        self.length = 0
        self.pos = 0
        self.open_tags = []

    @staticmethod
    def is_text_token(token):
        return isinstance(token, str)

    def parse(self, text):
        """Parse ``text`` and return its top-level token list."""
        self.buffer = text or ""
        self.length = len(self.buffer)
        self.pos = 0
        self.open_tags = []
        self.errors = []
        return self._parse_content()

    # ------------------------------------------------------------------
    # Content

    def _parse_content(self):
        """Collect text and tags until the closer of an open tag or end of input.

        Called once for the top level and recursively for the children of every
        non self-closing tag, so the call depth follows the nesting depth.
        """
        content = []
        buffer = self.buffer
        start = self.pos

        while self.pos < self.length:
            # "</" has to be tested before "<"
            if buffer.startswith(_END_TAG_OPEN, self.pos):
                content_end = self.pos
                valid = self._is_valid_tag(_END_TAG_OPEN)
                if content_end > start:
                    content.append(buffer[start:content_end])

                name = self._parse_tag_name()
                self._skip_past(_TAG_END)
                start = self.pos

                if not valid:
                    self._error("invalid-end-tag", content_end, "end tag without a name was dropped")
                    continue

                index = self._find_open_tag(name)
                if index == -1:
                    self._error("unexpected-end-tag", content_end, f"</{name}> does not close any open tag")
                    continue

                for implicit in self.open_tags[index + 1 :]:
                    self._error("implicitly-closed-element", content_end, f"<{implicit}> closed by </{name}>")
                del self.open_tags[index:]
                return content

            if buffer.startswith(_TAG_OPEN, self.pos):
                content_end = self.pos
                if not self._is_valid_tag(_TAG_OPEN):
                    self._error("invalid-first-character-of-tag-name", content_end, "'<' kept as text")
                    continue
                if len(self.open_tags) >= MAX_NESTING_DEPTH:
                    self._error("nesting-too-deep", content_end, "'<' kept as text, too many open tags")
                    continue

                if content_end > start:
                    content.append(buffer[start:content_end])
                token = self._parse_tag(content_end)
                if token is not None:
                    content.append(token)
                start = self.pos
                continue

            self.pos += 1

        if start < self.length:
            content.append(buffer[start:])

        return content

    def _is_valid_tag(self, marker):
        """Check for a tag name right after ``marker``.

        On success the cursor moves past the marker; otherwise it moves one
        character ahead so the marker is scanned as text.
        """
        next_pos = self.pos + len(marker)
        if next_pos < self.length and self.buffer[next_pos] in _TAG_NAME_CHARS:
            self.pos = next_pos
            return True
        self.pos += 1
        return False

    def _find_open_tag(self, name):
        open_tags = self.open_tags
        for index in range(len(open_tags) - 1, -1, -1):
            if open_tags[index] == name:
                return index
        return -1

    # ------------------------------------------------------------------
    # Tags

    def _parse_tag(self, tag_start):
        name = self._parse_tag_name()
        depth = len(self.open_tags)
        self.open_tags.append(name)

        try:
            attrs, self_closing = self._parse_attributes()
        except _MalformedTag as exc:
            # The name stays on the stack; the cursor is already at end of input.
            self._error(exc.code, tag_start, exc.message)
            return None

        if self_closing:
            # Otherwise "<a><br/>x</br>y</a>z" would end the top level at </a> and lose "z".
            del self.open_tags[depth:]
            return TagToken(name, attrs, [])

        children = self._parse_content()
        if len(self.open_tags) > depth:
            self._error("eof-before-end-tag", self.length, f"<{name}> closed at end of input")
            del self.open_tags[depth:]
        return TagToken(name, attrs, children)

    def _parse_tag_name(self):
        """Read the next run of tag-name characters, upper-cased."""
        match = _TAG_NAME_PATTERN.search(self.buffer, self.pos)
        if match is None:
            self.pos = self.length
            return ""
        self.pos = match.end()
        return match.group().upper()

    def _parse_attributes(self):
        attrs = {}
        buffer = self.buffer

        while True:
            self._skip(_BEFORE_ATTR_PATTERN)

            if self.pos >= self.length:
                raise _MalformedTag("eof-in-tag", "input ended inside a tag")
            if buffer.startswith(_TAG_END, self.pos):
                self.pos += len(_TAG_END)
                return attrs, False
            if buffer.startswith(_SELF_CLOSING_TAG_END, self.pos):
                self.pos += len(_SELF_CLOSING_TAG_END)
                return attrs, True

            attr = self._parse_attribute()
            if attr is not None:
                name, value = attr
                attrs[name] = value

    def _parse_attribute(self):
        """Read one ``name``, ``name=value`` or ``name="value"`` attribute.

        Attributes without a value are flags and get ``""``. Quote characters
        are ordinary name characters, and backslashes do not escape quotes in
        values.
        """
        buffer = self.buffer
        match = _ATTR_NAME_PATTERN.match(buffer, self.pos)
        if match is None:
            # A lone "/" not followed by ">"
            self.pos += 1
            return None
        name = match.group()
        self.pos = match.end()

        self._skip(_SPACE_PATTERN)
        if not buffer.startswith(_ATTR_ASSIGN, self.pos):
            return name, ""
        self.pos += len(_ATTR_ASSIGN)
        self._skip(_SPACE_PATTERN)

        if self.pos < self.length and buffer[self.pos] in _VALUE_QUOTES:
            quote = buffer[self.pos]
            self.pos += 1
            end = buffer.find(quote, self.pos)
            if end == -1:
                self.pos = self.length
                raise _MalformedTag("eof-in-attribute-value", f"unterminated {quote} in value of {name!r}")
            value = buffer[self.pos : end]
            self.pos = end + 1
            return name, value

        match = _UNQUOTED_VALUE_PATTERN.match(buffer, self.pos)
        self.pos = match.end()
        return name, match.group()

    # ------------------------------------------------------------------
    # Cursor helpers

    def _skip(self, pattern):
        self.pos = pattern.match(self.buffer, self.pos).end()

    def _skip_past(self, marker):
        end = self.buffer.find(marker, self.pos)
        self.pos = self.length if end == -1 else end + len(marker)

    def _error(self, code, pos, message=None):
        logger.debug("Recovered from %s at offset %d", code, pos)
        if not self.collect_errors:
            return
        buffer = self.buffer
        line = buffer.count("\n", 0, pos) + 1
        column = pos - buffer.rfind("\n", 0, pos)
        self.errors.append(ParseError(code, pos, line=line, column=column, message=message))


def parse(text):
    """Parse ``text`` into a token forest with a fresh :class:`Tokenizer`."""
    return Tokenizer().parse(text)
