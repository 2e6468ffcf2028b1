"""Minimal element model produced by the formatting walk.

Children of both node types are kept as given: strings, ``None`` for handlers
that rendered nothing, other nodes, or whatever value a handler returned.
"""

from __future__ import annotations


class Fragment:
    """Grouping node without markup of its own.

    ``key`` is the node's position among its siblings and is only a hint for
    consumers that diff or cache rendered trees.
    """

    __slots__ = ("children", "key")

    def __init__(self, children=None, key=None):
        self.children = list(children) if children is not None else []
        self.key = key

    def __eq__(self, other):
        if not isinstance(other, Fragment):
            return NotImplemented
        return self.key == other.key and self.children == other.children

    __hash__ = None  # Unhashable since we define __eq__

    def __repr__(self):
        return f"Fragment({self.children!r}, key={self.key!r})"


class Element:
    __slots__ = ("attrs", "children", "key", "name")

    def __init__(self, name, attrs=None, children=None, key=None):
        # Empty names can only come from a handler bug; fail loudly.
        if not name:
            msg = "Element requires a non-empty name"
            raise ValueError(msg)
        self.name = name
        self.attrs = dict(attrs) if attrs else {}
        self.children = list(children) if children is not None else []
        self.key = key

    def __eq__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return (
            self.name == other.name
            and self.key == other.key
            and self.attrs == other.attrs
            and self.children == other.children
        )

    __hash__ = None  # Unhashable since we define __eq__

    def __repr__(self):
        return f"Element({self.name!r}, {self.attrs!r}, {self.children!r}, key={self.key!r})"
