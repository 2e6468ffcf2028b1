from __future__ import annotations

import unittest

from tagtext import (
    Element,
    Fragment,
    TagData,
    TagToken,
    default_text_handler,
    format_tokens,
    literal_markup,
    parse,
    resolve_tag_handlers,
    to_html,
)
from tagtext.format import attrs_to_string


def strong(index, tag, aux_state):
    return Element("strong", children=tag.children, key=index)


class TestFormatWalk(unittest.TestCase):
    def test_forest_is_wrapped_in_a_keyed_fragment(self) -> None:
        out = format_tokens(["a", "b"], 7)
        assert out == Fragment(
            [Fragment([Fragment(["a"], key=0)], key=0), Fragment([Fragment(["b"], key=1)], key=1)],
            key=7,
        )

    def test_single_text_token(self) -> None:
        assert format_tokens("x", 3) == Fragment([Fragment(["x"], key=3)], key=3)

    def test_text_handler_result_is_wrapped(self) -> None:
        out = format_tokens("x", 0, text_handler=lambda index, text, aux: None)
        assert out == Fragment([None], key=0)

    def test_positional_index_is_per_parent(self) -> None:
        seen = []

        def text_handler(index, text, aux_state):
            seen.append((index, text))
            return text

        format_tokens(parse("a<b>c<i>d</i>e</b>f"), text_handler=text_handler)
        assert seen == [(0, "a"), (0, "c"), (0, "d"), (2, "e"), (2, "f")]

    def test_registered_handler_gets_formatted_children(self) -> None:
        captured = []

        def handler(index, tag, aux_state):
            captured.append(tag)
            return "B!"

        out = format_tokens(parse('x<b k="v">y</b>'), tag_handlers={"B": handler})
        (tag,) = captured
        assert isinstance(tag, TagData)
        assert tag.name == "B"
        assert tag.attrs == {"k": "v"}
        assert tag.children == [Fragment([Fragment(["y"], key=0)], key=0)]
        # Handler results are used directly, without an extra wrapper.
        assert out.children[1] == "B!"

    def test_handlers_may_mutate_attrs_without_touching_tokens(self) -> None:
        tokens = parse("<b k=v/>")

        def handler(index, tag, aux_state):
            tag.attrs["k"] = "changed"
            return None

        format_tokens(tokens, tag_handlers={"B": handler})
        assert tokens == [TagToken("B", {"k": "v"}, [])]

    def test_default_handler_used_for_unregistered_tags(self) -> None:
        out = format_tokens(
            parse("<b>x</b><foo>y</foo>"),
            tag_handlers=resolve_tag_handlers({"b": strong}),
            default_tag_handler=lambda index, tag, aux: f"default:{tag.name}",
            keep_unknown_tags=True,
        )
        assert to_html(out) == "<strong>x</strong>default:FOO"

    def test_registered_tag_never_reaches_default_handler(self) -> None:
        calls = []

        def default(index, tag, aux_state):
            calls.append(tag.name)

        format_tokens(
            parse("<b>x</b>"),
            tag_handlers={"B": strong},
            default_tag_handler=default,
            keep_unknown_tags=True,
        )
        assert calls == []

    def test_unknown_tags_are_elided(self) -> None:
        out = format_tokens(parse("<p>x</q>"))
        assert to_html(out) == "x"
        assert out == Fragment([Fragment([Fragment([Fragment(["x"], key=0)], key=0)], key=0)], key=0)

    def test_unknown_tags_kept_as_literal_markup(self) -> None:
        out = format_tokens(parse("<p>x</q>"), keep_unknown_tags=True)
        assert to_html(out) == (
            '<pre style="display: inline;">&lt;P&gt;</pre>x<pre style="display: inline;">&lt;/P&gt;</pre>'
        )

    def test_aux_state_reaches_every_handler(self) -> None:
        seen = []

        def text_handler(index, text, aux_state):
            seen.append(aux_state)
            return text

        def tag_handler(index, tag, aux_state):
            seen.append(aux_state)
            return tag.children

        aux = ("ctx",)
        format_tokens(parse("a<b>c</b>"), text_handler=text_handler, tag_handlers={"B": tag_handler}, aux_state=aux)
        assert seen == [aux, aux, aux]
        assert all(value is aux for value in seen)

    def test_default_text_handler(self) -> None:
        assert default_text_handler(4, "t") == Fragment(["t"], key=4)
        assert default_text_handler(0, None, "aux") == Fragment([None], key=0)


class TestLiteralMarkup(unittest.TestCase):
    def test_attrs_are_double_quoted_in_order(self) -> None:
        assert attrs_to_string({"b": "1", "a": "x y"}) == 'b="1" a="x y"'
        assert attrs_to_string({}) == ""

    def test_input_quote_style_is_not_kept(self) -> None:
        (token,) = parse("<tag one='1' two=2 three>x</tag>")
        out = format_tokens(token, keep_unknown_tags=True)
        assert out.children[0].children == ['<TAG one="1" two="2" three="">']
        assert out.children[-1].children == ["</TAG>"]

    def test_self_closing_without_attrs(self) -> None:
        out = literal_markup("SELF", {}, [], 1)
        assert out == Fragment([Element("pre", {"style": "display: inline;"}, ["<SELF/>"], key=0)], key=1)

    def test_self_closing_with_attrs(self) -> None:
        out = literal_markup("FOO", {"attr": "123"}, [])
        assert out.children[0].children == ['<FOO attr="123" />']
        assert len(out.children) == 1

    def test_empty_pair_renders_like_self_closing(self) -> None:
        assert to_html(format_tokens(parse("<x></x>"), keep_unknown_tags=True)) == to_html(
            format_tokens(parse("<x/>"), keep_unknown_tags=True)
        )

    def test_children_between_open_and_close(self) -> None:
        children = ["a", Element("b", children=["c"])]
        out = literal_markup("T", {"k": "v"}, children, 0)
        assert [getattr(part, "key", None) for part in out.children] == [0, None, None, 2]
        assert to_html(out) == (
            '<pre style="display: inline;">&lt;T k="v"&gt;</pre>'
            "a<b>c</b>"
            '<pre style="display: inline;">&lt;/T&gt;</pre>'
        )

    def test_round_trip_of_well_formed_markup(self) -> None:
        out = format_tokens(parse("<a x='1' y=\"2\">t<b/>u</a>"), keep_unknown_tags=True)
        literal = "".join(
            part.children[0] if isinstance(part, Element) else part for part in _flatten(out)
        )
        assert literal == '<A x="1" y="2">t<B/>u</A>'


def _flatten(node):
    if isinstance(node, Fragment):
        for child in node.children:
            yield from _flatten(child)
    else:
        yield node
