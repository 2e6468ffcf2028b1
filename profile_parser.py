#!/usr/bin/env python3
"""Profile tagtext parsing and formatting to find performance bottlenecks."""

import cProfile
import io
import pstats

from tagtext import Element, create_text_format, to_html


def strong(index, tag, aux_state):
    return Element("strong", children=tag.children, key=index)


def link(index, tag, aux_state):
    return Element("a", {"href": tag.attrs.get("href", "")}, tag.children, key=index)


fmt = create_text_format(tag_handlers={"b": strong, "a": link}, keep_unknown_tags=True)

# Sample text
text = """
Go to <a href="https://example.com/docs">the <b>docs</b></a> or read
<note kind=info flag>the <b>release</b> notes</note> for <price qty="12345" usd/>.
Unclosed <b>bold and a stray </i> closer, plus < not a tag.
""" * 200  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = fmt(text)
    _ = to_html(result)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
