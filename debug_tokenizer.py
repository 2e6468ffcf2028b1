#!/usr/bin/env python3
"""Debug script to inspect how a string is tokenized and rendered."""

import argparse
import logging
import sys

from tagtext import Tokenizer, create_text_format, to_html, to_test_format


def debug_text(text, keep_unknown_tags=True):
    print(f"Input: {text!r}")

    tokenizer = Tokenizer(collect_errors=True)
    tokens = tokenizer.parse(text)

    print("\nTokens:")
    print(to_test_format(tokens) or "| (empty)")

    print("\nRecovered errors:")
    if not tokenizer.errors:
        print("  (none)")
    for error in tokenizer.errors:
        print(f"  {error}")

    fmt = create_text_format(keep_unknown_tags=keep_unknown_tags)
    print("\nRendered HTML:")
    print(to_html(fmt(text)))


def main():
    parser = argparse.ArgumentParser(description="Show tokens, recovery errors and rendered HTML for a string")
    parser.add_argument("text", nargs="?", help="Text to parse (default: read stdin)")
    parser.add_argument("--drop-unknown", action="store_true", help="Elide unknown tags instead of showing them")
    parser.add_argument("--log", action="store_true", help="Print tokenizer debug logging")
    args = parser.parse_args()

    if args.log:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    text = args.text if args.text is not None else sys.stdin.read()
    debug_text(text, keep_unknown_tags=not args.drop_unknown)


if __name__ == "__main__":
    main()
