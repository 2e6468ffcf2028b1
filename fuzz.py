#!/usr/bin/env python3
"""
Random fuzzer for the tagtext tokenizer and formatter.
Generates malformed tagged text and checks that parsing never crashes or hangs.
"""

import argparse
import random
import string
import sys
import time
import traceback

from tagtext import Element, create_text_format, to_html

TAGS = ["b", "i", "a", "link", "price", "span", "div", "count", "x-y", "h1", "my.tag", "_t"]

ATTRIBUTES = ["href", "qty", "usd", "style", "title", "data-x", "flag"]

SPECIAL_CHARS = [
    "\x00", "\x0b", "\x0c", "\x7f",
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b",  # Zero-width space
    "\ufeff",  # BOM
    "\u2192", "&amp;", "&lt;",
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    """Generate random whitespace (including weird ones)."""
    ws = [" ", "\t", "\n", "\r", "\f", "\v", ""]
    return "".join(random.choices(ws, k=random.randint(0, 3)))


def fuzz_tag_name():
    """Generate malformed tag names."""
    strategies = [
        lambda: random.choice(TAGS),  # Valid tag
        lambda: random.choice(TAGS).upper(),  # Uppercase
        lambda: random.choice(TAGS) + random_string(1, 5),  # Tag with suffix
        lambda: random_string(1, 10),  # Random string
        lambda: "",  # Empty
        lambda: random.choice(SPECIAL_CHARS) + random.choice(TAGS),  # Special prefix
        lambda: " " + random.choice(TAGS),  # Space prefix
        lambda: random.choice(TAGS) + "/" + random.choice(TAGS),  # Slash in name
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    """Generate malformed attributes."""
    name_strategies = [
        lambda: random.choice(ATTRIBUTES),
        lambda: random_string(1, 15),
        lambda: "",
        lambda: "=",
        lambda: '"',
        lambda: "'",
        lambda: "<",
        lambda: "/",
    ]

    value_strategies = [
        lambda: random_string(0, 30),
        lambda: '"' + random_string() + '"',  # Extra quotes
        lambda: "'" + random_string() + "'",
        lambda: "<b>x</b>",
        lambda: "a\\" + random_string(),  # Backslash before the quote
        lambda: "\n" * random.randint(1, 3) + random_string(),
        lambda: "",
    ]

    quote_styles = [
        ('="', '"'),
        ("='", "'"),
        ("=", ""),  # Unquoted
        (" = ", ""),  # Spaces around equals
        ("", ""),  # Flag
        ('="', ""),  # Unclosed quote
        ("='", ""),  # Unclosed single quote
        ("==", ""),  # Double equals
    ]

    name = random.choice(name_strategies)()
    value = random.choice(value_strategies)()
    quote_start, quote_end = random.choice(quote_styles)

    return f"{name}{quote_start}{value}{quote_end}"


def fuzz_open_tag():
    """Generate malformed opening tags."""
    tag = fuzz_tag_name()
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closings = [">", "/>", " >", " />", "/ >", "", ">>", "/"]
    opening = random.choice(["<", "< ", "<<", "</"]) if random.random() < 0.2 else "<"
    return f"{opening}{tag}{random_whitespace()}{attrs}{random_whitespace()}{random.choice(closings)}"


def fuzz_close_tag():
    """Generate malformed closing tags."""
    tag = fuzz_tag_name()
    variants = [
        f"</{tag}>",
        f"</ {tag}>",
        f"</{tag} >",
        f"</{tag}",  # Unclosed
        f"</{tag}/>",
        f"<//{tag}>",
        f"</{tag} {fuzz_attribute()}>",  # Attribute in end tag
    ]
    return random.choice(variants)


def fuzz_text():
    """Generate text content with edge cases."""
    strategies = [
        lambda: random_string(1, 50),
        lambda: "".join(random.choices(SPECIAL_CHARS, k=random.randint(1, 5))),
        lambda: "<" + random_string(0, 5),  # Incomplete tag
        lambda: random_string() + ">" + random_string(),  # Stray >
        lambda: "<",
        lambda: "</",
        lambda: "\r\n" * random.randint(1, 3),
    ]
    return random.choice(strategies)()


def fuzz_nested_structure(depth=0, max_depth=10):
    """Generate nested (possibly mismatched) structure."""
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()

    tag = random.choice(TAGS)
    content = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))

    # Sometimes don't close tags
    if random.random() < 0.2:
        return f"<{tag}>{content}"
    # Sometimes mismatch tags
    if random.random() < 0.1:
        return f"<{tag}>{content}</{random.choice(TAGS)}>"
    return f"<{tag}>{content}</{tag}>"


def fuzz_deeply_nested():
    """Generate deeply nested tags that are never closed."""
    return "".join(f"<{random.choice(TAGS)}>" for _ in range(random.randint(50, 200))) + fuzz_text()


def generate_fuzzed_text():
    """Generate one fuzzed input string."""
    generators = [fuzz_open_tag, fuzz_close_tag, fuzz_text, fuzz_nested_structure, fuzz_deeply_nested]
    parts = []
    for _ in range(random.randint(1, 20)):
        generator = random.choices(generators, weights=[20, 10, 15, 10, 1])[0]
        parts.append(generator())
    return "".join(parts)


def _echo_handler(index, tag, aux_state):
    return Element(tag.name.lower().replace(".", "-"), tag.attrs, tag.children, key=index)


FORMATTERS = {
    "drop": create_text_format(),
    "keep": create_text_format(keep_unknown_tags=True),
    "echo": create_text_format(default_tag_handler=_echo_handler),
}


def run_fuzzer(mode, num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against one formatter configuration."""
    if seed is not None:
        random.seed(seed)

    fmt = FORMATTERS[mode]
    crashes = []
    hangs = []
    successes = 0

    print(f"Fuzzing tagtext ({mode}) with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        text = generate_fuzzed_text()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            html = to_html(fmt(text))
            elapsed = time.perf_counter() - start

            # Linear scan; anything above a second is a hang
            if elapsed > 1.0:
                hangs.append({"test_num": i, "text": text, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            else:
                successes += 1

            _ = html

        except Exception as e:
            crashes.append({
                "test_num": i,
                "text": text,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print(f"FUZZING RESULTS: {mode}")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>1s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/max(elapsed_total, 1e-9):.1f}")

    if crashes:
        print(f"\n{'='*60}")
        print("CRASH DETAILS:")
        print(f"{'='*60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  Text: {crash['text'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'='*60}")
        print("HANG DETAILS:")
        print(f"{'='*60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  Text: {hang['text'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_{mode}_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Fuzzing results for tagtext ({mode})\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"Text:\n{crash['text']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"Text:\n{hang['text']}\n\n")
        print(f"\nFailures saved to {filename}")

    return len(crashes) == 0 and len(hangs) == 0


def main():
    parser = argparse.ArgumentParser(description="Fuzz the tagtext tokenizer and formatter with malformed input")
    parser.add_argument(
        "--mode", "-m",
        choices=sorted(FORMATTERS),
        default="keep",
        help="Formatter configuration to fuzz (default: keep)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed inputs (no parsing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_text())
            print()
        return

    success = run_fuzzer(
        args.mode,
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
