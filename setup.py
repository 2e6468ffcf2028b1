"""
Build script for tagtext with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    python -m build

    # Compiled with mypyc
    TAGTEXT_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("TAGTEXT_USE_MYPYC", "0") == "1"

# Modules on the parse/format hot path.
# Note: formatter.py is excluded; its frozen slotted dataclass config is not worth compiling.
MYPYC_MODULES = [
    "src/tagtext/tokenizer.py",
    "src/tagtext/format.py",
    "src/tagtext/serialize.py",
]


def build_with_mypyc() -> list:
    """Compile MYPYC_MODULES into extension modules."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        sys.exit("ERROR: mypyc is not installed. Install with: pip install tagtext[mypyc]")

    missing = [module for module in MYPYC_MODULES if not Path(module).exists()]
    if missing:
        sys.exit(f"ERROR: Modules not found: {', '.join(missing)}")

    print(f"Building tagtext with mypyc: {', '.join(Path(module).stem for module in MYPYC_MODULES)}")

    return mypycify(
        MYPYC_MODULES,
        opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"),
        debug_level=os.environ.get("MYPYC_DEBUG_LEVEL", "0"),
        separate=False,
        multi_file=False,
    )


if __name__ == "__main__":
    setup(
        ext_modules=build_with_mypyc() if USE_MYPYC else [],
    )
