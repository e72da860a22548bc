from __future__ import annotations

import argparse
import logging
import sys

from . import compile_source
from .errors import CompileError


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="microc", description="micro language -> MIPS assembly translator")
    ap.add_argument("source", help="input source file")
    ap.add_argument("-o", "--output", help="write the listing to file instead of stdout")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with open(args.source, encoding="utf-8") as f:
            src = f.read()
    except OSError as e:
        print(f"microc: cannot read {args.source}: {e.strerror}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"microc: cannot read {args.source}: not valid UTF-8 at byte {e.start}", file=sys.stderr)
        return 1

    try:
        asm = compile_source(src)
    except CompileError as e:
        print(e.render(src), file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(asm)
    else:
        sys.stdout.write(asm)
    return 0
