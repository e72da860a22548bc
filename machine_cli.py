from __future__ import annotations

import argparse
import logging
import sys

from emulator import MachineError, run_machine


def parse_inputs(path: str) -> list[int]:
    values = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            s = line.split("#", 1)[0].strip()
            if not s:
                continue
            for tok in s.split():
                try:
                    values.append(int(tok, 0))
                except ValueError:
                    raise ValueError(f"bad input value {tok!r} in {path}") from None
    return values


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a generated listing")
    ap.add_argument("program", help="assembly listing path")
    ap.add_argument("--input", help="integers consumed by read(), whitespace separated")
    ap.add_argument("--ticks", type=int, default=100000)
    ap.add_argument("--trace", action="store_true", help="dump one line per executed instruction")
    ap.add_argument("--trace-file", help="write trace to file (default: stdout)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    inputs = parse_inputs(args.input) if args.input else []
    try:
        out = run_machine(args.program, inputs, args.ticks, trace=args.trace, trace_file=args.trace_file)
    except MachineError as e:
        print(f"machine: {e}", file=sys.stderr)
        return 1
    sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
