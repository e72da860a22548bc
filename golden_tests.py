from __future__ import annotations

import argparse
import difflib
import json
import sys
from pathlib import Path

from emulator import run_listing
from machine_cli import parse_inputs
from microc import compile_source

REPO_ROOT = Path(__file__).resolve().parent


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, data: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data, encoding="utf-8")


def generate_golden(name: str, src_path: Path, out_dir: Path, input_path: Path | None, ticks: int):
    test_dir = out_dir / name
    test_dir.mkdir(parents=True, exist_ok=True)

    # Copy inputs
    write_text(test_dir / "program.mc", read_text(src_path))
    if input_path and input_path.exists():
        write_text(test_dir / "input.txt", read_text(input_path))

    listing = compile_source(read_text(src_path))
    write_text(test_dir / "program.s", listing)

    inputs = parse_inputs(str(input_path)) if input_path else []
    write_text(test_dir / "out.txt", run_listing(listing, inputs, ticks))

    meta = {
        "name": name,
        "src": str(src_path.relative_to(REPO_ROOT)),
        "ticks": ticks,
        "input": str(input_path.relative_to(REPO_ROOT)) if input_path else None,
    }
    write_text(test_dir / "meta.json", json.dumps(meta, indent=2) + "\n")


def discover_tests(project_root: Path) -> list[dict[str, object]]:
    ex = project_root / "examples"
    return [
        {"name": "a_plus_b", "src": ex / "a_plus_b.mc", "input": ex / "a_plus_b.input", "ticks": 200},
        {"name": "chain", "src": ex / "chain.mc", "input": ex / "chain.input", "ticks": 200},
        {"name": "comments", "src": ex / "comments.mc", "input": None, "ticks": 200},
    ]


def verify_one(gdir: Path, ticks: int) -> bool:
    ok = True
    listing = compile_source(read_text(gdir / "program.mc"))
    expected = read_text(gdir / "program.s")
    if listing != expected:
        print(f"[mismatch][{gdir.name}] program.s differs")
        for line in difflib.unified_diff(
            expected.splitlines(), listing.splitlines(), fromfile="golden/program.s", tofile="fresh/program.s", lineterm=""
        ):
            print(line)
        ok = False
    input_file = gdir / "input.txt"
    inputs = parse_inputs(str(input_file)) if input_file.exists() else []
    out = run_listing(listing, inputs, ticks)
    if out != read_text(gdir / "out.txt"):
        print(f"[mismatch][{gdir.name}] out.txt differs: {out!r}")
        ok = False
    return ok


def main():
    ap = argparse.ArgumentParser(description="Generate golden test artifacts")
    ap.add_argument("--out-dir", default="golden", help="output directory for golden tests")
    ap.add_argument("--only", action="append", help="run only specified test(s) by name", default=None)
    ap.add_argument("--verify", action="store_true", help="compare against existing golden artifacts")
    args = ap.parse_args()

    out_dir = (REPO_ROOT / args.out_dir).resolve()
    tests = discover_tests(REPO_ROOT)
    if args.only:
        names = set(args.only)
        tests = [t for t in tests if t["name"] in names]

    any_failed = False
    for t in tests:
        name = t["name"]  # type: ignore
        src = Path(t["src"])  # type: ignore
        input_path = Path(t["input"]) if t["input"] else None  # type: ignore
        ticks = int(t["ticks"])  # type: ignore
        if args.verify:
            print(f"[verify] {name}")
            if not verify_one(out_dir / name, ticks):
                any_failed = True
        else:
            print(f"[golden] Generating {name} -> {out_dir / name}")
            generate_golden(name, src, out_dir, input_path, ticks)

    if args.verify:
        if any_failed:
            sys.exit(1)
        print("[verify] all tests OK")


if __name__ == "__main__":
    main()
