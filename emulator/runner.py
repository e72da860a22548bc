from __future__ import annotations

from isa import A0, FP, SP, T0, T1, V0, decode

from .cpu import CPU
from .io import IOController


def run_listing(
    listing: str,
    inputs: list[int],
    tick_limit: int = 100000,
    trace: bool = False,
    trace_file: str | None = None,
) -> str:
    cpu = CPU(decode(listing), IOController(inputs), tick_limit=tick_limit)
    if not trace:
        cpu.run()
        return cpu.io.out_dump()
    trace_out = open(trace_file, "w", encoding="utf-8") if trace_file else None
    try:
        while not cpu.halted:
            pc = cpu.pc
            cpu.step()
            r = cpu.dp.regs
            line = (
                f"t={cpu.tick} pc={pc} {cpu.last_ir} v0={r[V0]} a0={r[A0]} "
                f"t0={r[T0]} t1={r[T1]} sp={r[SP]:#x} fp={r[FP]:#x}\n"
            )
            if trace_out:
                trace_out.write(line)
            else:
                print(line, end="")
    finally:
        if trace_out:
            trace_out.close()
    return cpu.io.out_dump()


def run_machine(
    listing_path: str,
    inputs: list[int],
    tick_limit: int = 100000,
    trace: bool = False,
    trace_file: str | None = None,
) -> str:
    with open(listing_path, encoding="utf-8") as f:
        listing = f.read()
    return run_listing(listing, inputs, tick_limit, trace, trace_file)
