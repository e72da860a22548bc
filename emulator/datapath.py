from __future__ import annotations

from isa import REGISTERS, SP, STACK_TOP, WORD, ZERO

from .errors import MachineError


def to_signed(value: int) -> int:
    value &= 0xFFFF_FFFF
    return value - (1 << 32) if value & 0x8000_0000 else value


class DataPath:
    """Register file and word-addressed data memory."""

    def __init__(self, data: dict[int, int] | None = None):
        self.regs: dict[str, int] = {r: 0 for r in REGISTERS}
        self.regs[SP] = STACK_TOP
        self.mem: dict[int, int] = dict(data or {})

    def read_reg(self, name: str) -> int:
        if name not in self.regs:
            raise MachineError(f"unknown register {name}")
        return self.regs[name]

    def write_reg(self, name: str, value: int):
        if name not in self.regs:
            raise MachineError(f"unknown register {name}")
        if name == ZERO:
            return
        self.regs[name] = to_signed(value)

    def _check(self, addr: int):
        if addr % WORD:
            raise MachineError(f"unaligned word access at {addr:#x}")

    def load_word(self, addr: int) -> int:
        self._check(addr)
        return self.mem.get(addr, 0)

    def store_word(self, addr: int, value: int):
        self._check(addr)
        self.mem[addr] = to_signed(value)
