from __future__ import annotations

import logging
import re

from isa import A0, RA, V0, Image, Instr, Opcode, Syscall, parse_word

from .datapath import DataPath
from .errors import MachineError
from .io import IOController

logger = logging.getLogger(__name__)

_MEM_RE = re.compile(r"^(-?\d+)\((\$\w+)\)$")


class CPU:
    def __init__(self, image: Image, io: IOController, tick_limit: int = 100000, entry: str = "main"):
        if entry not in image.text_labels:
            raise MachineError(f"no entry label {entry!r}")
        self.image = image
        self.io = io
        self.dp = DataPath(image.data)
        self.pc = image.text_labels[entry]
        self.tick = 0
        self.tick_limit = tick_limit
        self.halted = False
        self.last_ir: Instr | None = None

    def _address(self, operand: str) -> int:
        m = _MEM_RE.match(operand)
        if m:
            return self.dp.read_reg(m.group(2)) + int(m.group(1))
        if operand in self.image.data_labels:
            return self.image.data_labels[operand]
        raise MachineError(f"bad memory operand {operand!r}")

    def _arity(self, ins: Instr, n: int):
        if len(ins.args) != n:
            raise MachineError(f"{ins.opcode.value} expects {n} operands, got {len(ins.args)}")

    def _syscall(self):
        code = self.dp.read_reg(V0)
        if code == Syscall.PRINT_INT:
            self.io.write_int(self.dp.read_reg(A0))
        elif code == Syscall.READ_INT:
            self.dp.write_reg(V0, self.io.read_int())
        elif code == Syscall.PRINT_CHAR:
            self.io.write_char(self.dp.read_reg(A0))
        elif code == Syscall.EXIT:
            self.halted = True
        else:
            raise MachineError(f"unsupported syscall {code}")

    def step(self):
        if self.halted:
            return
        if self.tick >= self.tick_limit:
            raise MachineError(f"tick limit {self.tick_limit} exceeded")
        if not 0 <= self.pc < len(self.image.code):
            raise MachineError(f"pc out of range: {self.pc}")
        ins = self.image.code[self.pc]
        self.last_ir = ins
        self.pc += 1
        self.tick += 1
        op, a = ins.opcode, ins.args
        dp = self.dp

        if op == Opcode.LI:
            self._arity(ins, 2)
            dp.write_reg(a[0], parse_word(a[1]))
        elif op == Opcode.LW:
            self._arity(ins, 2)
            dp.write_reg(a[0], dp.load_word(self._address(a[1])))
        elif op == Opcode.SW:
            self._arity(ins, 2)
            dp.store_word(self._address(a[1]), dp.read_reg(a[0]))
        elif op == Opcode.MOVE:
            self._arity(ins, 2)
            dp.write_reg(a[0], dp.read_reg(a[1]))
        elif op == Opcode.ADD:
            self._arity(ins, 3)
            dp.write_reg(a[0], dp.read_reg(a[1]) + dp.read_reg(a[2]))
        elif op == Opcode.SUB:
            self._arity(ins, 3)
            dp.write_reg(a[0], dp.read_reg(a[1]) - dp.read_reg(a[2]))
        elif op == Opcode.ADDI:
            self._arity(ins, 3)
            dp.write_reg(a[0], dp.read_reg(a[1]) + int(a[2], 0))
        elif op == Opcode.JAL:
            self._arity(ins, 1)
            if a[0] not in self.image.text_labels:
                raise MachineError(f"unknown label {a[0]!r}")
            dp.write_reg(RA, self.pc)
            self.pc = self.image.text_labels[a[0]]
        elif op == Opcode.JR:
            self._arity(ins, 1)
            self.pc = dp.read_reg(a[0])
        elif op == Opcode.SYSCALL:
            self._syscall()
        else:
            raise MachineError(f"unsupported instruction {ins}")

    def run(self):
        while not self.halted:
            self.step()
        logger.debug("halted after %d ticks", self.tick)
