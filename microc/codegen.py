from __future__ import annotations

import logging
from dataclasses import dataclass

from isa import A0, FRAME_BASE, T0, T1, V0, WORD, Instr, Opcode, mem, to_listing

from .errors import GeneratorError
from .parser import Assign, BinOp, BinOpKind, Expr, IntLit, Program, Syscall, SyscallKind, Var

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mem:
    offset: int


@dataclass(frozen=True)
class Imm:
    value: int


Operand = Mem | Imm

ALU = {BinOpKind.ADD: Opcode.ADD, BinOpKind.SUB: Opcode.SUB}


class Codegen:
    def __init__(self):
        self.code: list[Instr] = []
        self.vars: dict[str, int] = {}  # variable -> offset from $fp
        self.frame_pointer = FRAME_BASE  # next free offset

    @property
    def frame_size(self) -> int:
        return self.frame_pointer

    def emit(self, opcode: Opcode, *args: str):
        self.code.append(Instr(opcode, args))

    def alloc_var(self, name: str) -> int:
        if name in self.vars:
            return self.vars[name]
        offset = self.alloc_temp()
        self.vars[name] = offset
        logger.debug("variable %s -> %d($fp)", name, offset)
        return offset

    def alloc_temp(self) -> int:
        offset = self.frame_pointer
        self.frame_pointer += WORD
        return offset

    def load(self, reg: str, operand: Operand):
        if isinstance(operand, Mem):
            self.emit(Opcode.LW, reg, mem(operand.offset))
        else:
            self.emit(Opcode.LI, reg, str(operand.value))

    def gen_expr(self, e: Expr) -> Operand:
        if isinstance(e, Var):
            return Mem(self.alloc_var(e.name))
        if isinstance(e, IntLit):
            return Imm(e.value)
        if isinstance(e, BinOp):
            # walk the left spine iteratively; long sums fold to the left
            spine: list[BinOp] = []
            while isinstance(e, BinOp):
                spine.append(e)
                e = e.lhs
            acc = self.gen_expr(e)
            for node in reversed(spine):
                rhs = self.gen_expr(node.rhs)
                self.load(T0, acc)
                self.load(T1, rhs)
                self.emit(ALU[node.op], T0, T0, T1)
                # every intermediate result keeps its own slot
                offset = self.alloc_temp()
                self.emit(Opcode.SW, T0, mem(offset))
                acc = Mem(offset)
            return acc
        if isinstance(e, Syscall):
            raise GeneratorError(f"{e.kind.value}() cannot be used as a value")
        raise GeneratorError(f"cannot generate code for {type(e).__name__}")

    def gen_stmt(self, s: Expr):
        if isinstance(s, Syscall) and s.kind is SyscallKind.READ:
            for arg in s.args:
                if not isinstance(arg, Var):
                    raise GeneratorError("read() arguments must be variables")
                offset = self.alloc_var(arg.name)
                self.emit(Opcode.JAL, "read")
                self.emit(Opcode.SW, V0, mem(offset))
            return
        if isinstance(s, Syscall) and s.kind is SyscallKind.WRITE:
            for arg in s.args:
                self.load(A0, self.gen_expr(arg))
                self.emit(Opcode.JAL, "write")
            return
        if isinstance(s, Assign):
            target = self.gen_expr(s.var)
            self.load(T0, self.gen_expr(s.value))
            self.emit(Opcode.SW, T0, mem(target.offset))
            return
        raise GeneratorError(f"unexpected top-level statement {type(s).__name__}")

    def gen(self, prog: Program) -> list[Instr]:
        for s in prog.statements:
            self.gen_stmt(s)
        logger.debug("%d instructions, frame size %d", len(self.code), self.frame_size)
        return self.code

    def generate(self, prog: Program) -> str:
        return to_listing(self.gen(prog), self.frame_size)
