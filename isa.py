from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class Opcode(Enum):
    # Memory
    LI = "li"
    LW = "lw"
    SW = "sw"
    MOVE = "move"

    # ALU
    ADD = "add"
    SUB = "sub"
    ADDI = "addi"

    # Control flow
    JAL = "jal"
    JR = "jr"
    SYSCALL = "syscall"


# Registers
ZERO = "$zero"
V0 = "$v0"
A0 = "$a0"
T0 = "$t0"
T1 = "$t1"
SP = "$sp"
FP = "$fp"
RA = "$ra"

REGISTERS = (ZERO, V0, A0, T0, T1, SP, FP, RA)

WORD = 4
# $ra and $fp are saved at 20($sp) and 28($sp), below the first variable slot
FRAME_BASE = 32

DATA_BASE = 0x1001_0000
STACK_TOP = 0x7FFF_EFFC


class Syscall:
    PRINT_INT = 1
    READ_INT = 5
    EXIT = 10
    PRINT_CHAR = 11


@dataclass
class Instr:
    opcode: Opcode
    args: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.opcode.value
        return f"{self.opcode.value} {', '.join(self.args)}"


def mem(offset: int, base: str = FP) -> str:
    return f"{offset}({base})"


HEADER = "# Module : main\n"

PROLOGUE = """\
    .text
    .globl main
main:
    # prologue area
    addi $sp, $sp, -{frame}
    sw $ra, 20($sp)
    sw $fp, 28($sp)
    move $fp, $sp
"""

EPILOGUE = """\
    # epilogue area
    move $sp, $fp
    lw $fp, 28($sp)
    lw $ra, 20($sp)
    addi $sp, $sp, {frame}
    li $v0, 10
    syscall
"""

PRELUDE = """\
    .text
    .globl read
read:
    # call read integer
    li $v0, 5
    syscall
    jr $ra
    .data
newline:
    .word '\\n'
    .text
    .globl write
write:
    lw $t0, newline
    li $v0, 1
    syscall
    move $a0, $t0
    li $v0, 11
    syscall
    jr $ra
"""


def to_listing(code: list[Instr], frame_size: int) -> str:
    body = "".join(f"    {ins}\n" for ins in code)
    return HEADER + PROLOGUE.format(frame=frame_size) + body + EPILOGUE.format(frame=frame_size) + PRELUDE


@dataclass
class Image:
    """Decoded listing: text, labels and initial data memory."""

    code: list[Instr] = field(default_factory=list)
    text_labels: dict[str, int] = field(default_factory=dict)
    data_labels: dict[str, int] = field(default_factory=dict)
    data: dict[int, int] = field(default_factory=dict)


_CHAR_ESCAPES = {"\\n": 10, "\\t": 9, "\\r": 13, "\\0": 0, "\\\\": 92, "\\'": 39}
_LABEL_RE = re.compile(r"^([A-Za-z_$.][\w$.]*):$")
_MNEMONICS = {op.value: op for op in Opcode}


def parse_word(tok: str) -> int:
    if tok.startswith("'") and tok.endswith("'") and len(tok) >= 3:
        inner = tok[1:-1]
        if inner in _CHAR_ESCAPES:
            return _CHAR_ESCAPES[inner]
        if len(inner) == 1:
            return ord(inner)
        raise ValueError(f"bad character literal {tok}")
    return int(tok, 0)


def decode(text: str) -> Image:
    image = Image()
    section = "text"
    data_next = DATA_BASE
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        m = _LABEL_RE.match(line)
        if m:
            if section == "text":
                image.text_labels[m.group(1)] = len(image.code)
            else:
                image.data_labels[m.group(1)] = data_next
            continue
        if line in (".text", ".data"):
            section = line[1:]
            continue
        if line.startswith(".globl"):
            continue
        if line.startswith(".word"):
            if section != "data":
                raise ValueError(f"line {lineno}: .word outside of .data")
            for tok in line[len(".word") :].split(","):
                image.data[data_next] = parse_word(tok.strip())
                data_next += WORD
            continue
        parts = line.split(None, 1)
        opcode = _MNEMONICS.get(parts[0])
        if opcode is None:
            raise ValueError(f"line {lineno}: unknown mnemonic {parts[0]!r}")
        args = tuple(a for a in re.split(r"[,\s]+", parts[1]) if a) if len(parts) > 1 else ()
        image.code.append(Instr(opcode, args))
    return image
