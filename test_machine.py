import pytest

from emulator import MachineError, run_listing
from emulator.datapath import DataPath, to_signed
from isa import DATA_BASE, Opcode, decode
from microc import compile_source


def run(src, inputs=()):
    return run_listing(compile_source(src), list(inputs), tick_limit=10000)


def test_a_plus_b():
    assert run("begin read(a, b); write(a + b); end", [3, 4]) == "7\n"


def test_subtraction_goes_negative():
    assert run("begin read(a); b := 1 - a - 2; write(b, a); end", [10]) == "-11\n10\n"


def test_parenthesised_right_operand():
    assert run("begin write(10 - (3 - 1)); end") == "8\n"


def test_arithmetic_wraps_at_32_bits():
    assert run("begin a := 2147483647 + 1; write(a); end") == "-2147483648\n"
    assert run("begin a := 0 - 2147483647 - 2; write(a); end") == "2147483647\n"


def test_missing_input_reads_zero():
    assert run("begin read(a); write(a + 1); end") == "1\n"


def test_long_chain():
    lines = ["begin", "read (A0);"]
    for i in range(1, 51):
        lines.append(f"A{i} := A{i - 1} + 1;")
    lines.append("write(" + "+".join(f"A{i}" for i in range(51)) + ");")
    lines.append("end")
    # sum of A0 + i for i in 0..50 with A0 = 1
    assert run("\n".join(lines), [1]) == "1326\n"


def test_decode():
    image = decode(compile_source("begin write(1); end"))
    assert image.text_labels["main"] == 0
    assert image.data_labels["newline"] == DATA_BASE
    assert image.data[DATA_BASE] == 10
    read_at = image.text_labels["read"]
    assert [i.opcode for i in image.code[read_at : read_at + 3]] == [Opcode.LI, Opcode.SYSCALL, Opcode.JR]


def test_decode_accepts_space_separated_operands():
    image = decode("main:\n    li $v0 10\n    syscall\n")
    assert image.code[0].args == ("$v0", "10")
    assert run_listing("main:\n    li $v0 10\n    syscall\n", []) == ""


def test_decode_rejects_unknown_mnemonic():
    with pytest.raises(ValueError):
        decode("main:\n    mul $t0, $t0, $t1\n")


def test_tick_limit():
    listing = "main:\n    jal main\n"
    with pytest.raises(MachineError, match="tick limit"):
        run_listing(listing, [], tick_limit=50)


def test_missing_entry():
    with pytest.raises(MachineError):
        run_listing("start:\n    syscall\n", [])


def test_unaligned_access():
    dp = DataPath()
    with pytest.raises(MachineError):
        dp.load_word(2)


def test_zero_register_and_wrap():
    dp = DataPath()
    dp.write_reg("$zero", 5)
    assert dp.read_reg("$zero") == 0
    dp.write_reg("$t0", 0xFFFF_FFFF)
    assert dp.read_reg("$t0") == -1
    assert to_signed(1 << 31) == -(1 << 31)
    with pytest.raises(MachineError):
        dp.read_reg("$t9")


def test_sum_of_two_thousand_inputs():
    n = 2000
    src = "begin read(" + ", ".join(f"a{i}" for i in range(n)) + "); write(" + "+".join(f"a{i}" for i in range(n)) + "); end"
    assert run_listing(compile_source(src), list(range(n)), tick_limit=100000) == f"{n * (n - 1) // 2}\n"
