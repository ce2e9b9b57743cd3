import pytest
from rom16 import assembler as asm
from rom16 import architecture as arch
from rom16 import state as st
from rom16.common import (
    AsmError, AddressOutOfBounds, ArityMismatch, DuplicateLabel, InvalidLabel,
    InvalidRegister, LabelNotFound, LabelTableFull, MalformedConstant,
    MisalignedAddress, OperandOutOfRange,
)

BR_OVERFLOW_TEST = """\
    org 0x400

    loadimm.upper 0x20
    loadimm.lower 0x00
    mov r0 r7
    loadimm.upper 0x00
    loadimm.lower 0x02
    mov r1 r7

    mul r0 r0 r1
    brr.o Fail

    mul r0 r0 r1
    brr.o OverflowPos
    brr Fail

OverflowPos:
    test r7
    brr.z OverflowPosSucceed
    brr Fail

OverflowPosSucceed:
    mul r0 r0 r1
    brr.o OverflowNeg
    brr Fail

OverflowNeg:
    mov r0 r7
    loadimm.upper 0xff
    loadimm.lower 0xff
    sub r0 r0 r7
    brr.z Victory
    brr Fail

Fail:
    brr Fail

Victory:
    brr Victory
"""

def assemble(src, **kwargs):
    return asm.assembler("test", src, **kwargs)

def word_at(src, a=0, **kwargs):
    return assemble(src, **kwargs).rom.read_word(a)

# ----------------------------------------------------------------------
# Encodings
# ----------------------------------------------------------------------

def test_nop():
    ai = assemble("NOP\n")
    assert ai.rom.data[0:2] == bytes([0x00, 0x00])
    assert ai.asm_stmt[0]["codeWord"] == 0x0000

def test_add():
    ai = assemble("ADD R1 R2 R3\n")
    assert ai.rom.data[0:2] == bytes([0x02, 0x53])

def test_loadimm_upper_and_lower():
    assert word_at("LOADIMM.UPPER 0x20") == 0x2520
    assert word_at("LOADIMM.LOWER 0x20") == 0x2420

def test_branch_to_later_label():
    src = "NOP\nNOP\nNOP\nNOP\nBRR Fail\nFail: NOP\n"
    ai = assemble(src)
    assert ai.symbol_table["FAIL"].address == 10
    assert ai.rom.data[8:10] == bytes([0x80, 0x01])

def test_other_formats():
    assert word_at("SHL R1 15") == (5 << 9) | (1 << 6) | 15
    assert word_at("SHR R2 0xF") == (6 << 9) | (2 << 6) | 0xF
    assert word_at("TEST R7") == (7 << 9) | (7 << 6)
    assert word_at("BR R2 0b101") == 0x8685
    assert word_at("BR.SUB R3 2") == (70 << 9) | (3 << 6) | 2
    assert word_at("MOV R0 R7") == (19 << 9) | (0 << 6) | (7 << 3)
    assert word_at("RETURN") == 71 << 9
    assert word_at("BRR 0x1FF") == 0x81FF

def test_case_and_separators():
    assert word_at("  add\tr1, r2, r3 ; sum\n") == 0x0253

def test_every_mnemonic_decodes_back():
    for mnemonic, op in arch.statement_spec.items():
        operands = []
        expected = []
        for i, kind in enumerate(op['afmt']):
            if kind == "R":
                operands.append(f"R{i + 1}")
                expected.append(i + 1)
            else:
                operands.append("5")
                expected.append(5)
        w = word_at(f"{mnemonic} {' '.join(operands)}\n")
        decoded, fields = arch.decode_word(w)
        assert decoded['mnemonic'] == mnemonic
        assert decoded['opcode'] == op['opcode']
        assert fields == expected

def test_deterministic():
    a = assemble(BR_OVERFLOW_TEST, rom_size=2048)
    b = assemble(BR_OVERFLOW_TEST, rom_size=2048)
    assert a.rom.to_bytes() == b.rom.to_bytes()

# ----------------------------------------------------------------------
# Labels and ORG
# ----------------------------------------------------------------------

def test_forward_and_backward_reference_agree():
    forward = assemble("ORG 8\nBRR FAIL\nFAIL: NOP\n")
    backward = assemble("ORG 10\nFAIL: NOP\nORG 8\nBRR FAIL\n")
    assert forward.rom.read_word(8) == backward.rom.read_word(8) == 0x8001

def test_backward_branch():
    ai = assemble("LOOP: NOP\nBRR LOOP\n")
    assert ai.rom.read_word(2) == (64 << 9) | 0x1FF

def test_label_does_not_advance_address():
    ai = assemble("A:\nB: NOP\nC:\n")
    assert ai.symbol_table["A"].address == 0
    assert ai.symbol_table["B"].address == 0
    assert ai.symbol_table["C"].address == 2

def test_org_keeps_earlier_labels():
    ai = assemble("A:\nNOP\nORG 0x20\nB:\nNOP\n")
    assert ai.symbol_table["A"].address == 0
    assert ai.symbol_table["B"].address == 0x20
    assert ai.asm_stmt[1]["address"] == 0x20

def test_branch_range():
    assert word_at("START:\nORG 0x200\nBRR START\n", 0x200) == 0x8100
    with pytest.raises(OperandOutOfRange):
        assemble("START:\nORG 0x202\nBRR START\n")
    assert word_at("BRR END\nORG 0x1FE\nEND: NOP\n") == 0x80FF
    with pytest.raises(OperandOutOfRange):
        assemble("BRR END\nORG 0x200\nEND: NOP\n")

def test_duplicate_label_before_any_output():
    src = "X: NOP\nADD R1 R2 R3\nx: NOP\n"
    ai = st.AsmInfo("test", src)
    with pytest.raises(DuplicateLabel) as e:
        asm.asm_pass1(ai)
    assert e.value.line == 3
    assert ai.rom.to_bytes() == bytes(ai.rom.size)

def test_label_not_found():
    with pytest.raises(LabelNotFound) as e:
        assemble("NOP\nBRR NOWHERE\n")
    assert e.value.line == 2

def test_label_only_in_branch_fields():
    with pytest.raises(MalformedConstant):
        assemble("FOO: LOADIMM.LOWER FOO\n")

def test_label_usage_recorded():
    ai = assemble("L: NOP\nBRR L\nBRR.Z L\n")
    assert st.label_usages(ai) == {"L": [2, 3]}
    assert st.show_symbol_table(ai)[1].startswith("L ")
    assert st.show_symbol_table(ai)[1].endswith(" 2,3")

def test_pass2_leaves_symbol_table_alone():
    ai = assemble("L: NOP\nBRR L\n")
    assert vars(ai.symbol_table["L"]) == {"name": "L", "address": 0, "def_line": 1}
    assert ai.asm_stmt[1]["labelRefs"] == ["L"]

def test_base_letter_word_is_not_a_label():
    with pytest.raises(MalformedConstant) as e:
        assemble("EXIT: NOP\nBRR EXIT\n")
    assert e.value.line == 2

def test_bare_hex_prefix_assembles_to_zero():
    assert word_at("LOADIMM.LOWER 0X\n", 0) == 0x2400

def test_label_table_full():
    with pytest.raises(LabelTableFull):
        assemble("A: NOP\nB: NOP\nC: NOP\n", max_labels=2)
    assert len(assemble("A: NOP\nB: NOP\n", max_labels=2).symbol_table) == 2

def test_empty_label():
    with pytest.raises(InvalidLabel):
        assemble(": NOP\n")

def test_org_errors():
    with pytest.raises(MalformedConstant):
        assemble("ORG\nNOP\n")
    with pytest.raises(MalformedConstant):
        assemble("ORG START\n")
    with pytest.raises(MisalignedAddress):
        assemble("ORG 3\nNOP\n")

# ----------------------------------------------------------------------
# Operand errors
# ----------------------------------------------------------------------

def test_arity_mismatch():
    with pytest.raises(ArityMismatch) as e:
        assemble("NOP\n\nADD R1 R2\n")
    assert e.value.line == 3
    assert str(e.value).startswith("Line 3:")
    with pytest.raises(ArityMismatch):
        assemble("NOP R1\n")
    with pytest.raises(ArityMismatch):
        assemble("ADD R1 R2 R3 R4\n")

def test_immediate_ranges():
    assert word_at("LOADIMM.LOWER 255") == 0x24FF
    with pytest.raises(OperandOutOfRange):
        assemble("LOADIMM.LOWER 256")
    with pytest.raises(OperandOutOfRange):
        assemble("SHL R1 16")
    with pytest.raises(OperandOutOfRange):
        assemble("BR R1 64")

def test_invalid_registers():
    for src in ["TEST R8", "TEST X1", "TEST R10", "TEST 5", "MOV R1 RA"]:
        with pytest.raises(InvalidRegister):
            assemble(src)

def test_address_out_of_bounds():
    assert word_at("ORG 0x3FE\nTEST R1\n", 0x3FE) == (7 << 9) | (1 << 6)
    with pytest.raises(AddressOutOfBounds) as e:
        assemble("ORG 0x400\nNOP\n")
    assert e.value.line == 2

def test_errors_are_asm_errors():
    with pytest.raises(AsmError):
        assemble("ADD R1")

# ----------------------------------------------------------------------
# A complete program
# ----------------------------------------------------------------------

def test_br_overflow_program():
    with pytest.raises(AddressOutOfBounds):
        assemble(BR_OVERFLOW_TEST)
    ai = assemble(BR_OVERFLOW_TEST, rom_size=2048)
    assert ai.rom.read_word(0x400) == 0x2520
    assert ai.symbol_table["FAIL"].address == 0x42E
    assert ai.symbol_table["VICTORY"].address == 0x430
    assert ai.rom.read_word(0x40E) == 0x9210
    assert ai.rom.read_word(0x42E) == 0x8000
    assert len(ai.asm_stmt) == 25

def test_listing():
    ai = assemble("start: add r1 r2 r3\n; nothing\nbrr start\n")
    assert ai.listing[0] == "Line Addr Code Source"
    assert ai.listing[1] == "   1 0000 0253 start: add r1 r2 r3"
    assert ai.listing[2].startswith("   2")
    assert ai.listing[3] == "   3 0002 81FF brr start"
