# architecture.py

# Copyright (C) 2025 The Rom16 authors. License: GNU GPL Version 3
# See Rom16/README and LICENSE

# This file is part of Rom16. Rom16 is free software: you can
# redistribute it and/or modify it under the terms of the GNU General
# Public License as published by the Free Software Foundation, either
# version 3 of the License, or (at your option) any later version.
# Rom16 is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details. You should have received
# a copy of the GNU General Public License along with Rom16. If
# not, see <https://www.gnu.org/licenses/>.

# --------------------------------------------------------------------
# architecture.py defines global constants and tables specifying
# formats, opcodes, mnemonics, and field layouts
# --------------------------------------------------------------------

from rom16 import common

# --------------------------------------------------------------------
# Bit indexing
# --------------------------------------------------------------------

# Bits are indexed Little End: bit 0 is the least significant bit
# and bit 15 is the most significant bit of an instruction word.

def get_bit_in_word_le(w, i):
    return (w >> i) & 0x0001

def mask_to_set_bit_le(i):
    return (1 << i) & 0xFFFF

def field_mask(k):
    return (1 << k) - 1

# Get the k-bit field of w whose least significant bit is at index i

def get_field_le(w, i, k):
    return (w >> i) & field_mask(k)

# --------------------------------------------------------------------
# Architecture constants
# --------------------------------------------------------------------

# The ROM is the bootloader ROM; its size is fixed when the hardware
# is built. Every instruction is one 16-bit word stored big endian.

rom_size = 1024  # bytes
word_bytes = 2

# Label table ceiling, kept from the bootloader toolchain
max_labels = 512

# No format takes more than three operands
max_operands = 3

n_registers = 8
reg_bits = 3

opcode_shift = 9
opcode_bits = 7

upper_bit = 8

# Field positions for register operands, by operand index

reg_shift = [6, 3, 0]

# Instruction formats

iA0 = "A0"
iA1 = "A1"
iA2 = "A2"
iA3 = "A3"
iB1 = "B1"
iB2 = "B2"
iL1 = "L1"
iL2 = "L2"

# --------------------------------------------------------------------
# Assembly language statement formats
# --------------------------------------------------------------------

# R is a register, k is an immediate constant, K is a constant or a
# label that is turned into a pc-relative word displacement.

a0 = ""     # nop
aRRR = "RRR"  # add      R1 R2 R3
aRk = "Rk"  # shl      R1 3
aR = "R"    # test     R7
aK = "K"    # brr      loop
ak = "k"    # loadimm.lower 0x20
aRR = "RR"  # mov      R0 R7

# Operand syntax and immediate field width for each instruction format

format_afmt = {
    iA0: a0,
    iA1: aRRR,
    iA2: aRk,
    iA3: aR,
    iB1: aK,
    iB2: aRk,
    iL1: ak,
    iL2: aRR,
}

format_imm_bits = {
    iA2: 4,
    iB1: 9,
    iB2: 6,
    iL1: 8,
}

def format_arity(ifmt):
    return len(format_afmt[ifmt])

# Assembly language directives

aOrg = "ORG"

# --------------------------------------------------------------------
# Instruction set
# --------------------------------------------------------------------

# The instruction set is defined by a map from mnemonic to statement
# specification. Mnemonics are upper case because the assembler
# normalizes its input before tokenizing. The opcode goes in bits
# 15-9; 'upper' selects bit 8 for the L1 load immediate variants.

statement_spec = {}

def def_op(mnemonic, opcode, ifmt, upper=False):
    statement_spec[mnemonic] = {
        'mnemonic': mnemonic,
        'ifmt': ifmt,
        'afmt': format_afmt[ifmt],
        'opcode': opcode,
        'upper': upper,
    }

# Arithmetic and logic

def_op("NOP", 0, iA0)
def_op("ADD", 1, iA1)
def_op("SUB", 2, iA1)
def_op("MUL", 3, iA1)
def_op("NAND", 4, iA1)
def_op("SHL", 5, iA2)
def_op("SHR", 6, iA2)
def_op("TEST", 7, iA3)
def_op("MUH", 8, iA1)

# Memory and register transfer

def_op("LOAD", 16, iL2)
def_op("STORE", 17, iL2)
def_op("LOADIMM.LOWER", 18, iL1)
def_op("LOADIMM.UPPER", 18, iL1, upper=True)
def_op("MOV", 19, iL2)

# Port i/o

def_op("OUT", 32, iA3)
def_op("IN", 33, iA3)

# Branches: BRR is pc-relative, BR is register plus offset

def_op("BRR", 64, iB1)
def_op("BRR.N", 65, iB1)
def_op("BRR.Z", 66, iB1)
def_op("BR", 67, iB2)
def_op("BR.N", 68, iB2)
def_op("BR.Z", 69, iB2)
def_op("BR.SUB", 70, iB2)
def_op("RETURN", 71, iA0)
def_op("BR.O", 72, iB2)
def_op("BRR.O", 73, iB1)

def lookup_op(word):
    return statement_spec.get(word)

# Reverse map used by the disassembler; LOADIMM.LOWER and
# LOADIMM.UPPER share an opcode and differ in bit 8

mnemonic_by_opcode = {}
for _spec in statement_spec.values():
    mnemonic_by_opcode.setdefault(_spec['opcode'], []).append(_spec)

# --------------------------------------------------------------------
# Instruction decoding
# --------------------------------------------------------------------

def decode_word(w):
    """Split an instruction word into its statement spec and operand
    fields. Immediate fields are returned as the raw unsigned field
    value. Returns (None, []) if the opcode is not defined."""
    opcode = get_field_le(w, opcode_shift, opcode_bits)
    candidates = mnemonic_by_opcode.get(opcode)
    if not candidates:
        common.mode.devlog(f"decode_word {w:04X}: no opcode {opcode}")
        return None, []
    op = candidates[0]
    if op['ifmt'] == iL1:
        upper = get_bit_in_word_le(w, upper_bit) == 1
        op = next(x for x in candidates if x['upper'] == upper)
    operands = []
    afmt = op['afmt']
    for i, kind in enumerate(afmt):
        if kind == "R":
            operands.append(get_field_le(w, reg_shift[i], reg_bits))
        else:
            operands.append(get_field_le(w, 0, format_imm_bits[op['ifmt']]))
    return op, operands

def show_instruction(w, address=None):
    op, operands = decode_word(w)
    if op is None:
        return f".word 0x{w:04X}"
    fields = []
    for kind, x in zip(op['afmt'], operands):
        if kind == "R":
            fields.append(f"R{x}")
        elif kind == "K" and address is not None:
            k = format_imm_bits[op['ifmt']]
            disp = x - (1 << k) if get_bit_in_word_le(x, k - 1) else x
            fields.append(f"0x{(address + 2 * disp) & 0xFFFF:04X}")
        else:
            fields.append(f"0x{x:X}")
    return " ".join([op['mnemonic']] + fields)
