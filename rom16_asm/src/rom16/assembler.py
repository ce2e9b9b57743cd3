# assembler.py

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

# ---------------------------------------------------------------------
# assembler.py translates assembly language to machine language
# ---------------------------------------------------------------------

from rom16 import common
from rom16 import state as st
from rom16 import architecture as arch
from rom16 import arithmetic as arith
from rom16.common import (
    ArityMismatch, InvalidLabel, InvalidRegister, LabelNotFound,
    MalformedConstant, MisalignedAddress, NotALiteral,
)

# ----------------------------------------------------------------------
# Assembler
# ----------------------------------------------------------------------

# The assembler makes two passes over the word stream. Pass 1 finds
# the address of every label; pass 2 encodes each instruction and
# writes it into the ROM image. The first error stops the assembly
# and propagates to the caller as an AsmError.

def assembler(base_name, src_text, rom_size=arch.rom_size, max_labels=arch.max_labels):
    ai = st.AsmInfo(base_name, src_text, rom_size, max_labels)
    asm_pass1(ai)
    asm_pass2(ai)
    ai.listing = mk_listing(ai)
    return ai

# ----------------------------------------------------------------------
# Assembly language statement
# ----------------------------------------------------------------------

def mk_asm_stmt(op_word, address, operation, operands):
    return {
        "lineNumber": op_word.line,
        "address": address,
        "fieldOperation": op_word.text,
        "operation": operation,
        "operands": operands,
        "codeWord": None,
        "labelRefs": [],
    }

def show_operands(s):
    return " ".join(w.text for w in s["operands"])

# ----------------------------------------------------------------------
# Scanning the word stream
# ----------------------------------------------------------------------

def next_word(words):
    return next(words, None)

# Collect the words up to the newline that ends the statement; the
# newline itself is consumed

def read_operands(words):
    xs = []
    for w in words:
        if w.is_newline():
            break
        xs.append(w)
    return xs

def handle_org(ma, org_word, words):
    w = next_word(words)
    if w is None or w.is_newline():
        raise MalformedConstant("ORG requires an address", org_word.line)
    try:
        a = arith.parse_constant(w.text, 16, w.line)
    except NotALiteral:
        raise MalformedConstant(f"ORG address {w.text} is not a valid constant", w.line)
    if a % arch.word_bytes != 0:
        raise MisalignedAddress(f"ORG address {arith.word_to_hex4(a)} is not even", w.line)
    common.mode.devlog(f"org line {w.line} @{arith.word_to_hex4(a)}")
    ma.location_counter = a

def label_name(w):
    name = w.text[:-1]
    if not name or name.endswith(":"):
        raise InvalidLabel(f"{w.text} is not a valid label", w.line)
    return name

# ----------------------------------------------------------------------
# Assembler Pass 1
# ----------------------------------------------------------------------

def asm_pass1(ma):
    common.mode.devlog(f"Assembler Pass 1: {len(ma.asm_src_lines)} source lines")
    ma.location_counter = 0
    words = iter(ma.words)
    for w in words:
        if w.text == arch.aOrg:
            handle_org(ma, w, words)
        elif w.is_label():
            ma.define_label(label_name(w), ma.location_counter, w.line)
        elif arch.lookup_op(w.text):
            skipped = read_operands(words)
            common.mode.devlog(f"Pass 1 line {w.line} {w.text} @{arith.word_to_hex4(ma.location_counter)} skip {len(skipped)}")
            ma.location_counter += arch.word_bytes
        elif not w.is_newline():
            common.mode.devlog(f"Pass 1 line {w.line} ignoring {w.text}")

# ----------------------------------------------------------------------
# Helper functions for parsing operands
# ----------------------------------------------------------------------

def require_n_operands(ma, s, n):
    k = len(s["operands"])
    if k != n:
        raise ArityMismatch(
            f"{s['fieldOperation']} requires {n} operand{'' if n == 1 else 's'} but {k} given",
            s["lineNumber"])

def require_reg(ma, s, w):
    field = w.text
    if len(field) == 2 and field[0] == "R" and field[1] in arith.base_digits[10]:
        n = int(field[1])
        if n >= arch.n_registers:
            raise InvalidRegister(f"{field} is not a register; registers are R0 to R{arch.n_registers - 1}", w.line)
        common.mode.devlog(f"require_reg field={field} result={n}")
        return n
    raise InvalidRegister(f"{field} must be a register, e.g. R4", w.line)

def require_k(ma, s, w, k):
    try:
        return arith.parse_constant(w.text, k, w.line)
    except NotALiteral:
        raise MalformedConstant(f"{w.text} is not a valid constant", w.line)

# A constant or a label; a label becomes the distance in words from
# this instruction to the label

def require_disp(ma, s, w, k):
    try:
        return arith.parse_constant(w.text, k, w.line)
    except NotALiteral:
        pass
    r = ma.symbol_table.get(w.text)
    if r is None:
        raise LabelNotFound(f"label {w.text} is not defined", w.line)
    s["labelRefs"].append(w.text)
    disp = (r.address - s["address"]) // arch.word_bytes
    common.mode.devlog(f"require_disp {w.text}={arith.word_to_hex4(r.address)} here={arith.word_to_hex4(s['address'])} disp={disp}")
    return arith.require_field(disp, k, w.line, signed=True)

# ----------------------------------------------------------------------
# Pass 2
# ----------------------------------------------------------------------

def mk_word(opcode, regs=(), k=0):
    w = opcode << arch.opcode_shift
    for i, r in enumerate(regs):
        w |= (r & arch.field_mask(arch.reg_bits)) << arch.reg_shift[i]
    return arith.limit16(w | k)

def encode_instruction(ma, s):
    op = s["operation"]
    ifmt = op["ifmt"]
    xs = s["operands"]
    require_n_operands(ma, s, arch.format_arity(ifmt))
    if ifmt == arch.iA0:
        w = mk_word(op["opcode"])
    elif ifmt == arch.iA1:
        regs = [require_reg(ma, s, x) for x in xs]
        w = mk_word(op["opcode"], regs)
    elif ifmt == arch.iA2 or ifmt == arch.iB2:
        d = require_reg(ma, s, xs[0])
        k = require_k(ma, s, xs[1], arch.format_imm_bits[ifmt])
        w = mk_word(op["opcode"], [d], k)
    elif ifmt == arch.iA3:
        d = require_reg(ma, s, xs[0])
        w = mk_word(op["opcode"], [d])
    elif ifmt == arch.iB1:
        k = require_disp(ma, s, xs[0], arch.format_imm_bits[ifmt])
        w = mk_word(op["opcode"], [], k)
    elif ifmt == arch.iL1:
        k = require_k(ma, s, xs[0], arch.format_imm_bits[ifmt])
        if op["upper"]:
            k |= arch.mask_to_set_bit_le(arch.upper_bit)
        w = mk_word(op["opcode"], [], k)
    elif ifmt == arch.iL2:
        regs = [require_reg(ma, s, x) for x in xs]
        w = mk_word(op["opcode"], regs)
    else:
        common.indicate_error(f"encode_instruction: unknown format {ifmt}")
        w = 0
    common.mode.devlog(f"Pass2 line {s['lineNumber']} {s['fieldOperation']} {show_operands(s)} => {arith.word_to_hex4(w)}")
    return w

def asm_pass2(ma):
    common.mode.devlog('Assembler Pass 2')
    ma.location_counter = 0
    ma.asm_stmt = []
    words = iter(ma.words)
    for w in words:
        if w.text == arch.aOrg:
            handle_org(ma, w, words)
            continue
        op = arch.lookup_op(w.text)
        if op is None:
            continue
        s = mk_asm_stmt(w, ma.location_counter, op, read_operands(words))
        ma.asm_stmt.append(s)
        s["codeWord"] = encode_instruction(ma, s)
        ma.rom.write_word(s["address"], s["codeWord"], s["lineNumber"])
        ma.location_counter += arch.word_bytes

# ----------------------------------------------------------------------
# Listing
# ----------------------------------------------------------------------

# One listing line per source line: line number, address and code
# word of the instruction on that line (if any), then the source text

def mk_listing(ma):
    by_line = {s["lineNumber"]: s for s in ma.asm_stmt}
    xs = ["Line Addr Code Source"]
    for i in range(1, len(ma.asm_src_lines) + 1):
        s = by_line.get(i)
        if s:
            addr = arith.word_to_hex4(s["address"])
            code = arith.word_to_hex4(s["codeWord"])
        else:
            addr = code = "    "
        xs.append(f"{str(i).rjust(4)} {addr} {code} {ma.src_line(i)}")
    return xs
