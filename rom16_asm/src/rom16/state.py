# state.py

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

# -------------------------------------------------------------------------
# state.py defines the state of one assembly: the source, the symbol
# table, the statements found by the passes, and the ROM image.
# -------------------------------------------------------------------------

from rom16 import common
from rom16 import arithmetic as arith
from rom16 import architecture as arch
from rom16 import rom
from rom16.common import DuplicateLabel, LabelTableFull
from rom16.tokenizer import WordStream, normalize

# ----------------------------------------------------------------------
# Assembler information record
# ----------------------------------------------------------------------

class AsmInfo:
    def __init__(self, base_name, src_text, rom_size=arch.rom_size,
                 max_labels=arch.max_labels):
        self.asm_mod_name = base_name
        self.asm_src_text = src_text
        self.asm_src_lines = src_text.split("\n")
        self.words = WordStream(normalize(src_text))

        self.asm_stmt = []
        self.symbol_table = {}
        self.max_labels = max_labels
        self.location_counter = 0
        self.rom = rom.RomImage(rom_size)
        self.listing = []

    def src_line(self, line):
        if 1 <= line <= len(self.asm_src_lines):
            return self.asm_src_lines[line - 1].rstrip("\r")
        return ""

    def define_label(self, name, address, line):
        if name in self.symbol_table:
            first = self.symbol_table[name].def_line
            raise DuplicateLabel(f"label {name} has already been defined on line {first}", line)
        if len(self.symbol_table) >= self.max_labels:
            raise LabelTableFull(f"more than {self.max_labels} labels", line)
        ident = Identifier(name, address, line)
        self.symbol_table[name] = ident
        common.mode.devlog(f"define_label {ident}")
        return ident

# ----------------------------------------------------------------------
# Symbol table
# ----------------------------------------------------------------------

class Identifier:
    def __init__(self, name, address, def_line):
        self.name = name
        self.address = address
        self.def_line = def_line

    def __str__(self):
        return f"Identifier(name='{self.name}', address={arith.word_to_hex4(self.address)})"

# The symbol table is frozen after pass 1; the lines that use each
# label are gathered from the statements pass 2 recorded

def label_usages(ma):
    usages = {name: [] for name in ma.symbol_table}
    for s in ma.asm_stmt:
        for name in s["labelRefs"]:
            usages[name].append(s["lineNumber"])
    return usages

def show_symbol_table(ma):
    usages = label_usages(ma)
    xs = ["Name             Addr  Def Used"]
    for symkey in sorted(ma.symbol_table.keys()):
        x = ma.symbol_table[symkey]
        xs.append(f"{x.name.ljust(16)} {arith.word_to_hex4(x.address)}"
                  f"{str(x.def_line).rjust(5)} {','.join(map(str, usages[symkey]))}")
    return xs
