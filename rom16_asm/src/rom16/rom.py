# rom.py

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

# rom.py defines the ROM image, a fixed size byte buffer that
# holds the assembled program, and its hex text representation.

from rom16 import common
from rom16 import arithmetic as arith
from rom16 import architecture as arch
from rom16.common import AddressOutOfBounds

# -------------------------------------------------------------
# ROM image
# -------------------------------------------------------------

# Each instruction word is stored big endian: the high byte at the
# instruction address and the low byte at the next address.
# Locations that are never written read as 0.

class RomImage:
    def __init__(self, size=arch.rom_size):
        self.size = size
        self.data = bytearray(size)

    def write_word(self, a, w, line=None):
        if a < 0 or a + 1 >= self.size:
            raise AddressOutOfBounds(
                f"address {arith.word_to_hex4(a)} is outside the "
                f"{self.size} byte ROM", line)
        hi, lo = arith.word_to_bytes(w)
        self.data[a] = hi
        self.data[a + 1] = lo
        common.mode.devlog(f"write_word {arith.word_to_hex4(a)} {arith.word_to_hex4(w)}")

    def read_word(self, a):
        if a < 0 or a + 1 >= self.size:
            raise AddressOutOfBounds(f"address {a} is outside the {self.size} byte ROM")
        return arith.bytes_to_word(self.data[a], self.data[a + 1])

    def words(self):
        for a in range(0, self.size - 1, arch.word_bytes):
            yield a, arith.bytes_to_word(self.data[a], self.data[a + 1])

    def to_bytes(self):
        return bytes(self.data)

    def to_hex_lines(self):
        return [arith.word_to_hex4(w) for _, w in self.words()]

    def to_hex_text(self):
        return "".join(x + "\n" for x in self.to_hex_lines())

def write_hex_file(image, path):
    with open(path, "w", newline="\n") as f:
        f.write(image.to_hex_text())
