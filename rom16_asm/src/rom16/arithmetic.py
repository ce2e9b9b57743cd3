# arithmetic.py

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

# ------------------------------------------------------------------------
# arithmetic.py defines word representation, two's complement field
# arithmetic, hexadecimal notation, and the parser for numeric
# constants used in operands and directives.
# ------------------------------------------------------------------------

from rom16 import common
from rom16 import architecture as arch
from rom16.common import MalformedConstant, OperandOutOfRange, NotALiteral

word16mask = 0x0000FFFF

# ------------------------------------------------------------------------
# Ensuring and asserting validity of words
# ------------------------------------------------------------------------

# A word is represented as a nonnegative integer x with 0 <= x < 2^16.

def limit16(x):
    return x & word16mask

def assert16(x):
    if 0 <= x < 2**16:
        return x
    else:
        common.indicate_error(f"assert16 fail: {x}")
        return x & word16mask

# ------------------------------------------------------------------------
# Two's complement fields
# ------------------------------------------------------------------------

# A value fits a k-bit field by sign extension if every bit above bit
# k-1 of its two's complement representation is the same: all 0 or
# all 1. This admits -2^k .. 2^k-1, so an 8-bit field takes both 255
# and -1. A value fits a signed k-bit field if it lies in
# -2^(k-1) .. 2^(k-1)-1; pc-relative displacements use this, since
# the hardware sign extends them.

def fits_sign_extended(x, k):
    return -(1 << k) <= x < (1 << k)

def fits_signed(x, k):
    return -(1 << (k - 1)) <= x < (1 << (k - 1))

def truncate_field(x, k):
    return x & arch.field_mask(k)

def require_field(x, k, line=None, signed=False):
    ok = fits_signed(x, k) if signed else fits_sign_extended(x, k)
    if not ok:
        raise OperandOutOfRange(f"value {x} does not fit in a {k}-bit field", line)
    r = truncate_field(x, k)
    common.mode.devlog(f"require_field x={x} k={k} signed={signed} r={r}")
    return r

# ------------------------------------------------------------------------
# Numeric constants
# ------------------------------------------------------------------------

# A constant has an optional sign, then either decimal digits, or 0X
# followed by hex digits, or 0B followed by binary digits. The input
# has already been converted to upper case.

base_digits = {
    2: "01",
    10: "0123456789",
    16: "0123456789ABCDEF",
}

base_prefix = {"X": 16, "B": 2}

def split_constant(xs, line=None):
    """Return (negative, base, digits) for a constant, raising
    NotALiteral if xs is not a numeric literal and MalformedConstant
    if its second character is a base letter but its first is not 0."""
    negative = False
    ys = xs
    if ys[:1] in ("+", "-"):
        negative = ys[0] == "-"
        ys = ys[1:]
    base = 10
    if len(ys) >= 2 and ys[1] in base_prefix:
        if ys[0] != "0":
            raise MalformedConstant(f"malformed constant {xs}", line)
        base = base_prefix[ys[1]]
        ys = ys[2:]
        # a bare prefix has no digits to reject and stands for 0
        if not ys:
            return negative, base, "0"
    if not ys or any(c not in base_digits[base] for c in ys):
        raise NotALiteral(xs)
    return negative, base, ys

def parse_constant(xs, k, line=None):
    """Parse a numeric constant for a k-bit field. The value must fit
    the field by sign extension; the result is the field value, i.e.
    the low k bits of the two's complement representation."""
    negative, base, digits = split_constant(xs, line)
    x = int(digits, base)
    if negative:
        x = -x
    common.mode.devlog(f"parse_constant {xs} base={base} value={x}")
    return require_field(x, k, line)

# ------------------------------------------------------------------------
# Hexadecimal notation
# ------------------------------------------------------------------------

hex_digit = ['0', '1', '2', '3', '4', '5', '6', '7', '8', '9', 'A', 'B', 'C', 'D', 'E', 'F']

def split_word(x):
    y = assert16(x)
    s = y & 0x000F
    y = y >> 4
    r = y & 0x000F
    y = y >> 4
    q = y & 0x000F
    y = y >> 4
    p = y & 0x000F
    return [p, q, r, s]

def word_to_hex4(x):
    p, q, r, s = split_word(limit16(x))
    return hex_digit[p] + hex_digit[q] + hex_digit[r] + hex_digit[s]

def bytes_to_word(hi, lo):
    return ((hi & 0xFF) << 8) | (lo & 0xFF)

def word_to_bytes(w):
    w = assert16(w)
    return (w >> 8) & 0xFF, w & 0xFF
