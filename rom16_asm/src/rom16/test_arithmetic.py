import pytest
from rom16 import arithmetic as arith
from rom16.common import MalformedConstant, OperandOutOfRange, NotALiteral

def test_parse_decimal():
    assert arith.parse_constant("42", 8) == 42
    assert arith.parse_constant("+7", 4) == 7

def test_parse_hex_and_binary():
    assert arith.parse_constant("0X1F", 8) == 0x1F
    assert arith.parse_constant("0XFFFF", 16) == 0xFFFF
    assert arith.parse_constant("0B101", 4) == 5

def test_negative_is_masked_to_field():
    assert arith.parse_constant("-1", 8) == 0xFF
    assert arith.parse_constant("-3", 4) == 13
    assert arith.parse_constant("-0X10", 6) == 0x30

def test_eight_bit_boundary():
    assert arith.parse_constant("255", 8) == 255
    with pytest.raises(OperandOutOfRange):
        arith.parse_constant("256", 8)
    assert arith.parse_constant("-256", 8) == 0
    with pytest.raises(OperandOutOfRange):
        arith.parse_constant("-257", 8)

def test_out_of_range_carries_line():
    with pytest.raises(OperandOutOfRange) as e:
        arith.parse_constant("0X10000", 16, 12)
    assert e.value.line == 12
    assert str(e.value).startswith("Line 12:")

def test_not_a_literal():
    for xs in ["LOOP", "12A", "0XFG", "0B12", "+", ""]:
        with pytest.raises(NotALiteral):
            arith.split_constant(xs)

def test_malformed_prefix():
    for xs in ["1X5", "AX", "EXIT", "OBJ", "-AB"]:
        with pytest.raises(MalformedConstant):
            arith.parse_constant(xs, 8)

def test_bare_prefix_is_zero():
    assert arith.parse_constant("0X", 8) == 0
    assert arith.parse_constant("-0B", 4) == 0

def test_signed_fields():
    assert arith.fits_signed(-256, 9)
    assert arith.fits_signed(255, 9)
    assert not arith.fits_signed(256, 9)
    assert not arith.fits_signed(-257, 9)
    assert arith.fits_sign_extended(511, 9)
    assert not arith.fits_sign_extended(512, 9)

def test_require_field_signed():
    assert arith.require_field(-1, 9, signed=True) == 0x1FF
    with pytest.raises(OperandOutOfRange):
        arith.require_field(300, 9, signed=True)

def test_hex_words():
    assert arith.word_to_hex4(0x2520) == "2520"
    assert arith.word_to_hex4(0xABCD) == "ABCD"
    assert arith.word_to_bytes(0x8001) == (0x80, 0x01)
    assert arith.bytes_to_word(0x02, 0x53) == 0x0253
