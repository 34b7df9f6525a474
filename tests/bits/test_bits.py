import pytest

from icmc.common.hwconf import WORD_BITS, WORD_MASK
import icmc.isa.bits as bits


def test_extract_middle():
    assert bits.extract(0b101000, bits.bit_range(3, 5)) == 0b101


def test_replace_middle():
    assert bits.replace(0b101000, 0b11, bits.bit_range(1, 2)) == 0b101110


def test_replace_overwrites():
    assert bits.replace(0b110_001_000, 0b010, bits.bit_range(3, 5)) == 0b110_010_000


def test_bit_range_defaults():
    assert bits.bit_range() == bits.BitRange(0, WORD_BITS - 1)
    assert bits.bit_range(4) == bits.BitRange(4, WORD_BITS - 1)
    assert bits.bit_range(end=3) == bits.BitRange(0, 3)
    assert bits.FULL_RANGE.width == WORD_BITS
    assert bits.FULL_RANGE.mask == WORD_MASK


def test_range_mask():
    assert bits.bit_range(1, 2).mask == 0b110
    assert bits.single_bit(9).mask == 1 << 9
    assert str(bits.bit_range(10, 15)) == '10..15'


@pytest.mark.parametrize('start, end', [(3, 2), (-1, 4), (0, WORD_BITS), (16, 16)])
def test_bad_ranges(start, end):
    with pytest.raises(bits.InvalidRange):
        bits.BitRange(start, end)


@pytest.mark.parametrize('value', [0, 1, 0x8000, 0xABCD, WORD_MASK])
def test_full_range_identity(value):
    assert bits.extract(value, bits.FULL_RANGE) == value


@pytest.mark.parametrize('r', [
    bits.bit_range(0, 0), bits.bit_range(3, 5), bits.bit_range(7, 9), bits.bit_range(10, 15)
])
def test_extract_fits_width(r):
    for value in (0, 0x5555, 0xAAAA, WORD_MASK):
        assert bits.extract(value, r) < (1 << r.width)


@pytest.mark.parametrize('r', [
    bits.bit_range(0, 3), bits.bit_range(4, 6), bits.bit_range(6, 9), bits.bit_range(15, 15)
])
def test_replace_then_extract(r):
    value = 0xA5C3

    for field_bits in range(1 << r.width):
        updated = bits.replace(value, field_bits, r)
        assert bits.extract(updated, r) == field_bits
        assert updated & ~r.mask == value & ~r.mask


def test_replace_truncates_oversized_bits():
    # 0b111 does not fit two bits: the extra bit is dropped, bit 3 stays clear
    assert bits.replace(0, 0b111, bits.bit_range(1, 2)) == 0b110
    assert bits.replace(0b1000, 0b111, bits.bit_range(0, 1)) == 0b1011


def test_fits():
    assert bits.fits(0b111, bits.bit_range(7, 9))
    assert not bits.fits(0b1000, bits.bit_range(7, 9))
    assert not bits.fits(-1, bits.bit_range(7, 9))
