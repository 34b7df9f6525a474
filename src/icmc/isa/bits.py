''' Bit-field primitives over 16-bit words '''

from dataclasses import dataclass

from icmc.common.hwconf import WORD_BITS


class InvalidRange(Exception):
    pass


@dataclass(frozen=True)
class BitRange:
    start: int  # Inclusive, counted from the low bit
    end: int    # Inclusive

    def __post_init__(self):
        if not 0 <= self.start <= self.end < WORD_BITS:
            raise InvalidRange(
                f'Bad bit range {self.start}..{self.end} for a {WORD_BITS}-bit word'
            )

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    @property
    def mask(self) -> int:
        return ((1 << self.width) - 1) << self.start

    def __str__(self) -> str:
        return f'{self.start}..{self.end}'


def bit_range(start: int | None = None, end: int | None = None) -> BitRange:
    if start is None:
        start = 0

    if end is None:
        end = WORD_BITS - 1

    return BitRange(start, end)


def single_bit(index: int) -> BitRange:
    return BitRange(index, index)


FULL_RANGE = bit_range()


def extract(value: int, r: BitRange) -> int:
    '''
    Returns the bits of `value` covered by `r`, shifted down to bit 0.

    >>> extract(0b101000, bit_range(3, 5))
    5
    '''
    return (value >> r.start) & ((1 << r.width) - 1)


def fits(bits: int, r: BitRange) -> bool:
    return 0 <= bits < (1 << r.width)


def replace(value: int, bits: int, r: BitRange) -> int:
    '''
    Returns `value` with the bits covered by `r` set to `bits`.

    `bits` is truncated to the width of `r`, so it never spills into
    neighbouring fields. Use `fits` to reject oversized input instead.

    >>> bin(replace(0b101000, 0b11, bit_range(1, 2)))
    '0b101110'
    '''
    return (value & ~r.mask) | ((bits << r.start) & r.mask)
