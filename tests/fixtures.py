# type: ignore
import pytest

import icmc.isa.instructions as ins


@pytest.fixture
def wide_and_narrow():
    # WIDE only looks at the opcode, NARROW also looks at bit 0
    wide = ins.Descriptor('WIDE', 0b100000_000_000_000_0, 0b111111_000_000_000_0)
    narrow = ins.Descriptor('NARROW', 0b100000_000_000_000_1, 0b111111_000_000_000_1)
    yield wide, narrow


@pytest.fixture
def crossed():
    # Each one checks a bit the other ignores, so 0b100000_000_000_001_1 matches both
    low = ins.Descriptor('LOW', 0b100000_000_000_000_1, 0b111111_000_000_000_1)
    high = ins.Descriptor('HIGH', 0b100000_000_000_001_0, 0b111111_000_000_001_0)
    yield low, high
