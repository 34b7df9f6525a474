''' Operand fields of an instruction word and word encoding '''

import logging as lg

import icmc.isa.bits as bits
import icmc.isa.instructions as ins


class OperandError(Exception):
    pass


# Register layout: opcode(15..10) rx(9..7) ry(6..4) rz(3..1) c(0)
FIELDS: dict[str, bits.BitRange] = {
    'opcode': ins.OPCODE_RANGE,
    'rx': bits.BitRange(7, 9),
    'ry': bits.BitRange(4, 6),
    'rz': bits.BitRange(1, 3),
    'c': bits.single_bit(0),         # ADDC/SUBC carry, RTS/RTI select

    # Selectors
    'shift': bits.BitRange(4, 6),    # SHIFTL0..ROTR
    'amount': bits.BitRange(0, 3),   # Shift/rotate count
    'cond': bits.BitRange(6, 9),     # Jump and call condition
    'setc': bits.single_bit(9),      # CLEARC/SETC
    'dec': bits.single_bit(6),       # INC/DEC
}


def get_field(name: str) -> bits.BitRange:
    if name not in FIELDS:
        raise OperandError(f'Unknown field {name}')

    return FIELDS[name]


def operand(raw: int, name: str) -> int:
    return bits.extract(raw, get_field(name))


def encode(instr: ins.Instruction, **operands: int) -> int:
    '''
    Builds a word for `instr` with the named fields set.

    Fields the instruction fixes may be written only with the values it
    already has: anything that turns the word into another instruction,
    or an invalid one, is rejected.
    '''
    word = instr.code

    for name, value in operands.items():
        r = get_field(name)

        if not bits.fits(value, r):
            raise OperandError(f'{instr}: {name}={value} does not fit {r.width} bits')

        word = bits.replace(word, value, r)

    try:
        decoded = ins.decode(word)
    except ins.DecodeError as e:
        raise OperandError(f'{instr}: operands {operands} make an invalid word') from e

    if decoded is not instr:
        raise OperandError(f'{instr}: operands {operands} encode {decoded} instead')

    lg.debug(f'Encoded {instr} {operands} as {word:016b}')
    return word
