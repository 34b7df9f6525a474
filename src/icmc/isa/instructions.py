''' ICMC instruction table and decoder '''

import logging as lg
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence, TypeVar

from icmc.common.hwconf import WORD_MASK, OPCODE_LOW, OPCODE_HIGH
import icmc.isa.bits as bits
import icmc.isa.reference as ref


OPCODE_RANGE = bits.BitRange(OPCODE_LOW, OPCODE_HIGH)


class DecodeError(Exception):
    code: int

    def __init__(self, code: int):
        super().__init__(f'Invalid instruction: {code:#018b}')
        self.code = code


class TableError(Exception):
    pass


@dataclass(frozen=True)
class Descriptor:
    name: str
    code: int
    mask: int

    def matches(self, raw: int) -> bool:
        return raw & self.mask == self.code

    def __str__(self) -> str:
        return self.name


class Family(Enum):
    DATA = 'data'
    PERIPHERAL = 'peripheral'
    IO = 'io'
    ARITHMETIC = 'arithmetic'
    LOGIC = 'logic'
    CONTROL = 'control'


_DATA = Family.DATA
_PERI = Family.PERIPHERAL
_IO = Family.IO
_ARITH = Family.ARITHMETIC
_LOGIC = Family.LOGIC
_CTRL = Family.CONTROL


class Instruction(Enum):
    '''
    Every ICMC instruction as (code, mask, family).

    Declaration order is the match priority used by `decode`: the first
    member whose masked bits equal its code wins.
    Bit groups below read opcode_rx_ry_rz_c.
    '''

    code: int
    mask: int
    family: Family

    # - Data manipulation - #
    LOAD    = (0b110000_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    LOADN   = (0b111000_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    LOADI   = (0b111100_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    STORE   = (0b110001_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    STOREN  = (0b111001_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    STOREI  = (0b111101_000_000_000_0, 0b111111_000_000_000_0, _DATA)
    MOV     = (0b110011_000_000_000_0, 0b111111_000_000_000_0, _DATA)

    # - Peripherals - #
    INPUT   = (0b111110_000_000_000_0, 0b111111_000_000_000_0, _PERI)
    OUTPUT  = (0b111111_000_000_000_0, 0b111111_000_000_000_0, _PERI)

    # - IO - #
    OUTCHAR = (0b110010_000_000_000_0, 0b111111_000_000_000_0, _IO)
    INCHAR  = (0b110101_000_000_000_0, 0b111111_000_000_000_0, _IO)
    SOUND   = (0b110100_000_000_000_0, 0b111111_000_000_000_0, _IO)

    # - Arithmetic - #
    ADD     = (0b100000_000_000_000_0, 0b111111_000_000_000_1, _ARITH)
    ADDC    = (0b100000_000_000_000_1, 0b111111_000_000_000_1, _ARITH)
    SUB     = (0b100001_000_000_000_0, 0b111111_000_000_000_1, _ARITH)
    SUBC    = (0b100001_000_000_000_1, 0b111111_000_000_000_1, _ARITH)
    MUL     = (0b100010_000_000_000_0, 0b111111_000_000_000_1, _ARITH)
    DIV     = (0b100011_000_000_000_0, 0b111111_000_000_000_1, _ARITH)
    INC     = (0b100100_000_000_000_0, 0b111111_000_100_000_0, _ARITH)
    DEC     = (0b100100_000_100_000_0, 0b111111_000_100_000_0, _ARITH)
    MOD     = (0b100101_000_000_000_0, 0b111111_000_000_000_0, _ARITH)

    # - Logic - #
    AND     = (0b010010_000_000_000_0, 0b111111_000_000_000_0, _LOGIC)
    OR      = (0b010011_000_000_000_0, 0b111111_000_000_000_0, _LOGIC)
    XOR     = (0b010100_000_000_000_0, 0b111111_000_000_000_0, _LOGIC)
    NOT     = (0b010101_000_000_000_0, 0b111111_000_000_000_0, _LOGIC)
    SHIFTL0 = (0b010000_000_000_000_0, 0b111111_000_111_000_0, _LOGIC)
    SHIFTL1 = (0b010000_000_001_000_0, 0b111111_000_111_000_0, _LOGIC)
    SHIFTR0 = (0b010000_000_010_000_0, 0b111111_000_111_000_0, _LOGIC)
    SHIFTR1 = (0b010000_000_011_000_0, 0b111111_000_111_000_0, _LOGIC)
    ROTL    = (0b010000_000_100_000_0, 0b111111_000_110_000_0, _LOGIC)
    ROTR    = (0b010000_000_110_000_0, 0b111111_000_110_000_0, _LOGIC)
    CMP     = (0b010110_000_000_000_0, 0b111111_000_000_000_0, _LOGIC)

    # - Jumps - #
    JMP     = (0b000010_000_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JEQ     = (0b000010_000_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JNE     = (0b000010_001_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JZ      = (0b000010_001_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JNZ     = (0b000010_010_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JC      = (0b000010_010_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JNC     = (0b000010_011_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JGR     = (0b000010_011_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JLE     = (0b000010_100_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JEG     = (0b000010_100_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JEL     = (0b000010_101_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JOV     = (0b000010_101_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JNO     = (0b000010_110_000_000_0, 0b111111_111_100_000_0, _CTRL)
    JDZ     = (0b000010_110_100_000_0, 0b111111_111_100_000_0, _CTRL)
    JN      = (0b000010_111_000_000_0, 0b111111_111_100_000_0, _CTRL)

    # - Calls - #
    CALL    = (0b000011_000_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CEQ     = (0b000011_000_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CNE     = (0b000011_001_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CZ      = (0b000011_001_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CNZ     = (0b000011_010_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CC      = (0b000011_010_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CNC     = (0b000011_011_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CGR     = (0b000011_011_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CLE     = (0b000011_100_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CEG     = (0b000011_100_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CEL     = (0b000011_101_000_000_0, 0b111111_111_100_000_0, _CTRL)
    COV     = (0b000011_101_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CNO     = (0b000011_110_000_000_0, 0b111111_111_100_000_0, _CTRL)
    CDZ     = (0b000011_110_100_000_0, 0b111111_111_100_000_0, _CTRL)
    CN      = (0b000011_111_000_000_0, 0b111111_111_100_000_0, _CTRL)

    # - Stack - #
    RTS     = (0b000100_000_000_000_0, 0b111111_000_000_000_1, _CTRL)
    RTI     = (0b000100_000_000_000_1, 0b111111_000_000_000_1, _CTRL)
    PUSH    = (0b000101_000_000_000_0, 0b111111_000_000_000_0, _CTRL)
    POP     = (0b000110_000_000_000_0, 0b111111_000_000_000_0, _CTRL)

    # - Processor control - #
    NOP     = (0b000000_000_000_000_0, 0b111111_000_000_000_0, _CTRL)
    HALT    = (0b001111_000_000_000_0, 0b111111_000_000_000_0, _CTRL)
    CLEARC  = (0b001000_000_000_000_0, 0b111111_100_000_000_0, _CTRL)
    SETC    = (0b001000_100_000_000_0, 0b111111_100_000_000_0, _CTRL)
    BREAKP  = (0b001110_000_000_000_0, 0b111111_000_000_000_0, _CTRL)

    def __init__(self, code: int, mask: int, family: Family):
        self.code = code
        self.mask = mask
        self.family = family

    def __str__(self) -> str:
        return self.name

    @classmethod
    def default(cls) -> 'Instruction':
        return cls.NOP

    def matches(self, raw: int) -> bool:
        return raw & self.mask == self.code

    @property
    def opcode(self) -> int:
        return opcode(self)

    @property
    def descriptor(self) -> Descriptor:
        return Descriptor(self.name, self.code, self.mask)

    @property
    def reference(self) -> ref.Reference:
        return ref.REFERENCES[self.name]


TDescriptor = TypeVar('TDescriptor', Descriptor, Instruction)


DESCRIPTORS: tuple[Descriptor, ...] = tuple(i.descriptor for i in Instruction)


def first_match(raw: int, table: Iterable[TDescriptor]) -> TDescriptor | None:
    for candidate in table:
        if candidate.matches(raw):
            return candidate

    return None


def decode(raw: int) -> Instruction:
    if not 0 <= raw <= WORD_MASK:
        lg.debug(f'Word {raw:X} does not fit the instruction width')
        raise DecodeError(raw)

    instruction = first_match(raw, Instruction)

    if instruction is None:
        lg.debug(f'No instruction matches {raw:016b}')
        raise DecodeError(raw)

    return instruction


def opcode(instr: Instruction) -> int:
    return bits.extract(instr.code, OPCODE_RANGE)


def mask(instr: Instruction) -> int:
    return instr.mask


def code(instr: Instruction) -> int:
    return instr.code


# - Table consistency - #

@dataclass
class TableReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def check_table(table: Sequence[TDescriptor]) -> TableReport:
    report = TableReport()
    names: set[str] = set()

    for index, entry in enumerate(table):
        if entry.name in names:
            report.errors.append(f'{entry.name} is declared twice')

        names.add(entry.name)

        if entry.code & ~WORD_MASK or entry.mask & ~WORD_MASK:
            report.errors.append(f'{entry.name} does not fit the instruction width')

        if entry.code & ~entry.mask:
            report.errors.append(
                f'{entry.name} code {entry.code:016b} has bits outside mask {entry.mask:016b}'
            )

        if OPCODE_RANGE.mask & ~entry.mask:
            report.errors.append(f'{entry.name} mask does not cover the opcode field')

        for earlier in table[:index]:
            common = earlier.mask & entry.mask

            if (earlier.code ^ entry.code) & common:
                continue

            if earlier.mask & ~entry.mask == 0:
                report.errors.append(f'{entry.name} is unreachable behind {earlier.name}')
            else:
                report.warnings.append(f'{entry.name} overlaps {earlier.name}, {earlier.name} wins')

    return report


def validate_table(table: Sequence[TDescriptor]):
    report = check_table(table)

    for warning in report.warnings:
        lg.debug(warning)

    if report.errors:
        raise TableError('; '.join(report.errors))

    lg.debug(f'Instruction table ok, {len(table)} entries')


validate_table(list(Instruction))
