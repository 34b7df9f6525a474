''' Assembly usage and register-transfer notation for every instruction '''

from typing import NamedTuple


class Reference(NamedTuple):
    usage: str
    operation: str | None    # None where the processor manual gives no transfer


# Condition suffix -> (flag test) shared by conditional jumps and calls
CONDITIONS = {
    'EQ': 'EQUAL',
    'NE': 'not EQUAL',
    'Z': 'ZERO',
    'NZ': 'not ZERO',
    'C': 'CARRY',
    'NC': 'not CARRY',
    'GR': 'GREATER',
    'LE': 'LESSER',
    'EG': 'GREATER or EQUAL',
    'EL': 'LESSER or EQUAL',
    'OV': 'OVERFLOW',
    'NO': 'not OVERFLOW',
    'DZ': 'DIV_BY_ZERO',
    'N': 'NEGATIVE',
}


def _jumps() -> dict[str, Reference]:
    refs = {'JMP': Reference('JMP END', 'PC <- END')}

    for suffix, test in CONDITIONS.items():
        name = f'J{suffix}'
        refs[name] = Reference(f'{name} END', f'if {test}: PC <- END')

    return refs


def _calls() -> dict[str, Reference]:
    push_pc = 'MEM(SP) <- PC; SP <- SP - 1; PC <- END'
    refs = {'CALL': Reference('CALL END', push_pc)}

    for suffix, test in CONDITIONS.items():
        name = f'C{suffix}'
        refs[name] = Reference(f'{name} END', f'if {test}: {push_pc}')

    return refs


def _three_regs(name: str, symbol: str, carry: bool = False) -> Reference:
    operation = f'Rx <- Ry {symbol} Rz'

    if carry:
        operation += ' + C'

    return Reference(f'{name} Rx, Ry, Rz', operation)


REFERENCES: dict[str, Reference] = {
    # Data manipulation
    'LOAD': Reference('LOAD Rx, END', 'Rx <- MEM(END)'),
    'LOADN': Reference('LOADN Rx, #NR', 'Rx <- NR'),
    'LOADI': Reference('LOADI Rx, Ry', 'Rx <- MEM(Ry)'),
    'STORE': Reference('STORE END, Rx', 'MEM(END) <- Rx'),
    'STOREN': Reference('STOREN END, #NR', 'MEM(END) <- NR'),
    'STOREI': Reference('STOREI Rx, Ry', 'MEM(Rx) <- Ry'),
    'MOV': Reference('MOV Rx, Ry | MOV Rx, SP | MOV SP, Rx', 'Rx <- Ry | Rx <- SP | SP <- Rx'),

    # Peripherals
    'INPUT': Reference('INPUT', None),
    'OUTPUT': Reference('OUTPUT', None),

    # IO
    'OUTCHAR': Reference('OUTCHAR Rx, Ry', 'VIDEO(Ry) <- CHAR(Rx)'),
    'INCHAR': Reference('INCHAR', None),
    'SOUND': Reference('SOUND', None),

    # Arithmetic
    'ADD': _three_regs('ADD', '+'),
    'ADDC': _three_regs('ADDC', '+', carry=True),
    'SUB': _three_regs('SUB', '-'),
    'SUBC': _three_regs('SUBC', '-', carry=True),
    'MUL': _three_regs('MUL', '*'),
    'DIV': _three_regs('DIV', '/'),
    'INC': Reference('INC Rx', 'Rx <- Rx + 1'),
    'DEC': Reference('DEC Rx', 'Rx <- Rx - 1'),
    'MOD': _three_regs('MOD', '%'),

    # Logic
    'AND': _three_regs('AND', '&'),
    'OR': _three_regs('OR', '|'),
    'XOR': _three_regs('XOR', '^'),
    'NOT': Reference('NOT Rx, Ry', 'Rx <- !Ry'),
    'SHIFTL0': Reference('SHIFTL0 Rx, N', 'Rx <- Rx << N'),
    'SHIFTL1': Reference('SHIFTL1 Rx, N', 'Rx <- !(!Rx << N)'),
    'SHIFTR0': Reference('SHIFTR0 Rx, N', 'Rx <- Rx >> N'),
    'SHIFTR1': Reference('SHIFTR1 Rx, N', 'Rx <- !(!Rx >> N)'),
    'ROTL': Reference('ROTL Rx, N', 'Rx <- (Rx << N) | (Rx >> (16 - N))'),
    'ROTR': Reference('ROTR Rx, N', 'Rx <- (Rx >> N) | (Rx << (16 - N))'),
    'CMP': Reference('CMP Rx, Ry', 'FR <- COND(Rx, Ry)'),

    # Control
    **_jumps(),
    **_calls(),
    'RTS': Reference('RTS', 'SP <- SP + 1; PC <- MEM(SP); PC <- PC + 1'),
    'RTI': Reference('RTI', 'SP <- SP + 1; PC <- MEM(SP)'),
    'PUSH': Reference('PUSH Rx | PUSH FR', 'MEM(SP) <- Rx|FR; SP <- SP - 1'),
    'POP': Reference('POP Rx | POP FR', 'SP <- SP + 1; Rx|FR <- MEM(SP)'),
    'NOP': Reference('NOP', 'none'),
    'HALT': Reference('HALT', 'stop the processor'),
    'CLEARC': Reference('CLEARC', 'C <- 0'),
    'SETC': Reference('SETC', 'C <- 1'),
    'BREAKP': Reference('BREAKP', 'enter debug mode'),
}
