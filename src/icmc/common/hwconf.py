WORD_BITS        = 16
WORD_MASK        = (1 << WORD_BITS) - 1
REGISTERS        = 8                        # R0..R7

OPCODE_LOW       = 10                       # Opcode field is bits 10..15
OPCODE_HIGH      = WORD_BITS - 1
