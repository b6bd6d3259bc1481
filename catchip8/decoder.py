"""Instruction word field extraction."""

from typing import NamedTuple

from .constants import WORD_MASK
from .errors import validate_argument


class Instruction(NamedTuple):
    opcode: int
    op: int     # First nibble, the instruction family
    x: int      # 4-bit register index
    y: int      # 4-bit register index
    n: int      # 4-bit constant
    nn: int     # 8-bit constant
    nnn: int    # 12-bit address


def decode(opcode: int) -> Instruction:
    """Split a 16-bit instruction word into its nibble fields"""
    validate_argument(opcode, WORD_MASK)
    return Instruction(
        opcode=opcode,
        op=(opcode >> 12) & 0xF,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )
