"""Fatal machine conditions raised by the interpreter core.

None of these are recovered inside the core: the failing step is abandoned
and the error reaches whoever called ``Chip8CPU.cycle()``.
"""


class Chip8Error(Exception):
    """Base class for every interpreter failure"""


class UnknownInstruction(Chip8Error):
    """Instruction word that matches no handler"""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"Unknown instruction ${opcode:04X}")


class ArgumentOutOfRange(Chip8Error):
    """A field, immediate, key or value wider than its bit mask"""

    def __init__(self, value: int, mask: int):
        self.value = value
        self.mask = mask
        super().__init__(f"Argument {value} is outside of mask ${mask:X}")


class StackOverflow(Chip8Error):
    """CALL with the call stack already full"""

    def __init__(self, address: int, capacity: int):
        self.address = address
        self.capacity = capacity
        super().__init__(
            f"Call stack overflow pushing ${address:03X} (capacity {capacity})"
        )


class StackUnderflow(Chip8Error):
    """RET with an empty call stack"""

    def __init__(self):
        super().__init__("Return with an empty call stack")


class MemoryOutOfBounds(Chip8Error):
    """Address outside the 4KB address space"""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Memory access out of bounds at ${address:X}")


def validate_argument(value: int, mask: int) -> int:
    """Return ``value`` unchanged if it fits inside ``mask``.

    Raises:
        ArgumentOutOfRange: for negative values or bits outside the mask
    """
    if not isinstance(value, int) or value < 0 or value & mask != value:
        raise ArgumentOutOfRange(value, mask)
    return value
