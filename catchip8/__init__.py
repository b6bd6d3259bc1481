"""Cat's CHIP-8: an interpreter core for the CHIP-8 virtual machine.

Modules:
    cpu: Chip8CPU fetch/decode/execute engine
    state: CPUState aggregate (memory, registers, stack, display, timers, keypad)
    memory, stack, display: bounds-checked machine components
    errors: Chip8Error hierarchy raised by the core
    config: EmulatorConfig and JSON loading
    app, cli: pygame host and command line (import separately)
"""

__version__ = "0.2.0"

from .config import EmulatorConfig, load_config
from .cpu import Chip8CPU
from .errors import (
    ArgumentOutOfRange, Chip8Error, MemoryOutOfBounds, StackOverflow,
    StackUnderflow, UnknownInstruction,
)
from .state import CPUState

__all__ = [
    "Chip8CPU", "CPUState", "EmulatorConfig", "load_config",
    "Chip8Error", "UnknownInstruction", "ArgumentOutOfRange",
    "StackOverflow", "StackUnderflow", "MemoryOutOfBounds",
]
