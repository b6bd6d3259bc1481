"""CPUState: the single owned aggregate of all machine state."""

from dataclasses import dataclass, field
from typing import List

from .constants import NUM_REGISTERS, PROGRAM_START
from .display import Display
from .memory import Memory
from .stack import CallStack


@dataclass
class CPUState:
    """CHIP-8 CPU state container.

    Everything starts zeroed with PC at the program entry point. A reset
    replaces the whole object rather than clearing fields one by one.
    """
    # Memory
    memory: Memory = field(default_factory=Memory)

    # Registers
    V: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    I: int = 0              # Index register (12-bit)
    PC: int = PROGRAM_START # Program counter

    # Stack
    stack: CallStack = field(default_factory=CallStack)

    # Timers (60Hz)
    delay_timer: int = 0
    sound_timer: int = 0

    # Display (64x32)
    display: Display = field(default_factory=Display)

    # Keypad state, bit N set while key N is held
    keypad: int = 0

    # Wait for key state
    waiting_for_key: bool = False
    key_register: int = 0
    keys_at_wait: int = 0   # keypad as last polled while waiting
