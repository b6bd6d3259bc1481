"""Chip8CPU: fetch, decode and execute for the CHIP-8 instruction set.

The CPU owns one CPUState and mutates it in place, one instruction per
``cycle()``. Timers are ticked separately through ``update_timers()`` at
whatever cadence the host drives (traditionally 60Hz).
"""

import logging
import random
from typing import Callable, Dict, Optional

import numpy as np

from .config import EmulatorConfig
from .constants import (
    ADDRESS_MASK, BYTE_MASK, FLAG_REGISTER, FONT_BYTES_PER_DIGIT, FONT_START,
    FONTSET, KEYPAD_MASK, NIBBLE_MASK, NUM_KEYS, PROGRAM_START,
)
from .decoder import Instruction, decode
from .errors import MemoryOutOfBounds, UnknownInstruction, validate_argument
from .state import CPUState

logger = logging.getLogger(__name__)

Handler = Callable[[Instruction], None]


class Chip8CPU:
    """Complete CHIP-8 CPU emulator"""

    def __init__(self, config: Optional[EmulatorConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or EmulatorConfig()
        self.quirks = dict(self.config.quirks)
        self.rng = rng or random.Random()
        self.state = CPUState()
        self.draw_flag = False

        self._families: Dict[int, Handler] = {
            0x0: self._op_system,
            0x1: self._op_jump,
            0x2: self._op_call,
            0x3: self._op_skip_eq_imm,
            0x4: self._op_skip_ne_imm,
            0x5: self._op_skip_eq_reg,
            0x6: self._op_load_imm,
            0x7: self._op_add_imm,
            0x8: self._op_alu,
            0x9: self._op_skip_ne_reg,
            0xA: self._op_load_index,
            0xB: self._op_jump_offset,
            0xC: self._op_random,
            0xD: self._op_draw,
            0xE: self._op_keys,
            0xF: self._op_misc,
        }
        self._system_ops: Dict[int, Handler] = {
            0x00E0: self._cls,
            0x00EE: self._ret,
        }
        self._alu_ops: Dict[int, Handler] = {
            0x0: self._ld_reg,
            0x1: self._or,
            0x2: self._and,
            0x3: self._xor,
            0x4: self._add_reg,
            0x5: self._sub,
            0x6: self._shr,
            0x7: self._subn,
            0xE: self._shl,
        }
        self._key_ops: Dict[int, Handler] = {
            0x9E: self._skip_key_down,
            0xA1: self._skip_key_up,
        }
        self._misc_ops: Dict[int, Handler] = {
            0x07: self._ld_from_delay,
            0x0A: self._wait_key,
            0x15: self._ld_delay,
            0x18: self._ld_sound,
            0x1E: self._add_index,
            0x29: self._ld_font,
            0x33: self._bcd,
            0x55: self._store_regs,
            0x65: self._load_regs,
        }

    # ─── Program loading / lifecycle ───

    def reset(self):
        """Replace the machine state with a fresh, zeroed one"""
        self.state = CPUState()
        self.draw_flag = True
        logger.debug("CPU reset")

    def load(self, data: bytes, offset: int):
        """Copy an arbitrary image into memory at ``offset``"""
        self.state.memory.load(data, offset)

    def load_fontset(self):
        """Load built-in font sprites to memory"""
        self.load(FONTSET, FONT_START)

    def load_rom(self, data: bytes):
        """Reset, then load the font table and a program image at 0x200"""
        self.reset()
        self.load_fontset()
        self.load(data, PROGRAM_START)
        logger.debug("ROM loaded (%d bytes)", len(data))

    # ─── Host interface ───

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only flat view of the 2048 display cells"""
        return self.state.display.cells

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer > 0

    @property
    def waiting_for_key(self) -> bool:
        return self.state.waiting_for_key

    @property
    def keypad(self) -> int:
        return self.state.keypad

    @keypad.setter
    def keypad(self, mask: int):
        self.state.keypad = validate_argument(mask, KEYPAD_MASK)

    def key_down(self, key: int):
        """Handle key press"""
        validate_argument(key, NIBBLE_MASK)
        self.state.keypad |= 1 << key

    def key_up(self, key: int):
        """Handle key release"""
        validate_argument(key, NIBBLE_MASK)
        self.state.keypad &= ~(1 << key) & KEYPAD_MASK

    def update_timers(self):
        """Decrement timers (call at 60Hz)"""
        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1

        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

    # ─── Fetch / decode / execute ───

    def fetch(self) -> int:
        """Fetch next 16-bit opcode"""
        opcode = self.state.memory.fetch_word(self.state.PC)
        self.state.PC += 2
        return opcode

    def execute(self, opcode: int):
        """Decode and execute a single opcode"""
        inst = decode(opcode)
        self._families[inst.op](inst)

    def cycle(self):
        """Execute one CPU cycle"""
        if self.state.waiting_for_key:
            self._poll_key_wait()
            return

        opcode = self.fetch()
        self.execute(opcode)

    def _poll_key_wait(self):
        s = self.state
        pressed = s.keypad & ~s.keys_at_wait & KEYPAD_MASK
        s.keys_at_wait = s.keypad
        if not pressed:
            return

        key = next(k for k in range(NUM_KEYS) if pressed & (1 << k))
        s.V[s.key_register] = key
        s.waiting_for_key = False
        logger.debug("Key %X stored in V%X, resuming", key, s.key_register)

    def _skip(self, condition: bool):
        if condition:
            self.state.PC += 2

    @staticmethod
    def _unknown(inst: Instruction):
        raise UnknownInstruction(inst.opcode)

    # ─── 0NNN: system ───

    def _op_system(self, inst: Instruction):
        self._system_ops.get(inst.opcode, self._unknown)(inst)

    def _cls(self, inst: Instruction):
        # 00E0: CLS - Clear display
        self.state.display.clear()
        self.draw_flag = True

    def _ret(self, inst: Instruction):
        # 00EE: RET - Return from subroutine
        self.state.PC = self.state.stack.pop()

    # ─── 1NNN / 2NNN / BNNN: jumps ───

    def _op_jump(self, inst: Instruction):
        self.state.PC = inst.nnn

    def _op_call(self, inst: Instruction):
        self.state.stack.push(self.state.PC)
        self.state.PC = inst.nnn

    def _op_jump_offset(self, inst: Instruction):
        offset = self.state.V[inst.x] if self.quirks['jump_vx'] else self.state.V[0]
        self.state.PC = inst.nnn + offset

    # ─── 3XNN / 4XNN / 5XY0 / 9XY0: conditional skips ───

    def _op_skip_eq_imm(self, inst: Instruction):
        self._skip(self.state.V[inst.x] == inst.nn)

    def _op_skip_ne_imm(self, inst: Instruction):
        self._skip(self.state.V[inst.x] != inst.nn)

    def _op_skip_eq_reg(self, inst: Instruction):
        if inst.n != 0:
            self._unknown(inst)
        self._skip(self.state.V[inst.x] == self.state.V[inst.y])

    def _op_skip_ne_reg(self, inst: Instruction):
        if inst.n != 0:
            self._unknown(inst)
        self._skip(self.state.V[inst.x] != self.state.V[inst.y])

    # ─── 6XNN / 7XNN / ANNN / CXNN: immediates ───

    def _op_load_imm(self, inst: Instruction):
        self.state.V[inst.x] = inst.nn

    def _op_add_imm(self, inst: Instruction):
        # No carry flag
        self.state.V[inst.x] = (self.state.V[inst.x] + inst.nn) & BYTE_MASK

    def _op_load_index(self, inst: Instruction):
        self.state.I = inst.nnn

    def _op_random(self, inst: Instruction):
        self.state.V[inst.x] = self.rng.randint(0, 255) & inst.nn

    # ─── 8XYN: ALU operations ───

    def _op_alu(self, inst: Instruction):
        self._alu_ops.get(inst.n, self._unknown)(inst)

    def _ld_reg(self, inst: Instruction):
        V = self.state.V
        V[inst.x] = V[inst.y]

    def _or(self, inst: Instruction):
        V = self.state.V
        V[inst.x] |= V[inst.y]

    def _and(self, inst: Instruction):
        V = self.state.V
        V[inst.x] &= V[inst.y]

    def _xor(self, inst: Instruction):
        V = self.state.V
        V[inst.x] ^= V[inst.y]

    def _add_reg(self, inst: Instruction):
        V = self.state.V
        result = V[inst.x] + V[inst.y]
        V[inst.x] = result & BYTE_MASK
        V[FLAG_REGISTER] = 1 if result > BYTE_MASK else 0

    def _sub(self, inst: Instruction):
        # VF = NOT borrow
        V = self.state.V
        no_borrow = 1 if V[inst.x] >= V[inst.y] else 0
        V[inst.x] = (V[inst.x] - V[inst.y]) & BYTE_MASK
        V[FLAG_REGISTER] = no_borrow

    def _subn(self, inst: Instruction):
        V = self.state.V
        no_borrow = 1 if V[inst.y] >= V[inst.x] else 0
        V[inst.x] = (V[inst.y] - V[inst.x]) & BYTE_MASK
        V[FLAG_REGISTER] = no_borrow

    def _shift_source(self, inst: Instruction) -> int:
        return self.state.V[inst.y if self.quirks['shift_vy'] else inst.x]

    def _shr(self, inst: Instruction):
        value = self._shift_source(inst)
        shifted_out = value & 0x1
        self.state.V[inst.x] = value >> 1
        self.state.V[FLAG_REGISTER] = shifted_out

    def _shl(self, inst: Instruction):
        value = self._shift_source(inst)
        shifted_out = (value >> 7) & 0x1
        self.state.V[inst.x] = (value << 1) & BYTE_MASK
        self.state.V[FLAG_REGISTER] = shifted_out

    # ─── DXYN: draw ───

    def _op_draw(self, inst: Instruction):
        s = self.state
        rows = s.memory.read_block(s.I, inst.n)
        collision = s.display.draw_sprite(s.V[inst.x], s.V[inst.y], rows)
        s.V[FLAG_REGISTER] = 1 if collision else 0
        self.draw_flag = True

    # ─── EX9E / EXA1: keypad skips ───

    def _op_keys(self, inst: Instruction):
        self._key_ops.get(inst.nn, self._unknown)(inst)

    def _key_pressed(self, inst: Instruction) -> bool:
        key = self.state.V[inst.x] & NIBBLE_MASK
        return bool(self.state.keypad & (1 << key))

    def _skip_key_down(self, inst: Instruction):
        self._skip(self._key_pressed(inst))

    def _skip_key_up(self, inst: Instruction):
        self._skip(not self._key_pressed(inst))

    # ─── FXNN: timers, index, memory ───

    def _op_misc(self, inst: Instruction):
        self._misc_ops.get(inst.nn, self._unknown)(inst)

    def _ld_from_delay(self, inst: Instruction):
        self.state.V[inst.x] = self.state.delay_timer

    def _wait_key(self, inst: Instruction):
        # FX0A: suspend dispatch until a new key press arrives
        s = self.state
        s.waiting_for_key = True
        s.key_register = inst.x
        s.keys_at_wait = s.keypad
        logger.debug("Waiting for key into V%X", inst.x)

    def _ld_delay(self, inst: Instruction):
        self.state.delay_timer = self.state.V[inst.x]

    def _ld_sound(self, inst: Instruction):
        self.state.sound_timer = self.state.V[inst.x]

    def _advance_index(self, amount: int):
        result = self.state.I + amount
        if result > ADDRESS_MASK:
            raise MemoryOutOfBounds(result)
        self.state.I = result

    def _add_index(self, inst: Instruction):
        self._advance_index(self.state.V[inst.x])

    def _ld_font(self, inst: Instruction):
        digit = self.state.V[inst.x] & NIBBLE_MASK
        self.state.I = FONT_START + digit * FONT_BYTES_PER_DIGIT

    def _bcd(self, inst: Instruction):
        value = self.state.V[inst.x]
        digits = (value // 100, (value // 10) % 10, value % 10)
        self.state.memory.write_block(self.state.I, digits)

    def _store_regs(self, inst: Instruction):
        s = self.state
        s.memory.write_block(s.I, s.V[:inst.x + 1])
        if self.quirks['load_store_inc']:
            self._advance_index(inst.x + 1)

    def _load_regs(self, inst: Instruction):
        s = self.state
        values = s.memory.read_block(s.I, inst.x + 1)
        s.V[:inst.x + 1] = list(values)
        if self.quirks['load_store_inc']:
            self._advance_index(inst.x + 1)
