"""Tests for Memory, CallStack, Display and the decoder."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from catchip8.constants import PIXEL_OFF, PIXEL_ON
from catchip8.decoder import decode
from catchip8.display import Display
from catchip8.errors import (
    ArgumentOutOfRange, MemoryOutOfBounds, StackOverflow, StackUnderflow,
    validate_argument,
)
from catchip8.memory import Memory
from catchip8.stack import CallStack


class TestMemory:

    @pytest.fixture
    def mem(self):
        return Memory()

    def test_size_and_zeroed(self, mem):
        assert len(mem) == 4096
        assert mem.read(0) == 0 and mem.read(4095) == 0

    def test_read_write(self, mem):
        mem.write(0x123, 0xAB)
        assert mem.read(0x123) == 0xAB

    @pytest.mark.parametrize("address", [-1, 4096, 0x10000])
    def test_out_of_bounds(self, mem, address):
        with pytest.raises(MemoryOutOfBounds):
            mem.read(address)
        with pytest.raises(MemoryOutOfBounds):
            mem.write(address, 0)

    def test_write_rejects_non_byte(self, mem):
        with pytest.raises(ArgumentOutOfRange):
            mem.write(0, 256)

    def test_load_at_offset(self, mem):
        mem.load(b"\x01\x02\x03", 0x200)
        assert mem.read_block(0x200, 3) == b"\x01\x02\x03"

    def test_load_to_last_byte(self, mem):
        mem.load(b"\x01\x02", 4094)
        assert mem.read(4095) == 2

    def test_load_past_end_writes_nothing(self, mem):
        with pytest.raises(MemoryOutOfBounds) as exc:
            mem.load(b"\xFF" * 4, 4094)
        assert exc.value.address == 4097
        assert mem.read(4094) == 0

    def test_fetch_word_big_endian(self, mem):
        mem.load(b"\xD0\x15", 0x300)
        assert mem.fetch_word(0x300) == 0xD015

    def test_fetch_word_at_last_byte(self, mem):
        with pytest.raises(MemoryOutOfBounds):
            mem.fetch_word(4095)

    def test_empty_block(self, mem):
        assert mem.read_block(4095, 0) == b""

    @pytest.mark.parametrize("offset", [-1, 4096, 5000])
    def test_empty_load_still_checks_offset(self, mem, offset):
        with pytest.raises(MemoryOutOfBounds):
            mem.load(b"", offset)
        with pytest.raises(MemoryOutOfBounds):
            mem.read_block(offset, 0)


class TestCallStack:

    def test_lifo(self):
        stack = CallStack()
        stack.push(0x202)
        stack.push(0x304)
        assert stack.depth == 2
        assert stack.pop() == 0x304
        assert stack.pop() == 0x202

    def test_underflow(self):
        with pytest.raises(StackUnderflow):
            CallStack().pop()

    def test_overflow(self):
        stack = CallStack(capacity=16)
        for i in range(16):
            stack.push(i * 2)
        with pytest.raises(StackOverflow) as exc:
            stack.push(0x400)
        assert exc.value.address == 0x400
        assert len(stack) == 16

    def test_clear(self):
        stack = CallStack()
        stack.push(1)
        stack.clear()
        assert len(stack) == 0


class TestDisplay:

    @pytest.fixture
    def display(self):
        return Display()

    def test_cell_count(self, display):
        assert display.cells.shape == (2048,)
        assert display.pixels.shape == (32, 64)

    def test_msb_is_leftmost(self, display):
        assert display.draw_sprite(0, 0, b"\x80") is False
        assert display.cells[0] == PIXEL_ON
        assert display.cells[1] == PIXEL_OFF

    def test_cell_index_mapping(self, display):
        display.draw_sprite(10, 20, b"\x80")
        index = 20 * 64 + 10
        assert display.cells[index] == PIXEL_ON
        assert (index % 64, index // 64) == (10, 20)

    def test_wraps_both_axes(self, display):
        collided = display.draw_sprite(62, 31, b"\xFF\xFF\xFF")
        assert collided is False
        for y in (31, 0, 1):
            lit = [x for x in range(64) if display.is_lit(x, y)]
            assert lit == [0, 1, 2, 3, 4, 5, 62, 63]
        assert not display.is_lit(10, 2)

    def test_coordinates_beyond_screen_wrap(self, display):
        display.draw_sprite(64 + 3, 32 + 1, b"\x80")
        assert display.is_lit(3, 1)

    def test_partial_collision(self, display):
        display.draw_sprite(0, 0, b"\x0F")
        assert display.draw_sprite(0, 0, b"\x01") is True
        assert [display.is_lit(x, 0) for x in range(8)] == [False] * 4 + [True] * 3 + [False]

    def test_no_collision_when_lighting_empty_cells(self, display):
        display.draw_sprite(0, 0, b"\xF0")
        assert display.draw_sprite(0, 0, b"\x0F") is False

    def test_clear(self, display):
        display.draw_sprite(5, 5, b"\xFF" * 5)
        display.clear()
        assert (display.cells == PIXEL_OFF).all()

    def test_empty_sprite(self, display):
        assert display.draw_sprite(0, 0, b"") is False


class TestDecoder:

    def test_fields(self):
        inst = decode(0xD12F)
        assert inst.op == 0xD
        assert inst.x == 0x1
        assert inst.y == 0x2
        assert inst.n == 0xF
        assert inst.nn == 0x2F
        assert inst.nnn == 0x12F

    @pytest.mark.parametrize("word", [-1, 0x10000])
    def test_rejects_out_of_range_words(self, word):
        with pytest.raises(ArgumentOutOfRange):
            decode(word)


class TestValidateArgument:

    def test_in_range(self):
        assert validate_argument(0xF, 0xF) == 0xF

    @pytest.mark.parametrize("value", [0x10, -1])
    def test_out_of_range(self, value):
        with pytest.raises(ArgumentOutOfRange) as exc:
            validate_argument(value, 0xF)
        assert exc.value.value == value
        assert exc.value.mask == 0xF
