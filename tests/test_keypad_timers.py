"""Tests for timers, keypad skips and the wait-for-key state."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from catchip8 import ArgumentOutOfRange, Chip8CPU


@pytest.fixture
def cpu():
    return Chip8CPU()


def load_program(cpu, *words):
    cpu.load(b"".join(w.to_bytes(2, "big") for w in words), 0x200)


class TestTimers:

    def test_set_and_read_delay(self, cpu):
        cpu.state.V[0] = 2
        cpu.execute(0xF015)
        assert cpu.state.delay_timer == 2

        cpu.update_timers()
        cpu.execute(0xF107)
        assert cpu.state.V[1] == 1

    def test_timers_stop_at_zero(self, cpu):
        cpu.state.delay_timer = 2
        cpu.state.sound_timer = 1
        for _ in range(5):
            cpu.update_timers()
        assert cpu.state.delay_timer == 0
        assert cpu.state.sound_timer == 0

    def test_sound_active(self, cpu):
        cpu.state.V[4] = 2
        cpu.execute(0xF418)
        assert cpu.state.sound_timer == 2
        assert cpu.sound_active
        cpu.update_timers()
        assert cpu.sound_active
        cpu.update_timers()
        assert not cpu.sound_active

    def test_timers_do_not_tick_per_instruction(self, cpu):
        cpu.state.delay_timer = 10
        load_program(cpu, 0x6000, 0x6100, 0x6200)
        for _ in range(3):
            cpu.cycle()
        assert cpu.state.delay_timer == 10


class TestKeypad:

    def test_key_bits(self, cpu):
        cpu.key_down(0x0)
        cpu.key_down(0xF)
        assert cpu.keypad == 0x8001
        cpu.key_up(0x0)
        assert cpu.keypad == 0x8000

    @pytest.mark.parametrize("key", [-1, 16])
    def test_bad_key(self, cpu, key):
        with pytest.raises(ArgumentOutOfRange):
            cpu.key_down(key)
        with pytest.raises(ArgumentOutOfRange):
            cpu.key_up(key)

    def test_keypad_mask_setter(self, cpu):
        cpu.keypad = 0x0204
        assert cpu.state.keypad == 0x0204
        with pytest.raises(ArgumentOutOfRange):
            cpu.keypad = 0x10000

    @pytest.mark.parametrize("word, pressed, skipped", [
        (0xE09E, True, True),
        (0xE09E, False, False),
        (0xE0A1, True, False),
        (0xE0A1, False, True),
    ])
    def test_key_skips(self, cpu, word, pressed, skipped):
        cpu.state.V[0] = 0xA
        if pressed:
            cpu.key_down(0xA)
        load_program(cpu, word)
        cpu.cycle()
        assert cpu.state.PC == (0x204 if skipped else 0x202)

    def test_key_skip_uses_low_nibble(self, cpu):
        cpu.state.V[0] = 0x13
        cpu.key_down(0x3)
        cpu.execute(0xE09E)
        assert cpu.state.PC == 0x202


class TestWaitForKey:

    def test_enters_wait_state(self, cpu):
        load_program(cpu, 0xF30A)
        cpu.cycle()
        assert cpu.waiting_for_key
        assert cpu.state.key_register == 3
        assert cpu.state.PC == 0x202

    def test_no_progress_while_waiting(self, cpu):
        load_program(cpu, 0xF30A, 0x6199)
        cpu.cycle()
        for _ in range(10):
            cpu.cycle()
        assert cpu.waiting_for_key
        assert cpu.state.PC == 0x202
        assert cpu.state.V[1] == 0

    def test_key_press_resolves_wait(self, cpu):
        load_program(cpu, 0xF30A, 0x6199)
        cpu.cycle()
        cpu.key_down(0x7)
        cpu.cycle()
        assert not cpu.waiting_for_key
        assert cpu.state.V[3] == 0x7
        assert cpu.state.PC == 0x202

        cpu.cycle()
        assert cpu.state.V[1] == 0x99

    def test_timers_keep_running_while_waiting(self, cpu):
        cpu.state.delay_timer = 3
        load_program(cpu, 0xF00A)
        cpu.cycle()
        cpu.update_timers()
        assert cpu.state.delay_timer == 2

    def test_held_key_does_not_resolve(self, cpu):
        cpu.key_down(0x5)
        load_program(cpu, 0xF20A)
        cpu.cycle()
        cpu.cycle()
        assert cpu.waiting_for_key

        cpu.key_up(0x5)
        cpu.cycle()
        assert cpu.waiting_for_key

        cpu.key_down(0x5)
        cpu.cycle()
        assert not cpu.waiting_for_key
        assert cpu.state.V[2] == 0x5

    def test_lowest_new_key_wins(self, cpu):
        load_program(cpu, 0xF10A)
        cpu.cycle()
        cpu.keypad = (1 << 0xC) | (1 << 0x4)
        cpu.cycle()
        assert cpu.state.V[1] == 0x4
