"""pygame host: window, glow renderer, beeper, keyboard and frame pacing."""

import logging
import os
import time
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame

from .config import COLORS, EmulatorConfig
from .constants import DISPLAY_W, DISPLAY_H, MEMORY_SIZE, PROGRAM_START
from .cpu import Chip8CPU
from .errors import Chip8Error

logger = logging.getLogger(__name__)

STATUS_H = 25

# Keyboard mapping (QWERTY -> CHIP-8 hex keypad)
# CHIP-8 Keypad:    Keyboard:
# 1 2 3 C          1 2 3 4
# 4 5 6 D          Q W E R
# 7 8 9 E          A S D F
# A 0 B F          Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class RomError(Exception):
    """ROM image that cannot be read or does not fit in memory"""


def read_rom(path: str) -> bytes:
    """Read a program image from disk, rejecting ones too large for RAM"""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise RomError(f"Failed to load ROM {path}: {e.strerror or e}") from e

    limit = MEMORY_SIZE - PROGRAM_START
    if len(data) > limit:
        raise RomError(f"ROM {path} is {len(data)} bytes, limit is {limit}")
    return data


# ═══════════════════════════════════════════════════════════════════════════════
# RENDERING
# ═══════════════════════════════════════════════════════════════════════════════

class Renderer:
    """Turns the 2048-cell framebuffer into a scaled surface with phosphor glow"""

    def __init__(self, scale: int,
                 fg_color: Tuple[int, int, int] = COLORS['fg_green'],
                 bg_color: Tuple[int, int, int] = COLORS['bg_dark'],
                 bloom_strength: float = 0.55):
        self.scale = scale
        self.fg_color = np.array(fg_color, dtype=np.float32)
        self.bg_color = np.array(bg_color, dtype=np.float32)
        self.bloom_strength = bloom_strength
        self.size = (DISPLAY_W * scale, DISPLAY_H * scale)

    @staticmethod
    def intensity(framebuffer: np.ndarray) -> np.ndarray:
        """Map flat cells to a (width, height) 0.0-1.0 array, surfarray order"""
        cells = framebuffer.reshape(DISPLAY_H, DISPLAY_W)
        return (cells != 0).astype(np.float32).T

    @staticmethod
    def box_blur(arr: np.ndarray, passes: int = 2) -> np.ndarray:
        a = arr
        for _ in range(passes):
            a = (np.roll(a, 1, axis=0) + a + np.roll(a, -1, axis=0)) / 3.0
            a = (np.roll(a, 1, axis=1) + a + np.roll(a, -1, axis=1)) / 3.0
        return a

    def render(self, framebuffer: np.ndarray) -> pygame.Surface:
        lit = self.intensity(framebuffer)
        if self.bloom_strength > 0:
            glow = np.clip(self.box_blur(lit) * self.bloom_strength, 0.0, 1.0)
            lit = np.maximum(lit, glow)

        rgb = self.bg_color + lit[..., None] * (self.fg_color - self.bg_color)
        small = pygame.surfarray.make_surface(rgb.astype(np.uint8))
        return pygame.transform.scale(small, self.size)


# ═══════════════════════════════════════════════════════════════════════════════
# SOUND
# ═══════════════════════════════════════════════════════════════════════════════

class Beeper:
    """Square-wave tone played while the sound timer is running"""

    SAMPLE_RATE = 44100
    TONE_HZ = 440

    def __init__(self, volume: float = 0.2):
        self.sound: Optional[pygame.mixer.Sound] = None
        self.playing = False
        try:
            pygame.mixer.init(frequency=self.SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            logger.warning("Audio disabled: %s", e)
            return

        channels = pygame.mixer.get_init()[2]
        period = self.SAMPLE_RATE // self.TONE_HZ
        wave = np.where(np.arange(period) < period // 2, 1, -1)
        samples = (wave * volume * 32767).astype(np.int16)
        if channels > 1:
            samples = np.repeat(samples[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(np.ascontiguousarray(samples))

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN EMULATOR APPLICATION
# ═══════════════════════════════════════════════════════════════════════════════

class Chip8Emulator:
    """Drives a Chip8CPU: events, instruction rate, 60Hz timers, rendering"""

    def __init__(self, config: Optional[EmulatorConfig] = None):
        self.config = config or EmulatorConfig()

        pygame.init()
        pygame.display.set_caption("🐱 Cat's CHIP-8 Emulator")

        self.width = DISPLAY_W * self.config.scale
        self.height = DISPLAY_H * self.config.scale
        self.screen = pygame.display.set_mode((self.width, self.height + STATUS_H))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 20)

        self.cpu = Chip8CPU(self.config)
        self.renderer = Renderer(self.config.scale, self.config.fg_color,
                                 self.config.bg_color, self.config.bloom_strength)
        self.beeper = Beeper(self.config.volume)

        self.running = True
        self.halted = True
        self.paused = False
        self.status = "Ready"
        self.rom_data: Optional[bytes] = None
        self.rom_name: Optional[str] = None

        self.last_timer_tick = time.perf_counter()
        self.timer_period = 1.0 / self.config.timer_hz

    def start(self, data: bytes, name: str):
        """Boot a ROM image already read by read_rom"""
        self.rom_data = data
        self.rom_name = name
        self._boot()
        logger.info("Loaded %s (%d bytes)", name, len(data))

    def _boot(self):
        self.cpu.load_rom(self.rom_data)
        self.halted = False
        self.paused = False
        self.last_timer_tick = time.perf_counter()
        self.status = f"Running: {self.rom_name}"

    def _halt(self, error: Chip8Error):
        self.halted = True
        self.beeper.update(False)
        self.status = f"Halted at ${self.cpu.state.PC:03X}: {error}"
        logger.error("Emulation halted: %s", error)

    def handle_events(self):
        """Process input events"""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self.paused = not self.paused
                    self.last_timer_tick = time.perf_counter()
                    self.status = "Paused" if self.paused else f"Running: {self.rom_name}"
                elif event.key == pygame.K_F5 and self.rom_data is not None:
                    self._boot()
                elif event.key in KEY_MAP:
                    self.cpu.key_down(KEY_MAP[event.key])

            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    self.cpu.key_up(KEY_MAP[event.key])

    def update(self):
        """Run one frame worth of instructions and tick the timers"""
        if self.halted or self.paused:
            return

        try:
            for _ in range(self.config.cycles_per_frame):
                self.cpu.cycle()
        except Chip8Error as e:
            self._halt(e)
            return

        now = time.perf_counter()
        while now - self.last_timer_tick >= self.timer_period:
            self.cpu.update_timers()
            self.last_timer_tick += self.timer_period

        self.beeper.update(self.cpu.sound_active)

    def render(self):
        """Render display"""
        if self.cpu.draw_flag:
            self.screen.blit(self.renderer.render(self.cpu.framebuffer), (0, 0))
            self.cpu.draw_flag = False

        status_rect = pygame.Rect(0, self.height, self.width, STATUS_H)
        pygame.draw.rect(self.screen, COLORS['status_bg'], status_rect)
        text = self.font.render(self.status, True, COLORS['text_dim'])
        self.screen.blit(text, (10, self.height + 5))

        pygame.display.flip()

    def run(self):
        """Main loop"""
        self.last_timer_tick = time.perf_counter()
        while self.running:
            self.handle_events()
            self.update()
            self.render()
            self.clock.tick(60)

        pygame.quit()
