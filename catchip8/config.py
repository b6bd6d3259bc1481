"""Emulator configuration: speed, colors, effects and interpreter quirks."""

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Tuple, Union

from .constants import DEFAULT_CLOCK_HZ, TIMER_HZ

# Colors (RGB)
COLORS = {
    'bg_dark': (15, 15, 25),
    'fg_green': (0, 255, 128),
    'fg_amber': (255, 176, 0),
    'fg_white': (220, 220, 220),
    'fg_blue': (100, 180, 255),
    'status_bg': (20, 20, 35),
    'text_dim': (120, 120, 140),
}

DEFAULT_QUIRKS = {
    'shift_vy': False,        # COSMAC: 8XY6/8XYE shift VY into VX
    'load_store_inc': False,  # COSMAC: I advances after FX55/FX65
    'jump_vx': False,         # SCHIP: BXNN jumps to XNN + VX
}


@dataclass
class EmulatorConfig:
    """Host and interpreter settings"""
    clock_hz: int = DEFAULT_CLOCK_HZ
    timer_hz: int = TIMER_HZ
    scale: int = 12
    fg_color: Tuple[int, int, int] = COLORS['fg_green']
    bg_color: Tuple[int, int, int] = COLORS['bg_dark']
    bloom_strength: float = 0.55    # 0.0 disables the glow pass
    volume: float = 0.2
    quirks: Dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_QUIRKS))

    def __post_init__(self):
        if self.clock_hz <= 0 or self.timer_hz <= 0:
            raise ValueError("clock_hz and timer_hz must be positive")
        if self.scale <= 0:
            raise ValueError("scale must be positive")
        unknown = set(self.quirks) - set(DEFAULT_QUIRKS)
        if unknown:
            raise ValueError(f"Unknown quirks: {', '.join(sorted(unknown))}")
        self.quirks = {**DEFAULT_QUIRKS, **self.quirks}
        self.fg_color = tuple(self.fg_color)
        self.bg_color = tuple(self.bg_color)

    @property
    def cycles_per_frame(self) -> int:
        return max(1, self.clock_hz // 60)

    def with_overrides(self, **overrides) -> "EmulatorConfig":
        """Copy with the non-None overrides applied"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Union[str, Path]) -> EmulatorConfig:
    """Read an EmulatorConfig from a JSON object file.

    Raises:
        ValueError: on unknown keys or invalid values
        OSError: if the file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object")

    known = {f.name for f in fields(EmulatorConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"{path}: unknown settings: {', '.join(sorted(unknown))}")

    return EmulatorConfig(**raw)
