"""Machine geometry and conventions shared by the core and the host."""

# ═══════════════════════════════════════════════════════════════════════════════
# MEMORY LAYOUT
# ═══════════════════════════════════════════════════════════════════════════════

MEMORY_SIZE = 4096                      # 4KB RAM
ADDRESS_MASK = 0x0FFF                   # 12-bit address space
PROGRAM_START = 0x200                   # Programs load at 0x200
FONT_START = 0x000                      # Font table at the bottom of RAM
FONT_BYTES_PER_DIGIT = 5

# ═══════════════════════════════════════════════════════════════════════════════
# REGISTERS, STACK, KEYPAD
# ═══════════════════════════════════════════════════════════════════════════════

NUM_REGISTERS = 16                      # V0-VF
FLAG_REGISTER = 0xF                     # VF doubles as carry/borrow/collision
STACK_SIZE = 16                         # 16-level stack
NUM_KEYS = 16                           # 16 hex keys
KEYPAD_MASK = 0xFFFF                    # one bit per key

BYTE_MASK = 0xFF
WORD_MASK = 0xFFFF
NIBBLE_MASK = 0xF

# ═══════════════════════════════════════════════════════════════════════════════
# DISPLAY
# ═══════════════════════════════════════════════════════════════════════════════

DISPLAY_W, DISPLAY_H = 64, 32           # CHIP-8 native resolution
SPRITE_WIDTH = 8
PIXEL_ON = 0xFF
PIXEL_OFF = 0x00

# ═══════════════════════════════════════════════════════════════════════════════
# TIMING
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_CLOCK_HZ = 500                  # Instructions per second
TIMER_HZ = 60                           # Delay/Sound timer rate

# CHIP-8 Font (4x5 pixels, stored as 5 bytes each)
FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
