"""Command line entry point: ``catchip8 ROM``."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import EmulatorConfig, load_config

logger = logging.getLogger(__name__)

BANNER = """\
╔═══════════════════════════════════════════════════════════════╗
║      🐱 Cat's CHIP-8 Emulator - 'Meow Machine' Edition        ║
╚═══════════════════════════════════════════════════════════════╝

Controls:
  CHIP-8 Keypad: 1234 / QWER / ASDF / ZXCV
  P = Pause/Resume   F5 = Reset   ESC = Exit
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catchip8",
        description="CHIP-8 emulator",
    )
    parser.add_argument("rom", help="path to the program image (.ch8)")
    parser.add_argument(
        "--config", "-c",
        help="JSON settings file (speed, colors, quirks)"
    )
    parser.add_argument(
        "--clock",
        type=int,
        help="instructions per second (default: 500)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s]:  %(message)s",
        stream=sys.stdout,
    )

    try:
        config = load_config(args.config) if args.config else EmulatorConfig()
        config = config.with_overrides(clock_hz=args.clock)
    except (OSError, ValueError) as e:
        logger.error("Bad configuration: %s", e)
        return 1

    # pygame is only needed once there is something to run
    from .app import Chip8Emulator, RomError, read_rom

    try:
        rom = read_rom(args.rom)
    except RomError as e:
        logger.error("%s", e)
        return 1

    print(BANNER)

    emu = Chip8Emulator(config)
    emu.start(rom, Path(args.rom).stem)
    emu.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
