"""Command line host for the CHIP-8 machine.

Runs a ROM in a pygame window, or headless for a fixed number of steps.

Usage:
  chip8vm ROM [--scale N] [--ipf N] [--color-scheme NAME] [--seed N]
              [--headless --steps N] [--log-level LEVEL]
"""

import argparse
import sys
from typing import Optional, Sequence

from chip8vm.errors import Chip8Error, ExecutionFault
from chip8vm.logging import LEVELS, ConsoleLogger
from chip8vm.machine import Machine
from chip8vm.random_source import KeyRandomSource
from chip8vm.rendering import create_color_scheme, display_to_rgb

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_FAULT = 2

# CHIP-8 keypad      keyboard
# |1|2|3|C|    =>    |1|2|3|4|
# |4|5|6|D|    =>    |Q|W|E|R|
# |7|8|9|E|    =>    |A|S|D|F|
# |A|0|B|F|    =>    |Z|X|C|V|
KEY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 emulator")
    parser.add_argument("rom", help="ROM file")
    parser.add_argument("--scale", type=int, default=10,
                        help="window pixels per CHIP-8 pixel (default: 10)")
    parser.add_argument("--ipf", type=int, default=10,
                        help="instructions executed per 60Hz frame (default: 10)")
    parser.add_argument("--color-scheme", default="classic",
                        help="classic, green, amber, blue or retro")
    parser.add_argument("--seed", type=int, default=0,
                        help="seed for the CXKK random source")
    parser.add_argument("--headless", action="store_true",
                        help="run without a window and print the final state")
    parser.add_argument("--steps", type=int, default=1000,
                        help="instructions to execute with --headless (default: 1000)")
    parser.add_argument("--log-level", default="INFO",
                        choices=LEVELS)
    return parser


def run_headless(machine: Machine, steps: int, logger: ConsoleLogger):
    """Run a fixed number of instructions and log the final registers."""
    machine.run(steps, progress=logger.log_level == "DEBUG")
    registers = " ".join(f"V{i:X}={v:02X}" for i, v in enumerate(machine.registers))
    logger.info(f"PC=0x{machine.pc:03X} I=0x{machine.index:03X} {registers}")
    logger.info(f"Delay={machine.delay_timer} Sound={machine.sound_timer}")


def run_window(machine: Machine, scale: int, ipf: int, color_scheme: str):
    """Main window loop: 60 frames per second, `ipf` instructions per frame."""
    import pygame

    on_color, off_color = create_color_scheme(color_scheme)

    pygame.init()
    key_map = {pygame.key.key_code(name): value for name, value in KEY_LAYOUT.items()}
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption("CHIP-8")
    clock = pygame.time.Clock()

    try:
        running = True
        while running:
            clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in key_map:
                        machine.set_key(key_map[event.key])
                elif event.type == pygame.KEYUP and event.key in key_map:
                    machine.set_key(None)

            for _ in range(ipf):
                machine.step()

            frame = display_to_rgb(machine.framebuffer, scale, on_color, off_color)
            pygame.surfarray.blit_array(screen, frame.swapaxes(0, 1))
            pygame.display.flip()
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = ConsoleLogger("chip8vm", log_level=args.log_level)

    try:
        create_color_scheme(args.color_scheme)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_LOAD_ERROR

    machine = Machine(random_source=KeyRandomSource(args.seed), logger=logger)
    try:
        machine.load_file(args.rom)
    except OSError as e:
        logger.error(f"Unable to read ROM '{args.rom}': {e.strerror or e}")
        return EXIT_LOAD_ERROR
    except Chip8Error as e:
        logger.error(f"Unable to load ROM '{args.rom}': {e}")
        return EXIT_LOAD_ERROR

    try:
        if args.headless:
            run_headless(machine, args.steps, logger)
        else:
            run_window(machine, args.scale, args.ipf, args.color_scheme)
    except ExecutionFault as e:
        logger.error(f"Machine halted: {e}")
        return EXIT_FAULT
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
