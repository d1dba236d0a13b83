"""Run a CHIP-8 ROM in a window: python main.py ROM"""

import sys

from chip8vm.cli import main

if __name__ == "__main__":
    sys.exit(main())
