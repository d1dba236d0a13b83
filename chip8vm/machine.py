"""Host-facing CHIP-8 machine.

`Machine` owns one `VMState` and threads it through loading, stepping and
the read accessors a host needs for rendering, input and sound.
"""

from typing import Optional

import numpy as np
from tqdm import tqdm

from chip8vm import address_space
from chip8vm.emulator import step
from chip8vm.errors import ExecutionFault
from chip8vm.logging import ConsoleLogger
from chip8vm.random_source import KeyRandomSource, RandomSource
from chip8vm.stack import depth
from chip8vm.state import VMState, create_state, set_key


class Machine:
    """A CHIP-8 machine driven one instruction at a time.

    Args:
        random_source: Supplies the bytes consumed by CXKK (seeded JAX PRNG by default)
        logger: Receives load messages and unknown opcode warnings
    """

    def __init__(self, random_source: Optional[RandomSource] = None,
                 logger: Optional[ConsoleLogger] = None):
        self.random_source = random_source or KeyRandomSource()
        self.logger = logger or ConsoleLogger("chip8vm", log_level="WARNING")
        self.state: VMState = create_state()
        self.fault: Optional[ExecutionFault] = None
        self._rom: bytes = b""

    def load(self, rom: bytes) -> int:
        """Power on with a program image at 0x200 and return its size in bytes.

        Anything left by an earlier program is discarded.
        """
        self.state = address_space.load_program(create_state(), rom)
        self.fault = None
        self._rom = bytes(rom)
        self.logger.info(f"Loaded {len(rom)} bytes")
        return len(rom)

    def load_file(self, filename: str) -> int:
        """Load a ROM file and return its size in bytes."""
        with open(filename, "rb") as f:
            return self.load(f.read())

    def reset(self):
        """Return to power-on state and reload the last program."""
        self.state = address_space.load_program(create_state(), self._rom)
        self.fault = None

    def step(self):
        """Execute one instruction.

        A fault halts the machine: the exception is raised again on every
        later call until `reset`.
        """
        if self.fault is not None:
            raise self.fault
        try:
            self.state = step(self.state, self.random_source.next_byte(), self.logger)
        except ExecutionFault as e:
            self.fault = e
            raise

    def run(self, num_steps: int, progress: bool = False):
        """Execute `num_steps` instructions, optionally with a progress bar."""
        steps = range(num_steps)
        if progress:
            steps = tqdm(steps, desc=f"Running ({num_steps:,} steps)", unit="step")
        for _ in steps:
            self.step()

    def set_key(self, key: Optional[int]):
        """Report the pressed key (0-15), or None when released."""
        self.state = set_key(self.state, key)

    @property
    def halted(self) -> bool:
        return self.fault is not None

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only boolean pixels indexed [x, y], shape (64, 32)."""
        pixels = np.array(self.state.display, dtype=np.bool_)
        pixels.flags.writeable = False
        return pixels

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(int(v) for v in self.state.V)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def stack_depth(self) -> int:
        return depth(self.state.stack)

    @property
    def key(self) -> Optional[int]:
        key = int(self.state.key)
        return None if key < 0 else key
