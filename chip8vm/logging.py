"""Console output for the CHIP-8 machine.

`ConsoleLogger` prints levelled messages for opcode warnings, ROM loading
and CLI errors. `scan_with_progress` drives a tqdm bar from inside a jitted
`jax.lax.scan` through `io_callback`.
"""

import sys
import time
from typing import Callable, Optional

import jax
from jax.experimental import io_callback
from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Print `[elapsed][LEVEL][name] message` lines to stdout.

    Args:
        name: Shown in every line
        log_level: Lowest level printed, one of `LEVELS`
        use_colors: Colour the level tag (only when stdout is a terminal)
        show_timestamps: Prefix seconds since the logger was created
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        if self.log_level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def enabled(self, level: str) -> bool:
        return LEVELS.index(level) >= LEVELS.index(self.log_level)

    def log(self, level: str, message: str):
        if not self.enabled(level):
            return
        elapsed = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS[level]}{tag}{RESET_COLOR}"
        print(f"{elapsed}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


def _callback_if(condition, callback: Callable, *args):
    jax.lax.cond(
        condition,
        lambda _: io_callback(callback, None, *args, ordered=True),
        lambda _: None,
        operand=None,
    )


def scan_with_progress(num_steps: int, desc: Optional[str] = None) -> Callable:
    """Decorate a scan body so each step advances a tqdm bar.

    The scanned input must be a tuple whose first element is the step
    index, counting from 0. The bar is refreshed about twenty times per run.
    """
    desc = desc or f"Running ({num_steps:,} steps)"
    refresh = max(1, num_steps // 20)
    bars = {}

    def _open():
        bars["run"] = tqdm(total=num_steps, desc=desc, unit="step")

    def _advance():
        bars["run"].update(refresh)

    def _finish():
        bar = bars.pop("run")
        bar.update(num_steps % refresh)
        bar.close()

    def decorator(body: Callable) -> Callable:
        def body_with_progress(carry, x):
            step_index = x[0]
            _callback_if(step_index == 0, _open)
            result = body(carry, x)
            _callback_if((step_index + 1) % refresh == 0, _advance)
            _callback_if(step_index == num_steps - 1, _finish)
            return result

        return body_with_progress

    return decorator
