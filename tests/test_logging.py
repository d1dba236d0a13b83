"""Tests for console logging and scan progress."""

import jax
import jax.numpy as jnp
import pytest
from chip8vm import run
from chip8vm.logging import ConsoleLogger, scan_with_progress
from conftest import state_with_program


def plain_logger(level):
    return ConsoleLogger("vm", log_level=level, use_colors=False, show_timestamps=False)


def test_messages_below_level_are_dropped(capsys):
    log = plain_logger("warning")
    log.info("loaded")
    log.warning("odd opcode")
    log.error("halted")

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["[ WARNING][vm] odd opcode", "[   ERROR][vm] halted"]


def test_debug_level_prints_everything(capsys):
    plain_logger("DEBUG").debug("trace")
    assert "[   DEBUG][vm] trace" in capsys.readouterr().out


def test_unknown_level():
    with pytest.raises(ValueError):
        ConsoleLogger(log_level="CRITICAL")


def test_scan_with_progress_keeps_results(capsys):
    @scan_with_progress(7, desc="Summing")
    def body(total, x):
        return total + x[1], None

    xs = (jnp.arange(7), jnp.ones(7, dtype=jnp.int32))
    total, _ = jax.jit(lambda: jax.lax.scan(body, jnp.int32(0), xs))()

    jax.effects_barrier()
    assert total == 7
    assert "Summing" in capsys.readouterr().err


def test_run_with_progress_matches_plain_run():
    program = state_with_program(0x7001, 0x1200)
    plain = run(program, 10, jax.random.PRNGKey(0))
    shown = run(program, 10, jax.random.PRNGKey(0), progress=True)
    assert shown.V[0] == plain.V[0] == 5
