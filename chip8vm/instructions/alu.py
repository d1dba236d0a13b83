"""CHIP-8 ALU operations (8xxx).

Each operation maps the operand values (VX, VY) to (result, flag). Both
are computed from the values before the instruction; the result is
stored in VX first and the flag in VF last, so with X = F the flag wins.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER, STATUS_UNKNOWN_OPCODE
from chip8vm.state import VMState, set_status
from chip8vm.decode import DecodedInstruction

_NO_FLAG = jnp.zeros((), dtype=jnp.int32)

# Sub-opcodes 0-7 and E are defined; only 4-7 and E write VF.
VALID_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)
WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY0 - Set: VX = VY."""
    return vy, _NO_FLAG


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _NO_FLAG


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _NO_FLAG


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _NO_FLAG


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, VF = carry."""
    total = vx + vy
    return total & 0xFF, jnp.astype(total > 0xFF, jnp.int32)


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = VX > VY."""
    return (vx - vy) & 0xFF, jnp.astype(vx > vy, jnp.int32)


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = VY > VX."""
    return (vy - vx) & 0xFF, jnp.astype(vy > vx, jnp.int32)


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


def execute_alu_operation(state: VMState, instruction: DecodedInstruction) -> VMState:
    """8XYN - ALU operations dispatcher."""
    vx = jnp.astype(state.V[instruction.x], jnp.int32)
    vy = jnp.astype(state.V[instruction.y], jnp.int32)
    valid = VALID_OPS[instruction.n]

    result, flag = jax.lax.switch(
        # Map valid operations 0-7, E onto 0-8; undefined ones are discarded below
        jnp.where(instruction.n == 0xE, 8, jnp.minimum(instruction.n, 7)),
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left],
        vx, vy
    )

    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    new_V = jnp.where(
        WRITES_FLAG[instruction.n],
        new_V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8)),
        new_V,
    )
    new_V = jnp.where(valid, new_V, state.V)
    return set_status(state.replace(V=new_V), ~valid, STATUS_UNKNOWN_OPCODE)
