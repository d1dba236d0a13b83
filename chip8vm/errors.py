"""Exceptions raised by the CHIP-8 virtual machine."""

from typing import Optional

from chip8vm.constants import (
    MAX_ROM_SIZE, PROGRAM_START, STATUS_MEMORY_FAULT, STATUS_STACK_OVERFLOW,
    STATUS_STACK_UNDERFLOW,
)


class Chip8Error(Exception):
    """Base class for virtual machine errors."""


class RomTooLarge(Chip8Error):
    """Program image does not fit above the program start address."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(
            f"ROM is {size} bytes, at most {MAX_ROM_SIZE} bytes fit at 0x{PROGRAM_START:03X}"
        )


class ExecutionFault(Chip8Error):
    """Fatal fault raised while executing an instruction.

    Attributes:
        pc: Address of the faulting instruction, if known
        instruction: Faulting instruction word, if known
    """

    reason = "execution fault"

    def __init__(self, message: Optional[str] = None, pc: Optional[int] = None,
                 instruction: Optional[int] = None):
        self.pc = pc
        self.instruction = instruction
        if message is None:
            message = self.reason
            if instruction is not None:
                message += f" in instruction 0x{instruction:04X}"
            if pc is not None:
                message += f" at 0x{pc:03X}"
        super().__init__(message)


class MemoryFault(ExecutionFault):
    """Access outside the 4KB address space."""

    reason = "memory access out of range"

    def __init__(self, message: Optional[str] = None, pc: Optional[int] = None,
                 instruction: Optional[int] = None, address: Optional[int] = None):
        self.address = address
        if message is None and address is not None:
            message = f"{self.reason}: 0x{address:X}"
        super().__init__(message, pc, instruction)


class StackOverflow(ExecutionFault):
    """Call nested deeper than the stack holds."""

    reason = "call stack overflow"


class StackUnderflow(ExecutionFault):
    """Return executed with an empty call stack."""

    reason = "return with empty call stack"


STATUS_ERRORS = {
    STATUS_MEMORY_FAULT: MemoryFault,
    STATUS_STACK_OVERFLOW: StackOverflow,
    STATUS_STACK_UNDERFLOW: StackUnderflow,
}


def error_for_status(status: int, pc: Optional[int] = None,
                     instruction: Optional[int] = None) -> ExecutionFault:
    """Build the exception matching a fatal status code."""
    return STATUS_ERRORS[status](pc=pc, instruction=instruction)
