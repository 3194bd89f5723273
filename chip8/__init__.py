"""CHIP-8 Interpreter Core Package."""

from .interpreter import Interpreter
from .runner import run_program, run_frame, RunOptions, RunResult
from .decoder import decode, disassemble
from .errors import (
    Chip8Error,
    Chip8RuntimeError,
    UnsupportedOpcode,
    StackUnderflow,
    MemoryAccessError,
)

__all__ = [
    "Interpreter",
    "run_program",
    "run_frame",
    "RunOptions",
    "RunResult",
    "decode",
    "disassemble",
    "Chip8Error",
    "Chip8RuntimeError",
    "UnsupportedOpcode",
    "StackUnderflow",
    "MemoryAccessError",
]
