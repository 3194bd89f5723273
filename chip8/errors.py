"""Custom exceptions for the CHIP-8 interpreter."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    word: Optional[int] = None
    instr_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "word": self.word,
            "instr_text": self.instr_text,
        }


class Chip8Error(Exception):
    """Base exception for all interpreter errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        word: Optional[int] = None,
        instr_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.word = word
        self.instr_text = instr_text

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            word=self.word,
            instr_text=self.instr_text,
        )


class Chip8RuntimeError(Chip8Error):
    """Error during program execution."""
    pass


class UnsupportedOpcode(Chip8RuntimeError):
    """Instruction word does not decode to any known instruction."""

    def __init__(self, word: int, addr: int = 0, step: int = 0):
        super().__init__(
            f"Unsupported opcode: 0x{word:04X}",
            step=step,
            addr=addr,
            word=word,
        )


class StackUnderflow(Chip8RuntimeError):
    """RET executed with an empty call stack."""
    pass


class StackOverflow(Chip8RuntimeError):
    """CALL executed with a full call stack."""
    pass


class MemoryAccessError(Chip8RuntimeError):
    """Memory address out of bounds."""
    pass


class ProgramTooLarge(MemoryAccessError):
    """Program does not fit between the entry address and the end of memory."""
    pass


class StepLimitExceeded(Chip8RuntimeError):
    """Maximum step count exceeded."""
    pass


class InvalidKey(Chip8Error):
    """Keypad index outside 0x0-0xF."""
    pass
