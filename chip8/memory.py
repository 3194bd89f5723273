"""Memory model for the CHIP-8 interpreter."""

import logging
from typing import Iterable
from .errors import MemoryAccessError, ProgramTooLarge

logger = logging.getLogger(__name__)

MEMORY_SIZE = 4096
START_ADDRESS = 0x200  # 0x000-0x1FF is reserved
FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5

FONT_SPRITES = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

MAX_PROGRAM_SIZE = MEMORY_SIZE - START_ADDRESS


def font_address(digit: int) -> int:
    """Return the address of the glyph for a hex digit (low nibble only)."""
    return FONT_ADDRESS + (digit & 0xF) * FONT_GLYPH_SIZE


class Memory:
    """Flat byte-addressed memory with bounds checking."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self._data = bytearray(size)
        self.load_font()

    def load_font(self) -> None:
        """Copy the hex digit glyphs into reserved low memory."""
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_SPRITES)] = FONT_SPRITES

    def _check_bounds(self, addr: int, length: int = 1) -> None:
        """Check if the range [addr, addr + length) is within memory."""
        if addr < 0 or addr + length > self.size:
            if length == 1:
                raise MemoryAccessError(f"Memory address out of range: {addr:#05x}")
            raise MemoryAccessError(
                f"Memory range out of range: {addr:#05x}+{length}"
            )

    def read(self, addr: int) -> int:
        """Read a byte from memory."""
        self._check_bounds(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        """Write a byte to memory, keeping only the low 8 bits."""
        self._check_bounds(addr)
        self._data[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit word."""
        self._check_bounds(addr, 2)
        return (self._data[addr] << 8) | self._data[addr + 1]

    def read_block(self, addr: int, length: int) -> bytes:
        """Read `length` consecutive bytes."""
        self._check_bounds(addr, length)
        return bytes(self._data[addr:addr + length])

    def write_block(self, addr: int, values: Iterable[int]) -> None:
        """Write consecutive bytes; nothing is written if the range is out of bounds."""
        data = bytes(v & 0xFF for v in values)
        self._check_bounds(addr, len(data))
        self._data[addr:addr + len(data)] = data

    def load_program(self, program: bytes, start_address: int = START_ADDRESS) -> None:
        """Copy program bytes into memory starting at the entry address."""
        if start_address + len(program) > self.size:
            raise ProgramTooLarge(
                f"Program of {len(program)} bytes does not fit at {start_address:#05x} "
                f"(max {self.size - start_address} bytes)",
                addr=start_address,
            )
        self._data[start_address:start_address + len(program)] = program
        logger.debug("Loaded %d program bytes at %#05x", len(program), start_address)

    def clear(self) -> None:
        """Zero memory and reload the font."""
        self._data = bytearray(self.size)
        self.load_font()

    def snapshot(self) -> bytes:
        """Return a copy of the entire memory."""
        return bytes(self._data)
