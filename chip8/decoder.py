"""Instruction decoder and disassembler for CHIP-8 programs."""

from dataclasses import dataclass
from typing import Optional
from .errors import UnsupportedOpcode


# Valid mnemonics, one per instruction form
MNEMONICS = {
    "CLS",
    "RET",
    "JP",
    "CALL",
    "SE_VX_NN",
    "SNE_VX_NN",
    "SE_VX_VY",
    "LD_VX_NN",
    "ADD_VX_NN",
    "LD_VX_VY",
    "OR",
    "AND",
    "XOR",
    "ADD_VX_VY",
    "SUB",
    "SHR",
    "SUBN",
    "SHL",
    "SNE_VX_VY",
    "LD_I",
    "JP_V0",
    "RND",
    "DRW",
    "SKP",
    "SKNP",
    "LD_VX_DT",
    "LD_VX_K",
    "LD_DT_VX",
    "LD_ST_VX",
    "ADD_I_VX",
    "LD_F_VX",
    "LD_B_VX",
    "LD_MEM_VX",
    "LD_VX_MEM",
}

# 8xyN forms keyed by the last nibble
_ALU_OPS = {
    0x0: "LD_VX_VY",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD_VX_VY",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

# ExNN forms keyed by the low byte
_KEY_OPS = {
    0x9E: "SKP",
    0xA1: "SKNP",
}

# FxNN forms keyed by the low byte
_MISC_OPS = {
    0x07: "LD_VX_DT",
    0x0A: "LD_VX_K",
    0x15: "LD_DT_VX",
    0x18: "LD_ST_VX",
    0x1E: "ADD_I_VX",
    0x29: "LD_F_VX",
    0x33: "LD_B_VX",
    0x55: "LD_MEM_VX",
    0x65: "LD_VX_MEM",
}

# Families selected by the leading nibble alone
_FAMILY_OPS = {
    0x1: "JP",
    0x2: "CALL",
    0x3: "SE_VX_NN",
    0x4: "SNE_VX_NN",
    0x6: "LD_VX_NN",
    0x7: "ADD_VX_NN",
    0xA: "LD_I",
    0xB: "JP_V0",
    0xC: "RND",
    0xD: "DRW",
}

# Assembly text for each mnemonic
_FORMATS = {
    "CLS": "CLS",
    "RET": "RET",
    "JP": "JP {nnn:#05x}",
    "CALL": "CALL {nnn:#05x}",
    "SE_VX_NN": "SE V{x:X}, {nn:#04x}",
    "SNE_VX_NN": "SNE V{x:X}, {nn:#04x}",
    "SE_VX_VY": "SE V{x:X}, V{y:X}",
    "LD_VX_NN": "LD V{x:X}, {nn:#04x}",
    "ADD_VX_NN": "ADD V{x:X}, {nn:#04x}",
    "LD_VX_VY": "LD V{x:X}, V{y:X}",
    "OR": "OR V{x:X}, V{y:X}",
    "AND": "AND V{x:X}, V{y:X}",
    "XOR": "XOR V{x:X}, V{y:X}",
    "ADD_VX_VY": "ADD V{x:X}, V{y:X}",
    "SUB": "SUB V{x:X}, V{y:X}",
    "SHR": "SHR V{x:X}, V{y:X}",
    "SUBN": "SUBN V{x:X}, V{y:X}",
    "SHL": "SHL V{x:X}, V{y:X}",
    "SNE_VX_VY": "SNE V{x:X}, V{y:X}",
    "LD_I": "LD I, {nnn:#05x}",
    "JP_V0": "JP V0, {nnn:#05x}",
    "RND": "RND V{x:X}, {nn:#04x}",
    "DRW": "DRW V{x:X}, V{y:X}, {n}",
    "SKP": "SKP V{x:X}",
    "SKNP": "SKNP V{x:X}",
    "LD_VX_DT": "LD V{x:X}, DT",
    "LD_VX_K": "LD V{x:X}, K",
    "LD_DT_VX": "LD DT, V{x:X}",
    "LD_ST_VX": "LD ST, V{x:X}",
    "ADD_I_VX": "ADD I, V{x:X}",
    "LD_F_VX": "LD F, V{x:X}",
    "LD_B_VX": "LD B, V{x:X}",
    "LD_MEM_VX": "LD [I], V{x:X}",
    "LD_VX_MEM": "LD V{x:X}, [I]",
}


@dataclass(frozen=True)
class Instruction:
    """Decoded instruction word with its operand fields."""
    addr: int
    word: int
    mnemonic: str

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def nn(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF

    @property
    def text(self) -> str:
        return _FORMATS[self.mnemonic].format(
            x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn
        )


def split_nibbles(word: int) -> tuple[int, int, int, int]:
    """Split a 16-bit word into four 4-bit fields, most significant first."""
    return (
        (word & 0xF000) >> 12,
        (word & 0x0F00) >> 8,
        (word & 0x00F0) >> 4,
        word & 0x000F,
    )


def _match_mnemonic(word: int) -> Optional[str]:
    """Return the mnemonic for a word, or None when it is not an instruction."""
    op, _, _, n = split_nibbles(word)
    low = word & 0xFF

    if word == 0x00E0:
        return "CLS"
    if word == 0x00EE:
        return "RET"
    if op in _FAMILY_OPS:
        return _FAMILY_OPS[op]
    if op == 0x5 and n == 0:
        return "SE_VX_VY"
    if op == 0x8:
        return _ALU_OPS.get(n)
    if op == 0x9 and n == 0:
        return "SNE_VX_VY"
    if op == 0xE:
        return _KEY_OPS.get(low)
    if op == 0xF:
        return _MISC_OPS.get(low)
    return None


def decode(word: int, addr: int = 0) -> Instruction:
    """Decode an instruction word.

    Args:
        word: 16-bit instruction word
        addr: Address the word was fetched from (for diagnostics)

    Returns:
        Decoded Instruction

    Raises:
        UnsupportedOpcode: if the word is not part of the instruction set
    """
    mnemonic = _match_mnemonic(word & 0xFFFF)
    if mnemonic is None:
        raise UnsupportedOpcode(word & 0xFFFF, addr=addr)
    return Instruction(addr=addr, word=word & 0xFFFF, mnemonic=mnemonic)


def is_valid(word: int) -> bool:
    return _match_mnemonic(word & 0xFFFF) is not None


@dataclass
class ListingLine:
    """One disassembled word."""
    addr: int
    word: int
    text: str

    def to_dict(self) -> dict:
        return {"addr": self.addr, "word": f"{self.word:04X}", "text": self.text}


def disassemble(program: bytes, start_address: int = 0x200) -> list[ListingLine]:
    """Disassemble a program word by word.

    Words that are not instructions (sprite data, padding) are listed as
    ``DW`` directives. A trailing odd byte is listed as ``DB``.
    """
    lines: list[ListingLine] = []
    for offset in range(0, len(program) - 1, 2):
        addr = start_address + offset
        word = (program[offset] << 8) | program[offset + 1]
        if is_valid(word):
            text = decode(word, addr).text
        else:
            text = f"DW {word:#06x}"
        lines.append(ListingLine(addr=addr, word=word, text=text))
    if len(program) % 2:
        last = program[-1]
        lines.append(ListingLine(
            addr=start_address + len(program) - 1,
            word=last,
            text=f"DB {last:#04x}",
        ))
    return lines
