"""Ensure every mnemonic has a dedicated behavioral test."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import pytest

from chip8 import Interpreter
from chip8.decoder import MNEMONICS, decode


def expect_v(reg: int, value: int) -> Callable:
    def _check(vm):
        assert vm.cpu.v[reg] == value

    return _check


def expect_pc(value: int) -> Callable:
    def _check(vm):
        assert vm.cpu.pc == value

    return _check


def expect_index(value: int) -> Callable:
    def _check(vm):
        assert vm.cpu.index == value

    return _check


def expect_mem(addr: int, values: list[int]) -> Callable:
    def _check(vm):
        assert list(vm.memory.read_block(addr, len(values))) == values

    return _check


def expect_lit(count: int) -> Callable:
    def _check(vm):
        assert vm.display.lit_count() == count

    return _check


def expect_timers(delay: int, sound: int) -> Callable:
    def _check(vm):
        assert vm.cpu.delay_timer == delay
        assert vm.cpu.sound_timer == sound

    return _check


@dataclass
class InstructionCase:
    mnemonic: str
    words: list[int]
    checker: Callable
    steps: int = 0  # 0 means one step per word
    keys: list[int] = field(default_factory=list)


INSTRUCTION_CASES = [
    InstructionCase("CLS", [0xD015, 0x00E0], expect_lit(0)),
    InstructionCase("RET", [0x2204, 0x1200, 0x00EE], expect_pc(0x202), steps=2),
    InstructionCase("JP", [0x1300], expect_pc(0x300)),
    InstructionCase("CALL", [0x2300], expect_pc(0x300)),
    InstructionCase("SE_VX_NN", [0x3000], expect_pc(0x204), steps=1),
    InstructionCase("SNE_VX_NN", [0x4001], expect_pc(0x204), steps=1),
    InstructionCase("SE_VX_VY", [0x5010], expect_pc(0x204), steps=1),
    InstructionCase("LD_VX_NN", [0x6A07], expect_v(0xA, 7)),
    InstructionCase("ADD_VX_NN", [0x6005, 0x70FE], expect_v(0, 3)),
    InstructionCase("LD_VX_VY", [0x6109, 0x8010], expect_v(0, 9)),
    InstructionCase("OR", [0x600C, 0x6103, 0x8011], expect_v(0, 0xF)),
    InstructionCase("AND", [0x600C, 0x6106, 0x8012], expect_v(0, 4)),
    InstructionCase("XOR", [0x600C, 0x6106, 0x8013], expect_v(0, 0xA)),
    InstructionCase("ADD_VX_VY", [0x60FF, 0x6102, 0x8014], expect_v(0xF, 1)),
    InstructionCase("SUB", [0x6005, 0x6103, 0x8015], expect_v(0, 2)),
    InstructionCase("SHR", [0x6103, 0x8016], expect_v(0, 1)),
    InstructionCase("SUBN", [0x6003, 0x6105, 0x8017], expect_v(0, 2)),
    InstructionCase("SHL", [0x6181, 0x801E], expect_v(0, 2)),
    InstructionCase("SNE_VX_VY", [0x6101, 0x9010], expect_pc(0x206), steps=2),
    InstructionCase("LD_I", [0xA123], expect_index(0x123)),
    InstructionCase("JP_V0", [0x6004, 0xB300], expect_pc(0x304)),
    InstructionCase("RND", [0x60FF, 0xC000], expect_v(0, 0)),
    InstructionCase("DRW", [0xD015], expect_lit(14)),
    InstructionCase("SKP", [0x6004, 0xE09E], expect_pc(0x206), keys=[4]),
    InstructionCase("SKNP", [0xE0A1], expect_pc(0x204)),
    InstructionCase("LD_VX_DT", [0x6009, 0xF015, 0xF107], expect_v(1, 9)),
    InstructionCase("LD_VX_K", [0xF20A], expect_v(2, 7), keys=[7, 9]),
    InstructionCase("LD_DT_VX", [0x6009, 0xF015], expect_timers(9, 0)),
    InstructionCase("LD_ST_VX", [0x6009, 0xF018], expect_timers(0, 9)),
    InstructionCase("ADD_I_VX", [0xA100, 0x6010, 0xF01E], expect_index(0x110)),
    InstructionCase("LD_F_VX", [0x600F, 0xF029], expect_index(75)),
    InstructionCase("LD_B_VX", [0x6080, 0xA300, 0xF033], expect_mem(0x300, [1, 2, 8])),
    InstructionCase("LD_MEM_VX", [0x6001, 0x6102, 0xA300, 0xF155], expect_mem(0x300, [1, 2])),
    InstructionCase("LD_VX_MEM", [0xA000, 0xF165], expect_v(1, 0x90)),
]


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.mnemonic)
def test_all_instructions_have_behavioral_tests(case: InstructionCase):
    vm = Interpreter(seed=0)
    vm.load(b"".join(word.to_bytes(2, "big") for word in case.words))
    vm.keypad.set_state(case.keys)
    for _ in range(case.steps or len(case.words)):
        vm.step()
    case.checker(vm)


@pytest.mark.parametrize("case", INSTRUCTION_CASES, ids=lambda case: case.mnemonic)
def test_case_exercises_its_mnemonic(case: InstructionCase):
    assert case.mnemonic in {decode(word).mnemonic for word in case.words}


def test_instruction_case_coverage_matches_mnemonics():
    covered = {case.mnemonic for case in INSTRUCTION_CASES}
    assert covered == MNEMONICS
