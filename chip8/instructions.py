"""Instruction execution for the CHIP-8 interpreter."""

import random
from dataclasses import dataclass, field
from typing import Callable
from .cpu import CPU
from .decoder import Instruction
from .display import Display
from .keypad import Keypad
from .memory import Memory, font_address


@dataclass
class Devices:
    """Peripherals an instruction may touch besides CPU and memory."""
    display: Display = field(default_factory=Display)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)


# Abstract cost of each instruction in microseconds, used only for pacing.
# Values are the reference interpreter timings, so 8xyN outranks JP and RND.
INSTRUCTION_COSTS: dict[str, int] = {
    "CLS": 109,
    "RET": 105,
    "JP": 105,
    "CALL": 105,
    "SE_VX_NN": 55,
    "SNE_VX_NN": 55,
    "SE_VX_VY": 73,
    "LD_VX_NN": 27,
    "ADD_VX_NN": 45,
    "LD_VX_VY": 200,
    "OR": 200,
    "AND": 200,
    "XOR": 200,
    "ADD_VX_VY": 200,
    "SUB": 200,
    "SHR": 200,
    "SUBN": 200,
    "SHL": 200,
    "SNE_VX_VY": 73,
    "LD_I": 55,
    "JP_V0": 105,
    "RND": 164,
    "DRW": 22734,
    "SKP": 73,
    "SKNP": 73,
    "LD_VX_DT": 45,
    "LD_VX_K": 100,
    "LD_DT_VX": 45,
    "LD_ST_VX": 45,
    "ADD_I_VX": 86,
    "LD_F_VX": 91,
    "LD_B_VX": 927,
    "LD_MEM_VX": 605,
    "LD_VX_MEM": 605,
}


# Instruction executor type
InstructionExecutor = Callable[[Instruction, CPU, Memory, Devices], None]


def execute_cls(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """00E0: clear the display"""
    io.display.clear()


def execute_ret(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """00EE: PC := pop()"""
    cpu.set_pc(cpu.pop())


def execute_jp(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """1nnn: PC := nnn"""
    cpu.set_pc(instr.nnn)


def execute_call(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """2nnn: push(PC), PC := nnn"""
    cpu.push(cpu.pc)
    cpu.set_pc(instr.nnn)


def execute_se_vx_nn(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """3xnn: skip if Vx == nn"""
    if cpu.v[instr.x] == instr.nn:
        cpu.skip()


def execute_sne_vx_nn(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """4xnn: skip if Vx != nn"""
    if cpu.v[instr.x] != instr.nn:
        cpu.skip()


def execute_se_vx_vy(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """5xy0: skip if Vx == Vy"""
    if cpu.v[instr.x] == cpu.v[instr.y]:
        cpu.skip()


def execute_ld_vx_nn(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """6xnn: Vx := nn"""
    cpu.set_v(instr.x, instr.nn)


def execute_add_vx_nn(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """7xnn: Vx := Vx + nn (no carry flag)"""
    cpu.set_v(instr.x, cpu.v[instr.x] + instr.nn)


def execute_ld_vx_vy(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy0: Vx := Vy"""
    cpu.set_v(instr.x, cpu.v[instr.y])


def execute_or(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy1: Vx := Vx OR Vy, VF := 0"""
    cpu.set_v(instr.x, cpu.v[instr.x] | cpu.v[instr.y])
    cpu.set_flag(0)


def execute_and(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy2: Vx := Vx AND Vy, VF := 0"""
    cpu.set_v(instr.x, cpu.v[instr.x] & cpu.v[instr.y])
    cpu.set_flag(0)


def execute_xor(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy3: Vx := Vx XOR Vy, VF := 0"""
    cpu.set_v(instr.x, cpu.v[instr.x] ^ cpu.v[instr.y])
    cpu.set_flag(0)


def execute_add_vx_vy(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy4: Vx := Vx + Vy, VF := carry"""
    total = cpu.v[instr.x] + cpu.v[instr.y]
    cpu.set_v(instr.x, total)
    cpu.set_flag(1 if total > 0xFF else 0)


def execute_sub(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy5: Vx := Vx - Vy, VF := NOT borrow"""
    vx, vy = cpu.v[instr.x], cpu.v[instr.y]
    cpu.set_v(instr.x, vx - vy)
    cpu.set_flag(1 if vx >= vy else 0)


def execute_shr(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy6: Vx := Vy >> 1, VF := bit shifted out"""
    vy = cpu.v[instr.y]
    cpu.set_v(instr.x, vy >> 1)
    cpu.set_flag(vy & 0x01)


def execute_subn(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xy7: Vx := Vy - Vx, VF := NOT borrow"""
    vx, vy = cpu.v[instr.x], cpu.v[instr.y]
    cpu.set_v(instr.x, vy - vx)
    cpu.set_flag(1 if vy >= vx else 0)


def execute_shl(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """8xyE: Vx := Vy << 1, VF := bit shifted out"""
    vy = cpu.v[instr.y]
    cpu.set_v(instr.x, vy << 1)
    cpu.set_flag((vy >> 7) & 0x01)


def execute_sne_vx_vy(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """9xy0: skip if Vx != Vy"""
    if cpu.v[instr.x] != cpu.v[instr.y]:
        cpu.skip()


def execute_ld_i(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Annn: I := nnn"""
    cpu.set_index(instr.nnn)


def execute_jp_v0(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Bnnn: PC := V0 + nnn"""
    cpu.set_pc(cpu.v[0] + instr.nnn)


def execute_rnd(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Cxnn: Vx := random byte AND nn"""
    cpu.set_v(instr.x, io.rng.randrange(256) & instr.nn)


def execute_drw(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Dxyn: XOR an n-row sprite from [I] at (Vx, Vy), VF := collision"""
    sprite = mem.read_block(cpu.index, instr.n)
    collision = io.display.draw_sprite(cpu.v[instr.x], cpu.v[instr.y], sprite)
    cpu.set_flag(1 if collision else 0)


def execute_skp(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Ex9E: skip if key Vx is down"""
    if io.keypad.is_pressed(cpu.v[instr.x] & 0xF):
        cpu.skip()


def execute_sknp(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """ExA1: skip if key Vx is up"""
    if not io.keypad.is_pressed(cpu.v[instr.x] & 0xF):
        cpu.skip()


def execute_ld_vx_dt(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx07: Vx := DT"""
    cpu.set_v(instr.x, cpu.delay_timer)


def execute_ld_vx_k(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx0A: Vx := first pressed key, or re-run this instruction next step"""
    key = io.keypad.first_pressed()
    if key is None:
        cpu.set_pc(cpu.pc - 2)
    else:
        cpu.set_v(instr.x, key)


def execute_ld_dt_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx15: DT := Vx"""
    cpu.delay_timer = cpu.v[instr.x]


def execute_ld_st_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx18: ST := Vx"""
    cpu.sound_timer = cpu.v[instr.x]


def execute_add_i_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx1E: I := I + Vx (16-bit wrap, VF untouched)"""
    cpu.set_index(cpu.index + cpu.v[instr.x])


def execute_ld_f_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx29: I := address of font glyph for the low nibble of Vx"""
    cpu.set_index(font_address(cpu.v[instr.x]))


def execute_ld_b_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx33: [I], [I+1], [I+2] := BCD digits of Vx"""
    vx = cpu.v[instr.x]
    mem.write_block(cpu.index, (vx // 100, (vx // 10) % 10, vx % 10))


def execute_ld_mem_vx(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx55: [I..I+x] := V0..Vx, then I := I + 1"""
    mem.write_block(cpu.index, cpu.v[:instr.x + 1])
    cpu.set_index(cpu.index + 1)


def execute_ld_vx_mem(instr: Instruction, cpu: CPU, mem: Memory, io: Devices) -> None:
    """Fx65: V0..Vx := [I..I+x], then I := I + 1"""
    for offset, value in enumerate(mem.read_block(cpu.index, instr.x + 1)):
        cpu.set_v(offset, value)
    cpu.set_index(cpu.index + 1)


# Instruction dispatch table
INSTRUCTION_EXECUTORS: dict[str, InstructionExecutor] = {
    "CLS": execute_cls,
    "RET": execute_ret,
    "JP": execute_jp,
    "CALL": execute_call,
    "SE_VX_NN": execute_se_vx_nn,
    "SNE_VX_NN": execute_sne_vx_nn,
    "SE_VX_VY": execute_se_vx_vy,
    "LD_VX_NN": execute_ld_vx_nn,
    "ADD_VX_NN": execute_add_vx_nn,
    "LD_VX_VY": execute_ld_vx_vy,
    "OR": execute_or,
    "AND": execute_and,
    "XOR": execute_xor,
    "ADD_VX_VY": execute_add_vx_vy,
    "SUB": execute_sub,
    "SHR": execute_shr,
    "SUBN": execute_subn,
    "SHL": execute_shl,
    "SNE_VX_VY": execute_sne_vx_vy,
    "LD_I": execute_ld_i,
    "JP_V0": execute_jp_v0,
    "RND": execute_rnd,
    "DRW": execute_drw,
    "SKP": execute_skp,
    "SKNP": execute_sknp,
    "LD_VX_DT": execute_ld_vx_dt,
    "LD_VX_K": execute_ld_vx_k,
    "LD_DT_VX": execute_ld_dt_vx,
    "LD_ST_VX": execute_ld_st_vx,
    "ADD_I_VX": execute_add_i_vx,
    "LD_F_VX": execute_ld_f_vx,
    "LD_B_VX": execute_ld_b_vx,
    "LD_MEM_VX": execute_ld_mem_vx,
    "LD_VX_MEM": execute_ld_vx_mem,
}


def execute_instruction(
    instr: Instruction,
    cpu: CPU,
    mem: Memory,
    io: Devices,
) -> int:
    """Execute a single decoded instruction.

    Returns:
        Abstract cost of the instruction in microseconds
    """
    executor = INSTRUCTION_EXECUTORS.get(instr.mnemonic)
    if executor is None:
        raise ValueError(f"No executor for mnemonic: {instr.mnemonic}")
    executor(instr, cpu, mem, io)
    return INSTRUCTION_COSTS[instr.mnemonic]
