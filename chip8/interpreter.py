"""The CHIP-8 virtual machine."""

import logging
import random
from typing import Optional
from .cpu import CPU
from .decoder import Instruction, decode
from .display import Display
from .errors import Chip8Error
from .instructions import Devices, execute_instruction
from .keypad import Keypad
from .memory import Memory, START_ADDRESS

logger = logging.getLogger(__name__)


class Interpreter:
    """Owns all machine state and runs it one instruction at a time.

    A scheduler drives it by calling :meth:`step` until a frame's time budget
    is used up, then :meth:`timers` once per frame.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.cpu = CPU(start_address=START_ADDRESS)
        self.memory = Memory()
        self.devices = Devices(rng=random.Random(seed))
        self.steps_executed = 0
        self.last_instruction: Optional[Instruction] = None

    @property
    def display(self) -> Display:
        return self.devices.display

    @property
    def keypad(self) -> Keypad:
        return self.devices.keypad

    def load(self, program: bytes) -> None:
        """Copy program bytes into memory at the entry address."""
        self.memory.load_program(bytes(program), START_ADDRESS)

    def decode_at(self, addr: int) -> Instruction:
        """Decode the word at an address without executing it."""
        return decode(self.memory.read_word(addr), addr)

    def peek(self) -> Instruction:
        """Decode the instruction the next step will execute."""
        return self.decode_at(self.cpu.pc)

    def step(self) -> int:
        """Fetch, decode and execute one instruction.

        Returns:
            Abstract cost of the executed instruction in microseconds
        """
        addr = self.cpu.pc
        word: Optional[int] = None
        instr: Optional[Instruction] = None
        try:
            word = self.memory.read_word(addr)
            self.cpu.set_pc(addr + 2)
            instr = decode(word, addr)
            cost = execute_instruction(instr, self.cpu, self.memory, self.devices)
        except Chip8Error as e:
            # Attach context to error
            e.step = self.steps_executed + 1
            e.addr = addr
            if e.word is None:
                e.word = word
            if instr is not None:
                e.instr_text = instr.text
            raise
        self.steps_executed += 1
        self.last_instruction = instr
        return cost

    def timers(self) -> None:
        """Tick the delay and sound timers; call once per display frame."""
        self.cpu.tick_timers()

    def tone_active(self) -> bool:
        return self.cpu.tone_active

    def get_state(self) -> dict:
        return self.cpu.get_state()

    def reset(self) -> None:
        """Return to the power-on state; the program must be loaded again."""
        self.cpu.reset(START_ADDRESS)
        self.memory.clear()
        self.display.clear()
        self.keypad.release_all()
        self.devices.rng.seed(self.seed)
        self.steps_executed = 0
        self.last_instruction = None
        logger.debug("Interpreter reset")
