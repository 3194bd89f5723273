"""CPU state model for the CHIP-8 interpreter."""

from .errors import StackOverflow, StackUnderflow
from .memory import START_ADDRESS

REGISTER_COUNT = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF


class CPU:
    """Register file, index register, program counter, call stack and timers."""

    def __init__(self, start_address: int = START_ADDRESS, stack_size: int = STACK_SIZE):
        self.stack_size = stack_size

        # Registers
        self.v: list[int] = [0] * REGISTER_COUNT
        self.index: int = 0
        self.pc: int = start_address
        self.stack: list[int] = []
        self.delay_timer: int = 0
        self.sound_timer: int = 0

    def set_v(self, x: int, value: int) -> None:
        """Set Vx, wrapping to 8 bits."""
        self.v[x] = value & 0xFF

    def set_flag(self, value: int) -> None:
        """Set VF."""
        self.v[FLAG_REGISTER] = value & 0xFF

    def set_index(self, value: int) -> None:
        """Set I, wrapping to 16 bits."""
        self.index = value & 0xFFFF

    def set_pc(self, value: int) -> None:
        """Set PC, wrapping to 16 bits."""
        self.pc = value & 0xFFFF

    def skip(self) -> None:
        """Skip the next instruction."""
        self.set_pc(self.pc + 2)

    def push(self, addr: int) -> None:
        """Push a return address."""
        if len(self.stack) >= self.stack_size:
            raise StackOverflow(f"Call stack overflow: depth {self.stack_size} exceeded")
        self.stack.append(addr & 0xFFFF)

    def pop(self) -> int:
        """Pop a return address."""
        if not self.stack:
            raise StackUnderflow("Return with empty call stack")
        return self.stack.pop()

    def tick_timers(self) -> None:
        """Decrement both timers by one, stopping at zero."""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    @property
    def tone_active(self) -> bool:
        return self.sound_timer > 0

    def get_state(self) -> dict:
        """Get current register state as dictionary."""
        return {
            "v": list(self.v),
            "i": self.index,
            "pc": self.pc,
            "sp": len(self.stack),
            "stack": list(self.stack),
            "dt": self.delay_timer,
            "st": self.sound_timer,
        }

    def reset(self, start_address: int = START_ADDRESS) -> None:
        """Reset CPU to initial state."""
        self.v = [0] * REGISTER_COUNT
        self.index = 0
        self.pc = start_address
        self.stack = []
        self.delay_timer = 0
        self.sound_timer = 0
