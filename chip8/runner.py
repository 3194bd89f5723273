"""Frame scheduler and traced program runner for the CHIP-8 interpreter."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional
from .errors import Chip8Error, ErrorInfo, StepLimitExceeded
from .interpreter import Interpreter

logger = logging.getLogger(__name__)

FRAME_RATE = 60  # hz
FRAME_TIME_US = 1_000_000 // FRAME_RATE

StepCallback = Callable[[Interpreter, int], None]


@dataclass
class RunOptions:
    """Options for program execution."""
    frames: int = 60
    frame_time_us: int = FRAME_TIME_US
    max_steps: int = 1_000_000
    seed: Optional[int] = None
    keys: list[int] = field(default_factory=list)
    trace: bool = False
    trace_limit: int = 1000
    trace_include_registers: bool = False


@dataclass
class TraceRow:
    """Single row of execution trace."""
    step: int
    frame: int
    addr: int
    word: int
    cost: int
    instr_text: str = ""
    v: Optional[list[int]] = None
    i: Optional[int] = None

    def to_dict(self, include_registers: bool) -> dict:
        result = {
            "step": self.step,
            "frame": self.frame,
            "addr": self.addr,
            "word": f"{self.word:04X}",
            "cost": self.cost,
            "instr_text": self.instr_text,
        }
        if include_registers:
            result["v"] = self.v
            result["i"] = self.i
        return result


@dataclass
class RunResult:
    """Result of program execution."""
    status: str  # "ok" | "error"
    frames_executed: int
    steps_executed: int
    final_state: dict
    display: list[str]
    tone_active: bool
    trace: list[dict]
    error: Optional[ErrorInfo] = None

    def to_dict(self) -> dict:
        result = {
            "status": self.status,
            "frames_executed": self.frames_executed,
            "steps_executed": self.steps_executed,
            "final_state": self.final_state,
            "display": self.display,
            "tone_active": self.tone_active,
            "trace": self.trace,
        }
        if self.error:
            result["error"] = self.error.to_dict()
        return result


def run_frame(
    interpreter: Interpreter,
    budget: int,
    on_step: Optional[StepCallback] = None,
    max_steps: Optional[int] = None,
) -> int:
    """Execute instructions until the frame's time budget is spent.

    Timers are not touched; the caller ticks them once per frame.

    Args:
        interpreter: Machine to advance
        budget: Time available this frame in microseconds, including any
            carry-over from the previous frame
        on_step: Called after each instruction with the interpreter and its cost
        max_steps: Total step count at which to stop with StepLimitExceeded

    Returns:
        Remaining budget (zero or negative), to carry into the next frame
    """
    while budget > 0:
        if max_steps is not None and interpreter.steps_executed >= max_steps:
            raise StepLimitExceeded(
                f"Step limit exceeded: {max_steps}",
                step=interpreter.steps_executed,
                addr=interpreter.cpu.pc,
            )
        cost = interpreter.step()
        budget -= cost
        if on_step is not None:
            on_step(interpreter, cost)
    return budget


def run_program(
    program: bytes,
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Load and run a CHIP-8 program for a fixed number of frames.

    Args:
        program: Raw program bytes, loaded at 0x200
        options: Execution options

    Returns:
        RunResult with execution status, final state, display and trace
    """
    if options is None:
        options = RunOptions()

    interpreter = Interpreter(seed=options.seed)
    trace_rows: list[dict] = []
    error_info: Optional[ErrorInfo] = None
    frames_executed = 0

    def record(vm: Interpreter, cost: int) -> None:
        if len(trace_rows) >= options.trace_limit:
            return
        instr = vm.last_instruction
        row = TraceRow(
            step=vm.steps_executed,
            frame=frames_executed,
            addr=instr.addr,
            word=instr.word,
            cost=cost,
            instr_text=instr.text,
            v=list(vm.cpu.v) if options.trace_include_registers else None,
            i=vm.cpu.index if options.trace_include_registers else None,
        )
        trace_rows.append(row.to_dict(include_registers=options.trace_include_registers))

    try:
        interpreter.load(program)
        interpreter.keypad.set_state(options.keys)

        budget = 0
        for _ in range(options.frames):
            budget += options.frame_time_us
            budget = run_frame(
                interpreter,
                budget,
                on_step=record if options.trace else None,
                max_steps=options.max_steps,
            )
            interpreter.timers()
            frames_executed += 1

    except Chip8Error as e:
        error_info = e.to_error_info()
        logger.warning("Run stopped at step %d: %s", e.step, e.message)

    logger.debug(
        "Ran %d frames, %d steps, status=%s",
        frames_executed,
        interpreter.steps_executed,
        "ok" if error_info is None else "error",
    )

    return RunResult(
        status="ok" if error_info is None else "error",
        frames_executed=frames_executed,
        steps_executed=interpreter.steps_executed,
        final_state=interpreter.get_state(),
        display=interpreter.display.to_text(),
        tone_active=interpreter.tone_active(),
        trace=trace_rows,
        error=error_info,
    )
