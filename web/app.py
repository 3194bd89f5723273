"""FastAPI web adapter for the CHIP-8 interpreter."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional

from chip8 import run_program, RunOptions, disassemble
from chip8.memory import MAX_PROGRAM_SIZE, START_ADDRESS, MEMORY_SIZE


# Request/Response models
class RunOptionsModel(BaseModel):
    frames: int = Field(default=60, ge=1, le=3600)
    frame_time_us: int = Field(default=16666, ge=1, le=1_000_000)
    max_steps: int = Field(default=1_000_000, ge=1, le=10_000_000)
    seed: Optional[int] = None
    keys: list[int] = Field(default_factory=list)
    trace: bool = False
    trace_limit: int = Field(default=1000, ge=0, le=100_000)
    trace_include_registers: bool = False


class RunRequest(BaseModel):
    program: str  # hex encoded
    options: Optional[RunOptionsModel] = None


class DisassembleRequest(BaseModel):
    program: str  # hex encoded
    start_address: int = Field(default=START_ADDRESS, ge=0, lt=MEMORY_SIZE)


class RunResponse(BaseModel):
    status: str
    frames_executed: int
    steps_executed: int
    final_state: dict
    display: list[str]
    tone_active: bool
    trace: list[dict]
    error: Optional[dict] = None


class DisassembleResponse(BaseModel):
    lines: list[dict]


def _decode_program(text: str) -> bytes:
    """Parse a hex string (whitespace ignored) into program bytes."""
    try:
        program = bytes.fromhex("".join(text.split()))
    except ValueError:
        raise HTTPException(status_code=400, detail="Program is not valid hex")
    if len(program) > MAX_PROGRAM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Program size exceeds limit of {MAX_PROGRAM_SIZE} bytes",
        )
    return program


# Create FastAPI app
app = FastAPI(
    title="CHIP-8 Interpreter",
    description="Web API for running and disassembling CHIP-8 programs",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
def run_code(request: RunRequest):
    """Run a CHIP-8 program for a number of frames.

    Args:
        request: Hex-encoded program and execution options

    Returns:
        Execution result with final state, display rows and trace
    """
    program = _decode_program(request.program)
    opts = request.options or RunOptionsModel()

    run_opts = RunOptions(
        frames=opts.frames,
        frame_time_us=opts.frame_time_us,
        max_steps=opts.max_steps,
        seed=opts.seed,
        keys=opts.keys,
        trace=opts.trace,
        trace_limit=opts.trace_limit,
        trace_include_registers=opts.trace_include_registers,
    )

    result = run_program(program, options=run_opts)
    return result.to_dict()


@app.post("/api/disassemble", response_model=DisassembleResponse)
def disassemble_code(request: DisassembleRequest):
    """List each word of a program as assembly text."""
    program = _decode_program(request.program)
    lines = disassemble(program, start_address=request.start_address)
    return {"lines": [line.to_dict() for line in lines]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
