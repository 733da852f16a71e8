from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

DEFAULT_STEP_LIMIT = 2048

# Opcodes. Every other byte value is a no-op.
OP_HEAD0_RIGHT = ord(">")
OP_HEAD0_LEFT = ord("<")
OP_HEAD1_RIGHT = ord("}")
OP_HEAD1_LEFT = ord("{")
OP_INC = ord("+")
OP_DEC = ord("-")
OP_EXPORT = ord(".")
OP_IMPORT = ord(",")
OP_OPEN = ord("[")
OP_CLOSE = ord("]")

HALT_STEP_LIMIT = "step_limit"
HALT_IP_OUT_OF_RANGE = "ip_out_of_range"
HALT_UNMATCHED_OPEN = "unmatched_open"
HALT_UNMATCHED_CLOSE = "unmatched_close"

HALT_REASONS = (
    HALT_STEP_LIMIT,
    HALT_IP_OUT_OF_RANGE,
    HALT_UNMATCHED_OPEN,
    HALT_UNMATCHED_CLOSE,
)


@dataclass
class TapeRun:
    steps: int
    halt: str


def match_forward(tape: bytes | bytearray, ip: int) -> Optional[int]:
    """Index of the `]` closing the `[` at `ip`, or None if the tape ends first."""
    depth = 1
    for pos in range(ip + 1, len(tape)):
        b = tape[pos]
        if b == OP_OPEN:
            depth += 1
        elif b == OP_CLOSE:
            depth -= 1
            if depth == 0:
                return pos
    return None


def match_backward(tape: bytes | bytearray, ip: int) -> Optional[int]:
    """Index of the `[` opening the `]` at `ip`, or None if the tape start is hit first."""
    depth = 1
    for pos in range(ip - 1, -1, -1):
        b = tape[pos]
        if b == OP_CLOSE:
            depth += 1
        elif b == OP_OPEN:
            depth -= 1
            if depth == 0:
                return pos
    return None


def run_tape(tape: bytearray, step_limit: int = DEFAULT_STEP_LIMIT) -> TapeRun:
    """Execute `tape` in place as a program over itself.

    head0 starts on the first byte and head1 on the first byte of the second
    half. Heads wrap around the tape; the instruction pointer does not, and the
    run stops as soon as it leaves the tape. Brackets that fail to match stop
    the run as well. Nothing here raises: any byte string is a valid program.
    """
    n = len(tape)
    ip = 0
    head0 = 0
    head1 = n // 2
    steps = 0
    halt = HALT_STEP_LIMIT
    while steps < step_limit:
        if ip >= n:
            halt = HALT_IP_OUT_OF_RANGE
            break
        op = tape[ip]
        if op == OP_HEAD0_RIGHT:
            head0 = (head0 + 1) % n
            ip += 1
        elif op == OP_HEAD0_LEFT:
            head0 = (head0 - 1) % n
            ip += 1
        elif op == OP_HEAD1_RIGHT:
            head1 = (head1 + 1) % n
            ip += 1
        elif op == OP_HEAD1_LEFT:
            head1 = (head1 - 1) % n
            ip += 1
        elif op == OP_INC:
            tape[head0] = (tape[head0] + 1) & 0xFF
            ip += 1
        elif op == OP_DEC:
            tape[head0] = (tape[head0] - 1) & 0xFF
            ip += 1
        elif op == OP_EXPORT:
            tape[head1] = tape[head0]
            ip += 1
        elif op == OP_IMPORT:
            tape[head0] = tape[head1]
            ip += 1
        elif op == OP_OPEN:
            if tape[head0] == 0:
                pos = match_forward(tape, ip)
                if pos is None:
                    halt = HALT_UNMATCHED_OPEN
                    break
                ip = pos + 1
            else:
                ip += 1
        elif op == OP_CLOSE:
            if tape[head0] != 0:
                pos = match_backward(tape, ip) if ip > 0 else None
                if pos is None:
                    halt = HALT_UNMATCHED_CLOSE
                    break
                ip = pos + 1
            else:
                ip += 1
        else:
            ip += 1
        steps += 1
    return TapeRun(steps=steps, halt=halt)


def interact_with_trace(
    a: np.ndarray,
    b: np.ndarray,
    step_limit: int = DEFAULT_STEP_LIMIT,
) -> tuple[np.ndarray, np.ndarray, TapeRun]:
    a = np.asarray(a, dtype=np.uint8).reshape(-1)
    b = np.asarray(b, dtype=np.uint8).reshape(-1)
    if a.size != b.size:
        raise ValueError(f"genome lengths differ: {a.size} != {b.size}")
    genome_len = int(a.size)
    tape = bytearray(a.tobytes() + b.tobytes())
    trace = run_tape(tape, step_limit=step_limit)
    out = np.frombuffer(bytes(tape), dtype=np.uint8)
    return out[:genome_len].copy(), out[genome_len:].copy(), trace


def interact(
    a: np.ndarray,
    b: np.ndarray,
    step_limit: int = DEFAULT_STEP_LIMIT,
) -> tuple[np.ndarray, np.ndarray]:
    """Concatenate two genomes, run the tape, split it back.

    `a` occupies the first half of the tape and `b` the second, so operand
    order matters: head1 starts at the beginning of `b`.
    """
    out_a, out_b, _ = interact_with_trace(a, b, step_limit=step_limit)
    return out_a, out_b
