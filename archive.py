from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import numpy as np

_EPOCH_RE = re.compile(r"^epoch\s+(\d+)\s*$")
_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})+$")


def genome_hex(genome: np.ndarray, n: Optional[int] = None) -> str:
    raw = np.asarray(genome, dtype=np.uint8).reshape(-1)
    if n is not None:
        raw = raw[: max(int(n), 0)]
    return raw.tobytes().hex()


def parse_genome_hex(text: str) -> np.ndarray:
    s = str(text).strip()
    if not _HEX_RE.match(s):
        raise ValueError(f"not a hex genome: {s[:40]!r}")
    return np.frombuffer(bytes.fromhex(s), dtype=np.uint8).copy()


def replicator_path(out_dir: str | Path, epoch: int) -> Path:
    return Path(out_dir) / f"replicator_epoch_{int(epoch)}.hex"


def write_replicator(out_dir: str | Path, epoch: int, genome: np.ndarray) -> Path:
    """Dump the full genome as hex under `out_dir`. I/O errors propagate."""
    path = replicator_path(out_dir, epoch)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"epoch {int(epoch)}\n{genome_hex(genome)}\n", encoding="utf-8")
    return path


def read_replicator(path: str | Path) -> tuple[int, np.ndarray]:
    lines = [ln.strip() for ln in Path(path).read_text(encoding="utf-8").splitlines() if ln.strip()]
    if len(lines) < 2:
        raise ValueError(f"replicator file too short: {path}")
    m = _EPOCH_RE.match(lines[0])
    if m is None:
        raise ValueError(f"missing epoch header in {path}: {lines[0][:40]!r}")
    return int(m.group(1)), parse_genome_hex(lines[1])
