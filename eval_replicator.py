#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import time
from pathlib import Path
from typing import Any

import numpy as np

from archive import genome_hex, read_replicator
from assay import replication_assay
from tape import DEFAULT_STEP_LIMIT, interact_with_trace


def _expand_paths(items: list[str]) -> list[Path]:
    out: list[Path] = []
    for item in items:
        path = Path(item)
        if path.is_dir():
            out.extend(sorted(path.glob("replicator_epoch_*.hex")))
        else:
            out.append(path)
    if not out:
        raise ValueError("No replicator files found.")
    return out


def _evaluate_replicator(
    path: Path,
    trials: int,
    step_limit: int,
    either_half: bool,
    seed: int,
) -> dict[str, Any]:
    epoch, genome = read_replicator(path)
    rng = np.random.default_rng(seed)
    result = replication_assay(
        genome,
        rng,
        trials=trials,
        step_limit=step_limit,
        either_half=either_half,
    )
    # Self-interaction: does the genome survive meeting a copy of itself?
    self_a, self_b, self_run = interact_with_trace(genome, genome, step_limit=step_limit)
    return {
        "path": str(path),
        "epoch": int(epoch),
        "genome": genome_hex(genome),
        "genome_len": int(genome.size),
        "assay": result.as_dict(),
        "self_stable": bool(np.array_equal(self_a, genome) and np.array_equal(self_b, genome)),
        "self_steps": int(self_run.steps),
        "self_halt": self_run.halt,
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Re-run the replication assay on saved replicator genomes")
    p.add_argument("paths", nargs="+", help="replicator .hex files or directories holding them")
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--trials", type=int, default=1000)
    p.add_argument("--step-limit", type=int, default=DEFAULT_STEP_LIMIT)
    p.add_argument("--either-half", action="store_true")
    p.add_argument("--output-json", type=str, default=None)
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.trials < 1:
        raise ValueError("--trials must be >= 1")
    if args.step_limit < 0:
        raise ValueError("--step-limit must be >= 0")

    paths = _expand_paths(list(args.paths))
    t0 = time.time()
    results: list[dict[str, Any]] = []
    for idx, path in enumerate(paths):
        res = _evaluate_replicator(
            path,
            trials=int(args.trials),
            step_limit=int(args.step_limit),
            either_half=bool(args.either_half),
            seed=int(args.seed) + idx,
        )
        results.append(res)
        print(
            f"{path.name} epoch={res['epoch']} "
            f"infect_as_A->B={res['assay']['rate_as_first']:.3f} "
            f"infect_as_B->A={res['assay']['rate_as_second']:.3f} "
            f"self_stable={int(res['self_stable'])} self_halt={res['self_halt']}"
        )

    elapsed = time.time() - t0
    print(f"replicator-eval done files={len(results)} trials={args.trials} elapsed={elapsed:.2f}s")

    if args.output_json:
        out = {
            "seed": int(args.seed),
            "trials": int(args.trials),
            "step_limit": int(args.step_limit),
            "either_half": bool(args.either_half),
            "elapsed_sec": float(elapsed),
            "results": results,
        }
        out_path = Path(args.output_json)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(out, indent=2, ensure_ascii=True), encoding="utf-8")
        print(f"wrote {out_path}")


if __name__ == "__main__":
    main()
