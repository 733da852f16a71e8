#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict, replace
from pathlib import Path

from archive import genome_hex, write_replicator
from census import PopStats, genome_counts
from config import SoupConfig
from engine import SoupEngine, StepResult


def build_config_from_args(args: argparse.Namespace) -> SoupConfig:
    cfg = SoupConfig()
    updates = {}
    for key in [
        "seed",
        "genome_len",
        "pop_size",
        "epochs",
        "step_limit",
        "mutation_rate",
        "replicator_threshold",
        "assay_trials",
        "assay_either_half",
        "report_every",
        "hex_prefix_len",
    ]:
        val = getattr(args, key, None)
        if val is not None:
            updates[key] = val
    cfg = replace(cfg, **updates)
    cfg.validate()
    return cfg


def format_epoch_line(stats: dict) -> str:
    return (
        f"epoch {stats['epoch']:7d} unique_orgs={stats['unique_count']} max_count={stats['max_count']} "
        f"steps/int={stats['steps_per_interaction']:.1f} mut={stats['mutations']} "
        f"halts(lim/ip/open/close)={stats['halt_step_limit']}/{stats['halt_ip_out_of_range']}/"
        f"{stats['halt_unmatched_open']}/{stats['halt_unmatched_close']}"
    )


def format_dominant_line(census: PopStats, prefix_len: int) -> str:
    return f"  dominant (first{prefix_len} hex): {genome_hex(census.dominant, prefix_len)}"


def format_assay_line(epoch: int, rate_ab: float, rate_ba: float) -> str:
    return (
        f"  [assay epoch {epoch}] infect_as_A->B success_rate={rate_ab:.3f}  "
        f"infect_as_B->A success_rate={rate_ba:.3f}"
    )


def report_step(result: StepResult, cfg: SoupConfig, replicator_dir: Path | None) -> list[str]:
    """Console lines for one epoch; saves the dominant genome if it triggered an assay."""
    if result.census is None:
        return []
    epoch = int(result.stats["epoch"])
    lines = [
        format_epoch_line(result.stats),
        format_dominant_line(result.census, cfg.hex_prefix_len),
    ]
    if result.assay is not None:
        if replicator_dir is not None:
            path = write_replicator(replicator_dir, epoch, result.census.dominant)
            lines.append(f"  saved {path}")
        lines.append(format_assay_line(epoch, result.assay.rate_as_first, result.assay.rate_as_second))
    return lines


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="BFF primordial soup runner")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--genome-len", type=int, default=None)
    p.add_argument("--pop-size", type=int, default=None)
    p.add_argument("--epochs", type=int, default=None)
    p.add_argument("--step-limit", type=int, default=None)
    p.add_argument("--mutation-rate", type=float, default=None)
    p.add_argument("--replicator-threshold", type=int, default=None)
    p.add_argument("--assay-trials", type=int, default=None)
    p.add_argument("--assay-either-half", type=lambda s: s.lower() in {"1", "true", "yes", "on"}, default=None)
    p.add_argument("--report-every", type=int, default=None)
    p.add_argument("--hex-prefix-len", type=int, default=None)
    p.add_argument("--replicator-dir", type=str, default=".")
    p.add_argument("--no-save", action="store_true")
    p.add_argument("--top-k", type=int, default=8)
    p.add_argument("--output-json", type=str, default=None)
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.top_k < 0:
        raise ValueError("--top-k must be >= 0")

    cfg = build_config_from_args(args)
    engine = SoupEngine(cfg)
    replicator_dir = None if args.no_save else Path(args.replicator_dir)

    t0 = time.time()
    print(
        f"bff-soup start | seed={cfg.seed} | pop_size={cfg.pop_size} | genome_len={cfg.genome_len} | "
        f"tape_len={cfg.tape_len} | step_limit={cfg.step_limit} | mutation_rate={cfg.mutation_rate} | "
        f"epochs={cfg.epochs}"
    )

    for _ in range(cfg.epochs):
        result = engine.step()
        for line in report_step(result, cfg, replicator_dir):
            print(line)

    snap = engine.metrics.snapshot()
    elapsed = time.time() - t0
    final_census = engine.census()
    print(
        f"done epochs={snap['epochs']} elapsed={elapsed:.2f}s unique_orgs={final_census.unique_count} "
        f"max_count={final_census.max_count} peak_max_count={snap['peak_max_count']} "
        f"replicators={snap['replicator_events']} best_rate={snap['best_rate']:.3f} "
        f"steps/int={snap['steps_per_interaction']:.1f}"
    )

    if args.output_json:
        final = {
            "config": asdict(cfg),
            "elapsed_sec": elapsed,
            "unique_count": final_census.unique_count,
            "max_count": final_census.max_count,
            "dominant": genome_hex(final_census.dominant),
            "top_genomes": [
                {"genome": raw.hex(), "count": count}
                for raw, count in genome_counts(engine.population, top=int(args.top_k))
            ]
            if args.top_k > 0
            else [],
            "metrics": snap,
        }
        out = Path(args.output_json)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(final, indent=2, ensure_ascii=True), encoding="utf-8")
        print(f"wrote {out}")


if __name__ == "__main__":
    main()
