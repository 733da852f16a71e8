from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from assay import AssayResult, replication_assay
from census import PopStats, diversity_stats
from config import SoupConfig
from genome import as_population, create_initial_population, mutate_population
from metrics import MetricsTracker
from tape import HALT_REASONS, DEFAULT_STEP_LIMIT, TapeRun, interact_with_trace


@dataclass
class StepResult:
    stats: dict
    events: list[str]
    census: Optional[PopStats] = None
    assay: Optional[AssayResult] = None


def pair_indices(pop_size: int, rng: np.random.Generator) -> np.ndarray:
    """Random disjoint pairs as an (n // 2, 2) array; an odd index out sits this epoch out."""
    perm = rng.permutation(int(pop_size))
    usable = perm.size - (perm.size % 2)
    return perm[:usable].reshape(-1, 2)


def run_epoch(
    population: np.ndarray,
    rng: np.random.Generator,
    step_limit: int = DEFAULT_STEP_LIMIT,
) -> list[TapeRun]:
    traces: list[TapeRun] = []
    for i, j in pair_indices(population.shape[0], rng).tolist():
        a = population[i].copy()
        b = population[j].copy()
        na, nb, trace = interact_with_trace(a, b, step_limit=step_limit)
        population[i] = na
        population[j] = nb
        traces.append(trace)
    return traces


class SoupEngine:
    def __init__(
        self,
        cfg: SoupConfig,
        rng: Optional[np.random.Generator] = None,
        population: Optional[np.ndarray] = None,
    ):
        cfg.validate()
        self.cfg = cfg
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        if population is None:
            self.population = create_initial_population(cfg.pop_size, cfg.genome_len, self.rng)
        else:
            self.population = as_population(population, cfg.pop_size, cfg.genome_len)
        self.epoch = 0
        self.metrics = MetricsTracker()

    def census(self) -> PopStats:
        return diversity_stats(self.population)

    def assay(self, template: np.ndarray) -> AssayResult:
        return replication_assay(
            template,
            self.rng,
            trials=self.cfg.assay_trials,
            step_limit=self.cfg.step_limit,
            either_half=self.cfg.assay_either_half,
        )

    def step(self) -> StepResult:
        cfg = self.cfg
        epoch = self.epoch
        events: list[str] = []

        traces = run_epoch(self.population, self.rng, step_limit=cfg.step_limit)
        mutations = mutate_population(self.population, self.rng, cfg.mutation_rate)

        halts = {reason: 0 for reason in HALT_REASONS}
        for t in traces:
            halts[t.halt] += 1
        vm_steps = int(sum(t.steps for t in traces))
        stats: dict = {
            "epoch": int(epoch),
            "interactions": len(traces),
            "vm_steps": vm_steps,
            "steps_per_interaction": float(vm_steps / max(len(traces), 1)),
            "mutations": int(mutations),
            "census": 0,
            "assay": 0,
        }
        for reason, count in halts.items():
            stats[f"halt_{reason}"] = int(count)

        pop_stats: Optional[PopStats] = None
        assay_result: Optional[AssayResult] = None
        if epoch % cfg.report_every == 0:
            pop_stats = self.census()
            stats["census"] = 1
            stats["unique_count"] = pop_stats.unique_count
            stats["max_count"] = pop_stats.max_count
            if pop_stats.max_count >= cfg.replicator_threshold:
                assay_result = self.assay(pop_stats.dominant)
                stats["assay"] = 1
                stats["rate_as_first"] = assay_result.rate_as_first
                stats["rate_as_second"] = assay_result.rate_as_second
                events.append(
                    f"replicator@{epoch} count={pop_stats.max_count} "
                    f"ab={assay_result.rate_as_first:.3f} ba={assay_result.rate_as_second:.3f}"
                )

        self.epoch += 1
        self.metrics.update(stats, events)
        return StepResult(stats=stats, events=events, census=pop_stats, assay=assay_result)

    def run(self, epochs: int) -> list[StepResult]:
        out: list[StepResult] = []
        for _ in range(max(0, int(epochs))):
            out.append(self.step())
        return out
