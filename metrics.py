from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from tape import HALT_REASONS


def _zero_halts() -> Dict[str, int]:
    return {reason: 0 for reason in HALT_REASONS}


@dataclass
class MetricsTracker:
    epochs: int = 0
    cumulative_interactions: int = 0
    cumulative_vm_steps: int = 0
    cumulative_mutations: int = 0
    cumulative_halts: Dict[str, int] = field(default_factory=_zero_halts)
    censuses: int = 0
    replicator_events: int = 0
    last_unique_count: int = -1
    min_unique_count: int = -1
    last_max_count: int = 0
    peak_max_count: int = 0
    peak_max_count_epoch: int = -1
    last_rate_as_first: float = 0.0
    last_rate_as_second: float = 0.0
    best_rate: float = 0.0
    last_events: List[str] = field(default_factory=list)

    def update(self, step_stats: Dict[str, float | int], events: list[str]) -> None:
        self.epochs += 1
        self.cumulative_interactions += int(step_stats.get("interactions", 0))
        self.cumulative_vm_steps += int(step_stats.get("vm_steps", 0))
        self.cumulative_mutations += int(step_stats.get("mutations", 0))
        for reason in HALT_REASONS:
            self.cumulative_halts[reason] += int(step_stats.get(f"halt_{reason}", 0))

        if int(step_stats.get("census", 0)):
            self.censuses += 1
            unique = int(step_stats.get("unique_count", 0))
            max_count = int(step_stats.get("max_count", 0))
            self.last_unique_count = unique
            if self.min_unique_count < 0 or unique < self.min_unique_count:
                self.min_unique_count = unique
            self.last_max_count = max_count
            if max_count > self.peak_max_count:
                self.peak_max_count = max_count
                self.peak_max_count_epoch = int(step_stats.get("epoch", -1))

        if int(step_stats.get("assay", 0)):
            self.replicator_events += 1
            self.last_rate_as_first = float(step_stats.get("rate_as_first", 0.0))
            self.last_rate_as_second = float(step_stats.get("rate_as_second", 0.0))
            self.best_rate = max(self.best_rate, self.last_rate_as_first, self.last_rate_as_second)

        if events:
            self.last_events.extend(events)
            self.last_events = self.last_events[-16:]

    def snapshot(self) -> dict:
        interactions = max(float(self.cumulative_interactions), 1.0)
        epochs = max(float(self.epochs), 1.0)
        return {
            "epochs": self.epochs,
            "interactions": self.cumulative_interactions,
            "vm_steps": self.cumulative_vm_steps,
            "mutations": self.cumulative_mutations,
            "steps_per_interaction": self.cumulative_vm_steps / interactions,
            "mutations_per_epoch": self.cumulative_mutations / epochs,
            "halts": dict(self.cumulative_halts),
            "censuses": self.censuses,
            "replicator_events": self.replicator_events,
            "last_unique_count": self.last_unique_count,
            "min_unique_count": self.min_unique_count,
            "last_max_count": self.last_max_count,
            "peak_max_count": self.peak_max_count,
            "peak_max_count_epoch": self.peak_max_count_epoch,
            "last_rate_as_first": self.last_rate_as_first,
            "last_rate_as_second": self.last_rate_as_second,
            "best_rate": self.best_rate,
            "last_events": list(self.last_events[-8:]),
        }
