from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SoupConfig:
    # Reproducibility
    seed: int = 42

    # Soup geometry
    genome_len: int = 64
    pop_size: int = 1024

    # Dynamics
    epochs: int = 2_000_000
    step_limit: int = 2048
    # try lowering this later to let species persist longer
    mutation_rate: float = 0.0002

    # Replicator detection
    replicator_threshold: int = 100
    assay_trials: int = 1000
    assay_either_half: bool = False

    # Logging
    report_every: int = 1000
    hex_prefix_len: int = 32

    @property
    def tape_len(self) -> int:
        return 2 * self.genome_len

    def validate(self) -> None:
        if self.genome_len < 1:
            raise ValueError("genome_len must be >= 1.")
        if self.pop_size < 2:
            raise ValueError("pop_size must be >= 2.")
        if self.epochs < 0:
            raise ValueError("epochs must be >= 0.")
        if self.step_limit < 0:
            raise ValueError("step_limit must be >= 0.")
        if not (0.0 <= self.mutation_rate <= 1.0):
            raise ValueError("mutation_rate must be in [0, 1].")
        if self.replicator_threshold < 1:
            raise ValueError("replicator_threshold must be >= 1.")
        if self.assay_trials < 1:
            raise ValueError("assay_trials must be >= 1.")
        if self.report_every < 1:
            raise ValueError("report_every must be >= 1.")
        if self.hex_prefix_len < 0:
            raise ValueError("hex_prefix_len must be >= 0.")
