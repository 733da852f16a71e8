from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from genome import random_genome
from tape import DEFAULT_STEP_LIMIT, interact


@dataclass
class AssayResult:
    trials: int
    successes_as_first: int
    successes_as_second: int

    @property
    def rate_as_first(self) -> float:
        return float(self.successes_as_first) / float(max(self.trials, 1))

    @property
    def rate_as_second(self) -> float:
        return float(self.successes_as_second) / float(max(self.trials, 1))

    def as_dict(self) -> dict:
        return {
            "trials": int(self.trials),
            "successes_as_first": int(self.successes_as_first),
            "successes_as_second": int(self.successes_as_second),
            "rate_as_first": self.rate_as_first,
            "rate_as_second": self.rate_as_second,
        }


def copied_into(
    template: np.ndarray,
    out_template_slot: np.ndarray,
    out_victim_slot: np.ndarray,
    either_half: bool = False,
) -> bool:
    if np.array_equal(out_victim_slot, template):
        return True
    # The template's own slot matches whenever the template leaves itself alone.
    return bool(either_half and np.array_equal(out_template_slot, template))


def replication_assay(
    template: np.ndarray,
    rng: np.random.Generator,
    trials: int,
    step_limit: int = DEFAULT_STEP_LIMIT,
    either_half: bool = False,
) -> AssayResult:
    """How often does `template` turn a random partner into an exact copy of itself?

    Each trial draws one victim and pits it against the template twice, with
    the template first on the tape and then second. By default a run counts
    when the victim's half comes back equal to the template. With
    `either_half=True` a match in the template's own half counts as well.
    """
    template = np.asarray(template, dtype=np.uint8).reshape(-1)
    genome_len = int(template.size)
    first = 0
    second = 0
    for _ in range(int(trials)):
        victim = random_genome(genome_len, rng)
        out_t, out_v = interact(template, victim, step_limit=step_limit)
        if copied_into(template, out_t, out_v, either_half=either_half):
            first += 1
        out_v, out_t = interact(victim, template, step_limit=step_limit)
        if copied_into(template, out_t, out_v, either_half=either_half):
            second += 1
    return AssayResult(trials=int(trials), successes_as_first=first, successes_as_second=second)
