from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class PopStats:
    unique_count: int
    max_count: int
    dominant: np.ndarray


def diversity_stats(population: np.ndarray) -> PopStats:
    """Count distinct genomes and find the most frequent one.

    np.unique sorts rows lexicographically and argmax keeps the first maximum,
    so ties go to the smallest genome. Any consistent choice would do.
    """
    pop = np.asarray(population, dtype=np.uint8)
    if pop.ndim != 2:
        raise ValueError(f"population must be 2-D, got shape {pop.shape}.")
    if pop.shape[0] == 0:
        return PopStats(
            unique_count=0,
            max_count=0,
            dominant=np.zeros((pop.shape[1],), dtype=np.uint8),
        )
    uniq, counts = np.unique(pop, axis=0, return_counts=True)
    best = int(np.argmax(counts))
    return PopStats(
        unique_count=int(uniq.shape[0]),
        max_count=int(counts[best]),
        dominant=uniq[best].copy(),
    )


def genome_counts(population: np.ndarray, top: int = 0) -> list[tuple[bytes, int]]:
    """(genome bytes, count) pairs, most frequent first."""
    pop = np.asarray(population, dtype=np.uint8)
    if pop.ndim != 2 or pop.shape[0] == 0:
        return []
    uniq, counts = np.unique(pop, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")
    if top > 0:
        order = order[:top]
    return [(uniq[i].tobytes(), int(counts[i])) for i in order.tolist()]
