from __future__ import annotations

import numpy as np


def random_genome(genome_len: int, rng: np.random.Generator) -> np.ndarray:
    return rng.integers(0, 256, size=(int(genome_len),), dtype=np.uint8)


def create_initial_population(
    pop_size: int,
    genome_len: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Row i is genome i; every byte is uniform over [0, 255]."""
    return rng.integers(0, 256, size=(int(pop_size), int(genome_len)), dtype=np.uint8)


def as_population(population: np.ndarray, pop_size: int, genome_len: int) -> np.ndarray:
    pop = np.asarray(population)
    if pop.shape != (int(pop_size), int(genome_len)):
        raise ValueError(
            f"population shape {pop.shape} does not match ({pop_size}, {genome_len})."
        )
    return np.array(pop, dtype=np.uint8, copy=True)


def mutate_population(population: np.ndarray, rng: np.random.Generator, rate: float) -> int:
    """Radiation: resample each byte independently with probability `rate`.

    Works in place. A resampled byte can land on its old value, so the number
    returned (positions redrawn) is an upper bound on bytes actually changed.
    """
    if rate <= 0.0:
        return 0
    mask = rng.random(population.shape) < float(rate)
    hits = int(np.count_nonzero(mask))
    if hits:
        population[mask] = rng.integers(0, 256, size=(hits,), dtype=np.uint8)
    return hits
