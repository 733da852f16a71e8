from __future__ import annotations

import math

import numpy as np
import pytest

from genome import as_population, create_initial_population, mutate_population, random_genome


def test_initial_population_shape_and_dtype():
    rng = np.random.default_rng(0)
    pop = create_initial_population(1024, 64, rng)
    assert pop.shape == (1024, 64)
    assert pop.dtype == np.uint8


def test_initial_population_is_roughly_uniform():
    rng = np.random.default_rng(1)
    pop = create_initial_population(512, 64, rng)
    counts = np.bincount(pop.reshape(-1), minlength=256)
    expected = pop.size / 256.0
    assert counts.min() > 0.5 * expected
    assert counts.max() < 1.5 * expected


def test_random_genome_length():
    rng = np.random.default_rng(2)
    g = random_genome(17, rng)
    assert g.shape == (17,)
    assert g.dtype == np.uint8


def test_as_population_copies_and_checks_shape():
    src = np.zeros((4, 2), dtype=np.uint8)
    pop = as_population(src, 4, 2)
    pop[0, 0] = 1
    assert src[0, 0] == 0
    with pytest.raises(ValueError):
        as_population(src, 4, 3)


def test_mutation_rate_zero_is_identity():
    rng = np.random.default_rng(3)
    pop = create_initial_population(8, 8, rng)
    before = pop.copy()
    assert mutate_population(pop, rng, 0.0) == 0
    assert np.array_equal(pop, before)


def test_mutation_rate_one_redraws_everything():
    rng = np.random.default_rng(4)
    pop = np.zeros((64, 64), dtype=np.uint8)
    hits = mutate_population(pop, rng, 1.0)
    assert hits == pop.size
    # about 1/256 of redraws land back on zero
    assert np.count_nonzero(pop) > 0.98 * pop.size


def test_mutation_fraction_converges_to_rate():
    rng = np.random.default_rng(5)
    p = 0.05
    pop = create_initial_population(2000, 64, rng)
    total = 0
    changed = 0
    trials = 5
    for _ in range(trials):
        before = pop.copy()
        total += mutate_population(pop, rng, p)
        changed += int(np.count_nonzero(pop != before))
    n = trials * pop.size
    se = math.sqrt(p * (1.0 - p) / n)
    assert abs(total / n - p) < 5.0 * se
    p_changed = p * 255.0 / 256.0
    se_changed = math.sqrt(p_changed * (1.0 - p_changed) / n)
    assert abs(changed / n - p_changed) < 5.0 * se_changed


def test_mutation_keeps_shape():
    rng = np.random.default_rng(6)
    pop = create_initial_population(10, 5, rng)
    mutate_population(pop, rng, 0.5)
    assert pop.shape == (10, 5)
    assert pop.dtype == np.uint8
