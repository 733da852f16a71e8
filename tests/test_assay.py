from __future__ import annotations

import numpy as np

from assay import AssayResult, copied_into, replication_assay

SELF_COPIER = np.frombuffer(b"[.>}]xyz", dtype=np.uint8).copy()


def test_rates_within_unit_interval():
    rng = np.random.default_rng(0)
    template = rng.integers(0, 256, size=(16,), dtype=np.uint8)
    result = replication_assay(template, rng, trials=50)
    assert result.trials == 50
    assert 0.0 <= result.rate_as_first <= 1.0
    assert 0.0 <= result.rate_as_second <= 1.0


def test_step_limit_zero_never_copies():
    rng = np.random.default_rng(1)
    template = rng.integers(0, 256, size=(16,), dtype=np.uint8)
    result = replication_assay(template, rng, trials=200, step_limit=0)
    assert result.successes_as_first == 0
    assert result.successes_as_second == 0


def test_step_limit_zero_with_either_half_counts_template_slot():
    rng = np.random.default_rng(2)
    template = rng.integers(0, 256, size=(16,), dtype=np.uint8)
    result = replication_assay(template, rng, trials=20, step_limit=0, either_half=True)
    assert result.rate_as_first == 1.0
    assert result.rate_as_second == 1.0


def test_step_limit_zero_counts_victim_equal_to_template():
    # one-byte genomes: the victim sometimes is the template already
    rng = np.random.default_rng(3)
    template = np.array([200], dtype=np.uint8)
    result = replication_assay(template, rng, trials=2000, step_limit=0)
    assert result.successes_as_first == result.successes_as_second
    assert result.successes_as_first > 0
    assert result.rate_as_first < 0.05


def test_self_copier_infects_as_first_operand():
    rng = np.random.default_rng(4)
    result = replication_assay(SELF_COPIER, rng, trials=100)
    assert result.rate_as_first == 1.0


def test_same_seed_same_result():
    template = SELF_COPIER
    r1 = replication_assay(template, np.random.default_rng(9), trials=64)
    r2 = replication_assay(template, np.random.default_rng(9), trials=64)
    assert r1 == r2


def test_copied_into():
    t = np.array([1, 2], dtype=np.uint8)
    other = np.array([3, 4], dtype=np.uint8)
    assert copied_into(t, other, t)
    assert not copied_into(t, t, other)
    assert copied_into(t, t, other, either_half=True)


def test_as_dict():
    res = AssayResult(trials=4, successes_as_first=1, successes_as_second=3)
    d = res.as_dict()
    assert d["rate_as_first"] == 0.25
    assert d["rate_as_second"] == 0.75
    assert d["trials"] == 4
