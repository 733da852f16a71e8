from __future__ import annotations

from dataclasses import FrozenInstanceError, replace

import pytest

from config import SoupConfig


def test_defaults_validate():
    cfg = SoupConfig()
    cfg.validate()
    assert cfg.genome_len == 64
    assert cfg.pop_size == 1024
    assert cfg.step_limit == 2048
    assert cfg.tape_len == 128


def test_config_is_frozen():
    cfg = SoupConfig()
    with pytest.raises(FrozenInstanceError):
        cfg.pop_size = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "updates",
    [
        {"genome_len": 0},
        {"pop_size": 1},
        {"epochs": -1},
        {"step_limit": -1},
        {"mutation_rate": -0.1},
        {"mutation_rate": 1.5},
        {"replicator_threshold": 0},
        {"assay_trials": 0},
        {"report_every": 0},
        {"hex_prefix_len": -1},
    ],
)
def test_invalid_values_rejected(updates):
    with pytest.raises(ValueError):
        replace(SoupConfig(), **updates).validate()


def test_odd_population_is_allowed():
    replace(SoupConfig(), pop_size=5).validate()
