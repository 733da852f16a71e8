from __future__ import annotations

import numpy as np
import pytest

from archive import genome_hex, parse_genome_hex, read_replicator, replicator_path, write_replicator


def test_genome_hex_prefix():
    g = np.array([0, 1, 171, 255], dtype=np.uint8)
    assert genome_hex(g) == "0001abff"
    assert genome_hex(g, 2) == "0001"
    assert genome_hex(g, 0) == ""
    assert genome_hex(g, 99) == "0001abff"


def test_parse_genome_hex():
    assert parse_genome_hex(" 0001ABff\n").tolist() == [0, 1, 171, 255]
    with pytest.raises(ValueError):
        parse_genome_hex("abc")
    with pytest.raises(ValueError):
        parse_genome_hex("zz")


def test_write_replicator_layout(tmp_path):
    g = np.arange(64, dtype=np.uint8)
    path = write_replicator(tmp_path / "out", 12000, g)
    assert path == replicator_path(tmp_path / "out", 12000)
    assert path.name == "replicator_epoch_12000.hex"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == ["epoch 12000", genome_hex(g)]


def test_read_replicator_back(tmp_path):
    g = np.random.default_rng(0).integers(0, 256, size=(64,), dtype=np.uint8)
    path = write_replicator(tmp_path, 7, g)
    epoch, genome = read_replicator(path)
    assert epoch == 7
    assert np.array_equal(genome, g)


def test_read_replicator_rejects_garbage(tmp_path):
    bad = tmp_path / "bad.hex"
    bad.write_text("hello\n00ff\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_replicator(bad)
    short = tmp_path / "short.hex"
    short.write_text("epoch 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_replicator(short)


def test_write_replicator_propagates_io_errors(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(OSError):
        write_replicator(blocker / "sub", 1, np.zeros((4,), dtype=np.uint8))
