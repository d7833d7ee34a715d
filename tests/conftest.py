from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def store_dir(tmp_path, monkeypatch):
    d = tmp_path / "maps"
    monkeypatch.setenv("FLOORGRID_MAPS_DIR", str(d))
    return d


@pytest.fixture
def rng():
    return np.random.default_rng(7)
