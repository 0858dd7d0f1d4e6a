import random
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import lunch_grouper
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from lunch_grouper.optimizer.config import AnnealingParams, OptimizerConfig  # noqa: E402


# Common test fixtures
@pytest.fixture
def fast_params() -> AnnealingParams:
    """Short schedule: 44 temperature steps of 20 proposals."""
    return AnnealingParams(
        initial_temperature=10.0,
        cooling_rate=0.9,
        min_temperature=0.1,
        iterations_per_temperature=20,
    )


@pytest.fixture
def fast_config(fast_params) -> OptimizerConfig:
    """Seeded optimizer config with the short schedule."""
    return OptimizerConfig(params=fast_params, seed=1234)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(20240805)


@pytest.fixture
def eight_members() -> list[int]:
    return list(range(1, 9))


@pytest.fixture
def repeat_ledger() -> dict[str, int]:
    """Ledger where 1-4 and 5-8 always lunched together."""
    ledger = {}
    for group in ((1, 2, 3, 4), (5, 6, 7, 8)):
        for i, a in enumerate(group):
            for b in group[i + 1:]:
                ledger[f"{a}-{b}"] = 3
    return ledger
