"""Pytest configuration for the gadget tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add the repository root to the path so absolute imports work
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from ecc import num_windows  # noqa: E402
from ecc.chip.constants import FixedBase  # noqa: E402
from tests.helpers import find_toy_curve  # noqa: E402


@pytest.fixture(scope="session")
def toy_curve():
    """A small prime-order curve with a = 0 and non-square b (see helpers)."""
    return find_toy_curve()


@pytest.fixture(scope="session")
def toy_base(toy_curve):
    """Fixed-base tables of the toy generator for full-width scalars."""
    return FixedBase.from_generator(
        toy_curve, toy_curve.generator, num_windows(toy_curve.q.bit_length()), name="toy_g"
    )


@pytest.fixture(scope="session")
def toy_short_base(toy_curve):
    """Fixed-base tables of the toy generator for short scalars."""
    return FixedBase.from_generator(
        toy_curve, toy_curve.generator, num_windows(toy_curve.short_scalar_bits), name="toy_g_short"
    )


@pytest.fixture
def rng():
    return np.random.default_rng(0x5EED)
