"""Shared fixtures for the test suite."""

import random
import sys
from pathlib import Path

import pytest

# Add the repository root to the path so absolute imports work
# (tests/ is inside the repository root, so parent is the root)
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from primitives.poseidon_spec import (  # noqa: E402
    PoseidonSpec,
    generate_mds,
    generate_round_constants,
    p128_pow5_t3,
)

# (width, full_rounds, partial_rounds, element_size, pad)
POSEIDON_VARIANTS = {
    "w2-full-only": (2, 2, 0, 1, []),
    "w4-padded": (4, 4, 3, 1, [1, 0]),
}


def make_spec(width: int, full_rounds: int, partial_rounds: int, element_size: int, pad) -> PoseidonSpec:
    return PoseidonSpec.create(
        width=width,
        full_rounds=full_rounds,
        partial_rounds=partial_rounds,
        mds=generate_mds(width),
        round_constants=generate_round_constants(width, full_rounds + partial_rounds),
        capacity=2 ** 65,
        pad=pad,
        element_size=element_size,
    )


@pytest.fixture(scope="session")
def spec():
    """Width-3 Poseidon with element size 2 (no padding)."""
    return p128_pow5_t3()


@pytest.fixture(scope="session")
def spec_i1():
    """Width-3 Poseidon with element size 1 and pad [1]."""
    return p128_pow5_t3(element_size=1)


@pytest.fixture(scope="session", params=sorted(POSEIDON_VARIANTS))
def variant_spec(request):
    """Small Poseidon instances with other widths, round counts and pads."""
    return make_spec(*POSEIDON_VARIANTS[request.param])


@pytest.fixture(scope="session")
def padded_spec():
    """Width 4, element size 1, pad [1, 0], 4 full and 3 partial rounds."""
    return make_spec(*POSEIDON_VARIANTS["w4-padded"])


@pytest.fixture
def rng():
    return random.Random(0x5EED)
