"""Pallas base field GF(p).

Uses galois library for all field arithmetic. FF is the field type; every cell
value, round constant and matrix entry in the circuits is an FF element.

The multiplicative generator is passed explicitly: galois would otherwise
search for a primitive root, which needs a full factorisation of p - 1.
"""

from typing import Iterable, List

import galois
import numpy as np

# --- Field Construction ---

PALLAS_PRIME = 0x40000000000000000000000000000000224698fc094cf91b992d30ed00000001
PALLAS_GENERATOR = 5

FF = galois.GF(PALLAS_PRIME, primitive_element=PALLAS_GENERATOR, verify=False)
"""Base field GF(p) - Pallas prime field (255 bits)."""

ZERO = FF(0)
ONE = FF(1)

# S-box exponent; must be coprime to p - 1
SBOX_DEGREE = 5


# --- Conversions ---

def to_ff(value) -> FF:
    """Reduce an int (possibly negative or >= p) into a field scalar."""
    return FF(int(value) % PALLAS_PRIME)


def to_ff_array(values: Iterable) -> FF:
    """Build an FF array from ints or field scalars, reducing mod p."""
    ints = [int(v) % PALLAS_PRIME for v in values]
    if not ints:
        return FF.Zeros(0)
    return FF(ints)


def ff_ints(values) -> List[int]:
    """Extract plain ints from an FF array (or any iterable of FF scalars)."""
    return [int(v) for v in values]


def pow5(x):
    """x^5 as x^4 * x, matching the multiplication count of the gate."""
    x2 = x * x
    return x2 * x2 * x


def nonzero_rows(values: FF) -> np.ndarray:
    """Indices of the non-zero entries of a field array."""
    return np.flatnonzero(np.asarray(values.view(np.ndarray)) != 0)
