"""Primitives - field arithmetic, Poseidon parameters and reference hashing."""

from primitives.errors import ConfigurationError
from primitives.field import (
    FF,
    ONE,
    PALLAS_GENERATOR,
    PALLAS_PRIME,
    SBOX_DEGREE,
    ZERO,
    ff_ints,
    pow5,
    to_ff,
    to_ff_array,
)
from primitives.merkle_path import MerklePath, gen_merkle_path
from primitives.poseidon import hash_pair, permute, sponge_hash
from primitives.poseidon_spec import PoseidonSpec, p128_pow5_t3

__all__ = [
    # Errors
    "ConfigurationError",
    # Field
    "FF",
    "ZERO",
    "ONE",
    "PALLAS_PRIME",
    "PALLAS_GENERATOR",
    "SBOX_DEGREE",
    "to_ff",
    "to_ff_array",
    "ff_ints",
    "pow5",
    # Poseidon
    "PoseidonSpec",
    "p128_pow5_t3",
    "permute",
    "sponge_hash",
    "hash_pair",
    # Merkle
    "MerklePath",
    "gen_merkle_path",
]
