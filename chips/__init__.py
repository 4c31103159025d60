"""Chips - reusable gadgets that own columns, gates and region layouts."""

from chips.arithmetic import ArithmeticChip, ArithmeticConfig
from chips.merkle import MerklePathChip, MerklePathConfig
from chips.poseidon import PoseidonChip, PoseidonConfig

__all__ = [
    "ArithmeticChip",
    "ArithmeticConfig",
    "MerklePathChip",
    "MerklePathConfig",
    "PoseidonChip",
    "PoseidonConfig",
]
