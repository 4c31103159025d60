"""Circuits - composition of chips into provable statements."""

from circuits.arithmetic_circuit import CubeDemoCircuit, MulDemoCircuit
from circuits.merkle_circuit import MerkleCircuitConfig, MerklePathCircuit
from circuits.poseidon_circuit import PoseidonCircuit, PoseidonCircuitConfig

__all__ = [
    "CubeDemoCircuit",
    "MulDemoCircuit",
    "MerkleCircuitConfig",
    "MerklePathCircuit",
    "PoseidonCircuit",
    "PoseidonCircuitConfig",
]
