"""Merkle inclusion proof of private depth n <= M.

Every level 0..M is hashed with the Poseidon chip (absorb left, absorb right,
squeeze I), whether or not it is a genuine level, so the gate layout depends
only on M and the spec. The Merkle chip then checks placement:

    instance rows 0..I-1         leaf
    instance rows I..I+M-1       index bits of levels 0..M-1
    instance rows M+I..M+2I-1    root

Example:
    path = gen_merkle_path(spec, n=16, m=32)
    circuit = MerklePathCircuit.from_path(spec, 32, path)
    MockProver.run(None, circuit, circuit.public_inputs(path)).assert_satisfied()
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from chips.merkle import MerklePathChip, MerklePathConfig
from chips.poseidon import PoseidonChip, PoseidonConfig
from primitives.errors import ConfigurationError
from primitives.merkle_path import MerklePath
from primitives.poseidon_spec import PoseidonSpec
from protocol.circuit import Circuit
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter

logger = logging.getLogger(__name__)


@dataclass
class MerkleCircuitConfig:
    merkle: MerklePathConfig
    poseidon: PoseidonConfig


class MerklePathCircuit(Circuit):
    """Merkle path circuit of maximum depth max_depth.

    Args:
        spec: Poseidon parameters; element_size is the node size I
        max_depth: M, at least 1
        left, right: The n + 1 real levels, leaf level first and (root, root)
            last. Up to M + 1 levels may be given; missing levels repeat the
            last pair.
        copy: M + 1 copy bits, default [0]*n + [1]*(M + 1 - n)

    Raises:
        ConfigurationError: On ragged or mismatched inputs, n > M or M < 1
    """

    def __init__(
        self,
        spec: PoseidonSpec,
        max_depth: int,
        left: Sequence[Sequence[int]],
        right: Sequence[Sequence[int]],
        copy: Sequence[int] = None,
    ):
        if max_depth < 1:
            raise ConfigurationError(f"max_depth must be at least 1, got {max_depth}")
        if len(left) != len(right) or len(left) == 0:
            raise ConfigurationError(
                f"left and right must have the same non-zero length, got {len(left)} and {len(right)}"
            )
        depth = len(left) - 1
        if depth > max_depth:
            raise ConfigurationError(f"path depth {depth} exceeds maximum {max_depth}")
        for node in list(left) + list(right):
            if len(node) != spec.element_size:
                raise ConfigurationError(
                    f"every node must have {spec.element_size} elements, got {len(node)}"
                )
        if copy is None:
            copy = [0] * depth + [1] * (max_depth + 1 - depth)
        if len(copy) != max_depth + 1:
            raise ConfigurationError(f"copy vector must have {max_depth + 1} entries, got {len(copy)}")

        extra = max_depth - depth
        self.spec = spec
        self.max_depth = max_depth
        self.depth = depth
        self.left = [[int(v) for v in node] for node in left] + [[int(v) for v in left[-1]]] * extra
        self.right = [[int(v) for v in node] for node in right] + [[int(v) for v in right[-1]]] * extra
        self.copy = [int(c) for c in copy]

    @classmethod
    def from_path(cls, spec: PoseidonSpec, max_depth: int, path: MerklePath) -> 'MerklePathCircuit':
        return cls(spec, max_depth, path.left, path.right, path.copy_flags(max_depth))

    def public_inputs(self, path: MerklePath) -> List[int]:
        """[leaf, index bits of levels 0..M-1, root]."""
        return path.public_inputs(self.max_depth)

    def configure(self, cs: ConstraintSystem) -> MerkleCircuitConfig:
        size = self.spec.element_size
        width = self.spec.width
        node = cs.advice_columns("node", size)
        copy_flag = cs.advice_column("copy_flag")
        index_flag = cs.advice_column("index_flag")
        state = cs.advice_columns("state", width)
        arc = cs.fixed_columns("arc", width)
        instance = cs.instance_column()

        return MerkleCircuitConfig(
            merkle=MerklePathChip.configure(cs, node, copy_flag, index_flag, instance),
            poseidon=PoseidonChip.configure(cs, self.spec, state, arc, instance),
        )

    def _chunk(self, node: List[int]) -> List[int]:
        return node + [int(v) for v in self.spec.pad]

    def synthesize(self, config: MerkleCircuitConfig, layouter: Layouter) -> None:
        size = self.spec.element_size
        m = self.max_depth
        poseidon = PoseidonChip(config.poseidon)
        merkle = MerklePathChip(config.merkle)

        left_nodes, right_nodes, hash_nodes = [], [], []
        for level in range(m + 1):
            state = poseidon.initiate(layouter)
            state, left = poseidon.absorb(layouter, state, self._chunk(self.left[level]))
            state, right = poseidon.absorb(layouter, state, self._chunk(self.right[level]))
            left_nodes.append(left[:size])
            right_nodes.append(right[:size])
            hash_nodes.append(poseidon.squeeze(layouter, state, size))

        merkle.load_leaves(layouter, left_nodes[0], right_nodes[0])
        root = merkle.load_path(layouter, left_nodes, right_nodes, hash_nodes[:m], self.copy, m, self.depth)
        merkle.expose_public(layouter, root, m + size)
        logger.debug("merkle circuit: depth %d of %d, %d rows", self.depth, m, layouter.rows_used())
