"""Merkle path chip.

The chip checks placement only: every node it sees was produced elsewhere (by
the Poseidon chip) and arrives through copy constraints. It proves that

    * the public leaf is one side of the level-0 pair (PUB_SELECT),
    * each hash sits on the side of the next pair named by the public index
      bit, until the copy phase starts (Copy_Hash),
    * once copy[i] = 1 every later pair duplicates pair i, so the root is the
      left node of the last pair whatever the private depth n.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from constraints.merkle import MerkleConstraints
from primitives.errors import ConfigurationError
from protocol.constraint_system import Column, ConstraintSystem, Selector
from protocol.layouter import AssignedCell, Layouter, Region

logger = logging.getLogger(__name__)

Node = List[AssignedCell]


@dataclass
class MerklePathConfig:
    """Columns and selectors of one Merkle path chip.

    Attributes:
        node: I advice columns holding left / right / hash nodes
        copy_flag: Advice column of copy bits
        index_flag: Advice column of side bits
        instance: Public input column
        s_copy_hash: Selector on every hash row
        s_pub_select: Selector on the first row of the leaf region
    """
    node: List[Column]
    copy_flag: Column
    index_flag: Column
    instance: Column
    s_copy_hash: Selector
    s_pub_select: Selector

    @property
    def node_size(self) -> int:
        return len(self.node)


class MerklePathChip:

    def __init__(self, config: MerklePathConfig):
        self.config = config

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        node: Sequence[Column],
        copy_flag: Column,
        index_flag: Column,
        instance: Column,
    ) -> MerklePathConfig:
        cs.enable_equality(instance)
        cs.enable_equality(index_flag)
        for column in node:
            cs.enable_equality(column)

        module = MerkleConstraints(len(node), node=node[0].name, copy=copy_flag.name, index=index_flag.name)
        selectors = {}
        for name, fn in module.gates().items():
            selectors[name] = cs.selector(name)
            cs.create_gate(name, selectors[name], fn)

        return MerklePathConfig(
            node=list(node),
            copy_flag=copy_flag,
            index_flag=index_flag,
            instance=instance,
            s_copy_hash=selectors["Copy_Hash"],
            s_pub_select=selectors["PUB_SELECT"],
        )

    def _check_node(self, node: Node, what: str) -> None:
        if len(node) != self.config.node_size:
            raise ConfigurationError(f"{what} has {len(node)} cells, expected {self.config.node_size}")

    def _copy_node(self, region: Region, node: Node, offset: int) -> Node:
        return [cell.copy_advice(region, self.config.node[k], offset) for k, cell in enumerate(node)]

    def load_leaves(self, layouter: Layouter, left: Node, right: Node) -> Node:
        """Bind the public leaf (instance rows 0..I-1) to one side of the level-0 pair.

        index[0] is read from instance row I.

        Returns:
            The leaf cells
        """
        config = self.config
        size = config.node_size
        self._check_node(left, "left leaf")
        self._check_node(right, "right leaf")

        def assign(region: Region) -> Node:
            region.enable_selector(config.s_pub_select, 0)
            self._copy_node(region, left, 0)
            self._copy_node(region, right, 1)
            leaf = [
                region.assign_advice_from_instance(config.instance, k, config.node[k], 2)
                for k in range(size)
            ]
            region.assign_advice_from_instance(config.instance, size, config.index_flag, 2)
            region.assign_advice(config.copy_flag, 2, 0)
            return leaf

        return layouter.assign_region("load leaves", assign)

    def load_path(
        self,
        layouter: Layouter,
        left: Sequence[Node],
        right: Sequence[Node],
        hash: Sequence[Node],
        copy: Sequence[int],
        m: int,
        n: int,
    ) -> Node:
        """Lay out the whole path and return the root node.

        Args:
            left, right: m + 1 node pairs, leaf level first
            hash: m digests, hash[i] = H(left[i] || right[i])
            copy: m + 1 copy bits
            m: Maximum depth
            n: Real depth (n <= m)

        Index bits of levels 1..m-1 come from instance rows I+1..I+m-1; the
        last hash row uses 0 since both sides of the root pair are equal.

        Raises:
            ConfigurationError: On any length mismatch or n > m
        """
        config = self.config
        size = config.node_size
        if len(left) != m + 1 or len(right) != m + 1 or len(copy) != m + 1:
            raise ConfigurationError(
                f"expected {m + 1} levels, got left={len(left)} right={len(right)} copy={len(copy)}"
            )
        if len(hash) != m:
            raise ConfigurationError(f"expected {m} hashes, got {len(hash)}")
        if n > m:
            raise ConfigurationError(f"path depth {n} exceeds maximum {m}")
        for i in range(m + 1):
            self._check_node(left[i], f"left[{i}]")
            self._check_node(right[i], f"right[{i}]")
        for i in range(m):
            self._check_node(hash[i], f"hash[{i}]")

        def assign(region: Region) -> Node:
            for i in range(m):
                base = 3 * i
                self._copy_node(region, left[i], base)
                self._copy_node(region, right[i], base + 1)
                self._copy_node(region, hash[i], base + 2)
                region.enable_selector(config.s_copy_hash, base + 2)
                region.assign_advice(config.copy_flag, base + 2, copy[i])
                if i + 1 < m:
                    region.assign_advice_from_instance(config.instance, size + i + 1, config.index_flag, base + 2)
                else:
                    region.assign_advice(config.index_flag, base + 2, 0)

            root = self._copy_node(region, left[m], 3 * m)
            # Both sides of the root pair must be the root itself
            root_right = self._copy_node(region, right[m], 3 * m + 1)
            for a, b in zip(root, root_right):
                region.constrain_equal(a, b)
            region.assign_advice(config.copy_flag, 3 * m + 2, copy[m])
            return root

        logger.debug("laying out merkle path: depth %d of %d", n, m)
        return layouter.assign_region("merkle path", assign)

    def expose_public(self, layouter: Layouter, node: Node, row: int) -> None:
        """Bind node[k] to instance row `row + k`."""
        for k, cell in enumerate(node):
            layouter.constrain_instance(cell, self.config.instance, row + k)
