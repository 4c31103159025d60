"""Merkle path placement gates.

Column layout (I = node size in field elements):
    node[0..I-1]  advice, left / right / hash nodes on consecutive rows
    copy_flag     advice, copy[i] on the hash row of level i
    index_flag    advice, side bit of level i+1 on the hash row of level i

Per level i < M the path region holds

    row 3i      left[i]
    row 3i+1    right[i]
    row 3i+2    hash[i]   copy[i]   index[i+1]

and Copy_Hash (selector on row 3i+2) reads rotations -2..+3:

    copy, copy', index boolean
    copy * (1 - copy') = 0                                    (monotone)
    (1 - copy) * (hash - (1 - index) * left' - index * right') = 0
    copy * (left - left') = 0,  copy * (right - right') = 0

PUB_SELECT (selector on row 0 of the leaf region: left, right, leaf rows):

    (1 - index) * (left - leaf) + index * (right - leaf) = 0
    index boolean, copy = 0
"""

from typing import Callable, Dict

from primitives.field import ONE
from .base import ConstraintContext, ConstraintModule, NamedConstraints


def boolean(x):
    return x * (ONE - x)


class MerkleConstraints(ConstraintModule):
    """Gate definitions for one Merkle path chip.

    Args:
        node_size: Field elements per node (I)
        node, copy, index: Column group names
    """

    def __init__(self, node_size: int, node: str = "node", copy: str = "copy_flag", index: str = "index_flag"):
        self.node_size = node_size
        self.node = node
        self.copy = copy
        self.index = index

    def gates(self) -> Dict[str, Callable[[ConstraintContext], NamedConstraints]]:
        return {
            "Copy_Hash": self.copy_hash,
            "PUB_SELECT": self.pub_select,
        }

    def copy_hash(self, ctx: ConstraintContext) -> NamedConstraints:
        copy = ctx.col(self.copy)
        copy_next = ctx.query(self.copy, 0, 3)
        index = ctx.col(self.index)

        constraints = [
            ("copy boolean", boolean(copy)),
            ("next copy boolean", boolean(copy_next)),
            ("index boolean", boolean(index)),
            ("copy monotone", copy * (ONE - copy_next)),
        ]
        for k in range(self.node_size):
            left = ctx.query(self.node, k, -2)
            right = ctx.query(self.node, k, -1)
            digest = ctx.col(self.node, k)
            left_next = ctx.query(self.node, k, 1)
            right_next = ctx.query(self.node, k, 2)

            placed = (ONE - index) * left_next + index * right_next
            constraints.append((f"hash[{k}]", (ONE - copy) * (digest - placed)))
            constraints.append((f"copy left[{k}]", copy * (left - left_next)))
            constraints.append((f"copy right[{k}]", copy * (right - right_next)))
        return constraints

    def pub_select(self, ctx: ConstraintContext) -> NamedConstraints:
        index = ctx.query(self.index, 0, 2)
        constraints = []
        for k in range(self.node_size):
            left = ctx.col(self.node, k)
            right = ctx.next_col(self.node, k)
            leaf = ctx.query(self.node, k, 2)
            constraints.append((f"leaf[{k}]", (ONE - index) * (left - leaf) + index * (right - leaf)))
        constraints.append(("index boolean", boolean(index)))
        constraints.append(("copy zero", ctx.query(self.copy, 0, 2)))
        return constraints
