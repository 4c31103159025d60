"""Plain Merkle inclusion paths built with the reference sponge.

A path of depth n is stored as n + 1 node pairs, leaf level first:

    level 0:      (left[0], right[0])   one of them is the leaf
    level i:      (left[i], right[i])   one of them is hash(level i-1)
    level n:      (root, root)

index[0] says which side of pair 0 is the leaf; index[i] (i >= 1) says which
side of pair i holds the hash of pair i - 1. Circuits of maximum depth M pad
the path to M + 1 levels by repeating the root pair.
"""

import random
from dataclasses import dataclass, field
from typing import List

from primitives.errors import ConfigurationError
from primitives.field import ff_ints
from primitives.poseidon import hash_pair
from primitives.poseidon_spec import PoseidonSpec


@dataclass
class MerklePath:
    """Node pairs of a Merkle path plus the side bits.

    Attributes:
        left: n + 1 left nodes, each element_size ints
        right: n + 1 right nodes, each element_size ints
        index: side bits; index[0] selects the leaf, index[i] the hash side of
            level i. May be longer than n + 1 (bits past the root are unused).
    """
    left: List[List[int]]
    right: List[List[int]]
    index: List[int] = field(default_factory=list)

    def __post_init__(self):
        if len(self.left) != len(self.right) or len(self.left) == 0:
            raise ConfigurationError(
                f"left and right must have the same non-zero length, "
                f"got {len(self.left)} and {len(self.right)}"
            )

    @property
    def depth(self) -> int:
        return len(self.left) - 1

    def leaf(self) -> List[int]:
        bit = self.index[0] if self.index else 0
        return list(self.right[0] if bit else self.left[0])

    def root(self) -> List[int]:
        return list(self.left[self.depth])

    def padded(self, max_depth: int):
        """(left, right) extended to max_depth + 1 levels with copies of the root pair."""
        if self.depth > max_depth:
            raise ConfigurationError(f"path depth {self.depth} exceeds maximum {max_depth}")
        extra = max_depth - self.depth
        left = [list(node) for node in self.left] + [list(self.left[-1]) for _ in range(extra)]
        right = [list(node) for node in self.right] + [list(self.right[-1]) for _ in range(extra)]
        return left, right

    def copy_flags(self, max_depth: int) -> List[int]:
        """0 for the n genuine hash levels, 1 for the root level and its duplicates."""
        if self.depth > max_depth:
            raise ConfigurationError(f"path depth {self.depth} exceeds maximum {max_depth}")
        return [0] * self.depth + [1] * (max_depth + 1 - self.depth)

    def index_flags(self, max_depth: int) -> List[int]:
        """Side bits of levels 0..max_depth-1, zero-filled past the stored bits."""
        bits = [int(b) for b in self.index[:max_depth]]
        return bits + [0] * (max_depth - len(bits))

    def public_inputs(self, max_depth: int) -> List[int]:
        """Instance column contents: leaf, index flags of levels 0..M-1, root."""
        return self.leaf() + self.index_flags(max_depth) + self.root()

    def verify(self, spec: PoseidonSpec) -> bool:
        """Recompute every level from the previous one with the reference hash."""
        for i in range(1, self.depth + 1):
            expected = ff_ints(hash_pair(self.left[i - 1], self.right[i - 1], spec))
            bit = self.index[i] if i < len(self.index) else 0
            actual = self.right[i] if bit else self.left[i]
            if [int(v) for v in actual] != expected:
                return False
        return list(self.left[self.depth]) == list(self.right[self.depth])


def random_node(spec: PoseidonSpec, rng: random.Random) -> List[int]:
    """element_size random 128-bit values."""
    return [rng.getrandbits(128) for _ in range(spec.element_size)]


def gen_merkle_path(spec: PoseidonSpec, n: int, m: int, rng: random.Random = None) -> MerklePath:
    """Random path of depth n with side bits for every level below m.

    Siblings are random 128-bit values; the last level is the duplicated root.
    For n = 0 the single pair is (leaf, leaf).
    """
    if n > m:
        raise ConfigurationError(f"path depth {n} exceeds maximum {m}")
    rng = rng if rng is not None else random.Random()
    index = [rng.getrandbits(1) for _ in range(m)]

    if n == 0:
        leaf = random_node(spec, rng)
        return MerklePath(left=[leaf], right=[list(leaf)], index=index)

    left = [random_node(spec, rng)]
    right = [random_node(spec, rng)]
    for i in range(1, n + 1):
        digest = ff_ints(hash_pair(left[i - 1], right[i - 1], spec))
        sibling = random_node(spec, rng) if i < n else list(digest)
        if i < len(index) and index[i]:
            left.append(sibling)
            right.append(digest)
        else:
            left.append(digest)
            right.append(sibling)
    return MerklePath(left=left, right=right, index=index)
