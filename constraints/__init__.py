"""Gate definitions.

Each chip has its own ConstraintModule that defines its gates in readable
Python code. A gate is a function of a ConstraintContext returning named
constraint expressions, so the same code is evaluated over the whole table by
the mock prover and at single rows when debugging.
"""

from .base import (
    ConstraintContext,
    ConstraintModule,
    RecordingConstraintContext,
    RowConstraintContext,
    TableConstraintContext,
    rotated_row,
)
from .arithmetic import ArithmeticConstraints
from .merkle import MerkleConstraints
from .poseidon import PoseidonConstraints

__all__ = [
    "ConstraintContext",
    "TableConstraintContext",
    "RowConstraintContext",
    "RecordingConstraintContext",
    "ConstraintModule",
    "rotated_row",
    "PoseidonConstraints",
    "MerkleConstraints",
    "ArithmeticConstraints",
]
