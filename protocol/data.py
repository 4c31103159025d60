"""Assignment table produced by synthesis and read by constraint contexts.

Architecture Overview:
    The Layouter records cell values sparsely while regions are assigned.
    Once synthesis finishes they are materialised into an Assignment: one FF
    array of n_rows entries per column, keyed by (name, index), plus selector
    masks and the list of copy constraints.

    Constraint contexts (constraints/base.py) read columns from an Assignment
    either over many rows at once (TableConstraintContext) or at a single row
    (RowConstraintContext).

Usage:
    description = synthesize_circuit(circuit, instance)
    value = description.assignment.value(column, row)
    description.assignment.set(column, row, value)   # tamper in tests
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from primitives.field import FF, to_ff
from protocol.constraint_system import Column

# Type aliases
FFPoly = FF    # Array of base field elements, one per row


@dataclass(frozen=True)
class Cell:
    """A single (column, row) position in the table."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"


@dataclass
class Assignment:
    """Dense assignment table.

    Attributes:
        n_rows: Table height (2^k)
        columns: Column values keyed by (name, index), advice, fixed and instance
        assigned: Advice assigned-cell masks keyed by (name, index)
        selectors: Boolean enable masks keyed by selector name
        copies: Pairs of cells that must hold equal values
    """
    n_rows: int
    columns: Dict[Tuple[str, int], FFPoly] = field(default_factory=dict)
    assigned: Dict[Tuple[str, int], np.ndarray] = field(default_factory=dict)
    selectors: Dict[str, np.ndarray] = field(default_factory=dict)
    copies: List[Tuple[Cell, Cell]] = field(default_factory=list)

    def column(self, name: str, index: int = 0) -> FFPoly:
        return self.columns[(name, index)]

    def value(self, column: Column, row: int) -> FF:
        return self.columns[column.key][row]

    def set(self, column: Column, row: int, value) -> None:
        """Overwrite one cell (used to tamper with a witness in tests)."""
        self.columns[column.key][row] = to_ff(value)

    def is_assigned(self, column: Column, row: int) -> bool:
        mask = self.assigned.get(column.key)
        return True if mask is None else bool(mask[row])

    def selector_rows(self, name: str) -> np.ndarray:
        return np.flatnonzero(self.selectors[name])
