"""Protocol - PLONKish constraint system, layout and mock proving.

protocol.mock_prover is imported directly by callers: it depends on
constraints.base, which itself imports from this package.
"""

from protocol.constraint_system import (
    Column,
    ColumnKind,
    ConstraintSystem,
    Gate,
    Query,
    Selector,
)
from protocol.data import Assignment, Cell
from protocol.layouter import AssignedCell, Layouter, Region
from protocol.circuit import Circuit, CircuitDescription, rows_to_k, synthesize_circuit

__all__ = [
    # Constraint system
    "Column",
    "ColumnKind",
    "ConstraintSystem",
    "Gate",
    "Query",
    "Selector",
    # Assignment
    "Assignment",
    "Cell",
    # Layout
    "AssignedCell",
    "Layouter",
    "Region",
    # Synthesis
    "Circuit",
    "CircuitDescription",
    "rows_to_k",
    "synthesize_circuit",
]
