"""Base classes for gate evaluation.

ConstraintContext provides a uniform interface for gate evaluation that works
over many rows at once (returns arrays) and at a single row (returns scalars).
The same gate code serves both thanks to galois broadcasting, and a third
implementation records which cells a gate reads.

Example:
    def square(ctx: ConstraintContext):
        a = ctx.col('a')
        return [('square', a * a - ctx.next_col('a'))]

    # Mock prover: every enabled row at once (arrays)
    results = square(TableConstraintContext(assignment, rows))

    # Debugging a single row (scalars)
    results = square(RowConstraintContext(assignment, 17))
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Tuple, Union

import numpy as np

from primitives.field import FF, ZERO
from protocol.constraint_system import ConstraintSystem, Query
from protocol.data import Assignment

# Type aliases for clarity
FFPoly = FF    # Array of base field elements
NamedConstraints = List[Tuple[str, Union[FFPoly, FF]]]


def rotated_row(row, rotation: int, n_rows: int):
    """Row reached from `row` by `rotation`, wrapping around the table.

    Works on scalars and on numpy index arrays.
    """
    return (row + rotation) % n_rows


def rotation_in_table(row: int, rotation: int, n_rows: int) -> bool:
    """True if row + rotation lands inside the table without wrapping."""
    return 0 <= row + rotation < n_rows


class ConstraintContext(ABC):
    """Uniform interface for gate evaluation."""

    @abstractmethod
    def query(self, name: str, index: int = 0, rotation: int = 0) -> Union[FFPoly, FF]:
        """Get a column at a row offset from the current row.

        Args:
            name: Column name
            index: Column index within a multi-column group (default 0)
            rotation: Row offset (0 = current row, 1 = next, -1 = previous)

        Returns:
            Table context: array with one value per evaluated row
            Row context: scalar value at the evaluated row
        """
        pass

    def col(self, name: str, index: int = 0) -> Union[FFPoly, FF]:
        return self.query(name, index, 0)

    def next_col(self, name: str, index: int = 0) -> Union[FFPoly, FF]:
        return self.query(name, index, 1)

    def prev_col(self, name: str, index: int = 0) -> Union[FFPoly, FF]:
        return self.query(name, index, -1)


class TableConstraintContext(ConstraintContext):
    """Evaluates over many rows at once.

    With rows=None every row of the table is evaluated and rotations are
    circular shifts; otherwise only the given row indices are gathered.
    """

    def __init__(self, assignment: Assignment, rows: np.ndarray = None):
        self._assignment = assignment
        self._rows = rows

    def query(self, name: str, index: int = 0, rotation: int = 0) -> FFPoly:
        values = self._assignment.column(name, index)
        if self._rows is None:
            return np.roll(values, -rotation)
        return values[rotated_row(self._rows, rotation, self._assignment.n_rows)]


class RowConstraintContext(ConstraintContext):
    """Evaluates at a single row, returning scalars."""

    def __init__(self, assignment: Assignment, row: int):
        self._assignment = assignment
        self._row = row

    def query(self, name: str, index: int = 0, rotation: int = 0) -> FF:
        values = self._assignment.column(name, index)
        return values[rotated_row(self._row, rotation, self._assignment.n_rows)]


class RecordingConstraintContext(ConstraintContext):
    """Records every (column, rotation) a gate reads; all reads return zero."""

    def __init__(self, cs: ConstraintSystem):
        self._cs = cs
        self.queries: List[Query] = []

    def query(self, name: str, index: int = 0, rotation: int = 0) -> FF:
        q = Query(self._cs.column(name, index), rotation)
        if q not in self.queries:
            self.queries.append(q)
        return ZERO


class ConstraintModule(ABC):
    """Per-chip gate definitions.

    Each chip has a constraint module holding the column names and constants
    its gates need. The module's gates are registered with a ConstraintSystem
    by the chip and evaluated by the mock prover through a ConstraintContext.
    """

    @abstractmethod
    def gates(self) -> Dict[str, Callable[[ConstraintContext], NamedConstraints]]:
        """Gate name -> evaluation function, in registration order."""
        pass
