"""Region-based row assignment.

Chips never pick absolute rows. They open a region, assign cells at offsets
relative to the region start, and the Layouter stacks regions one after the
other (a simple floor planner: each region starts where the previous one
ended). Cells assigned in different regions are tied together with copy
constraints.

Values are recorded sparsely as ints while synthesis runs and turned into a
dense Assignment by finalize().
"""

import logging
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from primitives.errors import ConfigurationError
from primitives.field import FF, PALLAS_PRIME
from protocol.constraint_system import Column, ColumnKind, ConstraintSystem, Selector
from protocol.data import Assignment, Cell

logger = logging.getLogger(__name__)


class AssignedCell:
    """A cell holding a known value, returned by every assignment."""

    def __init__(self, cell: Cell, value: int):
        self.cell = cell
        self.value = value

    @property
    def column(self) -> Column:
        return self.cell.column

    @property
    def row(self) -> int:
        return self.cell.row

    def copy_advice(self, region: 'Region', column: Column, offset: int) -> 'AssignedCell':
        """Assign this cell's value at (column, offset) in region and tie the two cells."""
        copied = region.assign_advice(column, offset, self.value)
        region.constrain_equal(self, copied)
        return copied

    def __repr__(self) -> str:
        return f"AssignedCell({self.cell}, {hex(self.value)})"


class Region:
    """Rows [start, start + height) of the table owned by one assign_region call."""

    def __init__(self, layouter: 'Layouter', name: str, start: int):
        self._layouter = layouter
        self.name = name
        self.start = start
        self.height = 0

    def _row(self, offset: int) -> int:
        if offset < 0:
            raise ConfigurationError(f"negative offset {offset} in region {self.name}")
        self.height = max(self.height, offset + 1)
        return self.start + offset

    def assign_advice(self, column: Column, offset: int, value) -> AssignedCell:
        if column.kind != ColumnKind.ADVICE:
            raise ConfigurationError(f"{column} is not an advice column")
        row = self._row(offset)
        value = int(value) % PALLAS_PRIME
        self._layouter.record(column, row, value)
        return AssignedCell(Cell(column, row), value)

    def assign_fixed(self, column: Column, offset: int, value) -> None:
        if column.kind != ColumnKind.FIXED:
            raise ConfigurationError(f"{column} is not a fixed column")
        self._layouter.record(column, self._row(offset), int(value) % PALLAS_PRIME)

    def enable_selector(self, selector: Selector, offset: int) -> None:
        self._layouter.enable(selector, self._row(offset))

    def assign_advice_from_instance(
        self, instance: Column, instance_row: int, column: Column, offset: int
    ) -> AssignedCell:
        """Copy a public input into an advice cell."""
        value = self._layouter.instance_value(instance, instance_row)
        assigned = self.assign_advice(column, offset, value)
        self._layouter.constrain_cells(Cell(instance, instance_row), assigned.cell)
        return assigned

    def constrain_equal(self, a: AssignedCell, b: AssignedCell) -> None:
        self._layouter.constrain_cells(a.cell, b.cell)


class Layouter:
    """Simple floor planner over one ConstraintSystem.

    Args:
        cs: Configured constraint system
        instance: Public input values per instance column key
    """

    def __init__(self, cs: ConstraintSystem, instance: Dict[Tuple[str, int], Sequence[int]] = None):
        self.cs = cs
        self.instance = {key: [int(v) % PALLAS_PRIME for v in values] for key, values in (instance or {}).items()}
        self.next_row = 0
        self.regions: List[Region] = []
        self._values: Dict[Tuple[str, int], Dict[int, int]] = {}
        self._enabled: Dict[str, set] = {name: set() for name in cs.selectors}
        self._copies: List[Tuple[Cell, Cell]] = []

    # --- Region API ---

    def assign_region(self, name: str, fn: Callable[[Region], object]):
        """Run fn on a fresh region placed after all earlier regions."""
        region = Region(self, name, self.next_row)
        result = fn(region)
        self.next_row = region.start + region.height
        self.regions.append(region)
        logger.debug("region %r at rows [%d, %d)", name, region.start, self.next_row)
        return result

    def constrain_instance(self, cell: AssignedCell, instance: Column, row: int) -> None:
        """Tie an assigned cell to a public input row."""
        if instance.kind != ColumnKind.INSTANCE:
            raise ConfigurationError(f"{instance} is not an instance column")
        self.constrain_cells(cell.cell, Cell(instance, row))

    # --- Recording ---

    def record(self, column: Column, row: int, value: int) -> None:
        cells = self._values.setdefault(column.key, {})
        cells[row] = value

    def enable(self, selector: Selector, row: int) -> None:
        if selector.name not in self._enabled:
            raise ConfigurationError(f"selector {selector.name} is not registered")
        self._enabled[selector.name].add(row)

    def instance_value(self, instance: Column, row: int) -> int:
        if instance.kind != ColumnKind.INSTANCE:
            raise ConfigurationError(f"{instance} is not an instance column")
        values = self.instance.get(instance.key, [])
        # Missing public inputs read as zero; the copy constraint still binds the cell
        return values[row] if row < len(values) else 0

    def constrain_cells(self, a: Cell, b: Cell) -> None:
        for cell in (a, b):
            if not self.cs.has_equality(cell.column):
                raise ConfigurationError(f"equality is not enabled on {cell.column}")
        self._copies.append((a, b))

    # --- Finalisation ---

    def rows_used(self) -> int:
        return self.next_row

    def finalize(self, n_rows: int) -> Assignment:
        """Materialise the recorded cells into a dense table of n_rows rows."""
        if self.next_row > n_rows:
            raise ConfigurationError(f"layout uses {self.next_row} rows but the table has {n_rows}")
        assignment = Assignment(n_rows=n_rows)
        for key, column in self.cs.columns.items():
            dense = [0] * n_rows
            if column.kind == ColumnKind.INSTANCE:
                values = self.instance.get(key, [])
                if len(values) > n_rows:
                    raise ConfigurationError(
                        f"instance column {column} has {len(values)} values but the table has {n_rows} rows"
                    )
                dense[:len(values)] = values
            else:
                for row, value in self._values.get(key, {}).items():
                    dense[row] = value
            assignment.columns[key] = FF(dense)
            if column.kind == ColumnKind.ADVICE:
                mask = np.zeros(n_rows, dtype=bool)
                rows = list(self._values.get(key, {}))
                mask[rows] = True
                assignment.assigned[key] = mask
        for name, rows in self._enabled.items():
            mask = np.zeros(n_rows, dtype=bool)
            mask[sorted(rows)] = True
            assignment.selectors[name] = mask
        assignment.copies = list(self._copies)
        return assignment
