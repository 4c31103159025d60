"""Mock prover: checks a synthesized circuit without any cryptography.

For every gate it evaluates all named constraints on every row where the gate's
selector is enabled, checks that every queried cell lies inside the table and
that queried advice cells were assigned, then checks every copy constraint.
A circuit is satisfied iff verify() returns no failures.

Example:
    prover = MockProver.run(None, circuit, public_inputs)
    prover.assert_satisfied()
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from constraints.base import RowConstraintContext, TableConstraintContext, rotated_row
from primitives.field import nonzero_rows
from protocol.circuit import Circuit, CircuitDescription, synthesize_circuit
from protocol.constraint_system import ColumnKind, Gate
from protocol.data import Cell

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyFailure:
    """One reason the assignment does not satisfy the circuit.

    Attributes:
        kind: 'constraint', 'cell_not_assigned', 'out_of_table' or 'permutation'
        row: Row at which the gate was evaluated (or the first copied cell's row)
        gate: Gate name, for gate-related failures
        constraint: Constraint name within the gate
        detail: Human readable extra information
    """
    kind: str
    row: int
    gate: str = ""
    constraint: str = ""
    detail: str = ""

    def __str__(self) -> str:
        where = f"{self.gate}/{self.constraint}" if self.gate else "copy"
        text = f"{self.kind} at row {self.row} ({where})"
        return f"{text}: {self.detail}" if self.detail else text


class MockProver:
    """Checks a CircuitDescription row by row."""

    def __init__(self, description: CircuitDescription):
        self.description = description

    @classmethod
    def run(cls, k: int, circuit: Circuit, instance: Sequence[int] = ()) -> 'MockProver':
        """Synthesize circuit with the given public inputs (k=None picks the smallest table)."""
        return cls(synthesize_circuit(circuit, instance, k))

    @property
    def assignment(self):
        return self.description.assignment

    # --- Checks ---

    def verify(self) -> List[VerifyFailure]:
        failures = []
        for gate in self.description.cs.gates:
            failures.extend(self._check_gate(gate))
        failures.extend(self._check_copies())
        logger.info(
            "mock prover: %d gates, %d copy constraints, %d failures",
            len(self.description.cs.gates), len(self.assignment.copies), len(failures),
        )
        return failures

    def is_satisfied(self) -> bool:
        return not self.verify()

    def assert_satisfied(self) -> None:
        failures = self.verify()
        if failures:
            shown = "\n".join(f"  {f}" for f in failures[:20])
            more = f"\n  ... and {len(failures) - 20} more" if len(failures) > 20 else ""
            raise AssertionError(f"circuit is not satisfied ({len(failures)} failures):\n{shown}{more}")

    def _check_gate(self, gate: Gate) -> List[VerifyFailure]:
        assignment = self.assignment
        n_rows = assignment.n_rows
        rows = assignment.selector_rows(gate.selector.name)
        if len(rows) == 0:
            return []

        failures = []
        for query in gate.queries:
            targets = rows + query.rotation
            for row in rows[(targets < 0) | (targets >= n_rows)]:
                failures.append(VerifyFailure(
                    "out_of_table", int(row), gate.name,
                    detail=f"{query.column} at rotation {query.rotation}",
                ))
            if query.column.kind == ColumnKind.ADVICE:
                mask = assignment.assigned[query.column.key]
                for row in rows[~mask[rotated_row(rows, query.rotation, n_rows)]]:
                    failures.append(VerifyFailure(
                        "cell_not_assigned", int(row), gate.name,
                        detail=f"{query.column} at rotation {query.rotation}",
                    ))

        results = gate.fn(TableConstraintContext(assignment, rows))
        for name, values in results:
            for i in nonzero_rows(values):
                failures.append(VerifyFailure("constraint", int(rows[i]), gate.name, name))
        return failures

    def _check_copies(self) -> List[VerifyFailure]:
        failures = []
        for a, b in self.assignment.copies:
            va, vb = self._cell_value(a), self._cell_value(b)
            if va != vb:
                failures.append(VerifyFailure(
                    "permutation", a.row, detail=f"{a} = {hex(int(va))} but {b} = {hex(int(vb))}",
                ))
        return failures

    def _cell_value(self, cell: Cell):
        return self.assignment.value(cell.column, cell.row)

    # --- Debugging ---

    def evaluate_row(self, gate_name: str, row: int) -> dict:
        """Constraint values of one gate at one row (ignores the selector)."""
        for gate in self.description.cs.gates:
            if gate.name == gate_name:
                return {name: int(v) for name, v in gate.fn(RowConstraintContext(self.assignment, row))}
        raise KeyError(f"unknown gate {gate_name}")
