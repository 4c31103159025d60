"""Circuit interface and synthesis.

A Circuit configures its columns and gates on a ConstraintSystem, then lays
out its witness through a Layouter. synthesize_circuit runs both steps and
returns the CircuitDescription handed to the proof system (here, the mock
prover).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence

from primitives.errors import ConfigurationError
from protocol.constraint_system import ColumnKind, ConstraintSystem
from protocol.data import Assignment
from protocol.layouter import Layouter, Region

logger = logging.getLogger(__name__)

# Smallest table the planner will produce
MIN_K = 3


class Circuit(ABC):
    """A circuit: column/gate configuration plus witness layout."""

    @abstractmethod
    def configure(self, cs: ConstraintSystem):
        """Create columns, selectors and gates. Returns the config passed to synthesize."""
        pass

    @abstractmethod
    def synthesize(self, config, layouter: Layouter) -> None:
        """Assign the witness region by region."""
        pass


@dataclass
class CircuitDescription:
    """Everything the proof system needs: layout, gates, witness, public inputs.

    Attributes:
        cs: Column layout, selectors and gates
        assignment: Dense table of 2^k rows
        instance: Public inputs of the (single) instance column
        k: log2 of the table height
        regions: Regions in layout order (name, start row, height)
    """
    cs: ConstraintSystem
    assignment: Assignment
    instance: List[int]
    k: int
    regions: List[Region] = field(default_factory=list)

    @property
    def n_rows(self) -> int:
        return 1 << self.k

    def region_start(self, name: str, occurrence: int = 0) -> int:
        """First row of the occurrence-th region called name. Raises KeyError if absent."""
        starts = [r.start for r in self.regions if r.name == name]
        if occurrence >= len(starts):
            raise KeyError(f"no region {name!r} #{occurrence} ({len(starts)} found)")
        return starts[occurrence]


def rows_to_k(rows: int) -> int:
    """Smallest k >= MIN_K with 2^k >= rows."""
    k = MIN_K
    while (1 << k) < rows:
        k += 1
    return k


def synthesize_circuit(circuit: Circuit, instance: Sequence[int] = (), k: int = None) -> CircuitDescription:
    """Configure and lay out a circuit.

    Args:
        circuit: Circuit to synthesize
        instance: Public inputs, placed in the first instance column from row 0
        k: Table height exponent; None picks the smallest that fits

    Returns:
        CircuitDescription with a dense assignment of 2^k rows

    Raises:
        ConfigurationError: If the layout or public inputs do not fit in 2^k rows
    """
    cs = ConstraintSystem()
    config = circuit.configure(cs)

    instance_columns = cs.columns_of(ColumnKind.INSTANCE)
    instance = [int(v) for v in instance]
    if instance and not instance_columns:
        raise ConfigurationError("public inputs given but the circuit has no instance column")
    values = {instance_columns[0].key: instance} if instance_columns else {}

    layouter = Layouter(cs, values)
    circuit.synthesize(config, layouter)

    needed = max(layouter.rows_used() + cs.max_rotation(), len(instance))
    if k is None:
        k = rows_to_k(needed)
    elif (1 << k) < needed:
        raise ConfigurationError(f"circuit needs {needed} rows but k={k} gives {1 << k}")

    logger.debug(
        "synthesized %s: %d regions, %d rows used, k=%d",
        type(circuit).__name__, len(layouter.regions), layouter.rows_used(), k,
    )
    assignment = layouter.finalize(1 << k)
    return CircuitDescription(cs=cs, assignment=assignment, instance=instance, k=k, regions=layouter.regions)
