"""Column layout, selectors and gates of a PLONKish circuit.

A ConstraintSystem is filled in once per circuit while chips are configured.
Gates are plain Python callables taking a ConstraintContext and returning a
list of (constraint_name, expression) pairs; each expression must vanish on
every row where the gate's selector is enabled.

Example:
    cs = ConstraintSystem()
    a = cs.advice_column('a')
    s = cs.selector('square')
    cs.create_gate('square', s, lambda ctx: [('out', ctx.col('a') ** 2 - ctx.next_col('a'))])
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Tuple

from primitives.errors import ConfigurationError


class ColumnKind(Enum):
    ADVICE = "advice"
    FIXED = "fixed"
    INSTANCE = "instance"


@dataclass(frozen=True)
class Column:
    """A named table column. Multi-column groups share a name and differ by index."""
    kind: ColumnKind
    name: str
    index: int = 0

    @property
    def key(self) -> Tuple[str, int]:
        return (self.name, self.index)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.name}[{self.index}]"


@dataclass(frozen=True)
class Selector:
    name: str


@dataclass(frozen=True)
class Query:
    """Column accessed at a row offset relative to the gate's row."""
    column: Column
    rotation: int


@dataclass
class Gate:
    """A named set of polynomial constraints switched on by one selector.

    Attributes:
        name: Gate name, used in failure reports
        selector: Selector enabling the gate
        fn: ctx -> [(constraint_name, expr), ...]
        constraint_names: Names returned by fn, in order
        queries: Distinct (column, rotation) pairs fn reads
    """
    name: str
    selector: Selector
    fn: Callable
    constraint_names: List[str] = field(default_factory=list)
    queries: List[Query] = field(default_factory=list)

    @property
    def rotations(self) -> List[int]:
        return sorted({q.rotation for q in self.queries})


class ConstraintSystem:
    """Registry of columns, selectors and gates for one circuit."""

    def __init__(self):
        self.columns: Dict[Tuple[str, int], Column] = {}
        self.selectors: Dict[str, Selector] = {}
        self.gates: List[Gate] = []
        self.equality: set = set()

    # --- Columns ---

    def _add_column(self, kind: ColumnKind, name: str, index: int) -> Column:
        if (name, index) in self.columns:
            raise ConfigurationError(f"column {name}[{index}] already exists")
        column = Column(kind, name, index)
        self.columns[column.key] = column
        return column

    def advice_column(self, name: str, index: int = 0) -> Column:
        return self._add_column(ColumnKind.ADVICE, name, index)

    def fixed_column(self, name: str, index: int = 0) -> Column:
        return self._add_column(ColumnKind.FIXED, name, index)

    def instance_column(self, name: str = "instance", index: int = 0) -> Column:
        return self._add_column(ColumnKind.INSTANCE, name, index)

    def advice_columns(self, name: str, count: int) -> List[Column]:
        return [self.advice_column(name, i) for i in range(count)]

    def fixed_columns(self, name: str, count: int) -> List[Column]:
        return [self.fixed_column(name, i) for i in range(count)]

    def column(self, name: str, index: int = 0) -> Column:
        """Look up a column by name and index. Raises KeyError if unknown."""
        key = (name, index)
        if key not in self.columns:
            raise KeyError(f"unknown column {name}[{index}]")
        return self.columns[key]

    def columns_of(self, kind: ColumnKind) -> List[Column]:
        return [c for c in self.columns.values() if c.kind == kind]

    def enable_equality(self, column: Column) -> None:
        if column.kind == ColumnKind.FIXED:
            raise ConfigurationError(f"equality is only supported on advice/instance columns, got {column}")
        self.equality.add(column.key)

    def has_equality(self, column: Column) -> bool:
        return column.key in self.equality

    # --- Selectors and gates ---

    def selector(self, name: str) -> Selector:
        if name in self.selectors:
            raise ConfigurationError(f"selector {name} already exists")
        selector = Selector(name)
        self.selectors[name] = selector
        return selector

    def create_gate(self, name: str, selector: Selector, fn: Callable) -> Gate:
        """Register a gate, recording which cells it reads.

        fn is evaluated once against a recording context so that the mock
        prover knows the gate's row-offset pattern before any witness exists.
        """
        # Imported here: constraints.base depends on this module for Column
        from constraints.base import RecordingConstraintContext

        if selector.name not in self.selectors:
            raise ConfigurationError(f"selector {selector.name} is not registered")
        recorder = RecordingConstraintContext(self)
        named = fn(recorder)
        names = [constraint_name for constraint_name, _ in named]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"gate {name} has duplicate constraint names: {names}")
        gate = Gate(name=name, selector=selector, fn=fn, constraint_names=names, queries=recorder.queries)
        self.gates.append(gate)
        return gate

    def max_rotation(self) -> int:
        return max((abs(r) for g in self.gates for r in g.rotations), default=0)

    def describe(self) -> dict:
        """Summary of the column layout, used by tests and debug logging."""
        return {
            "advice": [str(c) for c in self.columns_of(ColumnKind.ADVICE)],
            "fixed": [str(c) for c in self.columns_of(ColumnKind.FIXED)],
            "instance": [str(c) for c in self.columns_of(ColumnKind.INSTANCE)],
            "selectors": list(self.selectors),
            "gates": {g.name: g.constraint_names for g in self.gates},
            "equality": sorted(f"{name}[{index}]" for name, index in self.equality),
        }
