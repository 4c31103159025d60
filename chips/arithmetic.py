"""Two-column arithmetic chip used by the demo circuits.

    | a   | b   | selector |
    |-----|-----|----------|
    | lhs | rhs | s_op     |
    | out |     |          |
"""

from dataclasses import dataclass
from typing import List

from constraints.arithmetic import ArithmeticConstraints
from primitives.field import PALLAS_PRIME
from protocol.constraint_system import Column, ConstraintSystem, Selector
from protocol.layouter import AssignedCell, Layouter, Region


@dataclass
class ArithmeticConfig:
    advice: List[Column]
    instance: Column
    s_mul: Selector
    s_add: Selector
    s_cube: Selector


class ArithmeticChip:

    def __init__(self, config: ArithmeticConfig):
        self.config = config

    @classmethod
    def configure(cls, cs: ConstraintSystem, advice: List[Column], instance: Column) -> ArithmeticConfig:
        cs.enable_equality(instance)
        for column in advice:
            cs.enable_equality(column)

        module = ArithmeticConstraints(lhs=advice[0].name, rhs=advice[1].name)
        selectors = {}
        for name, fn in module.gates().items():
            selectors[name] = cs.selector(name)
            cs.create_gate(name, selectors[name], fn)

        return ArithmeticConfig(
            advice=list(advice),
            instance=instance,
            s_mul=selectors["mul"],
            s_add=selectors["add"],
            s_cube=selectors["cube"],
        )

    def load_private(self, layouter: Layouter, value) -> AssignedCell:
        return layouter.assign_region(
            "load private",
            lambda region: region.assign_advice(self.config.advice[0], 0, value),
        )

    def load_public(self, layouter: Layouter, row: int) -> AssignedCell:
        """Copy instance row `row` into a fresh advice cell."""
        return layouter.assign_region(
            "load public",
            lambda region: region.assign_advice_from_instance(
                self.config.instance, row, self.config.advice[0], 0
            ),
        )

    def _binary(self, layouter: Layouter, name: str, selector: Selector,
                a: AssignedCell, b: AssignedCell, out: int) -> AssignedCell:
        config = self.config

        def assign(region: Region) -> AssignedCell:
            region.enable_selector(selector, 0)
            a.copy_advice(region, config.advice[0], 0)
            b.copy_advice(region, config.advice[1], 0)
            return region.assign_advice(config.advice[0], 1, out)

        return layouter.assign_region(name, assign)

    def mul(self, layouter: Layouter, a: AssignedCell, b: AssignedCell) -> AssignedCell:
        """c = a * b"""
        return self._binary(layouter, "mul", self.config.s_mul, a, b, a.value * b.value % PALLAS_PRIME)

    def add(self, layouter: Layouter, a: AssignedCell, b: AssignedCell) -> AssignedCell:
        """c = a + b"""
        return self._binary(layouter, "add", self.config.s_add, a, b, (a.value + b.value) % PALLAS_PRIME)

    def cube(self, layouter: Layouter, a: AssignedCell) -> AssignedCell:
        """c = a^3"""
        config = self.config

        def assign(region: Region) -> AssignedCell:
            region.enable_selector(config.s_cube, 0)
            a.copy_advice(region, config.advice[0], 0)
            return region.assign_advice(config.advice[0], 1, pow(a.value, 3, PALLAS_PRIME))

        return layouter.assign_region("cube", assign)

    def expose_public(self, layouter: Layouter, cell: AssignedCell, row: int) -> None:
        layouter.constrain_instance(cell, self.config.instance, row)
