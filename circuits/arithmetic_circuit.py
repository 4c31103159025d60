"""Demo circuits proving (x^3 + x) * y = z.

x is private; y sits at instance row 0 and z at instance row 1.
MulDemoCircuit builds x^3 from two multiplications, CubeDemoCircuit uses the
cube gate.
"""

from abc import abstractmethod

from chips.arithmetic import ArithmeticChip, ArithmeticConfig
from protocol.circuit import Circuit
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter

# Public input rows
Y_ROW = 0
Z_ROW = 1


class _DemoCircuit(Circuit):

    def __init__(self, x: int):
        self.x = x

    def configure(self, cs: ConstraintSystem) -> ArithmeticConfig:
        advice = [cs.advice_column("a"), cs.advice_column("b")]
        instance = cs.instance_column()
        return ArithmeticChip.configure(cs, advice, instance)

    @abstractmethod
    def cube(self, chip: ArithmeticChip, layouter: Layouter, x):
        """Return a cell holding x^3."""
        pass

    def synthesize(self, config: ArithmeticConfig, layouter: Layouter) -> None:
        chip = ArithmeticChip(config)
        x = chip.load_private(layouter, self.x)
        y = chip.load_public(layouter, Y_ROW)
        x3 = self.cube(chip, layouter, x)
        x3_x = chip.add(layouter, x3, x)
        z = chip.mul(layouter, x3_x, y)
        chip.expose_public(layouter, z, Z_ROW)


class MulDemoCircuit(_DemoCircuit):
    """x^3 as (x * x) * x."""

    def cube(self, chip: ArithmeticChip, layouter: Layouter, x):
        x2 = chip.mul(layouter, x, x)
        return chip.mul(layouter, x2, x)


class CubeDemoCircuit(_DemoCircuit):
    """x^3 with the single-row cube gate."""

    def cube(self, chip: ArithmeticChip, layouter: Layouter, x):
        return chip.cube(layouter, x)
