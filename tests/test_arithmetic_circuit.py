"""Tests for the (x^3 + x) * y = z demo circuits."""

import pytest

from circuits.arithmetic_circuit import CubeDemoCircuit, MulDemoCircuit
from primitives.field import PALLAS_PRIME
from protocol.mock_prover import MockProver

DEMO_CIRCUITS = [MulDemoCircuit, CubeDemoCircuit]


@pytest.mark.parametrize("circuit_cls", DEMO_CIRCUITS)
@pytest.mark.parametrize("x,y,z", [(3, 5, 150), (2, 5, 50), (3, 5, 35), (0, 9, 0), (2, 5, 51)])
def test_demo_statement(circuit_cls, x: int, y: int, z: int) -> None:
    """Satisfied iff (x^3 + x) * y == z."""
    prover = MockProver.run(4, circuit_cls(x), [y, z])
    if (x ** 3 + x) * y == z:
        assert prover.verify() == []
    else:
        assert prover.verify() != []


@pytest.mark.parametrize("circuit_cls", DEMO_CIRCUITS)
def test_large_values_wrap(circuit_cls) -> None:
    """The statement holds in the field, not over the integers."""
    x = 2 ** 200
    y = 3
    z = (pow(x, 3, PALLAS_PRIME) + x) * y % PALLAS_PRIME
    MockProver.run(None, circuit_cls(x), [y, z]).assert_satisfied()


def test_tampered_intermediate_fails() -> None:
    """Overwriting x^3 breaks the cube gate and the copy into the add region."""
    prover = MockProver.run(None, CubeDemoCircuit(3), [5, 150])
    description = prover.description
    a = description.cs.column("a")
    row = description.region_start("cube") + 1
    prover.assignment.set(a, row, 28)
    failures = prover.verify()
    assert any(f.gate == "cube" for f in failures)
    assert any(f.kind == "permutation" for f in failures)


def test_mul_circuit_uses_no_cube_gate() -> None:
    prover = MockProver.run(None, MulDemoCircuit(3), [5, 150])
    assert not prover.assignment.selectors["cube"].any()
    assert prover.assignment.selectors["mul"].sum() == 3
