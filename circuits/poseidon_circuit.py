"""Circuit proving digest = Poseidon-sponge(inputs) for private inputs.

Public inputs: the element_size digest elements, instance rows 0..I-1.
"""

from dataclasses import dataclass
from typing import List, Sequence

from chips.poseidon import PoseidonChip, PoseidonConfig
from primitives.field import ff_ints
from primitives.poseidon import pad_chunks, sponge_hash
from primitives.poseidon_spec import PoseidonSpec
from protocol.circuit import Circuit
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter


@dataclass
class PoseidonCircuitConfig:
    poseidon: PoseidonConfig


class PoseidonCircuit(Circuit):
    """Hash circuit over W state columns, W fixed columns and one instance column.

    Args:
        spec: Parameter set
        inputs: Private input, a positive multiple of spec.element_size long

    Raises:
        ConfigurationError: If the input length is not a positive multiple of element_size
    """

    def __init__(self, spec: PoseidonSpec, inputs: Sequence[int]):
        pad_chunks(inputs, spec)
        self.spec = spec
        self.inputs = [int(v) for v in inputs]

    def configure(self, cs: ConstraintSystem) -> PoseidonCircuitConfig:
        width = self.spec.width
        state = cs.advice_columns("state", width)
        arc = cs.fixed_columns("arc", width)
        instance = cs.instance_column()
        return PoseidonCircuitConfig(PoseidonChip.configure(cs, self.spec, state, arc, instance))

    def synthesize(self, config: PoseidonCircuitConfig, layouter: Layouter) -> None:
        chip = PoseidonChip(config.poseidon)
        digest = chip.hash(layouter, self.inputs)
        chip.expose_digest(layouter, digest, 0)

    def public_inputs(self) -> List[int]:
        """The digest computed with the reference sponge."""
        return ff_ints(sponge_hash(self.inputs, self.spec))
