"""Poseidon permutation engine and sponge chip.

Every operation opens its own region:

    initiate      1 row      IV (0, ..., 0, capacity), pinned to the arc columns
    load state    1 row      arbitrary state (unconstrained entry point)
    load inputs   3 rows     previous state (copied) / input chunk / new state
    permutation   R + 1 rows state entering round r on row r, output on row R

Witness values come from the reference round functions in primitives.poseidon,
so the chip and the plain hash cannot drift apart.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from constraints.poseidon import PoseidonConstraints
from primitives.errors import ConfigurationError
from primitives.field import PALLAS_PRIME, ff_ints, to_ff_array
from primitives.poseidon import apply_round, check_round_counts, pad_chunks
from primitives.poseidon_spec import PoseidonSpec
from protocol.constraint_system import Column, ConstraintSystem, Selector
from protocol.layouter import AssignedCell, Layouter, Region

logger = logging.getLogger(__name__)

# A state is W assigned cells; a digest is element_size assigned cells
State = List[AssignedCell]


@dataclass
class PoseidonConfig:
    """Columns, selectors and parameters of one Poseidon chip.

    Attributes:
        spec: Parameter set the gates were built for
        state: W advice columns (equality enabled)
        arc: W fixed columns (round constants, pad vector, IV)
        instance: Public input column
        s_full, s_partial: Round selectors
        s_add_inputs: Absorb selector, on the input row
        s_pad_inputs: Pad selector, None when the pad vector is empty
        s_initial: IV selector
    """
    spec: PoseidonSpec
    state: List[Column]
    arc: List[Column]
    instance: Column
    s_full: Selector
    s_partial: Selector
    s_add_inputs: Selector
    s_pad_inputs: Optional[Selector]
    s_initial: Selector


class PoseidonChip:
    """Arithmetized Poseidon: permutation engine plus sponge operations."""

    def __init__(self, config: PoseidonConfig):
        self.config = config

    @property
    def spec(self) -> PoseidonSpec:
        return self.config.spec

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        spec: PoseidonSpec,
        state: Sequence[Column],
        arc: Sequence[Column],
        instance: Column,
    ) -> PoseidonConfig:
        """Register the Poseidon gates on existing columns.

        Raises:
            ConfigurationError: If the Poseidon parameters are inconsistent or column counts differ from W
        """
        spec.validate()
        if len(state) != spec.width or len(arc) != spec.width:
            raise ConfigurationError(
                f"need {spec.width} state and arc columns, got {len(state)} and {len(arc)}"
            )
        cs.enable_equality(instance)
        for column in state:
            cs.enable_equality(column)

        module = PoseidonConstraints(spec, state=state[0].name, arc=arc[0].name)
        selectors = {}
        for name, fn in module.gates().items():
            selectors[name] = cs.selector(f"{state[0].name}:{name}")
            cs.create_gate(name, selectors[name], fn)

        return PoseidonConfig(
            spec=spec,
            state=list(state),
            arc=list(arc),
            instance=instance,
            s_full=selectors["full box"],
            s_partial=selectors["partial box"],
            s_add_inputs=selectors["add-inputs"],
            s_pad_inputs=selectors.get("pad-inputs"),
            s_initial=selectors["initial-state"],
        )

    # --- Permutation engine ---

    def load_state(self, layouter: Layouter, values: Sequence) -> State:
        """Assign an arbitrary W-element state."""
        if len(values) != self.spec.width:
            raise ConfigurationError(f"state has {len(values)} elements, expected {self.spec.width}")

        def assign(region: Region) -> State:
            return [region.assign_advice(self.config.state[i], 0, v) for i, v in enumerate(values)]

        return layouter.assign_region("load state", assign)

    def permutation(
        self,
        layouter: Layouter,
        state: State,
        full_rounds: int = None,
        partial_rounds: int = None,
    ) -> State:
        """Apply the permutation with every round enforced by a gate.

        Raises:
            ConfigurationError: If the round counts are odd or disagree with the constant table
        """
        spec = self.spec
        config = self.config
        check_round_counts(spec, full_rounds, partial_rounds)

        def assign(region: Region) -> State:
            for i in range(spec.width):
                state[i].copy_advice(region, config.state[i], 0)
            current = to_ff_array([cell.value for cell in state])
            outputs = state
            for r in range(spec.total_rounds):
                for i in range(spec.width):
                    region.assign_fixed(config.arc[i], r, spec.round_constants[r][i])
                if spec.is_full_round(r):
                    region.enable_selector(config.s_full, r)
                else:
                    region.enable_selector(config.s_partial, r)
                current = apply_round(current, r, spec)
                outputs = [
                    region.assign_advice(config.state[i], r + 1, v)
                    for i, v in enumerate(ff_ints(current))
                ]
            return outputs

        return layouter.assign_region("permutation", assign)

    # --- Sponge ---

    def initiate(self, layouter: Layouter) -> State:
        """Assign the IV (0, ..., 0, capacity), pinned by the initial-state gate."""
        spec = self.spec
        config = self.config
        iv = [0] * spec.rate + [spec.capacity % PALLAS_PRIME]

        def assign(region: Region) -> State:
            region.enable_selector(config.s_initial, 0)
            cells = []
            for i, v in enumerate(iv):
                region.assign_fixed(config.arc[i], 0, v)
                cells.append(region.assign_advice(config.state[i], 0, v))
            return cells

        return layouter.assign_region("initiate state", assign)

    def load_inputs(self, layouter: Layouter, state: State, chunk: Sequence) -> Tuple[State, List[AssignedCell]]:
        """Absorb one rate-wide chunk (inputs followed by the pad).

        Returns:
            (new state, the assigned input cells)

        Raises:
            ConfigurationError: If len(chunk) != W - 1
        """
        spec = self.spec
        config = self.config
        rate = spec.rate
        if len(chunk) != rate:
            raise ConfigurationError(f"input chunk has {len(chunk)} elements, expected {rate}")
        values = [int(v) % PALLAS_PRIME for v in chunk]

        def assign(region: Region):
            region.enable_selector(config.s_add_inputs, 1)
            for i in range(spec.width):
                state[i].copy_advice(region, config.state[i], 0)

            loaded = [region.assign_advice(config.state[i], 1, values[i]) for i in range(rate)]
            if config.s_pad_inputs is not None:
                region.enable_selector(config.s_pad_inputs, 1)
                for k, pad in enumerate(spec.pad_vector(), start=spec.element_size):
                    region.assign_fixed(config.arc[k], 1, pad)

            outputs = [
                region.assign_advice(config.state[i], 2, (state[i].value + values[i]) % PALLAS_PRIME)
                for i in range(rate)
            ]
            outputs.append(region.assign_advice(config.state[rate], 2, state[rate].value))
            return outputs, loaded

        return layouter.assign_region("load inputs", assign)

    def absorb(self, layouter: Layouter, state: State, chunk: Sequence) -> Tuple[State, List[AssignedCell]]:
        """load_inputs followed by a permutation."""
        state, loaded = self.load_inputs(layouter, state, chunk)
        return self.permutation(layouter, state), loaded

    def squeeze(self, layouter: Layouter, state: State, size: int = None) -> List[AssignedCell]:
        """Digest of size elements: state[0], then permute and read state[0] again."""
        size = self.spec.element_size if size is None else size
        digest = [state[0]]
        for _ in range(1, size):
            state = self.permutation(layouter, state)
            digest.append(state[0])
        return digest

    def hash(self, layouter: Layouter, inputs: Sequence) -> List[AssignedCell]:
        """Variable-length sponge hash with the same schedule as primitives.poseidon.sponge_hash.

        Raises:
            ConfigurationError: If len(inputs) is not a positive multiple of element_size
        """
        chunks = pad_chunks(inputs, self.spec)
        state = self.initiate(layouter)
        for chunk in chunks:
            state, _ = self.absorb(layouter, state, chunk)
        logger.debug("hashed %d chunks", len(chunks))
        return self.squeeze(layouter, state)

    # --- Public inputs ---

    def expose_public(self, layouter: Layouter, state: State, row: int) -> None:
        """Bind state[0] to instance row `row`."""
        layouter.constrain_instance(state[0], self.config.instance, row)

    def expose_digest(self, layouter: Layouter, digest: List[AssignedCell], row: int) -> None:
        """Bind digest[k] to instance row `row + k`."""
        for k, cell in enumerate(digest):
            layouter.constrain_instance(cell, self.config.instance, row + k)
