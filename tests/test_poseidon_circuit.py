"""Tests for the Poseidon chip and hash circuit against the reference sponge."""

import pytest

from chips.poseidon import PoseidonChip
from circuits.poseidon_circuit import PoseidonCircuit
from primitives.errors import ConfigurationError
from primitives.field import PALLAS_PRIME, ff_ints, to_ff_array
from primitives.poseidon import permute, sponge_hash
from primitives.poseidon_spec import PoseidonSpec
from protocol.circuit import Circuit, synthesize_circuit
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter
from protocol.mock_prover import MockProver


class PermutationCircuit(Circuit):
    """Exposes the permuted state of a private initial state.

    With first_only, only state[0] is bound, through the chip's expose_public.
    """

    def __init__(self, spec: PoseidonSpec, state, full_rounds=None, partial_rounds=None, first_only=False):
        self.spec = spec
        self.state = state
        self.full_rounds = full_rounds
        self.partial_rounds = partial_rounds
        self.first_only = first_only

    def configure(self, cs: ConstraintSystem):
        state = cs.advice_columns("state", self.spec.width)
        arc = cs.fixed_columns("arc", self.spec.width)
        return PoseidonChip.configure(cs, self.spec, state, arc, cs.instance_column())

    def synthesize(self, config, layouter: Layouter) -> None:
        chip = PoseidonChip(config)
        state = chip.load_state(layouter, self.state)
        out = chip.permutation(layouter, state, self.full_rounds, self.partial_rounds)
        if self.first_only:
            chip.expose_public(layouter, out, 0)
            return
        for i, cell in enumerate(out):
            layouter.constrain_instance(cell, config.instance, i)


def _random_inputs(rng, n: int):
    return [rng.getrandbits(128) for _ in range(n)]


class TestPermutationChip:

    def test_matches_reference(self, spec: PoseidonSpec, rng) -> None:
        state = _random_inputs(rng, 3)
        expected = ff_ints(permute(to_ff_array(state), spec))
        MockProver.run(None, PermutationCircuit(spec, state), expected).assert_satisfied()

    def test_region_height(self, spec: PoseidonSpec) -> None:
        """R + 1 rows: one per round input plus the output row."""
        description = synthesize_circuit(PermutationCircuit(spec, [1, 2, 3]), ff_ints(permute(to_ff_array([1, 2, 3]), spec)))
        region = next(r for r in description.regions if r.name == "permutation")
        assert region.height == spec.total_rounds + 1

    def test_selectors_follow_round_schedule(self, spec: PoseidonSpec) -> None:
        description = synthesize_circuit(PermutationCircuit(spec, [1, 2, 3]))
        start = description.region_start("permutation")
        full = description.assignment.selectors["state:full box"]
        partial = description.assignment.selectors["state:partial box"]
        for r in range(spec.total_rounds):
            assert bool(full[start + r]) == spec.is_full_round(r)
            assert bool(partial[start + r]) != spec.is_full_round(r)

    def test_matches_reference_other_parameters(self, variant_spec: PoseidonSpec, rng) -> None:
        """Other widths, no partial rounds, longer pads."""
        state = _random_inputs(rng, variant_spec.width)
        expected = ff_ints(permute(to_ff_array(state), variant_spec))
        prover = MockProver.run(None, PermutationCircuit(variant_spec, state), expected)
        assert prover.is_satisfied()

    def test_expose_public_binds_first_element(self, spec: PoseidonSpec, rng) -> None:
        state = _random_inputs(rng, 3)
        first = ff_ints(permute(to_ff_array(state), spec))[0]
        circuit = PermutationCircuit(spec, state, first_only=True)
        MockProver.run(None, circuit, [first]).assert_satisfied()

        failures = MockProver.run(None, circuit, [(first + 1) % PALLAS_PRIME]).verify()
        assert [f.kind for f in failures] == ["permutation"]

    def test_tampered_round_fails(self, spec: PoseidonSpec) -> None:
        state = [1, 2, 3]
        expected = ff_ints(permute(to_ff_array(state), spec))
        prover = MockProver.run(None, PermutationCircuit(spec, state), expected)
        row = prover.description.region_start("permutation") + 10
        column = prover.description.cs.column("state", 1)
        prover.assignment.set(column, row, int(prover.assignment.value(column, row)) + 1)
        failures = prover.verify()
        gates = {f.gate for f in failures}
        assert gates == {"partial box"}
        assert {f.row for f in failures} == {row - 1, row}

    def test_round_count_mismatch(self, spec: PoseidonSpec) -> None:
        with pytest.raises(ConfigurationError):
            synthesize_circuit(PermutationCircuit(spec, [1, 2, 3], full_rounds=6, partial_rounds=56))

    def test_odd_full_rounds(self, spec: PoseidonSpec) -> None:
        with pytest.raises(ConfigurationError, match="even"):
            synthesize_circuit(PermutationCircuit(spec, [1, 2, 3], full_rounds=7))


class TestPoseidonCircuit:

    @pytest.mark.parametrize("n", [2, 4, 6])
    def test_hash_matches_reference(self, spec: PoseidonSpec, rng, n: int) -> None:
        inputs = _random_inputs(rng, n)
        outputs = ff_ints(sponge_hash(inputs, spec))
        circuit = PoseidonCircuit(spec, inputs)
        assert circuit.public_inputs() == outputs
        MockProver.run(None, circuit, outputs).assert_satisfied()

    def test_hash_other_parameters(self, variant_spec: PoseidonSpec, rng) -> None:
        inputs = _random_inputs(rng, 3 * variant_spec.element_size)
        outputs = ff_ints(sponge_hash(inputs, variant_spec))
        MockProver.run(None, PoseidonCircuit(variant_spec, inputs), outputs).assert_satisfied()

        outputs[-1] = (outputs[-1] + 1) % PALLAS_PRIME
        assert not MockProver.run(None, PoseidonCircuit(variant_spec, inputs), outputs).is_satisfied()

    @pytest.mark.parametrize("position", [0, 1])
    def test_wrong_digest_fails(self, spec: PoseidonSpec, rng, position: int) -> None:
        inputs = _random_inputs(rng, 4)
        outputs = ff_ints(sponge_hash(inputs, spec))
        outputs[position] = (outputs[position] + 1) % PALLAS_PRIME
        failures = MockProver.run(None, PoseidonCircuit(spec, inputs), outputs).verify()
        assert [f.kind for f in failures] == ["permutation"]

    def test_element_size_one(self, spec_i1: PoseidonSpec, rng) -> None:
        """I=1: each input is followed by the pad element, one squeeze."""
        inputs = _random_inputs(rng, 3)
        outputs = ff_ints(sponge_hash(inputs, spec_i1))
        assert len(outputs) == 1
        MockProver.run(None, PoseidonCircuit(spec_i1, inputs), outputs).assert_satisfied()

    def test_pad_cannot_be_chosen(self, spec_i1: PoseidonSpec) -> None:
        """The pad slot of an input row is pinned by the pad-inputs gate."""
        outputs = ff_ints(sponge_hash([5], spec_i1))
        prover = MockProver.run(None, PoseidonCircuit(spec_i1, [5]), outputs)
        row = prover.description.region_start("load inputs") + 1
        column = prover.description.cs.column("state", 1)
        prover.assignment.set(column, row, 2)
        gates = {f.gate for f in prover.verify()}
        assert "pad-inputs" in gates

    def test_initial_state_pinned(self, spec: PoseidonSpec) -> None:
        """The capacity element of the IV cannot be replaced."""
        prover = MockProver.run(None, PoseidonCircuit(spec, [1, 2]), ff_ints(sponge_hash([1, 2], spec)))
        row = prover.description.region_start("initiate state")
        column = prover.description.cs.column("state", 2)
        prover.assignment.set(column, row, 0)
        gates = {f.gate for f in prover.verify()}
        assert "initial-state" in gates

    def test_no_pad_gate_without_padding(self, spec: PoseidonSpec) -> None:
        description = synthesize_circuit(PoseidonCircuit(spec, [1, 2]), ff_ints(sponge_hash([1, 2], spec)))
        assert "pad-inputs" not in [g.name for g in description.cs.gates]

    @pytest.mark.parametrize("length", [0, 3])
    def test_input_length_error(self, spec: PoseidonSpec, length: int) -> None:
        with pytest.raises(ConfigurationError):
            PoseidonCircuit(spec, list(range(length)))

    def test_load_inputs_chunk_size(self, spec: PoseidonSpec) -> None:
        cs = ConstraintSystem()
        config = PoseidonChip.configure(
            cs, spec, cs.advice_columns("state", 3), cs.fixed_columns("arc", 3), cs.instance_column(),
        )
        chip = PoseidonChip(config)
        layouter = Layouter(cs)
        state = chip.initiate(layouter)
        with pytest.raises(ConfigurationError):
            chip.load_inputs(layouter, state, [1, 2, 3])

    def test_configure_wrong_column_count(self, spec: PoseidonSpec) -> None:
        cs = ConstraintSystem()
        with pytest.raises(ConfigurationError):
            PoseidonChip.configure(
                cs, spec, cs.advice_columns("state", 2), cs.fixed_columns("arc", 3), cs.instance_column(),
            )
