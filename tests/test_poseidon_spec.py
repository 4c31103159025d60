"""Tests for Poseidon parameter sets and their validation."""

import pytest

from primitives.errors import ConfigurationError
from primitives.field import ff_ints
from primitives.poseidon_spec import (
    PoseidonSpec,
    generate_mds,
    generate_round_constants,
    hash_to_field,
    p128_pow5_t3,
)
from primitives.field import PALLAS_PRIME


def _spec_kwargs(**overrides) -> dict:
    """Plain-integer arguments for a small valid width-3 spec."""
    kwargs = dict(
        width=3,
        full_rounds=2,
        partial_rounds=1,
        mds=generate_mds(3),
        round_constants=generate_round_constants(3, 3),
        capacity=2 ** 65,
        pad=[],
        element_size=2,
    )
    kwargs.update(overrides)
    return kwargs


class TestP128Pow5T3:
    """The shipped width-3 parameter set."""

    def test_shape(self, spec: PoseidonSpec) -> None:
        assert spec.width == 3
        assert spec.rate == 2
        assert spec.full_rounds == 8
        assert spec.partial_rounds == 56
        assert spec.total_rounds == 64
        assert spec.round_constants.shape == (64, 3)
        assert spec.mds.shape == (3, 3)
        assert spec.capacity == 2 ** 65
        assert len(spec.pad) == 0

    def test_element_size_one_has_pad(self, spec_i1: PoseidonSpec) -> None:
        """I=1 pads every chunk with the single element 1."""
        assert spec_i1.element_size == 1
        assert ff_ints(spec_i1.pad) == [1]

    def test_unsupported_element_size(self) -> None:
        with pytest.raises(ConfigurationError):
            p128_pow5_t3(element_size=3)

    def test_cached(self) -> None:
        assert p128_pow5_t3() is p128_pow5_t3()

    def test_round_schedule(self, spec: PoseidonSpec) -> None:
        """Four full rounds, 56 partial rounds, four full rounds."""
        pattern = [spec.is_full_round(r) for r in range(spec.total_rounds)]
        assert pattern == [True] * 4 + [False] * 56 + [True] * 4

    def test_mds_is_cauchy(self, spec: PoseidonSpec) -> None:
        """Every entry of a Cauchy matrix is non-zero and the rows differ."""
        rows = [tuple(ff_ints(row)) for row in spec.mds]
        assert all(v != 0 for row in rows for v in row)
        assert len(set(rows)) == spec.width

    def test_constants_deterministic(self) -> None:
        assert generate_round_constants(3, 4) == generate_round_constants(3, 4)
        assert generate_mds(3) == generate_mds(3)

    def test_hash_to_field_in_range(self) -> None:
        for i in range(8):
            assert 0 <= hash_to_field(b"test", bytes([i])) < PALLAS_PRIME


class TestValidation:
    """ConfigurationError for inconsistent parameters."""

    def test_valid(self) -> None:
        PoseidonSpec.create(**_spec_kwargs())

    def test_odd_full_rounds(self) -> None:
        with pytest.raises(ConfigurationError, match="even"):
            PoseidonSpec.create(**_spec_kwargs(full_rounds=3, partial_rounds=0))

    def test_constant_table_length(self) -> None:
        with pytest.raises(ConfigurationError, match="round constant table"):
            PoseidonSpec.create(**_spec_kwargs(partial_rounds=2))

    def test_constant_row_width(self) -> None:
        with pytest.raises(ConfigurationError):
            PoseidonSpec.create(**_spec_kwargs(round_constants=[[1, 2], [3, 4], [5, 6]]))

    def test_mds_shape(self) -> None:
        with pytest.raises(ConfigurationError, match="MDS"):
            PoseidonSpec.create(**_spec_kwargs(mds=[[1, 2, 3], [4, 5, 6]]))

    def test_width_too_small(self) -> None:
        with pytest.raises(ConfigurationError, match="width"):
            PoseidonSpec.create(**_spec_kwargs(
                width=1, mds=[[1]], round_constants=[[1], [2], [3]], element_size=1,
            ))

    @pytest.mark.parametrize("element_size", [0, 3])
    def test_element_size_range(self, element_size: int) -> None:
        with pytest.raises(ConfigurationError, match="element_size"):
            PoseidonSpec.create(**_spec_kwargs(element_size=element_size))

    def test_pad_length(self) -> None:
        with pytest.raises(ConfigurationError, match="pad"):
            PoseidonSpec.create(**_spec_kwargs(element_size=1, pad=[]))


class TestSerialization:

    def test_json_roundtrip(self, spec_i1: PoseidonSpec, tmp_path) -> None:
        """Constants loaded from a file reproduce the same parameter set."""
        path = tmp_path / "pow5_t3.json"
        spec_i1.to_json(path)
        loaded = PoseidonSpec.from_json(path)
        assert loaded.to_dict() == spec_i1.to_dict()

    def test_from_dict_accepts_ints(self) -> None:
        data = _spec_kwargs()
        spec = PoseidonSpec.from_dict(data)
        assert ff_ints(spec.round_constants[0]) == data["round_constants"][0]
