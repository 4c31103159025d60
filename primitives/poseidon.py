"""Reference (non-arithmetized) Poseidon permutation and sponge hash.

These functions compute the same values the circuit assigns, with no
constraints attached. The chips reuse them for witness generation and the tests
compare circuit outputs against them.

Sponge schedule:
    state = (0, ..., 0, capacity)
    for each element_size-chunk of the input:
        state[0:rate] += chunk || pad
        state = permute(state)
    digest[0] = state[0]; for k >= 1: state = permute(state); digest[k] = state[0]
"""

from typing import List, Sequence

from primitives.errors import ConfigurationError
from primitives.field import FF, pow5, to_ff_array
from primitives.poseidon_spec import PoseidonSpec


def initial_state(spec: PoseidonSpec) -> FF:
    """(0, ..., 0, capacity)."""
    state = FF.Zeros(spec.width)
    state[spec.width - 1] = spec.capacity_element()
    return state


def full_round(state: FF, r: int, spec: PoseidonSpec) -> FF:
    """Add round constants, S-box every element, mix."""
    mid = pow5(state + spec.round_constants[r])
    return spec.mds @ mid


def partial_round(state: FF, r: int, spec: PoseidonSpec) -> FF:
    """Add round constants, S-box element 0 only, mix."""
    mid = state + spec.round_constants[r]
    mid[0] = pow5(mid[0])
    return spec.mds @ mid


def apply_round(state: FF, r: int, spec: PoseidonSpec) -> FF:
    if spec.is_full_round(r):
        return full_round(state, r, spec)
    return partial_round(state, r, spec)


def permute(state: FF, spec: PoseidonSpec, full_rounds: int = None, partial_rounds: int = None) -> FF:
    """Run the full permutation.

    Args:
        state: W field elements
        spec: Parameter set
        full_rounds: Override for R_F (must agree with the constant table)
        partial_rounds: Override for R_P (must agree with the constant table)

    Returns:
        New state array; the input is not modified
    """
    check_round_counts(spec, full_rounds, partial_rounds)
    if len(state) != spec.width:
        raise ConfigurationError(f"state has {len(state)} elements, expected {spec.width}")
    result = state.copy()
    for r in range(spec.total_rounds):
        result = apply_round(result, r, spec)
    return result


def check_round_counts(spec: PoseidonSpec, full_rounds: int = None, partial_rounds: int = None) -> None:
    """Round counts requested at call time must match the configured constant table."""
    full = spec.full_rounds if full_rounds is None else full_rounds
    partial = spec.partial_rounds if partial_rounds is None else partial_rounds
    if full % 2 != 0:
        raise ConfigurationError(f"full_rounds must be even, got {full}")
    if full != spec.full_rounds or partial != spec.partial_rounds:
        raise ConfigurationError(
            f"requested {full} full + {partial} partial rounds, but the constant table "
            f"covers {spec.full_rounds} + {spec.partial_rounds}"
        )


def pad_chunks(inputs: Sequence, spec: PoseidonSpec) -> List[FF]:
    """Split inputs into element_size chunks and append the pad vector to each."""
    values = to_ff_array(inputs)
    size = spec.element_size
    if len(values) == 0 or len(values) % size != 0:
        raise ConfigurationError(
            f"input length must be a positive multiple of {size}, got {len(values)}"
        )
    chunks = []
    for start in range(0, len(values), size):
        chunk = FF.Zeros(spec.rate)
        chunk[:size] = values[start:start + size]
        chunk[size:] = spec.pad
        chunks.append(chunk)
    return chunks


def absorb(state: FF, chunk: FF, spec: PoseidonSpec) -> FF:
    """Add a rate-wide chunk into the rate slots; capacity passes through."""
    if len(chunk) != spec.rate:
        raise ConfigurationError(f"chunk has {len(chunk)} elements, expected {spec.rate}")
    result = state.copy()
    result[:spec.rate] = state[:spec.rate] + chunk
    return result


def squeeze(state: FF, size: int, spec: PoseidonSpec) -> List[FF]:
    """Read state[0], permuting between reads."""
    digest = [state[0]]
    for _ in range(1, size):
        state = permute(state, spec)
        digest.append(state[0])
    return digest


def sponge_hash(inputs: Sequence, spec: PoseidonSpec, digest_size: int = None) -> FF:
    """Hash a variable-length input (length a multiple of element_size).

    Returns:
        FF array of digest_size (default element_size) elements
    """
    size = spec.element_size if digest_size is None else digest_size
    state = initial_state(spec)
    for chunk in pad_chunks(inputs, spec):
        state = permute(absorb(state, chunk, spec), spec)
    return to_ff_array(squeeze(state, size, spec))


def hash_pair(left: Sequence, right: Sequence, spec: PoseidonSpec) -> FF:
    """Merkle node hash: sponge over left || right."""
    return sponge_hash(list(left) + list(right), spec)
