"""Poseidon gates.

Column layout (W = state width):
    state[0..W-1]  advice, one row per round state
    arc[0..W-1]    fixed, round constants of the round starting on that row;
                   on input rows the pad vector, on initial rows the IV

Gates:
    full box:      next[i] = sum_j mds[i][j] * (cur[j] + arc[j])^5
    partial box:   mid[0] = (cur[0] + arc[0])^5, mid[k] = cur[k] + arc[k] (k > 0)
                   next[i] = sum_j mds[i][j] * mid[j]
    add-inputs:    next[k] = prev[k] + cur[k] for rate slots,
                   next[W-1] = prev[W-1]               (selector on the input row)
    pad-inputs:    cur[k] = arc[k] for k >= element_size  (same row)
    initial-state: cur[k] = arc[k] for all k
"""

from typing import Callable, Dict, List

from primitives.field import FF, pow5
from primitives.poseidon_spec import PoseidonSpec
from .base import ConstraintContext, ConstraintModule, NamedConstraints


def mix(mid: List, mds: FF, i: int):
    """Row i of the MDS product: sum_j mds[i][j] * mid[j]."""
    acc = mid[0] * mds[i][0]
    for j in range(1, len(mid)):
        acc = acc + mid[j] * mds[i][j]
    return acc


class PoseidonConstraints(ConstraintModule):
    """Gate definitions for one Poseidon chip.

    Args:
        spec: Parameter set (width, MDS matrix, element size)
        state: Name of the advice column group holding the state
        arc: Name of the fixed column group holding round constants / pad / IV
    """

    def __init__(self, spec: PoseidonSpec, state: str = "state", arc: str = "arc"):
        self.spec = spec
        self.state = state
        self.arc = arc

    def gates(self) -> Dict[str, Callable[[ConstraintContext], NamedConstraints]]:
        gates = {
            "full box": self.full_box,
            "partial box": self.partial_box,
            "add-inputs": self.add_inputs,
            "initial-state": self.initial_state,
        }
        if len(self.spec.pad) > 0:
            gates["pad-inputs"] = self.pad_inputs
        return gates

    def _cur(self, ctx: ConstraintContext) -> List:
        return [ctx.col(self.state, i) for i in range(self.spec.width)]

    def _next(self, ctx: ConstraintContext) -> List:
        return [ctx.next_col(self.state, i) for i in range(self.spec.width)]

    def _arcs(self, ctx: ConstraintContext) -> List:
        return [ctx.col(self.arc, i) for i in range(self.spec.width)]

    def full_box(self, ctx: ConstraintContext) -> NamedConstraints:
        cur, nxt, arcs = self._cur(ctx), self._next(ctx), self._arcs(ctx)
        mid = [pow5(cur[j] + arcs[j]) for j in range(self.spec.width)]
        return [
            (f"state[{i}]", mix(mid, self.spec.mds, i) - nxt[i])
            for i in range(self.spec.width)
        ]

    def partial_box(self, ctx: ConstraintContext) -> NamedConstraints:
        cur, nxt, arcs = self._cur(ctx), self._next(ctx), self._arcs(ctx)
        mid = [pow5(cur[0] + arcs[0])]
        mid += [cur[j] + arcs[j] for j in range(1, self.spec.width)]
        return [
            (f"state[{i}]", mix(mid, self.spec.mds, i) - nxt[i])
            for i in range(self.spec.width)
        ]

    def add_inputs(self, ctx: ConstraintContext) -> NamedConstraints:
        rate = self.spec.rate
        constraints = []
        for k in range(rate):
            prev = ctx.prev_col(self.state, k)
            constraints.append((f"rate[{k}]", prev + ctx.col(self.state, k) - ctx.next_col(self.state, k)))
        # The capacity element is never altered by the input
        capacity = ctx.prev_col(self.state, rate) - ctx.next_col(self.state, rate)
        constraints.append(("capacity", capacity))
        return constraints

    def pad_inputs(self, ctx: ConstraintContext) -> NamedConstraints:
        return [
            (f"pad[{k}]", ctx.col(self.state, k) - ctx.col(self.arc, k))
            for k in range(self.spec.element_size, self.spec.rate)
        ]

    def initial_state(self, ctx: ConstraintContext) -> NamedConstraints:
        return [
            (f"iv[{k}]", ctx.col(self.state, k) - ctx.col(self.arc, k))
            for k in range(self.spec.width)
        ]
