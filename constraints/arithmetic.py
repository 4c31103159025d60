"""Arithmetic demo gates over two advice columns a, b.

Each gate reads its operands on the current row and the result from column a
on the next row:

    mul:   a * b - a' = 0
    add:   a + b - a' = 0
    cube:  a * a * a - a' = 0
"""

from typing import Callable, Dict

from .base import ConstraintContext, ConstraintModule, NamedConstraints


class ArithmeticConstraints(ConstraintModule):

    def __init__(self, lhs: str = "a", rhs: str = "b"):
        self.lhs = lhs
        self.rhs = rhs

    def gates(self) -> Dict[str, Callable[[ConstraintContext], NamedConstraints]]:
        return {"mul": self.mul, "add": self.add, "cube": self.cube}

    def mul(self, ctx: ConstraintContext) -> NamedConstraints:
        return [("mul", ctx.col(self.lhs) * ctx.col(self.rhs) - ctx.next_col(self.lhs))]

    def add(self, ctx: ConstraintContext) -> NamedConstraints:
        return [("add", ctx.col(self.lhs) + ctx.col(self.rhs) - ctx.next_col(self.lhs))]

    def cube(self, ctx: ConstraintContext) -> NamedConstraints:
        a = ctx.col(self.lhs)
        return [("cube", a * a * a - ctx.next_col(self.lhs))]
