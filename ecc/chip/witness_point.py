"""Witnessing points, with and without the non-identity guarantee."""

from dataclasses import dataclass
from typing import Optional

from constraints import Column, ConstraintSystem, Region, Selector, WitnessError
from primitives import AffinePoint, Curve

from .values import EccPoint, NonIdentityEccPoint


@dataclass(frozen=True)
class Config:
    q_point: Selector
    q_point_non_id: Selector
    x: Column
    y: Column

    @classmethod
    def configure(cls, cs: ConstraintSystem, curve: Curve, x: Column, y: Column) -> "Config":
        config = cls(cs.selector("q_point"), cs.selector("q_point_non_id"), x, y)

        def curve_eqn(ctx):
            x_p = ctx.advice(x)
            y_p = ctx.advice(y)
            return y_p * y_p - x_p * x_p * x_p - ctx.constant(curve.b)

        def witness_point(ctx):
            q_point = ctx.selector(config.q_point)
            # Either (x, y) is (0, 0), or it is on the curve.
            return [
                ("x == 0 v on_curve", q_point * ctx.advice(x) * curve_eqn(ctx)),
                ("y == 0 v on_curve", q_point * ctx.advice(y) * curve_eqn(ctx)),
            ]

        def witness_non_identity_point(ctx):
            # (0, 0) is not on the curve, so this also excludes the identity.
            return [("on_curve", ctx.selector(config.q_point_non_id) * curve_eqn(ctx))]

        cs.create_gate("witness point", witness_point)
        cs.create_gate("witness non-identity point", witness_non_identity_point)
        return config

    def _assign_xy(self, value: Optional[AffinePoint], offset: int, region: Region):
        x = None if value is None else value.x
        y = None if value is None else value.y
        x_cell = region.assign_advice("x", self.x, offset, x)
        y_cell = region.assign_advice("y", self.y, offset, y)
        return x_cell, y_cell

    def point(self, value: Optional[AffinePoint], offset: int, region: Region) -> EccPoint:
        """Assign a point that may be the identity."""
        region.enable_selector("witness point", self.q_point, offset)
        return EccPoint(*self._assign_xy(value, offset, region))

    def point_non_id(self, value: Optional[AffinePoint], offset: int, region: Region) -> NonIdentityEccPoint:
        """Assign a non-identity point.

        Raises:
            WitnessError: If `value` is the identity
        """
        if value is not None and value.is_identity():
            raise WitnessError("cannot witness the identity as a non-identity point")
        region.enable_selector("witness non-identity point", self.q_point_non_id, offset)
        return NonIdentityEccPoint(*self._assign_xy(value, offset, region))
