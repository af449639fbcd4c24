"""Incomplete addition of two non-identity points.

Layout, with the gate enabled on row `offset`:

    x_p | y_p | x_qr | y_qr
    --------------------------
    x_p | y_p | x_q  | y_q     <- offset
        |     | x_r  | y_r
"""

from dataclasses import dataclass

from constraints import Column, ConstraintSystem, Region, SynthesisError, Selector

from .values import NonIdentityEccPoint


@dataclass(frozen=True)
class Config:
    q_add_incomplete: Selector
    x_p: Column
    y_p: Column
    x_qr: Column
    y_qr: Column

    @classmethod
    def configure(cls, cs: ConstraintSystem, x_p: Column, y_p: Column, x_qr: Column, y_qr: Column) -> "Config":
        config = cls(cs.selector("q_add_incomplete"), x_p, y_p, x_qr, y_qr)

        def incomplete_addition(ctx):
            q = ctx.selector(config.q_add_incomplete)
            xp, yp = ctx.advice(x_p), ctx.advice(y_p)
            xq, yq = ctx.advice(x_qr), ctx.advice(y_qr)
            xr, yr = ctx.advice(x_qr, 1), ctx.advice(y_qr, 1)

            # (x_r + x_q + x_p)(x_p - x_q)^2 - (y_p - y_q)^2 = 0
            poly1 = (xr + xq + xp) * (xp - xq) * (xp - xq) - (yp - yq) * (yp - yq)
            # (y_r + y_q)(x_p - x_q) - (y_p - y_q)(x_q - x_r) = 0
            poly2 = (yr + yq) * (xp - xq) - (yp - yq) * (xq - xr)
            return [("x_r", q * poly1), ("y_r", q * poly2)]

        cs.create_gate("incomplete addition", incomplete_addition)
        return config

    def assign_region(
        self,
        p: NonIdentityEccPoint,
        q: NonIdentityEccPoint,
        offset: int,
        region: Region,
    ) -> NonIdentityEccPoint:
        """Assign `p + q` starting at `offset`.

        Raises:
            SynthesisError: If p and q have the same x-coordinate (p == q or
                p == -q), which incomplete addition cannot handle
        """
        region.enable_selector("incomplete addition", self.q_add_incomplete, offset)

        x_p, y_p = p.x.value, p.y.value
        x_q, y_q = q.x.value, q.y.value
        if x_p is not None and x_q is not None and x_p == x_q:
            raise SynthesisError("incomplete addition: P and Q share an x-coordinate")

        p.x.copy_advice("x_p", region, self.x_p, offset)
        p.y.copy_advice("y_p", region, self.y_p, offset)
        q.x.copy_advice("x_q", region, self.x_qr, offset)
        q.y.copy_advice("y_q", region, self.y_qr, offset)

        x_r = y_r = None
        if all(v is not None for v in (x_p, y_p, x_q, y_q)):
            lambda_ = (y_p - y_q) / (x_p - x_q)
            x_r = lambda_ * lambda_ - x_p - x_q
            y_r = lambda_ * (x_p - x_r) - y_p

        x_r = region.assign_advice("x_r", self.x_qr, offset + 1, x_r)
        y_r = region.assign_advice("y_r", self.y_qr, offset + 1, y_r)
        return NonIdentityEccPoint(x_r, y_r)
