"""Complete addition: handles the identity, doubling and P + (-P).

Layout, with the gate enabled on row `offset`:

    x_p | y_p | x_qr | y_qr | lambda | alpha | beta | gamma | delta
    ----------------------------------------------------------------
    x_p | y_p | x_q  | y_q  | lambda | alpha | beta | gamma | delta
        |     | x_r  | y_r

with
    alpha = inv0(x_q - x_p)
    beta  = inv0(x_p)
    gamma = inv0(x_q)
    delta = inv0(y_q + y_p) if x_q == x_p, else 0

The gate assumes the curve coefficient a is 0.
"""

from dataclasses import dataclass

from constraints import Column, ConstraintSystem, Region, Selector
from primitives import Curve
from primitives.field import inv0

from .values import EccPoint


@dataclass(frozen=True)
class Config:
    q_add: Selector
    x_p: Column
    y_p: Column
    x_qr: Column
    y_qr: Column
    lambda_: Column
    alpha: Column
    beta: Column
    gamma: Column
    delta: Column
    curve: Curve

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        curve: Curve,
        x_p: Column,
        y_p: Column,
        x_qr: Column,
        y_qr: Column,
        lambda_: Column,
        alpha: Column,
        beta: Column,
        gamma: Column,
        delta: Column,
    ) -> "Config":
        config = cls(cs.selector("q_add"), x_p, y_p, x_qr, y_qr, lambda_, alpha, beta, gamma, delta, curve)

        def complete_addition(ctx):
            q = ctx.selector(config.q_add)
            xp, yp = ctx.advice(x_p), ctx.advice(y_p)
            xq, yq = ctx.advice(x_qr), ctx.advice(y_qr)
            xr, yr = ctx.advice(x_qr, 1), ctx.advice(y_qr, 1)
            lam = ctx.advice(lambda_)
            a, b, c, d = ctx.advice(alpha), ctx.advice(beta), ctx.advice(gamma), ctx.advice(delta)
            one, two, three = ctx.constant(1), ctx.constant(2), ctx.constant(3)

            dx = xq - xp
            sum_y = yq + yp
            if_alpha = dx * a
            if_beta = one - xp * b
            if_gamma = one - xq * c
            if_delta = sum_y * d

            # Both formulas for (x_r, y_r), used when neither input is the identity.
            x_r_expr = lam * lam - xp - xq - xr
            y_r_expr = lam * (xp - xr) - yp - yr
            both_nonzero = xp * xq

            return [
                ("1", q * dx * (dx * lam - (yq - yp))),
                ("2", q * (one - if_alpha) * (two * yp * lam - three * xp * xp)),
                ("3a", q * both_nonzero * dx * x_r_expr),
                ("3b", q * both_nonzero * dx * y_r_expr),
                ("4a", q * both_nonzero * sum_y * x_r_expr),
                ("4b", q * both_nonzero * sum_y * y_r_expr),
                ("5a", q * if_beta * (xr - xq)),
                ("5b", q * if_beta * (yr - yq)),
                ("6a", q * if_gamma * (xr - xp)),
                ("6b", q * if_gamma * (yr - yp)),
                ("7a", q * (one - if_alpha - if_delta) * xr),
                ("7b", q * (one - if_alpha - if_delta) * yr),
            ]

        cs.create_gate("complete addition", complete_addition)
        return config

    def assign_region(self, p: EccPoint, q: EccPoint, offset: int, region: Region) -> EccPoint:
        """Assign `p + q` starting at `offset`; either input may be the identity."""
        region.enable_selector("complete addition", self.q_add, offset)

        p.x.copy_advice("x_p", region, self.x_p, offset)
        p.y.copy_advice("y_p", region, self.y_p, offset)
        q.x.copy_advice("x_q", region, self.x_qr, offset)
        q.y.copy_advice("y_q", region, self.y_qr, offset)

        x_p, y_p = p.x.value, p.y.value
        x_q, y_q = q.x.value, q.y.value
        known = all(v is not None for v in (x_p, y_p, x_q, y_q))

        alpha = beta = gamma = delta = lambda_ = None
        x_r = y_r = None
        if known:
            Fp = type(x_p)
            alpha = inv0(x_q - x_p)
            beta = inv0(x_p)
            gamma = inv0(x_q)
            delta = inv0(y_q + y_p) if x_q == x_p else Fp(0)
            if x_q != x_p:
                lambda_ = (y_q - y_p) / (x_q - x_p)
            elif y_p != 0:
                lambda_ = Fp(3) * x_p * x_p / (Fp(2) * y_p)
            else:
                lambda_ = Fp(0)

            r = self.curve.add(p.point(), q.point())
            x_r, y_r = r.x, r.y

        region.assign_advice("lambda", self.lambda_, offset, lambda_)
        region.assign_advice("alpha", self.alpha, offset, alpha)
        region.assign_advice("beta", self.beta, offset, beta)
        region.assign_advice("gamma", self.gamma, offset, gamma)
        region.assign_advice("delta", self.delta, offset, delta)

        x_r = region.assign_advice("x_r", self.x_qr, offset + 1, x_r)
        y_r = region.assign_advice("y_r", self.y_qr, offset + 1, y_r)
        return EccPoint(x_r, y_r)
