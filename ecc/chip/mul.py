"""Variable-base scalar multiplication [alpha] P for a base field element alpha.

alpha is decomposed canonically into 3-bit windows (see canonicity). Each
window is split into three bits on one row of the bits region:

    x_p | y_p     | x_qr | y_qr | lambda
    -------------------------------------
    z_w | z_{w+1} | b_0  | b_1  | b_2       <- q_mul_bits

and the product is accumulated most significant bit first by double-and-add
with complete addition. Each added term is [b] P, selected on one row:

    x_p | y_p | x_qr    | y_qr    | alpha
    --------------------------------------
    x   | y   | b * x   | b * y   | b       <- q_mul_select

[0] P = (0, 0) is the identity, which complete addition accepts, so the
scalar may be 0 and P need not avoid any multiple of itself.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from constraints import AssignedCell, Column, ConstraintSystem, Layouter, Selector
from ecc import FIXED_BASE_WINDOW_SIZE, num_windows
from utilities import bool_check

from . import add, canonicity
from .values import EccPoint, EccScalarVar, NonIdentityEccPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    q_mul_bits: Selector
    q_mul_select: Selector
    add_config: add.Config
    canonicity_config: canonicity.Config
    bit: Column

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        add_config: add.Config,
        canonicity_config: canonicity.Config,
        bit: Column,
    ) -> "Config":
        config = cls(cs.selector("q_mul_bits"), cs.selector("q_mul_select"), add_config, canonicity_config, bit)
        x_p, y_p = add_config.x_p, add_config.y_p
        x_qr, y_qr = add_config.x_qr, add_config.y_qr

        def bits_gate(ctx):
            q = ctx.selector(config.q_mul_bits)
            z_cur, z_next = ctx.advice(x_p), ctx.advice(y_p)
            b_0, b_1, b_2 = ctx.advice(x_qr), ctx.advice(y_qr), ctx.advice(add_config.lambda_)
            window = b_0 + ctx.constant(2) * b_1 + ctx.constant(4) * b_2
            return [
                ("b_0 is boolean", q * bool_check(ctx, b_0)),
                ("b_1 is boolean", q * bool_check(ctx, b_1)),
                ("b_2 is boolean", q * bool_check(ctx, b_2)),
                ("window decomposition", q * (z_cur - z_next * ctx.constant(1 << FIXED_BASE_WINDOW_SIZE) - window)),
            ]

        def select_gate(ctx):
            q = ctx.selector(config.q_mul_select)
            b = ctx.advice(bit)
            return [
                ("x_out = b * x", q * (ctx.advice(x_qr) - b * ctx.advice(x_p))),
                ("y_out = b * y", q * (ctx.advice(y_qr) - b * ctx.advice(y_p))),
            ]

        cs.create_gate("variable-base mul bits", bits_gate)
        cs.create_gate("variable-base mul select", select_gate)
        return config

    def num_windows(self) -> int:
        return num_windows(self.canonicity_config.params.n)

    def assign(
        self,
        layouter: Layouter,
        alpha: AssignedCell,
        base: NonIdentityEccPoint,
    ) -> Tuple[EccPoint, EccScalarVar]:
        """Compute [alpha] base."""
        running_sum = self.canonicity_config.decompose(
            layouter.namespace("decompose scalar"), alpha, self.num_windows()
        )
        bits = layouter.assign_region("variable-base mul (bits)", lambda region: self._assign_bits(region, running_sum))

        # Most significant bit first.
        bits_msb = [bit for window in reversed(bits) for bit in reversed(window)]

        acc = None
        for i, bit in enumerate(bits_msb):
            term = layouter.assign_region(
                f"variable-base mul (select bit {i})", lambda region, bit=bit: self._select(region, bit, base)
            )
            if acc is None:
                acc = term
                continue
            acc = layouter.assign_region(
                f"variable-base mul (double {i})",
                lambda region, acc=acc: self.add_config.assign_region(acc, acc, 0, region),
            )
            acc = layouter.assign_region(
                f"variable-base mul (add {i})",
                lambda region, acc=acc, term=term: self.add_config.assign_region(acc, term, 0, region),
            )

        logger.debug("variable-base mul over %d bits", len(bits_msb))
        return acc, EccScalarVar(alpha, running_sum, bits_msb)

    def _assign_bits(self, region, running_sum: List[AssignedCell]) -> List[List[AssignedCell]]:
        add_config = self.add_config
        bit_columns = (add_config.x_qr, add_config.y_qr, add_config.lambda_)
        bits = []
        for w, (z_cur, z_next) in enumerate(zip(running_sum, running_sum[1:])):
            region.enable_selector("variable-base mul bits", self.q_mul_bits, w)
            z_cur.copy_advice(f"z_{w}", region, add_config.x_p, w)
            z_next.copy_advice(f"z_{w + 1}", region, add_config.y_p, w)

            window = None
            if z_cur.value is not None and z_next.value is not None:
                window = int(z_cur.value - z_next.value * type(z_cur.value)(1 << FIXED_BASE_WINDOW_SIZE))
            window_bits = []
            for i, column in enumerate(bit_columns):
                value = None if window is None else (window >> i) & 1
                window_bits.append(region.assign_advice(f"b_{i}, window {w}", column, w, value))
            bits.append(window_bits)
        return bits

    def _select(self, region, bit: AssignedCell, base: NonIdentityEccPoint) -> EccPoint:
        add_config = self.add_config
        region.enable_selector("variable-base mul select", self.q_mul_select, 0)
        x = base.x.copy_advice("x_p", region, add_config.x_p, 0)
        y = base.y.copy_advice("y_p", region, add_config.y_p, 0)
        b = bit.copy_advice("b", region, self.bit, 0)

        x_out = y_out = None
        if b.value is not None and x.value is not None and y.value is not None:
            x_out = b.value * x.value
            y_out = b.value * y.value
        x_out = region.assign_advice("x_out", add_config.x_qr, 0, x_out)
        y_out = region.assign_advice("y_out", add_config.y_qr, 0, y_out)
        return EccPoint(x_out, y_out)
