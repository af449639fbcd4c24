"""Fixed-base multiplication by a short signed scalar magnitude * sign.

The magnitude is range-checked by the lookup running sum to
short_scalar_bits bits; the running sum is copied into the window column and
the gate below further limits the most significant window to the bits that
remain. The magnitude product is then conditionally negated:

    x_p     | y_p     | x_qr  | y_qr  | window
    -------------------------------------------
    x_mag   | y_mag   | x_out | y_out | sign     <- q_mul_fixed_sign
"""

from dataclasses import dataclass
from typing import Tuple

from constraints import AssignedCell, Column, ConstraintSystem, Layouter, SynthesisError, Selector
from ecc import FIXED_BASE_WINDOW_SIZE, FixedPoints, num_windows
from utilities import range_check
from utilities.lookup_range_check import LookupRangeCheckConfig

from . import Config as MulFixedConfig
from ..values import EccPoint, EccScalarFixedShort


@dataclass(frozen=True)
class Config:
    q_mul_fixed_short: Selector
    q_mul_fixed_sign: Selector
    super_config: MulFixedConfig
    lookup_config: LookupRangeCheckConfig
    x_out: Column
    y_out: Column

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        super_config: MulFixedConfig,
        lookup_config: LookupRangeCheckConfig,
        x_out: Column,
        y_out: Column,
    ) -> "Config":
        if lookup_config.k != FIXED_BASE_WINDOW_SIZE:
            raise ValueError(f"short scalars need a {FIXED_BASE_WINDOW_SIZE}-bit lookup range check")
        config = cls(
            cs.selector("q_mul_fixed_short"),
            cs.selector("q_mul_fixed_sign"),
            super_config,
            lookup_config,
            x_out,
            y_out,
        )
        last_window_range = 1 << config.last_window_bits()

        def last_window_check(ctx):
            q = ctx.selector(config.q_mul_fixed_short)
            z_cur = ctx.advice(super_config.window)
            z_next = ctx.advice(super_config.window, 1)
            word = z_cur - z_next * ctx.constant(1 << FIXED_BASE_WINDOW_SIZE)
            return [("last window range check", q * range_check(ctx, word, last_window_range))]

        def sign_check(ctx):
            q = ctx.selector(config.q_mul_fixed_sign)
            sign = ctx.advice(super_config.window)
            x_p, y_p = ctx.advice(super_config.x_p), ctx.advice(super_config.y_p)
            x_r, y_r = ctx.advice(x_out), ctx.advice(y_out)
            return [
                ("sign is +/-1", q * (sign * sign - ctx.constant(1))),
                ("x unchanged", q * (x_r - x_p)),
                ("y conditionally negated", q * (y_r - sign * y_p)),
            ]

        cs.create_gate("short fixed-base mul last window", last_window_check)
        cs.create_gate("short fixed-base mul sign", sign_check)
        return config

    def num_bits(self) -> int:
        return self.super_config.curve.short_scalar_bits

    def num_windows(self) -> int:
        return num_windows(self.num_bits())

    def last_window_bits(self) -> int:
        return self.num_bits() - FIXED_BASE_WINDOW_SIZE * (self.num_windows() - 1)

    def assign(
        self,
        layouter: Layouter,
        magnitude_sign: Tuple[AssignedCell, AssignedCell],
        base: FixedPoints,
    ) -> Tuple[EccPoint, EccScalarFixedShort]:
        """Compute [magnitude * sign] base.

        Raises:
            SynthesisError: If `base` was not built for short scalars
        """
        count = self.num_windows()
        if base.num_windows() != count:
            raise SynthesisError(f"fixed base has {base.num_windows()} windows, short scalars need {count}")
        magnitude, sign = magnitude_sign

        # The lookup's strict check constrains z_N = 0, so the windows cover
        # every bit of the magnitude.
        running_sum = self.lookup_config.copy_check(
            layouter.namespace("magnitude range check"), magnitude, count, strict=True
        )

        def incomplete(region):
            windows = self.super_config.copy_running_sum(region, 0, running_sum)
            region.enable_selector("last window range check", self.q_mul_fixed_short, count - 1)
            return self.super_config.assign_region_inner(
                region, 0, windows, base, self.super_config.q_mul_fixed_running_sum
            )

        acc, mul_b = layouter.assign_region("short fixed-base mul (incomplete addition)", incomplete)
        magnitude_mul = layouter.assign_region(
            "short fixed-base mul (last window, complete addition)",
            lambda region: self.super_config.add_config.assign_region(mul_b.to_point(), acc.to_point(), 0, region),
        )

        def apply_sign(region):
            region.enable_selector("sign check", self.q_mul_fixed_sign, 0)
            x_p = magnitude_mul.x.copy_advice("x_p", region, self.super_config.x_p, 0)
            y_p = magnitude_mul.y.copy_advice("y_p", region, self.super_config.y_p, 0)
            sign_cell = sign.copy_advice("sign", region, self.super_config.window, 0)

            y_out = None
            if y_p.value is not None and sign_cell.value is not None:
                y_out = sign_cell.value * y_p.value
            x = region.assign_advice("x_out", self.x_out, 0, x_p.value)
            y = region.assign_advice("y_out", self.y_out, 0, y_out)
            return EccPoint(x, y)

        result = layouter.assign_region("short fixed-base mul (sign)", apply_sign)
        return result, EccScalarFixedShort(magnitude, sign, running_sum)
