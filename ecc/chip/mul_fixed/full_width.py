"""Fixed-base multiplication by a full-width scalar field element.

The scalar's windows are witnessed directly in the window column and each one
is range-checked to [0, 8) by the gate below.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import galois

from constraints import AssignedCell, ConstraintSystem, Layouter, Region, SynthesisError, Selector
from ecc import FIXED_BASE_WINDOW_SIZE, H, FixedPoints, num_windows
from utilities import decompose_word, range_check

from . import Config as MulFixedConfig
from ..values import EccPoint, EccScalarFixed


@dataclass(frozen=True)
class Config:
    q_mul_fixed_full: Selector
    super_config: MulFixedConfig

    @classmethod
    def configure(cls, cs: ConstraintSystem, super_config: MulFixedConfig) -> "Config":
        config = cls(cs.selector("q_mul_fixed_full"), super_config)

        def full_width_gate(ctx):
            q = ctx.selector(config.q_mul_fixed_full)
            window = ctx.advice(super_config.window)
            return super_config.coords_check(ctx, q, window) + [
                ("window range check", q * range_check(ctx, window, H)),
            ]

        cs.create_gate("full-width fixed-base scalar mul", full_width_gate)
        return config

    def num_windows(self) -> int:
        return num_windows(self.super_config.curve.q.bit_length())

    def _scalar(self, scalar):
        # Integers are taken mod q; field elements must come from the scalar field.
        if scalar is None:
            return None
        Fq = self.super_config.curve.Fq
        if isinstance(scalar, galois.FieldArray):
            if type(scalar) is not Fq:
                raise TypeError(f"expected an element of GF({Fq.order}), got one of GF({type(scalar).order})")
            return scalar
        return Fq(int(scalar) % Fq.order)

    def _witness(self, region: Region, offset: int, scalar) -> List[AssignedCell]:
        count = self.num_windows()
        values: List[Optional[int]] = [None] * count
        if scalar is not None:
            values = decompose_word(int(scalar), self.super_config.curve.q.bit_length(), FIXED_BASE_WINDOW_SIZE)
        return [
            region.assign_advice(f"k[{w}]", self.super_config.window, offset + w, value)
            for w, value in enumerate(values)
        ]

    def assign(self, layouter: Layouter, scalar, base: FixedPoints) -> Tuple[EccPoint, EccScalarFixed]:
        """Compute [scalar] base.

        Args:
            scalar: Scalar field element or integer (taken mod q), or None if
                unknown

        Raises:
            SynthesisError: If `base` was not built for full-width scalars
            TypeError: If `scalar` is an element of another field
        """
        scalar = self._scalar(scalar)
        if base.num_windows() != self.num_windows():
            raise SynthesisError(
                f"fixed base has {base.num_windows()} windows, full-width scalars need {self.num_windows()}"
            )

        def incomplete(region):
            windows = self._witness(region, 0, scalar)
            acc, mul_b = self.super_config.assign_region_inner(
                region, 0, [None if w.value is None else int(w.value) for w in windows], base, self.q_mul_fixed_full
            )
            return windows, acc, mul_b

        windows, acc, mul_b = layouter.assign_region("full-width fixed-base mul (incomplete addition)", incomplete)

        # The last window may cancel the accumulated offsets exactly, so it
        # needs complete addition.
        result = layouter.assign_region(
            "full-width fixed-base mul (last window, complete addition)",
            lambda region: self.super_config.add_config.assign_region(mul_b.to_point(), acc.to_point(), 0, region),
        )
        return result, EccScalarFixed(scalar, windows)
