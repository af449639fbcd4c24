"""Fixed-base multiplication by a base field element.

The element is decomposed canonically (see ecc.chip.canonicity) into as many
windows as a full-width scalar, so the same fixed-base tables serve both.
The running sum is copied into the window column; each window's range is
already enforced by the lookup.
"""

from dataclasses import dataclass

from constraints import AssignedCell, Layouter, SynthesisError
from ecc import FixedPoints, num_windows

from . import Config as MulFixedConfig
from ..canonicity import Config as CanonicityConfig
from ..values import EccBaseFieldElemFixed, EccPoint


@dataclass(frozen=True)
class Config:
    super_config: MulFixedConfig
    canonicity_config: CanonicityConfig

    def num_windows(self) -> int:
        return num_windows(self.super_config.curve.q.bit_length())

    def assign(self, layouter: Layouter, scalar: AssignedCell, base: FixedPoints) -> EccPoint:
        """Compute [scalar] base for a base field variable `scalar`.

        Raises:
            SynthesisError: If `base` was not built for full-width scalars
        """
        count = self.num_windows()
        if base.num_windows() != count:
            raise SynthesisError(f"fixed base has {base.num_windows()} windows, base field elements need {count}")

        running_sum = self.canonicity_config.decompose(layouter.namespace("canonicity"), scalar, count)
        scalar = EccBaseFieldElemFixed(scalar, running_sum)

        def incomplete(region):
            windows = self.super_config.copy_running_sum(region, 0, scalar.running_sum)
            return self.super_config.assign_region_inner(
                region, 0, windows, base, self.super_config.q_mul_fixed_running_sum
            )

        acc, mul_b = layouter.assign_region("base-field elem fixed-base mul (incomplete addition)", incomplete)
        return layouter.assign_region(
            "base-field elem fixed-base mul (last window, complete addition)",
            lambda region: self.super_config.add_config.assign_region(mul_b.to_point(), acc.to_point(), 0, region),
        )
