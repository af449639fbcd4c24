"""Chip implementing EccInstructions.

All operations share ten advice columns:

    advices[0] x_p            advices[5] alpha / u / bit
    advices[1] y_p            advices[6] beta
    advices[2] x_qr           advices[7] gamma
    advices[3] y_qr           advices[8] delta
    advices[4] lambda/window  advices[9] lookup running sum

plus H fixed columns of interpolation coefficients and a fixed column for
the y-recovery offsets z. The lookup range check is configured by the caller
on advices[9] with 3-bit windows.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from constraints import Column, ConstraintSystem, Layouter
from ecc import EccInstructions, FIXED_BASE_WINDOW_SIZE, FixedPoints, num_windows
from primitives import Curve
from utilities import UtilitiesInstructions
from utilities.lookup_range_check import LookupRangeCheckConfig

from . import add, add_incomplete, canonicity, mul, witness_point
from .mul_fixed import Config as MulFixedConfig
from .mul_fixed import base_field_elem, full_width, short
from .values import (
    EccBaseFieldElemFixed,
    EccPoint,
    EccScalarFixed,
    EccScalarFixedShort,
    EccScalarVar,
    NonIdentityEccPoint,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EccConfig:
    """Configuration of EccChip: columns and one config per operation."""
    curve: Curve
    advices: Tuple[Column, ...]
    lagrange_coeffs: Tuple[Column, ...]
    fixed_z: Column
    lookup_config: LookupRangeCheckConfig
    witness_point: witness_point.Config
    add_incomplete: add_incomplete.Config
    add: add.Config
    mul: mul.Config
    mul_fixed: MulFixedConfig
    mul_fixed_full: full_width.Config
    mul_fixed_short: short.Config
    mul_fixed_base_field: base_field_elem.Config
    canonicity: canonicity.Config


class EccChip(EccInstructions, UtilitiesInstructions):
    """ECC gadget chip. Two chips are equal when they share a configuration."""

    def __init__(self, config: EccConfig):
        self.config = config

    @classmethod
    def construct(cls, config: EccConfig) -> "EccChip":
        return cls(config)

    def __eq__(self, other) -> bool:
        return isinstance(other, EccChip) and self.config is other.config

    def __hash__(self) -> int:
        return id(self.config)

    @staticmethod
    def configure(
        cs: ConstraintSystem,
        curve: Curve,
        advices: Sequence[Column],
        lagrange_coeffs: Sequence[Column],
        range_check: LookupRangeCheckConfig,
    ) -> EccConfig:
        """Register every ECC gate on the given columns.

        Args:
            cs: Constraint system to configure
            curve: Curve whose base field is the circuit field
            advices: Ten advice columns; advices[9] must be the range check's
                running-sum column
            lagrange_coeffs: H fixed columns for interpolation coefficients
            range_check: 3-bit lookup range check

        Raises:
            ValueError: If the columns or the curve do not fit the chip
        """
        advices = tuple(advices)
        if len(advices) != 10:
            raise ValueError(f"EccChip needs 10 advice columns, got {len(advices)}")
        if range_check.running_sum != advices[9]:
            raise ValueError("the range check must run on advices[9]")
        if range_check.k != FIXED_BASE_WINDOW_SIZE:
            raise ValueError(f"EccChip needs a {FIXED_BASE_WINDOW_SIZE}-bit lookup range check")
        if curve.a != 0:
            raise ValueError(f"{curve.name}: complete addition requires a = 0")
        if cs.field.characteristic != curve.p:
            raise ValueError(f"circuit field does not match the base field of {curve.name}")
        # Base field elements are multiplied using the full-width tables.
        if FIXED_BASE_WINDOW_SIZE * num_windows(curve.q.bit_length()) < curve.p.bit_length():
            raise ValueError(f"{curve.name}: full-width windows cannot cover a {curve.p.bit_length()}-bit base field element")

        for column in advices:
            cs.enable_equality(column)
        fixed_z = cs.fixed_column("fixed_z")

        witness_point_config = witness_point.Config.configure(cs, curve, advices[0], advices[1])
        add_incomplete_config = add_incomplete.Config.configure(cs, *advices[0:4])
        add_config = add.Config.configure(cs, curve, *advices[0:9])
        mul_fixed_config = MulFixedConfig.configure(
            cs,
            curve,
            tuple(lagrange_coeffs),
            fixed_z,
            window=advices[4],
            u=advices[5],
            add_config=add_config,
            add_incomplete_config=add_incomplete_config,
        )
        canonicity_config = canonicity.Config.configure(cs, curve.p, advices[0:7], range_check)

        config = EccConfig(
            curve=curve,
            advices=advices,
            lagrange_coeffs=tuple(lagrange_coeffs),
            fixed_z=fixed_z,
            lookup_config=range_check,
            witness_point=witness_point_config,
            add_incomplete=add_incomplete_config,
            add=add_config,
            mul=mul.Config.configure(cs, add_config, canonicity_config, bit=advices[5]),
            mul_fixed=mul_fixed_config,
            mul_fixed_full=full_width.Config.configure(cs, mul_fixed_config),
            mul_fixed_short=short.Config.configure(cs, mul_fixed_config, range_check, advices[2], advices[3]),
            mul_fixed_base_field=base_field_elem.Config(mul_fixed_config, canonicity_config),
            canonicity=canonicity_config,
        )
        logger.debug("configured EccChip for %s: %d gates", curve.name, len(cs.gates))
        return config

    # --- UtilitiesInstructions ---

    def advice_column(self) -> Column:
        return self.config.advices[0]

    # --- EccInstructions ---

    def constrain_equal(self, layouter: Layouter, a: EccPoint, b: EccPoint) -> None:
        def assign(region):
            region.constrain_equal(a.x.cell, b.x.cell)
            region.constrain_equal(a.y.cell, b.y.cell)

        layouter.assign_region("constrain equal", assign)

    def witness_point(self, layouter: Layouter, value) -> EccPoint:
        return layouter.assign_region(
            "witness point",
            lambda region: self.config.witness_point.point(value, 0, region),
        )

    def witness_point_non_id(self, layouter: Layouter, value) -> NonIdentityEccPoint:
        return layouter.assign_region(
            "witness non-identity point",
            lambda region: self.config.witness_point.point_non_id(value, 0, region),
        )

    def is_non_identity_point(self, point) -> bool:
        return isinstance(point, NonIdentityEccPoint)

    @staticmethod
    def extract_p(point):
        return point.x

    def add_incomplete(self, layouter: Layouter, a: NonIdentityEccPoint, b: NonIdentityEccPoint) -> NonIdentityEccPoint:
        return layouter.assign_region(
            "incomplete point addition",
            lambda region: self.config.add_incomplete.assign_region(a, b, 0, region),
        )

    def add(self, layouter: Layouter, a, b) -> EccPoint:
        return layouter.assign_region(
            "complete point addition",
            lambda region: self.config.add.assign_region(a.to_point(), b.to_point(), 0, region),
        )

    def mul(self, layouter: Layouter, scalar, base: NonIdentityEccPoint) -> Tuple[EccPoint, EccScalarVar]:
        return self.config.mul.assign(layouter.namespace("variable-base mul"), scalar, base)

    def mul_fixed(self, layouter: Layouter, scalar, base: FixedPoints) -> Tuple[EccPoint, EccScalarFixed]:
        return self.config.mul_fixed_full.assign(layouter.namespace("full-width fixed-base mul"), scalar, base)

    def mul_fixed_short(self, layouter: Layouter, magnitude_sign, base: FixedPoints) -> Tuple[EccPoint, EccScalarFixedShort]:
        return self.config.mul_fixed_short.assign(layouter.namespace("short fixed-base mul"), magnitude_sign, base)

    def mul_fixed_base_field_elem(self, layouter: Layouter, base_field_elem, base: FixedPoints) -> EccPoint:
        return self.config.mul_fixed_base_field.assign(
            layouter.namespace("base-field elem fixed-base mul"), base_field_elem, base
        )


__all__ = [
    "EccBaseFieldElemFixed",
    "EccChip",
    "EccConfig",
    "EccPoint",
    "EccScalarFixed",
    "EccScalarFixedShort",
    "EccScalarVar",
    "NonIdentityEccPoint",
]
