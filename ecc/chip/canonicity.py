"""Canonical decomposition of a base field element into 3-bit windows.

Write p = 2^(n-1) + t_p with t_p < 2^(n-1). A running-sum decomposition of
alpha into N windows with z_N = 0 only shows alpha < 2^(3N), which can exceed
p. To show the integer alpha is below p, the gate below establishes

    alpha < 2^(n-1),  or
    alpha = 2^(n-1) + low  with  low < t_p.

Let s = (n - 1) // 3, r = n - 1 - 3s, m = 3 * ceil(bits(t_p) / 3) and
j = m / 3. Then z_s = alpha >> 3s holds the top r + 1 bits of alpha, and
z_j = alpha >> m. With a_hi the top bit:

    z_s = a_hi * 2^r + a_rest,  a_hi boolean,  a_rest < 2^r
    a_hi = 1  =>  z_j = 2^(n-1-m)        (no bits set between m and n - 1)
    a_hi = 1  =>  alpha mod 2^m < t_p

The last one is a range check on alpha' = alpha - z_j * 2^m + 2^m - t_p: its
j-window running sum ends in z'_j = 0 exactly when alpha' < 2^m.

    alpha | z_s | z_j | a_hi | a_rest | alpha' | z'_j     <- q_canonicity
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from constraints import AssignedCell, Column, ConstraintSystem, Layouter, Selector
from ecc import FIXED_BASE_WINDOW_SIZE, num_windows
from utilities import bool_check, range_check
from utilities.lookup_range_check import LookupRangeCheckConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanonicityParams:
    """Constants of the canonicity check for a modulus p."""
    n: int
    t_p: int
    s: int
    r: int
    m: int
    j: int

    @classmethod
    def for_modulus(cls, p: int) -> "CanonicityParams":
        """
        Raises:
            ValueError: If t_p is too wide for the check (j > s)
        """
        n = p.bit_length()
        t_p = p - (1 << (n - 1))
        s = (n - 1) // FIXED_BASE_WINDOW_SIZE
        r = n - 1 - FIXED_BASE_WINDOW_SIZE * s
        j = num_windows(t_p.bit_length())
        m = FIXED_BASE_WINDOW_SIZE * j
        if j > s:
            raise ValueError(f"modulus {p:#x}: t_p has {t_p.bit_length()} bits, too many for the canonicity check")
        return cls(n, t_p, s, r, m, j)


@dataclass(frozen=True)
class Config:
    q_canonicity: Selector
    columns: Tuple[Column, ...]
    lookup_config: LookupRangeCheckConfig
    params: CanonicityParams

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        p: int,
        columns: Tuple[Column, ...],
        lookup_config: LookupRangeCheckConfig,
    ) -> "Config":
        if len(columns) != 7:
            raise ValueError(f"canonicity check needs 7 advice columns, got {len(columns)}")
        if lookup_config.k != FIXED_BASE_WINDOW_SIZE:
            raise ValueError(f"canonicity check needs a {FIXED_BASE_WINDOW_SIZE}-bit lookup range check")
        params = CanonicityParams.for_modulus(p)
        config = cls(cs.selector("q_canonicity"), tuple(columns), lookup_config, params)

        def canonicity(ctx):
            q = ctx.selector(config.q_canonicity)
            alpha, z_s, z_j, a_hi, a_rest, alpha_prime, z_prime = (ctx.advice(c) for c in config.columns)
            two_pow_m = ctx.constant(1 << params.m)
            return [
                ("a_hi is boolean", q * bool_check(ctx, a_hi)),
                ("a_rest < 2^r", q * range_check(ctx, a_rest, 1 << params.r)),
                ("z_s = a_hi * 2^r + a_rest", q * (z_s - a_hi * ctx.constant(1 << params.r) - a_rest)),
                ("a_hi => z_j = 2^(n-1-m)", q * a_hi * (z_j - ctx.constant(1 << (params.n - 1 - params.m)))),
                (
                    "alpha' = alpha - z_j * 2^m + 2^m - t_p",
                    q * (alpha_prime - (alpha - z_j * two_pow_m + two_pow_m - ctx.constant(params.t_p))),
                ),
                ("a_hi => alpha' < 2^m", q * a_hi * z_prime),
            ]

        cs.create_gate("canonicity", canonicity)
        return config

    def decompose(self, layouter: Layouter, alpha: AssignedCell, num_windows: int) -> List[AssignedCell]:
        """Decompose `alpha` into `num_windows` windows and prove it canonical.

        The windows must cover the field; EccChip.configure rejects curves
        where the full-width window count cannot.

        Returns:
            The running sum [z_0, ..., z_num_windows], z_0 = alpha and
            z_num_windows = 0
        """
        params = self.params
        zs = self.lookup_config.copy_check(layouter.namespace("decompose"), alpha, num_windows, strict=True)

        alpha_int = None if alpha.value is None else int(alpha.value)
        alpha_prime = None
        a_hi = a_rest = None
        if alpha_int is not None:
            low = alpha_int & ((1 << params.m) - 1)
            alpha_prime = low + (1 << params.m) - params.t_p
            a_hi = (alpha_int >> (params.n - 1)) & 1
            a_rest = (alpha_int >> (FIXED_BASE_WINDOW_SIZE * params.s)) & ((1 << params.r) - 1)

        zs_prime = self.lookup_config.witness_check(
            layouter.namespace("alpha' range check"), alpha_prime, params.j, strict=False
        )

        def assign(region):
            region.enable_selector("canonicity", self.q_canonicity, 0)
            alpha_col, z_s_col, z_j_col, a_hi_col, a_rest_col, alpha_prime_col, z_prime_col = self.columns
            alpha.copy_advice("alpha", region, alpha_col, 0)
            zs[params.s].copy_advice("z_s", region, z_s_col, 0)
            zs[params.j].copy_advice("z_j", region, z_j_col, 0)
            region.assign_advice("a_hi", a_hi_col, 0, a_hi)
            region.assign_advice("a_rest", a_rest_col, 0, a_rest)
            zs_prime[0].copy_advice("alpha'", region, alpha_prime_col, 0)
            zs_prime[params.j].copy_advice("z'_j", region, z_prime_col, 0)

        layouter.assign_region("canonicity check", assign)
        logger.debug("canonical decomposition into %d windows", num_windows)
        return zs
