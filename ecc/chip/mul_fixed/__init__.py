"""Shared machinery for fixed-base scalar multiplication.

All three variants (full-width scalar, short signed scalar, base field
element) decompose the scalar into 3-bit windows k_0, ..., k_{N-1}, least
significant first, and lay out one row per window:

    x_p | y_p | window | u   | lagrange_coeffs[0..8] | fixed_z
    ----------------------------------------------------------
    x_0 | y_0 | k_0    | u_0 | coeffs_0              | z_0
    x_1 | y_1 | k_1    | u_1 | coeffs_1              | z_1
    ...

(x_w, y_w) is the window table entry selected by k_w. A coordinates check on
each row ties it to k_w: x_w is the interpolation polynomial evaluated at
k_w, and y_w + z_w is the square of u_w. The window points 0..N-2 are summed
with incomplete additions (in x_qr, y_qr beside them); the caller adds the
last window with complete addition.

For the short and base field variants the window column holds the running
sum z_0, z_1, ... instead, and the window value is z_w - 8 * z_{w+1}.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from constraints import AssignedCell, Column, ConstraintSystem, Region, SynthesisError, Selector
from ecc import FixedPoints, H
from primitives import Curve
from primitives.field import from_bytes

from .. import add, add_incomplete
from ..values import NonIdentityEccPoint


@dataclass(frozen=True)
class Config:
    q_mul_fixed_running_sum: Selector
    lagrange_coeffs: Tuple[Column, ...]
    fixed_z: Column
    x_p: Column
    y_p: Column
    window: Column
    u: Column
    add_config: add.Config
    add_incomplete_config: add_incomplete.Config
    curve: Curve

    @classmethod
    def configure(
        cls,
        cs: ConstraintSystem,
        curve: Curve,
        lagrange_coeffs: Tuple[Column, ...],
        fixed_z: Column,
        window: Column,
        u: Column,
        add_config: add.Config,
        add_incomplete_config: add_incomplete.Config,
    ) -> "Config":
        if len(lagrange_coeffs) != H:
            raise ValueError(f"need {H} lagrange coefficient columns, got {len(lagrange_coeffs)}")
        # The window points are summed in place, so they share x_p, y_p with
        # both addition gates.
        if (add_config.x_p, add_config.y_p) != (add_incomplete_config.x_p, add_incomplete_config.y_p):
            raise ValueError("complete and incomplete addition must share the x_p, y_p columns")

        config = cls(
            q_mul_fixed_running_sum=cs.selector("q_mul_fixed_running_sum"),
            lagrange_coeffs=tuple(lagrange_coeffs),
            fixed_z=fixed_z,
            x_p=add_incomplete_config.x_p,
            y_p=add_incomplete_config.y_p,
            window=window,
            u=u,
            add_config=add_config,
            add_incomplete_config=add_incomplete_config,
            curve=curve,
        )

        def running_sum_coords_check(ctx):
            q = ctx.selector(config.q_mul_fixed_running_sum)
            z_cur = ctx.advice(window)
            z_next = ctx.advice(window, 1)
            word = z_cur - z_next * ctx.constant(H)
            return config.coords_check(ctx, q, word)

        cs.create_gate("running sum coordinates check", running_sum_coords_check)
        return config

    def coords_check(self, ctx, toggle, window) -> List:
        """Constraints tying (x_p, y_p) on the current row to the window value.

        Args:
            toggle: Selector expression enabling the check
            window: Expression for the window value k
        """
        x_p = ctx.advice(self.x_p)
        y_p = ctx.advice(self.y_p)
        u = ctx.advice(self.u)
        z = ctx.fixed(self.fixed_z)

        # Horner evaluation of sum_i coeff_i * k^i
        interpolated_x = ctx.fixed(self.lagrange_coeffs[H - 1])
        for column in reversed(self.lagrange_coeffs[:-1]):
            interpolated_x = interpolated_x * window + ctx.fixed(column)

        return [
            ("x check", toggle * (interpolated_x - x_p)),
            # u^2 = y_p + z
            ("y check", toggle * (u * u - y_p - z)),
            # (x_p, y_p) is on the curve; it is never the identity.
            ("on-curve", toggle * (y_p * y_p - x_p * x_p * x_p - ctx.constant(self.curve.b))),
        ]

    def assign_region_inner(
        self,
        region: Region,
        offset: int,
        windows: List[Optional[int]],
        base: FixedPoints,
        coords_check_toggle: Selector,
    ) -> Tuple[NonIdentityEccPoint, NonIdentityEccPoint]:
        """Assign the window points and sum all but the last.

        The window column must already be filled by the caller.

        Args:
            windows: Window values k_w (None if unknown), least significant first
            base: Fixed base with one table per window
            coords_check_toggle: Selector of the caller's coordinates check

        Returns:
            (acc, mul_b): the sum of windows 0..N-2, and the last window point
        """
        num_windows = base.num_windows()
        if len(windows) != num_windows:
            raise SynthesisError(f"expected {num_windows} windows, got {len(windows)}")

        self._assign_fixed_constants(region, offset, base, coords_check_toggle)
        points = self._witness_window_points(region, offset, windows, base)

        acc = points[0]
        for w in range(1, num_windows - 1):
            acc = self.add_incomplete_config.assign_region(points[w], acc, offset + w, region)
        return acc, points[-1]

    def _assign_fixed_constants(self, region: Region, offset: int, base: FixedPoints, toggle: Selector) -> None:
        for w, (coeffs, z) in enumerate(zip(base.lagrange_coeffs(), base.z())):
            region.enable_selector("coordinates check", toggle, offset + w)
            for column, coeff in zip(self.lagrange_coeffs, coeffs):
                region.assign_fixed("lagrange coefficient", column, offset + w, coeff)
            region.assign_fixed("z", self.fixed_z, offset + w, z)

    def _witness_window_points(
        self,
        region: Region,
        offset: int,
        windows: List[Optional[int]],
        base: FixedPoints,
    ) -> List[NonIdentityEccPoint]:
        Fp = self.curve.Fp
        points = []
        for w, (k, coeffs, z, us) in enumerate(zip(windows, base.lagrange_coeffs(), base.z(), base.u())):
            x = y = u = None
            if k is not None:
                if not 0 <= k < H:
                    raise SynthesisError(f"window {w} value {k} is out of range")
                k_elem = Fp(k)
                x = Fp(0)
                for coeff in reversed(coeffs):
                    x = x * k_elem + Fp(coeff)
                u = from_bytes(Fp, us[k])
                y = u * u - Fp(z)
            x_cell = region.assign_advice(f"x_p, window {w}", self.x_p, offset + w, x)
            y_cell = region.assign_advice(f"y_p, window {w}", self.y_p, offset + w, y)
            region.assign_advice(f"u, window {w}", self.u, offset + w, u)
            points.append(NonIdentityEccPoint(x_cell, y_cell))
        return points

    def copy_running_sum(self, region: Region, offset: int, running_sum: List[AssignedCell]) -> List[Optional[int]]:
        """Copy z_0..z_N into the window column and return the window values."""
        zs = [z.copy_advice(f"z_{i}", region, self.window, offset + i) for i, z in enumerate(running_sum)]
        windows = []
        for z_cur, z_next in zip(zs, zs[1:]):
            if z_cur.value is None or z_next.value is None:
                windows.append(None)
            else:
                windows.append(int(z_cur.value - z_next.value * self.curve.Fp(H)))
        return windows
