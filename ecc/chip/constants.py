"""Off-circuit precomputation for fixed-base scalar multiplication.

For a base B and N windows the window table holds, for each window w and each
window value k in [0, H):

    w < N - 1:   [(k + 2) * 8^w] B
    w = N - 1:   [k * 8^(N-1) - sum_{j < N-1} 2 * 8^j] B

The +2 keeps every accumulated partial sum strictly below the next window's
point (and their sum below q), so incomplete addition never sees equal or
opposite operands; the last window subtracts the offsets back out. The last
addition is done with complete addition in-circuit.

In-circuit each window point is recovered from its window value: x by a
degree H-1 interpolation polynomial (`compute_lagrange_coeffs`), and y from a
recovery value u and offset z with u^2 = y + z, where z is chosen so that
-y + z is not a square (`find_zs_and_us`). That makes y the only square root
candidate consistent with x.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import galois
import numpy as np

from ecc import FIXED_BASE_WINDOW_SIZE, H, FixedPoints
from primitives import AffinePoint, Curve
from primitives.field import to_bytes

logger = logging.getLogger(__name__)

# Upper bound on the offset z searched per window.
MAX_Z = 1000 * (1 << (2 * H))


def compute_window_table(curve: Curve, base: AffinePoint, num_windows: int) -> List[List[AffinePoint]]:
    """Compute the H window points of each of `num_windows` windows.

    Raises:
        ValueError: If the window count is too large for the group order
            (accumulation could hit an exceptional case) or a table entry
            is the identity
    """
    if num_windows < 2:
        raise ValueError(f"need at least 2 windows, got {num_windows}")
    # Largest scalar accumulated by incomplete additions: sum_{w<N-1} 9 * 8^w.
    max_partial_sum = 9 * (H ** (num_windows - 1) - 1) // (H - 1)
    if max_partial_sum >= curve.q:
        raise ValueError(f"{num_windows} windows overflow the group order of {curve.name}")

    # base_w = [8^w] B
    base_w = base
    offset = curve.identity()
    table = []
    for w in range(num_windows - 1):
        entry = curve.double(base_w)
        window = []
        for _ in range(H):
            window.append(entry)
            entry = curve.add(entry, base_w)
        table.append(window)
        offset = curve.add(offset, curve.double(base_w))
        for _ in range(FIXED_BASE_WINDOW_SIZE):
            base_w = curve.double(base_w)

    entry = curve.neg(offset)
    window = []
    for _ in range(H):
        window.append(entry)
        entry = curve.add(entry, base_w)
    table.append(window)

    for w, window in enumerate(table):
        if any(point.is_identity() for point in window):
            raise ValueError(f"window {w} of the table for {base} contains the identity")
    return table


def compute_lagrange_coeffs(curve: Curve, base: AffinePoint, num_windows: int) -> List[Tuple[int, ...]]:
    """For each window, the H ascending coefficients of the polynomial
    through (k, x_k) for k in [0, H)."""
    Fp = curve.Fp
    ks = Fp(np.arange(H))
    coeffs = []
    for window in compute_window_table(curve, base, num_windows):
        poly = galois.lagrange_poly(ks, Fp([point.x for point in window]))
        ascending = [int(c) for c in poly.coeffs[::-1]]
        coeffs.append(tuple(ascending + [0] * (H - len(ascending))))
    return coeffs


def find_zs_and_us(
    curve: Curve,
    base: AffinePoint,
    num_windows: int,
    max_z: int = MAX_Z,
) -> Optional[List[Tuple[int, Tuple[bytes, ...]]]]:
    """For each window, find the smallest z with y_k + z square and -y_k + z
    non-square for every k, and the recovery values u_k = sqrt(y_k + z).

    About 2^16 candidates are tried per window, most rejected on the first
    Legendre symbol; Pallas takes a few seconds per window.

    Returns:
        List of (z, us) per window, us being H 32-byte little-endian values;
        None if some window has no such z below `max_z`
    """
    Fp = curve.Fp
    limit = min(max_z, curve.p)
    result = []
    for w, window in enumerate(compute_window_table(curve, base, num_windows)):
        z = _find_z([point.y for point in window], curve.p, limit)
        if z is None:
            logger.debug("window %d: no z below %d", w, limit)
            return None
        us = np.sqrt(Fp([(point.y + z) % curve.p for point in window]))
        result.append((z, tuple(to_bytes(u) for u in us)))
        logger.debug("window %d: z = %d", w, z)
    return result


def _is_square(v: int, p: int) -> bool:
    # Euler's criterion; 0 counts as a square.
    return v == 0 or pow(v, (p - 1) // 2, p) == 1


def _find_z(ys: List[int], p: int, limit: int) -> Optional[int]:
    for z in range(limit):
        if any(_is_square((z - y) % p, p) for y in ys):
            continue
        if all(_is_square((y + z) % p, p) for y in ys):
            return z
    return None


@dataclass(frozen=True)
class FixedBase(FixedPoints):
    """Precomputed tables for one fixed base and window count.

    Built once per base, immutable, and safe to share between concurrent
    syntheses.

    Attributes:
        name: Label for the base (e.g. 'spend_auth_g')
        curve: Curve the base lives on
        base: The generator point
        zs: Per-window offsets z
        us: Per-window recovery values, H 32-byte values each
        coeffs: Per-window interpolation coefficients, H base field ints each
    """
    name: str
    curve: Curve
    base: AffinePoint
    zs: Tuple[int, ...]
    us: Tuple[Tuple[bytes, ...], ...]
    coeffs: Tuple[Tuple[int, ...], ...]

    @classmethod
    def from_generator(cls, curve: Curve, base: AffinePoint, num_windows: int, name: str = "") -> "FixedBase":
        """Run the precomputation for `base` over `num_windows` windows.

        Raises:
            ValueError: If no table can be built for this base and window count
        """
        zs_and_us = find_zs_and_us(curve, base, num_windows)
        if zs_and_us is None:
            raise ValueError(f"no z offsets found for {name or base} with {num_windows} windows")
        logger.debug("built %d-window tables for %s", num_windows, name or base)
        return cls(
            name=name,
            curve=curve,
            base=base,
            zs=tuple(z for z, _ in zs_and_us),
            us=tuple(us for _, us in zs_and_us),
            coeffs=tuple(compute_lagrange_coeffs(curve, base, num_windows)),
        )

    def generator(self) -> AffinePoint:
        return self.base

    def u(self) -> List[Tuple[bytes, ...]]:
        return list(self.us)

    def z(self) -> List[int]:
        return list(self.zs)

    def lagrange_coeffs(self) -> List[Tuple[int, ...]]:
        return list(self.coeffs)
