"""Affine short-Weierstrass curve arithmetic over galois prime fields.

Points are pairs of canonical integers. The identity is encoded as (0, 0),
which never satisfies the curve equation because b != 0. This is the same
encoding the circuit uses for a witnessed point, so values move between the
reference arithmetic here and cell values without translation.

This is the out-of-circuit reference: it produces witnesses and checks the
gadgets' results. It is not constant-time.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .field import prime_field


@dataclass(frozen=True)
class AffinePoint:
    """A curve point in affine coordinates; (0, 0) is the identity."""
    x: int
    y: int

    def is_identity(self) -> bool:
        return self.x == 0 and self.y == 0


IDENTITY = AffinePoint(0, 0)


class Curve:
    """The curve y^2 = x^3 + a*x + b over GF(p), of prime order q.

    Attributes:
        name: Human-readable curve name
        p: Base field modulus
        q: Scalar field modulus (group order)
        a: Curve coefficient a
        b: Curve coefficient b (non-zero, non-square)
        Fp: galois class of the base field
        Fq: galois class of the scalar field
        generator: A fixed generator of the group
        short_scalar_bits: Bit bound on the magnitude of short signed scalars
    """

    def __init__(
        self,
        name: str,
        p: int,
        q: int,
        a: int,
        b: int,
        generator: tuple,
        short_scalar_bits: int,
        fp_generator: Optional[int] = None,
        fq_generator: Optional[int] = None,
    ):
        self.name = name
        self.p = p
        self.q = q
        self.a = a % p
        self.b = b % p
        self.Fp = prime_field(p, fp_generator)
        self.Fq = prime_field(q, fq_generator)
        self.short_scalar_bits = short_scalar_bits

        if self.b == 0:
            raise ValueError(f"{name}: b must be non-zero")
        # A square b would put (0, sqrt(b)) on the curve, and complete addition
        # reads x == 0 as the identity.
        if self.Fp(self.b).is_square():
            raise ValueError(f"{name}: b must not be a square in the base field")

        self.generator = AffinePoint(generator[0] % p, generator[1] % p)
        if self.generator.is_identity() or not self.is_on_curve(self.generator):
            raise ValueError(f"{name}: generator is not a point on the curve")

    def __repr__(self) -> str:
        return f"Curve({self.name!r})"

    # --- Point construction ---

    def point(self, x: int, y: int) -> AffinePoint:
        """Return the point (x, y), checking it lies on the curve."""
        point = AffinePoint(int(x) % self.p, int(y) % self.p)
        if not point.is_identity() and not self.is_on_curve(point):
            raise ValueError(f"({point.x}, {point.y}) is not on {self.name}")
        return point

    def identity(self) -> AffinePoint:
        return IDENTITY

    def is_on_curve(self, point: AffinePoint) -> bool:
        Fp = self.Fp
        x, y = Fp(point.x), Fp(point.y)
        return bool(y * y == x * x * x + Fp(self.a) * x + Fp(self.b))

    def lift_x(self, x: int) -> Optional[AffinePoint]:
        """Return a point with the given x-coordinate, or None if there is none."""
        Fp = self.Fp
        x = Fp(x % self.p)
        rhs = x * x * x + Fp(self.a) * x + Fp(self.b)
        if not rhs.is_square():
            return None
        return AffinePoint(int(x), int(np.sqrt(rhs)))

    # --- Group law ---

    def neg(self, point: AffinePoint) -> AffinePoint:
        if point.is_identity():
            return point
        return AffinePoint(point.x, (-point.y) % self.p)

    def add(self, lhs: AffinePoint, rhs: AffinePoint) -> AffinePoint:
        """Complete affine addition (handles identity, doubling and P + (-P))."""
        if lhs.is_identity():
            return rhs
        if rhs.is_identity():
            return lhs
        if lhs.x == rhs.x:
            if (lhs.y + rhs.y) % self.p == 0:
                return IDENTITY
            return self.double(lhs)

        Fp = self.Fp
        x_p, y_p = Fp(lhs.x), Fp(lhs.y)
        x_q, y_q = Fp(rhs.x), Fp(rhs.y)
        lambda_ = (y_q - y_p) / (x_q - x_p)
        x_r = lambda_ * lambda_ - x_p - x_q
        y_r = lambda_ * (x_p - x_r) - y_p
        return AffinePoint(int(x_r), int(y_r))

    def double(self, point: AffinePoint) -> AffinePoint:
        if point.is_identity() or point.y == 0:
            return IDENTITY
        Fp = self.Fp
        x, y = Fp(point.x), Fp(point.y)
        lambda_ = (Fp(3) * x * x + Fp(self.a)) / (Fp(2) * y)
        x_r = lambda_ * lambda_ - Fp(2) * x
        y_r = lambda_ * (x - x_r) - y
        return AffinePoint(int(x_r), int(y_r))

    def mul(self, point: AffinePoint, scalar: int) -> AffinePoint:
        """Reference scalar multiplication [scalar] point (MSB-first double-and-add)."""
        scalar = int(scalar) % self.q
        acc = IDENTITY
        for bit in bin(scalar)[2:]:
            acc = self.double(acc)
            if bit == "1":
                acc = self.add(acc, point)
        return acc

    # --- Sampling ---

    def random_scalar(self, rng: np.random.Generator) -> int:
        """Uniform scalar in [0, q), drawn from numpy's generator."""
        n_bytes = (self.q.bit_length() + 7) // 8 + 8
        return int.from_bytes(rng.bytes(n_bytes), "little") % self.q

    def random_point(self, rng: np.random.Generator) -> AffinePoint:
        """Random non-identity point."""
        while True:
            point = self.mul(self.generator, self.random_scalar(rng))
            if not point.is_identity():
                return point


# --- Pallas ---
#
# Pallas: y^2 = x^3 + 5 over Fp, with group order q; both fields have
# multiplicative generator 5.

PALLAS_P = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
PALLAS_Q = 0x40000000000000000000000000000000224698FC0994A8DD8C46EB2100000001

PALLAS = Curve(
    name="pallas",
    p=PALLAS_P,
    q=PALLAS_Q,
    a=0,
    b=5,
    generator=(-1, 2),
    short_scalar_bits=64,
    fp_generator=5,
    fq_generator=5,
)
