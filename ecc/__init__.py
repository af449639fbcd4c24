"""Gadgets for elliptic curve operations.

A circuit author holds a chip implementing EccInstructions and works with the
typed wrappers below. Each wrapper pairs the chip with an opaque value the chip
produced; the only way to obtain a NonIdentityPoint is the fallible
witnessing operation (or an instruction that cannot return the identity), so
operations that require a non-identity point take that type.

Example:
    chip = EccChip(config)
    p = NonIdentityPoint.new(chip, layouter.namespace("P"), p_val)
    base = FixedPoint.from_inner(chip, spend_auth_base)
    result, scalar = base.mul(layouter.namespace("[a]B"), a)
    result.constrain_equal(layouter.namespace("check"), p)
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

# Window size for fixed-base scalar multiplication
FIXED_BASE_WINDOW_SIZE = 3

# 2^FIXED_BASE_WINDOW_SIZE
H = 1 << FIXED_BASE_WINDOW_SIZE


def num_windows(num_bits: int) -> int:
    """Number of FIXED_BASE_WINDOW_SIZE-bit windows covering `num_bits` bits."""
    return -(-num_bits // FIXED_BASE_WINDOW_SIZE)


class FixedPoints(ABC):
    """Public, precomputed data for one fixed base and window count.

    Identical for every proof over the same base.
    """

    @abstractmethod
    def generator(self):
        """The fixed base point."""
        pass

    @abstractmethod
    def u(self) -> List[Tuple[bytes, ...]]:
        """Per window, H 32-byte recovery values u_k with u_k^2 = y_k + z."""
        pass

    @abstractmethod
    def z(self) -> List[int]:
        """Per window, the offset z."""
        pass

    @abstractmethod
    def lagrange_coeffs(self) -> List[Tuple[int, ...]]:
        """Per window, H ascending coefficients interpolating x_k over k."""
        pass

    def num_windows(self) -> int:
        return len(self.z())


class EccInstructions(ABC):
    """The set of circuit instructions required to use the ECC gadgets.

    Values passed in and out are the chip's own representations; the wrappers
    in this module are the user-facing API over them.
    """

    @abstractmethod
    def constrain_equal(self, layouter, a, b) -> None:
        """Constrain point `a` to be equal in value to point `b`.

        A value mismatch is not an error here; it fails verification.
        """
        pass

    @abstractmethod
    def witness_point(self, layouter, value):
        """Witness a point, which may be the identity (mapped to (0, 0)).

        `value` may be None when witnesses are unknown.
        """
        pass

    @abstractmethod
    def witness_point_non_id(self, layouter, value):
        """Witness a point that must not be the identity.

        Raises:
            WitnessError: If `value` is the identity
        """
        pass

    @abstractmethod
    def is_non_identity_point(self, point) -> bool:
        """Whether `point` is this chip's representation of a non-identity point."""
        pass

    @staticmethod
    @abstractmethod
    def extract_p(point):
        """Extract the x-coordinate of a point."""
        pass

    @abstractmethod
    def add_incomplete(self, layouter, a, b):
        """Incomplete addition `a + b` of two non-identity points.

        The caller must ensure a != b and a != -b. The chip raises
        SynthesisError if it detects either case while generating the witness.
        """
        pass

    @abstractmethod
    def add(self, layouter, a, b):
        """Complete addition `a + b`; either operand may be the identity."""
        pass

    @abstractmethod
    def mul(self, layouter, scalar, base):
        """Variable-base scalar multiplication `[scalar] base`.

        Args:
            scalar: Base field variable produced by another gadget
            base: Non-identity point

        Returns:
            (point, scalar variable)
        """
        pass

    @abstractmethod
    def mul_fixed(self, layouter, scalar, base: FixedPoints):
        """Fixed-base scalar multiplication with a full-width scalar.

        Args:
            scalar: Scalar field element or integer (taken mod q), or None
                if unknown

        Returns:
            (point, fixed scalar)
        """
        pass

    @abstractmethod
    def mul_fixed_short(self, layouter, magnitude_sign, base: FixedPoints):
        """Fixed-base scalar multiplication by `magnitude * sign`.

        Args:
            magnitude_sign: (magnitude, sign) base field variables; the
                magnitude is below 2^short_scalar_bits and the sign is 1 or -1

        Returns:
            (point, short fixed scalar)
        """
        pass

    @abstractmethod
    def mul_fixed_base_field_elem(self, layouter, base_field_elem, base: FixedPoints):
        """Fixed-base scalar multiplication by a base field variable."""
        pass


# --- Gadgets ---

class ScalarVar:
    """A base field element used as the scalar in variable-base multiplication."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner


class ScalarFixed:
    """A full-width scalar field element used in fixed-base multiplication."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner


class ScalarFixedShort:
    """A signed short scalar used in fixed-base multiplication."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner


class X:
    """The affine x-coordinate of a point."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner

    @classmethod
    def from_inner(cls, chip: EccInstructions, inner) -> "X":
        return cls(chip, inner)


class Point:
    """A point that may be the identity."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner

    @classmethod
    def new(cls, chip: EccInstructions, layouter, value) -> "Point":
        """Witness a point; the identity is allowed."""
        return cls(chip, chip.witness_point(layouter, value))

    @classmethod
    def from_inner(cls, chip: EccInstructions, inner) -> "Point":
        """Wrap a point obtained directly from an instruction."""
        return cls(chip, inner)

    def constrain_equal(self, layouter, other) -> None:
        """Constrain this point to equal `other` (a Point or NonIdentityPoint)."""
        other = as_point(other)
        _check_same_chip(self.chip, other.chip)
        self.chip.constrain_equal(layouter, self.inner, other.inner)

    def extract_p(self) -> X:
        return X.from_inner(self.chip, self.chip.extract_p(self.inner))

    def add(self, layouter, other) -> "Point":
        """Return `self + other` using complete addition."""
        other = as_point(other)
        _check_same_chip(self.chip, other.chip)
        return Point(self.chip, self.chip.add(layouter, self.inner, other.inner))


class NonIdentityPoint:
    """A point that is never the identity."""

    def __init__(self, chip: EccInstructions, inner):
        self.chip = chip
        self.inner = inner

    @classmethod
    def new(cls, chip: EccInstructions, layouter, value) -> "NonIdentityPoint":
        """Witness a non-identity point.

        Raises:
            WitnessError: If `value` is the identity
        """
        return cls(chip, chip.witness_point_non_id(layouter, value))

    @classmethod
    def from_inner(cls, chip: EccInstructions, inner) -> "NonIdentityPoint":
        """Wrap a non-identity point obtained directly from an instruction.

        Raises:
            TypeError: If `inner` is not a non-identity point of `chip`
        """
        if not chip.is_non_identity_point(inner):
            raise TypeError(f"{type(inner).__name__} is not a non-identity point")
        return cls(chip, inner)

    def to_point(self) -> Point:
        """Lossless conversion to a point that may be the identity."""
        return Point(self.chip, self.inner.to_point())

    def constrain_equal(self, layouter, other) -> None:
        self.to_point().constrain_equal(layouter, other)

    def extract_p(self) -> X:
        return X.from_inner(self.chip, self.chip.extract_p(self.inner))

    def add(self, layouter, other) -> Point:
        """Return `self + other` using complete addition."""
        return self.to_point().add(layouter, other)

    def add_incomplete(self, layouter, other: "NonIdentityPoint") -> "NonIdentityPoint":
        """Return `self + other` using incomplete addition.

        Both operands are non-identity and the exceptional cases raise, so the
        result cannot be the identity either.
        """
        _check_same_chip(self.chip, other.chip)
        return NonIdentityPoint(self.chip, self.chip.add_incomplete(layouter, self.inner, other.inner))

    def mul(self, layouter, by) -> Tuple[Point, ScalarVar]:
        """Return `[by] self` for a base field variable `by`."""
        point, scalar = self.chip.mul(layouter, by, self.inner)
        return Point(self.chip, point), ScalarVar(self.chip, scalar)


class FixedPoint:
    """A constant point with precomputed window tables.

    The mul* methods are the entry points for fixed-base multiplication.
    """

    def __init__(self, chip: EccInstructions, inner: FixedPoints):
        self.chip = chip
        self.inner = inner

    @classmethod
    def from_inner(cls, chip: EccInstructions, inner: FixedPoints) -> "FixedPoint":
        return cls(chip, inner)

    def mul(self, layouter, by) -> Tuple[Point, ScalarFixed]:
        """Return `[by] self` for a full-width scalar (or None if unknown)."""
        point, scalar = self.chip.mul_fixed(layouter, by, self.inner)
        return Point(self.chip, point), ScalarFixed(self.chip, scalar)

    def mul_short(self, layouter, magnitude_sign) -> Tuple[Point, ScalarFixedShort]:
        """Return `[magnitude * sign] self`."""
        point, scalar = self.chip.mul_fixed_short(layouter, magnitude_sign, self.inner)
        return Point(self.chip, point), ScalarFixedShort(self.chip, scalar)

    def mul_base_field(self, layouter, by) -> Point:
        """Return `[by] self` for a base field variable `by`."""
        return Point(self.chip, self.chip.mul_fixed_base_field_elem(layouter, by, self.inner))


def as_point(point) -> Point:
    """Explicit, total conversion of either point wrapper to a Point."""
    if isinstance(point, NonIdentityPoint):
        return point.to_point()
    if isinstance(point, Point):
        return point
    raise TypeError(f"expected Point or NonIdentityPoint, got {type(point).__name__}")


def _check_same_chip(left, right) -> None:
    if left != right:
        raise ValueError("points belong to different chips")


__all__ = [
    "EccInstructions",
    "FIXED_BASE_WINDOW_SIZE",
    "FixedPoint",
    "FixedPoints",
    "H",
    "NonIdentityPoint",
    "Point",
    "ScalarFixed",
    "ScalarFixedShort",
    "ScalarVar",
    "X",
    "as_point",
    "num_windows",
]
