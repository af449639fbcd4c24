"""In-circuit representations produced and consumed by EccChip."""

from dataclasses import dataclass, field
from typing import List, Optional

from constraints import AssignedCell
from primitives import AffinePoint


def _affine(x: AssignedCell, y: AssignedCell) -> Optional[AffinePoint]:
    if x.value is None or y.value is None:
        return None
    return AffinePoint(int(x.value), int(y.value))


@dataclass(frozen=True)
class EccPoint:
    """A point with affine coordinates in cells; (0, 0) is the identity."""
    x: AssignedCell
    y: AssignedCell

    def point(self) -> Optional[AffinePoint]:
        """The point's value, or None if unknown."""
        return _affine(self.x, self.y)

    def is_identity(self) -> Optional[bool]:
        point = self.point()
        return None if point is None else point.is_identity()

    def to_point(self) -> "EccPoint":
        return self


@dataclass(frozen=True)
class NonIdentityEccPoint:
    """A point known by construction not to be the identity."""
    x: AssignedCell
    y: AssignedCell

    def point(self) -> Optional[AffinePoint]:
        return _affine(self.x, self.y)

    def to_point(self) -> EccPoint:
        return EccPoint(self.x, self.y)


@dataclass(frozen=True)
class EccScalarFixed:
    """A full-width scalar decomposed into 3-bit windows, least significant first.

    `value` is kept for debugging; only the window cells are constrained.
    """
    value: Optional[object]
    windows: List[AssignedCell] = field(default_factory=list)


@dataclass(frozen=True)
class EccScalarFixedShort:
    """A signed short scalar: magnitude, sign, and the magnitude's running sum."""
    magnitude: AssignedCell
    sign: AssignedCell
    running_sum: List[AssignedCell] = field(default_factory=list)


@dataclass(frozen=True)
class EccBaseFieldElemFixed:
    """A base field element and its canonical running-sum decomposition."""
    base_field_elem: AssignedCell
    running_sum: List[AssignedCell] = field(default_factory=list)


@dataclass(frozen=True)
class EccScalarVar:
    """Scalar of a variable-base multiplication and its bits, most significant first."""
    value: AssignedCell
    running_sum: List[AssignedCell] = field(default_factory=list)
    bits: List[AssignedCell] = field(default_factory=list)
