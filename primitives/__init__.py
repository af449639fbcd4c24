"""Field and curve primitives used by the circuit gadgets."""

from .curves import PALLAS, AffinePoint, Curve
from .field import prime_field, to_bytes, from_bytes

__all__ = [
    "AffinePoint",
    "Curve",
    "PALLAS",
    "prime_field",
    "to_bytes",
    "from_bytes",
]
