"""Prime field construction.

Uses galois library for all field arithmetic. Circuits work over two fields:
the curve's base field (coordinates, gate values) and its scalar field.

For 255-bit primes galois would need to factor p - 1 to find a primitive
element. The multiplicative generator is known for the fields we ship, so it
is passed in and verification is skipped.
"""

import galois

# Byte length of a serialized field element (recovery values, coefficients).
FIELD_BYTES = 32


def prime_field(p: int, primitive_element: int = None):
    """Return the galois field class GF(p).

    Args:
        p: Field characteristic (prime)
        primitive_element: Multiplicative generator of GF(p)*, if known.
            Required in practice for large primes.

    Returns:
        galois FieldArray subclass for GF(p)
    """
    if primitive_element is None:
        return galois.GF(p)
    return galois.GF(p, primitive_element=primitive_element, verify=False)


def to_bytes(value) -> bytes:
    """Serialize a field element as 32 little-endian bytes."""
    return int(value).to_bytes(FIELD_BYTES, "little")


def from_bytes(field, data: bytes):
    """Deserialize 32 little-endian bytes into an element of `field`."""
    if len(data) != FIELD_BYTES:
        raise ValueError(f"expected {FIELD_BYTES} bytes, got {len(data)}")
    value = int.from_bytes(data, "little")
    if value >= field.characteristic:
        raise ValueError("encoding is not canonical")
    return field(value)


def inv0(value):
    """Return 1/value, or 0 when value is 0."""
    if value == 0:
        return type(value)(0)
    return value ** -1
