"""Shared test circuits and a small curve to run them on.

Building Pallas fixed-base tables costs a few seconds per window, so most
circuit tests run on a toy curve: y^2 = x^3 + b over a 27-bit prime field,
with prime group order q > p. It is found deterministically by searching
p = 2^26 + t for a prime p = 1 mod 3, reading off the six possible orders of
a = 0 curves over GF(p) from 4p = T^2 + 3V^2, and trying non-square b until
the generator has one of the prime orders.
"""

import math
import os

import galois
import numpy as np
import pytest

from constraints import Circuit, ConstraintSystem, MockProver
from ecc import FIXED_BASE_WINDOW_SIZE, H, num_windows
from ecc.chip import EccChip
from ecc.chip.constants import compute_window_table
from primitives import Curve
from utilities.lookup_range_check import LookupRangeCheckConfig

# Full-width Pallas tables (85 windows) and full-width Pallas circuits take
# several minutes together; they only run when this is set.
slow = pytest.mark.skipif(
    not os.environ.get("ECC_SLOW_TESTS"),
    reason="set ECC_SLOW_TESTS=1 to run Pallas-sized circuits",
)

TOY_FIELD_BITS = 26
TOY_SHORT_SCALAR_BITS = 16


def _cornacchia(p: int):
    """Find (T, V) with 4p = T^2 + 3V^2."""
    for v in range(1, math.isqrt(4 * p // 3) + 1):
        rem = 4 * p - 3 * v * v
        t = math.isqrt(rem)
        if t * t == rem:
            return t, v
    return None


def _prime_orders(p: int):
    solution = _cornacchia(p)
    if solution is None:
        return []
    t, v = solution
    traces = [t, -t, (t + 3 * v) // 2, -(t + 3 * v) // 2, (t - 3 * v) // 2, -(t - 3 * v) // 2]
    orders = sorted({p + 1 - trace for trace in traces})
    return [q for q in orders if q > p and q.bit_length() == p.bit_length() and galois.is_prime(q)]


def _curve_of_order(p: int, q: int, short_scalar_bits: int):
    Fp = galois.GF(p)
    for b in range(1, 64):
        if Fp(b).is_square():
            continue
        for x in range(1, 64):
            rhs = Fp(x) ** 3 + Fp(b)
            if not rhs.is_square():
                continue
            curve = Curve("toy", p, q, 0, b, (x, int(np.sqrt(rhs))), short_scalar_bits)
            g = curve.generator
            # The order of g divides q exactly when [q - 1] g = -g.
            if curve.mul(g, q - 1) != curve.neg(g):
                break
            try:
                compute_window_table(curve, g, num_windows(q.bit_length()))
                compute_window_table(curve, g, num_windows(short_scalar_bits))
            except ValueError:
                break
            return curve
    return None


def find_toy_curve(field_bits: int = TOY_FIELD_BITS, short_scalar_bits: int = TOY_SHORT_SCALAR_BITS) -> Curve:
    for t in range(1, 1 << 12):
        p = (1 << field_bits) + t
        if p % 3 != 1 or not galois.is_prime(p):
            continue
        for q in _prime_orders(p):
            curve = _curve_of_order(p, q, short_scalar_bits)
            if curve is not None:
                return curve
    raise RuntimeError(f"no toy curve found above 2^{field_bits}")


class EccCircuit(Circuit):
    """Runs `gadgets(chip, layouter, witness)` on a configured EccChip.

    `witness(value)` returns the value, or None in the without-witnesses pass.
    """

    def __init__(self, curve: Curve, gadgets, witnessed: bool = True):
        self.curve = curve
        self.gadgets = gadgets
        self.witnessed = witnessed

    def field(self):
        return self.curve.Fp

    def without_witnesses(self) -> "EccCircuit":
        return EccCircuit(self.curve, self.gadgets, witnessed=False)

    def configure(self, cs: ConstraintSystem):
        advices = [cs.advice_column(f"advice {i}") for i in range(10)]
        table_idx = cs.lookup_table_column("table_idx")
        lagrange_coeffs = [cs.fixed_column(f"lagrange_coeff {i}") for i in range(H)]
        constants = cs.fixed_column("constants")
        cs.enable_constant(constants)

        range_check = LookupRangeCheckConfig.configure(cs, advices[9], table_idx, FIXED_BASE_WINDOW_SIZE)
        return EccChip.configure(cs, self.curve, advices, lagrange_coeffs, range_check)

    def synthesize(self, config, layouter) -> None:
        chip = EccChip.construct(config)
        config.lookup_config.load(layouter.namespace("range check table"))

        def witness(value):
            return value if self.witnessed else None

        self.gadgets(chip, layouter, witness)


def run_circuit(curve: Curve, gadgets, k=None) -> MockProver:
    """Synthesize an EccCircuit with witnesses and return its prover."""
    return MockProver.run(EccCircuit(curve, gadgets), k=k)
