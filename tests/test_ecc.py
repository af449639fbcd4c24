"""Circuit tests for the ECC gadgets on the toy curve."""

import dataclasses

import galois
import numpy as np
import pytest

from constraints import (
    ConstraintNotSatisfied,
    LookupFailure,
    PermutationFailure,
    SynthesisError,
    WitnessError,
    keygen,
    layout_of,
)
from constraints.system import ADVICE, Column
from ecc import FixedPoint, NonIdentityPoint, Point, num_windows
from ecc.chip import EccChip
from primitives import Curve
from tests.helpers import EccCircuit, run_circuit
from utilities.lookup_range_check import LookupRangeCheckConfig

# Columns of the fixed-base window rows.
X_P = Column(ADVICE, 0)
Y_P = Column(ADVICE, 1)
WINDOW = Column(ADVICE, 4)
U = Column(ADVICE, 5)

FULL_WIDTH_GATE = "full-width fixed-base scalar mul"


def failed_constraints(prover):
    return {(f.gate, f.constraint) for f in prover.verify() if isinstance(f, ConstraintNotSatisfied)}


def region_start(prover, name):
    return next(info.start for info in prover.assignment.regions if name in info.name)


class TestWitnessPoint:

    def test_identity_allowed(self, toy_curve) -> None:
        """witness_point accepts the identity as (0, 0)."""
        out = {}

        def gadgets(chip, layouter, witness):
            out["o"] = Point.new(chip, layouter.namespace("O"), witness(toy_curve.identity()))

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert out["o"].inner.is_identity()

    def test_non_identity_rejects_identity(self, toy_curve) -> None:
        """witness_point_non_id fails on the identity before any constraint."""
        def gadgets(chip, layouter, witness):
            NonIdentityPoint.new(chip, layouter, witness(toy_curve.identity()))

        with pytest.raises(WitnessError):
            run_circuit(toy_curve, gadgets)

    def test_off_curve_point_fails(self, toy_curve) -> None:
        """A point off the curve fails the witness gate."""
        g = toy_curve.generator
        bad = type(g)(g.x, (g.y + 1) % toy_curve.p)

        def gadgets(chip, layouter, witness):
            Point.new(chip, layouter, witness(bad))
            NonIdentityPoint.new(chip, layouter, witness(bad))

        failed = failed_constraints(run_circuit(toy_curve, gadgets))
        assert ("witness point", "x == 0 v on_curve") in failed
        assert ("witness non-identity point", "on_curve") in failed

    def test_extract_p(self, toy_curve, rng) -> None:
        p_val = toy_curve.random_point(rng)
        out = {}

        def gadgets(chip, layouter, witness):
            p = NonIdentityPoint.new(chip, layouter, witness(p_val))
            out["x"] = p.extract_p()

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert int(out["x"].inner.value) == p_val.x

    def test_non_identity_from_inner(self, toy_curve) -> None:
        """Only a witnessed non-identity point can be wrapped as one."""
        out = {}

        def gadgets(chip, layouter, witness):
            o = Point.new(chip, layouter.namespace("O"), witness(toy_curve.identity()))
            g = NonIdentityPoint.new(chip, layouter.namespace("G"), witness(toy_curve.generator))
            out["g"] = NonIdentityPoint.from_inner(chip, g.inner)
            with pytest.raises(TypeError, match="not a non-identity point"):
                NonIdentityPoint.from_inner(chip, o.inner)
            with pytest.raises(TypeError, match="not a non-identity point"):
                NonIdentityPoint.from_inner(chip, g.to_point().inner)

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert out["g"].inner.point() == toy_curve.generator


class TestAddition:

    def test_complete_addition_cases(self, toy_curve, rng) -> None:
        """P + Q, P + P, P + (-P), P + O, O + P and O + O."""
        p_val = toy_curve.random_point(rng)
        q_val = toy_curve.random_point(rng)
        neg_p = toy_curve.neg(p_val)
        o_val = toy_curve.identity()
        out = {}

        def gadgets(chip, layouter, witness):
            p = NonIdentityPoint.new(chip, layouter.namespace("P"), witness(p_val))
            q = NonIdentityPoint.new(chip, layouter.namespace("Q"), witness(q_val))
            minus_p = NonIdentityPoint.new(chip, layouter.namespace("-P"), witness(neg_p))
            o = Point.new(chip, layouter.namespace("O"), witness(o_val))
            out["p+q"] = p.add(layouter.namespace("P + Q"), q)
            out["p+p"] = p.add(layouter.namespace("P + P"), p)
            out["p-p"] = p.add(layouter.namespace("P - P"), minus_p)
            out["p+o"] = p.add(layouter.namespace("P + O"), o)
            out["o+p"] = o.add(layouter.namespace("O + P"), p)
            out["o+o"] = o.add(layouter.namespace("O + O"), o)

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert out["p+q"].inner.point() == toy_curve.add(p_val, q_val)
        assert out["p+p"].inner.point() == toy_curve.double(p_val)
        assert out["p-p"].inner.is_identity()
        assert out["p+o"].inner.point() == p_val
        assert out["o+p"].inner.point() == p_val
        assert out["o+o"].inner.is_identity()

    def test_wrong_sum_fails(self, toy_curve, rng) -> None:
        """Tampering with the output of complete addition is caught."""
        p_val = toy_curve.random_point(rng)
        q_val = toy_curve.random_point(rng)
        out = {}

        def gadgets(chip, layouter, witness):
            p = NonIdentityPoint.new(chip, layouter, witness(p_val))
            q = NonIdentityPoint.new(chip, layouter, witness(q_val))
            out["r"] = p.add(layouter, q)

        prover = run_circuit(toy_curve, gadgets)
        y = out["r"].inner.y.cell
        advice = prover.assignment.advice[y.column]
        advice[y.row] = (advice[y.row] + 1) % toy_curve.p
        assert any(gate == "complete addition" for gate, _ in failed_constraints(prover))

    def test_incomplete_addition(self, toy_curve, rng) -> None:
        p_val = toy_curve.random_point(rng)
        q_val = toy_curve.random_point(rng)
        out = {}

        def gadgets(chip, layouter, witness):
            p = NonIdentityPoint.new(chip, layouter, witness(p_val))
            q = NonIdentityPoint.new(chip, layouter, witness(q_val))
            out["r"] = p.add_incomplete(layouter, q)

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert out["r"].inner.point() == toy_curve.add(p_val, q_val)

    @pytest.mark.parametrize("case", ["double", "inverse"])
    def test_incomplete_addition_exceptional_cases(self, toy_curve, rng, case) -> None:
        """P + P and P + (-P) are refused during synthesis."""
        p_val = toy_curve.random_point(rng)
        q_val = p_val if case == "double" else toy_curve.neg(p_val)

        def gadgets(chip, layouter, witness):
            p = NonIdentityPoint.new(chip, layouter, witness(p_val))
            q = NonIdentityPoint.new(chip, layouter, witness(q_val))
            p.add_incomplete(layouter, q)

        with pytest.raises(SynthesisError, match="x-coordinate"):
            run_circuit(toy_curve, gadgets)

    def test_constrain_equal(self, toy_curve, rng) -> None:
        """Equal points pass; different points fail the copy constraint."""
        p_val = toy_curve.random_point(rng)
        q_val = toy_curve.random_point(rng)

        def gadgets_for(other):
            def gadgets(chip, layouter, witness):
                p = NonIdentityPoint.new(chip, layouter, witness(p_val))
                q = Point.new(chip, layouter, witness(other))
                p.constrain_equal(layouter, q)
            return gadgets

        run_circuit(toy_curve, gadgets_for(p_val)).assert_satisfied()
        failures = run_circuit(toy_curve, gadgets_for(q_val)).verify()
        assert any(isinstance(f, PermutationFailure) for f in failures)

    @pytest.mark.parametrize("operation", ["add", "constrain_equal"])
    def test_points_from_different_chips(self, toy_curve, rng, operation) -> None:
        """Mixing chips is a programming error."""
        p_val = toy_curve.random_point(rng)

        def gadgets(chip, layouter, witness):
            other = EccChip(dataclasses.replace(chip.config))
            p = Point.new(chip, layouter, witness(p_val))
            q = NonIdentityPoint.new(other, layouter, witness(p_val))
            getattr(p, operation)(layouter, q)

        with pytest.raises(ValueError, match="different chips"):
            run_circuit(toy_curve, gadgets)


class TestVariableBaseMul:

    def test_scalars(self, toy_curve, rng) -> None:
        """[alpha] P for alpha = 0, 1, 2, p - 1 and a random alpha."""
        p_val = toy_curve.random_point(rng)
        alphas = [0, 1, 2, toy_curve.p - 1, toy_curve.random_scalar(rng) % toy_curve.p]
        out = []

        def gadgets(chip, layouter, witness):
            base = NonIdentityPoint.new(chip, layouter.namespace("P"), witness(p_val))
            for alpha in alphas:
                scalar = chip.load_private(layouter.namespace("alpha"), witness(toy_curve.Fp(alpha)))
                out.append(base.mul(layouter.namespace(f"[{alpha}] P"), scalar))

        run_circuit(toy_curve, gadgets).assert_satisfied()
        for alpha, (point, scalar) in zip(alphas, out):
            assert point.inner.point() == toy_curve.mul(p_val, alpha)
            bits = "".join(str(int(b.value)) for b in scalar.inner.bits)
            assert int(bits, 2) == alpha

    def test_generator(self, toy_curve) -> None:
        g = toy_curve.generator
        alpha = toy_curve.p - 2
        out = {}

        def gadgets(chip, layouter, witness):
            base = NonIdentityPoint.new(chip, layouter, witness(g))
            scalar = chip.load_private(layouter, witness(toy_curve.Fp(alpha)))
            out["r"], _ = base.mul(layouter, scalar)

        run_circuit(toy_curve, gadgets).assert_satisfied()
        assert out["r"].inner.point() == toy_curve.mul(g, alpha)

    def test_tampered_bit_fails(self, toy_curve, rng) -> None:
        """A bit that does not match the running sum is caught."""
        p_val = toy_curve.random_point(rng)
        out = {}

        def gadgets(chip, layouter, witness):
            base = NonIdentityPoint.new(chip, layouter, witness(p_val))
            scalar = chip.load_private(layouter, witness(toy_curve.Fp(5)))
            out["r"], out["scalar"] = base.mul(layouter, scalar)

        prover = run_circuit(toy_curve, gadgets)
        lsb = out["scalar"].inner.bits[-1].cell
        prover.assignment.advice[lsb.column][lsb.row] = 0
        assert ("variable-base mul bits", "window decomposition") in failed_constraints(prover)


class TestFixedBaseMul:

    def _mul_fixed(self, curve, base, scalars):
        out = []

        def gadgets(chip, layouter, witness):
            fixed = FixedPoint.from_inner(chip, base)
            for scalar in scalars:
                out.append(fixed.mul(layouter.namespace(f"[{scalar}] B"), witness(curve.Fq(scalar))))

        return run_circuit(curve, gadgets), out

    def test_scalars(self, toy_curve, toy_base, rng) -> None:
        """Random, small, zero and -1 scalars."""
        scalars = [toy_curve.random_scalar(rng), 1, 2, 0, toy_curve.q - 1]
        prover, out = self._mul_fixed(toy_curve, toy_base, scalars)
        prover.assert_satisfied()
        for scalar, (point, fixed_scalar) in zip(scalars, out):
            assert point.inner.point() == toy_curve.mul(toy_curve.generator, scalar)
            windows = [int(w.value) for w in fixed_scalar.inner.windows]
            assert sum(k * 8**i for i, k in enumerate(windows)) == scalar

    def test_zero_gives_identity(self, toy_curve, toy_base) -> None:
        prover, out = self._mul_fixed(toy_curve, toy_base, [0])
        prover.assert_satisfied()
        assert out[0][0].inner.is_identity()

    def test_forced_doubling(self, toy_curve, toy_base) -> None:
        """Windows 4, 3, ..., 3, 1 make the final addition a doubling."""
        count = num_windows(toy_curve.q.bit_length())
        scalar = int("1" + "3" * (count - 2) + "4", 8)
        table_acc = 6 + sum(5 * 8**w for w in range(1, count - 1))
        assert table_acc == 8 ** (count - 1) - 2 * sum(8**w for w in range(count - 1))

        prover, out = self._mul_fixed(toy_curve, toy_base, [scalar])
        prover.assert_satisfied()
        assert out[0][0].inner.point() == toy_curve.mul(toy_curve.generator, scalar)

    def test_window_out_of_range_fails(self, toy_curve, toy_base) -> None:
        """A window value of 8 fails the window range check."""
        prover, _ = self._mul_fixed(toy_curve, toy_base, [1])
        row = region_start(prover, "full-width fixed-base mul (incomplete addition)")
        prover.assignment.advice[WINDOW][row] = 8
        assert (FULL_WIDTH_GATE, "window range check") in failed_constraints(prover)

    def _tamper_first_window(self, curve, base, tamper):
        prover, _ = self._mul_fixed(curve, base, [0o1234567])
        prover.assert_satisfied()
        row = region_start(prover, "full-width fixed-base mul (incomplete addition)")
        tamper(prover.assignment.advice, row)
        return failed_constraints(prover)

    def test_negated_window_y_fails(self, toy_curve, toy_base) -> None:
        """(x_0, -y_0) is on the curve, but -y_0 + z_0 has no square root."""
        def negate_y(advice, row):
            advice[Y_P][row] = (-advice[Y_P][row]) % toy_curve.p

        assert self._tamper_first_window(toy_curve, toy_base, negate_y) == {(FULL_WIDTH_GATE, "y check")}

    def test_shifted_window_x_fails(self, toy_curve, toy_base) -> None:
        """x_0 must be the interpolated table entry for k_0."""
        def shift_x(advice, row):
            advice[X_P][row] = (advice[X_P][row] + 1) % toy_curve.p

        failed = self._tamper_first_window(toy_curve, toy_base, shift_x)
        assert (FULL_WIDTH_GATE, "x check") in failed
        assert (FULL_WIDTH_GATE, "y check") not in failed

    def test_window_point_off_curve_fails(self, toy_curve, toy_base) -> None:
        """A y_0 with a matching u_0 still has to put the point on the curve."""
        Fp = toy_curve.Fp
        z = Fp(toy_base.z()[0])

        def move_y(advice, row):
            y = Fp(advice[Y_P][row])
            y_moved = next(y + Fp(d) for d in range(1, 64) if (y + Fp(d) + z).is_square())
            advice[Y_P][row] = int(y_moved)
            advice[U][row] = int(np.sqrt(y_moved + z))

        assert self._tamper_first_window(toy_curve, toy_base, move_y) == {(FULL_WIDTH_GATE, "on-curve")}

    def test_integer_scalars(self, toy_curve, toy_base) -> None:
        """Plain integers are taken mod q, so -1 multiplies by q - 1."""
        scalars = [-1, toy_curve.q + 3]
        out = []

        def gadgets(chip, layouter, witness):
            fixed = FixedPoint.from_inner(chip, toy_base)
            for scalar in scalars:
                out.append(fixed.mul(layouter.namespace(f"[{scalar}] B"), witness(scalar)))

        run_circuit(toy_curve, gadgets).assert_satisfied()
        g = toy_curve.generator
        assert out[0][0].inner.point() == toy_curve.neg(g)
        assert int(out[0][1].inner.value) == toy_curve.q - 1
        assert out[1][0].inner.point() == toy_curve.mul(g, 3)

    def test_scalar_from_base_field_rejected(self, toy_curve, toy_base) -> None:
        def gadgets(chip, layouter, witness):
            FixedPoint.from_inner(chip, toy_base).mul(layouter, witness(toy_curve.Fp(1)))

        with pytest.raises(TypeError, match="expected an element"):
            run_circuit(toy_curve, gadgets)

    def test_wrong_base_window_count(self, toy_curve, toy_short_base) -> None:
        """Short-scalar tables cannot serve a full-width multiplication."""
        with pytest.raises(SynthesisError, match="windows"):
            self._mul_fixed(toy_curve, toy_short_base, [1])

    def test_not_enough_rows(self, toy_curve, toy_base) -> None:
        """Two multiplications do not fit in 16 rows."""
        def gadgets(chip, layouter, witness):
            fixed = FixedPoint.from_inner(chip, toy_base)
            fixed.mul(layouter, witness(toy_curve.Fq(3)))
            fixed.mul(layouter, witness(toy_curve.Fq(5)))

        with pytest.raises(SynthesisError, match="not enough rows"):
            run_circuit(toy_curve, gadgets, k=4)


class TestFixedBaseMulShort:

    def _mul_short(self, curve, base, pairs):
        out = []

        def gadgets(chip, layouter, witness):
            fixed = FixedPoint.from_inner(chip, base)
            for magnitude, sign in pairs:
                m = chip.load_private(layouter.namespace("magnitude"), witness(curve.Fp(magnitude)))
                s = chip.load_private(layouter.namespace("sign"), witness(curve.Fp(sign % curve.p)))
                out.append(fixed.mul_short(layouter.namespace(f"[{sign} * {magnitude}] B"), (m, s)))

        return run_circuit(curve, gadgets), out

    def test_signed_magnitudes(self, toy_curve, toy_short_base, rng) -> None:
        """Magnitudes up to 2^bits - 1 with both signs, and zero."""
        max_magnitude = (1 << toy_curve.short_scalar_bits) - 1
        random_magnitude = int(rng.integers(0, max_magnitude))
        pairs = [(0, 1), (1, 1), (1, -1), (max_magnitude, 1), (max_magnitude, -1), (random_magnitude, -1)]
        prover, out = self._mul_short(toy_curve, toy_short_base, pairs)
        prover.assert_satisfied()
        for (magnitude, sign), (point, scalar) in zip(pairs, out):
            assert point.inner.point() == toy_curve.mul(toy_curve.generator, sign * magnitude)
            assert int(scalar.inner.running_sum[-1].value) == 0

    def test_magnitude_too_large(self, toy_curve, toy_short_base) -> None:
        """2^bits does not fit the short windows."""
        prover, _ = self._mul_short(toy_curve, toy_short_base, [(1 << toy_curve.short_scalar_bits, 1)])
        assert prover.verify() != []

    def test_last_window_bound(self, toy_curve, toy_short_base) -> None:
        """The top window is limited to the bits left over."""
        count = num_windows(toy_curve.short_scalar_bits)
        last_bits = toy_curve.short_scalar_bits - 3 * (count - 1)
        # Fits 3 * count bits but not short_scalar_bits.
        magnitude = (1 << last_bits) << (3 * (count - 1))
        prover, _ = self._mul_short(toy_curve, toy_short_base, [(magnitude, 1)])
        failed = failed_constraints(prover)
        assert ("short fixed-base mul last window", "last window range check") in failed

    def test_invalid_sign(self, toy_curve, toy_short_base) -> None:
        prover, _ = self._mul_short(toy_curve, toy_short_base, [(5, 2)])
        assert ("short fixed-base mul sign", "sign is +/-1") in failed_constraints(prover)


class TestFixedBaseMulBaseFieldElem:

    def test_elements(self, toy_curve, toy_base, rng) -> None:
        """0, 1, p - 1 (top bit set), 2^(n-1) and a random element."""
        n = toy_curve.p.bit_length()
        elements = [0, 1, toy_curve.p - 1, 1 << (n - 1), int(rng.integers(0, toy_curve.p))]
        out = []

        def gadgets(chip, layouter, witness):
            fixed = FixedPoint.from_inner(chip, toy_base)
            for element in elements:
                alpha = chip.load_private(layouter.namespace("alpha"), witness(toy_curve.Fp(element)))
                out.append(fixed.mul_base_field(layouter.namespace(f"[{element}] B"), alpha))

        run_circuit(toy_curve, gadgets).assert_satisfied()
        for element, point in zip(elements, out):
            assert point.inner.point() == toy_curve.mul(toy_curve.generator, element)

    def test_tampered_canonicity_fails(self, toy_curve, toy_base) -> None:
        """Flipping a_hi breaks the canonicity gate."""
        def gadgets(chip, layouter, witness):
            alpha = chip.load_private(layouter, witness(toy_curve.Fp(toy_curve.p - 1)))
            FixedPoint.from_inner(chip, toy_base).mul_base_field(layouter, alpha)

        prover = run_circuit(toy_curve, gadgets)
        row = region_start(prover, "canonicity check")
        prover.assignment.advice[Column(ADVICE, 3)][row] = 0
        failed = failed_constraints(prover)
        assert ("canonicity", "z_s = a_hi * 2^r + a_rest") in failed

    def test_non_canonical_running_sum_fails(self, toy_curve, toy_base, monkeypatch) -> None:
        """Windows of alpha + p pass every lookup but not the canonicity gate."""
        alpha = 5
        forged = alpha + toy_curve.p
        assert forged < 1 << (3 * num_windows(toy_curve.q.bit_length()))
        honest_range_check = LookupRangeCheckConfig._range_check

        def forged_range_check(self, region, z_0, count, strict):
            if not strict or z_0.value is None or int(z_0.value) != alpha:
                return honest_range_check(self, region, z_0, count, strict)
            zs = [z_0]
            for i in range(count):
                region.enable_selector("range check", self.q_lookup, i)
                zs.append(region.assign_advice(f"z_{i + 1}", self.running_sum, i + 1, forged >> (3 * (i + 1))))
            region.constrain_constant(zs[-1].cell, 0)
            return zs

        monkeypatch.setattr(LookupRangeCheckConfig, "_range_check", forged_range_check)
        out = {}

        def gadgets(chip, layouter, witness):
            a = chip.load_private(layouter, witness(toy_curve.Fp(alpha)))
            out["r"] = FixedPoint.from_inner(chip, toy_base).mul_base_field(layouter, a)

        prover = run_circuit(toy_curve, gadgets)
        assert not any(isinstance(f, LookupFailure) for f in prover.verify())
        assert any(gate == "canonicity" for gate, _ in failed_constraints(prover))
        # Left unchecked, the windows would give [alpha + p] B.
        assert out["r"].inner.point() == toy_curve.mul(toy_curve.generator, forged)


class TestConsistency:

    def test_variants_agree(self, toy_curve, toy_base, toy_short_base) -> None:
        """Full-width, short, base field and variable-base mul agree on a small scalar."""
        scalar = 0o1234
        out = {}

        def gadgets(chip, layouter, witness):
            full = FixedPoint.from_inner(chip, toy_base)
            short = FixedPoint.from_inner(chip, toy_short_base)
            alpha = chip.load_private(layouter, witness(toy_curve.Fp(scalar)))
            sign = chip.load_private(layouter, witness(toy_curve.Fp(1)))
            g = NonIdentityPoint.new(chip, layouter, witness(toy_curve.generator))

            out["full"], _ = full.mul(layouter.namespace("full"), witness(toy_curve.Fq(scalar)))
            out["short"], _ = short.mul_short(layouter.namespace("short"), (alpha, sign))
            out["base"] = full.mul_base_field(layouter.namespace("base field"), alpha)
            out["var"], _ = g.mul(layouter.namespace("variable"), alpha)
            out["full"].constrain_equal(layouter, out["short"])
            out["base"].constrain_equal(layouter, out["var"])
            out["full"].constrain_equal(layouter, out["var"])

        run_circuit(toy_curve, gadgets).assert_satisfied()
        expected = toy_curve.mul(toy_curve.generator, scalar)
        assert all(point.inner.point() == expected for point in out.values())


def test_keygen_independent_of_witness(toy_curve, toy_base, toy_short_base, rng) -> None:
    """Fixed columns and selectors are the same with and without witnesses."""
    p_val = toy_curve.random_point(rng)

    def gadgets(chip, layouter, witness):
        fixed = FixedPoint.from_inner(chip, toy_base)
        short = FixedPoint.from_inner(chip, toy_short_base)
        p = NonIdentityPoint.new(chip, layouter, witness(p_val))
        alpha = chip.load_private(layouter, witness(toy_curve.Fp(12345)))
        sign = chip.load_private(layouter, witness(toy_curve.Fp(toy_curve.p - 1)))
        fixed.mul(layouter, witness(toy_curve.Fq(67890)))
        short.mul_short(layouter, (alpha, sign))
        fixed.mul_base_field(layouter, alpha)
        p.mul(layouter, alpha)

    prover = run_circuit(toy_curve, gadgets)
    prover.assert_satisfied()
    assert keygen(EccCircuit(toy_curve, gadgets)) == layout_of(prover.assignment)


def test_scalar_windows_must_cover_base_field(toy_curve) -> None:
    """A scalar field too narrow to carry base field elements is refused at configure time."""
    g = toy_curve.generator
    narrow = Curve("narrow", toy_curve.p, galois.prev_prime(1 << 24), 0, toy_curve.b, (g.x, g.y), 16)

    with pytest.raises(ValueError, match="cannot cover"):
        run_circuit(narrow, lambda chip, layouter, witness: None)
