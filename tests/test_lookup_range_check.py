"""Tests for the running-sum lookup range check."""

import pytest

from constraints import Circuit, ConstantFailure, LookupFailure, MockProver
from primitives import prime_field
from utilities import decompose_word
from utilities.lookup_range_check import LookupRangeCheckConfig

Fp = prime_field(2**31 - 1)
K = 3


class RangeCheckCircuit(Circuit):
    """Range-checks `value` to K * num_windows bits, by witness or by copy."""

    def __init__(self, value, num_windows, strict=True, copy=False):
        self.value = value
        self.num_windows = num_windows
        self.strict = strict
        self.copy = copy
        self.running_sum = None

    def field(self):
        return Fp

    def without_witnesses(self):
        return RangeCheckCircuit(None, self.num_windows, self.strict, self.copy)

    def configure(self, cs):
        running_sum = cs.advice_column("running_sum")
        other = cs.advice_column("other")
        cs.enable_equality(other)
        constants = cs.fixed_column("constants")
        cs.enable_constant(constants)
        table_idx = cs.lookup_table_column("table_idx")
        return LookupRangeCheckConfig.configure(cs, running_sum, table_idx, K), other

    def synthesize(self, config, layouter):
        lookup_config, other = config
        lookup_config.load(layouter)
        value = None if self.value is None else Fp(self.value)
        if self.copy:
            cell = layouter.assign_region(
                "load value", lambda region: region.assign_advice("value", other, 0, value)
            )
            self.running_sum = lookup_config.copy_check(layouter, cell, self.num_windows, self.strict)
        else:
            self.running_sum = lookup_config.witness_check(layouter, value, self.num_windows, self.strict)


@pytest.mark.parametrize("value", [0, 1, 7, 8, 2**12 - 1, 0b101_011_110])
def test_value_in_range(value) -> None:
    """Values below 2^12 pass a strict 4-window check."""
    circuit = RangeCheckCircuit(value, 4)
    MockProver.run(circuit).assert_satisfied()
    assert [int(z.value) for z in circuit.running_sum][0] == value
    assert int(circuit.running_sum[-1].value) == 0


def test_running_sum_windows() -> None:
    """z_i - 8 z_{i+1} recovers each 3-bit window."""
    value = 0o7351
    circuit = RangeCheckCircuit(value, 4)
    MockProver.run(circuit).assert_satisfied()
    zs = [int(z.value) for z in circuit.running_sum]
    windows = [zs[i] - 8 * zs[i + 1] for i in range(4)]
    assert windows == decompose_word(value, 12, 3)


def test_strict_rejects_large_value() -> None:
    """A value of 2^12 leaves z_4 = 1, which a strict check forbids."""
    prover = MockProver.run(RangeCheckCircuit(2**12, 4))
    assert any(isinstance(f, ConstantFailure) for f in prover.verify())


def test_non_strict_returns_remainder() -> None:
    """Without strictness z_N is the value shifted right by K * N bits."""
    circuit = RangeCheckCircuit(0o5_1234, 4, strict=False)
    MockProver.run(circuit).assert_satisfied()
    assert int(circuit.running_sum[-1].value) == 5


def test_copy_check() -> None:
    """copy_check constrains z_0 to the copied cell."""
    circuit = RangeCheckCircuit(0o777, 3, copy=True)
    prover = MockProver.run(circuit)
    prover.assert_satisfied()
    # Break the copy of the value into the running sum.
    z_0 = circuit.running_sum[0].cell
    prover.assignment.advice[z_0.column][z_0.row] = 0o776
    assert prover.verify() != []


def test_tampered_window_fails_lookup() -> None:
    """A running sum step outside [0, 8) is caught by the lookup."""
    circuit = RangeCheckCircuit(0o17, 2)
    prover = MockProver.run(circuit)
    z_1 = circuit.running_sum[1].cell
    # z_0 - 8 * 0 = 15 is not a 3-bit window.
    prover.assignment.advice[z_1.column][z_1.row] = 0
    assert any(isinstance(f, LookupFailure) for f in prover.verify())
