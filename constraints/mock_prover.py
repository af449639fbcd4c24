"""Mock prover: synthesizes a circuit and checks every constraint directly.

No proof is produced. Instead the assignment is turned into galois arrays, one
per column, and every gate is evaluated over all rows at once through a
TableConstraintContext. Lookups, copy constraints and constant constraints are
checked against the same arrays.

Usage:
    prover = MockProver.run(circuit, k=11)
    assert prover.verify() == []
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .base import TableConstraintContext
from .errors import VerificationError
from .layouter import Assignment, Cell, Layouter
from .system import Circuit, ConstraintSystem

logger = logging.getLogger(__name__)


# --- Failures ---

@dataclass(frozen=True)
class ConstraintNotSatisfied:
    gate: str
    constraint: str
    region: Optional[str]
    row: int

    def __str__(self) -> str:
        return f"gate {self.gate!r}, constraint {self.constraint!r} not satisfied in region {self.region!r} at row {self.row}"


@dataclass(frozen=True)
class LookupFailure:
    lookup: str
    region: Optional[str]
    row: int
    value: int

    def __str__(self) -> str:
        return f"lookup {self.lookup!r}: input {self.value} at row {self.row} (region {self.region!r}) is not in the table"


@dataclass(frozen=True)
class PermutationFailure:
    left: Cell
    right: Cell

    def __str__(self) -> str:
        return f"copy constraint violated: {self.left} != {self.right}"


@dataclass(frozen=True)
class ConstantFailure:
    cell: Cell
    expected: int

    def __str__(self) -> str:
        return f"{self.cell} is not equal to constant {self.expected}"


# --- Prover ---

class MockProver:
    """Holds one synthesized assignment and checks it.

    Attributes:
        cs: The circuit's ConstraintSystem
        assignment: The Assignment produced by synthesis; tests may tamper
            with its values to check that verification fails
    """

    def __init__(self, cs: ConstraintSystem, assignment: Assignment):
        self.cs = cs
        self.assignment = assignment

    @classmethod
    def run(cls, circuit: Circuit, k: Optional[int] = None) -> "MockProver":
        """Configure and synthesize `circuit` with all witnesses required.

        Args:
            circuit: Circuit to synthesize
            k: log2 of the row capacity; None for unbounded

        Raises:
            SynthesisError: Propagated from synthesis
        """
        cs = ConstraintSystem(circuit.field())
        config = circuit.configure(cs)
        assignment = Assignment(cs, k=k, require_witnesses=True)
        circuit.synthesize(config, Layouter(assignment))
        logger.debug("synthesized %d rows in %d regions", assignment.used_rows(), len(assignment.regions))
        return cls(cs, assignment)

    def _n(self) -> int:
        if self.assignment.n is not None:
            return self.assignment.n
        return self.assignment.used_rows() + 1

    def _arrays(self, columns: Dict, n: int) -> Dict:
        field = self.cs.field
        arrays = {}
        for column, values in columns.items():
            dense = [0] * n
            for row, value in values.items():
                if value is not None:
                    dense[row] = value
            arrays[column] = field(dense)
        return arrays

    def _context(self, n: int) -> TableConstraintContext:
        field = self.cs.field
        selectors = {}
        for selector, rows in self.assignment.selectors.items():
            dense = np.zeros(n, dtype=np.int64)
            dense[sorted(rows)] = 1
            selectors[selector] = field(dense)
        return TableConstraintContext(
            field,
            self._arrays(self.assignment.advice, n),
            self._arrays(self.assignment.fixed, n),
            selectors,
        )

    def verify(self) -> List:
        """Check every gate, lookup, copy and constant constraint.

        Returns:
            List of failures; empty if the assignment satisfies the circuit
        """
        n = self._n()
        ctx = self._context(n)
        failures = []

        for gate in self.cs.gates:
            for name, expr in gate.polys(ctx):
                values = np.broadcast_to(np.asarray(expr), (n,))
                for row in np.flatnonzero(values != 0):
                    row = int(row)
                    failures.append(ConstraintNotSatisfied(gate.name, name, self.assignment.region_at(row), row))

        for lookup in self.cs.lookups:
            for expr, table in lookup.inputs(ctx):
                table_values = set(self.assignment.tables[table].values())
                values = np.broadcast_to(np.asarray(expr), (n,))
                for row, value in enumerate(values):
                    if int(value) not in table_values:
                        failures.append(LookupFailure(lookup.name, self.assignment.region_at(row), row, int(value)))

        for left, right in self.assignment.copies:
            if self._value(left) != self._value(right):
                failures.append(PermutationFailure(left, right))

        for cell, constant in self.assignment.constants:
            if self._value(cell) != constant:
                failures.append(ConstantFailure(cell, constant))

        logger.debug("verification found %d failure(s)", len(failures))
        return failures

    def assert_satisfied(self) -> None:
        """Raise VerificationError if any constraint fails."""
        failures = self.verify()
        if failures:
            raise VerificationError(failures)

    def _value(self, cell: Cell) -> int:
        if cell.column in self.assignment.advice:
            value = self.assignment.advice[cell.column].get(cell.row)
        else:
            value = self.assignment.fixed[cell.column].get(cell.row)
        return 0 if value is None else value


# --- Key generation ---

@dataclass
class CircuitLayout:
    """Public shape of a circuit: fixed column contents and enabled selectors."""
    fixed: Dict
    selectors: Dict
    rows: int


def keygen(circuit: Circuit, k: Optional[int] = None) -> CircuitLayout:
    """Synthesize `circuit.without_witnesses()` and return its public layout.

    Every private value is unknown in this pass; fixed columns and selectors
    must not depend on them.
    """
    shape = circuit.without_witnesses()
    cs = ConstraintSystem(shape.field())
    config = shape.configure(cs)
    assignment = Assignment(cs, k=k, require_witnesses=False)
    shape.synthesize(config, Layouter(assignment))
    return layout_of(assignment)


def layout_of(assignment: Assignment) -> CircuitLayout:
    """Extract the public layout from an assignment."""
    return CircuitLayout(
        fixed={column.index: dict(values) for column, values in assignment.fixed.items()},
        selectors={selector.index: frozenset(rows) for selector, rows in assignment.selectors.items()},
        rows=assignment.used_rows(),
    )
