"""Constraint-system backend for circuit gadgets.

Gadgets are written against three pieces:
- ConstraintSystem: columns, selectors, gates and lookups (configure time)
- Layouter / Region: cell assignment in non-overlapping regions (synthesis)
- MockProver / keygen: constraint checking and public layout extraction
"""

from .base import ConstraintContext, TableConstraintContext
from .errors import Error, SynthesisError, VerificationError, WitnessError
from .layouter import Assignment, AssignedCell, Cell, Layouter, Region
from .mock_prover import (
    CircuitLayout,
    ConstantFailure,
    ConstraintNotSatisfied,
    LookupFailure,
    MockProver,
    PermutationFailure,
    keygen,
    layout_of,
)
from .system import Circuit, Column, ConstraintSystem, Selector

__all__ = [
    "AssignedCell",
    "Assignment",
    "Cell",
    "Circuit",
    "CircuitLayout",
    "Column",
    "ConstantFailure",
    "ConstraintContext",
    "ConstraintNotSatisfied",
    "ConstraintSystem",
    "Error",
    "Layouter",
    "LookupFailure",
    "MockProver",
    "PermutationFailure",
    "Region",
    "Selector",
    "SynthesisError",
    "TableConstraintContext",
    "VerificationError",
    "WitnessError",
    "keygen",
    "layout_of",
]
