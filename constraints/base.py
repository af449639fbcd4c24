"""Base classes for gate evaluation.

ConstraintContext provides a uniform interface for gate polynomials: a gate is
a plain Python function of a context, and the same function serves every
backend that can answer column queries. TableConstraintContext answers with
galois arrays over all rows at once, so a gate evaluates in a single pass.

Example:
    def boolean_gate(ctx: ConstraintContext):
        q = ctx.selector(q_bool)
        bit = ctx.advice(bit_col)
        return [("bit is boolean", q * bit * (ctx.constant(1) - bit))]

    cs.create_gate("boolean", boolean_gate)
"""

from abc import ABC, abstractmethod

import numpy as np


class ConstraintContext(ABC):
    """Uniform interface for gate and lookup expressions."""

    @abstractmethod
    def advice(self, column, rotation: int = 0):
        """Get advice column values at the given row rotation.

        Args:
            column: Advice Column
            rotation: Row offset relative to the current row (default 0)
        """
        pass

    @abstractmethod
    def fixed(self, column, rotation: int = 0):
        """Get fixed column values at the given row rotation."""
        pass

    @abstractmethod
    def selector(self, selector):
        """Get selector values (1 where enabled, 0 elsewhere) at the current row."""
        pass

    @abstractmethod
    def constant(self, value: int):
        """Lift an integer constant into the field."""
        pass


class TableConstraintContext(ConstraintContext):
    """Evaluates queries over every row of an assignment.

    Rotations wrap around (np.roll), matching evaluation over a cyclic domain.

    Attributes:
        field: galois field class of the circuit
        advice_values: dict mapping Column -> field array of length n
        fixed_values: dict mapping Column -> field array of length n
        selector_values: dict mapping Selector -> field array of 0/1
    """

    def __init__(self, field, advice_values, fixed_values, selector_values):
        self.field = field
        self._advice = advice_values
        self._fixed = fixed_values
        self._selectors = selector_values

    def advice(self, column, rotation: int = 0):
        return np.roll(self._advice[column], -rotation)

    def fixed(self, column, rotation: int = 0):
        return np.roll(self._fixed[column], -rotation)

    def selector(self, selector):
        return self._selectors[selector]

    def constant(self, value: int):
        return self.field(value % self.field.characteristic)
