"""Constraint system description: columns, selectors, gates and lookups.

A circuit's `configure` step allocates columns and registers gates against a
ConstraintSystem. Nothing here holds values; see constraints.layouter for
assignment and constraints.mock_prover for checking.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List

ADVICE = "advice"
FIXED = "fixed"
TABLE = "table"


@dataclass(frozen=True)
class Column:
    """A column of the circuit's matrix.

    Attributes:
        kind: 'advice', 'fixed' or 'table'
        index: Position among columns of the same kind
        name: Annotation used in failure reports
    """
    kind: str
    index: int
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"{self.kind}[{self.index}]" + (f" ({self.name})" if self.name else "")


@dataclass(frozen=True)
class Selector:
    """A boolean column toggling a gate on a row."""
    index: int
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.name or f"selector[{self.index}]"


@dataclass
class Gate:
    """A named set of polynomial constraints.

    `polys(ctx)` returns (constraint_name, expression) pairs; each expression
    must vanish on every row.
    """
    name: str
    polys: Callable


@dataclass
class Lookup:
    """A named lookup argument.

    `inputs(ctx)` returns (input_expression, table_column) pairs; every row's
    input value must appear in the table column.
    """
    name: str
    inputs: Callable


class ConstraintSystem:
    """Collects the circuit's shape.

    Attributes:
        field: galois field class the circuit is defined over
        advice_columns, fixed_columns, table_columns: Allocated columns
        selectors: Allocated selectors
        gates: Registered gates
        lookups: Registered lookup arguments
        equality_columns: Columns that may take part in copy constraints
        constants_column: Fixed column holding circuit constants, if enabled
    """

    def __init__(self, field):
        self.field = field
        self.advice_columns: List[Column] = []
        self.fixed_columns: List[Column] = []
        self.table_columns: List[Column] = []
        self.selectors: List[Selector] = []
        self.gates: List[Gate] = []
        self.lookups: List[Lookup] = []
        self.equality_columns = set()
        self.constants_column = None

    # --- Allocation ---

    def advice_column(self, name: str = "") -> Column:
        column = Column(ADVICE, len(self.advice_columns), name)
        self.advice_columns.append(column)
        return column

    def fixed_column(self, name: str = "") -> Column:
        column = Column(FIXED, len(self.fixed_columns), name)
        self.fixed_columns.append(column)
        return column

    def lookup_table_column(self, name: str = "") -> Column:
        column = Column(TABLE, len(self.table_columns), name)
        self.table_columns.append(column)
        return column

    def selector(self, name: str = "") -> Selector:
        selector = Selector(len(self.selectors), name)
        self.selectors.append(selector)
        return selector

    def enable_equality(self, column: Column) -> None:
        self.equality_columns.add(column)

    def enable_constant(self, column: Column) -> None:
        """Use a fixed column to hold constants (implies equality on it)."""
        if column.kind != FIXED:
            raise ValueError(f"constants column must be fixed, got {column}")
        self.constants_column = column
        self.enable_equality(column)

    # --- Constraints ---

    def create_gate(self, name: str, polys: Callable) -> None:
        """Register a gate.

        Args:
            name: Gate name, reported on failure
            polys: Function ConstraintContext -> iterable of (name, expression)
        """
        self.gates.append(Gate(name, polys))

    def lookup(self, name: str, inputs: Callable) -> None:
        """Register a lookup argument.

        Args:
            name: Lookup name, reported on failure
            inputs: Function ConstraintContext -> list of (expression, table Column)
        """
        self.lookups.append(Lookup(name, inputs))


class Circuit(ABC):
    """A circuit: configure once, then synthesize per proof.

    `without_witnesses` returns a copy with every private value unknown; its
    synthesis must produce the same fixed columns and selectors as any
    witnessed synthesis.
    """

    @abstractmethod
    def field(self):
        """Return the galois class of the circuit's base field."""
        pass

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        pass

    @abstractmethod
    def configure(self, cs: ConstraintSystem):
        """Allocate columns, register gates, and return the circuit's config."""
        pass

    @abstractmethod
    def synthesize(self, config, layouter) -> None:
        pass

