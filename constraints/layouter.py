"""Region-scoped cell assignment.

A Layouter hands out regions one after another; each region owns a
contiguous, non-overlapping block of rows and is filled before the next one
opens. Cells are addressed by (column, row). Values are optional: a pass
without witnesses leaves private values unknown, and an Assignment built with
`require_witnesses=True` rejects them instead.

Usage:
    layouter = Layouter(Assignment(cs, k=10))
    cell = layouter.assign_region(
        "witness x",
        lambda region: region.assign_advice("x", advice, 0, Fp(5)),
    )
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .errors import SynthesisError
from .system import ConstraintSystem, Column, Selector, ADVICE, FIXED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """Absolute position of a cell in the circuit matrix."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"


@dataclass
class RegionInfo:
    """Name and row span [start, end) of a synthesized region."""
    name: str
    start: int
    end: int


class Assignment:
    """Values, selectors and copy constraints produced by one synthesis pass.

    Attributes:
        field: galois field class of the circuit
        n: Number of rows (2^k), or None for an unbounded assignment
        require_witnesses: Whether unknown advice values are an error
        advice, fixed, tables: Column -> {row: int}
        selectors: Selector -> set of enabled rows
        copies: List of (Cell, Cell) equality constraints
        constants: List of (Cell, int) constant constraints
        regions: RegionInfo for every region, in layout order
    """

    def __init__(self, cs: ConstraintSystem, k: Optional[int] = None, require_witnesses: bool = True):
        self.cs = cs
        self.field = cs.field
        self.n = None if k is None else 1 << k
        self.require_witnesses = require_witnesses
        self.advice: Dict[Column, Dict[int, Optional[int]]] = {c: {} for c in cs.advice_columns}
        self.fixed: Dict[Column, Dict[int, int]] = {c: {} for c in cs.fixed_columns}
        self.tables: Dict[Column, Dict[int, int]] = {c: {} for c in cs.table_columns}
        self.selectors: Dict[Selector, set] = {s: set() for s in cs.selectors}
        self.copies: List[Tuple[Cell, Cell]] = []
        self.constants: List[Tuple[Cell, int]] = []
        self.regions: List[RegionInfo] = []
        self.next_row = 0

    def used_rows(self) -> int:
        return self.next_row

    def check_row(self, row: int) -> None:
        # The last row is kept free so that rotations never wrap into a region.
        if self.n is not None and row >= self.n - 1:
            raise SynthesisError(f"not enough rows available: row {row} exceeds capacity {self.n - 1}")

    def region_at(self, row: int) -> Optional[str]:
        for info in self.regions:
            if info.start <= row < info.end:
                return info.name
        return None

    def _normalize(self, value) -> Optional[int]:
        if value is None:
            return None
        return int(value) % self.field.characteristic


class AssignedCell:
    """A cell together with the value assigned to it (None if unknown)."""

    def __init__(self, cell: Cell, value, field):
        self.cell = cell
        self._value = None if value is None else int(value)
        self._field = field

    @property
    def value(self):
        """The assigned value as a field element, or None if unknown."""
        if self._value is None:
            return None
        return self._field(self._value)

    def copy_advice(self, annotation: str, region: "Region", column: Column, offset: int) -> "AssignedCell":
        """Assign this cell's value into `region` and constrain the two equal.

        A cell already at the target position is returned unchanged.
        """
        if self.cell == Cell(column, region.start + offset):
            return self
        copied = region.assign_advice(annotation, column, offset, self.value)
        region.constrain_equal(self.cell, copied.cell)
        return copied

    def __repr__(self) -> str:
        return f"AssignedCell({self.cell}, value={self._value})"


class Region:
    """A block of rows starting at `start`; offsets are relative to it."""

    def __init__(self, assignment: Assignment, name: str, start: int):
        self.assignment = assignment
        self.name = name
        self.start = start
        self.rows = 0

    def _row(self, offset: int) -> int:
        row = self.start + offset
        self.assignment.check_row(row)
        self.rows = max(self.rows, offset + 1)
        return row

    def assign_advice(self, annotation: str, column: Column, offset: int, value) -> AssignedCell:
        """Assign a (possibly unknown) value to an advice cell.

        Raises:
            SynthesisError: If the value is unknown and witnesses are required
        """
        if column.kind != ADVICE:
            raise SynthesisError(f"{annotation}: {column} is not an advice column")
        if value is None and self.assignment.require_witnesses:
            raise SynthesisError(f"{self.name}: missing witness for {annotation}")
        row = self._row(offset)
        value = self.assignment._normalize(value)
        self.assignment.advice[column][row] = value
        return AssignedCell(Cell(column, row), value, self.assignment.field)

    def assign_advice_from_constant(self, annotation: str, column: Column, offset: int, constant) -> AssignedCell:
        """Assign a known constant to an advice cell and constrain it to that constant."""
        cell = self.assign_advice(annotation, column, offset, constant)
        self.constrain_constant(cell.cell, constant)
        return cell

    def assign_fixed(self, annotation: str, column: Column, offset: int, value) -> Cell:
        if column.kind != FIXED:
            raise SynthesisError(f"{annotation}: {column} is not a fixed column")
        if value is None:
            raise SynthesisError(f"{self.name}: fixed value for {annotation} must be known")
        row = self._row(offset)
        self.assignment.fixed[column][row] = self.assignment._normalize(value)
        return Cell(column, row)

    def enable_selector(self, annotation: str, selector: Selector, offset: int) -> None:
        row = self._row(offset)
        self.assignment.selectors[selector].add(row)

    def constrain_equal(self, left: Cell, right: Cell) -> None:
        """Add a copy constraint between two cells.

        Raises:
            SynthesisError: If either column does not have equality enabled
        """
        for cell in (left, right):
            if cell.column not in self.assignment.cs.equality_columns:
                raise SynthesisError(f"{self.name}: equality is not enabled on {cell.column}")
        self.assignment.copies.append((left, right))

    def constrain_constant(self, cell: Cell, constant) -> None:
        """Constrain a cell to equal a fixed constant.

        Raises:
            SynthesisError: If the circuit has no constants column
        """
        if self.assignment.cs.constants_column is None:
            raise SynthesisError(f"{self.name}: no constants column enabled")
        if cell.column not in self.assignment.cs.equality_columns:
            raise SynthesisError(f"{self.name}: equality is not enabled on {cell.column}")
        self.assignment.constants.append((cell, self.assignment._normalize(constant)))


class TableRegion:
    """Fills lookup table columns; rows are absolute."""

    def __init__(self, assignment: Assignment, name: str):
        self.assignment = assignment
        self.name = name

    def assign_cell(self, annotation: str, column: Column, offset: int, value) -> None:
        if column not in self.assignment.tables:
            raise SynthesisError(f"{annotation}: {column} is not a lookup table column")
        self.assignment.check_row(offset)
        self.assignment.tables[column][offset] = self.assignment._normalize(value)


class Layouter:
    """Lays out regions sequentially; namespaces only affect region names."""

    def __init__(self, assignment: Assignment, namespace: Tuple[str, ...] = ()):
        self.assignment = assignment
        self._namespace = namespace

    def namespace(self, name: str) -> "Layouter":
        return Layouter(self.assignment, self._namespace + (name,))

    def _qualified(self, name: str) -> str:
        return " / ".join(self._namespace + (name,))

    def assign_region(self, name: str, assignment: Callable):
        """Open a region at the next free row, fill it, and close it.

        Args:
            name: Region name, reported on verification failure
            assignment: Function Region -> result

        Returns:
            Whatever `assignment` returns
        """
        name = self._qualified(name)
        region = Region(self.assignment, name, self.assignment.next_row)
        result = assignment(region)
        end = region.start + region.rows
        self.assignment.regions.append(RegionInfo(name, region.start, end))
        self.assignment.next_row = end
        logger.debug("region %r: rows [%d, %d)", name, region.start, end)
        return result

    def assign_table(self, name: str, assignment: Callable):
        """Fill lookup table columns via `assignment(TableRegion)`."""
        return assignment(TableRegion(self.assignment, self._qualified(name)))
