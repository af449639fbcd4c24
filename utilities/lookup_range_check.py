"""Range checks by running-sum decomposition and table lookup.

A value `z_0` is split into K-bit windows with the running sum

    z_{i+1} = (z_i - k_i) / 2^K,

so that `k_i = z_i - 2^K * z_{i+1}`. Every `k_i` is looked up in a table
holding [0, 2^K). After `num_windows` steps `z_{num_windows}` is whatever is
left of the value above `K * num_windows` bits; a strict check constrains it
to zero, proving `z_0 < 2^(K * num_windows)`.

The running sum occupies one advice column, one row per `z_i`.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from constraints import AssignedCell, Column, ConstraintSystem, Layouter, Selector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupRangeCheckConfig:
    """Columns and selector of the lookup range check.

    Attributes:
        q_lookup: Enables the lookup on a running-sum row
        running_sum: Advice column holding z_0, z_1, ...
        table_idx: Lookup table column holding [0, 2^K)
        k: Window size in bits
    """
    q_lookup: Selector
    running_sum: Column
    table_idx: Column
    k: int

    @classmethod
    def configure(cls, cs: ConstraintSystem, running_sum: Column, table_idx: Column, k: int) -> "LookupRangeCheckConfig":
        """Register the running-sum lookup on `running_sum` against `table_idx`."""
        q_lookup = cs.selector("q_lookup")
        cs.enable_equality(running_sum)
        config = cls(q_lookup, running_sum, table_idx, k)

        def inputs(ctx):
            q = ctx.selector(q_lookup)
            z_cur = ctx.advice(running_sum)
            z_next = ctx.advice(running_sum, rotation=1)
            # When q_lookup is off the input is 0, which is in the table.
            word = z_cur - z_next * ctx.constant(1 << k)
            return [(q * word, table_idx)]

        cs.lookup("lookup range check", inputs)
        return config

    def load(self, layouter: Layouter) -> None:
        """Load the table [0, 2^K)."""
        def fill(table):
            for index in range(1 << self.k):
                table.assign_cell("table_idx", self.table_idx, index, index)
        layouter.assign_table("table_idx", fill)

    def copy_check(
        self,
        layouter: Layouter,
        element: AssignedCell,
        num_windows: int,
        strict: bool,
    ) -> List[AssignedCell]:
        """Range-check an existing cell, copying it in as z_0.

        Returns:
            The running sum [z_0, ..., z_num_windows]
        """
        def assign(region):
            z_0 = element.copy_advice("z_0", region, self.running_sum, 0)
            return self._range_check(region, z_0, num_windows, strict)

        return layouter.assign_region(f"range check {self.k * num_windows} bits", assign)

    def witness_check(
        self,
        layouter: Layouter,
        value,
        num_windows: int,
        strict: bool,
    ) -> List[AssignedCell]:
        """Witness `value` as z_0 and range-check it.

        Returns:
            The running sum [z_0, ..., z_num_windows]
        """
        def assign(region):
            z_0 = region.assign_advice("z_0", self.running_sum, 0, value)
            return self._range_check(region, z_0, num_windows, strict)

        return layouter.assign_region(f"witness and range check {self.k * num_windows} bits", assign)

    def _range_check(self, region, z_0: AssignedCell, num_windows: int, strict: bool) -> List[AssignedCell]:
        field = region.assignment.field
        two_pow_k_inv = field(1 << self.k) ** -1
        window_mask = (1 << self.k) - 1

        zs = [z_0]
        z: Optional[object] = z_0.value
        for i in range(num_windows):
            region.enable_selector("range check", self.q_lookup, i)
            if z is not None:
                # The window is read from the integer value; z stays in the field.
                word = int(z) & window_mask
                z = (z - field(word)) * two_pow_k_inv
            zs.append(region.assign_advice(f"z_{i + 1}", self.running_sum, i + 1, z))

        if strict:
            region.constrain_constant(zs[-1].cell, 0)
        logger.debug("%s: %d-bit windows x %d (strict=%s)", region.name, self.k, num_windows, strict)
        return zs
