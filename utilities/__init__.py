"""Helpers shared by gadgets: witnessing, decomposition and range checks."""

from abc import ABC, abstractmethod
from typing import List

from constraints import AssignedCell, Column, Layouter

# A base field value produced by another gadget.
Var = AssignedCell


class UtilitiesInstructions(ABC):
    """Instructions every chip offers for loading private base field values."""

    @abstractmethod
    def advice_column(self) -> Column:
        """Advice column that `load_private` witnesses into."""
        pass

    def load_private(self, layouter: Layouter, value, column: Column = None) -> Var:
        """Witness a private base field value in its own region."""
        column = column or self.advice_column()
        return layouter.assign_region(
            "load private",
            lambda region: region.assign_advice("load private", column, 0, value),
        )


def range_check(ctx, word, range_: int):
    """Expression that vanishes iff `word` is in [0, range_).

    Computes prod_{i < range_} (word - i).
    """
    expr = ctx.constant(1)
    for i in range(range_):
        expr = expr * (word - ctx.constant(i))
    return expr


def bool_check(ctx, value):
    """Expression that vanishes iff `value` is 0 or 1."""
    return range_check(ctx, value, 2)


def decompose_word(word: int, word_num_bits: int, window_num_bits: int) -> List[int]:
    """Split `word` into little-endian windows of `window_num_bits` bits.

    Returns ceil(word_num_bits / window_num_bits) windows.

    Raises:
        ValueError: If `word` does not fit in `word_num_bits` bits
    """
    word = int(word)
    if word < 0 or word.bit_length() > word_num_bits:
        raise ValueError(f"{word} does not fit in {word_num_bits} bits")
    num_windows = -(-word_num_bits // window_num_bits)
    mask = (1 << window_num_bits) - 1
    return [(word >> (window_num_bits * i)) & mask for i in range(num_windows)]
