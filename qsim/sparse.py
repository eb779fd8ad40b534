# qsim/sparse.py
from typing import Dict, Iterator, NamedTuple, Optional, Tuple

from .scalar import ZERO, as_scalar, is_zero


class MatrixIndex(NamedTuple):
    """Ordered (row, col) key; (1, 2) and (2, 1) are different cells."""
    row: int
    col: int


class SparseStore:
    """
    Map from MatrixIndex to a nonzero complex value.

    Absent keys read as zero and writing (approximately) zero removes the key, so
    the map never holds a zero entry. Bounds are the owning matrix's job.
    """

    __slots__ = ("_entries",)

    def __init__(self):
        self._entries: Dict[MatrixIndex, complex] = {}

    def set(self, row: int, col: int, value: Optional[complex]):
        key = MatrixIndex(row, col)
        if value is None or is_zero(value):
            self._entries.pop(key, None)
        else:
            self._entries[key] = as_scalar(value)

    def get(self, row: int, col: int) -> complex:
        return self._entries.get(MatrixIndex(row, col), ZERO)

    def items(self) -> Iterator[Tuple[MatrixIndex, complex]]:
        return iter(self._entries.items())

    def keys(self):
        return self._entries.keys()

    def copy(self) -> "SparseStore":
        new = SparseStore()
        new._entries = self._entries.copy()
        return new

    def __len__(self) -> int:
        return len(self._entries)

