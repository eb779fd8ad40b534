# qsim/matrix.py
import operator
from collections import defaultdict
from numbers import Number
from typing import Iterable, Tuple

import numpy as np

from .errors import DimensionMismatch, InvalidIndex, UnsupportedOperation
from .scalar import EPS, ONE, ZERO, approx_eq, as_scalar, format_scalar, is_zero
from .sparse import SparseStore


class ComplexMatrix:
    """
    Complex matrix with dense semantics and sparse storage.

    Row and column counts are plain Python ints, so a 2**n dimension never
    overflows; the cost of the O(2**n) loops is the real ceiling on n.
    Every arithmetic operation returns a new matrix. `set` is meant for filling
    a freshly built matrix before it is handed to anyone else.
    """

    __slots__ = ("_rows", "_cols", "_store")

    def __init__(self, rows: int, cols: int):
        rows = operator.index(rows)
        cols = operator.index(cols)
        if rows < 0 or cols < 0:
            raise DimensionMismatch(f"Matrix dimensions must be non-negative, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols
        self._store = SparseStore()

    # ----------------------------- factories -----------------------------

    @staticmethod
    def zero(size: int) -> "ComplexMatrix":
        return ComplexMatrix(size, size)

    @staticmethod
    def identity(size: int) -> "ComplexMatrix":
        m = ComplexMatrix(size, size)
        for i in range(m._rows):
            m._store.set(i, i, ONE)
        return m

    ident = identity

    @staticmethod
    def from_array(arr) -> "ComplexMatrix":
        """Build from a 2-D nested sequence or ndarray; zero cells are not stored."""
        a = np.asarray(arr, dtype=np.complex128)
        if a.ndim != 2:
            raise DimensionMismatch(f"Expected a 2-D array, got shape {a.shape}")
        m = ComplexMatrix(a.shape[0], a.shape[1])
        for i, j in zip(*np.nonzero(a)):
            m._store.set(int(i), int(j), a[i, j])
        return m

    from_numpy = from_array

    @staticmethod
    def column(values: Iterable) -> "ComplexMatrix":
        values = list(values)
        m = ComplexMatrix(len(values), 1)
        for i, v in enumerate(values):
            m._store.set(i, 0, None if v is None else as_scalar(v))
        return m

    def copy(self) -> "ComplexMatrix":
        m = ComplexMatrix(self._rows, self._cols)
        m._store = self._store.copy()
        return m

    def to_numpy(self) -> np.ndarray:
        out = np.zeros((self._rows, self._cols), dtype=np.complex128)
        for (i, j), v in self._store.items():
            out[i, j] = v
        return out

    # ----------------------------- access -----------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def nnz(self) -> int:
        return len(self._store)

    def is_square(self) -> bool:
        return self._rows == self._cols

    def _check(self, row, col) -> Tuple[int, int]:
        row = operator.index(row)
        col = operator.index(col)
        if not (0 <= row < self._rows and 0 <= col < self._cols):
            raise InvalidIndex(f"Cannot access ({row}, {col}) in a {self._rows}x{self._cols} matrix")
        return row, col

    def get(self, row: int, col: int) -> complex:
        row, col = self._check(row, col)
        return self._store.get(row, col)

    def set(self, row: int, col: int, value) -> "ComplexMatrix":
        row, col = self._check(row, col)
        self._store.set(row, col, value)
        return self

    def entries(self):
        """Stored (MatrixIndex, value) pairs, in no particular order."""
        return self._store.items()

    # ----------------------------- arithmetic -----------------------------

    def _require_same_shape(self, other: "ComplexMatrix", what: str):
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Matrix dimensions must be the same for {what}: {self._rows}x{self._cols} vs {other._rows}x{other._cols}")

    def _cellwise(self, other: "ComplexMatrix", op) -> "ComplexMatrix":
        result = ComplexMatrix(self._rows, self._cols)
        for key in set(self._store.keys()) | set(other._store.keys()):
            result._store.set(key.row, key.col, op(self._store.get(*key), other._store.get(*key)))
        return result

    def _broadcast(self, scalar, op) -> "ComplexMatrix":
        # touches every logical cell, not just the stored ones
        scalar = as_scalar(scalar)
        result = ComplexMatrix(self._rows, self._cols)
        for i in range(self._rows):
            for j in range(self._cols):
                result._store.set(i, j, op(self._store.get(i, j), scalar))
        return result

    def add(self, other) -> "ComplexMatrix":
        """Matrix sum, or a scalar added to every cell (not a multiple of the identity)."""
        if isinstance(other, ComplexMatrix):
            self._require_same_shape(other, "addition")
            return self._cellwise(other, operator.add)
        return self._broadcast(other, operator.add)

    def sub(self, other) -> "ComplexMatrix":
        if isinstance(other, ComplexMatrix):
            self._require_same_shape(other, "subtraction")
            return self._cellwise(other, operator.sub)
        return self._broadcast(other, operator.sub)

    def mult(self, other) -> "ComplexMatrix":
        """Matrix product when `other` is a matrix, elementwise scaling otherwise."""
        if isinstance(other, ComplexMatrix):
            return self._matmul(other)
        scalar = as_scalar(other)
        result = ComplexMatrix(self._rows, self._cols)
        if is_zero(scalar):
            return result
        for (i, j), v in self._store.items():
            result._store.set(i, j, v * scalar)
        return result

    def _matmul(self, that: "ComplexMatrix") -> "ComplexMatrix":
        if self._cols != that._rows:
            raise DimensionMismatch(
                f"Number of columns in the first matrix ({self._cols}) must be equal to the number "
                f"of rows in the second matrix ({that._rows}) for multiplication.")
        # only stored cells can contribute, so walk left entries against right rows
        right_rows = defaultdict(list)
        for (k, j), b in that._store.items():
            right_rows[k].append((j, b))
        acc = defaultdict(complex)
        for (i, k), a in self._store.items():
            for j, b in right_rows.get(k, ()):
                acc[i, j] += a * b
        result = ComplexMatrix(self._rows, that._cols)
        for (i, j), v in acc.items():
            result._store.set(i, j, v)
        return result

    def tensor(self, other: "ComplexMatrix") -> "ComplexMatrix":
        """Kronecker product: cell (i*B.rows+k, j*B.cols+l) = A[i,j] * B[k,l]."""
        br, bc = other._rows, other._cols
        result = ComplexMatrix(self._rows * br, self._cols * bc)
        right = list(other._store.items())
        for (i, j), a in self._store.items():
            for (k, l), b in right:
                result._store.set(i * br + k, j * bc + l, a * b)
        return result

    def transpose(self) -> "ComplexMatrix":
        result = ComplexMatrix(self._cols, self._rows)
        for (i, j), v in self._store.items():
            result._store.set(j, i, v)
        return result

    def dagger(self) -> "ComplexMatrix":
        result = ComplexMatrix(self._cols, self._rows)
        for (i, j), v in self._store.items():
            result._store.set(j, i, v.conjugate())
        return result

    def is_unitary(self, tol: float = 1e-9) -> bool:
        if not self.is_square():
            return False
        return self.dagger()._matmul(self).equals(ComplexMatrix.identity(self._rows), tol)

    def det(self) -> complex:
        """Determinant by LU decomposition with partial pivoting."""
        if not self.is_square():
            raise UnsupportedOperation(
                f"Determinant is only defined for square matrices, this matrix is {self._rows}x{self._cols}")
        n = self._rows
        if n == 0:
            return ONE
        lu = self.to_numpy()
        det = ONE
        sign = 1
        for k in range(n - 1):
            pivot = k + int(np.argmax(np.abs(lu[k:, k])))
            if pivot != k:
                lu[[k, pivot]] = lu[[pivot, k]]
                sign = -sign
            if is_zero(lu[k, k]):
                return ZERO
            det *= complex(lu[k, k])
            factors = lu[k + 1:, k] / lu[k, k]
            lu[k + 1:, k + 1:] -= np.outer(factors, lu[k, k + 1:])
            lu[k + 1:, k] = factors
        det *= complex(lu[n - 1, n - 1])
        return det * sign

    # ----------------------------- modifier contract -----------------------------

    def as_matrix(self) -> "ComplexMatrix":
        return self

    def combine(self, earlier) -> "ComplexMatrix":
        """Fuse with an operator applied before this one (self @ earlier)."""
        return self._matmul(earlier.as_matrix())

    # ----------------------------- comparison / dunder -----------------------------

    def equals(self, other: "ComplexMatrix", tol: float) -> bool:
        if self.shape != other.shape:
            return False
        keys = set(self._store.keys()) | set(other._store.keys())
        return all(approx_eq(self._store.get(*k), other._store.get(*k), tol) for k in keys)

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        return self.equals(other, EPS)

    __hash__ = None

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.sub(other)

    def __mul__(self, other):
        if isinstance(other, (ComplexMatrix, Number, np.number)):
            return self.mult(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (Number, np.number)):
            return self.mult(other)
        return NotImplemented

    def __matmul__(self, other):
        if not isinstance(other, ComplexMatrix):
            return NotImplemented
        return self._matmul(other)

    def __neg__(self):
        return self.mult(-1)

    def __str__(self):
        lines = []
        for i in range(self._rows):
            lines.append("".join(format_scalar(self._store.get(i, j)) + "\t" for j in range(self._cols)))
        return "".join(line + "\n" for line in lines)

    def __repr__(self):
        return f"ComplexMatrix(rows={self._rows}, cols={self._cols}, nnz={len(self._store)})"
