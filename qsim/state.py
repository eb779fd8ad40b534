# qsim/state.py
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence

import numpy as np

from .errors import DegenerateState, DimensionMismatch, InvalidIndex
from .matrix import ComplexMatrix
from .scalar import ONE, ZERO, approx_eq, is_zero

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _projector(n: int, q: int, s: bool) -> ComplexMatrix:
    single = ComplexMatrix.zero(2)
    if s:
        single.set(1, 1, ONE)
    else:
        single.set(0, 0, ONE)
    # qubit q is bit q of the basis index: identities above and below it
    high = ComplexMatrix.identity(1 << (n - q - 1))
    low = ComplexMatrix.identity(1 << q)
    return high.tensor(single).tensor(low)


@dataclass(frozen=True)
class StateVector:
    """
    Amplitudes of an n-qubit register as a 2**n x 1 ComplexMatrix.

    Qubit 0 is the least-significant bit of the basis index. Every operation
    returns a new StateVector.
    """
    n: int
    amplitudes: ComplexMatrix

    # ----------------------------- constructors -----------------------------

    @staticmethod
    def zero(n: int) -> "StateVector":
        amps = ComplexMatrix(1 << n, 1)
        amps.set(0, 0, ONE)
        return StateVector(n=n, amplitudes=amps)

    create_zero_state = zero

    @staticmethod
    def empty(n: int) -> "StateVector":
        return StateVector(n=n, amplitudes=ComplexMatrix(1 << n, 1))

    @staticmethod
    def initialize(n: int, amplitudes: Sequence) -> "StateVector":
        """Wrap explicit amplitudes as given; no normalization is applied."""
        amplitudes = list(amplitudes)
        if len(amplitudes) != 1 << n:
            raise DimensionMismatch(f"{n} qubits need {1 << n} amplitudes, got {len(amplitudes)}")
        return StateVector(n=n, amplitudes=ComplexMatrix.column(amplitudes))

    @staticmethod
    def from_matrix(matrix: ComplexMatrix) -> "StateVector":
        if matrix.cols != 1:
            raise DimensionMismatch(f"Amplitudes must form a column vector, got {matrix.rows}x{matrix.cols}")
        n = matrix.rows.bit_length() - 1
        if n < 0 or matrix.rows != 1 << n:
            raise DimensionMismatch(f"Amplitude count {matrix.rows} is not a power of two")
        return StateVector(n=n, amplitudes=matrix)

    @staticmethod
    def from_numpy(psi: np.ndarray) -> "StateVector":
        return StateVector.from_matrix(ComplexMatrix.from_array(np.asarray(psi).reshape(-1, 1)))

    # ----------------------------- queries -----------------------------

    @property
    def dim(self) -> int:
        return self.amplitudes.rows

    def get_amplitude(self, index: int) -> complex:
        if not (0 <= index < self.dim):
            raise InvalidIndex(f"Invalid basis state index {index} for {self.n} qubits")
        return self.amplitudes.get(index, 0)

    @staticmethod
    def projector(n: int, q: int, s: bool) -> ComplexMatrix:
        """I(2**(n-q-1)) (x) |s><s| (x) I(2**q), as a fresh matrix the caller may modify."""
        if not (0 <= q < n):
            raise InvalidIndex(f"Invalid qubit index {q} for {n} qubits")
        return _projector(n, q, bool(s)).copy()

    def inner(self, that: "StateVector") -> complex:
        """<that|self>."""
        if that.dim != self.dim:
            raise DimensionMismatch(f"Cannot take inner product of {self.n}- and {that.n}-qubit states")
        prod = ZERO
        for (i, _), a in self.amplitudes.entries():
            prod += that.amplitudes.get(i, 0).conjugate() * a
        return prod

    def norm2(self) -> float:
        return self.inner(self).real

    def check_normalized(self, tol=1e-6):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    def probability(self, q: int) -> float:
        """Probability that qubit q reads 1."""
        return self._project_unnormed(q, True).norm2()

    def probabilities(self) -> np.ndarray:
        return np.abs(self.as_numpy()) ** 2

    def as_numpy(self) -> np.ndarray:
        return self.amplitudes.to_numpy().reshape(-1)

    # ----------------------------- transformations -----------------------------

    def norm(self) -> "StateVector":
        length = math.sqrt(max(self.norm2(), 0.0))
        if length == 0.0:
            raise DegenerateState("Cannot normalize the zero vector")
        return StateVector(n=self.n, amplitudes=self.amplitudes.mult(1.0 / length))

    def apply_matrix(self, matrix: ComplexMatrix) -> "StateVector":
        if matrix.rows != self.dim:
            raise DimensionMismatch(f"A {matrix.rows}x{matrix.cols} operator cannot act on {self.n} qubits")
        return StateVector(n=self.n, amplitudes=matrix.mult(self.amplitudes))

    def _project_unnormed(self, q: int, s: bool) -> "StateVector":
        if not (0 <= q < self.n):
            raise InvalidIndex(f"Invalid qubit index {q} for {self.n} qubits")
        return self.apply_matrix(_projector(self.n, q, bool(s)))

    def project(self, q: int, s: bool) -> Optional["StateVector"]:
        """Normalized projection onto qubit q == s, or None if that outcome is impossible."""
        unnormed = self._project_unnormed(q, s)
        if is_zero(unnormed.inner(unnormed)):
            return None
        return unnormed.norm()

    def measure(self, q: int, x: float) -> "StateVector":
        """Collapse qubit q using a uniform draw x in [0, 1)."""
        if_true = self._project_unnormed(q, True)
        if_false = self._project_unnormed(q, False)
        chance_of_true = if_true.norm2()
        outcome = chance_of_true > x
        logger.debug("measure q=%d p(1)=%.6f x=%.6f -> %d", q, chance_of_true, x, outcome)
        return if_true.norm() if outcome else if_false.norm()

    def get_measurement(self, q: int) -> Optional[bool]:
        """True/False once qubit q has collapsed, None while it is still in superposition."""
        if_true = self._project_unnormed(q, True)
        chance_of_true = if_true.inner(if_true)
        if approx_eq(chance_of_true, ONE):
            return True
        if is_zero(chance_of_true):
            return False
        return None

    def __str__(self):
        return str(self.amplitudes)
