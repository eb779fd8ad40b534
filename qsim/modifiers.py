# qsim/modifiers.py
"""
Circuit modifiers: a closed union of two kinds.

Combinable   -- a fixed 2**n x 2**n operator; adjacent ones can be multiplied
                together before any state is touched. A raw embedded ComplexMatrix
                counts as one and is wrapped when it enters a circuit.
Measurement  -- collapses one qubit using a random draw; depends on the state at
                the time it runs, so nothing can be fused across it.
"""
from dataclasses import dataclass, field
from typing import Any, Tuple, Union

from .errors import DimensionMismatch, InvalidIndex
from .matrix import ComplexMatrix
from .state import StateVector


@dataclass(frozen=True)
class Combinable:
    matrix: ComplexMatrix
    num_qubits: int
    labels: Tuple[str, ...] = ("U",)

    @classmethod
    def wrap(cls, matrix: ComplexMatrix, num_qubits: int, label: str = "U") -> "Combinable":
        """Treat an already embedded 2**n x 2**n operator as a modifier."""
        dim = 1 << num_qubits
        if matrix.shape != (dim, dim):
            raise DimensionMismatch(
                f"A {matrix.rows}x{matrix.cols} matrix is not an operator on {num_qubits} qubits")
        return cls(matrix, num_qubits, (label,))

    def apply(self, state: StateVector) -> StateVector:
        return state.apply_matrix(self.matrix)

    def as_matrix(self) -> ComplexMatrix:
        return self.matrix

    def combine(self, earlier: "Union[Combinable, ComplexMatrix]") -> "Combinable":
        """Single modifier equal to applying `earlier` and then `self`."""
        if isinstance(earlier, ComplexMatrix):
            earlier = Combinable.wrap(earlier, self.num_qubits)
        if earlier.num_qubits != self.num_qubits:
            raise DimensionMismatch(f"Cannot combine {earlier.num_qubits}- and {self.num_qubits}-qubit modifiers")
        return Combinable(self.matrix @ earlier.as_matrix(), self.num_qubits, earlier.labels + self.labels)


@dataclass(frozen=True)
class Measurement:
    num_qubits: int
    target: int
    rng: Any = field(compare=False, repr=False)  # anything with .random() -> float in [0, 1)

    def __post_init__(self):
        if not (0 <= self.target < self.num_qubits):
            raise InvalidIndex(f"Cannot measure qubit {self.target} of a {self.num_qubits}-qubit register")

    def apply(self, state: StateVector) -> StateVector:
        return state.measure(self.target, float(self.rng.random()))


CircuitModifier = Union[Combinable, Measurement]


def is_combinable(m) -> bool:
    return isinstance(m, (Combinable, ComplexMatrix))
