# qsim/apply_sparse.py
from .embed import embed
from .matrix import ComplexMatrix
from .state import StateVector


def apply_matrix(state: StateVector, matrix: ComplexMatrix) -> StateVector:
    """Reference backend: sparse ComplexMatrix product."""
    return state.apply_matrix(matrix)


def apply_gate(state: StateVector, op: ComplexMatrix, *targets: int) -> StateVector:
    """Embed a small operator on `targets` and apply it (little-endian: target k is bit k)."""
    return apply_matrix(state, embed(op, state.n, targets))
