# qsim/apply_numba.py
import numpy as np
from numba import njit, prange, set_num_threads, get_num_threads

from .errors import DimensionMismatch
from .matrix import ComplexMatrix
from .state import StateVector

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True, fastmath=True)
def _matvec_kernel(M, psi, out):
    N = M.shape[0]
    K = M.shape[1]
    for i in prange(N):
        acc = 0j
        for k in range(K):
            acc += M[i, k] * psi[k]
        out[i] = acc

@njit(parallel=True, fastmath=True)
def _bit_probability_kernel(psi, q):
    N = psi.shape[0]
    mq = 1 << q
    total = 0.0
    for i in prange(N):
        if (i & mq) != 0:
            a = psi[i]
            total += a.real * a.real + a.imag * a.imag
    return total

# ---------- user-facing helpers ----------

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def apply_matrix(state: StateVector, matrix: ComplexMatrix) -> StateVector:
    """Dense backend: densify operator and state, run the JIT mat-vec, wrap the result."""
    if matrix.rows != state.dim or matrix.cols != state.dim:
        raise DimensionMismatch(f"A {matrix.rows}x{matrix.cols} operator cannot act on {state.n} qubits")
    M = matrix.to_numpy()
    psi = state.as_numpy()
    out = np.empty(M.shape[0], dtype=np.complex128)
    _matvec_kernel(M, psi, out)
    return StateVector.from_numpy(out)

def bit_probability(state: StateVector, q: int) -> float:
    """P(qubit q == 1) straight from the dense amplitudes."""
    return float(_bit_probability_kernel(state.as_numpy(), q))
