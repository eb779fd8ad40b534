# qsim/components.py
import math
from functools import lru_cache

from .circuit import Circuit
from .matrix import ComplexMatrix
from .modifiers import Combinable


@lru_cache(maxsize=16)
def _qft(n: int) -> ComplexMatrix:
    circ = Circuit(n)
    for j in reversed(range(n)):
        circ.h(j)
        for m in reversed(range(j)):
            circ.cp(j, m, math.pi / (1 << (j - m)))
    for i in range(n // 2):
        circ.swap(i, n - 1 - i)
    return circ.as_modifier().matrix


def qft_matrix(n: int, inverse: bool = False) -> ComplexMatrix:
    """
    Quantum Fourier transform on n qubits, built from H, CP and SWAP gates.

    Equals the DFT matrix F[j, k] = exp(2*pi*i*j*k / 2**n) / sqrt(2**n) with
    qubit 0 as the least-significant bit; the inverse is its conjugate transpose.
    """
    if n < 1:
        raise ValueError(f"QFT needs at least one qubit, got {n}")
    m = _qft(n)
    return m.dagger() if inverse else m


def qft(n: int, inverse: bool = False) -> Combinable:
    return Combinable(qft_matrix(n, inverse), n, ("IQFT" if inverse else "QFT",))
