# qsim/gates.py
"""
Small gate matrices. Two-qubit matrices use basis order |00>,|01>,|10>,|11>
where the right-hand bit is the first target passed to `gate` and the left-hand
bit is the second one (the control, for controlled gates).
"""
import math
import numpy as np

from .embed import embed
from .matrix import ComplexMatrix
from .modifiers import Combinable
from .scalar import cexp

_S = math.sqrt(0.5)


def I() -> ComplexMatrix:
    return ComplexMatrix.identity(2)


def X() -> ComplexMatrix:
    return ComplexMatrix.from_array([[0, 1],
                                     [1, 0]])


def Y() -> ComplexMatrix:
    return ComplexMatrix.from_array([[0, -1j],
                                     [1j, 0]])


def Z() -> ComplexMatrix:
    return ComplexMatrix.from_array([[1, 0],
                                     [0, -1]])


def H() -> ComplexMatrix:
    return ComplexMatrix.from_array([[_S, _S],
                                     [_S, -_S]])


def S() -> ComplexMatrix:
    return ComplexMatrix.from_array([[1, 0],
                                     [0, 1j]])


def T() -> ComplexMatrix:
    return P(math.pi / 4)


def P(theta: float) -> ComplexMatrix:
    """a|0> + b|1> -> a|0> + e^(i theta) b|1>."""
    return ComplexMatrix.from_array([[1, 0],
                                     [0, cexp(1j * theta)]])


def RX(theta: float) -> ComplexMatrix:
    c = math.cos(theta / 2.0)
    s = -1j * math.sin(theta / 2.0)
    return ComplexMatrix.from_array([[c, s],
                                     [s, c]])


def RY(theta: float) -> ComplexMatrix:
    c = math.cos(theta / 2.0)
    s = math.sin(theta / 2.0)
    return ComplexMatrix.from_array([[c, -s],
                                     [s, c]])


def RZ(theta: float) -> ComplexMatrix:
    return ComplexMatrix.from_array([[cexp(-0.5j * theta), 0],
                                     [0, cexp(0.5j * theta)]])


def CNOT() -> ComplexMatrix:
    # flips the target (low bit) when the control (high bit) is set: |10> <-> |11>
    mat = np.eye(4, dtype=np.complex128)
    mat[2, 2] = 0; mat[3, 3] = 0
    mat[2, 3] = 1; mat[3, 2] = 1
    return ComplexMatrix.from_array(mat)


def CZ() -> ComplexMatrix:
    mat = np.eye(4, dtype=np.complex128)
    mat[3, 3] = -1
    return ComplexMatrix.from_array(mat)


def CP(theta: float) -> ComplexMatrix:
    mat = np.eye(4, dtype=np.complex128)
    mat[3, 3] = cexp(1j * theta)
    return ComplexMatrix.from_array(mat)


def SWAP() -> ComplexMatrix:
    mat = np.zeros((4, 4), dtype=np.complex128)
    mat[0, 0] = 1; mat[3, 3] = 1
    mat[1, 2] = 1; mat[2, 1] = 1
    return ComplexMatrix.from_array(mat)


def gate(op: ComplexMatrix, n: int, *targets: int, label: str = "U") -> Combinable:
    """Embed a small operator on `targets` of an n-qubit register."""
    return Combinable(embed(op, n, targets), n, (label,))
