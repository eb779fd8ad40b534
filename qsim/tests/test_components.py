# qsim/tests/test_components.py
import numpy as np
import pytest
from qsim.circuit import Circuit
from qsim.components import qft, qft_matrix
from qsim.matrix import ComplexMatrix
from qsim.state import StateVector

def dft(n):
    N = 1 << n
    k = np.arange(N)
    return np.exp(2j * np.pi * np.outer(k, k) / N) / np.sqrt(N)

@pytest.mark.parametrize("n", [1, 2, 3])
def test_qft_is_dft(n):
    assert np.allclose(qft_matrix(n).to_numpy(), dft(n), atol=1e-9)

def test_inverse_qft():
    m = qft_matrix(3)
    assert m @ qft_matrix(3, inverse=True) == ComplexMatrix.identity(8)
    assert qft(3, inverse=True).labels == ("IQFT",)
    with pytest.raises(ValueError):
        qft_matrix(0)

def test_qft_on_zero_is_uniform():
    st = Circuit.empty(3).qft().simulate()
    assert np.allclose(st.as_numpy(), np.full(8, 1 / np.sqrt(8)))

def test_qft_round_trip_in_circuit():
    st = Circuit.empty(3).x(0).qft().qft(inverse=True).simulate()
    assert st == StateVector.initialize(3, [0, 1, 0, 0, 0, 0, 0, 0])

def test_qft_on_subset_of_qubits():
    # QFT on qubits 1,2 of |010>: qubit 1 carries value 1 of a 2-qubit register
    st = Circuit.empty(3).x(1).qft(qubits=[1, 2]).simulate()
    expect = np.zeros(8, dtype=complex)
    expect[0::2] = dft(2)[:, 1]
    assert np.allclose(st.as_numpy(), expect, atol=1e-9)
