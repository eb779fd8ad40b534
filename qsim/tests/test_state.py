# qsim/tests/test_state.py
import math
import numpy as np
import pytest
from qsim.errors import DegenerateState, DimensionMismatch, InvalidIndex
from qsim.gates import H, X, gate
from qsim.matrix import ComplexMatrix
from qsim.scalar import approx_eq
from qsim.state import StateVector

S = math.sqrt(0.5)

def almost(p, q, tol=1e-9):
    return np.allclose(p, q, atol=tol, rtol=0)

def test_zero_state():
    sv = StateVector.zero(2)
    assert sv.dim == 4
    assert almost(sv.as_numpy(), [1, 0, 0, 0])
    assert StateVector.create_zero_state(3) == StateVector.zero(3)

def test_initialize_keeps_amplitudes_unnormalized():
    sv = StateVector.initialize(1, [3, 4j])
    assert sv.get_amplitude(1) == 4j
    assert approx_eq(sv.norm2(), 25)
    with pytest.raises(DimensionMismatch):
        StateVector.initialize(2, [1, 0, 0])

def test_from_matrix_infers_register_size():
    sv = StateVector.from_matrix(ComplexMatrix.column([0, 0, 0, 0, 0, 0, 0, 1]))
    assert sv.n == 3
    with pytest.raises(DimensionMismatch):
        StateVector.from_matrix(ComplexMatrix(6, 1))
    with pytest.raises(DimensionMismatch):
        StateVector.from_matrix(ComplexMatrix(4, 2))
    with pytest.raises(DimensionMismatch):
        StateVector.from_matrix(ComplexMatrix(0, 1))

def test_get_amplitude_range():
    sv = StateVector.zero(2)
    with pytest.raises(InvalidIndex):
        sv.get_amplitude(4)
    with pytest.raises(InvalidIndex):
        sv.get_amplitude(-1)

def test_projector_layout():
    # qubit 1 of 2 == 1 keeps basis states 2 and 3
    P = StateVector.projector(2, 1, True)
    assert almost(np.diag(P.to_numpy()), [0, 0, 1, 1])
    P = StateVector.projector(3, 0, False)
    assert almost(np.diag(P.to_numpy()), [1, 0, 1, 0, 1, 0, 1, 0])
    assert StateVector.projector(1, 0, True) == ComplexMatrix.from_array([[0, 0], [0, 1]])
    with pytest.raises(InvalidIndex):
        StateVector.projector(2, 2, True)

def test_projector_edits_do_not_leak_into_measurement():
    P = StateVector.projector(1, 0, True)
    P.set(0, 0, 1)
    assert StateVector.projector(1, 0, True) == ComplexMatrix.from_array([[0, 0], [0, 1]])
    assert StateVector.zero(1).get_measurement(0) is False
    assert StateVector.zero(1).probability(0) == 0

def test_inner_and_norm():
    a = StateVector.initialize(1, [1, 1j])
    b = StateVector.initialize(1, [1j, 0])
    # <b|a> = conj(1j) * 1
    assert approx_eq(a.inner(b), -1j)
    n = a.norm()
    assert approx_eq(n.norm2(), 1)
    assert almost(n.as_numpy(), [S, 1j * S])

def test_norm_of_zero_vector_raises():
    with pytest.raises(DegenerateState):
        StateVector.empty(2).norm()

def test_hadamard_on_zero_and_one():
    sv = StateVector.zero(1).apply_matrix(H())
    assert almost(sv.as_numpy(), [S, S])
    sv = StateVector.zero(1).apply_matrix(X()).apply_matrix(H())
    assert almost(sv.as_numpy(), [S, -S])

def test_apply_matrix_dimension_check():
    with pytest.raises(DimensionMismatch):
        StateVector.zero(2).apply_matrix(H())

def test_project():
    sv = gate(H(), 2, 0).apply(StateVector.zero(2))
    assert almost(sv.project(0, False).as_numpy(), [1, 0, 0, 0])
    assert almost(sv.project(0, True).as_numpy(), [0, 1, 0, 0])
    assert almost(sv.project(1, False).as_numpy(), sv.as_numpy())
    assert sv.project(1, True) is None

def test_measure_threshold():
    plus = StateVector.zero(1).apply_matrix(H())
    assert plus.measure(0, 0.4).get_measurement(0) is True
    assert plus.measure(0, 0.6).get_measurement(0) is False

def test_measure_always_collapses():
    sv = StateVector.initialize(2, [0.5, 0.5j, -0.5, 0.5])
    for x in (0.0, 0.25, 0.5, 0.75, 0.999):
        for q in (0, 1):
            m = sv.measure(q, x)
            assert m.get_measurement(q) in (True, False)
            m.check_normalized()

def test_get_measurement_undetermined():
    plus = StateVector.zero(1).apply_matrix(H())
    assert plus.get_measurement(0) is None
    assert StateVector.zero(1).get_measurement(0) is False

def test_probability():
    sv = StateVector.initialize(2, [0, S, 0, S])
    assert approx_eq(sv.probability(0), 1)
    assert approx_eq(sv.probability(1), 0.5)
    assert almost(sv.probabilities(), [0, 0.5, 0, 0.5])

def test_check_normalized():
    with pytest.raises(AssertionError):
        StateVector.initialize(1, [1, 1]).check_normalized()
