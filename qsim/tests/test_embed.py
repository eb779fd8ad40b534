# qsim/tests/test_embed.py
import itertools
import numpy as np
import pytest
from qsim import gates as G
from qsim.embed import QubitPair, embed, swap_matrix, transpositions
from qsim.errors import InvalidGateConstruction
from qsim.matrix import ComplexMatrix
from qsim.state import StateVector

def reference_embed(op, n, targets):
    """Direct definition: act with op on the bits `targets`, identity elsewhere."""
    N = 1 << n
    mask = sum(1 << t for t in targets)
    out = np.zeros((N, N), dtype=complex)
    def sub(x):
        return sum(((x >> t) & 1) << i for i, t in enumerate(targets))
    for x in range(N):
        for y in range(N):
            if (x & ~mask) == (y & ~mask):
                out[y, x] = op[sub(y), sub(x)]
    return out

def random_unitary(dim, seed):
    rng = np.random.default_rng(seed)
    z = rng.normal(size=(dim, dim)) + 1j * rng.normal(size=(dim, dim))
    q, r = np.linalg.qr(z)
    return q * (np.diag(r) / np.abs(np.diag(r)))

def test_qubit_pair_is_unordered():
    assert QubitPair.of(0, 2) == QubitPair.of(2, 0)
    assert len({QubitPair.of(1, 3), QubitPair.of(3, 1)}) == 1

def test_swap_matrix():
    P = swap_matrix(2, 0, 1).to_numpy()
    assert np.array_equal(P, G.SWAP().to_numpy())
    assert swap_matrix(3, 1, 1) == ComplexMatrix.identity(8)
    S = swap_matrix(3, 0, 2)
    assert S @ S == ComplexMatrix.identity(8)
    # |001> <-> |100>
    assert S.get(4, 1) == 1 and S.get(1, 4) == 1

def test_transpositions():
    assert transpositions([0, 1, 2]) == []
    assert transpositions([1, 0]) == [QubitPair(1, 0)]
    assert transpositions([2, 0]) == [QubitPair(2, 0), QubitPair(2, 1)]

def test_identity_ordering_round_trip():
    for op in (G.H(), G.RX(0.3), G.CNOT(), G.CP(0.7)):
        k = op.rows.bit_length() - 1
        assert embed(op, k, list(range(k))) == op

def test_single_qubit_embedding_matches_kron():
    h = G.H().to_numpy()
    I2 = np.eye(2)
    assert np.allclose(embed(G.H(), 3, [0]).to_numpy(), np.kron(I2, np.kron(I2, h)))
    assert np.allclose(embed(G.H(), 3, [1]).to_numpy(), np.kron(I2, np.kron(h, I2)))
    assert np.allclose(embed(G.H(), 3, [2]).to_numpy(), np.kron(h, np.kron(I2, I2)))

def test_all_two_qubit_placements():
    U = random_unitary(4, seed=3)
    op = ComplexMatrix.from_array(U)
    for targets in itertools.permutations(range(3), 2):
        got = embed(op, 3, targets).to_numpy()
        assert np.allclose(got, reference_embed(U, 3, targets)), targets

def test_three_qubit_placements():
    U = random_unitary(8, seed=9)
    op = ComplexMatrix.from_array(U)
    for targets in itertools.permutations(range(4), 3):
        got = embed(op, 4, targets).to_numpy()
        assert np.allclose(got, reference_embed(U, 4, targets)), targets

def test_cnot_target_and_control():
    # control 0 set, target 2: |001> -> |101>
    sv = StateVector.zero(3).apply_matrix(embed(G.X(), 3, [0]))
    out = sv.apply_matrix(embed(G.CNOT(), 3, [2, 0]))
    assert out.get_amplitude(5) == 1
    # control 2 unset: nothing happens
    out = sv.apply_matrix(embed(G.CNOT(), 3, [0, 2]))
    assert out.get_amplitude(1) == 1

def test_embedded_gates_preserve_norm():
    rng = np.random.default_rng(0)
    psi = rng.normal(size=8) + 1j * rng.normal(size=8)
    sv = StateVector.from_numpy(psi / np.linalg.norm(psi))
    singles = [G.I(), G.X(), G.Y(), G.Z(), G.H(), G.S(), G.T(), G.P(0.4), G.RX(0.3), G.RY(1.1), G.RZ(2.5)]
    for op in singles:
        for q in range(3):
            assert abs(sv.apply_matrix(embed(op, 3, [q])).norm2() - 1) < 1e-9
    for op in (G.CNOT(), G.CZ(), G.CP(0.9), G.SWAP()):
        assert abs(sv.apply_matrix(embed(op, 3, [2, 0])).norm2() - 1) < 1e-9

def test_invalid_constructions():
    with pytest.raises(InvalidGateConstruction):
        embed(ComplexMatrix(2, 4), 3, [0])
    with pytest.raises(InvalidGateConstruction):
        embed(G.H(), 3, [0, 1])
    with pytest.raises(InvalidGateConstruction):
        embed(G.CNOT(), 1, [0, 1])
    with pytest.raises(InvalidGateConstruction):
        embed(G.H(), 2, [2])
    with pytest.raises(InvalidGateConstruction):
        embed(G.H(), 2, [-1])
    with pytest.raises(InvalidGateConstruction):
        embed(G.CNOT(), 2, [1, 1])
    with pytest.raises(ValueError):
        swap_matrix(2, 0, 5)
