# qsim/embed.py
"""
Embedding of a small k-qubit operator into the full 2**n operator space.

The targets are moved to the low bit positions 0..k-1 with qubit transpositions
R, the operator acts there as I(2**(n-k)) (x) U, and R is undone:

    embedded = R @ (I (x) U) @ R^-1

targets[0] becomes the least-significant tensor factor of U, targets[1] the next
one, and so on.
"""
import logging
import operator
from functools import reduce
from typing import List, NamedTuple, Sequence

from .errors import InvalidGateConstruction
from .matrix import ComplexMatrix
from .scalar import ONE

logger = logging.getLogger(__name__)


class QubitPair(NamedTuple):
    """Unordered pair of qubit positions: QubitPair.of(a, b) == QubitPair.of(b, a)."""
    hi: int
    lo: int

    @classmethod
    def of(cls, a: int, b: int) -> "QubitPair":
        return cls(max(a, b), min(a, b))


def _check_qubit(n: int, q: int):
    if q < 0 or q >= n:
        raise InvalidGateConstruction(f"Qubit index {q} is out of range for a {n}-qubit register")


def swap_matrix(n: int, a: int, b: int) -> ComplexMatrix:
    """Permutation that exchanges bit positions a and b of every basis index."""
    _check_qubit(n, a)
    _check_qubit(n, b)
    dim = 1 << n
    if a == b:
        return ComplexMatrix.identity(dim)
    mask = (1 << a) | (1 << b)
    P = ComplexMatrix.zero(dim)
    for i in range(dim):
        j = i ^ mask if ((i >> a) & 1) != ((i >> b) & 1) else i
        P.set(i, j, ONE)
        P.set(j, i, ONE)
    return P


def transpositions(targets: Sequence[int]) -> List[QubitPair]:
    """
    Ordered swaps that bring targets[i] to position i for every i.

    Applied first-to-last to a state, the swaps realise the layout. The current
    layout is tracked so later swaps account for qubits displaced by earlier ones.
    """
    at = {}     # position -> qubit currently there (identity if absent)
    where = {}  # qubit -> current position
    seen = set()
    swaps = []
    for i, t in enumerate(targets):
        j = where.get(t, t)
        if j == i:
            continue
        displaced = at.get(i, i)
        at[i], at[j] = t, displaced
        where[t], where[displaced] = i, j
        pair = QubitPair.of(i, j)
        if pair not in seen:
            seen.add(pair)
            swaps.append(pair)
    return swaps


def embed(op: ComplexMatrix, n: int, targets: Sequence[int]) -> ComplexMatrix:
    """Full 2**n x 2**n operator applying `op` to `targets` (in tensor-factor order)."""
    targets = [operator.index(t) for t in targets]
    k = len(targets)
    if not op.is_square():
        raise InvalidGateConstruction("The matrix for a quantum gate must be square.")
    if k == 0 or op.rows != 1 << k:
        raise InvalidGateConstruction(f"A {op.rows}x{op.cols} matrix cannot be applied to {k} qubit(s).")
    if k > n:
        raise InvalidGateConstruction(
            f"The matrix for a quantum gate cannot act on more qubits ({k}) than the system has ({n}).")
    for t in targets:
        _check_qubit(n, t)
    if len(set(targets)) != k:
        raise InvalidGateConstruction(f"Target qubits must be distinct, got {targets}")

    applied = op if n == k else ComplexMatrix.identity(1 << (n - k)).tensor(op)
    swaps = [swap_matrix(n, p.hi, p.lo) for p in transpositions(targets)]
    logger.debug("embed %dx%d on targets %s of %d qubits with %d swap(s)", op.rows, op.cols, targets, n, len(swaps))
    if not swaps:
        return applied

    # each swap is its own inverse, so the reversed product undoes the forward one
    forward = reduce(ComplexMatrix.mult, swaps)
    inverse = reduce(ComplexMatrix.mult, reversed(swaps))
    return forward @ applied @ inverse
