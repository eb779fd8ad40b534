# qsim/circuit.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

import numpy as np

from . import gates as G
from .errors import DimensionMismatch
from .matrix import ComplexMatrix
from .modifiers import CircuitModifier, Combinable, Measurement, is_combinable
from .state import StateVector

logger = logging.getLogger(__name__)

ApplyFn = Callable[[StateVector, ComplexMatrix], StateVector]


def resolve_backend(backend: str, num_threads: Optional[int] = None) -> ApplyFn:
    if backend == "sparse":
        from .apply_sparse import apply_matrix
        return apply_matrix
    if backend == "numba":
        try:
            from .apply_numba import apply_matrix, set_threads
        except ImportError as e:
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
        if num_threads is not None:
            set_threads(int(num_threads))
        return apply_matrix
    raise NotImplementedError(f"Unknown backend: {backend}")


@dataclass
class Circuit:
    """
    Builder for an n-qubit circuit.

    Gates are embedded into full-register operators as they are added and runs
    of them are fused, so the stored sequence alternates between single fused
    operators and measurements.
    """
    n: int
    modifiers: List[CircuitModifier] = field(default_factory=list)
    rng: Any = field(default_factory=np.random.default_rng, repr=False)
    backend: str = "sparse"
    num_threads: Optional[int] = None
    check_norm: bool = False
    norm_tol: float = 1e-6
    debug_state: Optional[StateVector] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.n < 1:
            raise ValueError(f"A circuit needs at least one qubit, got {self.n}")

    @staticmethod
    def empty(n: int, seed: Optional[int] = None) -> "Circuit":
        return Circuit(n, rng=np.random.default_rng(seed))

    @staticmethod
    def from_config(n: int, cfg) -> "Circuit":
        return Circuit(n, rng=np.random.default_rng(cfg.seed), backend=cfg.backend,
                       num_threads=cfg.num_threads, check_norm=cfg.check_norm, norm_tol=cfg.norm_tol)

    @property
    def num_qubits(self) -> int:
        return self.n

    def __len__(self) -> int:
        return len(self.modifiers)

    # ----------------------------- building -----------------------------

    def _fuse_tail(self):
        ops = self.modifiers
        while len(ops) >= 2 and is_combinable(ops[-1]) and is_combinable(ops[-2]):
            later = ops.pop()
            earlier = ops.pop()
            ops.append(later.combine(earlier))
            logger.debug("fused %s", ops[-1].labels)

    def add_modifier(self, g: Union[CircuitModifier, ComplexMatrix]) -> "Circuit":
        if isinstance(g, ComplexMatrix):
            g = Combinable.wrap(g, self.n)
        if g.num_qubits != self.n:
            raise DimensionMismatch(f"Modifier built for {g.num_qubits} qubits added to a {self.n}-qubit circuit")
        self._fuse_tail()
        self.modifiers.append(g)
        return self

    def _gate(self, op: ComplexMatrix, label: str, *targets: int) -> "Circuit":
        return self.add_modifier(G.gate(op, self.n, *targets, label=label))

    def i(self, q: int): return self._gate(G.I(), "I", q)
    def x(self, q: int): return self._gate(G.X(), "X", q)
    def y(self, q: int): return self._gate(G.Y(), "Y", q)
    def z(self, q: int): return self._gate(G.Z(), "Z", q)
    def h(self, q: int): return self._gate(G.H(), "H", q)
    def s(self, q: int): return self._gate(G.S(), "S", q)
    def t(self, q: int): return self._gate(G.T(), "T", q)
    def p(self, q: int, theta: float): return self._gate(G.P(theta), "P", q)
    def rx(self, q: int, theta: float): return self._gate(G.RX(theta), "RX", q)
    def ry(self, q: int, theta: float): return self._gate(G.RY(theta), "RY", q)
    def rz(self, q: int, theta: float): return self._gate(G.RZ(theta), "RZ", q)

    def cx(self, target: int, control: int): return self._gate(G.CNOT(), "CX", target, control)
    def cz(self, target: int, control: int): return self._gate(G.CZ(), "CZ", target, control)
    def cp(self, target: int, control: int, theta: float): return self._gate(G.CP(theta), "CP", target, control)
    def swap(self, a: int, b: int): return self._gate(G.SWAP(), "SWAP", a, b)

    def unitary(self, op: ComplexMatrix, *targets: int, label: str = "U") -> "Circuit":
        """Append an arbitrary 2**k x 2**k operator on k target qubits."""
        return self._gate(op, label, *targets)

    def qft(self, qubits=None, inverse: bool = False) -> "Circuit":
        from .components import qft_matrix
        qubits = list(range(self.n)) if qubits is None else list(qubits)
        op = qft_matrix(len(qubits), inverse=inverse)
        return self._gate(op, "IQFT" if inverse else "QFT", *qubits)

    def measure(self, q: int, rng=None) -> "Circuit":
        return self.add_modifier(Measurement(self.n, q, self.rng if rng is None else rng))

    def as_modifier(self) -> Combinable:
        """Fold a measurement-free circuit into one Combinable."""
        if not all(is_combinable(m) for m in self.modifiers):
            raise ValueError("Circuit contains measurements and cannot be folded into one operator")
        fused = Combinable(ComplexMatrix.identity(1 << self.n), self.n, ())
        for m in self.modifiers:
            fused = m.combine(fused)
        return fused

    # ----------------------------- running -----------------------------

    def simulate(self, backend: Optional[str] = None, num_threads: Optional[int] = None) -> StateVector:
        """Apply every modifier to |0...0> and return the state (no final measurement)."""
        ap_matrix = resolve_backend(backend or self.backend,
                                    self.num_threads if num_threads is None else num_threads)
        st = StateVector.zero(self.n)
        for m in self.modifiers:
            if is_combinable(m):
                st = ap_matrix(st, m.matrix)
            else:
                st = m.apply(st)
        if self.check_norm:
            st.check_normalized(tol=self.norm_tol)
        return st

    def run(self, debug: bool = False, rng=None, backend: Optional[str] = None,
            num_threads: Optional[int] = None) -> np.ndarray:
        """Simulate, measure every qubit, and return the classical bits (index q = qubit q)."""
        st = self.simulate(backend, num_threads)
        if debug:
            self.debug_state = st
            logger.info("state before final measurement:\n%s", st)

        src = self.rng if rng is None else rng
        for q in range(self.n):
            st = Measurement(self.n, q, src).apply(st)

        vals = np.zeros(self.n, dtype=bool)
        for q in range(self.n):
            bit = st.get_measurement(q)
            if bit is None:
                raise RuntimeError(f"Qubit {q} is still undetermined after measurement")
            vals[q] = bit
        return vals

    def sample(self, shots: int, rng=None, backend: Optional[str] = None) -> np.ndarray:
        """Per-qubit count of True outcomes over `shots` runs."""
        counts = np.zeros(self.n, dtype=np.int64)
        for _ in range(shots):
            counts += self.run(rng=rng, backend=backend)
        return counts
