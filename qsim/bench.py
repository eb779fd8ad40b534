# qsim/bench.py
import argparse, csv, os, platform, socket, time
from datetime import datetime
import numpy as np
from .circuit import Circuit
from .config import load_config
from .log import setup_logging

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

HEADER = ["qubits", "depth", "backend", "modifiers", "wall_ms", "hostname", "python", "timestamp"]

def backend_dir(backend, base=None):
    path = os.path.join(base or DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def meta_row():
    return {
        "hostname": socket.gethostname(),
        "python": platform.python_version(),
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

# ---------------------------------------------------------------------

def random_circuit(n, depth, seed=0, measure_every=0):
    """Layers of H/X and neighbouring CNOTs; optional mid-circuit measurement every `measure_every` layers."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n, seed=seed)
    for layer in range(depth):
        if layer % 2 == 0:
            for k in range(n):
                if rng.integers(0, 2) == 0:
                    c.h(k)
                else:
                    c.x(k)
        else:
            for k in range(0, n-1, 2):
                if rng.integers(0, 2) == 0:
                    c.cx(k+1, k)
                else:
                    c.cx(k, k+1)
        if measure_every and (layer + 1) % measure_every == 0:
            c.measure(int(rng.integers(0, n)))
    return c

def time_run(circ, backend):
    t0 = time.perf_counter()
    _ = circ.simulate(backend=backend)
    return (time.perf_counter() - t0) * 1e3  # ms

def _row(circ, n, depth, backend, wall):
    return {"qubits": n, "depth": depth, "backend": backend, "modifiers": len(circ),
            "wall_ms": f"{wall:.3f}", **meta_row()}

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, depth, backend, out_path):
    print(f"[run] Qubits scaling -> {out_path}")
    new_csv(out_path)
    for i, n in enumerate(ns):
        circ = random_circuit(n, depth, seed=42)
        if i == 0:
            time_run(circ, backend)  # warmup (JIT compile for numba)
        wall = time_run(circ, backend)
        write_row(out_path, _row(circ, n, depth, backend, wall))
        print(f"  n={n}  wall={wall:.2f} ms")
    print("done.\n")

def bench_depth(n, depths, backend, out_path):
    print(f"[run] Depth scaling -> {out_path}")
    new_csv(out_path)
    time_run(random_circuit(n, min(depths), seed=7), backend)  # warmup once
    for d in depths:
        circ = random_circuit(n, d, seed=7, measure_every=10)
        wall = time_run(circ, backend)
        write_row(out_path, _row(circ, n, d, backend, wall))
        print(f"  depth={d}  modifiers={len(circ)}  wall={wall:.2f} ms")
    print("done.\n")

# ---------------------------------------------------------------------
def main(argv=None):
    p = argparse.ArgumentParser(description="qsim benchmarks -> <out>/<backend>/*.csv")
    p.add_argument("--config", type=str, default=None, help="YAML/JSON SimConfig (backend, log_level, ...)")
    p.add_argument("--out", type=str, default=DATA_DIR)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, required=True)
    p_qubits.add_argument("--depth", type=int, default=20)
    p_qubits.add_argument("--backend", type=str, default=None, choices=["sparse", "numba"])

    p_depth = sub.add_parser("depth")
    p_depth.add_argument("--n", type=int, default=4)
    p_depth.add_argument("--depths", type=str, default="10,20,50,100")
    p_depth.add_argument("--backend", type=str, default=None, choices=["sparse", "numba"])

    args = p.parse_args(argv)

    cfg = load_config(args.config) if args.config else None
    setup_logging(cfg.log_level if cfg else "WARNING")
    backend = args.backend or (cfg.backend if cfg else "sparse")
    base = backend_dir(backend, args.out)

    if args.cmd == "qubits":
        ns = [int(x) for x in args.ns.split(",")]
        out_path = os.path.join(base, "qubits.csv")
        bench_qubits(ns, args.depth, backend, out_path)

    elif args.cmd == "depth":
        ds = [int(x) for x in args.depths.split(",")]
        out_path = os.path.join(base, "depth.csv")
        bench_depth(args.n, ds, backend, out_path)

    return out_path

if __name__ == "__main__":
    main()
