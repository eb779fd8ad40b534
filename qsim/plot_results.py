# qsim/plot_results.py
import csv, os, sys
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from collections import defaultdict
from statistics import median

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["qubits"]    = int(row["qubits"])
            row["depth"]     = int(row["depth"])
            row["modifiers"] = int(row["modifiers"])
            row["wall_ms"]   = float(row["wall_ms"])
            rows.append(row)
    return rows

def median_by_key(rows, key_fields):
    buckets = defaultdict(list)
    for r in rows:
        key = tuple(r[k] for k in key_fields)
        buckets[key].append(r["wall_ms"])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out["wall_ms"] = float(median(vals))
        agg.append(out)
    return agg

def _plot_lines(rows, x_field, xlabel, title, out_path, log_y=False):
    pts = median_by_key(rows, ["backend", x_field])
    if not pts:
        return None
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r[x_field], r["wall_ms"]))
    plt.figure()
    for be, p in sorted(by_backend.items()):
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel(xlabel)
    plt.ylabel("Runtime (ms)")
    plt.title(title)
    if log_y:
        plt.yscale("log")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path

def plot_runtime_vs_qubits(rows, out_path):
    # fused operators are 2^n x 2^n, so runtime grows exponentially: log scale
    return _plot_lines(rows, "qubits", "Qubits (n)", "Runtime vs Qubits", out_path, log_y=True)

def plot_runtime_vs_depth(rows, out_path):
    return _plot_lines(rows, "depth", "Depth", "Runtime vs Depth", out_path)

def plot_outcomes(counts, shots, out_path, title="P(qubit = 1)"):
    """Bar chart of per-qubit frequencies from Circuit.sample()."""
    freqs = np.asarray(counts, dtype=float) / float(shots)
    plt.figure()
    plt.bar(range(len(freqs)), freqs)
    plt.xticks(range(len(freqs)), [f"q{i}" for i in range(len(freqs))])
    plt.ylim(0.0, 1.0)
    plt.ylabel("Frequency of 1")
    plt.title(f"{title} [{shots} shots]")
    plt.grid(True, axis="y", ls="--", lw=0.5)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path


def main(data_dir=None):
    data_dir = data_dir or DATA_DIR
    # find all CSVs recursively under data/
    csvs = []
    for root, _, files in os.walk(data_dir):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    if not csvs:
        print(f"No CSV files found under {data_dir}", file=sys.stderr)
        return []

    saved = []
    for path in csvs:
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))
        rows = load_rows(path)
        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")
        out_dir = os.path.dirname(path)
        if tag.startswith("depth"):
            out = plot_runtime_vs_depth(rows, os.path.join(out_dir, f"runtime_vs_depth_{backend}.png"))
        else:
            out = plot_runtime_vs_qubits(rows, os.path.join(out_dir, f"runtime_vs_qubits_{backend}.png"))
        if out:
            saved.append(out)
    return saved


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
