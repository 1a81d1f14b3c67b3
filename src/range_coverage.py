from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from range_tree import Interval, InvalidInterval, RangeTree
from tree_traversal import print_tree, tree_breadth, tree_height


# ============================================================
# 1. Query parameters
# ============================================================

@dataclass
class CoverageQueryParams:
    """
    Ρυθμίσεις για ένα run: από πού διαβάζουμε τα διαστήματα και ποια targets ψάχνουμε.
    """
    path: Optional[str] = None
    start_col: str = "start"
    end_col: str = "stop"
    zero_based: bool = True          # half-open 0-based (π.χ. BED) -> κλειστά 1-based
    invalid: str = "raise"           # "raise" ή "skip" για γραμμές με start > end
    targets: Tuple[Tuple[int, int], ...] = ()


def parse_target(text: str) -> Tuple[int, int]:
    """'40:59' -> (40, 59)."""
    parts = str(text).replace(",", "").split(":")
    if len(parts) != 2:
        raise ValueError(f"Target must look like START:END, got {text!r}")
    try:
        start, end = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Target bounds must be integers, got {text!r}") from None
    return tuple(Interval(start, end))


# ============================================================
# 2. Loading & preprocessing
# ============================================================

BED_COLUMNS = [
    "chrom", "start", "stop", "name", "score", "strand",
    "thick_start", "thick_end", "item_rgb", "block_count", "block_sizes", "block_starts",
]


def read_bed(file_path: Path) -> pd.DataFrame:
    """
    BED χωρίς header: οι στήλες ονομάζονται chrom, start, stop, ...
    Γραμμές track/browser και σχόλια (#) αγνοούνται.
    """
    with open(file_path) as fh:
        skip = [i for i, line in enumerate(fh) if line.startswith(("track", "browser", "#"))]
    df = pd.read_csv(file_path, sep="\t", header=None, skiprows=skip)
    n = len(df.columns)
    df.columns = BED_COLUMNS[:n] + [f"extra_{i}" for i in range(n - len(BED_COLUMNS))]
    return df


def load_interval_table(path: str | Path) -> pd.DataFrame:
    file_path = Path(path)
    suffix = file_path.suffix.lower()

    if suffix == ".csv":
        df = pd.read_csv(file_path)
    elif suffix == ".tsv":
        df = pd.read_csv(file_path, sep="\t")
    elif suffix == ".bed":
        df = read_bed(file_path)
    elif suffix == ".xlsx":
        df = pd.read_excel(file_path)
    else:
        raise ValueError(f"Unsupported interval table format: {suffix or file_path.name}")

    print(f"[DATA] Raw rows: {len(df)}")
    return df


def preprocess_intervals(df: pd.DataFrame, params: CoverageQueryParams) -> pd.DataFrame:
    """
    Κρατάει μόνο τις στήλες start/end ως int64.
    Αν params.zero_based, το start γίνεται start + 1 (κλειστό διάστημα [start+1, stop]).
    Γραμμές με δεκαδικά όρια ή με start > end: InvalidInterval (invalid="raise") ή πετιούνται (invalid="skip").
    """
    missing = [c for c in (params.start_col, params.end_col) if c not in df.columns]
    if missing:
        raise ValueError(f"Missing interval columns: {missing}")
    if params.invalid not in ("raise", "skip"):
        raise ValueError(f"Unknown invalid-row policy: {params.invalid!r}")

    out = pd.DataFrame({
        "start": pd.to_numeric(df[params.start_col], errors="coerce"),
        "end": pd.to_numeric(df[params.end_col], errors="coerce"),
    })
    n_before = len(out)
    out = out.dropna(subset=["start", "end"])
    if len(out) < n_before:
        print(f"[DATA] Dropped {n_before - len(out)} rows with missing bounds")

    # όρια με δεκαδικό μέρος δεν κόβονται σε int
    fractional = (out["start"] % 1 != 0) | (out["end"] % 1 != 0)
    if fractional.any():
        if params.invalid == "raise":
            raise InvalidInterval(
                f"{int(fractional.sum())} rows with non-integer bounds, "
                f"first at index {out[fractional].index[0]}"
            )
        out = out[~fractional]
        print(f"[DATA] Skipped {int(fractional.sum())} rows with non-integer bounds")
    out = out.astype(np.int64)

    if params.zero_based:
        out["start"] = out["start"] + 1

    bad = out["start"] > out["end"]
    if bad.any():
        if params.invalid == "raise":
            row = out[bad].iloc[0]
            raise InvalidInterval(
                f"{int(bad.sum())} invalid rows, first at index {out[bad].index[0]}: "
                f"start {row['start']} > end {row['end']}"
            )
        out = out[~bad]
        print(f"[DATA] Skipped {int(bad.sum())} rows with start > end")

    out = out.reset_index(drop=True)
    print(f"[DATA] Rows after preprocessing: {len(out)}")
    return out


def intervals_from_frame(df: pd.DataFrame) -> List[Interval]:
    return [Interval(int(s), int(e)) for s, e in zip(df["start"].to_numpy(), df["end"].to_numpy())]


# ============================================================
# 3. Build index + queries (με χρονομέτρηση)
# ============================================================

def build_range_index(df: pd.DataFrame) -> Tuple[RangeTree, float]:
    intervals = intervals_from_frame(df)
    t0 = time.perf_counter()
    tree = RangeTree(intervals)
    t1 = time.perf_counter()
    build_time = t1 - t0
    return tree, build_time


def query_range_index(tree: RangeTree, target: Tuple[int, int]) -> Tuple[List[Interval], float]:
    t0 = time.perf_counter()
    matches = tree.intersect(target)
    t1 = time.perf_counter()
    query_time = t1 - t0
    return matches, query_time


def naive_intersections(df: pd.DataFrame, target: Tuple[int, int]) -> List[Interval]:
    """
    Ground truth: ελέγχουμε το target απέναντι σε ΟΛΑ τα διαστήματα (χωρίς δέντρο).
    """
    start, end = Interval.of(target)
    if df.empty:
        return []
    mask = (df["start"] <= end) & (df["end"] >= start)
    hits = df[mask]
    lo = np.maximum(hits["start"].to_numpy(), start)
    hi = np.minimum(hits["end"].to_numpy(), end)
    return [Interval(int(a), int(b)) for a, b in zip(lo, hi)]


def coverage_summary(matches: Sequence[Interval]) -> Dict[str, int]:
    """
    hits = πλήθος τομών, matched_bases = άθροισμα των μηκών τους.
    Επικαλυπτόμενες τομές μετράνε ξεχωριστά, άρα δεν είναι πλήθος καλυμμένων θέσεων.
    """
    return {
        "hits": len(matches),
        "matched_bases": sum(m.length for m in matches),
    }


# ============================================================
# 4. Evaluation & summaries
# ============================================================

def evaluate_targets(
    df: pd.DataFrame,
    params: CoverageQueryParams,
) -> Tuple[RangeTree, float, Dict[str, Dict[str, float | int | bool]]]:
    tree, build_time = build_range_index(df)
    print(f"[TREE] Built {len(tree)} nodes in {build_time:.4f} s")

    summary: Dict[str, Dict[str, float | int | bool]] = {}
    for target in params.targets:
        label = f"{target[0]}:{target[1]}"
        matches, query_time = query_range_index(tree, target)

        t0 = time.perf_counter()
        expected = naive_intersections(df, target)
        t1 = time.perf_counter()

        cov = coverage_summary(matches)
        summary[label] = {
            "tree_query": query_time,
            "naive_query": t1 - t0,
            "hits": cov["hits"],
            "matched_bases": cov["matched_bases"],
            "agrees": sorted(matches, key=tuple) == sorted(expected, key=tuple),
        }
        print(f"[QUERY] {label}: {cov['hits']} hits")

    return tree, build_time, summary


def print_summaries(
    tree: RangeTree,
    build_time: float,
    summary: Dict[str, Dict[str, float | int | bool]],
):
    print("\n######################################################################")
    print("RANGE TREE")
    print("######################################################################")
    print(f"  Nodes      : {len(tree)}")
    print(f"  Height     : {tree_height(tree)}")
    print(f"  Leaves     : {tree_breadth(tree)}")
    print(f"  Build time : {build_time:.4f} s")

    if not summary:
        return

    print("\n######################################################################")
    print("TARGET QUERIES (seconds)")
    print("######################################################################")
    print(f"{'Target':<24} {'TreeQ':>10} {'NaiveQ':>10} {'Hits':>8} {'Bases':>10} {'OK':>4}")
    for label, stats in summary.items():
        print(
            f"{label:<24} "
            f"{stats['tree_query']:10.6f} "
            f"{stats['naive_query']:10.6f} "
            f"{stats['hits']:8d} "
            f"{stats['matched_bases']:10d} "
            f"{'yes' if stats['agrees'] else 'NO':>4}"
        )


# ============================================================
# 5. main()
# ============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rangetrees",
        description="Build a balanced interval tree from a table of intervals and query it.",
    )
    parser.add_argument("table", type=str, help="Interval table (.csv, .tsv, .bed, .xlsx)")
    parser.add_argument("--start-col", default="start", help="Column holding interval starts")
    parser.add_argument("--end-col", default="stop", help="Column holding interval ends")
    parser.add_argument("--one-based", action="store_true",
                        help="Rows are already closed 1-based intervals (no start shift)")
    parser.add_argument("--skip-invalid", action="store_true",
                        help="Drop rows with start > end instead of failing")
    parser.add_argument("--target", action="append", default=[], metavar="START:END",
                        help="Query interval, may be repeated")
    parser.add_argument("--print-tree", action="store_true", help="Print the tree structure")
    return parser


def main(argv: Optional[Sequence[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        targets = tuple(parse_target(t) for t in args.target)
    except ValueError as e:
        parser.error(str(e))

    params = CoverageQueryParams(
        path=args.table,
        start_col=args.start_col,
        end_col=args.end_col,
        zero_based=not args.one_based,
        invalid="skip" if args.skip_invalid else "raise",
        targets=targets,
    )

    try:
        df = preprocess_intervals(load_interval_table(params.path), params)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    tree, build_time, summary = evaluate_targets(df, params)

    if args.print_tree:
        print()
        print_tree(tree)

    print_summaries(tree, build_time, summary)
    return 0


if __name__ == "__main__":
    main()
