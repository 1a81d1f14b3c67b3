#KODIKAS GIA TESTING
import random

import pandas as pd
import pytest

from range_coverage import (
    CoverageQueryParams,
    build_range_index,
    coverage_summary,
    evaluate_targets,
    intervals_from_frame,
    load_interval_table,
    main,
    naive_intersections,
    parse_target,
    preprocess_intervals,
    query_range_index,
)
from range_tree import Interval, InvalidInterval


def bed_frame():
    #0-based half-open, opws sta BED / arrow tables
    return pd.DataFrame({
        "chrom": ["chr1"] * 5,
        "start": [-1, 2, 9, 19, 28],
        "stop": [0, 40, 14, 35, 98],
    })


def test_zero_based_shift():
    df = preprocess_intervals(bed_frame(), CoverageQueryParams())
    assert list(df.columns) == ["start", "end"]
    assert intervals_from_frame(df) == [
        Interval(0, 0), Interval(3, 40), Interval(10, 14), Interval(20, 35), Interval(29, 98),
    ]


def test_one_based_rows_untouched():
    raw = pd.DataFrame({"lo": [5, 1], "hi": [10, 1]})
    df = preprocess_intervals(raw, CoverageQueryParams(start_col="lo", end_col="hi", zero_based=False))
    assert intervals_from_frame(df) == [Interval(5, 10), Interval(1, 1)]


def test_invalid_rows_policy():
    raw = pd.DataFrame({"start": [0, 10, 4], "stop": [5, 3, 8]})
    with pytest.raises(InvalidInterval):
        preprocess_intervals(raw, CoverageQueryParams())

    df = preprocess_intervals(raw, CoverageQueryParams(invalid="skip"))
    assert intervals_from_frame(df) == [Interval(1, 5), Interval(5, 8)]

    with pytest.raises(ValueError):
        preprocess_intervals(raw, CoverageQueryParams(invalid="coerce"))


def test_missing_columns_and_na():
    with pytest.raises(ValueError):
        preprocess_intervals(pd.DataFrame({"a": [1]}), CoverageQueryParams())

    raw = pd.DataFrame({"start": [0, None, 3], "stop": [4, 6, None]})
    df = preprocess_intervals(raw, CoverageQueryParams())
    assert intervals_from_frame(df) == [Interval(1, 4)]


def test_parse_target():
    assert parse_target("40:59") == (40, 59)
    assert parse_target("1,000:2,000") == (1000, 2000)
    with pytest.raises(ValueError):
        parse_target("40-59")
    with pytest.raises(ValueError):
        parse_target("a:b")
    with pytest.raises(InvalidInterval):
        parse_target("59:40")


def test_tree_query_matches_naive():
    df = preprocess_intervals(bed_frame(), CoverageQueryParams())
    tree, build_time = build_range_index(df)
    assert build_time >= 0.0

    matches, query_time = query_range_index(tree, (40, 59))
    assert matches == [Interval(40, 40), Interval(40, 59)]
    assert query_time >= 0.0
    assert naive_intersections(df, (40, 59)) == [Interval(40, 40), Interval(40, 59)]
    assert coverage_summary(matches) == {"hits": 2, "matched_bases": 21}


def test_evaluate_targets_random():
    rng = random.Random(42)
    starts = [rng.randint(0, 10_000) for _ in range(2_000)]
    raw = pd.DataFrame({"start": starts, "stop": [s + rng.randint(1, 500) for s in starts]})
    targets = tuple((a, a + rng.randint(0, 300)) for a in range(0, 10_000, 700))
    params = CoverageQueryParams(targets=targets)

    df = preprocess_intervals(raw, params)
    tree, _, summary = evaluate_targets(df, params)
    assert len(tree) == 2_000
    assert len(summary) == len(targets)
    for label, stats in summary.items():
        assert stats["agrees"], f"Tree and naive scan disagree for {label}"


def test_empty_table():
    params = CoverageQueryParams(targets=((0, 10),))
    df = preprocess_intervals(pd.DataFrame({"start": [], "stop": []}), params)
    tree, _, summary = evaluate_targets(df, params)
    assert tree.is_empty()
    assert summary["0:10"]["hits"] == 0
    assert summary["0:10"]["agrees"]


def test_headerless_bed(tmp_path):
    #pragmatika BED arxeia den exoun header
    path = tmp_path / "refs.bed"
    path.write_text(
        "track name=refs\n"
        "chr1\t-1\t0\n"
        "chr1\t2\t40\n"
        "chr1\t9\t14\n"
        "chr1\t19\t35\n"
        "chr1\t28\t98\n"
    )
    raw = load_interval_table(path)
    assert list(raw.columns) == ["chrom", "start", "stop"]
    assert len(raw) == 5

    df = preprocess_intervals(raw, CoverageQueryParams())
    tree, _ = build_range_index(df)
    assert tree.intersect((40, 59)) == [Interval(40, 40), Interval(40, 59)]

    bed6 = tmp_path / "genes.bed"
    bed6.write_text("chr1\t0\t10\tgeneA\t0\t+\nchr1\t5\t20\tgeneB\t0\t-\n")
    raw6 = load_interval_table(bed6)
    assert list(raw6.columns) == ["chrom", "start", "stop", "name", "score", "strand"]
    assert intervals_from_frame(preprocess_intervals(raw6, CoverageQueryParams())) == [
        Interval(1, 10), Interval(6, 20),
    ]


def test_xlsx_table(tmp_path):
    path = tmp_path / "refs.xlsx"
    bed_frame().to_excel(path, index=False)
    raw = load_interval_table(path)
    assert list(raw.columns) == ["chrom", "start", "stop"]
    df = preprocess_intervals(raw, CoverageQueryParams())
    assert intervals_from_frame(df) == intervals_from_frame(preprocess_intervals(bed_frame(), CoverageQueryParams()))


def test_non_integer_rows_policy():
    raw = pd.DataFrame({"start": [0, 1.5, 4.0], "stop": [5, 3, 8]})
    with pytest.raises(InvalidInterval):
        preprocess_intervals(raw, CoverageQueryParams())

    df = preprocess_intervals(raw, CoverageQueryParams(invalid="skip"))
    assert intervals_from_frame(df) == [Interval(1, 5), Interval(5, 8)]


def test_load_and_main(tmp_path, capsys):
    path = tmp_path / "refs.csv"
    bed_frame().to_csv(path, index=False)
    assert len(load_interval_table(path)) == 5

    tsv = tmp_path / "refs.tsv"
    bed_frame().to_csv(tsv, sep="\t", index=False)
    assert list(load_interval_table(tsv).columns) == ["chrom", "start", "stop"]

    with pytest.raises(ValueError):
        load_interval_table(tmp_path / "refs.parquet")

    assert main([str(path), "--target", "40:59", "--print-tree"]) == 0
    out = capsys.readouterr().out
    assert "([10, 14], 98)" in out
    assert "40:59" in out

    with pytest.raises(SystemExit):
        main([str(path), "--target", "oops"])


if __name__ == "__main__":
    test_zero_based_shift()
    test_tree_query_matches_naive()
    test_evaluate_targets_random()
    print("All test Passed (coverage)")
