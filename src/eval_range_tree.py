#KODIKAS GIA TESTING
import math
import random
import threading
from typing import List, Tuple

import pytest

from range_tree import (
    BoundsError,
    Interval,
    InvalidInterval,
    RangeNode,
    RangeTree,
    build,
    intersect,
    intersect_into,
    midrange,
)
from tree_traversal import tree_levels

WIKI = [(0, 0), (3, 40), (10, 14), (20, 35), (29, 98)]


#brute force: to target elegxetai me ola ta diastimata
def brute_intersect(intervals: List[Tuple[int, int]], target: Tuple[int, int]) -> List[Interval]:
    a, b = target
    out = []
    for s, e in intervals:
        if a <= e and s <= b:
            out.append(Interval(max(s, a), min(e, b)))
    return out


def random_intervals(rng: random.Random, n: int, span: int = 200, max_len: int = 40):
    out = []
    for _ in range(n):
        s = rng.randint(0, span)
        out.append((s, s + rng.randint(0, max_len)))
    return out


def check_invariants(rt: RangeTree):
    nodes = rt.nodes
    #sort invariant
    starts = [n.interval.start for n in nodes]
    assert starts == sorted(starts), f"Nodes not sorted by start: {starts}"

    #augmentation invariant
    for i, n in enumerate(nodes):
        expected = n.interval.end
        for c in (n.left, n.right):
            if c is not None:
                expected = max(expected, nodes[c].max_end)
        assert n.max_end == expected, f"max_end of node {i} is {n.max_end}, expected {expected}"

    #balance invariant: ka8e [lo, hi] exei riza sto midrange
    def walk(lo, hi):
        if lo > hi:
            return None
        mid = midrange(lo, hi)
        assert nodes[mid].left == walk(lo, mid - 1), f"Bad left child at {mid}"
        assert nodes[mid].right == walk(mid + 1, hi), f"Bad right child at {mid}"
        return mid

    assert walk(0, len(nodes) - 1) == rt.root_index()


def test_wikipedia_example():
    rt = RangeTree(WIKI)
    assert len(rt) == 5
    root = rt.root_index()
    assert rt[root].interval == Interval(10, 14)
    assert rt[root].max_end == 98
    assert tree_levels(rt) == 3

    result = intersect((40, 59), rt)
    assert result == [Interval(40, 40), Interval(40, 59)], f"Got {result}"
    assert rt.intersect(Interval(40, 59)) == result
    check_invariants(rt)


def test_tree_shape_of_example():
    rt = build(WIKI)
    assert rt.nodes == (
        RangeNode(Interval(0, 0), None, None, 0),
        RangeNode(Interval(3, 40), 0, None, 40),
        RangeNode(Interval(10, 14), 1, 4, 98),
        RangeNode(Interval(20, 35), None, None, 35),
        RangeNode(Interval(29, 98), 3, None, 98),
    )
    assert rt.child_indices(2) == (1, 4)
    assert rt.child_indices(1) == (0,)
    assert rt.child_indices(0) == ()
    assert rt.node_value(4) == (Interval(29, 98), 98)


def test_unsorted_input_is_sorted():
    rt = RangeTree([(29, 98), (10, 14), (0, 0), (20, 35), (3, 40)])
    assert rt.intervals() == [Interval(*p) for p in WIKI]
    assert rt.intersect((40, 59)) == [Interval(40, 40), Interval(40, 59)]


def test_empty_tree():
    rt = RangeTree([])
    assert rt.is_empty()
    assert len(rt) == 0
    assert rt.root_index() is None
    assert tree_levels(rt) == 0
    assert rt.intersect((0, 100)) == []
    assert intersect_into([], (-5, 5), rt) == []


def test_single_interval():
    rt = RangeTree([[5, 10]])
    assert rt.root_index() == 0
    assert rt[0] == RangeNode(Interval(5, 10), None, None, 10)
    assert rt.intersect((0, 4)) == []
    assert rt.intersect((10, 20)) == [Interval(10, 10)]


def test_boundaries_are_inclusive():
    rt = RangeTree([(10, 20), (30, 40), (50, 60)])
    #to telos tou query isoutai me to start enos komvou -> match
    assert rt.intersect((0, 30)) == [Interval(10, 20), Interval(30, 30)]
    #ena ligotero -> oxi match sto (30, 40)
    assert rt.intersect((21, 29)) == []
    assert rt.intersect((0, 9)) == []
    #to start tou query isoutai me to end -> match
    assert rt.intersect((60, 70)) == [Interval(60, 60)]
    assert rt.intersect((61, 70)) == []


def test_duplicates_are_kept():
    rt = RangeTree([(1, 5), (1, 5), (1, 5)])
    assert len(rt) == 3
    assert rt.intersect((2, 3)) == [Interval(2, 3)] * 3


def test_intersect_into_appends():
    rt = RangeTree(WIKI)
    buf = [Interval(-1, -1)]
    out = intersect_into(buf, (40, 59), rt)
    assert out is buf
    assert buf == [Interval(-1, -1), Interval(40, 40), Interval(40, 59)]

    buf.clear()
    rt.intersect_into(buf, (0, 5))
    assert buf == rt.intersect((0, 5))


def test_invalid_interval_rejected():
    with pytest.raises(InvalidInterval):
        Interval(5, 4)
    with pytest.raises(InvalidInterval):
        RangeTree([(1, 2), (9, 3)])
    with pytest.raises(InvalidInterval):
        RangeTree(WIKI).intersect((10, 1))
    #InvalidInterval einai ValueError
    with pytest.raises(ValueError):
        Interval.of((3, 2))


def test_non_integer_bounds_rejected():
    #dekadika oria den kovontai se int
    with pytest.raises(InvalidInterval):
        Interval.of((1.7, 3.9))
    with pytest.raises(InvalidInterval):
        Interval(1, 2.5)
    with pytest.raises(InvalidInterval):
        RangeTree([(0.5, 0.9)])
    with pytest.raises(InvalidInterval):
        RangeTree(WIKI).intersect((40.5, 59))
    with pytest.raises(InvalidInterval):
        Interval.of(("3", "4"))

    #floats me akeraia timi (p.x. apo pandas) einai ok
    iv = Interval.of((3.0, 4.0))
    assert iv == Interval(3, 4)
    assert type(iv.start) is int and type(iv.end) is int


def test_intersect_either_order():
    rt = RangeTree(WIKI)
    expected = [Interval(40, 40), Interval(40, 59)]
    assert intersect((40, 59), rt) == expected
    assert intersect(rt, (40, 59)) == expected
    assert intersect(rt, Interval(40, 59)) == intersect(Interval(40, 59), rt)


def test_bounds_error_in_builder():
    nodes = [RangeNode(Interval(i, i), None, None, i) for i in range(4)]
    with pytest.raises(BoundsError):
        RangeTree._add_children(nodes, 0, 4)
    with pytest.raises(BoundsError):
        RangeTree._add_children(nodes, -1, 2)
    with pytest.raises(BoundsError):
        midrange(3, 2)


def test_midrange_rounds_up():
    assert midrange(0, 0) == 0
    assert midrange(0, 1) == 1
    assert midrange(0, 4) == 2
    assert midrange(1, 4) == 3
    assert midrange(3, 4) == 4


def test_random_against_brute_force():
    rng = random.Random(123)
    for n in list(range(0, 20)) + [63, 64, 65, 200]:
        intervals = random_intervals(rng, n)
        rt = RangeTree(intervals)
        check_invariants(rt)
        assert tree_levels(rt) == (math.ceil(math.log2(n + 1)) if n else 0), f"Unbalanced tree for n={n}"

        for _ in range(30):
            a = rng.randint(-20, 260)
            target = (a, a + rng.randint(0, 60))
            got = rt.intersect(target)
            expected = brute_intersect(intervals, target)
            assert sorted(got, key=tuple) == sorted(expected, key=tuple), \
                f"Mismatch for n={n} target={target}: {got} != {expected}"


def test_repeated_queries_are_identical():
    rng = random.Random(7)
    intervals = random_intervals(rng, 100)
    rt = RangeTree(intervals)
    nodes_before = rt.nodes
    r1 = rt.intersect((50, 90))
    r2 = rt.intersect((50, 90))
    assert r1 == r2, "Determinism failed"
    assert rt.nodes == nodes_before


def test_concurrent_queries():
    rng = random.Random(99)
    intervals = random_intervals(rng, 500, span=5000)
    rt = RangeTree(intervals)
    targets = [(a, a + 100) for a in range(0, 5000, 250)]
    expected = {t: rt.intersect(t) for t in targets}
    failures = []

    def worker():
        for t in targets:
            if rt.intersect(t) != expected[t]:
                failures.append(t)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    assert not failures, f"Concurrent query mismatch: {failures}"


if __name__ == "__main__":
    test_wikipedia_example()
    test_random_against_brute_force()
    print("All test Passed (RangeTree)")
