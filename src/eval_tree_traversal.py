#KODIKAS GIA TESTING
import io

from range_tree import RangeTree
from tree_traversal import (
    leaves,
    postorder,
    preorder,
    print_tree,
    tree_breadth,
    tree_height,
    tree_levels,
    tree_size,
)

WIKI = [(0, 0), (3, 40), (10, 14), (20, 35), (29, 98)]


def test_counts_on_example():
    rt = RangeTree(WIKI)
    assert tree_size(rt) == 5
    assert tree_height(rt) == 2
    assert tree_levels(rt) == 3
    assert tree_breadth(rt) == 2


def test_orders():
    rt = RangeTree(WIKI)
    #indices: 0=[0,0] 1=[3,40] 2=[10,14] 3=[20,35] 4=[29,98]
    assert list(preorder(rt)) == [2, 1, 0, 4, 3]
    assert list(postorder(rt)) == [0, 1, 3, 4, 2]
    assert list(leaves(rt)) == [0, 3]


def test_print_tree():
    rt = RangeTree(WIKI)
    buf = io.StringIO()
    assert print_tree(rt, file=buf) is None
    text = buf.getvalue()
    assert text.startswith("([10, 14], 98)\n"), text
    assert text.endswith("([20, 35], 35)\n"), text
    assert text == (
        "([10, 14], 98)\n"
        "├─ ([3, 40], 40)\n"
        "│  └─ ([0, 0], 0)\n"
        "└─ ([29, 98], 98)\n"
        "   └─ ([20, 35], 35)\n"
    )


def test_empty_and_single():
    empty = RangeTree()
    assert tree_size(empty) == 0
    assert tree_height(empty) == 0
    assert tree_levels(empty) == 0
    assert tree_breadth(empty) == 0
    assert list(preorder(empty)) == []
    buf = io.StringIO()
    print_tree(empty, file=buf)
    assert buf.getvalue() == ""

    single = RangeTree([(5, 10)])
    assert tree_size(single) == 1
    assert tree_height(single) == 0
    assert tree_levels(single) == 1
    assert tree_breadth(single) == 1


def test_larger_tree():
    rt = RangeTree([(i, i + 3) for i in range(100)])
    assert tree_size(rt) == 100
    #ceil(log2(101)) = 7 epipeda
    assert tree_levels(rt) == 7
    assert tree_height(rt) == 6
    assert sorted(preorder(rt)) == list(range(100))


if __name__ == "__main__":
    test_counts_on_example()
    test_orders()
    test_print_tree()
    print("All test Passed (traversal)")
