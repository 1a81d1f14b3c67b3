from __future__ import annotations
import sys
from typing import Any, Iterator, List, Optional, Protocol, TextIO, Tuple


class IndexedTree(Protocol):
    """Ό,τι χρειάζεται ένα δέντρο με index-addressed κόμβους για να γίνει traverse."""

    def root_index(self) -> Optional[int]: ...

    def child_indices(self, idx: int) -> Tuple[int, ...]: ...

    def node_value(self, idx: int) -> Any: ...


def preorder(tree: IndexedTree) -> Iterator[int]:
    """Indices των κόμβων σε pre-order (κόμβος, μετά τα παιδιά του)."""
    root = tree.root_index()
    if root is None:
        return
    stack: List[int] = [root]
    while stack:
        idx = stack.pop()
        yield idx
        # reversed ώστε το αριστερό παιδί να βγει πρώτο
        stack.extend(reversed(tree.child_indices(idx)))


def postorder(tree: IndexedTree) -> Iterator[int]:
    """Indices των κόμβων σε post-order (παιδιά πρώτα, μετά ο κόμβος)."""
    root = tree.root_index()
    if root is None:
        return
    stack: List[Tuple[int, bool]] = [(root, False)]
    while stack:
        idx, expanded = stack.pop()
        if expanded:
            yield idx
            continue
        stack.append((idx, True))
        for child in reversed(tree.child_indices(idx)):
            stack.append((child, False))


def leaves(tree: IndexedTree) -> Iterator[int]:
    return (idx for idx in preorder(tree) if not tree.child_indices(idx))


def tree_size(tree: IndexedTree) -> int:
    return sum(1 for _ in preorder(tree))


def tree_breadth(tree: IndexedTree) -> int:
    """Πλήθος φύλλων."""
    return sum(1 for _ in leaves(tree))


def tree_height(tree: IndexedTree) -> int:
    """
    Μήκος (σε ακμές) του μακρύτερου μονοπατιού ρίζα -> φύλλο.
    Δέντρο με μόνο ρίζα έχει height 0, όπως και το άδειο δέντρο.
    """
    heights = {}
    for idx in postorder(tree):
        children = tree.child_indices(idx)
        heights[idx] = 1 + max(heights[c] for c in children) if children else 0
    root = tree.root_index()
    return 0 if root is None else heights[root]


def tree_levels(tree: IndexedTree) -> int:
    """Πλήθος επιπέδων (height + 1), 0 για άδειο δέντρο."""
    if tree.root_index() is None:
        return 0
    return tree_height(tree) + 1


def _format_value(value: Any) -> str:
    if isinstance(value, tuple) and len(value) == 2:
        ivl, max_end = value
        try:
            start, end = ivl
        except (TypeError, ValueError):
            return f"({ivl}, {max_end})"
        return f"([{start}, {end}], {max_end})"
    return str(value)


def print_tree(tree: IndexedTree, file: Optional[TextIO] = None) -> None:
    """
    Τυπώνει το δέντρο, έναν κόμβο ανά γραμμή:

        ([10, 14], 98)
        ├─ ([3, 40], 40)
        │  └─ ([0, 0], 0)
        └─ ([29, 98], 98)
           └─ ([20, 35], 35)
    """
    out = file if file is not None else sys.stdout
    root = tree.root_index()
    if root is None:
        return

    # (index, prefix για τα παιδιά, connector της γραμμής)
    stack: List[Tuple[int, str, str]] = [(root, "", "")]
    while stack:
        idx, prefix, connector = stack.pop()
        print(f"{connector}{_format_value(tree.node_value(idx))}", file=out)

        children = tree.child_indices(idx)
        for pos in reversed(range(len(children))):
            last = pos == len(children) - 1
            stack.append((
                children[pos],
                prefix + ("   " if last else "│  "),
                prefix + ("└─ " if last else "├─ "),
            ))
