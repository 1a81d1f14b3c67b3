from __future__ import annotations
import numbers
import operator
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union


class InvalidInterval(ValueError):
    """Interval με start > end ή με όρια που δεν είναι ακέραιοι."""


def _as_int(value) -> int:
    """
    Όριο διαστήματος ως int. Δέχεται ακέραιους (και numpy ints) ή floats
    με ακέραια τιμή (π.χ. 3.0 από pandas στήλη με NaN). Δεν στρογγυλεύει τίποτα.
    """
    try:
        return operator.index(value)
    except TypeError:
        pass
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    raise InvalidInterval(f"Interval bound {value!r} is not an integer")


class BoundsError(IndexError):
    """Index range εκτός του node array (λάθος στο αναδρομικό partitioning)."""


@dataclass(frozen=True)
class Interval:
    """Κλειστό διάστημα ακεραίων [start, end]."""

    start: int
    end: int

    def __post_init__(self):
        object.__setattr__(self, "start", _as_int(self.start))
        object.__setattr__(self, "end", _as_int(self.end))
        if self.start > self.end:
            raise InvalidInterval(f"Interval start {self.start} > end {self.end}")

    @classmethod
    def of(cls, value: IntervalLike) -> "Interval":
        """Δέχεται Interval ή οποιοδήποτε ζεύγος (start, end)."""
        if isinstance(value, Interval):
            return value
        start, end = value
        return cls(start, end)

    def __iter__(self) -> Iterator[int]:
        yield self.start
        yield self.end

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, other: "Interval") -> bool:
        return self.start <= other.end and other.start <= self.end

    def intersect(self, other: "Interval") -> Optional["Interval"]:
        """Το κοινό κομμάτι των δύο διαστημάτων, ή None αν δεν τέμνονται."""
        if not self.overlaps(other):
            return None
        return Interval(max(self.start, other.start), min(self.end, other.end))


IntervalLike = Union[Interval, Tuple[int, int], Sequence[int]]


def midrange(lo: int, hi: int) -> int:
    """Median του [lo, hi], στρογγυλεμένο προς τα πάνω όταν το μήκος είναι άρτιο."""
    if lo > hi:
        raise BoundsError(f"Empty index range [{lo}, {hi}]")
    return (lo + hi + 1) >> 1


@dataclass(frozen=True)
class RangeNode:
    """Κόμβος του interval tree (ένα διάστημα + indices των παιδιών)."""

    interval: Interval
    left: Optional[int] = None     # index της ρίζας του αριστερού υποδέντρου
    right: Optional[int] = None    # index της ρίζας του δεξιού υποδέντρου
    max_end: int = 0               # max(end) σε όλο το υποδέντρο του κόμβου


class RangeTree:
    """
    Augmented, balanced, binary interval tree πάνω σε κλειστά διαστήματα ακεραίων.

    Οι κόμβοι είναι αποθηκευμένοι σε ένα tuple, ταξινομημένοι κατά start.
    Η ρίζα κάθε υποδέντρου [lo, hi] είναι ο κόμβος στο midrange(lo, hi),
    οπότε η ρίζα όλου του δέντρου δεν χρειάζεται να αποθηκευτεί.
    Μετά την κατασκευή το δέντρο δεν αλλάζει, άρα τα queries από πολλά threads
    δεν χρειάζονται locking.

        >>> rt = RangeTree([(0, 0), (3, 40), (10, 14), (20, 35), (29, 98)])
        >>> rt.intersect((40, 59))
        [Interval(start=40, end=40), Interval(start=40, end=59)]
    """

    def __init__(self, intervals: Iterable[IntervalLike] = ()):
        """
        intervals: λίστα από Interval ή ζεύγη (start, end), με οποιαδήποτε σειρά.
        Ένα ζεύγος με start > end απορρίπτει όλη την είσοδο (InvalidInterval).
        """
        ivls: List[Interval] = [Interval.of(v) for v in intervals]
        if any(a.start > b.start for a, b in zip(ivls, ivls[1:])):
            ivls.sort(key=lambda iv: iv.start)  # stable

        nodes: List[RangeNode] = [RangeNode(iv, None, None, iv.end) for iv in ivls]
        if nodes:
            self._add_children(nodes, 0, len(nodes) - 1)

        self.nodes: Tuple[RangeNode, ...] = tuple(nodes)

    @staticmethod
    def _add_children(nodes: List[RangeNode], lo: int, hi: int) -> int:
        """
        Αναδρομικά γράφει τα left, right και max_end στους κόμβους nodes[lo..hi].
        Επιστρέφει το index της ρίζας του υποδέντρου.
        """
        if lo < 0 or hi >= len(nodes):
            raise BoundsError(f"Index range [{lo}, {hi}] outside [0, {len(nodes) - 1}]")

        mid = midrange(lo, hi)
        node = nodes[mid]
        left = right = None
        max_end = node.interval.end

        if lo <= mid - 1:
            left = RangeTree._add_children(nodes, lo, mid - 1)
            max_end = max(max_end, nodes[left].max_end)
        if mid + 1 <= hi:
            right = RangeTree._add_children(nodes, mid + 1, hi)
            max_end = max(max_end, nodes[right].max_end)

        nodes[mid] = replace(node, left=left, right=right, max_end=max_end)
        return mid

    def is_empty(self) -> bool:
        """Επιστρέφει True αν το δέντρο είναι άδειο."""
        return not self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, idx: int) -> RangeNode:
        return self.nodes[idx]

    def __iter__(self) -> Iterator[Interval]:
        return (node.interval for node in self.nodes)

    def intervals(self) -> List[Interval]:
        """Τα αποθηκευμένα διαστήματα με τη σειρά των indices (κατά start)."""
        return list(self)

    # ---------- ACCESSORS ----------

    def root_index(self) -> Optional[int]:
        if not self.nodes:
            return None
        return midrange(0, len(self.nodes) - 1)

    def child_indices(self, idx: int) -> Tuple[int, ...]:
        """Indices των παιδιών του κόμβου idx (πρώτα το αριστερό)."""
        node = self.nodes[idx]
        return tuple(c for c in (node.left, node.right) if c is not None)

    def node_value(self, idx: int) -> Tuple[Interval, int]:
        node = self.nodes[idx]
        return node.interval, node.max_end

    # ---------- INTERSECTION QUERY ----------

    def intersect(self, target: IntervalLike) -> List[Interval]:
        """
        Επιστρέφει τις τομές του target με όλα τα διαστήματα του δέντρου,
        με τη σειρά που εμφανίζονται οι κόμβοι στο pre-order search.
        """
        return self.intersect_into([], target)

    def intersect_into(self, result: List[Interval], target: IntervalLike) -> List[Interval]:
        """
        Όπως το intersect, αλλά προσθέτει (append) τις τομές στο result του caller.
        Ό,τι υπήρχε ήδη στο result μένει. Επιστρέφει το ίδιο το result.
        """
        target = Interval.of(target)
        root = self.root_index()
        if root is not None and self.nodes[root].max_end >= target.start:
            self._intersect_node(root, target, result)
        return result

    def _intersect_node(self, idx: int, target: Interval, result: List[Interval]) -> None:
        """
        Αναδρομικό pre-order search.
        Ο caller έχει ήδη ελέγξει ότι max_end >= target.start για αυτόν τον κόμβο.
        """
        nodes = self.nodes
        node = nodes[idx]
        ivl = node.interval

        # Αριστερό υποδέντρο: μόνο αν κάποιο διάστημά του φτάνει μέχρι το target.start
        if node.left is not None and nodes[node.left].max_end >= target.start:
            self._intersect_node(node.left, target, result)

        if ivl.start <= target.end and target.start <= ivl.end:
            result.append(Interval(max(ivl.start, target.start), min(ivl.end, target.end)))

        # Δεξί υποδέντρο: όλα έχουν start >= ivl.start, άρα αν target.end < ivl.start
        # κανένα δεν τέμνει το target
        if (
            node.right is not None
            and target.end >= ivl.start
            and nodes[node.right].max_end >= target.start
        ):
            self._intersect_node(node.right, target, result)


def build(intervals: Iterable[IntervalLike]) -> RangeTree:
    return RangeTree(intervals)


def intersect(
    target: Union[IntervalLike, RangeTree],
    tree: Union[RangeTree, IntervalLike],
) -> List[Interval]:
    """intersect(target, tree) ή intersect(tree, target), ίδιο αποτέλεσμα."""
    if isinstance(target, RangeTree):
        target, tree = tree, target
    return tree.intersect(target)


def intersect_into(result: List[Interval], target: IntervalLike, tree: RangeTree) -> List[Interval]:
    return tree.intersect_into(result, target)
