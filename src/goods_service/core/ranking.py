"""Rank arithmetic for goods priorities within a project.

The active goods of a project hold ranks 1..N. Every rank-changing write is
one of three moves: insert at a rank, move from one rank to another, or
remove from a rank. Each move is expressed as the target rank of the item
plus a ``Shift``: one contiguous window of *other* active items whose ranks
change by +1 or -1. Applying the shift and then placing the item keeps the
ranks dense.
"""

from dataclasses import dataclass

FIRST_RANK = 1


@dataclass(frozen=True)
class Shift:
    """Add ``delta`` to every other active rank in ``[lower, upper]``."""

    lower: int
    upper: int
    delta: int

    @property
    def is_empty(self) -> bool:
        return self.delta == 0 or self.lower > self.upper


NO_SHIFT = Shift(lower=FIRST_RANK, upper=0, delta=0)


def clamp_rank(requested: int, last: int) -> int:
    """Clamp a requested rank into ``[FIRST_RANK, last]``.

    Values below the first rank mean "first", values past the end mean "last".
    """
    if last < FIRST_RANK:
        return FIRST_RANK
    return max(FIRST_RANK, min(requested, last))


def plan_insert(requested: int | None, active_count: int) -> tuple[int, Shift]:
    """Plan inserting a new item among ``active_count`` active items.

    Returns:
        Tuple of (rank for the new item, shift for the existing items).
        Omitting ``requested`` appends after the last item.
    """
    end = active_count + 1
    if requested is None:
        return end, NO_SHIFT
    rank = clamp_rank(requested, end)
    if rank == end:
        return rank, NO_SHIFT
    return rank, Shift(lower=rank, upper=active_count, delta=1)


def plan_move(current: int, requested: int, active_count: int) -> tuple[int, Shift]:
    """Plan moving an item from rank ``current`` to ``requested``.

    ``active_count`` includes the moved item. Items between the two ranks
    slide one step towards the vacated rank.
    """
    target = clamp_rank(requested, active_count)
    if target == current:
        return target, NO_SHIFT
    if target < current:
        return target, Shift(lower=target, upper=current - 1, delta=1)
    return target, Shift(lower=current + 1, upper=target, delta=-1)


def plan_remove(current: int, active_count: int) -> Shift:
    """Plan closing the gap left by removing the item at rank ``current``."""
    if current >= active_count:
        return NO_SHIFT
    return Shift(lower=current + 1, upper=active_count, delta=-1)
