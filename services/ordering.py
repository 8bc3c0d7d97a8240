"""
Reorder Engine

Pure order computations over a snapshot of one ordered scope. Nothing here
touches the database: every function takes the scope's items and returns the
(item_id, new_order) assignments that must be written, leaving out rows whose
order does not change.

Orders are 1-based. Every plan except append ends in a dense 1..N numbering,
so gaps or duplicates left behind by earlier failures are repaired by the
next move.
"""

from dataclasses import dataclass
from typing import Optional

from constants import VALID_DIRECTIONS

from .errors import NotFoundError, ValidationError
from .grouping import partition


@dataclass(frozen=True)
class OrderedItem:
    """Snapshot of one row in an ordered scope."""
    id: int
    order: int
    group_key: Optional[str] = None


def sort_key(item):
    """Stable ordering: by order, ties broken by lowest id."""
    return (item.order, item.id)


def sorted_items(items):
    return sorted(items, key=sort_key)


def next_order(items):
    """Append position: one past the highest order in scope, or 1 when empty."""
    orders = [item.order for item in items if item.order is not None]
    return max(orders) + 1 if orders else 1


def next_day_number(day_numbers):
    """Next program day: one past the highest existing day, or 1 when none exist."""
    days = [day for day in day_numbers if day is not None]
    return max(days) + 1 if days else 1


def resequence(items, sequence=None):
    """
    Assign order = position + 1 over a sequence of item ids.

    With no sequence the items' current (order, id) ordering is used, which
    closes gaps and splits duplicates. Only changed rows are returned.
    """
    current = {item.id: item.order for item in items}
    if sequence is None:
        sequence = [item.id for item in sorted_items(items)]
    return [(item_id, position) for position, item_id in enumerate(sequence, start=1)
            if current.get(item_id) != position]


def _check_direction(direction):
    if direction not in VALID_DIRECTIONS:
        raise ValidationError(f'Invalid direction "{direction}". Use "up" or "down".')


def _find(items, item_id):
    for item in items:
        if item.id == item_id:
            return item
    raise NotFoundError('Item not found.')


def find_adjacent(items, item_id, direction):
    """
    Neighbour to swap with, or None when the item is already at the boundary.

    Neighbours are taken from the sorted sequence (order, then id), so rows
    that share an order after an earlier inconsistency can still pass each
    other.
    """
    _check_direction(direction)
    current = _find(items, item_id)
    sequence = sorted_items(items)
    i = sequence.index(current)
    if direction == 'up':
        return sequence[i - 1] if i > 0 else None
    return sequence[i + 1] if i + 1 < len(sequence) else None


def plan_item_move(items, item_id, direction):
    """
    Swap one item with its neighbour.

    Returns [] at the boundary. On a dense scope the plan is exactly two
    writes, the neighbour first: it takes the moving item's order, then the
    moving item takes the neighbour's.
    """
    current = _find(items, item_id)
    adjacent = find_adjacent(items, item_id, direction)
    if adjacent is None:
        return []

    sequence = [item.id for item in sorted_items(items)]
    i, j = sequence.index(current.id), sequence.index(adjacent.id)
    sequence[i], sequence[j] = sequence[j], sequence[i]

    plan = resequence(items, sequence)
    # neighbour first
    plan.sort(key=lambda assignment: assignment[0] != adjacent.id)
    return plan


def plan_group_move(items, group_key, direction, key_lookup=None):
    """
    Move a whole group of items past the adjacent group.

    Groups come from the partitioner and are ordered by their lowest member
    order. The moving and adjacent groups are concatenated (moving first for
    'up', adjacent first for 'down'), each keeping its internal order, and the
    block is placed where the earlier of the two groups started. Returns []
    when there is no adjacent group in that direction.
    """
    _check_direction(direction)
    if key_lookup is None:
        key_lookup = lambda item: item.group_key
    groups = partition(items, key_lookup)
    keys = list(groups)
    if group_key not in groups:
        raise NotFoundError(f'Group "{group_key}" not found.')

    index = keys.index(group_key)
    target = index - 1 if direction == 'up' else index + 1
    if target < 0 or target >= len(keys):
        return []

    moving = groups[group_key]
    adjacent = groups[keys[target]]
    block = moving + adjacent if direction == 'up' else adjacent + moving
    block_ids = {item.id for item in block}

    ordered = sorted_items(items)
    start = min(i for i, item in enumerate(ordered) if item.id in block_ids)
    rest = [item.id for item in ordered if item.id not in block_ids]
    sequence = rest[:start] + [item.id for item in block] + rest[start:]
    return resequence(items, sequence)


def plan_full_order(items, ordered_ids):
    """
    Commit a complete, caller-supplied ordering (e.g. after drag and drop).

    The list must name every item in scope exactly once. Missing ids are
    reported rather than appended, so the caller can tell that its view was
    stale.
    """
    if not ordered_ids:
        raise ValidationError('No items supplied to reorder.')
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError('Each item may appear only once in the new order.')

    scope_ids = {item.id for item in items}
    unknown = [item_id for item_id in ordered_ids if item_id not in scope_ids]
    if unknown:
        raise NotFoundError(f'Items not found in this collection: {", ".join(map(str, unknown))}.')
    missing = sorted(scope_ids - set(ordered_ids))
    if missing:
        raise ValidationError(f'New order is missing items: {", ".join(map(str, missing))}.')

    return resequence(items, list(ordered_ids))


def apply_plan(items, plan):
    """Return the items with a plan's assignments applied (for previews and tests)."""
    changes = dict(plan)
    return [OrderedItem(item.id, changes.get(item.id, item.order), item.group_key) for item in items]
