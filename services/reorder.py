"""
Ordered Collection Manager

Entry points used by the request handlers for every ordered scope. Each one
authorizes the principal against the scope's owning coach before reading
anything, takes a snapshot of the scope, asks the reorder engine for the
assignments and writes them one row at a time.

There is no multi-row transaction. When a write fails part way the remaining
writes are skipped, nothing is retried, and PartialWriteError tells the
caller exactly which rows were applied.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from .cache import invalidate
from .errors import (
    NotFoundError,
    PartialWriteError,
    PermissionDenied,
    StoreWriteError,
    ValidationError,
    ok,
)
from .ordering import (
    OrderedItem,
    next_day_number,
    next_order,
    plan_full_order,
    plan_group_move,
    plan_item_move,
    resequence,
)
from .store import PROGRAM_MEALS, program_day_numbers

logger = logging.getLogger(__name__)


def authorize(principal, scope, parent):
    """Raise unless principal is the coach owning the parent's root resource."""
    if principal is None:
        raise PermissionDenied('Authentication required.')
    if not principal.is_coach:
        raise PermissionDenied('Unauthorized.')
    owner_id = scope.owner_of(parent)
    if owner_id is None:
        raise NotFoundError('Collection not found.')
    if owner_id != principal.id:
        logger.warning('Coach %s denied access to %s %s', principal.id, scope.name, parent)
        raise PermissionDenied('Permission denied.')


def snapshot(scope, parent, with_groups=False):
    """Current items of a scope, with group keys resolved when asked for."""
    items = scope.store.list_by_parent(parent)
    if with_groups and scope.group_keys is not None:
        keys = scope.group_keys(parent)
        items = [OrderedItem(item.id, item.order, keys.get(item.id)) for item in items]
    return items


def _write_orders(scope, parent, plan, action):
    """Apply (item_id, order) assignments in sequence, stopping at the first failure."""
    applied = []
    for position, (item_id, order) in enumerate(plan):
        try:
            scope.store.set_order(parent, item_id, order)
        except (SQLAlchemyError, NotFoundError):
            logger.exception('%s: order update failed for %s item %s', action, scope.name, item_id)
            skipped = [pending for pending, _ in plan[position + 1:]]
            if applied:
                invalidate(scope.tag_for(parent))
                raise PartialWriteError(
                    f'Failed to update item order during {action}; '
                    f'{len(applied)} of {len(plan)} items were updated.',
                    applied=applied, failed=[item_id], skipped=skipped,
                )
            raise StoreWriteError(f'Failed to update item order during {action}.', failed=[item_id])
        applied.append(item_id)
    return applied


def _finish(scope, parent, applied):
    if applied:
        invalidate(scope.tag_for(parent))


def append_item(scope, principal, parent, **payload):
    """Insert a new row at max(order) + 1 without renumbering anything else."""
    authorize(principal, scope, parent)
    order = next_order(snapshot(scope, parent))
    try:
        row = scope.store.insert(parent, order, **payload)
    except SQLAlchemyError:
        raise StoreWriteError('Failed to add item.')
    invalidate(scope.tag_for(parent))
    return row


def append_items(scope, principal, parent, payloads):
    """Append several rows in sequence, keeping their relative order."""
    authorize(principal, scope, parent)
    if not payloads:
        raise ValidationError('Nothing to add.')
    start = next_order(snapshot(scope, parent))
    rows = []
    for index, payload in enumerate(payloads):
        try:
            rows.append(scope.store.insert(parent, start + index, **payload))
        except SQLAlchemyError:
            logger.exception('Bulk append to %s stopped after %d rows', scope.name, len(rows))
            if rows:
                invalidate(scope.tag_for(parent))
                raise PartialWriteError(
                    f'Only {len(rows)} of {len(payloads)} items were added.',
                    applied=[row.id for row in rows], failed=[index],
                    skipped=list(range(index + 1, len(payloads))),
                )
            raise StoreWriteError('Failed to add items.')
    invalidate(scope.tag_for(parent))
    return rows


def move_item(scope, principal, parent, item_id, direction):
    """Swap an item with its neighbour. Moving past either end succeeds without writes."""
    authorize(principal, scope, parent)
    items = snapshot(scope, parent)
    plan = plan_item_move(items, item_id, direction)
    if not plan:
        return ok('Item is already at the boundary.')
    applied = _write_orders(scope, parent, plan, 'item move')
    _finish(scope, parent, applied)
    return ok('Item moved.')


def move_group(scope, principal, parent, group_key, direction):
    """Move every item of one group past the adjacent group."""
    authorize(principal, scope, parent)
    if not group_key:
        raise ValidationError('Group is required.')
    items = snapshot(scope, parent, with_groups=True)
    if not items:
        return ok('No items to move.')
    plan = plan_group_move(items, group_key, direction)
    if not plan:
        return ok('Group is already at the boundary.')
    applied = _write_orders(scope, parent, plan, 'group move')
    _finish(scope, parent, applied)
    return ok('Group moved.')


def commit_order(scope, principal, parent, ordered_ids):
    """Persist a full ordering submitted by the client."""
    authorize(principal, scope, parent)
    items = snapshot(scope, parent)
    plan = plan_full_order(items, ordered_ids)
    applied = _write_orders(scope, parent, plan, 'reorder')
    _finish(scope, parent, applied)
    return ok('Order saved successfully.', updated=len(applied))


def remove_items(scope, principal, parent, item_ids):
    """Delete rows and close the gaps they leave."""
    authorize(principal, scope, parent)
    item_ids = list(dict.fromkeys(item_ids))
    if not item_ids:
        raise ValidationError('No items selected for deletion.')
    for item_id in item_ids:
        scope.store.get_order(parent, item_id)

    deleted = []
    for position, item_id in enumerate(item_ids):
        try:
            scope.store.delete(parent, item_id)
        except SQLAlchemyError:
            logger.exception('Delete of %s item %s failed', scope.name, item_id)
            if deleted:
                invalidate(scope.tag_for(parent))
                raise PartialWriteError(
                    f'Only {len(deleted)} of {len(item_ids)} items were deleted.',
                    applied=deleted, failed=[item_id], skipped=list(item_ids[position + 1:]),
                )
            raise StoreWriteError('Failed to delete item.', failed=[item_id])
        deleted.append(item_id)

    try:
        _write_orders(scope, parent, resequence(snapshot(scope, parent)), 'renumbering after delete')
    except (PartialWriteError, StoreWriteError) as e:
        # The deletes are already committed
        invalidate(scope.tag_for(parent))
        renumbered = e.applied if isinstance(e, PartialWriteError) else []
        raise PartialWriteError(
            f'Deleted {len(deleted)} items but failed to renumber the rest.',
            applied=deleted + renumbered, failed=e.failed,
            skipped=getattr(e, 'skipped', []),
        )
    invalidate(scope.tag_for(parent))
    return deleted


def append_day(principal, program_id, meal_name, **payload):
    """
    Start the next program day by inserting its first meal.

    Days have no row of their own; the new day is max(day_number) + 1, or 1
    for an empty program.
    """
    authorize(principal, PROGRAM_MEALS, {'program_template_id': program_id, 'day_number': None})
    day_number = next_day_number(program_day_numbers(program_id))
    parent = {'program_template_id': program_id, 'day_number': day_number}
    return append_item(PROGRAM_MEALS, principal, parent, meal_name=meal_name, **payload)
