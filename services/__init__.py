"""
Services Package

Business logic modules for the coaching application.
"""

from .errors import (
    action_result,
    ok,
    CoachingError,
    ValidationError,
    PermissionDenied,
    NotFoundError,
    StoreWriteError,
    PartialWriteError,
)

from .ordering import (
    OrderedItem,
    find_adjacent,
    next_order,
    next_day_number,
    plan_item_move,
    plan_group_move,
    plan_full_order,
    resequence,
    apply_plan,
)

from .grouping import (
    partition,
    exercise_type_lookup,
    group_sequence,
)

from .schedule import (
    week_for_day,
    duration_in_days,
    total_weeks,
    days_by_week,
)

from .cache import (
    cache,
    cached_view,
    invalidate,
    template_items_tag,
    program_structure_tag,
    meal_template_items_tag,
)

from .store import (
    ItemOrderStore,
    OrderScope,
    WORKOUT_ITEMS,
    PROGRAM_MEALS,
    PROGRAM_MEAL_ITEMS,
    MEAL_TEMPLATE_ITEMS,
    program_day_numbers,
)

from .reorder import (
    authorize,
    snapshot,
    append_item,
    append_items,
    move_item,
    move_group,
    commit_order,
    remove_items,
    append_day,
)

__all__ = [
    # Errors
    'action_result',
    'ok',
    'CoachingError',
    'ValidationError',
    'PermissionDenied',
    'NotFoundError',
    'StoreWriteError',
    'PartialWriteError',
    # Reorder engine
    'OrderedItem',
    'find_adjacent',
    'next_order',
    'next_day_number',
    'plan_item_move',
    'plan_group_move',
    'plan_full_order',
    'resequence',
    'apply_plan',
    # Grouping
    'partition',
    'exercise_type_lookup',
    'group_sequence',
    # Schedule
    'week_for_day',
    'duration_in_days',
    'total_weeks',
    'days_by_week',
    # Cache
    'cache',
    'cached_view',
    'invalidate',
    'template_items_tag',
    'program_structure_tag',
    'meal_template_items_tag',
    # Store
    'ItemOrderStore',
    'OrderScope',
    'WORKOUT_ITEMS',
    'PROGRAM_MEALS',
    'PROGRAM_MEAL_ITEMS',
    'MEAL_TEMPLATE_ITEMS',
    'program_day_numbers',
    # Collection manager
    'authorize',
    'snapshot',
    'append_item',
    'append_items',
    'move_item',
    'move_group',
    'commit_order',
    'remove_items',
    'append_day',
]
