"""
Group Partitioner

Splits the items of one ordered scope into groups keyed by a secondary
classification (the exercise type for workout template items).
"""

from collections import OrderedDict

from constants import DEFAULT_GROUP_KEY


def partition(items, key_lookup):
    """
    Group items by key_lookup(item).

    Items whose lookup comes back empty land in the 'Other' group. Each group
    is sorted by (order, id), and the groups themselves are ordered by their
    lowest member order; that ordering, not the key name, is what a group
    move walks through.
    """
    buckets = {}
    for item in items:
        key = key_lookup(item) or DEFAULT_GROUP_KEY
        buckets.setdefault(key, []).append(item)

    for members in buckets.values():
        members.sort(key=lambda item: (item.order, item.id))

    ordered_keys = sorted(buckets, key=lambda key: (buckets[key][0].order, buckets[key][0].id))
    return OrderedDict((key, buckets[key]) for key in ordered_keys)


def exercise_type_lookup(exercise_types, exercise_ids):
    """
    Build a key lookup for workout items.

    exercise_types maps exercise id -> exercise_type (fetched in one query for
    the whole scope); exercise_ids maps item id -> exercise id.
    """
    def lookup(item):
        return exercise_types.get(exercise_ids.get(item.id))
    return lookup


def group_sequence(groups):
    """Flatten partitioned groups into [(group_key, [item ids])] for display."""
    return [(key, [item.id for item in members]) for key, members in groups.items()]
