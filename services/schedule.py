"""
Day/Week Deriver

Nutrition programs store a flat day_number on each meal; weeks are only a
display grouping computed here.
"""

import math
from collections import OrderedDict

from constants import DURATION_UNIT_DAYS

from .errors import ValidationError


def week_for_day(day_number):
    """Week a program day falls in: days 1-7 are week 1, day 8 starts week 2."""
    if day_number is None or day_number < 1:
        raise ValidationError('Day number must be a positive integer.')
    return math.ceil(day_number / 7)


def duration_in_days(duration_value, duration_unit):
    """Program length in days, or None when no duration is set."""
    if not duration_value or duration_unit not in DURATION_UNIT_DAYS:
        return None
    return duration_value * DURATION_UNIT_DAYS[duration_unit]


def total_weeks(day_numbers, duration_value=None, duration_unit=None):
    """
    Number of week tabs to show.

    An explicit program duration wins; otherwise the highest day present is
    used. At least one week is always returned so an empty program still has
    a "Week 1" to add days into.
    """
    days = duration_in_days(duration_value, duration_unit)
    if days is None:
        days = max(day_numbers, default=0)
    return max(1, math.ceil(days / 7))


def days_by_week(day_numbers, duration_value=None, duration_unit=None):
    """Map week -> sorted distinct days, with an (empty) entry for every week shown."""
    days = sorted(set(day_numbers))
    weeks = total_weeks(days, duration_value, duration_unit)
    buckets = OrderedDict((week, []) for week in range(1, weeks + 1))
    for day in days:
        buckets.setdefault(week_for_day(day), []).append(day)
    return buckets
