"""Tests for the group partitioner and the day/week deriver."""

import pytest

from services.errors import ValidationError
from services.grouping import exercise_type_lookup, group_sequence, partition
from services.ordering import OrderedItem
from services.schedule import days_by_week, duration_in_days, total_weeks, week_for_day


class TestPartition:
    def test_groups_ordered_by_first_member(self):
        items = [OrderedItem(1, 3, 'Cardio'), OrderedItem(2, 1, 'Strength'), OrderedItem(3, 2, 'Cardio')]
        groups = partition(items, lambda item: item.group_key)
        assert list(groups) == ['Strength', 'Cardio']
        assert [item.id for item in groups['Cardio']] == [3, 1]

    def test_empty_key_goes_to_other(self):
        items = [OrderedItem(1, 1, ''), OrderedItem(2, 2, None)]
        groups = partition(items, lambda item: item.group_key)
        assert list(groups) == ['Other']
        assert len(groups['Other']) == 2

    def test_exercise_type_lookup(self):
        items = [OrderedItem(10, 1), OrderedItem(11, 2), OrderedItem(12, 3)]
        lookup = exercise_type_lookup({100: 'Strength', 101: 'Cardio'}, {10: 100, 11: 101, 12: 999})
        groups = partition(items, lookup)
        assert group_sequence(groups) == [('Strength', [10]), ('Cardio', [11]), ('Other', [12])]


class TestSchedule:
    @pytest.mark.parametrize('day', range(1, 8))
    def test_first_seven_days_are_week_one(self, day):
        assert week_for_day(day) == 1

    def test_day_eight_starts_week_two(self):
        assert week_for_day(8) == 2
        assert week_for_day(15) == 3

    def test_day_must_be_positive(self):
        with pytest.raises(ValidationError):
            week_for_day(0)

    def test_duration_in_days(self):
        assert duration_in_days(3, 'days') == 3
        assert duration_in_days(2, 'weeks') == 14
        assert duration_in_days(1, 'months') == 30
        assert duration_in_days(None, None) is None

    def test_duration_sets_week_count_without_days(self):
        assert total_weeks([], 2, 'weeks') == 2

    def test_week_count_from_days(self):
        assert total_weeks([]) == 1
        assert total_weeks([1, 2, 9]) == 2

    def test_month_duration(self):
        assert total_weeks([], 1, 'months') == 5

    def test_days_by_week_includes_empty_weeks(self):
        buckets = days_by_week([1, 2, 3], 3, 'weeks')
        assert dict(buckets) == {1: [1, 2, 3], 2: [], 3: []}

    def test_days_beyond_duration_still_shown(self):
        buckets = days_by_week([1, 16], 1, 'weeks')
        assert list(buckets) == [1, 3]
        assert buckets[3] == [16]
