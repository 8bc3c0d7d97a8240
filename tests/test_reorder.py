"""Tests for the ordered collection manager against the database."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from conftest import orders
from models import WorkoutTemplateItem, NutritionProgramMeal, NutritionProgramMealItem, MealItem
from services.cache import cache, cached_view, template_items_tag
from services.errors import NotFoundError, PartialWriteError, PermissionDenied, ValidationError
from services.reorder import (
    append_day,
    append_item,
    append_items,
    commit_order,
    move_group,
    move_item,
    remove_items,
)
from services.store import (
    MEAL_TEMPLATE_ITEMS,
    PROGRAM_MEAL_ITEMS,
    PROGRAM_MEALS,
    WORKOUT_ITEMS,
)


def workout_orders(template):
    return orders(WorkoutTemplateItem, 'item_order', template_id=template.id)


@pytest.fixture
def strength_cardio(make_exercise, make_workout):
    """Cardio item first, then two strength items."""
    run = make_exercise('Treadmill', 'Cardio')
    squat = make_exercise('Squat', 'Strength')
    bench = make_exercise('Bench Press', 'Strength')
    return make_workout([(run, 1), (squat, 2), (bench, 3)])


class TestAuthorization:
    def test_anonymous_is_rejected(self, strength_cardio):
        template, items = strength_cardio
        with pytest.raises(PermissionDenied):
            move_item(WORKOUT_ITEMS, None, {'template_id': template.id}, items[1].id, 'up')

    def test_client_role_is_rejected(self, strength_cardio, client_profile):
        template, items = strength_cardio
        with pytest.raises(PermissionDenied):
            move_item(WORKOUT_ITEMS, client_profile, {'template_id': template.id}, items[1].id, 'up')

    def test_other_coach_is_rejected_without_writes(self, strength_cardio, other_coach):
        template, items = strength_cardio
        before = workout_orders(template)
        with pytest.raises(PermissionDenied):
            commit_order(WORKOUT_ITEMS, other_coach, {'template_id': template.id},
                         [items[2].id, items[1].id, items[0].id])
        assert workout_orders(template) == before

    def test_unknown_parent(self, coach):
        with pytest.raises(NotFoundError):
            move_item(WORKOUT_ITEMS, coach, {'template_id': 999}, 1, 'up')


class TestWorkoutItems:
    def test_append_uses_max_plus_one(self, coach, make_exercise, make_workout):
        squat = make_exercise('Squat', 'Strength')
        template, _ = make_workout([(squat, 1), (squat, 2), (squat, 5)])
        row = append_item(WORKOUT_ITEMS, coach, {'template_id': template.id},
                          exercise_id=squat.id, sets=1, set_details=[{}])
        assert row.item_order == 6
        assert sorted(workout_orders(template).values()) == [1, 2, 5, 6]

    def test_append_to_empty_template(self, coach, make_exercise, make_workout):
        squat = make_exercise('Squat')
        template, _ = make_workout([])
        row = append_item(WORKOUT_ITEMS, coach, {'template_id': template.id},
                          exercise_id=squat.id, sets=1, set_details=[{}])
        assert row.item_order == 1

    def test_move_at_boundary_changes_nothing(self, coach, strength_cardio):
        template, items = strength_cardio
        before = workout_orders(template)
        result = move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, items[0].id, 'up')
        assert result['success'] is True
        assert workout_orders(template) == before
        result = move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, items[2].id, 'down')
        assert result['success'] is True
        assert workout_orders(template) == before

    def test_move_up_then_down_restores(self, coach, strength_cardio):
        template, items = strength_cardio
        parent = {'template_id': template.id}
        before = workout_orders(template)
        move_item(WORKOUT_ITEMS, coach, parent, items[2].id, 'up')
        assert workout_orders(template)[items[2].id] == 2
        move_item(WORKOUT_ITEMS, coach, parent, items[2].id, 'down')
        assert workout_orders(template) == before

    def test_move_item_outside_scope(self, coach, strength_cardio, make_workout, make_exercise):
        template, _ = strength_cardio
        _, other_items = make_workout([(make_exercise('Row'), 1)])
        with pytest.raises(NotFoundError):
            move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, other_items[0].id, 'up')

    def test_group_move_uses_exercise_types(self, coach, strength_cardio):
        template, (run, squat, bench) = strength_cardio
        result = move_group(WORKOUT_ITEMS, coach, {'template_id': template.id}, 'Strength', 'up')
        assert result['message'] == 'Group moved.'
        assert workout_orders(template) == {squat.id: 1, bench.id: 2, run.id: 3}

    def test_group_move_boundary(self, coach, strength_cardio):
        template, _ = strength_cardio
        result = move_group(WORKOUT_ITEMS, coach, {'template_id': template.id}, 'Cardio', 'up')
        assert result['success'] is True
        assert 'boundary' in result['message']

    def test_group_move_empty_template(self, coach, make_workout):
        template, _ = make_workout([])
        result = move_group(WORKOUT_ITEMS, coach, {'template_id': template.id}, 'Strength', 'up')
        assert result == {'success': True, 'message': 'No items to move.'}

    def test_commit_order_twice(self, coach, strength_cardio):
        template, (run, squat, bench) = strength_cardio
        parent = {'template_id': template.id}
        first = commit_order(WORKOUT_ITEMS, coach, parent, [bench.id, run.id, squat.id])
        assert first['updated'] == 3
        second = commit_order(WORKOUT_ITEMS, coach, parent, [bench.id, run.id, squat.id])
        assert second['updated'] == 0
        assert workout_orders(template) == {bench.id: 1, run.id: 2, squat.id: 3}

    def test_commit_order_missing_item_writes_nothing(self, coach, strength_cardio):
        template, (run, squat, bench) = strength_cardio
        before = workout_orders(template)
        with pytest.raises(ValidationError):
            commit_order(WORKOUT_ITEMS, coach, {'template_id': template.id}, [bench.id, run.id])
        assert workout_orders(template) == before

    def test_delete_renumbers(self, coach, strength_cardio):
        template, (run, squat, bench) = strength_cardio
        run_id = run.id
        deleted = remove_items(WORKOUT_ITEMS, coach, {'template_id': template.id}, [run_id])
        assert deleted == [run_id]
        assert workout_orders(template) == {squat.id: 1, bench.id: 2}

    def test_delete_unknown_item(self, coach, strength_cardio):
        template, _ = strength_cardio
        with pytest.raises(NotFoundError):
            remove_items(WORKOUT_ITEMS, coach, {'template_id': template.id}, [12345])

    def test_get_order_is_scoped_to_parent(self, coach, strength_cardio, make_workout, make_exercise):
        template, (run, squat, bench) = strength_cardio
        other, (plank,) = make_workout([(make_exercise('Plank'), 1)])
        assert WORKOUT_ITEMS.store.get_order({'template_id': template.id}, bench.id) == 3
        with pytest.raises(NotFoundError):
            WORKOUT_ITEMS.store.get_order({'template_id': template.id}, plank.id)

    def test_delete_from_other_template_writes_nothing(self, coach, strength_cardio, make_workout, make_exercise):
        template, (run, squat, bench) = strength_cardio
        other, (plank,) = make_workout([(make_exercise('Plank'), 1)])
        with pytest.raises(NotFoundError):
            remove_items(WORKOUT_ITEMS, coach, {'template_id': template.id}, [run.id, plank.id])
        assert workout_orders(template) == {run.id: 1, squat.id: 2, bench.id: 3}

    def test_duplicated_orders_are_repaired_by_next_move(self, coach, make_exercise, make_workout):
        squat = make_exercise('Squat')
        template, (a, b, c) = make_workout([(squat, 1), (squat, 1), (squat, 4)])
        move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, c.id, 'up')
        assert sorted(workout_orders(template).values()) == [1, 2, 3]


class TestPartialWrites:
    def test_failed_second_write_reports_partial(self, coach, strength_cardio, monkeypatch):
        template, (run, squat, bench) = strength_cardio
        store = WORKOUT_ITEMS.store
        real_set_order = store.set_order
        calls = []

        def flaky_set_order(parent, item_id, new_order):
            calls.append(item_id)
            if len(calls) == 2:
                raise OperationalError('UPDATE', {}, Exception('database is locked'))
            return real_set_order(parent, item_id, new_order)

        monkeypatch.setattr(store, 'set_order', flaky_set_order)
        with pytest.raises(PartialWriteError) as excinfo:
            move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, bench.id, 'up')

        error = excinfo.value
        assert error.applied == [squat.id]
        assert error.failed == [bench.id]
        assert error.skipped == []
        assert error.status_code == 409
        # squat took bench's place; bench never moved
        assert workout_orders(template) == {run.id: 1, squat.id: 3, bench.id: 3}

    def test_first_write_failure_is_not_partial(self, coach, strength_cardio, monkeypatch):
        template, (run, squat, bench) = strength_cardio

        def failing_set_order(parent, item_id, new_order):
            raise OperationalError('UPDATE', {}, Exception('disk I/O error'))

        monkeypatch.setattr(WORKOUT_ITEMS.store, 'set_order', failing_set_order)
        with pytest.raises(Exception) as excinfo:
            move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, bench.id, 'up')
        assert not isinstance(excinfo.value, PartialWriteError)
        assert excinfo.value.status_code == 500

    def test_renumber_failure_after_delete_is_partial(self, coach, strength_cardio, monkeypatch):
        template, (run, squat, bench) = strength_cardio
        run_id, squat_id, bench_id = run.id, squat.id, bench.id
        tag = template_items_tag(template.id)
        cached_view(tag, lambda: {'stale': True})

        def failing_set_order(parent, item_id, new_order):
            raise OperationalError('UPDATE', {}, Exception('database is locked'))

        monkeypatch.setattr(WORKOUT_ITEMS.store, 'set_order', failing_set_order)
        with pytest.raises(PartialWriteError) as excinfo:
            remove_items(WORKOUT_ITEMS, coach, {'template_id': template.id}, [run_id])

        error = excinfo.value
        assert error.applied == [run_id]
        assert error.failed == [squat_id]
        assert error.skipped == [bench_id]
        assert cache.get(tag) is None
        assert workout_orders(template) == {squat_id: 2, bench_id: 3}

    def test_renumber_stopping_midway_lists_renumbered_rows(self, coach, strength_cardio, monkeypatch):
        template, (run, squat, bench) = strength_cardio
        run_id, squat_id, bench_id = run.id, squat.id, bench.id
        store = WORKOUT_ITEMS.store
        real_set_order = store.set_order
        calls = []

        def flaky_set_order(parent, item_id, new_order):
            calls.append(item_id)
            if len(calls) == 2:
                raise OperationalError('UPDATE', {}, Exception('database is locked'))
            return real_set_order(parent, item_id, new_order)

        monkeypatch.setattr(store, 'set_order', flaky_set_order)
        with pytest.raises(PartialWriteError) as excinfo:
            remove_items(WORKOUT_ITEMS, coach, {'template_id': template.id}, [run_id])

        assert excinfo.value.applied == [run_id, squat_id]
        assert excinfo.value.failed == [bench_id]
        assert excinfo.value.skipped == []

    def test_full_order_failure_lists_skipped_rows(self, coach, make_exercise, make_workout, monkeypatch):
        exercises = [make_exercise(name, 'Strength') for name in ('Squat', 'Bench', 'Row', 'Press')]
        template, items = make_workout([(exercise, order) for order, exercise in enumerate(exercises, start=1)])
        a, b, c, d = [item.id for item in items]
        store = WORKOUT_ITEMS.store
        real_set_order = store.set_order
        calls = []

        def flaky_set_order(parent, item_id, new_order):
            calls.append(item_id)
            if len(calls) == 2:
                raise OperationalError('UPDATE', {}, Exception('database is locked'))
            return real_set_order(parent, item_id, new_order)

        monkeypatch.setattr(store, 'set_order', flaky_set_order)
        with pytest.raises(PartialWriteError) as excinfo:
            commit_order(WORKOUT_ITEMS, coach, {'template_id': template.id}, [d, c, b, a])

        error = excinfo.value
        assert error.applied == [d]
        assert error.failed == [c]
        assert error.skipped == [b, a]
        assert error.to_result()['skipped'] == [b, a]
        assert workout_orders(template) == {a: 1, b: 2, c: 3, d: 1}


class TestCacheInvalidation:
    def test_move_drops_cached_view(self, coach, strength_cardio):
        template, items = strength_cardio
        tag = template_items_tag(template.id)
        cached_view(tag, lambda: {'stale': True})
        assert cache.get(tag) == {'stale': True}
        move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, items[1].id, 'up')
        assert cache.get(tag) is None

    def test_noop_keeps_cached_view(self, coach, strength_cardio):
        template, items = strength_cardio
        tag = template_items_tag(template.id)
        cached_view(tag, lambda: {'fresh': True})
        move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, items[0].id, 'up')
        assert cache.get(tag) == {'fresh': True}

    def test_cache_failure_does_not_undo_write(self, coach, strength_cardio, monkeypatch, caplog):
        template, (run, squat, bench) = strength_cardio

        def broken_delete(key):
            raise ConnectionError('cache backend unavailable')

        monkeypatch.setattr(cache, 'delete', broken_delete)
        with caplog.at_level(logging.ERROR, logger='services.cache'):
            result = move_item(WORKOUT_ITEMS, coach, {'template_id': template.id}, bench.id, 'up')

        assert result['success'] is True
        assert workout_orders(template) == {run.id: 1, bench.id: 2, squat.id: 3}
        assert 'Cache invalidation failed' in caplog.text


class TestNutritionScopes:
    def test_append_day(self, coach, make_program):
        program, _ = make_program([(1, 'Breakfast', 1), (2, 'Breakfast', 1)])
        meal = append_day(coach, program.id, 'Breakfast')
        assert meal.day_number == 3
        assert meal.meal_order == 1

    def test_first_day_of_empty_program(self, coach, make_program):
        program, _ = make_program()
        assert append_day(coach, program.id, 'Meal 1').day_number == 1

    def test_meals_are_ordered_per_day(self, coach, make_program):
        program, (breakfast, lunch, other_day) = make_program(
            [(1, 'Breakfast', 1), (1, 'Lunch', 2), (2, 'Breakfast', 1)])
        parent = {'program_template_id': program.id, 'day_number': 1}
        move_item(PROGRAM_MEALS, coach, parent, lunch.id, 'up')
        assert orders(NutritionProgramMeal, 'meal_order', program_template_id=program.id, day_number=1) == {
            lunch.id: 1, breakfast.id: 2}
        assert orders(NutritionProgramMeal, 'meal_order', program_template_id=program.id, day_number=2) == {
            other_day.id: 1}

    def test_meal_from_other_day_not_found(self, coach, make_program):
        program, (breakfast, other_day) = make_program([(1, 'Breakfast', 1), (2, 'Breakfast', 1)])
        parent = {'program_template_id': program.id, 'day_number': 1}
        with pytest.raises(NotFoundError):
            move_item(PROGRAM_MEALS, coach, parent, other_day.id, 'up')

    def test_bulk_append_keeps_template_order(self, coach, make_program, make_food):
        program, (meal,) = make_program([(1, 'Breakfast', 1)])
        oats, milk = make_food('Oats'), make_food('Milk')
        append_item(PROGRAM_MEAL_ITEMS, coach, {'meal_id': meal.id}, food_id=oats.id, quantity=1)
        rows = append_items(PROGRAM_MEAL_ITEMS, coach, {'meal_id': meal.id}, [
            {'food_id': milk.id, 'quantity': 250},
            {'food_id': oats.id, 'quantity': 0.5},
        ])
        assert [row.item_order for row in rows] == [2, 3]
        assert sorted(orders(NutritionProgramMealItem, 'item_order', meal_id=meal.id).values()) == [1, 2, 3]

    def test_meal_template_items(self, coach, make_meal_template, make_food):
        oats, milk, honey = make_food('Oats'), make_food('Milk'), make_food('Honey')
        meal = make_meal_template('Porridge', [(oats, 60), (milk, 250), (honey, 10)])
        ids = [item.id for item in meal.items]
        move_item(MEAL_TEMPLATE_ITEMS, coach, {'meal_id': meal.id}, ids[2], 'up')
        remove_items(MEAL_TEMPLATE_ITEMS, coach, {'meal_id': meal.id}, [ids[0]])
        assert orders(MealItem, 'sort_order', meal_id=meal.id) == {ids[2]: 1, ids[1]: 2}

    def test_other_coach_cannot_touch_meal_items(self, make_meal_template, make_food, other_coach):
        meal = make_meal_template('Porridge', [(make_food('Oats'), 60)])
        with pytest.raises(PermissionDenied):
            append_item(MEAL_TEMPLATE_ITEMS, other_coach, {'meal_id': meal.id},
                        food_id=meal.items[0].food_id, quantity=1)
