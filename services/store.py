"""
Item Order Store

Database access for ordered scopes. A scope is one table plus the parent
columns that partition it (a template, a program day, a meal) and the
integer column holding each row's position.

Every write commits on its own. Nothing here spans rows in one transaction,
so multi-row reorders are applied as a sequence of independent writes by
services.reorder.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from models import (
    db,
    Exercise,
    WorkoutTemplate,
    WorkoutTemplateItem,
    NutritionProgramTemplate,
    NutritionProgramMeal,
    NutritionProgramMealItem,
    MealTemplate,
    MealItem,
)

from .cache import template_items_tag, program_structure_tag, meal_template_items_tag
from .errors import NotFoundError, ValidationError
from .ordering import OrderedItem

logger = logging.getLogger(__name__)


class ItemOrderStore:
    """Order column access for one table, always filtered by a parent mapping."""

    def __init__(self, model, order_column, parent_columns):
        self.model = model
        self.order_column = order_column
        self.parent_columns = tuple(parent_columns)

    @property
    def order_attr(self):
        return getattr(self.model, self.order_column)

    def _filters(self, parent):
        if set(parent) != set(self.parent_columns):
            raise ValidationError(f'Scope requires {", ".join(self.parent_columns)}.')
        return [getattr(self.model, column) == parent[column] for column in self.parent_columns]

    def _get_row(self, parent, item_id):
        row = self.model.query.filter(self.model.id == item_id, *self._filters(parent)).first()
        if row is None:
            raise NotFoundError('Item not found.')
        return row

    def _commit(self):
        try:
            db.session.commit()
        except SQLAlchemyError:
            logger.exception('Write to %s failed, rolling back', self.model.__tablename__)
            db.session.rollback()
            raise

    def list_by_parent(self, parent):
        """All items for a parent, in no particular order."""
        rows = db.session.query(self.model.id, self.order_attr).filter(*self._filters(parent)).all()
        return [OrderedItem(item_id, order) for item_id, order in rows]

    def get_order(self, parent, item_id):
        return getattr(self._get_row(parent, item_id), self.order_column)

    def set_order(self, parent, item_id, new_order):
        row = self._get_row(parent, item_id)
        setattr(row, self.order_column, new_order)
        self._commit()

    def insert(self, parent, order, **payload):
        self._filters(parent)
        row = self.model(**parent, **payload)
        setattr(row, self.order_column, order)
        db.session.add(row)
        self._commit()
        return row

    def delete(self, parent, item_id):
        row = self._get_row(parent, item_id)
        db.session.delete(row)
        self._commit()


class OrderScope:
    """
    An ordered collection type: its store, how to find the coach who owns a
    parent, which cache tag to invalidate, and (optionally) how to classify
    items into groups.
    """

    def __init__(self, name, store, owner_of, tag_for, group_keys=None):
        self.name = name
        self.store = store
        self.owner_of = owner_of
        self.tag_for = tag_for
        self.group_keys = group_keys

    def __repr__(self):
        return f'<OrderScope {self.name}>'


def _workout_template_owner(parent):
    template = db.session.get(WorkoutTemplate, parent['template_id'])
    return template.coach_id if template else None


def _program_owner(parent):
    program = db.session.get(NutritionProgramTemplate, parent['program_template_id'])
    return program.coach_id if program else None


def _program_meal_owner(parent):
    meal = db.session.get(NutritionProgramMeal, parent['meal_id'])
    if meal is None or meal.program is None:
        return None
    return meal.program.coach_id


def _program_meal_tag(parent):
    meal = db.session.get(NutritionProgramMeal, parent['meal_id'])
    return program_structure_tag(meal.program_template_id if meal else 'unknown')


def _meal_template_owner(parent):
    meal = db.session.get(MealTemplate, parent['meal_id'])
    return meal.coach_id if meal else None


def workout_item_group_keys(parent):
    """item id -> exercise type for every item in a template, in one query."""
    rows = (db.session.query(WorkoutTemplateItem.id, Exercise.exercise_type)
            .join(Exercise, WorkoutTemplateItem.exercise_id == Exercise.id)
            .filter(WorkoutTemplateItem.template_id == parent['template_id'])
            .all())
    return {item_id: exercise_type for item_id, exercise_type in rows}


WORKOUT_ITEMS = OrderScope(
    'workout_items',
    ItemOrderStore(WorkoutTemplateItem, 'item_order', ['template_id']),
    owner_of=_workout_template_owner,
    tag_for=lambda parent: template_items_tag(parent['template_id']),
    group_keys=workout_item_group_keys,
)

PROGRAM_MEALS = OrderScope(
    'program_meals',
    ItemOrderStore(NutritionProgramMeal, 'meal_order', ['program_template_id', 'day_number']),
    owner_of=_program_owner,
    tag_for=lambda parent: program_structure_tag(parent['program_template_id']),
)

PROGRAM_MEAL_ITEMS = OrderScope(
    'program_meal_items',
    ItemOrderStore(NutritionProgramMealItem, 'item_order', ['meal_id']),
    owner_of=_program_meal_owner,
    tag_for=_program_meal_tag,
)

MEAL_TEMPLATE_ITEMS = OrderScope(
    'meal_template_items',
    ItemOrderStore(MealItem, 'sort_order', ['meal_id']),
    owner_of=_meal_template_owner,
    tag_for=lambda parent: meal_template_items_tag(parent['meal_id']),
)


def program_day_numbers(program_id):
    """Distinct day numbers that currently have at least one meal."""
    rows = (db.session.query(NutritionProgramMeal.day_number)
            .filter(NutritionProgramMeal.program_template_id == program_id)
            .distinct()
            .all())
    return [day for (day,) in rows]
