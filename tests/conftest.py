"""Pytest configuration and fixtures for the coaching app tests."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Select TestingConfig before app.py reads FLASK_ENV at import time
os.environ['FLASK_ENV'] = 'testing'

from app import app as flask_app  # noqa: E402
from models import (  # noqa: E402
    db,
    Profile,
    Exercise,
    WorkoutTemplate,
    WorkoutTemplateItem,
    Food,
    NutritionProgramTemplate,
    NutritionProgramMeal,
    MealTemplate,
    MealItem,
)
from services.cache import cache  # noqa: E402


@pytest.fixture(scope="function")
def app():
    """App with a fresh in-memory schema and an empty view cache per test."""
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        cache.clear()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture
def coach(app):
    profile = Profile(email='coach@example.com', full_name='Casey Coach', role='coach')
    db.session.add(profile)
    db.session.commit()
    return profile


@pytest.fixture
def other_coach(app):
    profile = Profile(email='other@example.com', full_name='Other Coach', role='coach')
    db.session.add(profile)
    db.session.commit()
    return profile


@pytest.fixture
def client_profile(app, coach):
    profile = Profile(email='client@example.com', full_name='Cam Client', role='client', coach_id=coach.id)
    db.session.add(profile)
    db.session.commit()
    return profile


def login(test_client, profile):
    with test_client.session_transaction() as sess:
        sess['user_id'] = profile.id


@pytest.fixture
def coach_client(client, coach):
    """Test client with the coach logged in."""
    login(client, coach)
    return client


@pytest.fixture
def make_exercise(coach):
    def _make(name, exercise_type=None, owner=None):
        exercise = Exercise(coach_id=(owner or coach).id, name=name, exercise_type=exercise_type)
        db.session.add(exercise)
        db.session.commit()
        return exercise
    return _make


@pytest.fixture
def make_workout(coach):
    """
    Build a workout template from (exercise, item_order) pairs.

    Orders are written as given, so tests can set up gaps and duplicates.
    """
    def _make(entries, owner=None):
        template = WorkoutTemplate(coach_id=(owner or coach).id, name='Push Day')
        db.session.add(template)
        db.session.flush()
        items = []
        for exercise, order in entries:
            item = WorkoutTemplateItem(template_id=template.id, exercise_id=exercise.id,
                                       item_order=order, sets=1, set_details=[{'reps': '10'}])
            db.session.add(item)
            items.append(item)
        db.session.commit()
        return template, items
    return _make


@pytest.fixture
def make_food(coach):
    def _make(name='Oats', owner=None):
        food = Food(coach_id=(owner or coach).id, name=name, serving_size_qty=100,
                    serving_size_unit='g', calories=389, protein_g=16.9, carbs_g=66.3, fat_g=6.9)
        db.session.add(food)
        db.session.commit()
        return food
    return _make


@pytest.fixture
def make_program(coach):
    """Program with meals given as (day_number, meal_name, meal_order) tuples."""
    def _make(meals=(), owner=None, **fields):
        program = NutritionProgramTemplate(coach_id=(owner or coach).id, name='Cut Phase', **fields)
        db.session.add(program)
        db.session.flush()
        rows = []
        for day_number, meal_name, meal_order in meals:
            meal = NutritionProgramMeal(program_template_id=program.id, day_number=day_number,
                                        meal_name=meal_name, meal_order=meal_order)
            db.session.add(meal)
            rows.append(meal)
        db.session.commit()
        return program, rows
    return _make


@pytest.fixture
def make_meal_template(coach):
    def _make(name, foods=(), owner=None):
        meal = MealTemplate(coach_id=(owner or coach).id, name=name)
        db.session.add(meal)
        db.session.flush()
        for position, (food, quantity) in enumerate(foods, start=1):
            db.session.add(MealItem(meal_id=meal.id, food_id=food.id, quantity=quantity, sort_order=position))
        db.session.commit()
        return meal
    return _make


def orders(model, order_column, **parent):
    """{id: order} for every row of a scope, read fresh from the database."""
    db.session.expire_all()
    rows = model.query.filter_by(**parent).all()
    return {row.id: getattr(row, order_column) for row in rows}
