"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, enable_sqlite_foreign_keys

from .profile import Profile
from .exercise import Exercise
from .workout import WorkoutTemplate, WorkoutTemplateItem
from .nutrition import (
    Food,
    NutritionProgramTemplate,
    NutritionProgramMeal,
    NutritionProgramMealItem,
    MealTemplate,
    MealItem,
)
from .assignment import AssignedWorkout, AssignedNutritionProgram, WorkoutLog

__all__ = [
    'db',
    'enable_sqlite_foreign_keys',
    'Profile',
    'Exercise',
    'WorkoutTemplate',
    'WorkoutTemplateItem',
    'Food',
    'NutritionProgramTemplate',
    'NutritionProgramMeal',
    'NutritionProgramMealItem',
    'MealTemplate',
    'MealItem',
    'AssignedWorkout',
    'AssignedNutritionProgram',
    'WorkoutLog',
]
