"""
Constants Package

Whitelists and fixed lookup tables shared by services and routes.
"""

from .exercise import DEFAULT_GROUP_KEY, SET_DETAIL_PATTERNS, SET_DETAIL_EXAMPLES
from .nutrients import (
    USDA_NUTRIENT_IDS,
    USDA_DEFAULT_SERVING_QTY,
    USDA_DEFAULT_SERVING_UNIT,
    MANUAL_NUTRIENT_FIELDS,
    MANUAL_REQUIRED_NUTRIENTS,
)
from .validation import (
    VALID_DIRECTIONS,
    DURATION_UNIT_DAYS,
    VALID_DURATION_UNITS,
    VALID_CALORIE_TARGET_TYPES,
    VALID_WEIGHT_UNITS,
    NUTRITION_TARGET_RANGES,
    MAX_LENGTHS,
)
