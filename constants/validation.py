"""
Validation Constants

Contains whitelist values for validating user input to prevent
injection attacks and ensure data integrity.
"""

# Valid move directions for reorder requests
VALID_DIRECTIONS = {'up', 'down'}

# Valid program duration units and their length in days (months are approximate)
DURATION_UNIT_DAYS = {
    'days': 1,
    'weeks': 7,
    'months': 30,
}
VALID_DURATION_UNITS = set(DURATION_UNIT_DAYS)

# Valid calorie target types for nutrition programs
VALID_CALORIE_TARGET_TYPES = {'fixed', 'deficit'}

# Valid units for weights a client logs
VALID_WEIGHT_UNITS = {'kg', 'lbs'}

# Nutrition target pairs validated as min <= max
NUTRITION_TARGET_RANGES = [
    ('min_calories', 'max_calories', 'calories'),
    ('min_protein_grams', 'max_protein_grams', 'protein'),
    ('min_carb_grams', 'max_carb_grams', 'carbs'),
    ('min_fat_grams', 'max_fat_grams', 'fat'),
    ('min_sugar_grams', 'max_sugar_grams', 'sugar'),
]

# Maximum field lengths for security
MAX_LENGTHS = {
    'name': 200,
    'description': 2000,
    'notes': 2000,
    'category': 100,
    'meal_name': 100,
    'unit': 50,
    'exercise_type': 50,
}
