"""
Nutrient Constants

FoodData Central nutrient ids used when shaping imported foods, and the
manual-entry fields stored in a food's full_nutrients document.
"""

# FoodData Central nutrient ids
USDA_NUTRIENT_IDS = {
    'calories': 1008,   # Energy (kcal)
    'protein_g': 1003,  # Protein
    'carbs_g': 1005,    # Carbohydrate, by difference
    'fat_g': 1004,      # Total lipid (fat)
    'fiber_g': 1079,    # Fiber, total dietary
    'sugar_g': 2000,    # Sugars, total including NLEA
    'sodium_mg': 1093,  # Sodium
}

# Defaults when a FoodData Central record has no serving information
USDA_DEFAULT_SERVING_QTY = 100
USDA_DEFAULT_SERVING_UNIT = 'g'

# Manual food form field -> full_nutrients key
MANUAL_NUTRIENT_FIELDS = {
    'calories': 'calories',
    'total_fat_g': 'totalFat',
    'saturated_fat_g': 'saturatedFat',
    'trans_fat_g': 'transFat',
    'cholesterol_mg': 'cholesterol',
    'sodium_mg': 'sodium',
    'total_carbohydrate_g': 'totalCarbohydrate',
    'dietary_fiber_g': 'dietaryFiber',
    'total_sugars_g': 'totalSugars',
    'added_sugars_g': 'addedSugars',
    'protein_g': 'protein',
    'vitamin_d_mcg': 'vitaminD',
    'calcium_mg': 'calcium',
    'iron_mg': 'iron',
    'potassium_mg': 'potassium',
}

# Manual food fields that must be present
MANUAL_REQUIRED_NUTRIENTS = ('calories', 'protein_g', 'total_carbohydrate_g', 'total_fat_g')
