"""
Food Library Service

Turns manual entry forms and FoodData Central detail payloads into Food
column values. No network calls happen here: the caller supplies the
already-fetched FoodData Central document.
"""

import json

from constants import (
    USDA_NUTRIENT_IDS,
    USDA_DEFAULT_SERVING_QTY,
    USDA_DEFAULT_SERVING_UNIT,
    MANUAL_NUTRIENT_FIELDS,
    MANUAL_REQUIRED_NUTRIENTS,
    MAX_LENGTHS,
)
from utils.sanitizer import sanitize_text

from .errors import ValidationError
from .validation import parse_float_or_none, require_text


def find_nutrient(nutrients, nutrient_id):
    """
    Amount of one nutrient in a FoodData Central foodNutrients list.

    Handles both the "full" format ({nutrient: {id}, amount}) and the abridged
    search format ({nutrientId, value}).
    """
    for entry in nutrients:
        nutrient = entry.get('nutrient') or {}
        if nutrient.get('id', entry.get('nutrientId')) == nutrient_id:
            amount = entry.get('amount', entry.get('value'))
            return float(amount) if amount is not None else None
    return None


def _nutrient_unit(nutrients, nutrient_id):
    for entry in nutrients:
        nutrient = entry.get('nutrient') or {}
        if nutrient.get('id', entry.get('nutrientId')) == nutrient_id:
            return (nutrient.get('unitName') or entry.get('unitName') or '').lower()
    return ''


def usda_food_fields(details):
    """
    Map a FoodData Central food detail document onto Food columns.

    Missing macros default to 0, missing fiber/sugar/sodium stay None, and
    sodium reported in grams is converted to milligrams.
    """
    if not isinstance(details, dict):
        raise ValidationError('Invalid FoodData Central payload.')
    try:
        fdc_id = int(details.get('fdcId'))
    except (TypeError, ValueError):
        raise ValidationError('Invalid Food ID provided for import.')
    name = details.get('description')
    if not name:
        raise ValidationError('FoodData Central payload has no description.')

    nutrients = details.get('foodNutrients') or []
    fields = {
        'fdc_id': fdc_id,
        'name': sanitize_text(name, MAX_LENGTHS['name']),
        'brand_owner': sanitize_text(details.get('brandOwner') or details.get('brandName'),
                                     MAX_LENGTHS['name']) or None,
        'serving_size_qty': details.get('servingSize') or USDA_DEFAULT_SERVING_QTY,
        'serving_size_unit': details.get('servingSizeUnit') or USDA_DEFAULT_SERVING_UNIT,
        'source': 'usda',
        'full_nutrients': nutrients,
    }
    for field in ('calories', 'protein_g', 'carbs_g', 'fat_g'):
        fields[field] = find_nutrient(nutrients, USDA_NUTRIENT_IDS[field]) or 0.0
    for field in ('fiber_g', 'sugar_g'):
        fields[field] = find_nutrient(nutrients, USDA_NUTRIENT_IDS[field])

    sodium = find_nutrient(nutrients, USDA_NUTRIENT_IDS['sodium_mg'])
    if sodium is not None and _nutrient_unit(nutrients, USDA_NUTRIENT_IDS['sodium_mg']) == 'g':
        sodium *= 1000
    fields['sodium_mg'] = sodium
    return fields


def _blank(value):
    return value is None or str(value).strip() == ''


def manual_food_fields(form):
    """Validate the manual food form and build Food columns plus full_nutrients."""
    name = require_text(form.get('name'), 'Name')
    unit = sanitize_text(form.get('serving_size_unit'), MAX_LENGTHS['unit'])
    raw_serving = form.get('serving_size_qty')
    if not unit or _blank(raw_serving) or any(_blank(form.get(field)) for field in MANUAL_REQUIRED_NUTRIENTS):
        raise ValidationError('Missing required fields (Name, Serving Size, Calories, Protein, Carbs, Fat).')

    values = {field: parse_float_or_none(form.get(field)) for field in MANUAL_NUTRIENT_FIELDS}
    serving_qty = parse_float_or_none(raw_serving)
    if serving_qty is None or any(values[field] is None for field in MANUAL_REQUIRED_NUTRIENTS):
        raise ValidationError(
            'Invalid numeric value for required fields (Serving Size, Calories, Protein, Carbs, Fat).')
    if serving_qty <= 0:
        raise ValidationError('Serving size must be positive.')

    # A form posts a JSON string, a JSON body may carry the list itself
    optional = form.get('optional_nutrients') or []
    if isinstance(optional, str):
        try:
            optional = json.loads(optional)
        except json.JSONDecodeError:
            raise ValidationError('Invalid format for optional nutrients data.')
    if not isinstance(optional, list):
        raise ValidationError('Invalid format for optional nutrients data.')

    full_nutrients = {'servingSize': serving_qty, 'servingSizeUnit': unit}
    for field, key in MANUAL_NUTRIENT_FIELDS.items():
        full_nutrients[key] = values[field]
    full_nutrients['optional'] = optional

    return {
        'name': name,
        'brand_owner': sanitize_text(form.get('brand_owner'), MAX_LENGTHS['name']) or None,
        'serving_size_qty': serving_qty,
        'serving_size_unit': unit,
        'calories': values['calories'],
        'protein_g': values['protein_g'],
        'carbs_g': values['total_carbohydrate_g'],
        'fat_g': values['total_fat_g'],
        'fiber_g': values['dietary_fiber_g'],
        'sugar_g': values['total_sugars_g'],
        'sodium_mg': values['sodium_mg'],
        'source': 'manual',
        'full_nutrients': full_nutrients,
    }


def food_update_fields(form):
    """Validate the food edit form. coach_id, source and fdc_id never change."""
    name = require_text(form.get('name'), 'Name')
    unit = sanitize_text(form.get('serving_size_unit'), MAX_LENGTHS['unit'])
    required = ('serving_size_qty', 'calories', 'protein_g', 'carbs_g', 'fat_g')
    if not unit or any(_blank(form.get(field)) for field in required):
        raise ValidationError('Missing required fields.')

    values = {}
    for field in required + ('fiber_g', 'sugar_g', 'sodium_mg'):
        raw = form.get(field)
        parsed = parse_float_or_none(raw)
        if parsed is None and raw not in (None, ''):
            raise ValidationError('Numeric values cannot be negative. Serving size must be positive.')
        values[field] = parsed
    if values['serving_size_qty'] is None or values['serving_size_qty'] <= 0:
        raise ValidationError('Numeric values cannot be negative. Serving size must be positive.')

    values['name'] = name
    values['brand_owner'] = sanitize_text(form.get('brand_owner'), MAX_LENGTHS['name']) or None
    values['serving_size_unit'] = unit
    return values
