"""
Form Validation Service

Parsing and validation of form input for coach actions. Every function
raises ValidationError with a message suitable for showing to the coach.
"""

import json
import uuid
from datetime import datetime

from constants import (
    SET_DETAIL_PATTERNS,
    SET_DETAIL_EXAMPLES,
    VALID_DIRECTIONS,
    VALID_DURATION_UNITS,
    VALID_CALORIE_TARGET_TYPES,
    VALID_WEIGHT_UNITS,
    NUTRITION_TARGET_RANGES,
    MAX_LENGTHS,
)
from utils.sanitizer import sanitize_name, sanitize_text

from .errors import ValidationError


def safe_int(value, default=1, min_val=None, max_val=None):
    """Safely parse an integer value with optional bounds."""
    try:
        result = int(value) if value else default
        if min_val is not None:
            result = max(min_val, result)
        if max_val is not None:
            result = min(max_val, result)
        return result
    except (ValueError, TypeError):
        return default


def parse_float_or_none(value):
    """Non-negative float, or None for blank, unparseable or negative input."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == '':
            return None
    try:
        parsed = float(value)
    except (ValueError, TypeError):
        return None
    if parsed != parsed or parsed < 0:  # NaN
        return None
    return parsed


def parse_optional_number(value, label):
    """Like parse_float_or_none, but a non-blank value that fails to parse is an error."""
    parsed = parse_float_or_none(value)
    if parsed is None and value is not None and str(value).strip() != '':
        raise ValidationError(f'Invalid non-negative numeric value for {label}.')
    return parsed


def parse_positive_number(value, label):
    parsed = parse_float_or_none(value)
    if parsed is None or parsed <= 0:
        raise ValidationError(f'Invalid {label}.')
    return parsed


def parse_id(value, field='id'):
    """Positive integer id from form or URL input."""
    try:
        parsed = int(str(value).strip())
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(f'Invalid {field}.')
    if parsed <= 0:
        raise ValidationError(f'Invalid {field}.')
    return parsed


def parse_id_list(values, field='item ids'):
    """
    List of ids from a multi-value form field, or a single comma separated
    or JSON-encoded list.
    """
    if isinstance(values, str):
        values = [values]
    values = list(values or [])
    if len(values) == 1 and isinstance(values[0], str):
        raw = values[0].strip()
        if raw.startswith('['):
            try:
                values = json.loads(raw)
            except json.JSONDecodeError:
                raise ValidationError(f'Invalid {field}.')
            if not isinstance(values, list):
                raise ValidationError(f'Invalid {field}.')
        elif ',' in raw:
            values = [part for part in raw.split(',') if part.strip()]
    return [parse_id(value, field) for value in values]


def parse_direction(value):
    direction = str(value or '').strip().lower()
    if direction not in VALID_DIRECTIONS:
        raise ValidationError('Direction must be "up" or "down".')
    return direction


def require_text(value, label, max_length=None):
    """Sanitized, non-empty single-line name."""
    text = sanitize_name(value, max_length=max_length or MAX_LENGTHS['name'])
    if not text:
        raise ValidationError(f'{label} is required.')
    return text


def optional_text(value, max_length=None):
    text = sanitize_text(value, max_length=max_length or MAX_LENGTHS['description'])
    return text or None


# ============================================
# WORKOUT SET DETAILS
# ============================================

def validate_set_detail(detail):
    """Return {field: message} for every field of one set that has a bad format."""
    errors = {}
    for field, pattern in SET_DETAIL_PATTERNS.items():
        value = detail.get(field)
        if value is None:
            continue
        value = str(value).strip()
        if value and not pattern.match(value):
            errors[field] = f'Invalid format ({SET_DETAIL_EXAMPLES[field]})'
    return errors


def parse_set_details(raw, sets, label='Primary'):
    """
    Decode a JSON list of per-set details and check it has one entry per set
    and that every field matches its format.
    """
    try:
        details = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError:
        raise ValidationError(f'Invalid set details format: {label} set details are not valid JSON.')
    if not isinstance(details, list) or len(details) != sets:
        raise ValidationError(f'Invalid set details format: {label} set details count mismatch.')
    for index, detail in enumerate(details, start=1):
        if not isinstance(detail, dict):
            raise ValidationError(f'Invalid set details format: {label} set {index} is not an object.')
        errors = validate_set_detail(detail)
        if errors:
            field, message = next(iter(errors.items()))
            raise ValidationError(f'{label} set {index} {field}: {message}')
    return details


def parse_workout_item_form(form):
    """Validate the add/update workout item form. Returns column values."""
    exercise_id = form.get('exerciseId') or form.get('exercise_id')
    sets_raw = form.get('sets')
    set_details_raw = form.get('set_details')
    if not exercise_id or not sets_raw or not set_details_raw:
        raise ValidationError('Missing required fields (exercise, sets, details).')
    sets = safe_int(sets_raw, default=0)
    if sets <= 0:
        raise ValidationError('Missing required fields (exercise, sets, details).')

    alternative_id = form.get('alternativeExerciseId') or form.get('alternative_exercise_id') or None
    superset_id = form.get('supersetExerciseId') or form.get('superset_exercise_id') or None
    alt_raw = form.get('alt_set_details') or None
    superset_raw = form.get('superset_set_details') or None
    if alternative_id and not alt_raw:
        raise ValidationError('Alternative set details are required when an alternative exercise is selected.')
    if superset_id and not superset_raw:
        raise ValidationError('Superset set details are required when a superset exercise is selected.')

    return {
        'exercise_id': parse_id(exercise_id, 'exercise'),
        'alternative_exercise_id': parse_id(alternative_id, 'alternative exercise') if alternative_id else None,
        'superset_exercise_id': parse_id(superset_id, 'superset exercise') if superset_id else None,
        'sets': sets,
        'set_details': parse_set_details(set_details_raw, sets),
        'alt_set_details': parse_set_details(alt_raw, sets, 'Alternative') if alternative_id else None,
        'superset_set_details': parse_set_details(superset_raw, sets, 'Superset') if superset_id else None,
        'notes': optional_text(form.get('notes'), MAX_LENGTHS['notes']),
    }


# ============================================
# NUTRITION PROGRAM TARGETS
# ============================================

TARGET_FIELDS = [field for pair in NUTRITION_TARGET_RANGES for field in pair[:2]]


def check_target_ranges(values):
    """Every min/max pair present on both sides must satisfy min <= max."""
    for min_field, max_field, label in NUTRITION_TARGET_RANGES:
        low, high = values.get(min_field), values.get(max_field)
        if low is not None and high is not None and low > high:
            raise ValidationError(f'Min {label} cannot be greater than max {label}.')


def parse_duration(value, unit):
    """(duration_value, duration_unit); both must be set or both left empty."""
    duration_value = parse_optional_number(value, 'duration')
    duration_unit = unit if unit in VALID_DURATION_UNITS else None
    if unit and duration_unit is None:
        raise ValidationError('Invalid duration unit selected.')
    if duration_value is not None and duration_unit is None:
        raise ValidationError('Invalid duration unit selected.')
    if duration_value is None and duration_unit is not None:
        raise ValidationError('Duration value is required when duration unit is selected.')
    return duration_value, duration_unit


def parse_calorie_target_type(value):
    return value if value in VALID_CALORIE_TARGET_TYPES else None


def parse_supplements(text):
    """
    One supplement per line as "Name - Dosage [- Notes]".

    Returns a list of {id, name, dosage, notes} or None for blank input.
    """
    if not text or not text.strip():
        return None
    supplements = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split('-')]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ValidationError(
                f'Error parsing supplements: Invalid format on line {number}: "{line.strip()}". '
                'Expected "Name - Dosage [- Notes]"'
            )
        supplements.append({
            'id': str(uuid.uuid4()),
            'name': sanitize_text(parts[0], MAX_LENGTHS['name']),
            'dosage': sanitize_text(parts[1], MAX_LENGTHS['name']),
            'notes': sanitize_text(' - '.join(parts[2:]), MAX_LENGTHS['notes']) or None,
        })
    return supplements or None


def parse_program_form(form):
    """Validate the new nutrition program form. Returns column values."""
    values = {
        'name': require_text(form.get('name'), 'Program name'),
        'description': optional_text(form.get('description')),
        'category': optional_text(form.get('category'), MAX_LENGTHS['category']),
        'calorie_target_type': parse_calorie_target_type(form.get('calorie_target_type')),
    }
    for field in TARGET_FIELDS:
        values[field] = parse_optional_number(form.get(field), field.replace('_', ' '))
    values['target_meals_per_day'] = parse_optional_number(form.get('target_meals_per_day'), 'target meals per day')
    check_target_ranges(values)
    values['duration_value'], values['duration_unit'] = parse_duration(
        form.get('duration_value'), form.get('duration_unit'))
    values['supplements'] = parse_supplements(form.get('supplements'))
    return values


def parse_program_updates(form, program):
    """
    Validate a partial update of a nutrition program.

    Only fields present in the form are changed. Range checks use the stored
    value for whichever side of a pair is not being updated.
    """
    updates = {}
    if 'name' in form:
        updates['name'] = require_text(form.get('name'), 'Program name')
    if 'description' in form:
        updates['description'] = optional_text(form.get('description'))
    if 'category' in form:
        updates['category'] = optional_text(form.get('category'), MAX_LENGTHS['category'])
    if 'calorie_target_type' in form:
        updates['calorie_target_type'] = parse_calorie_target_type(form.get('calorie_target_type'))
    for field in TARGET_FIELDS + ['target_meals_per_day']:
        if field in form:
            updates[field] = parse_optional_number(form.get(field), field.replace('_', ' '))

    merged = {field: updates.get(field, getattr(program, field)) for field in TARGET_FIELDS}
    check_target_ranges(merged)

    if 'duration_value' in form or 'duration_unit' in form:
        updates['duration_value'], updates['duration_unit'] = parse_duration(
            form.get('duration_value', program.duration_value),
            form.get('duration_unit', program.duration_unit),
        )
    if 'supplements' in form:
        updates['supplements'] = parse_supplements(form.get('supplements'))

    if not updates:
        raise ValidationError('Invalid arguments for update.')
    return updates


# ============================================
# CLIENT ASSIGNMENTS AND WORKOUT LOGS
# ============================================

def parse_date(value, label='date'):
    """ISO date (YYYY-MM-DD) from form input."""
    try:
        return datetime.strptime(str(value or '').strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f'Invalid {label}. Use YYYY-MM-DD.')


def parse_optional_count(value, label):
    """Non-negative integer, None when blank."""
    if value is None or str(value).strip() == '':
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'Invalid {label}.')
    if parsed < 0:
        raise ValidationError(f'Invalid {label}.')
    return parsed


def parse_workout_log_form(form):
    """
    Values for a logged set. Reps, weight, duration and rest are all optional
    on their own; a weight needs a unit, which defaults to kg.
    """
    weight_unit = str(form.get('weight_unit') or 'kg').strip().lower()
    if weight_unit not in VALID_WEIGHT_UNITS:
        raise ValidationError('Weight unit must be "kg" or "lbs".')
    return {
        'reps_completed': parse_optional_count(form.get('reps_completed'), 'reps'),
        'weight_used': parse_optional_number(form.get('weight_used'), 'weight'),
        'weight_unit': weight_unit,
        'duration_seconds': parse_optional_count(form.get('duration_seconds'), 'duration'),
        'rest_taken_seconds': parse_optional_count(form.get('rest_taken_seconds'), 'rest'),
        'notes': optional_text(form.get('notes'), MAX_LENGTHS['notes']),
    }


def parse_workout_log_update(form):
    """Like parse_workout_log_form, but something must actually be logged."""
    values = parse_workout_log_form(form)
    if values['reps_completed'] is None and values['duration_seconds'] is None:
        raise ValidationError('Please provide reps or duration to update.')
    if values['reps_completed'] is not None and values['weight_used'] is None:
        raise ValidationError('Please provide weight and unit when updating reps.')
    return values
