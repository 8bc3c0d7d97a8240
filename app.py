import logging
from datetime import date, datetime, timedelta

from flask import Flask, request, jsonify
from flask_migrate import Migrate
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import get_config
from constants import MAX_LENGTHS
from models import (
    db,
    enable_sqlite_foreign_keys,
    Profile,
    Exercise,
    WorkoutTemplate,
    WorkoutTemplateItem,
    Food,
    NutritionProgramTemplate,
    NutritionProgramMeal,
    NutritionProgramMealItem,
    MealTemplate,
    MealItem,
    AssignedWorkout,
    AssignedNutritionProgram,
    WorkoutLog,
)
from services import (
    ok,
    CoachingError,
    StoreWriteError,
    PartialWriteError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
    OrderedItem,
    partition,
    exercise_type_lookup,
    group_sequence,
    days_by_week,
    duration_in_days,
    next_day_number,
    cache,
    cached_view,
    invalidate,
    template_items_tag,
    program_structure_tag,
    meal_template_items_tag,
    WORKOUT_ITEMS,
    PROGRAM_MEALS,
    PROGRAM_MEAL_ITEMS,
    MEAL_TEMPLATE_ITEMS,
    authorize,
    append_item,
    append_items,
    move_item,
    move_group,
    commit_order,
    remove_items,
    append_day,
)
from services.foods import manual_food_fields, usda_food_fields, food_update_fields
from services.validation import (
    parse_id,
    parse_id_list,
    parse_direction,
    parse_positive_number,
    require_text,
    optional_text,
    parse_workout_item_form,
    parse_program_form,
    parse_program_updates,
    parse_date,
    parse_workout_log_form,
    parse_workout_log_update,
)
from utils.auth import current_user, coach_required, client_required
from utils.sanitizer import sanitize_text

app = Flask(__name__)
app.config.from_object(get_config())

logging.basicConfig(level=app.config['LOG_LEVEL'],
                    format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

db.init_app(app)
migrate = Migrate(app, db)
cache.init_app(app)


# ============================================
# ERROR HANDLING
# ============================================

@app.errorhandler(CoachingError)
def handle_coaching_error(error):
    if isinstance(error, PartialWriteError):
        logger.error('Partial write: applied=%s failed=%s skipped=%s',
                     error.applied, error.failed, error.skipped)
    elif isinstance(error, StoreWriteError):
        logger.error('Store write failed: %s', error.message)
    return jsonify(error.to_result()), error.status_code


def commit(action):
    """Commit the session for a single-row write, mapping database errors."""
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('%s failed', action)
        raise StoreWriteError(f'Failed to {action}.')


def owned(model, obj_id, label):
    """Row owned by the logged-in coach, or NotFoundError / PermissionDenied."""
    row = db.session.get(model, obj_id)
    if row is None:
        raise NotFoundError(f'{label} not found.')
    user = current_user()
    if row.coach_id != user.id:
        logger.warning('Coach %s denied access to %s %s', user.id, model.__tablename__, obj_id)
        raise PermissionDenied('Permission denied.')
    return row


def request_data():
    """Form fields, or the JSON body when the request sends one."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError('Request body must be a JSON object.')
        return data
    return request.form


def request_ids(field='item_ids'):
    if request.is_json:
        return parse_id_list(request_data().get(field))
    return parse_id_list(request.form.getlist(field))


# ============================================
# ROUTES - EXERCISES
# ============================================

def _exercise_fields(data):
    return {
        'name': require_text(data.get('name'), 'Exercise name'),
        'description': optional_text(data.get('description')) or '',
        'body_part': optional_text(data.get('body_part'), MAX_LENGTHS['exercise_type']),
        'machine_type': optional_text(data.get('machine_type'), MAX_LENGTHS['exercise_type']),
        'exercise_type': optional_text(data.get('exercise_type'), MAX_LENGTHS['exercise_type']),
    }


def _exercise_in_use(exercise_ids):
    return db.session.query(WorkoutTemplateItem.id).filter(or_(
        WorkoutTemplateItem.exercise_id.in_(exercise_ids),
        WorkoutTemplateItem.alternative_exercise_id.in_(exercise_ids),
        WorkoutTemplateItem.superset_exercise_id.in_(exercise_ids),
    )).first() is not None


@app.route('/coach/exercises/add', methods=['POST'])
@coach_required
def exercise_add():
    exercise = Exercise(coach_id=current_user().id, **_exercise_fields(request_data()))
    db.session.add(exercise)
    commit('add exercise')
    return jsonify(ok('Exercise added successfully!', exercise_id=exercise.id))


@app.route('/coach/exercises/<int:id>/update', methods=['POST'])
@coach_required
def exercise_update(id):
    exercise = owned(Exercise, id, 'Exercise')
    for field, value in _exercise_fields(request_data()).items():
        setattr(exercise, field, value)
    commit('update exercise')

    # Name and type show up in (and group) every template using this exercise
    template_ids = db.session.query(WorkoutTemplateItem.template_id).filter(or_(
        WorkoutTemplateItem.exercise_id == id,
        WorkoutTemplateItem.alternative_exercise_id == id,
        WorkoutTemplateItem.superset_exercise_id == id,
    )).distinct().all()
    for (template_id,) in template_ids:
        invalidate(template_items_tag(template_id))
    return jsonify(ok('Exercise updated successfully!'))


@app.route('/coach/exercises/<int:id>/delete', methods=['POST'])
@coach_required
def exercise_delete(id):
    exercise = owned(Exercise, id, 'Exercise')
    if _exercise_in_use([id]):
        raise ValidationError('Failed to delete exercise. It is in use in a workout template.')
    db.session.delete(exercise)
    commit('delete exercise')
    return jsonify(ok('Exercise deleted successfully!'))


@app.route('/coach/exercises/delete-multiple', methods=['POST'])
@coach_required
def exercise_delete_multiple():
    ids = request_ids('exercise_ids')
    if not ids:
        raise ValidationError('No exercises selected for deletion.')
    exercises = [owned(Exercise, exercise_id, 'Exercise') for exercise_id in ids]
    if _exercise_in_use(ids):
        raise ValidationError('Failed to delete selected exercises. Some are in use in a workout template.')
    for exercise in exercises:
        db.session.delete(exercise)
    commit('delete exercises')
    count = len(exercises)
    return jsonify(ok(f'{count} exercise{"s" if count > 1 else ""} deleted successfully!'))


# ============================================
# ROUTES - WORKOUT TEMPLATES
# ============================================

def _workout_parent(template_id):
    return {'template_id': template_id}


def _check_exercises_owned(fields):
    for key in ('exercise_id', 'alternative_exercise_id', 'superset_exercise_id'):
        if fields.get(key) is not None:
            owned(Exercise, fields[key], 'Exercise')


def _serialize_workout_item(item, exercises):
    def name_of(exercise_id):
        exercise = exercises.get(exercise_id)
        return exercise.name if exercise else None

    primary = exercises.get(item.exercise_id)
    return {
        'id': item.id,
        'item_order': item.item_order,
        'exercise_id': item.exercise_id,
        'exercise_name': primary.name if primary else None,
        'exercise_type': primary.exercise_type if primary else None,
        'alternative_exercise_id': item.alternative_exercise_id,
        'alternative_exercise_name': name_of(item.alternative_exercise_id),
        'superset_exercise_id': item.superset_exercise_id,
        'superset_exercise_name': name_of(item.superset_exercise_id),
        'sets': item.sets,
        'set_details': item.set_details,
        'alt_set_details': item.alt_set_details,
        'superset_set_details': item.superset_set_details,
        'notes': item.notes,
    }


def _workout_items_view(template):
    items = (WorkoutTemplateItem.query
             .filter_by(template_id=template.id)
             .order_by(WorkoutTemplateItem.item_order, WorkoutTemplateItem.id)
             .all())
    exercise_ids = set()
    for item in items:
        exercise_ids.update(filter(None, [item.exercise_id, item.alternative_exercise_id,
                                          item.superset_exercise_id]))
    exercises = {}
    if exercise_ids:
        exercises = {e.id: e for e in Exercise.query.filter(Exercise.id.in_(exercise_ids)).all()}

    lookup = exercise_type_lookup(
        {exercise_id: exercise.exercise_type for exercise_id, exercise in exercises.items()},
        {item.id: item.exercise_id for item in items},
    )
    groups = partition([OrderedItem(item.id, item.item_order) for item in items], lookup)
    return ok(
        template={'id': template.id, 'name': template.name, 'description': template.description},
        items=[_serialize_workout_item(item, exercises) for item in items],
        groups=[{'exercise_type': key, 'item_ids': ids} for key, ids in group_sequence(groups)],
    )


@app.route('/coach/workouts/add', methods=['POST'])
@coach_required
def workout_add():
    data = request_data()
    template = WorkoutTemplate(
        coach_id=current_user().id,
        name=require_text(data.get('name'), 'Template name'),
        description=optional_text(data.get('description')),
    )
    db.session.add(template)
    commit('add workout template')
    return jsonify(ok('Workout template created.', template_id=template.id))


@app.route('/coach/workouts/<int:template_id>/update', methods=['POST'])
@coach_required
def workout_update(template_id):
    template = owned(WorkoutTemplate, template_id, 'Workout template')
    data = request_data()
    if 'name' not in data and 'description' not in data:
        raise ValidationError('No fields to update.')
    if 'name' in data:
        template.name = require_text(data.get('name'), 'Template name')
    if 'description' in data:
        template.description = optional_text(data.get('description'))
    commit('update workout template')
    invalidate(template_items_tag(template_id))
    return jsonify(ok('Template details updated.'))


@app.route('/coach/workouts/<int:template_id>/items')
@coach_required
def workout_items(template_id):
    authorize(current_user(), WORKOUT_ITEMS, _workout_parent(template_id))
    template = db.session.get(WorkoutTemplate, template_id)
    return jsonify(cached_view(template_items_tag(template_id), lambda: _workout_items_view(template)))


@app.route('/coach/workouts/<int:template_id>/items/add', methods=['POST'])
@coach_required
def workout_item_add(template_id):
    fields = parse_workout_item_form(request_data())
    _check_exercises_owned(fields)
    item = append_item(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), **fields)
    return jsonify(ok('Exercise added to workout.', item_id=item.id, item_order=item.item_order))


@app.route('/coach/workouts/<int:template_id>/items/<int:item_id>/update', methods=['POST'])
@coach_required
def workout_item_update(template_id, item_id):
    parent = _workout_parent(template_id)
    authorize(current_user(), WORKOUT_ITEMS, parent)
    item = WorkoutTemplateItem.query.filter_by(id=item_id, template_id=template_id).first()
    if item is None:
        raise NotFoundError('Item not found.')
    fields = parse_workout_item_form(request_data())
    _check_exercises_owned(fields)
    for field, value in fields.items():
        setattr(item, field, value)
    commit('update workout item')
    invalidate(template_items_tag(template_id))
    return jsonify(ok('Workout item updated.'))


@app.route('/coach/workouts/<int:template_id>/items/<int:item_id>/delete', methods=['POST'])
@coach_required
def workout_item_delete(template_id, item_id):
    remove_items(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), [item_id])
    return jsonify(ok('Item deleted.'))


@app.route('/coach/workouts/<int:template_id>/items/delete-multiple', methods=['POST'])
@coach_required
def workout_item_delete_multiple(template_id):
    deleted = remove_items(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), request_ids())
    count = len(deleted)
    return jsonify(ok(f'{count} item{"s" if count > 1 else ""} deleted.', deleted=deleted))


@app.route('/coach/workouts/<int:template_id>/items/<int:item_id>/duplicate', methods=['POST'])
@coach_required
def workout_item_duplicate(template_id, item_id):
    parent = _workout_parent(template_id)
    authorize(current_user(), WORKOUT_ITEMS, parent)
    source = WorkoutTemplateItem.query.filter_by(id=item_id, template_id=template_id).first()
    if source is None:
        raise NotFoundError('Item not found.')
    copy = append_item(
        WORKOUT_ITEMS, current_user(), parent,
        exercise_id=source.exercise_id,
        alternative_exercise_id=source.alternative_exercise_id,
        superset_exercise_id=source.superset_exercise_id,
        sets=source.sets,
        set_details=source.set_details,
        alt_set_details=source.alt_set_details,
        superset_set_details=source.superset_set_details,
        notes=source.notes,
    )
    return jsonify(ok('Item duplicated.', item_id=copy.id, item_order=copy.item_order))


@app.route('/coach/workouts/<int:template_id>/items/<int:item_id>/move', methods=['POST'])
@coach_required
def workout_item_move(template_id, item_id):
    direction = parse_direction(request_data().get('direction'))
    return jsonify(move_item(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), item_id, direction))


@app.route('/coach/workouts/<int:template_id>/groups/move', methods=['POST'])
@coach_required
def workout_group_move(template_id):
    data = request_data()
    direction = parse_direction(data.get('direction'))
    group_key = str(data.get('exercise_type') or '').strip()
    return jsonify(move_group(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), group_key, direction))


@app.route('/coach/workouts/<int:template_id>/items/order', methods=['POST'])
@coach_required
def workout_item_order(template_id):
    return jsonify(commit_order(WORKOUT_ITEMS, current_user(), _workout_parent(template_id), request_ids()))


# ============================================
# ROUTES - FOODS
# ============================================

def _food_in_use(food_id):
    in_program = db.session.query(NutritionProgramMealItem.id).filter_by(food_id=food_id).first()
    in_template = db.session.query(MealItem.id).filter_by(food_id=food_id).first()
    return in_program is not None or in_template is not None


@app.route('/coach/nutrition/foods/add', methods=['POST'])
@coach_required
def food_add():
    food = Food(coach_id=current_user().id, **manual_food_fields(request_data()))
    db.session.add(food)
    commit('add food')
    return jsonify(ok(f'Food "{food.name}" added successfully!', food_id=food.id))


@app.route('/coach/nutrition/foods/import-usda', methods=['POST'])
@coach_required
def food_import_usda():
    fields = usda_food_fields(request.get_json(silent=True))
    user = current_user()
    existing = Food.query.filter_by(coach_id=user.id, fdc_id=fields['fdc_id']).first()
    if existing is not None:
        raise ValidationError(f'"{fields["name"]}" (FDC ID: {fields["fdc_id"]}) is already in your library.')

    food = Food(coach_id=user.id, **fields)
    db.session.add(food)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError(f'"{fields["name"]}" (FDC ID: {fields["fdc_id"]}) is already in your library.')
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('USDA import of %s failed', fields['fdc_id'])
        raise StoreWriteError('Failed to import food.')
    return jsonify(ok(f'Imported "{food.name}".', food_id=food.id))


@app.route('/coach/nutrition/foods/<int:id>/update', methods=['POST'])
@coach_required
def food_update(id):
    food = owned(Food, id, 'Food')
    for field, value in food_update_fields(request_data()).items():
        setattr(food, field, value)
    commit('update food item')

    # Food names are part of the cached program and meal views
    program_ids = (db.session.query(NutritionProgramMeal.program_template_id)
                   .join(NutritionProgramMealItem, NutritionProgramMealItem.meal_id == NutritionProgramMeal.id)
                   .filter(NutritionProgramMealItem.food_id == id)
                   .distinct().all())
    for (program_id,) in program_ids:
        invalidate(program_structure_tag(program_id))
    meal_ids = db.session.query(MealItem.meal_id).filter_by(food_id=id).distinct().all()
    for (meal_id,) in meal_ids:
        invalidate(meal_template_items_tag(meal_id))
    return jsonify(ok('Food item updated successfully!'))


@app.route('/coach/nutrition/foods/<int:id>/delete', methods=['POST'])
@coach_required
def food_delete(id):
    food = owned(Food, id, 'Food')
    if _food_in_use(id):
        raise ValidationError('Cannot delete food item. It is used in a meal or meal plan.')
    db.session.delete(food)
    commit('delete food item')
    return jsonify(ok('Food item deleted successfully!'))


# ============================================
# ROUTES - NUTRITION PROGRAMS
# ============================================

def _program_meal(meal_id):
    meal = db.session.get(NutritionProgramMeal, meal_id)
    if meal is None:
        raise NotFoundError('Meal not found.')
    return meal


def _meal_parent(meal):
    return {'program_template_id': meal.program_template_id, 'day_number': meal.day_number}


def _program_meal_item(item_id):
    item = db.session.get(NutritionProgramMealItem, item_id)
    if item is None:
        raise NotFoundError('Meal item not found.')
    return item


def _item_fields(data):
    fields = {
        'food_id': parse_id(data.get('food_id'), 'food'),
        'quantity': parse_positive_number(data.get('quantity'), 'quantity'),
    }
    owned(Food, fields['food_id'], 'Food')
    return fields


def _program_structure_view(program):
    meals = (NutritionProgramMeal.query
             .filter_by(program_template_id=program.id)
             .order_by(NutritionProgramMeal.day_number, NutritionProgramMeal.meal_order,
                       NutritionProgramMeal.id)
             .all())
    meals_by_day = {}
    for meal in meals:
        meals_by_day.setdefault(meal.day_number, []).append({
            'id': meal.id,
            'meal_name': meal.meal_name,
            'meal_order': meal.meal_order,
            'items': [{
                'id': item.id,
                'food_id': item.food_id,
                'food_name': item.food.name if item.food else None,
                'quantity': item.quantity,
                'unit': item.unit,
                'item_order': item.item_order,
            } for item in sorted(meal.items, key=lambda i: (i.item_order, i.id))],
        })

    buckets = days_by_week(meals_by_day.keys(), program.duration_value, program.duration_unit)
    weeks = [{
        'week': week,
        'days': [{'day_number': day, 'meals': meals_by_day[day]} for day in days],
    } for week, days in buckets.items()]
    return ok(
        program={'id': program.id, 'name': program.name, 'supplements': program.supplements or []},
        weeks=weeks,
        total_weeks=len(weeks),
        next_day_number=next_day_number(meals_by_day.keys()),
    )


@app.route('/coach/nutrition/programs/add', methods=['POST'])
@coach_required
def program_add():
    program = NutritionProgramTemplate(coach_id=current_user().id, **parse_program_form(request_data()))
    db.session.add(program)
    commit('create nutrition program')
    return jsonify(ok('Nutrition program created.', program_id=program.id))


@app.route('/coach/nutrition/programs/<int:program_id>/update', methods=['POST'])
@coach_required
def program_update(program_id):
    program = owned(NutritionProgramTemplate, program_id, 'Program')
    for field, value in parse_program_updates(request_data(), program).items():
        setattr(program, field, value)
    commit('update program details')
    invalidate(program_structure_tag(program_id))
    return jsonify(ok('Program details updated successfully.'))


@app.route('/coach/nutrition/programs/<int:program_id>/delete', methods=['POST'])
@coach_required
def program_delete(program_id):
    program = owned(NutritionProgramTemplate, program_id, 'Program')
    db.session.delete(program)
    commit('delete nutrition program')
    invalidate(program_structure_tag(program_id))
    return jsonify(ok('Nutrition program deleted successfully.'))


@app.route('/coach/nutrition/programs/<int:program_id>/structure')
@coach_required
def program_structure(program_id):
    program = owned(NutritionProgramTemplate, program_id, 'Program')
    return jsonify(cached_view(program_structure_tag(program_id), lambda: _program_structure_view(program)))


@app.route('/coach/nutrition/programs/<int:program_id>/days/add', methods=['POST'])
@coach_required
def program_day_add(program_id):
    meal_name = require_text(request_data().get('meal_name') or 'Meal 1', 'Meal name', MAX_LENGTHS['meal_name'])
    meal = append_day(current_user(), program_id, meal_name)
    return jsonify(ok(f'Day {meal.day_number} added.', day_number=meal.day_number, meal_id=meal.id))


@app.route('/coach/nutrition/programs/<int:program_id>/meals/add', methods=['POST'])
@coach_required
def program_meal_add(program_id):
    data = request_data()
    day_number = parse_id(data.get('day_number'), 'day number')
    meal_name = require_text(data.get('meal_name'), 'Meal name', MAX_LENGTHS['meal_name'])
    parent = {'program_template_id': program_id, 'day_number': day_number}
    meal = append_item(PROGRAM_MEALS, current_user(), parent, meal_name=meal_name)
    return jsonify(ok(f'Meal "{meal_name}" added to Day {day_number}.',
                      meal_id=meal.id, meal_order=meal.meal_order))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/update', methods=['POST'])
@coach_required
def program_meal_update(meal_id):
    meal = _program_meal(meal_id)
    authorize(current_user(), PROGRAM_MEALS, _meal_parent(meal))
    meal.meal_name = require_text(request_data().get('meal_name'), 'Meal name', MAX_LENGTHS['meal_name'])
    commit('update meal')
    invalidate(program_structure_tag(meal.program_template_id))
    return jsonify(ok('Meal updated.'))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/delete', methods=['POST'])
@coach_required
def program_meal_delete(meal_id):
    meal = _program_meal(meal_id)
    remove_items(PROGRAM_MEALS, current_user(), _meal_parent(meal), [meal_id])
    return jsonify(ok('Meal deleted.'))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/move', methods=['POST'])
@coach_required
def program_meal_move(meal_id):
    direction = parse_direction(request_data().get('direction'))
    meal = _program_meal(meal_id)
    return jsonify(move_item(PROGRAM_MEALS, current_user(), _meal_parent(meal), meal_id, direction))


@app.route('/coach/nutrition/programs/<int:program_id>/days/<int:day_number>/meals/order', methods=['POST'])
@coach_required
def program_day_meal_order(program_id, day_number):
    parent = {'program_template_id': program_id, 'day_number': day_number}
    return jsonify(commit_order(PROGRAM_MEALS, current_user(), parent, request_ids('meal_ids')))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/items/add', methods=['POST'])
@coach_required
def program_meal_item_add(meal_id):
    data = request_data()
    fields = _item_fields(data)
    fields['unit'] = sanitize_text(data.get('unit'), MAX_LENGTHS['unit']) or 'serving'
    item = append_item(PROGRAM_MEAL_ITEMS, current_user(), {'meal_id': meal_id}, **fields)
    return jsonify(ok('Food added to meal.', item_id=item.id, item_order=item.item_order))


@app.route('/coach/nutrition/programs/meal-items/<int:item_id>/update', methods=['POST'])
@coach_required
def program_meal_item_update(item_id):
    item = _program_meal_item(item_id)
    authorize(current_user(), PROGRAM_MEAL_ITEMS, {'meal_id': item.meal_id})
    data = request_data()
    fields = _item_fields(data)
    fields['unit'] = sanitize_text(data.get('unit'), MAX_LENGTHS['unit']) or item.unit
    for field, value in fields.items():
        setattr(item, field, value)
    commit('update meal item')
    invalidate(program_structure_tag(item.meal.program_template_id))
    return jsonify(ok('Meal item updated.'))


@app.route('/coach/nutrition/programs/meal-items/<int:item_id>/delete', methods=['POST'])
@coach_required
def program_meal_item_delete(item_id):
    item = _program_meal_item(item_id)
    remove_items(PROGRAM_MEAL_ITEMS, current_user(), {'meal_id': item.meal_id}, [item_id])
    return jsonify(ok('Meal item deleted.'))


@app.route('/coach/nutrition/programs/meal-items/<int:item_id>/move', methods=['POST'])
@coach_required
def program_meal_item_move(item_id):
    direction = parse_direction(request_data().get('direction'))
    item = _program_meal_item(item_id)
    return jsonify(move_item(PROGRAM_MEAL_ITEMS, current_user(), {'meal_id': item.meal_id}, item_id, direction))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/items/order', methods=['POST'])
@coach_required
def program_meal_item_order(meal_id):
    return jsonify(commit_order(PROGRAM_MEAL_ITEMS, current_user(), {'meal_id': meal_id}, request_ids()))


@app.route('/coach/nutrition/programs/meals/<int:meal_id>/apply-template', methods=['POST'])
@coach_required
def program_meal_apply_template(meal_id):
    template = owned(MealTemplate, parse_id(request_data().get('meal_template_id'), 'meal template'),
                     'Meal template')
    template_items = sorted(template.items, key=lambda i: (i.sort_order, i.id))
    if not template_items:
        raise ValidationError('Meal template has no items to add.')
    payloads = [{'food_id': i.food_id, 'quantity': i.quantity} for i in template_items]
    rows = append_items(PROGRAM_MEAL_ITEMS, current_user(), {'meal_id': meal_id}, payloads)
    return jsonify(ok(f'Added {len(rows)} items from "{template.name}".', item_ids=[row.id for row in rows]))


# ============================================
# ROUTES - MEAL TEMPLATES
# ============================================

def _meal_template_items_view(meal):
    items = (MealItem.query
             .filter_by(meal_id=meal.id)
             .order_by(MealItem.sort_order, MealItem.id)
             .all())
    return ok(
        meal={'id': meal.id, 'name': meal.name, 'description': meal.description},
        items=[{
            'id': item.id,
            'food_id': item.food_id,
            'food_name': item.food.name if item.food else None,
            'quantity': item.quantity,
            'sort_order': item.sort_order,
        } for item in items],
    )


def _meal_template_item(item_id):
    item = db.session.get(MealItem, item_id)
    if item is None:
        raise NotFoundError('Meal item not found.')
    return item


@app.route('/coach/nutrition/meals/add', methods=['POST'])
@coach_required
def meal_template_add():
    data = request_data()
    user = current_user()
    name = require_text(data.get('name'), 'Meal name')
    if MealTemplate.query.filter_by(coach_id=user.id, name=name).first() is not None:
        raise ValidationError(f'A meal named "{name}" already exists.')
    meal = MealTemplate(coach_id=user.id, name=name, description=optional_text(data.get('description')))
    db.session.add(meal)
    commit('create meal')
    return jsonify(ok(f'Meal "{name}" created.', meal_id=meal.id))


@app.route('/coach/nutrition/meals/<int:meal_id>/items')
@coach_required
def meal_template_items(meal_id):
    meal = owned(MealTemplate, meal_id, 'Meal')
    return jsonify(cached_view(meal_template_items_tag(meal_id), lambda: _meal_template_items_view(meal)))


@app.route('/coach/nutrition/meals/<int:meal_id>/items/add', methods=['POST'])
@coach_required
def meal_template_item_add(meal_id):
    item = append_item(MEAL_TEMPLATE_ITEMS, current_user(), {'meal_id': meal_id}, **_item_fields(request_data()))
    return jsonify(ok('Food added to meal.', item_id=item.id, sort_order=item.sort_order))


@app.route('/coach/nutrition/meal-template-items/<int:item_id>/delete', methods=['POST'])
@coach_required
def meal_template_item_delete(item_id):
    item = _meal_template_item(item_id)
    remove_items(MEAL_TEMPLATE_ITEMS, current_user(), {'meal_id': item.meal_id}, [item_id])
    return jsonify(ok('Meal item deleted.'))


@app.route('/coach/nutrition/meal-template-items/<int:item_id>/move', methods=['POST'])
@coach_required
def meal_template_item_move(item_id):
    direction = parse_direction(request_data().get('direction'))
    item = _meal_template_item(item_id)
    return jsonify(move_item(MEAL_TEMPLATE_ITEMS, current_user(), {'meal_id': item.meal_id}, item_id, direction))


@app.route('/coach/nutrition/meals/<int:meal_id>/delete', methods=['POST'])
@coach_required
def meal_template_delete(meal_id):
    meal = owned(MealTemplate, meal_id, 'Meal')
    db.session.delete(meal)
    commit('delete meal')
    invalidate(meal_template_items_tag(meal_id))
    return jsonify(ok('Meal deleted successfully.'))


# ============================================
# ROUTES - CLIENT ASSIGNMENTS
# ============================================

def _coach_client(client_id):
    """Client profile belonging to the logged-in coach."""
    client = db.session.get(Profile, client_id)
    if client is None or client.role != 'client' or client.coach_id != current_user().id:
        raise NotFoundError('Selected client not found or does not belong to you.')
    return client


@app.route('/coach/workouts/<int:template_id>/assign', methods=['POST'])
@coach_required
def workout_assign(template_id):
    template = owned(WorkoutTemplate, template_id, 'Workout template')
    data = request_data()
    client = _coach_client(parse_id(data.get('client_id'), 'client'))
    assigned = AssignedWorkout(
        coach_id=current_user().id,
        client_id=client.id,
        workout_template_id=template.id,
        name=require_text(data.get('name') or template.name, 'Workout name'),
        notes=optional_text(data.get('notes')),
        assigned_date=parse_date(data.get('assigned_date'), 'workout date'),
    )
    db.session.add(assigned)
    commit('assign workout')
    logger.info('Coach %s assigned workout template %s to client %s for %s',
                assigned.coach_id, template.id, client.id, assigned.assigned_date)
    return jsonify(ok('Workout assigned successfully.', assigned_workout=assigned.to_dict()))


@app.route('/coach/nutrition/programs/<int:program_id>/assign', methods=['POST'])
@coach_required
def program_assign(program_id):
    program = owned(NutritionProgramTemplate, program_id, 'Program')
    data = request_data()
    client = _coach_client(parse_id(data.get('client_id'), 'client'))
    start_date = parse_date(data.get('start_date'), 'start date')

    active = AssignedNutritionProgram.query.filter_by(client_id=client.id, status='active').first()
    if active is not None:
        raise ValidationError('Client already has an active nutrition program assigned.')

    end_date = None
    days = duration_in_days(program.duration_value, program.duration_unit)
    if days:
        end_date = start_date + timedelta(days=days - 1)

    assignment = AssignedNutritionProgram(
        coach_id=current_user().id,
        client_id=client.id,
        program_template_id=program.id,
        start_date=start_date,
        end_date=end_date,
    )
    db.session.add(assignment)
    commit('assign nutrition program')
    return jsonify(ok(f'Program "{program.name}" assigned successfully.', assignment=assignment.to_dict()))


# ============================================
# ROUTES - CLIENT WORKOUTS
# ============================================

def _template_exercise_ids(template_id):
    ids = set()
    for item in WorkoutTemplateItem.query.filter_by(template_id=template_id).all():
        ids.update(filter(None, [item.exercise_id, item.alternative_exercise_id, item.superset_exercise_id]))
    return ids


def _workout_log(log_id):
    log = db.session.get(WorkoutLog, log_id)
    if log is None:
        raise NotFoundError('Workout log not found.')
    if log.client_id != current_user().id:
        logger.warning('Client %s denied access to workout log %s', current_user().id, log_id)
        raise PermissionDenied('Permission denied to update this log.')
    return log


@app.route('/client/my-workout')
@client_required
def client_workout():
    """The client's assigned workout for ?date=YYYY-MM-DD, defaulting to today."""
    raw_date = request.args.get('date')
    workout_date = parse_date(raw_date, 'date') if raw_date else date.today()
    assigned = (AssignedWorkout.query
                .filter_by(client_id=current_user().id, assigned_date=workout_date)
                .order_by(AssignedWorkout.created_at, AssignedWorkout.id)
                .first())
    if assigned is None:
        return jsonify(ok(date=workout_date.isoformat(), workout=None))

    workout = assigned.to_dict()
    workout['items'] = []
    if assigned.workout_template_id is not None:
        workout['items'] = _workout_items_view(assigned.template)['items']
    workout['logs'] = [log.to_dict() for log in assigned.logs]
    return jsonify(ok(date=workout_date.isoformat(), workout=workout))


@app.route('/client/workout-logs/add', methods=['POST'])
@client_required
def workout_log_add():
    data = request_data()
    assigned = db.session.get(AssignedWorkout, parse_id(data.get('assigned_workout_id'), 'assigned workout'))
    if assigned is None or assigned.client_id != current_user().id:
        raise NotFoundError('Assigned workout not found.')
    exercise_id = parse_id(data.get('exercise_id'), 'exercise')
    if (assigned.workout_template_id is not None
            and exercise_id not in _template_exercise_ids(assigned.workout_template_id)):
        raise ValidationError('Exercise is not part of this workout.')

    log = WorkoutLog(
        assigned_workout_id=assigned.id,
        client_id=current_user().id,
        exercise_id=exercise_id,
        set_number=parse_id(data.get('set_number'), 'set number'),
        **parse_workout_log_form(data),
    )
    db.session.add(log)
    commit('log workout set')
    return jsonify(ok('Set logged successfully.', log=log.to_dict()))


@app.route('/client/workout-logs/<int:log_id>/update', methods=['POST'])
@client_required
def workout_log_update(log_id):
    log = _workout_log(log_id)
    for field, value in parse_workout_log_update(request_data()).items():
        setattr(log, field, value)
    log.logged_at = datetime.utcnow()
    commit('update workout log')
    return jsonify(ok('Log updated successfully.', log=log.to_dict()))


def init_db():
    with app.app_context():
        enable_sqlite_foreign_keys()
        db.create_all()


if __name__ == '__main__':
    init_db()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
