"""Initial coaching schema

Revision ID: 3b7e2c91d4a0
Revises:
Create Date: 2026-10-18 09:12:41.508213

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b7e2c91d4a0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('profile',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(length=200), nullable=False),
    sa.Column('full_name', sa.String(length=200), nullable=True),
    sa.Column('role', sa.String(length=20), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('profile', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_profile_email'), ['email'], unique=True)
        batch_op.create_index(batch_op.f('ix_profile_coach_id'), ['coach_id'], unique=False)

    op.create_table('exercise',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('body_part', sa.String(length=50), nullable=True),
    sa.Column('machine_type', sa.String(length=50), nullable=True),
    sa.Column('exercise_type', sa.String(length=50), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('exercise', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_exercise_coach_id'), ['coach_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_exercise_exercise_type'), ['exercise_type'], unique=False)

    op.create_table('workout_template',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('workout_template', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_workout_template_coach_id'), ['coach_id'], unique=False)

    op.create_table('workout_template_item',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('template_id', sa.Integer(), nullable=False),
    sa.Column('exercise_id', sa.Integer(), nullable=False),
    sa.Column('alternative_exercise_id', sa.Integer(), nullable=True),
    sa.Column('superset_exercise_id', sa.Integer(), nullable=True),
    sa.Column('item_order', sa.Integer(), nullable=False),
    sa.Column('sets', sa.Integer(), nullable=False),
    sa.Column('set_details', sa.JSON(), nullable=False),
    sa.Column('alt_set_details', sa.JSON(), nullable=True),
    sa.Column('superset_set_details', sa.JSON(), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.ForeignKeyConstraint(['template_id'], ['workout_template.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['exercise_id'], ['exercise.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['alternative_exercise_id'], ['exercise.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['superset_exercise_id'], ['exercise.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('workout_template_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_workout_template_item_template_id'), ['template_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_workout_template_item_exercise_id'), ['exercise_id'], unique=False)

    op.create_table('food',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('fdc_id', sa.Integer(), nullable=True),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('brand_owner', sa.String(length=200), nullable=True),
    sa.Column('serving_size_qty', sa.Float(), nullable=False),
    sa.Column('serving_size_unit', sa.String(length=50), nullable=False),
    sa.Column('calories', sa.Float(), nullable=False),
    sa.Column('protein_g', sa.Float(), nullable=False),
    sa.Column('carbs_g', sa.Float(), nullable=False),
    sa.Column('fat_g', sa.Float(), nullable=False),
    sa.Column('fiber_g', sa.Float(), nullable=True),
    sa.Column('sugar_g', sa.Float(), nullable=True),
    sa.Column('sodium_mg', sa.Float(), nullable=True),
    sa.Column('source', sa.String(length=20), nullable=True),
    sa.Column('full_nutrients', sa.JSON(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('coach_id', 'fdc_id', name='uq_food_coach_fdc')
    )
    with op.batch_alter_table('food', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_food_coach_id'), ['coach_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_food_fdc_id'), ['fdc_id'], unique=False)

    op.create_table('nutrition_program_template',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('category', sa.String(length=100), nullable=True),
    sa.Column('calorie_target_type', sa.String(length=20), nullable=True),
    sa.Column('min_calories', sa.Float(), nullable=True),
    sa.Column('max_calories', sa.Float(), nullable=True),
    sa.Column('min_protein_grams', sa.Float(), nullable=True),
    sa.Column('max_protein_grams', sa.Float(), nullable=True),
    sa.Column('min_carb_grams', sa.Float(), nullable=True),
    sa.Column('max_carb_grams', sa.Float(), nullable=True),
    sa.Column('min_fat_grams', sa.Float(), nullable=True),
    sa.Column('max_fat_grams', sa.Float(), nullable=True),
    sa.Column('min_sugar_grams', sa.Float(), nullable=True),
    sa.Column('max_sugar_grams', sa.Float(), nullable=True),
    sa.Column('target_meals_per_day', sa.Float(), nullable=True),
    sa.Column('duration_value', sa.Float(), nullable=True),
    sa.Column('duration_unit', sa.String(length=10), nullable=True),
    sa.Column('supplements', sa.JSON(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('nutrition_program_template', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_nutrition_program_template_coach_id'), ['coach_id'], unique=False)

    op.create_table('nutrition_program_meal',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('program_template_id', sa.Integer(), nullable=False),
    sa.Column('day_number', sa.Integer(), nullable=False),
    sa.Column('meal_name', sa.String(length=100), nullable=False),
    sa.Column('meal_order', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['program_template_id'], ['nutrition_program_template.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('nutrition_program_meal', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_nutrition_program_meal_program_template_id'), ['program_template_id'], unique=False)

    op.create_table('nutrition_program_meal_item',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('meal_id', sa.Integer(), nullable=False),
    sa.Column('food_id', sa.Integer(), nullable=False),
    sa.Column('quantity', sa.Float(), nullable=False),
    sa.Column('unit', sa.String(length=50), nullable=False),
    sa.Column('item_order', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['meal_id'], ['nutrition_program_meal.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['food_id'], ['food.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('nutrition_program_meal_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_nutrition_program_meal_item_meal_id'), ['meal_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_nutrition_program_meal_item_food_id'), ['food_id'], unique=False)

    op.create_table('meal_template',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('coach_id', 'name', name='uq_meal_template_coach_name')
    )
    with op.batch_alter_table('meal_template', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_meal_template_coach_id'), ['coach_id'], unique=False)

    op.create_table('meal_item',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('meal_id', sa.Integer(), nullable=False),
    sa.Column('food_id', sa.Integer(), nullable=False),
    sa.Column('quantity', sa.Float(), nullable=False),
    sa.Column('sort_order', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['meal_id'], ['meal_template.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['food_id'], ['food.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('meal_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_meal_item_meal_id'), ['meal_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_meal_item_food_id'), ['food_id'], unique=False)


def downgrade():
    op.drop_table('meal_item')
    op.drop_table('meal_template')
    op.drop_table('nutrition_program_meal_item')
    op.drop_table('nutrition_program_meal')
    op.drop_table('nutrition_program_template')
    op.drop_table('food')
    op.drop_table('workout_template_item')
    op.drop_table('workout_template')
    op.drop_table('exercise')
    op.drop_table('profile')
