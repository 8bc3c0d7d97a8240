"""Client assignments and workout logs

Revision ID: 8a1f4d6c2b57
Revises: 3b7e2c91d4a0
Create Date: 2026-10-18 14:03:27.114902

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8a1f4d6c2b57'
down_revision = '3b7e2c91d4a0'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('assigned_workout',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('client_id', sa.Integer(), nullable=False),
    sa.Column('workout_template_id', sa.Integer(), nullable=True),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('assigned_date', sa.Date(), nullable=False),
    sa.Column('is_completed', sa.Boolean(), nullable=False),
    sa.Column('completed_at', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['client_id'], ['profile.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['workout_template_id'], ['workout_template.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('assigned_workout', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_assigned_workout_coach_id'), ['coach_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_assigned_workout_client_id'), ['client_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_assigned_workout_assigned_date'), ['assigned_date'], unique=False)

    op.create_table('assigned_nutrition_program',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('coach_id', sa.Integer(), nullable=False),
    sa.Column('client_id', sa.Integer(), nullable=False),
    sa.Column('program_template_id', sa.Integer(), nullable=False),
    sa.Column('start_date', sa.Date(), nullable=False),
    sa.Column('end_date', sa.Date(), nullable=True),
    sa.Column('status', sa.String(length=20), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['coach_id'], ['profile.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['client_id'], ['profile.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['program_template_id'], ['nutrition_program_template.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('assigned_nutrition_program', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_assigned_nutrition_program_coach_id'), ['coach_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_assigned_nutrition_program_client_id'), ['client_id'], unique=False)

    op.create_table('workout_log',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('assigned_workout_id', sa.Integer(), nullable=False),
    sa.Column('client_id', sa.Integer(), nullable=False),
    sa.Column('exercise_id', sa.Integer(), nullable=False),
    sa.Column('set_number', sa.Integer(), nullable=False),
    sa.Column('reps_completed', sa.Integer(), nullable=True),
    sa.Column('weight_used', sa.Float(), nullable=True),
    sa.Column('weight_unit', sa.String(length=10), nullable=True),
    sa.Column('duration_seconds', sa.Integer(), nullable=True),
    sa.Column('rest_taken_seconds', sa.Integer(), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    sa.Column('logged_at', sa.DateTime(), nullable=True),
    sa.ForeignKeyConstraint(['assigned_workout_id'], ['assigned_workout.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['client_id'], ['profile.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['exercise_id'], ['exercise.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('workout_log', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_workout_log_assigned_workout_id'), ['assigned_workout_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_workout_log_client_id'), ['client_id'], unique=False)


def downgrade():
    op.drop_table('workout_log')
    op.drop_table('assigned_nutrition_program')
    op.drop_table('assigned_workout')
