"""
Workout Models

Contains the WorkoutTemplate and WorkoutTemplateItem models. Items are
ordered within their template by item_order (1-based).
"""

from .base import db


class WorkoutTemplate(db.Model):
    """Reusable workout owned by a coach."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    items = db.relationship('WorkoutTemplateItem', backref='template', lazy=True,
                            cascade='all, delete-orphan', order_by='WorkoutTemplateItem.item_order')


class WorkoutTemplateItem(db.Model):
    """One exercise slot in a workout template, with per-set details."""
    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(db.Integer, db.ForeignKey('workout_template.id', ondelete='CASCADE'), nullable=False, index=True)
    exercise_id = db.Column(db.Integer, db.ForeignKey('exercise.id', ondelete='CASCADE'), nullable=False, index=True)
    alternative_exercise_id = db.Column(db.Integer, db.ForeignKey('exercise.id', ondelete='SET NULL'), nullable=True)
    superset_exercise_id = db.Column(db.Integer, db.ForeignKey('exercise.id', ondelete='SET NULL'), nullable=True)
    item_order = db.Column(db.Integer, nullable=False)
    sets = db.Column(db.Integer, nullable=False, default=1)
    set_details = db.Column(db.JSON, nullable=False, default=list)
    alt_set_details = db.Column(db.JSON, nullable=True)
    superset_set_details = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    exercise = db.relationship('Exercise', foreign_keys=[exercise_id])
    alternative_exercise = db.relationship('Exercise', foreign_keys=[alternative_exercise_id])
    superset_exercise = db.relationship('Exercise', foreign_keys=[superset_exercise_id])
