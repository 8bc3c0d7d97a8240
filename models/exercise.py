"""
Exercise Model

Contains the Exercise model. exercise_type is the secondary classification
used to group workout template items.
"""

from .base import db


class Exercise(db.Model):
    """Exercise in a coach's library."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default='')
    body_part = db.Column(db.String(50), nullable=True)
    machine_type = db.Column(db.String(50), nullable=True)
    exercise_type = db.Column(db.String(50), nullable=True, index=True)  # 'Strength', 'Cardio', ...
