"""
Assignment Models

Workouts and nutrition programs a coach has assigned to one of their
clients, and the sets a client logs against an assigned workout.
"""

from datetime import datetime

from .base import db


class AssignedWorkout(db.Model):
    """A workout template scheduled for a client on one date."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    workout_template_id = db.Column(db.Integer, db.ForeignKey('workout_template.id', ondelete='SET NULL'),
                                    nullable=True)
    name = db.Column(db.String(200), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    assigned_date = db.Column(db.Date, nullable=False, index=True)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    template = db.relationship('WorkoutTemplate')
    logs = db.relationship('WorkoutLog', backref='assigned_workout', lazy=True,
                           cascade='all, delete-orphan', order_by='WorkoutLog.set_number')

    def to_dict(self):
        return {
            'id': self.id,
            'client_id': self.client_id,
            'workout_template_id': self.workout_template_id,
            'name': self.name,
            'notes': self.notes,
            'assigned_date': self.assigned_date.isoformat(),
            'is_completed': self.is_completed,
        }


class AssignedNutritionProgram(db.Model):
    """A nutrition program running for a client. One active program per client."""
    id = db.Column(db.Integer, primary_key=True)
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    program_template_id = db.Column(db.Integer, db.ForeignKey('nutrition_program_template.id', ondelete='CASCADE'),
                                    nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)  # start + duration when the program has one
    status = db.Column(db.String(20), nullable=False, default='active')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'client_id': self.client_id,
            'program_template_id': self.program_template_id,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'status': self.status,
        }


class WorkoutLog(db.Model):
    """One set a client performed for an exercise of an assigned workout."""
    id = db.Column(db.Integer, primary_key=True)
    assigned_workout_id = db.Column(db.Integer, db.ForeignKey('assigned_workout.id', ondelete='CASCADE'),
                                    nullable=False, index=True)
    client_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='CASCADE'), nullable=False, index=True)
    exercise_id = db.Column(db.Integer, db.ForeignKey('exercise.id', ondelete='CASCADE'), nullable=False)
    set_number = db.Column(db.Integer, nullable=False)
    reps_completed = db.Column(db.Integer, nullable=True)
    weight_used = db.Column(db.Float, nullable=True)
    weight_unit = db.Column(db.String(10), nullable=True, default='kg')
    duration_seconds = db.Column(db.Integer, nullable=True)
    rest_taken_seconds = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    logged_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'assigned_workout_id': self.assigned_workout_id,
            'exercise_id': self.exercise_id,
            'set_number': self.set_number,
            'reps_completed': self.reps_completed,
            'weight_used': self.weight_used,
            'weight_unit': self.weight_unit,
            'duration_seconds': self.duration_seconds,
            'rest_taken_seconds': self.rest_taken_seconds,
            'notes': self.notes,
            'logged_at': self.logged_at.isoformat() if self.logged_at else None,
        }
