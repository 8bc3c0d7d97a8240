"""
Profile Model

Contains the Profile model. A profile's role decides which routes it may
use; clients point at their coach through coach_id.
"""

from .base import db


class Profile(db.Model):
    """Coach or client account profile."""
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(200), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(200), default='')
    role = db.Column(db.String(20), nullable=False, default='client')  # 'coach' or 'client'
    coach_id = db.Column(db.Integer, db.ForeignKey('profile.id', ondelete='SET NULL'), nullable=True, index=True)

    @property
    def is_coach(self):
        return self.role == 'coach'
