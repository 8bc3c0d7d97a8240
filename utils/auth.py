"""
Session Authentication Helpers

Resolves the logged-in profile from the Flask session. Login itself is
handled elsewhere; routes here only need to know who is calling.
"""

from functools import wraps

from flask import session

from models import db, Profile
from services.errors import PermissionDenied


def current_user():
    """Profile for session['user_id'], or None when nobody is logged in."""
    user_id = session.get('user_id')
    if user_id is None:
        return None
    return db.session.get(Profile, user_id)


def coach_required(f):
    """Reject the request unless a coach is logged in."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = current_user()
        if user is None:
            raise PermissionDenied('Authentication required.')
        if not user.is_coach:
            raise PermissionDenied('Unauthorized.')
        return f(*args, **kwargs)
    return decorated_function


def client_required(f):
    """Reject the request unless a client is logged in."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = current_user()
        if user is None:
            raise PermissionDenied('Authentication required.')
        if user.role != 'client':
            raise PermissionDenied('Unauthorized.')
        return f(*args, **kwargs)
    return decorated_function
