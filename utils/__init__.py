# Utility modules for the coaching app
from .sanitizer import sanitize_text, sanitize_name
from .auth import current_user, coach_required, client_required
