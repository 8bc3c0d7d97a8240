"""
Errors and Action Results

Every failure a request handler can report is a CoachingError. Handlers never
let these escape to the client: app.py converts them into the
{success, error, message} result shape with a matching HTTP status.
"""


def action_result(success=True, message=None, error=None, **extra):
    """Build the JSON result returned by every coach action."""
    result = {'success': success}
    if error is not None:
        result['error'] = error
    if message is not None:
        result['message'] = message
    result.update(extra)
    return result


def ok(message=None, **extra):
    """Successful action result."""
    return action_result(True, message=message, **extra)


class CoachingError(Exception):
    """Base class for errors reported back to the caller."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_result(self):
        return action_result(False, error=self.message)


class ValidationError(CoachingError):
    """Malformed or missing input. No writes were attempted."""
    status_code = 400


class PermissionDenied(CoachingError, PermissionError):
    """The principal may not touch this resource. No writes were attempted."""
    status_code = 403


class NotFoundError(CoachingError):
    """The referenced row does not exist or is outside the resolved scope."""
    status_code = 404


class StoreWriteError(CoachingError):
    """A write to the store failed before anything was applied."""
    status_code = 500

    def __init__(self, message, failed=None):
        super().__init__(message)
        self.failed = list(failed or [])

    def to_result(self):
        return action_result(False, error=self.message, failed=self.failed)


class PartialWriteError(StoreWriteError):
    """
    Some, but not all, writes of a multi-record operation were applied.

    The collection may now be inconsistent. Nothing is retried; the caller
    gets the ids that were applied, the id that failed and the ids that were
    never attempted so it can issue a corrective operation.
    """
    status_code = 409

    def __init__(self, message, applied, failed, skipped=None):
        super().__init__(message, failed=failed)
        self.applied = list(applied)
        self.skipped = list(skipped or [])

    def to_result(self):
        return action_result(False, error=self.message, applied=self.applied,
                             failed=self.failed, skipped=self.skipped)
