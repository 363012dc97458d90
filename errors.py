"""
Error taxonomy for the habit tracker.

Every domain failure derives from HabitTrackerError and knows the HTTP status
it maps to, so the API layer can render it without a lookup table.
"""


class HabitTrackerError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.__class__.__name__


class Unauthenticated(HabitTrackerError):
    """Not authenticated"""
    status_code = 401


class ValidationError(HabitTrackerError):
    """Invalid input"""
    status_code = 400


class InvalidDate(ValidationError):
    """Invalid date format. Use YYYY-MM-DD"""


class FutureDate(HabitTrackerError):
    """Cannot track a date in the future"""
    status_code = 400


class NotFound(HabitTrackerError):
    """Habit not found"""
    status_code = 404


class StorageError(HabitTrackerError):
    """Internal server error"""
    status_code = 500
