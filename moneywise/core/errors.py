# moneywise/core/errors.py
"""
Domain errors raised by the calculation core and the validation layer.

Route handlers never need to catch these: main.py registers a handler that
turns any MoneyWiseError into a 400 response.
"""


class MoneyWiseError(ValueError):
    """Base class for errors caused by invalid caller input."""


class InvalidRangeError(MoneyWiseError):
    def __init__(self, start=None, end=None, message: str = None):
        self.start = start
        self.end = end
        if message is None:
            if start is None or end is None:
                message = "Start date and end date are required"
            else:
                message = f"End date {end} is before start date {start}"
        super().__init__(message)


class InvalidGoalDateError(MoneyWiseError):
    def __init__(self, target_date, now):
        self.target_date = target_date
        self.now = now
        super().__init__("Target date must be in the future")


class CategoryTypeMismatchError(MoneyWiseError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Type '{actual}' does not match category type '{expected}'"
        )
