"""Form-related enums."""

from enum import Enum


class DataRetention(str, Enum):
    """Unit of a form's data-retention window."""

    FOREVER = "forever"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class FormAvailability(str, Enum):
    """When a form accepts submissions."""

    ALWAYS = "always"
    DATE = "date"
    SUBMISSIONS = "submissions"


class UserDeletedAction(str, Enum):
    """What happens to a user's submissions when the user is deleted."""

    RETAIN = "retain"
    DELETE = "delete"


class FileUploadsAction(str, Enum):
    """What happens to uploaded files when a submission is deleted."""

    RETAIN = "retain"
    DELETE = "delete"
