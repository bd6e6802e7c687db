"""Domain exceptions."""


class FormflowError(Exception):
    """Base class for formflow errors."""


class TemplateSyntaxError(FormflowError):
    """Raised when a {{ }} template expression cannot be parsed."""


class UnknownJobTypeError(ValueError):
    """Raised when no handler is registered for a job type."""
