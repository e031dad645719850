"""
Error taxonomy for django-blog-platform.

Every error raised by the service layer derives from BlogPlatformError and
carries the status code the API layer answers with.
"""


class BlogPlatformError(Exception):
    """Base class for recoverable, caller-facing errors."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {"message": self.message}


class ValidationError(BlogPlatformError):
    """
    Malformed or out-of-range input.

    Holds a list of field-level errors, each a dict with ``field`` and
    ``message`` keys.
    """

    default_message = "Validation failed"

    def __init__(self, errors=None, message=None):
        self.errors = list(errors or [])
        super().__init__(message)

    @classmethod
    def for_field(cls, field, message):
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_django(cls, exc):
        """Build from a django.core.exceptions.ValidationError."""
        errors = []
        if hasattr(exc, "error_dict"):
            for field, messages in exc.message_dict.items():
                for message in messages:
                    errors.append({"field": field, "message": message})
        else:
            for message in exc.messages:
                errors.append({"field": None, "message": message})
        return cls(errors)

    @property
    def fields(self):
        return [error["field"] for error in self.errors]

    def as_dict(self):
        return {"message": self.message, "errors": self.errors}


class InvalidInput(ValidationError):
    """Search input that is too short or otherwise unusable."""


class NotFound(BlogPlatformError):
    status_code = 404
    default_message = "Not found"


class Forbidden(BlogPlatformError):
    status_code = 403
    default_message = "Not authorized"


class InvalidOperation(BlogPlatformError):
    """Semantically nonsensical request, e.g. following yourself."""

    default_message = "Invalid operation"


class Conflict(BlogPlatformError):
    status_code = 409
    default_message = "Conflict"


class UploadError(BlogPlatformError):
    default_message = "Error uploading image"
