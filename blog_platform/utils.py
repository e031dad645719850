"""
Helpers shared by the service modules.
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from django.contrib.auth import get_user_model

from .conf import blog_settings
from .exceptions import NotFound, ValidationError


def clean_instance(instance, exclude=None, extra_errors=None):
    """
    Run Django model validation and raise the platform ValidationError.

    ``extra_errors`` are field errors found outside model validation; they are
    reported together with the model's own.
    """
    errors = list(extra_errors or [])
    try:
        instance.full_clean(exclude=exclude)
    except DjangoValidationError as e:
        errors.extend(ValidationError.from_django(e).errors)
    if errors:
        raise ValidationError(errors)


def reject_unknown_fields(fields, allowed):
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValidationError(
            [{"field": name, "message": "Unknown field"} for name in unknown]
        )


def get_or_not_found(queryset, message, **lookup):
    """``queryset.get(**lookup)`` raising NotFound for missing rows or malformed ids."""
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, TypeError):
        raise NotFound(message) from None


def get_user(user_id):
    User = get_user_model()
    return get_or_not_found(User.objects.all(), "User not found", pk=user_id)


def parse_id(field, value):
    """Accept a model instance or something int-like; return the integer id."""
    value = getattr(value, "pk", value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError.for_field(field, f"Invalid {field}") from None


def clean_text(field, value):
    """Strip a string input; ``None`` becomes "". Anything else is a field error."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError.for_field(field, f"{field} must be a string")
    return value.strip()


def normalize_tags(tags):
    """
    Accept a list of strings or a comma-separated string; return a clean list.

    Order is preserved; blank entries and repeats are dropped.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    if not isinstance(tags, (list, tuple)):
        raise ValidationError.for_field("tags", "Tags must be a list or a comma-separated string")

    names = []
    for tag in tags:
        name = clean_text("tags", tag)
        if len(name) > blog_settings.TAG_MAX_LENGTH:
            raise ValidationError.for_field(
                "tags", f"Tags cannot exceed {blog_settings.TAG_MAX_LENGTH} characters"
            )
        if name and name not in names:
            names.append(name)
    return names
