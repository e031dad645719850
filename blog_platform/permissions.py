"""
Caller entitlement checks.

The caller is whatever Django's auth layer put on ``request.user``; the role
comes from the caller's Profile. Superusers are always treated as admins.
"""
from .exceptions import Forbidden
from .models import Profile


def is_authenticated(user):
    return user is not None and user.is_authenticated


def is_admin(user):
    if not is_authenticated(user):
        return False
    if user.is_superuser:
        return True
    return Profile.for_user(user).is_admin


def require_authenticated(user):
    if not is_authenticated(user):
        raise Forbidden("Authentication required")


def require_admin(user):
    if not is_admin(user):
        raise Forbidden("Admin access required")


def require_owner_or_admin(obj, user, action):
    """Raise Forbidden unless ``user`` owns ``obj`` or is an admin."""
    require_authenticated(user)
    if not (obj.is_owned_by(user) or is_admin(user)):
        raise Forbidden(f"Not authorized to {action}")
