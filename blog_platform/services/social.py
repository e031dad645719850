"""
Social graph: follow toggling, profiles, user search and admin user management.
"""
import logging
from collections import namedtuple

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q

from ..conf import blog_settings
from ..exceptions import InvalidInput, InvalidOperation, ValidationError
from ..models import Blog, Comment, Follow, Profile
from ..pagination import paginate
from ..permissions import require_admin, require_authenticated
from ..storage import upload_image
from ..utils import clean_instance, clean_text, get_or_not_found, get_user, reject_unknown_fields

logger = logging.getLogger(__name__)

FollowResult = namedtuple("FollowResult", ["is_following", "follower_count"])

USER_FIELDS = ["first_name", "last_name"]
PROFILE_FIELDS = ["bio", "social_links"]


def user_queryset():
    User = get_user_model()
    return User.objects.select_related("profile")


def toggle_follow(follower, target_id):
    """
    Follow the target user, or unfollow if already following.

    Both sides of the relation are one Follow row, so the follower's
    following list and the target's followers list change together.
    """
    require_authenticated(follower)
    target = get_user(target_id)
    if target.pk == follower.pk:
        raise InvalidOperation("You cannot follow yourself")

    is_following, follower_count = Follow.toggle(follower, target)
    action = "followed" if is_following else "unfollowed"
    logger.info(f"User {follower.pk} {action} user {target.pk}")
    return FollowResult(is_following, follower_count)


def is_following(follower, target):
    if follower is None or not follower.is_authenticated:
        return False
    return Follow.objects.filter(follower=follower, followed=target).exists()


def followers_of(user):
    return user_queryset().filter(following__followed=user).order_by("username")


def following_of(user):
    return user_queryset().filter(followers__follower=user).order_by("username")


def _name_errors(names):
    errors = []
    for name, value in names.items():
        if not value:
            label = name.replace("_", " ").capitalize()
            errors.append({"field": name, "message": f"{label} cannot be empty"})
    return errors


def update_profile(user, fields, avatar=None):
    """
    Partially update the caller's profile.

    Only keys present in ``fields`` change. ``social_links`` is merged into
    the existing links rather than replacing them.
    """
    require_authenticated(user)
    reject_unknown_fields(fields, USER_FIELDS + PROFILE_FIELDS)
    profile = Profile.for_user(user)

    names = {name: clean_text(name, fields[name]) for name in USER_FIELDS if name in fields}
    for name, value in names.items():
        setattr(user, name, value)
    if "bio" in fields:
        profile.bio = clean_text("bio", fields["bio"])

    social_links = fields.get("social_links") or {}
    if not isinstance(social_links, dict):
        raise ValidationError.for_field("social_links", "Social links must be an object")
    reject_unknown_fields(social_links, Profile.SOCIAL_FIELDS)
    for name, value in social_links.items():
        setattr(profile, name, clean_text(name, value))

    errors = _name_errors(names)
    for instance, exclude in ((user, ["password", "username", "email"]), (profile, ["user", "avatar"])):
        try:
            clean_instance(instance, exclude=exclude)
        except ValidationError as e:
            errors.extend(e.errors)
    if errors:
        raise ValidationError(errors)

    if avatar is not None:
        profile.avatar = upload_image(avatar, blog_settings.AVATAR_UPLOAD_PATH, field="avatar")

    with transaction.atomic():
        user.save()
        profile.save()
    logger.info(f"Profile of user {user.pk} updated")
    return user


def get_profile(username, viewer=None):
    """
    Public profile by username.

    Returns a dict with the user, their followers and following, and counts.
    The email address is only included for the owner.
    """
    user = get_or_not_found(user_queryset(), "User not found", username=username)
    followers = list(followers_of(user))
    following = list(following_of(user))
    return {
        "user": user,
        "is_owner": viewer is not None and viewer.is_authenticated and viewer.pk == user.pk,
        "is_following": is_following(viewer, user),
        "followers": followers,
        "following": following,
        "follower_count": len(followers),
        "following_count": len(following),
        "blog_count": Blog.objects.filter(author=user, status=Blog.PUBLISHED).count(),
    }


def search_users(query, page=1, page_size=None):
    """Case-insensitive substring search over username and names."""
    query = (query or "").strip()
    minimum = blog_settings.USER_SEARCH_MIN_LENGTH
    if len(query) < minimum:
        raise InvalidInput.for_field("q", f"Search query must be at least {minimum} characters")

    queryset = user_queryset().filter(
        Q(username__icontains=query)
        | Q(first_name__icontains=query)
        | Q(last_name__icontains=query)
    ).order_by("username")
    return paginate(queryset, page, page_size)


def set_user_role(user_id, admin, role):
    """Change another user's role. Admins cannot change their own."""
    require_admin(admin)
    valid = [value for value, _label in Profile.ROLE_CHOICES]
    if role not in valid:
        raise ValidationError.for_field("role", 'Invalid role. Must be "user" or "admin"')

    user = get_user(user_id)
    if user.pk == admin.pk:
        raise InvalidOperation("You cannot change your own role")

    profile = Profile.for_user(user)
    profile.role = role
    profile.save(update_fields=["role", "updated_at"])
    logger.info(f"User {user.pk} role set to {role} by admin {admin.pk}")
    return user


def delete_user(user_id, admin):
    """
    Remove a user with everything they own: blogs (and the comments on
    them), comments, likes and follow edges in both directions.
    """
    require_admin(admin)
    user = get_user(user_id)
    if user.pk == admin.pk:
        raise InvalidOperation("You cannot delete your own account")

    with transaction.atomic():
        blog_count = Blog.objects.filter(author=user).count()
        Comment.objects.filter(Q(author=user) | Q(blog__author=user)).delete()
        Blog.objects.filter(author=user).delete()
        Follow.objects.filter(Q(follower=user) | Q(followed=user)).delete()
        user.delete()

    logger.info(f"User {user_id} deleted by admin {admin.pk} with {blog_count} blogs")


def list_users(admin, search=None, role=None, page=1, page_size=None):
    """Admin user list with per-user blog counts, newest accounts first."""
    require_admin(admin)
    queryset = user_queryset().annotate(blog_count=Count("blogs", distinct=True))
    if search and search.strip():
        term = search.strip()
        queryset = queryset.filter(
            Q(username__icontains=term)
            | Q(email__icontains=term)
            | Q(first_name__icontains=term)
            | Q(last_name__icontains=term)
        )
    if role:
        queryset = queryset.filter(profile__role=role)
    return paginate(queryset.order_by("-date_joined", "-id"), page, page_size)
