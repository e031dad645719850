"""
Plain-dict representations of platform objects for JSON responses.
"""
from .models import Profile


def profile_of(user):
    return Profile.for_user(user)


def _iso(value):
    return value.isoformat() if value else None


def _count(obj, annotation, related_manager):
    """Prefer the queryset annotation; fall back to counting the relation."""
    value = getattr(obj, annotation, None)
    if value is None:
        value = related_manager.count()
    return value


def serialize_author(user):
    return {
        "id": user.pk,
        "username": user.get_username(),
        "first_name": user.first_name,
        "last_name": user.last_name,
        "avatar": profile_of(user).avatar,
    }


def serialize_user(user, include_private=False):
    """
    Public profile fields. Email and role are only included for the owner
    (or admin views) via ``include_private``.
    """
    profile = profile_of(user)
    data = serialize_author(user)
    data.update({
        "full_name": profile.full_name,
        "bio": profile.bio,
        "social_links": profile.social_links,
        "date_joined": _iso(user.date_joined),
    })
    if include_private:
        data["email"] = user.email
        data["role"] = profile.role
    return data


def serialize_blog(blog, include_content=True, has_liked=None):
    data = {
        "id": blog.pk,
        "title": blog.title,
        "slug": blog.slug,
        "excerpt": blog.excerpt,
        "featured_image": blog.featured_image,
        "author": serialize_author(blog.author),
        "category": blog.category,
        "tags": blog.tag_names,
        "status": blog.status,
        "is_published": blog.is_published,
        "published_at": _iso(blog.published_at),
        "views": blog.views,
        "read_time": blog.read_time,
        "like_count": _count(blog, "like_count", blog.likes),
        "comment_count": _count(blog, "comment_count", blog.comments),
        "created_at": _iso(blog.created_at),
        "updated_at": _iso(blog.updated_at),
    }
    if include_content:
        data["content"] = blog.content
    if has_liked is not None:
        data["has_liked"] = has_liked
    return data


def serialize_comment(comment, has_liked=None, liked_ids=None):
    """
    ``liked_ids`` marks every comment and reply the viewer has liked.
    """
    if liked_ids is not None:
        has_liked = comment.pk in liked_ids
    data = {
        "id": comment.pk,
        "content": comment.content,
        "blog": comment.blog_id,
        "parent": comment.parent_id,
        "author": serialize_author(comment.author),
        "like_count": _count(comment, "like_count", comment.likes),
        "reply_count": _count(comment, "reply_count", comment.replies),
        "is_edited": comment.is_edited,
        "edited_at": _iso(comment.edited_at),
        "created_at": _iso(comment.created_at),
    }
    if hasattr(comment, "thread_replies"):
        data["replies"] = [serialize_comment(reply, liked_ids=liked_ids) for reply in comment.thread_replies]
    if has_liked is not None:
        data["has_liked"] = has_liked
    return data


def serialize_page(result, key, serializer, **kwargs):
    """Render a PageResult as ``{key: [...], "pagination": {...}}``."""
    return {
        key: [serializer(item, **kwargs) for item in result.items],
        "pagination": result.pagination_dict(),
    }
