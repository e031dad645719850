"""
Blog lifecycle: create, update, delete, like, view counting and listings.
"""
import logging
from collections import namedtuple
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from ..conf import blog_settings
from ..exceptions import Conflict, ValidationError
from ..models import Blog, BlogLike, Comment
from ..models.posts import derive_excerpt
from ..pagination import paginate
from ..permissions import require_admin, require_authenticated, require_owner_or_admin
from ..storage import upload_image
from ..utils import (
    clean_instance,
    clean_text,
    get_or_not_found,
    get_user,
    normalize_tags,
    parse_id,
    reject_unknown_fields,
)

logger = logging.getLogger(__name__)

LikeResult = namedtuple("LikeResult", ["liked", "like_count"])

UPDATABLE_FIELDS = ["title", "content", "excerpt", "category", "tags", "status"]
SORT_MODES = ["newest", "oldest", "popular", "trending"]
SLUG_SAVE_ATTEMPTS = 3

# Columns an update may touch; views is only ever changed by F() increments
EDITABLE_COLUMNS = [
    "title",
    "slug",
    "content",
    "excerpt",
    "featured_image",
    "category",
    "status",
    "is_published",
    "published_at",
    "read_time",
    "updated_at",
]


def blog_queryset():
    """Blogs with author data joined and like/comment counts annotated."""
    return (
        Blog.objects.select_related("author", "author__profile")
        .prefetch_related("tags")
        .annotate(
            like_count=Count("likes", distinct=True),
            comment_count=Count("comments", distinct=True),
        )
    )


def get_blog(blog_id):
    return get_or_not_found(blog_queryset(), "Blog not found", pk=blog_id)


def _excerpt_errors(excerpt):
    if excerpt and len(excerpt) > blog_settings.EXCERPT_MAX_LENGTH:
        return [{
            "field": "excerpt",
            "message": f"Excerpt cannot exceed {blog_settings.EXCERPT_MAX_LENGTH} characters",
        }]
    return []


def _save_blog(blog, update_fields=None):
    """
    Save, regenerating the slug if a concurrent writer claimed it first.
    """
    for attempt in range(SLUG_SAVE_ATTEMPTS):
        try:
            with transaction.atomic():
                blog.save(update_fields=update_fields)
            return
        except IntegrityError:
            if not Blog.objects.filter(slug=blog.slug).exclude(pk=blog.pk).exists():
                raise
            logger.warning(f"Slug collision on {blog.slug}, attempt {attempt + 1}")
            blog.slug = ""
    raise Conflict("A blog with this slug already exists")


def create_blog(author, title, content, category, tags=None, excerpt=None,
                status=Blog.DRAFT, image=None):
    """
    Create a blog owned by ``author``.

    The excerpt is derived from the content when not supplied. Creating
    directly in ``published`` status stamps ``published_at``.
    """
    require_authenticated(author)
    excerpt = clean_text("excerpt", excerpt)
    tag_names = normalize_tags(tags)
    blog = Blog(
        author=author,
        title=clean_text("title", title),
        content=clean_text("content", content),
        excerpt=excerpt,
        category=clean_text("category", category),
        status=clean_text("status", status) or Blog.DRAFT,
    )
    clean_instance(
        blog,
        exclude=["slug", "excerpt", "featured_image"],
        extra_errors=_excerpt_errors(excerpt),
    )

    if image is not None:
        blog.featured_image = upload_image(
            image, blog_settings.BLOG_IMAGE_UPLOAD_PATH, field="featured_image"
        )

    with transaction.atomic():
        _save_blog(blog)
        blog.set_tags(tag_names)
    logger.info(f"Blog {blog.pk} created by user {author.pk} as {blog.status}")
    return get_blog(blog.pk)


def update_blog(blog_id, user, fields, image=None):
    """
    Partially update a blog. Only the author or an admin may do this.

    The slug is regenerated only when the title changes. A derived excerpt
    follows content changes; a hand-written one is kept. Only the editable
    columns are written, so views counted meanwhile are never overwritten.
    """
    blog = get_blog(blog_id)
    require_owner_or_admin(blog, user, "update this blog")
    reject_unknown_fields(fields, UPDATABLE_FIELDS)

    was_published = blog.status == Blog.PUBLISHED

    if "title" in fields:
        title = clean_text("title", fields["title"])
        if title != blog.title:
            blog.title = title
            blog.slug = ""

    excerpt_errors = []
    if "content" in fields:
        content = clean_text("content", fields["content"])
        if content != blog.content:
            if blog.excerpt == derive_excerpt(blog.content):
                blog.excerpt = ""
            blog.content = content

    if "excerpt" in fields:
        blog.excerpt = clean_text("excerpt", fields["excerpt"])
        excerpt_errors = _excerpt_errors(blog.excerpt)

    if "category" in fields:
        blog.category = clean_text("category", fields["category"])
    if "status" in fields:
        blog.status = clean_text("status", fields["status"])
    tag_names = normalize_tags(fields["tags"]) if "tags" in fields else None

    clean_instance(
        blog,
        exclude=["slug", "excerpt", "featured_image"],
        extra_errors=excerpt_errors,
    )

    if image is not None:
        blog.featured_image = upload_image(
            image, blog_settings.BLOG_IMAGE_UPLOAD_PATH, field="featured_image"
        )

    with transaction.atomic():
        _save_blog(blog, update_fields=EDITABLE_COLUMNS)
        if tag_names is not None:
            blog.set_tags(tag_names)
    if blog.status == Blog.PUBLISHED and not was_published:
        logger.info(f"Blog {blog.pk} published by user {user.pk}")
    return get_blog(blog.pk)


def delete_blog(blog_id, user):
    """
    Delete a blog and every comment on it.

    Returns the number of comments removed.
    """
    blog = get_blog(blog_id)
    require_owner_or_admin(blog, user, "delete this blog")

    with transaction.atomic():
        comment_count = Comment.objects.filter(blog=blog).count()
        Comment.objects.filter(blog=blog).delete()
        blog.delete()

    logger.info(f"Blog {blog_id} deleted by user {user.pk} with {comment_count} comments")
    return comment_count


def toggle_blog_like(blog_id, user):
    """Like the blog if ``user`` hasn't, otherwise remove the like."""
    require_authenticated(user)
    blog = get_blog(blog_id)
    liked, like_count = BlogLike.toggle(blog, user)
    return LikeResult(liked, like_count)


def record_view(blog):
    """Count one read of ``blog``. Every call counts; there is no de-duplication."""
    blog.increment_views()
    return blog.views


def get_published_blog(slug):
    """
    Fetch a published blog by slug for reading, counting the view.
    """
    blog = get_or_not_found(
        blog_queryset().filter(status=Blog.PUBLISHED),
        "Blog not found",
        slug=slug,
    )
    record_view(blog)
    return blog


def get_blog_for_edit(blog_id, user):
    """Any-status fetch for the author or an admin."""
    blog = get_blog(blog_id)
    require_owner_or_admin(blog, user, "view this blog")
    return blog


def apply_sort(queryset, sort):
    if sort == "oldest":
        return queryset.order_by("published_at", "id")
    if sort == "popular":
        return queryset.order_by("-views", "-like_count", "-published_at", "-id")
    if sort == "trending":
        window_start = timezone.now() - timedelta(days=blog_settings.TRENDING_WINDOW_DAYS)
        return queryset.filter(published_at__gte=window_start).order_by(
            "-views", "-like_count", "-id"
        )
    return queryset.order_by("-published_at", "-id")


def search_filter(search, fields):
    query = Q()
    for field in fields:
        query |= Q(**{f"{field}__icontains": search})
    return query


def list_blogs(category=None, search=None, author=None, sort="newest", page=1, page_size=None):
    """
    Public listing of published blogs.

    Args:
        category: one of the categories, or "all"/None for every category
        search: case-insensitive substring matched against title, content and tags
        author: user or user id
        sort: newest, oldest, popular or trending
    """
    sort = sort or "newest"
    if sort not in SORT_MODES:
        raise ValidationError.for_field("sort", "Invalid sort option")

    queryset = blog_queryset().filter(status=Blog.PUBLISHED)
    if category and category != "all":
        queryset = queryset.filter(category=category)
    if author:
        queryset = queryset.filter(author_id=parse_id("author", author))
    if search and search.strip():
        term = search.strip()
        tagged = Blog.objects.filter(tags__name__icontains=term).values("pk")
        queryset = queryset.filter(search_filter(term, ["title", "content"]) | Q(pk__in=tagged))

    return paginate(apply_sort(queryset, sort), page, page_size)


def list_user_blogs(author_id, page=1, page_size=None):
    """Published blogs of one author, newest first."""
    author = get_user(author_id)
    queryset = blog_queryset().filter(author=author, status=Blog.PUBLISHED)
    return author, paginate(apply_sort(queryset, "newest"), page, page_size)


def list_drafts(user, page=1, page_size=None):
    """The caller's own drafts, most recently edited first."""
    require_authenticated(user)
    queryset = blog_queryset().filter(author=user, status=Blog.DRAFT).order_by("-updated_at", "-id")
    return paginate(queryset, page, page_size)


def set_blog_status(blog_id, admin, status):
    """Admin moderation of a blog's status."""
    require_admin(admin)
    valid = [value for value, _label in Blog.STATUS_CHOICES]
    if status not in valid:
        raise ValidationError.for_field("status", "Invalid status")

    blog = get_blog(blog_id)
    blog.set_status(status)
    logger.info(f"Blog {blog.pk} set to {status} by admin {admin.pk}")
    return blog
