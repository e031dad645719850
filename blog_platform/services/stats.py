"""
Read-only aggregates for the admin dashboard and per-user statistics.

Everything is computed from current rows on each call; there are no stored
counters to keep in sync.
"""
from django.contrib.auth import get_user_model
from django.db.models import Count, Sum

from ..conf import blog_settings
from ..models import Blog, BlogLike, Comment, Follow
from ..pagination import paginate
from ..permissions import require_admin, require_authenticated
from .blogs import blog_queryset, search_filter


def status_counts():
    counts = {value: 0 for value, _label in Blog.STATUS_CHOICES}
    for row in Blog.objects.values("status").annotate(total=Count("id")).order_by():
        counts[row["status"]] = row["total"]
    return counts


def top_authors(limit=None):
    """
    Authors ranked by number of published blogs, with their summed views.

    Returns a list of dicts: author, blog_count, total_views.
    """
    limit = limit or blog_settings.TOP_AUTHORS_LIMIT
    rows = list(
        Blog.objects.filter(status=Blog.PUBLISHED)
        .values("author")
        .annotate(blog_count=Count("id"), total_views=Sum("views"))
        .order_by("-blog_count", "-total_views", "author")[:limit]
    )
    User = get_user_model()
    authors = User.objects.select_related("profile").in_bulk([row["author"] for row in rows])
    return [
        {
            "author": authors[row["author"]],
            "blog_count": row["blog_count"],
            "total_views": row["total_views"] or 0,
        }
        for row in rows
    ]


def dashboard(admin):
    """Site-wide totals and recent activity for administrators."""
    require_admin(admin)
    User = get_user_model()
    recent_limit = blog_settings.DASHBOARD_RECENT_LIMIT
    by_status = status_counts()

    return {
        "stats": {
            "total_users": User.objects.count(),
            "total_blogs": Blog.objects.count(),
            "total_comments": Comment.objects.count(),
            "published_blogs": by_status[Blog.PUBLISHED],
            "draft_blogs": by_status[Blog.DRAFT],
            "archived_blogs": by_status[Blog.ARCHIVED],
        },
        "recent_users": list(
            User.objects.select_related("profile").order_by("-date_joined", "-id")[:recent_limit]
        ),
        "recent_blogs": list(blog_queryset().order_by("-created_at", "-id")[:recent_limit]),
        "top_authors": top_authors(),
    }


def user_stats(user):
    """Totals across the caller's own blogs and follower graph."""
    require_authenticated(user)
    blogs = Blog.objects.filter(author=user)
    return {
        "published_blogs": blogs.filter(status=Blog.PUBLISHED).count(),
        "draft_blogs": blogs.filter(status=Blog.DRAFT).count(),
        "total_views": blogs.aggregate(total=Sum("views"))["total"] or 0,
        "total_likes": BlogLike.objects.filter(blog__author=user).count(),
        "followers": Follow.objects.filter(followed=user).count(),
        "following": Follow.objects.filter(follower=user).count(),
    }


def list_all_blogs(admin, status=None, search=None, page=1, page_size=None):
    """Admin listing over blogs of every status, newest first."""
    require_admin(admin)
    queryset = blog_queryset()
    if status:
        queryset = queryset.filter(status=status)
    if search and search.strip():
        queryset = queryset.filter(search_filter(search.strip(), ["title", "content"]))
    return paginate(queryset.order_by("-created_at", "-id"), page, page_size)
