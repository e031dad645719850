"""
Comments: create, edit, delete, like and threaded listings.
"""
import logging

from django.db import transaction
from django.db.models import Count, Prefetch, Q

from ..conf import blog_settings
from ..exceptions import Forbidden, InvalidOperation
from ..models import Blog, Comment, CommentLike
from ..pagination import paginate
from ..permissions import require_admin, require_authenticated, require_owner_or_admin
from ..utils import clean_instance, clean_text, get_or_not_found
from .blogs import LikeResult, search_filter

logger = logging.getLogger(__name__)


def comment_queryset():
    """Comments with author joined and like/reply counts annotated."""
    return Comment.objects.select_related("author", "author__profile").annotate(
        like_count=Count("likes", distinct=True),
        reply_count=Count("replies", distinct=True),
    )


def get_comment(comment_id):
    return get_or_not_found(comment_queryset(), "Comment not found", pk=comment_id)


def create_comment(user, blog_id, content, parent_id=None):
    """
    Comment on a blog, or reply to a top-level comment when ``parent_id`` is given.

    Replies to replies are rejected; threads are one level deep.
    """
    require_authenticated(user)
    blog = get_or_not_found(Blog.objects.all(), "Blog not found", pk=blog_id)

    parent = None
    if parent_id:
        parent = get_or_not_found(
            Comment.objects.filter(blog=blog),
            "Parent comment not found",
            pk=parent_id,
        )
        if parent.is_reply:
            raise InvalidOperation("Replies can only be made to top-level comments")

    comment = Comment(
        blog=blog,
        author=user,
        parent=parent,
        content=clean_text("content", content),
    )
    clean_instance(comment)
    comment.save()
    logger.info(f"Comment {comment.pk} added to blog {blog.pk} by user {user.pk}")
    return get_comment(comment.pk)


def update_comment(comment_id, user, content):
    """Edit a comment. Only its author may; admins cannot rewrite other people's words."""
    comment = get_comment(comment_id)
    if not comment.is_owned_by(user):
        raise Forbidden("Not authorized to update this comment")

    comment.content = clean_text("content", content)
    clean_instance(comment)
    comment.edit(comment.content)
    return comment


def delete_comment(comment_id, user):
    """
    Delete a comment together with its replies.

    Returns the number of comments removed.
    """
    comment = get_comment(comment_id)
    require_owner_or_admin(comment, user, "delete this comment")

    with transaction.atomic():
        thread = Comment.objects.filter(Q(pk=comment.pk) | Q(parent=comment))
        removed = thread.count()
        thread.delete()

    logger.info(f"Comment {comment_id} and {removed - 1} replies deleted by user {user.pk}")
    return removed


def toggle_comment_like(comment_id, user):
    require_authenticated(user)
    comment = get_comment(comment_id)
    liked, like_count = CommentLike.toggle(comment, user)
    return LikeResult(liked, like_count)


def list_comments(blog_id, page=1, page_size=None):
    """
    Top-level comments of a blog, newest first.

    Each comment carries its direct replies, oldest first, on ``thread_replies``.
    """
    blog = get_or_not_found(Blog.objects.all(), "Blog not found", pk=blog_id)
    replies = Prefetch(
        "replies",
        queryset=comment_queryset().order_by("created_at", "id"),
        to_attr="thread_replies",
    )
    queryset = (
        comment_queryset()
        .filter(blog=blog, parent__isnull=True)
        .prefetch_related(replies)
        .order_by("-created_at", "-id")
    )
    return paginate(queryset, page, page_size or blog_settings.COMMENTS_PER_PAGE)


def list_replies(comment_id, page=1, page_size=None):
    """Direct replies to a comment in conversational (oldest first) order."""
    parent = get_or_not_found(Comment.objects.all(), "Comment not found", pk=comment_id)
    queryset = comment_queryset().filter(parent=parent).order_by("created_at", "id")
    return paginate(queryset, page, page_size or blog_settings.REPLIES_PER_PAGE)


def list_all_comments(admin, search=None, page=1, page_size=None):
    """Admin moderation view over every comment, newest first."""
    require_admin(admin)
    queryset = comment_queryset().select_related("blog")
    if search and search.strip():
        queryset = queryset.filter(search_filter(search.strip(), ["content"]))
    return paginate(queryset.order_by("-created_at", "-id"), page, page_size)


def liked_comment_ids(user, comments):
    """Ids among ``comments`` and their loaded replies that ``user`` has liked."""
    if user is None or not user.is_authenticated:
        return set()
    ids = []
    for comment in comments:
        ids.append(comment.pk)
        ids.extend(reply.pk for reply in getattr(comment, "thread_replies", []))
    return set(
        CommentLike.objects.filter(user=user, comment_id__in=ids).values_list("comment_id", flat=True)
    )
