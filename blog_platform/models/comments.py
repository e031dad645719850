"""
Comment model for django-blog-platform.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

from ..conf import blog_settings


class Comment(models.Model):
    """
    Comment on a blog.

    Top-level comments have no parent; replies point at a top-level comment.
    Deleting a comment deletes its replies through the parent cascade.
    """

    blog = models.ForeignKey(
        "blog_platform.Blog",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blog_comments",
    )
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="replies",
    )
    content = models.CharField(max_length=blog_settings.COMMENT_MAX_LENGTH)
    is_edited = models.BooleanField(default=False)
    edited_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["blog", "-created_at"]),
            models.Index(fields=["parent"]),
        ]

    def __str__(self):
        return f"Comment by {self.author} on {self.blog}"

    @property
    def preview(self):
        """Return truncated content for admin display."""
        if len(self.content) > 100:
            return self.content[:100] + "..."
        return self.content

    @property
    def is_reply(self):
        return self.parent_id is not None

    def is_owned_by(self, user):
        return user is not None and user.is_authenticated and user.pk == self.author_id

    def edit(self, new_content):
        """Replace the content and mark the comment as edited."""
        self.content = new_content
        self.is_edited = True
        self.edited_at = timezone.now()
        self.save(update_fields=["content", "is_edited", "edited_at", "updated_at"])

    def has_liked(self, user):
        if user is None or not user.is_authenticated:
            return False
        return self.likes.filter(user=user).exists()
