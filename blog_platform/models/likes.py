"""
Like join records for blogs and comments.

A like is a (target, user) pair with a timestamp. The unique constraint keeps
it at one like per user per target; ``toggle`` is the only way likes change.
"""
from django.conf import settings
from django.db import models, transaction
from django.utils import timezone


class Like(models.Model):
    """Abstract base shared by blog and comment likes."""

    # Name of the foreign key pointing at the liked object
    target_field = None

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    @classmethod
    def toggle(cls, target, user):
        """
        Flip ``user``'s like on ``target``.

        The target row is locked for the duration of the check-and-flip so two
        concurrent toggles by the same user serialize.

        Returns (liked, like_count).
        """
        lookup = {cls.target_field: target}
        with transaction.atomic():
            type(target)._default_manager.select_for_update().get(pk=target.pk)
            existing = cls.objects.filter(user=user, **lookup)
            if existing.exists():
                existing.delete()
                liked = False
            else:
                cls.objects.create(user=user, **lookup)
                liked = True
            count = cls.objects.filter(**lookup).count()
        return liked, count


class BlogLike(Like):
    target_field = "blog"

    blog = models.ForeignKey(
        "blog_platform.Blog",
        on_delete=models.CASCADE,
        related_name="likes",
    )

    class Meta(Like.Meta):
        constraints = [
            models.UniqueConstraint(fields=["blog", "user"], name="uniq_blog_like_per_user"),
        ]

    def __str__(self):
        return f"{self.user} likes {self.blog}"


class CommentLike(Like):
    target_field = "comment"

    comment = models.ForeignKey(
        "blog_platform.Comment",
        on_delete=models.CASCADE,
        related_name="likes",
    )

    class Meta(Like.Meta):
        constraints = [
            models.UniqueConstraint(fields=["comment", "user"], name="uniq_comment_like_per_user"),
        ]

    def __str__(self):
        return f"{self.user} likes comment {self.comment_id}"
