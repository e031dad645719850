"""
Profile and Follow models for django-blog-platform.

Identity fields (username, email, first/last name) stay on the auth user
model; everything the platform adds lives on Profile.
"""
from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone

from ..conf import blog_settings

twitter_handle_validator = RegexValidator(
    r"^@?[A-Za-z0-9_]+$",
    message="Invalid Twitter username",
)
github_handle_validator = RegexValidator(
    r"^[A-Za-z0-9_-]+$",
    message="Invalid GitHub username",
)


class Profile(models.Model):
    """Public profile and role of a platform user."""

    ROLE_USER = "user"
    ROLE_ADMIN = "admin"
    ROLE_CHOICES = [
        (ROLE_USER, "User"),
        (ROLE_ADMIN, "Admin"),
    ]
    SOCIAL_FIELDS = ["website", "twitter", "linkedin", "github"]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_USER)
    bio = models.CharField(max_length=blog_settings.BIO_MAX_LENGTH, blank=True)
    avatar = models.CharField(max_length=500, blank=True)

    # Social links
    website = models.URLField(blank=True)
    twitter = models.CharField(max_length=50, blank=True, validators=[twitter_handle_validator])
    linkedin = models.URLField(blank=True)
    github = models.CharField(max_length=50, blank=True, validators=[github_handle_validator])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user}"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def social_links(self):
        return {name: getattr(self, name) for name in self.SOCIAL_FIELDS}

    @property
    def full_name(self):
        return f"{self.user.first_name} {self.user.last_name}".strip()

    @classmethod
    def for_user(cls, user):
        """Return the user's profile, creating it for users that predate the app."""
        try:
            return user.profile
        except cls.DoesNotExist:
            profile, _created = cls.objects.get_or_create(user=user)
            return profile


class Follow(models.Model):
    """
    Directed edge: ``follower`` follows ``followed``.

    One row serves both directions, so ``user.following`` and
    ``user.followers`` can never disagree.
    """

    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="following",
    )
    followed = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="followers",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["follower", "followed"], name="uniq_follow_edge"),
            models.CheckConstraint(condition=~Q(follower=F("followed")), name="chk_follow_not_self"),
        ]
        indexes = [
            models.Index(fields=["follower"]),
            models.Index(fields=["followed"]),
        ]

    def __str__(self):
        return f"{self.follower} follows {self.followed}"

    @classmethod
    def toggle(cls, follower, followed):
        """
        Follow ``followed`` if not already following, otherwise unfollow.

        Returns (is_following, follower_count).
        """
        with transaction.atomic():
            type(followed)._default_manager.select_for_update().get(pk=followed.pk)
            existing = cls.objects.filter(follower=follower, followed=followed)
            if existing.exists():
                existing.delete()
                is_following = False
            else:
                cls.objects.create(follower=follower, followed=followed)
                is_following = True
            follower_count = cls.objects.filter(followed=followed).count()
        return is_following, follower_count
