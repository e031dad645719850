"""
Blog and Tag models and the slug / read-time helpers they rely on.
"""
import math

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.text import slugify

from ..conf import blog_settings


def slugify_title(title):
    """
    Return a lowercase, hyphen-separated slug containing only [a-z0-9-].

    Underscores are treated as word separators so they never survive into
    the slug and never produce doubled hyphens.
    """
    return slugify((title or "").replace("_", " "))


def build_slug(title, when=None):
    """Return ``<slugified title>-<millisecond timestamp>``."""
    when = when or timezone.now()
    suffix = str(int(when.timestamp() * 1000))
    base = slugify_title(title)[: blog_settings.SLUG_MAX_LENGTH - len(suffix) - 5].strip("-")
    return f"{base or 'blog'}-{suffix}"


def word_count(text):
    return len((text or "").split())


def compute_read_time(text):
    """Minutes needed to read ``text``; never less than one."""
    minutes = math.ceil(word_count(text) / blog_settings.WORDS_PER_MINUTE)
    return max(minutes, 1)


def derive_excerpt(content):
    """First EXCERPT_MAX_LENGTH characters of the content plus an ellipsis."""
    limit = blog_settings.EXCERPT_MAX_LENGTH
    content = (content or "").strip()
    if len(content) > limit:
        return content[:limit] + "..."
    return content


class Tag(models.Model):
    """
    Flat tag for blogs.

    Tags are non-hierarchical and shared between blogs; searching matches
    tag names one by one.
    """

    name = models.CharField(max_length=blog_settings.TAG_MAX_LENGTH, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Blog(models.Model):
    """
    Article written by a single author.

    Status moves between draft, published and archived. ``published_at`` is
    stamped the first time the blog is published and kept afterwards;
    ``is_published`` always mirrors the current status.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    STATUS_CHOICES = [
        (DRAFT, "Draft"),
        (PUBLISHED, "Published"),
        (ARCHIVED, "Archived"),
    ]

    # Content
    title = models.CharField(max_length=blog_settings.TITLE_MAX_LENGTH)
    slug = models.SlugField(max_length=blog_settings.SLUG_MAX_LENGTH, unique=True, blank=True)
    content = models.TextField()
    excerpt = models.TextField(
        blank=True,
        help_text="Manual excerpt. Derived from content if blank.",
    )
    featured_image = models.CharField(max_length=500, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogs",
    )

    # Taxonomy
    category = models.CharField(max_length=20, choices=blog_settings.CATEGORY_CHOICES)
    tags = models.ManyToManyField(Tag, related_name="blogs", blank=True)

    # Status
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=DRAFT)
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the blog was first published",
    )

    # Engagement stats
    views = models.PositiveIntegerField(default=0)
    read_time = models.PositiveIntegerField(default=1, help_text="Minutes")

    # Timestamps
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["author", "-created_at"]),
            models.Index(fields=["category", "status"]),
            models.Index(fields=["status", "-published_at"]),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self.generate_unique_slug()

        if not self.excerpt:
            self.excerpt = derive_excerpt(self.content)

        self.read_time = compute_read_time(self.content)

        # First publish stamps published_at; later transitions leave it alone
        if self.status == self.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        self.is_published = self.status == self.PUBLISHED

        super().save(*args, **kwargs)

    def generate_unique_slug(self):
        base_slug = build_slug(self.title)
        slug = base_slug
        counter = 1
        while Blog.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    def set_status(self, status):
        """Move the blog to ``status`` and persist the publish markers."""
        self.status = status
        self.save(update_fields=["status", "is_published", "published_at", "updated_at"])

    def publish(self):
        self.set_status(self.PUBLISHED)

    def archive(self):
        self.set_status(self.ARCHIVED)

    def increment_views(self):
        """Increment view count atomically."""
        Blog.objects.filter(pk=self.pk).update(views=models.F("views") + 1)
        self.views += 1

    @property
    def tag_names(self):
        return [tag.name for tag in self.tags.all()]

    def set_tags(self, names):
        """Replace the blog's tags, creating any that don't exist yet."""
        self.tags.set([Tag.objects.get_or_create(name=name)[0] for name in names])

    def is_owned_by(self, user):
        return user is not None and user.is_authenticated and user.pk == self.author_id

    def has_liked(self, user):
        if user is None or not user.is_authenticated:
            return False
        return self.likes.filter(user=user).exists()
