"""
Shared fixtures for django-blog-platform tests.
"""
import pytest
from django.contrib.auth import get_user_model

from blog_platform.models import Blog, Comment, Profile

User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
        first_name="Test",
        last_name="User",
    )


@pytest.fixture
def other_user(db):
    """Create a second user."""
    return User.objects.create_user(
        username="other",
        email="other@example.com",
        password="testpass123",
        first_name="Olive",
        last_name="Other",
    )


@pytest.fixture
def site_admin(db):
    """Create a user with the admin role."""
    admin = User.objects.create_user(
        username="moderator",
        email="moderator@example.com",
        password="testpass123",
    )
    Profile.objects.filter(user=admin).update(role=Profile.ROLE_ADMIN)
    return User.objects.get(pk=admin.pk)


@pytest.fixture
def make_blog(db, user):
    """Factory for blogs; defaults to a published Technology post by ``user``."""

    def _make_blog(**kwargs):
        kwargs.setdefault("author", user)
        kwargs.setdefault("title", "Test Blog")
        kwargs.setdefault("content", "This is a test blog body.")
        kwargs.setdefault("category", "Technology")
        kwargs.setdefault("status", Blog.PUBLISHED)
        tags = kwargs.pop("tags", None)
        blog = Blog.objects.create(**kwargs)
        if tags:
            blog.set_tags(tags)
        return blog

    return _make_blog


@pytest.fixture
def blog(make_blog):
    """Create a published blog."""
    return make_blog()


@pytest.fixture
def draft(make_blog):
    """Create a draft blog."""
    return make_blog(title="Draft Blog", status=Blog.DRAFT)


@pytest.fixture
def comment(db, blog, other_user):
    """Create a top-level comment by ``other_user`` on ``blog``."""
    return Comment.objects.create(blog=blog, author=other_user, content="Great post!")
