"""
Tests for django-blog-platform models.
"""
import re
from datetime import datetime, timezone as dt_timezone

import pytest
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from blog_platform.models import Blog, BlogLike, Comment, CommentLike, Follow, Profile, Tag
from blog_platform.models.posts import (
    build_slug,
    compute_read_time,
    derive_excerpt,
    slugify_title,
)

User = get_user_model()

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class TestSlugs:
    """Tests for slug helpers."""

    @pytest.mark.parametrize("title", [
        "Hello World",
        "  Leading and trailing  ",
        "Multiple    spaces\tand\nnewlines",
        "Punctuation! Does? it, work...",
        "snake_case_title",
        "Mixed - hyphens -- and  spaces",
        "Café déjà vu",
        "C++ & Python 3.12",
    ])
    def test_slugify_title_shape(self, title):
        slug = slugify_title(title)
        assert slug == slug.lower()
        assert SLUG_PATTERN.match(slug)
        assert "--" not in slug

    def test_slugify_title_words(self):
        assert slugify_title("Hello World") == "hello-world"
        assert slugify_title("snake_case title") == "snake-case-title"

    def test_build_slug_appends_millisecond_timestamp(self):
        when = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=dt_timezone.utc)
        slug = build_slug("My Post", when)
        assert slug == f"my-post-{int(when.timestamp() * 1000)}"

    def test_build_slug_for_symbol_only_title(self):
        when = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        assert build_slug("!!!", when).startswith("blog-")


class TestReadTimeAndExcerpt:
    def test_read_time_400_words_is_two_minutes(self):
        assert compute_read_time("word " * 400) == 2

    def test_read_time_rounds_up(self):
        assert compute_read_time("word " * 201) == 2
        assert compute_read_time("word " * 200) == 1

    def test_read_time_is_at_least_one(self):
        assert compute_read_time("short") == 1

    def test_derive_excerpt_truncates_long_content(self):
        excerpt = derive_excerpt("x" * 500)
        assert excerpt == "x" * 300 + "..."

    def test_derive_excerpt_keeps_short_content(self):
        assert derive_excerpt("Short body") == "Short body"


class TestBlog:
    """Tests for Blog model."""

    def test_create_blog_defaults(self, db, user):
        blog = Blog.objects.create(
            title="Hello World",
            content="My first post!",
            author=user,
            category="Technology",
        )
        assert blog.status == Blog.DRAFT
        assert not blog.is_published
        assert blog.published_at is None
        assert blog.slug.startswith("hello-world-")
        assert blog.excerpt == "My first post!"
        assert blog.read_time == 1

    def test_identical_titles_get_distinct_slugs(self, make_blog):
        first = make_blog(title="Same Title")
        second = make_blog(title="Same Title")
        assert first.slug != second.slug

    def test_slug_kept_on_save(self, blog):
        slug = blog.slug
        blog.content = "Changed content"
        blog.save()
        assert blog.slug == slug

    def test_publish_sets_published_at(self, draft):
        draft.publish()
        draft.refresh_from_db()

        assert draft.is_published
        assert draft.published_at is not None

    def test_archive_keeps_published_at(self, draft):
        draft.publish()
        draft.refresh_from_db()
        first_published = draft.published_at

        draft.archive()
        draft.refresh_from_db()
        assert draft.status == Blog.ARCHIVED
        assert not draft.is_published
        assert draft.published_at == first_published

        draft.publish()
        draft.refresh_from_db()
        assert draft.is_published
        assert draft.published_at == first_published

    def test_increment_views(self, blog):
        blog.increment_views()
        blog.increment_views()
        blog.refresh_from_db()
        assert blog.views == 2

    def test_has_liked(self, blog, other_user):
        assert not blog.has_liked(other_user)
        BlogLike.objects.create(blog=blog, user=other_user)
        assert blog.has_liked(other_user)


class TestTag:
    def test_set_tags_shares_and_sorts(self, make_blog):
        first = make_blog(title="First", tags=["python", "django"])
        second = make_blog(title="Second", tags=["django"])

        assert first.tag_names == ["django", "python"]
        assert Tag.objects.count() == 2
        assert set(Tag.objects.get(name="django").blogs.all()) == {first, second}

    def test_set_tags_replaces(self, make_blog):
        blog = make_blog(tags=["old"])
        blog.set_tags(["new"])
        assert blog.tag_names == ["new"]
        assert Tag.objects.filter(name="old").exists()

    def test_tag_name_unique(self, db):
        Tag.objects.create(name="python")
        with pytest.raises(IntegrityError), transaction.atomic():
            Tag.objects.create(name="python")


class TestLikes:
    def test_toggle_adds_then_removes(self, blog, other_user):
        liked, count = BlogLike.toggle(blog, other_user)
        assert liked is True
        assert count == 1

        liked, count = BlogLike.toggle(blog, other_user)
        assert liked is False
        assert count == 0

    def test_toggles_by_different_users_both_apply(self, blog, user, other_user):
        BlogLike.toggle(blog, user)
        _liked, count = BlogLike.toggle(blog, other_user)
        assert count == 2

    def test_one_like_per_user(self, blog, other_user):
        BlogLike.objects.create(blog=blog, user=other_user)
        with pytest.raises(IntegrityError), transaction.atomic():
            BlogLike.objects.create(blog=blog, user=other_user)

    def test_comment_like_toggle(self, comment, user):
        liked, count = CommentLike.toggle(comment, user)
        assert (liked, count) == (True, 1)
        assert comment.has_liked(user)


class TestComment:
    """Tests for Comment model."""

    def test_create_comment(self, comment, blog):
        assert comment.content == "Great post!"
        assert comment.blog == blog
        assert not comment.is_reply

    def test_reply(self, comment, user):
        reply = Comment.objects.create(
            blog=comment.blog,
            author=user,
            content="Thanks!",
            parent=comment,
        )
        assert reply.is_reply
        assert comment.replies.count() == 1

    def test_edit_comment(self, comment):
        comment.edit("Updated content")
        comment.refresh_from_db()

        assert comment.content == "Updated content"
        assert comment.is_edited
        assert comment.edited_at is not None

    def test_deleting_parent_removes_replies(self, comment, user):
        Comment.objects.create(blog=comment.blog, author=user, content="a", parent=comment)
        Comment.objects.create(blog=comment.blog, author=user, content="b", parent=comment)
        comment.delete()
        assert Comment.objects.count() == 0


class TestProfile:
    def test_profile_created_with_user(self, user):
        profile = Profile.objects.get(user=user)
        assert profile.role == Profile.ROLE_USER
        assert not profile.is_admin
        assert profile.full_name == "Test User"

    def test_for_user_creates_missing_profile(self, user):
        Profile.objects.filter(user=user).delete()
        fresh = User.objects.get(pk=user.pk)
        profile = Profile.for_user(fresh)
        assert profile.pk is not None
        assert Profile.objects.filter(user=user).count() == 1

    def test_social_links(self, user):
        profile = Profile.for_user(user)
        profile.github = "octocat"
        assert profile.social_links["github"] == "octocat"
        assert set(profile.social_links) == {"website", "twitter", "linkedin", "github"}


class TestFollow:
    def test_toggle_is_symmetric(self, user, other_user):
        is_following, count = Follow.toggle(user, other_user)
        assert is_following
        assert count == 1
        assert other_user.followers.filter(follower=user).exists()
        assert user.following.filter(followed=other_user).exists()

        is_following, count = Follow.toggle(user, other_user)
        assert not is_following
        assert count == 0
        assert not other_user.followers.exists()
        assert not user.following.exists()

    def test_self_follow_rejected_by_database(self, user):
        with pytest.raises(IntegrityError), transaction.atomic():
            Follow.objects.create(follower=user, followed=user)
