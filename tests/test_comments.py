"""
Tests for comment services.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from blog_platform.exceptions import Forbidden, InvalidOperation, NotFound, ValidationError
from blog_platform.models import Comment, CommentLike
from blog_platform.services import comments


class TestCreateComment:
    def test_top_level_comment(self, blog, other_user):
        comment = comments.create_comment(other_user, blog.pk, "  Nice read  ")
        assert comment.content == "Nice read"
        assert comment.parent_id is None
        assert comment.like_count == 0
        assert comment.reply_count == 0

    def test_reply(self, comment, user):
        reply = comments.create_comment(user, comment.blog_id, "Thanks!", parent_id=comment.pk)
        assert reply.parent_id == comment.pk
        assert comments.get_comment(comment.pk).reply_count == 1

    def test_reply_to_reply_rejected(self, comment, user, other_user):
        reply = comments.create_comment(user, comment.blog_id, "Thanks!", parent_id=comment.pk)
        with pytest.raises(InvalidOperation):
            comments.create_comment(other_user, comment.blog_id, "Deeper", parent_id=reply.pk)

    def test_parent_on_other_blog_not_found(self, comment, make_blog, user):
        elsewhere = make_blog(title="Elsewhere")
        with pytest.raises(NotFound) as exc_info:
            comments.create_comment(user, elsewhere.pk, "Lost", parent_id=comment.pk)
        assert exc_info.value.message == "Parent comment not found"

    def test_missing_blog(self, user):
        with pytest.raises(NotFound) as exc_info:
            comments.create_comment(user, 555, "Hello")
        assert exc_info.value.message == "Blog not found"

    def test_empty_content(self, blog, user):
        with pytest.raises(ValidationError) as exc_info:
            comments.create_comment(user, blog.pk, "   ")
        assert exc_info.value.fields == ["content"]

    def test_content_too_long(self, blog, user):
        with pytest.raises(ValidationError):
            comments.create_comment(user, blog.pk, "x" * 1001)
        assert not Comment.objects.exists()


class TestUpdateComment:
    def test_author_edits(self, comment, other_user):
        updated = comments.update_comment(comment.pk, other_user, "Edited")
        assert updated.content == "Edited"
        assert updated.is_edited
        assert updated.edited_at is not None

    def test_blog_author_cannot_edit(self, comment, user):
        with pytest.raises(Forbidden):
            comments.update_comment(comment.pk, user, "Rewritten")

    def test_admin_cannot_edit(self, comment, site_admin):
        with pytest.raises(Forbidden):
            comments.update_comment(comment.pk, site_admin, "Rewritten")
        comment.refresh_from_db()
        assert comment.content == "Great post!"
        assert not comment.is_edited

    def test_empty_edit_rejected(self, comment, other_user):
        with pytest.raises(ValidationError):
            comments.update_comment(comment.pk, other_user, "")

    def test_non_string_edit_rejected(self, comment, other_user):
        with pytest.raises(ValidationError) as exc_info:
            comments.update_comment(comment.pk, other_user, 42)
        assert exc_info.value.fields == ["content"]
        comment.refresh_from_db()
        assert comment.content == "Great post!"


class TestDeleteComment:
    def test_delete_thread(self, comment, user):
        Comment.objects.create(blog=comment.blog, author=user, content="a", parent=comment)
        Comment.objects.create(blog=comment.blog, author=user, content="b", parent=comment)

        removed = comments.delete_comment(comment.pk, comment.author)

        assert removed == 3
        assert not Comment.objects.exists()

    def test_delete_reply_only(self, comment, user):
        reply = Comment.objects.create(blog=comment.blog, author=user, content="a", parent=comment)
        assert comments.delete_comment(reply.pk, user) == 1
        assert Comment.objects.filter(pk=comment.pk).exists()

    def test_stranger_forbidden(self, comment, user):
        with pytest.raises(Forbidden):
            comments.delete_comment(comment.pk, user)

    def test_admin_may_delete(self, comment, site_admin):
        comments.delete_comment(comment.pk, site_admin)
        assert not Comment.objects.exists()

    def test_missing_comment(self, user):
        with pytest.raises(NotFound):
            comments.delete_comment(8080, user)


class TestCommentLikes:
    def test_toggle(self, comment, user):
        result = comments.toggle_comment_like(comment.pk, user)
        assert result == (True, 1)
        result = comments.toggle_comment_like(comment.pk, user)
        assert result == (False, 0)
        assert not CommentLike.objects.exists()


class TestListings:
    def test_liked_comment_ids(self, comment, user, other_user):
        reply = Comment.objects.create(blog=comment.blog, author=user, content="r", parent=comment)
        CommentLike.objects.create(comment=reply, user=other_user)

        result = comments.list_comments(comment.blog_id)

        assert comments.liked_comment_ids(other_user, result.items) == {reply.pk}
        assert comments.liked_comment_ids(user, result.items) == set()

    def test_list_comments_newest_first_with_replies(self, blog, user, other_user):
        now = timezone.now()
        older = Comment.objects.create(
            blog=blog, author=other_user, content="older", created_at=now - timedelta(hours=2)
        )
        newer = Comment.objects.create(
            blog=blog, author=other_user, content="newer", created_at=now - timedelta(hours=1)
        )
        second = Comment.objects.create(
            blog=blog, author=user, content="second", parent=older, created_at=now
        )
        first = Comment.objects.create(
            blog=blog, author=user, content="first", parent=older,
            created_at=now - timedelta(minutes=30),
        )

        result = comments.list_comments(blog.pk)

        assert [c.pk for c in result.items] == [newer.pk, older.pk]
        assert [r.pk for r in result.items[1].thread_replies] == [first.pk, second.pk]
        assert result.total == 2

    def test_list_comments_missing_blog(self, db):
        with pytest.raises(NotFound):
            comments.list_comments(9999)

    def test_list_replies_oldest_first(self, comment, user):
        now = timezone.now()
        later = Comment.objects.create(
            blog=comment.blog, author=user, content="later", parent=comment, created_at=now
        )
        earlier = Comment.objects.create(
            blog=comment.blog, author=user, content="earlier", parent=comment,
            created_at=now - timedelta(minutes=5),
        )

        result = comments.list_replies(comment.pk)

        assert [r.pk for r in result.items] == [earlier.pk, later.pk]

    def test_list_replies_paginates(self, comment, user):
        for i in range(7):
            Comment.objects.create(blog=comment.blog, author=user, content=f"r{i}", parent=comment)
        result = comments.list_replies(comment.pk)
        assert len(result.items) == 5
        assert result.total == 7

    def test_list_replies_missing_parent(self, db):
        with pytest.raises(NotFound):
            comments.list_replies("not-a-number")

    def test_list_all_comments_admin_only(self, comment, user, site_admin):
        with pytest.raises(Forbidden):
            comments.list_all_comments(user)

        result = comments.list_all_comments(site_admin, search="great")
        assert [c.pk for c in result.items] == [comment.pk]
        assert comments.list_all_comments(site_admin, search="absent").total == 0
