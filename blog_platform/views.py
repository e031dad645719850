"""
JSON views for django-blog-platform.

Views stay thin: they read the request, call the service layer and render
the result. Platform errors are turned into JSON responses in one place,
``ApiView.dispatch``.
"""
import json

from django.contrib.auth.mixins import LoginRequiredMixin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views import View

from . import __version__
from .exceptions import BlogPlatformError, ValidationError
from .models import Blog
from .serializers import (
    serialize_author,
    serialize_blog,
    serialize_comment,
    serialize_page,
    serialize_user,
)
from .services import blogs, comments, social, stats


class ApiView(View):
    """Base for every endpoint: body parsing and error rendering."""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except BlogPlatformError as e:
            return JsonResponse(e.as_dict(), status=e.status_code)

    def payload(self):
        """Request body as a dict, from JSON or form data."""
        if self.request.content_type == "application/json":
            try:
                data = json.loads(self.request.body or b"{}")
            except ValueError:
                raise ValidationError(message="Malformed JSON body") from None
            if not isinstance(data, dict):
                raise ValidationError(message="JSON body must be an object")
            return data
        return self.request.POST.dict()

    def page_args(self):
        return {
            "page": self.request.GET.get("page", 1),
            "page_size": self.request.GET.get("limit"),
        }


def authentication_required():
    return JsonResponse({"message": "Authentication required"}, status=401)


class AuthRequiredMixin(LoginRequiredMixin):
    """LoginRequiredMixin answering with JSON instead of a redirect."""

    raise_exception = True

    def handle_no_permission(self):
        return authentication_required()


# Blogs

class BlogListView(ApiView):
    """GET: published blogs. POST: create a blog (authenticated)."""

    def get(self, request):
        result = blogs.list_blogs(
            category=request.GET.get("category"),
            search=request.GET.get("search"),
            author=request.GET.get("author"),
            sort=request.GET.get("sort", "newest"),
            **self.page_args(),
        )
        return JsonResponse(serialize_page(result, "blogs", serialize_blog, include_content=False))

    def post(self, request):
        if not request.user.is_authenticated:
            return authentication_required()
        data = self.payload()
        blog = blogs.create_blog(
            request.user,
            title=data.get("title"),
            content=data.get("content"),
            category=data.get("category"),
            tags=data.get("tags"),
            excerpt=data.get("excerpt"),
            status=data.get("status") or Blog.DRAFT,
            image=request.FILES.get("featured_image"),
        )
        return JsonResponse(
            {"message": "Blog created successfully", "blog": serialize_blog(blog)},
            status=201,
        )


class BlogDetailView(ApiView):
    """Read a published blog by slug; every read counts as a view."""

    def get(self, request, slug):
        blog = blogs.get_published_blog(slug)
        return JsonResponse({
            "blog": serialize_blog(blog, has_liked=blog.has_liked(request.user)),
        })


class BlogManageView(AuthRequiredMixin, ApiView):
    """
    Owner/admin operations on a blog by id.

    PUT and PATCH take JSON; POST takes multipart form data so a new
    featured image can be attached.
    """

    def get(self, request, pk):
        blog = blogs.get_blog_for_edit(pk, request.user)
        return JsonResponse({"blog": serialize_blog(blog)})

    def put(self, request, pk):
        blog = blogs.update_blog(
            pk,
            request.user,
            self.payload(),
            image=request.FILES.get("featured_image"),
        )
        return JsonResponse({"message": "Blog updated successfully", "blog": serialize_blog(blog)})

    patch = put
    post = put

    def delete(self, request, pk):
        removed = blogs.delete_blog(pk, request.user)
        return JsonResponse({"message": "Blog deleted successfully", "deleted_comments": removed})


class BlogLikeView(AuthRequiredMixin, ApiView):
    def post(self, request, pk):
        result = blogs.toggle_blog_like(pk, request.user)
        return JsonResponse({
            "message": "Blog liked" if result.liked else "Blog unliked",
            "like_count": result.like_count,
            "has_liked": result.liked,
        })


class UserBlogListView(ApiView):
    def get(self, request, user_id):
        author, result = blogs.list_user_blogs(user_id, **self.page_args())
        data = serialize_page(result, "blogs", serialize_blog, include_content=False)
        data["user"] = serialize_author(author)
        return JsonResponse(data)


class DraftListView(AuthRequiredMixin, ApiView):
    def get(self, request):
        result = blogs.list_drafts(request.user, **self.page_args())
        return JsonResponse(serialize_page(result, "blogs", serialize_blog, include_content=False))


# Comments

class CommentListView(ApiView):
    """GET: top-level comments with replies. POST: add a comment or reply."""

    def get(self, request, blog_id):
        result = comments.list_comments(blog_id, **self.page_args())
        liked_ids = comments.liked_comment_ids(request.user, result.items)
        return JsonResponse(serialize_page(result, "comments", serialize_comment, liked_ids=liked_ids))

    def post(self, request, blog_id):
        if not request.user.is_authenticated:
            return authentication_required()
        data = self.payload()
        comment = comments.create_comment(
            request.user,
            blog_id,
            data.get("content"),
            parent_id=data.get("parent_id"),
        )
        return JsonResponse(
            {"message": "Comment created successfully", "comment": serialize_comment(comment)},
            status=201,
        )


class CommentDetailView(AuthRequiredMixin, ApiView):
    def put(self, request, pk):
        comment = comments.update_comment(pk, request.user, self.payload().get("content"))
        return JsonResponse({
            "message": "Comment updated successfully",
            "comment": serialize_comment(comment, has_liked=comment.has_liked(request.user)),
        })

    patch = put

    def delete(self, request, pk):
        removed = comments.delete_comment(pk, request.user)
        return JsonResponse({"message": "Comment deleted successfully", "deleted": removed})


class CommentLikeView(AuthRequiredMixin, ApiView):
    def post(self, request, pk):
        result = comments.toggle_comment_like(pk, request.user)
        return JsonResponse({
            "message": "Comment liked" if result.liked else "Comment unliked",
            "like_count": result.like_count,
            "has_liked": result.liked,
        })


class ReplyListView(ApiView):
    def get(self, request, pk):
        result = comments.list_replies(pk, **self.page_args())
        liked_ids = comments.liked_comment_ids(request.user, result.items)
        return JsonResponse(serialize_page(result, "replies", serialize_comment, liked_ids=liked_ids))


# Users

class ProfileView(ApiView):
    def get(self, request, username):
        profile = social.get_profile(username, viewer=request.user)
        user_data = serialize_user(profile["user"], include_private=profile["is_owner"])
        user_data.update({
            "blog_count": profile["blog_count"],
            "follower_count": profile["follower_count"],
            "following_count": profile["following_count"],
            "is_following": profile["is_following"],
            "followers": [serialize_author(user) for user in profile["followers"]],
            "following": [serialize_author(user) for user in profile["following"]],
        })
        return JsonResponse({"user": user_data})


class ProfileUpdateView(AuthRequiredMixin, ApiView):
    """Update the caller's own profile; POST accepts multipart with an avatar."""

    def put(self, request):
        data = self.payload()
        # Form posts carry social links as flat "social_links.<name>" keys
        links = {
            key.split(".", 1)[1]: data.pop(key)
            for key in list(data)
            if key.startswith("social_links.")
        }
        if links:
            data["social_links"] = links
        user = social.update_profile(request.user, data, avatar=request.FILES.get("avatar"))
        return JsonResponse({
            "message": "Profile updated successfully",
            "user": serialize_user(user, include_private=True),
        })

    patch = put
    post = put


class FollowView(AuthRequiredMixin, ApiView):
    def post(self, request, user_id):
        result = social.toggle_follow(request.user, user_id)
        return JsonResponse({
            "message": (
                "User followed successfully" if result.is_following
                else "User unfollowed successfully"
            ),
            "is_following": result.is_following,
            "follower_count": result.follower_count,
        })


class UserSearchView(ApiView):
    def get(self, request):
        result = social.search_users(request.GET.get("q"), **self.page_args())
        return JsonResponse(serialize_page(result, "users", serialize_user))


class UserStatsView(AuthRequiredMixin, ApiView):
    def get(self, request):
        return JsonResponse({"stats": stats.user_stats(request.user)})


# Admin

class AdminDashboardView(AuthRequiredMixin, ApiView):
    def get(self, request):
        data = stats.dashboard(request.user)
        return JsonResponse({
            "stats": data["stats"],
            "recent_activity": {
                "recent_users": [
                    serialize_user(user, include_private=True) for user in data["recent_users"]
                ],
                "recent_blogs": [
                    serialize_blog(blog, include_content=False) for blog in data["recent_blogs"]
                ],
                "top_authors": [
                    {
                        "author": serialize_author(row["author"]),
                        "blog_count": row["blog_count"],
                        "total_views": row["total_views"],
                    }
                    for row in data["top_authors"]
                ],
            },
        })


class AdminUserListView(AuthRequiredMixin, ApiView):
    def get(self, request):
        result = social.list_users(
            request.user,
            search=request.GET.get("search"),
            role=request.GET.get("role"),
            **self.page_args(),
        )
        data = serialize_page(result, "users", serialize_user, include_private=True)
        for entry, user in zip(data["users"], result.items):
            entry["blog_count"] = user.blog_count
        return JsonResponse(data)


class AdminUserView(AuthRequiredMixin, ApiView):
    def delete(self, request, user_id):
        social.delete_user(user_id, request.user)
        return JsonResponse({"message": "User and all associated content deleted successfully"})


class AdminUserRoleView(AuthRequiredMixin, ApiView):
    def put(self, request, user_id):
        role = self.payload().get("role")
        user = social.set_user_role(user_id, request.user, role)
        return JsonResponse({
            "message": f"User role updated to {role}",
            "user": serialize_user(user, include_private=True),
        })


class AdminBlogListView(AuthRequiredMixin, ApiView):
    def get(self, request):
        result = stats.list_all_blogs(
            request.user,
            status=request.GET.get("status"),
            search=request.GET.get("search"),
            **self.page_args(),
        )
        return JsonResponse(serialize_page(result, "blogs", serialize_blog, include_content=False))


class AdminBlogStatusView(AuthRequiredMixin, ApiView):
    def put(self, request, blog_id):
        status = self.payload().get("status")
        blog = blogs.set_blog_status(blog_id, request.user, status)
        return JsonResponse({
            "message": f"Blog status updated to {status}",
            "blog": serialize_blog(blog, include_content=False),
        })


class AdminCommentListView(AuthRequiredMixin, ApiView):
    def get(self, request):
        result = comments.list_all_comments(
            request.user,
            search=request.GET.get("search"),
            **self.page_args(),
        )
        data = serialize_page(result, "comments", serialize_comment)
        for entry, comment in zip(data["comments"], result.items):
            entry["blog_title"] = comment.blog.title
        return JsonResponse(data)


class HealthView(View):
    """Liveness plus a database round trip."""

    def get(self, request):
        data = {
            "timestamp": timezone.now().isoformat(),
            "version": __version__,
        }
        try:
            connection.ensure_connection()
        except DatabaseError:
            data.update({"status": "error", "database": "disconnected"})
            return JsonResponse(data, status=503)
        data.update({"status": "success", "database": "connected"})
        return JsonResponse(data)
