"""
URL configuration for django-blog-platform.

Include in your project urls.py:

    path('api/', include('blog_platform.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_platform"

urlpatterns = [
    # Blogs
    path("blogs/", views.BlogListView.as_view(), name="blog_list"),
    path("blogs/mine/drafts/", views.DraftListView.as_view(), name="draft_list"),
    path("blogs/user/<int:user_id>/", views.UserBlogListView.as_view(), name="user_blogs"),
    path("blogs/id/<int:pk>/", views.BlogManageView.as_view(), name="blog_manage"),
    path("blogs/id/<int:pk>/like/", views.BlogLikeView.as_view(), name="blog_like"),
    path("blogs/<slug:slug>/", views.BlogDetailView.as_view(), name="blog_detail"),

    # Comments
    path("blogs/<int:blog_id>/comments/", views.CommentListView.as_view(), name="comment_list"),
    path("comments/<int:pk>/", views.CommentDetailView.as_view(), name="comment_detail"),
    path("comments/<int:pk>/like/", views.CommentLikeView.as_view(), name="comment_like"),
    path("comments/<int:pk>/replies/", views.ReplyListView.as_view(), name="comment_replies"),

    # Users
    path("users/search/", views.UserSearchView.as_view(), name="user_search"),
    path("users/profile/", views.ProfileUpdateView.as_view(), name="profile_update"),
    path("users/profile/<str:username>/", views.ProfileView.as_view(), name="profile_detail"),
    path("users/<int:user_id>/follow/", views.FollowView.as_view(), name="follow"),
    path("users/me/stats/", views.UserStatsView.as_view(), name="user_stats"),

    # Admin
    path("admin/dashboard/", views.AdminDashboardView.as_view(), name="admin_dashboard"),
    path("admin/users/", views.AdminUserListView.as_view(), name="admin_users"),
    path("admin/users/<int:user_id>/", views.AdminUserView.as_view(), name="admin_user"),
    path("admin/users/<int:user_id>/role/", views.AdminUserRoleView.as_view(), name="admin_user_role"),
    path("admin/blogs/", views.AdminBlogListView.as_view(), name="admin_blogs"),
    path("admin/blogs/<int:blog_id>/status/", views.AdminBlogStatusView.as_view(), name="admin_blog_status"),
    path("admin/comments/", views.AdminCommentListView.as_view(), name="admin_comments"),

    # Health
    path("health/", views.HealthView.as_view(), name="health"),
]
