"""
Models for django-blog-platform.

All models are importable from blog_platform.models:

    from blog_platform.models import Blog, Tag, Comment, BlogLike, Profile, Follow
"""
from .posts import Blog, Tag
from .comments import Comment
from .likes import BlogLike, CommentLike
from .social import Profile, Follow

__all__ = [
    # Content
    "Blog",
    "Tag",
    "Comment",
    # Likes
    "BlogLike",
    "CommentLike",
    # Social graph
    "Profile",
    "Follow",
]
