"""
django-blog-platform - multi-user blogging core for Django.

Features:
- Draft / published / archived blog lifecycle with a first-publish marker
- Timestamped, collision-checked slugs and derived read times
- One-level threaded comments with edit tracking
- Toggle likes on blogs and comments
- Follower graph with atomic follow / unfollow
- Filtered, sorted and paginated listings and on-demand dashboard stats
"""

__version__ = "0.1.0"
