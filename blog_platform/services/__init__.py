"""
Service layer for django-blog-platform.

Each module owns one area: ``blogs`` (content lifecycle and listings),
``comments`` (threads and comment likes), ``social`` (follow graph, profiles
and user administration) and ``stats`` (on-demand aggregates). Views call
these functions; they raise errors from ``blog_platform.exceptions``.
"""
