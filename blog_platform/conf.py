"""
Configuration settings for django-blog-platform.

Override these in your Django settings.py:

    BLOG_PLATFORM = {
        'POSTS_PER_PAGE': 20,
        'TRENDING_WINDOW_DAYS': 3,
        'MAX_IMAGE_SIZE_MB': 10,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Blogs
    "CATEGORY_CHOICES": [
        ("Technology", "Technology"),
        ("Lifestyle", "Lifestyle"),
        ("Travel", "Travel"),
        ("Food", "Food"),
        ("Health", "Health"),
        ("Business", "Business"),
        ("Education", "Education"),
        ("Entertainment", "Entertainment"),
        ("Sports", "Sports"),
        ("Politics", "Politics"),
        ("Science", "Science"),
        ("Other", "Other"),
    ],
    "TITLE_MAX_LENGTH": 100,
    "EXCERPT_MAX_LENGTH": 300,
    "WORDS_PER_MINUTE": 200,
    "SLUG_MAX_LENGTH": 150,
    "TAG_MAX_LENGTH": 50,

    # Comments
    "COMMENT_MAX_LENGTH": 1000,

    # Profiles
    "BIO_MAX_LENGTH": 500,
    "USER_SEARCH_MIN_LENGTH": 2,

    # Listing
    "POSTS_PER_PAGE": 10,
    "COMMENTS_PER_PAGE": 10,
    "REPLIES_PER_PAGE": 5,
    "MAX_PAGE_SIZE": 50,
    "TRENDING_WINDOW_DAYS": 7,

    # Admin dashboard
    "DASHBOARD_RECENT_LIMIT": 5,
    "TOP_AUTHORS_LIMIT": 5,

    # Images
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"],
    "MAX_IMAGE_SIZE_MB": 5,
    "BLOG_IMAGE_UPLOAD_PATH": "blog_images",
    "AVATAR_UPLOAD_PATH": "user_avatars",
}


class BlogPlatformSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blog_platform.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blog_platform setting: {name}")

        user_settings = getattr(settings, "BLOG_PLATFORM", {})
        return user_settings.get(name, DEFAULTS[name])


blog_settings = BlogPlatformSettings()
