"""
Django admin configuration for blog_platform.
"""
from django.contrib import admin

from .models import Blog, BlogLike, Comment, CommentLike, Follow, Profile, Tag


class CommentInline(admin.TabularInline):
    """Top-level comments shown on the blog change page."""

    model = Comment
    extra = 0
    fk_name = "blog"
    raw_id_fields = ["author", "parent"]
    fields = ["author", "parent", "content", "is_edited", "created_at"]
    readonly_fields = ["is_edited", "created_at"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = [
        "title_preview",
        "author",
        "category",
        "status",
        "is_published",
        "views",
        "published_at",
        "created_at",
    ]
    list_filter = ["status", "category", "is_published", "created_at"]
    search_fields = ["title", "content", "author__username"]
    raw_id_fields = ["author"]
    filter_horizontal = ["tags"]
    date_hierarchy = "created_at"
    inlines = [CommentInline]
    readonly_fields = [
        "slug",
        "is_published",
        "published_at",
        "views",
        "read_time",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "content", "excerpt", "author")
        }),
        ("Taxonomy", {
            "fields": ("category", "tags", "featured_image")
        }),
        ("Status", {
            "fields": ("status", "is_published", "published_at")
        }),
        ("Metadata", {
            "fields": ("views", "read_time", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_blogs", "archive_blogs", "move_to_draft"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    @admin.action(description="Publish selected blogs")
    def publish_blogs(self, request, queryset):
        for blog in queryset:
            blog.publish()
        self.message_user(request, f"{queryset.count()} blogs published.")

    @admin.action(description="Archive selected blogs")
    def archive_blogs(self, request, queryset):
        for blog in queryset:
            blog.archive()
        self.message_user(request, f"{queryset.count()} blogs archived.")

    @admin.action(description="Move selected blogs to draft")
    def move_to_draft(self, request, queryset):
        for blog in queryset:
            blog.set_status(Blog.DRAFT)
        self.message_user(request, f"{queryset.count()} blogs moved to draft.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["preview", "author", "blog", "parent", "is_edited", "created_at"]
    list_filter = ["is_edited", "created_at"]
    search_fields = ["content", "author__username", "blog__title"]
    raw_id_fields = ["blog", "author", "parent"]
    readonly_fields = ["is_edited", "edited_at", "created_at", "updated_at"]


@admin.register(BlogLike)
class BlogLikeAdmin(admin.ModelAdmin):
    list_display = ["user", "blog", "created_at"]
    search_fields = ["user__username", "blog__title"]
    raw_id_fields = ["user", "blog"]


@admin.register(CommentLike)
class CommentLikeAdmin(admin.ModelAdmin):
    list_display = ["user", "comment", "created_at"]
    search_fields = ["user__username"]
    raw_id_fields = ["user", "comment"]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "role", "website", "twitter", "github", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__username", "user__first_name", "user__last_name", "bio"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Follow)
class FollowAdmin(admin.ModelAdmin):
    list_display = ["follower", "followed", "created_at"]
    search_fields = ["follower__username", "followed__username"]
    raw_id_fields = ["follower", "followed"]
