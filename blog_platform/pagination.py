"""
Offset pagination over querysets.
"""
import math
from dataclasses import dataclass

from django.core.paginator import EmptyPage, Paginator

from .conf import blog_settings
from .exceptions import ValidationError


@dataclass
class PageResult:
    """One page of results plus the counts needed to navigate."""

    items: list
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self):
        return math.ceil(self.total / self.page_size)

    @property
    def has_next(self):
        return self.page < self.total_pages

    @property
    def has_prev(self):
        return self.page > 1

    def pagination_dict(self):
        return {
            "current_page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "total": self.total,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


def _positive_int(field, value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError.for_field(field, f"{field} must be an integer") from None
    if number < 1:
        raise ValidationError.for_field(field, f"{field} must be a positive integer")
    return number


def paginate(queryset, page=1, page_size=None):
    """
    Return the requested page of an ordered queryset.

    Pages past the end come back empty rather than raising.
    """
    page = _positive_int("page", page if page is not None else 1)
    page_size = _positive_int(
        "page_size",
        page_size if page_size is not None else blog_settings.POSTS_PER_PAGE,
    )
    if page_size > blog_settings.MAX_PAGE_SIZE:
        raise ValidationError.for_field(
            "page_size",
            f"page_size must be between 1 and {blog_settings.MAX_PAGE_SIZE}",
        )

    paginator = Paginator(queryset, page_size)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    return PageResult(items=items, page=page, page_size=page_size, total=paginator.count)
