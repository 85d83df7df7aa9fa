"""
Pagination helpers
"""
from typing import List, TypeVar

from .schemas.pagination import PaginatedResponseSchema

T = TypeVar('T')


def total_pages(total: int, page_size: int) -> int:
    """전체 페이지 수 (page_size가 0 이하이면 0)"""
    return (total + page_size - 1) // page_size if page_size > 0 else 0


def create_paginated_response(
    items: List[T],
    total: int,
    page: int,
    page_size: int
) -> PaginatedResponseSchema[T]:
    """
    Create a paginated response object

    Args:
        items: List of items for current page
        total: Total number of items
        page: Current page number
        page_size: Number of items per page

    Returns:
        PaginatedResponseSchema object
    """
    return PaginatedResponseSchema(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size)
    )
