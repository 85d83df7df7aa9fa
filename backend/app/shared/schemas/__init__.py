"""
Shared Pydantic schemas
"""
from .pagination import PaginatedResponseSchema

__all__ = [
    'PaginatedResponseSchema',
]
