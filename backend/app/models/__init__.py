"""
SQLAlchemy ORM Models
"""
from app.models.core import (
    Customer,
    Program,
    MatchingResult,
    CustomerProgram,
    CustomerProject,
    PROJECT_STATUSES,
)

__all__ = [
    "Customer",
    "Program",
    "MatchingResult",
    "CustomerProgram",
    "CustomerProject",
    "PROJECT_STATUSES",
]
