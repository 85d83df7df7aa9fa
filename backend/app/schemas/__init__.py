"""
Pydantic Schemas (Request/Response 모델)
"""

from .analytics import DashboardStats, TrendData
from .customer import (
    BulkImportResponse,
    BulkImportRowError,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from .matching import MatchingResponse, MatchingResultResponse, MatchingRunRequest
from .program import ProgramCreate, ProgramListResponse, ProgramResponse, ProgramUpdate
from .progress import ProgressResponse
from .project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from .watchlist import WatchlistAddRequest, WatchlistItemResponse, WatchlistResponse

__all__ = [
    # Customer
    "BulkImportResponse",
    "BulkImportRowError",
    "CustomerCreate",
    "CustomerResponse",
    "CustomerUpdate",
    # Program
    "ProgramCreate",
    "ProgramListResponse",
    "ProgramResponse",
    "ProgramUpdate",
    # Matching
    "MatchingResponse",
    "MatchingResultResponse",
    "MatchingRunRequest",
    # Watchlist
    "WatchlistAddRequest",
    "WatchlistItemResponse",
    "WatchlistResponse",
    # Project
    "ProjectCreateRequest",
    "ProjectListResponse",
    "ProjectResponse",
    "ProjectUpdateRequest",
    "ProgressResponse",
    # Analytics
    "DashboardStats",
    "TrendData",
]
