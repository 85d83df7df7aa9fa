# -*- coding: utf-8 -*-
"""
Repositories
데이터 접근 계층
"""
from .base_repository import BaseRepository
from .customer_repository import CustomerRepository
from .program_repository import ProgramRepository
from .matching_repository import MatchingResultRepository
from .watchlist_repository import WatchlistRepository
from .project_repository import ProjectRepository

__all__ = [
    "BaseRepository",
    "CustomerRepository",
    "ProgramRepository",
    "MatchingResultRepository",
    "WatchlistRepository",
    "ProjectRepository",
]
