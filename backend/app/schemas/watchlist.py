# -*- coding: utf-8 -*-
"""
관심 프로그램(watchlist) 스키마
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .program import ProgramResponse


class WatchlistAddRequest(BaseModel):
    program_id: UUID
    notes: Optional[str] = Field(None, max_length=2000)


class WatchlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    program_id: UUID
    notes: Optional[str] = None
    added_at: datetime
    program: ProgramResponse


class WatchlistResponse(BaseModel):
    total: int
    items: List[WatchlistItemResponse]
