from pydantic import BaseModel
from fastapi import Query

from src.config import settings


class OffsetParams(BaseModel):
    limit: int = settings.DEFAULT_PAGE_SIZE
    offset: int = 0


def get_offset_params(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Maximum number of items"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
) -> OffsetParams:
    return OffsetParams(limit=limit, offset=offset)


def get_admin_offset_params(
    limit: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Maximum number of items"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
) -> OffsetParams:
    """Admin listings default to a larger page."""
    return OffsetParams(limit=limit, offset=offset)
