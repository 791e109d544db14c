from fastapi import status
from src.exceptions import AppException

class EngagementException(AppException):
    """Base exception for like/follow/bookmark errors"""
    pass

class SelfReferenceException(EngagementException):
    """Raised before any storage access when an actor targets itself"""
    def __init__(self, detail: str = "Cannot follow yourself"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )
