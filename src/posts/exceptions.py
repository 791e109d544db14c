from fastapi import status
from src.exceptions import AppException

class PostException(AppException):
    """Base exception for post errors"""
    pass

class PostNotFoundException(PostException):
    def __init__(self, detail: str = "Post not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )

class PostForbiddenException(PostException):
    def __init__(self, detail: str = "You can only delete your own posts"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )
