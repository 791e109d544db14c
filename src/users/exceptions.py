"""
Exceptions for Users module
"""
from fastapi import status
from src.exceptions import AppException


class UserException(AppException):
    """Base exception for user errors"""
    pass


class UserNotFoundException(UserException):
    def __init__(self, detail: str = "User not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class UserAlreadyExistsException(UserException):
    def __init__(self, detail: str = "Username is already taken"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


class UserValidationException(UserException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )
