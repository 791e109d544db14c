from fastapi import status
from src.exceptions import AppException

class AuthException(AppException):
    """Base exception for authentication errors"""
    pass

class TokenMissingException(AuthException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "Authentication token not found",
                "code": "token_missing",
                "action": "login_required"
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

class TokenNotValidException(AuthException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "Token is invalid or expired",
                "code": "token_not_valid",
                "action": "login_required"
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

class UserBannedException(AuthException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "This account has been banned",
                "code": "account_banned",
                "action": "contact_admin"
            }
        )

class AdminRequiredException(AuthException):
    def __init__(self, detail: str = "Admin access required"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )
