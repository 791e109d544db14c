"""
Schemas for Users module
"""
from datetime import datetime
from typing import Optional
from pydantic import Field, validator

from src.models import CustomModel

# Constants for field descriptions
USERNAME_DESC = "Unique handle"
BIO_DESC = "Short profile text"


class UserUpsert(CustomModel):
    """Profile fields pushed by the identity provider"""
    id: str = Field(..., min_length=1, description="Identity provider subject")
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserProfileUpdate(CustomModel):
    """Schema for users to update their own profile; only provided fields are merged"""
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    username: Optional[str] = Field(None, min_length=3, max_length=100, description=USERNAME_DESC)
    bio: Optional[str] = Field(None, max_length=1000, description=BIO_DESC)
    location: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=500)
    profile_image_url: Optional[str] = Field(None, max_length=500)

    @validator('username')
    def validate_username(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Username must not be blank')
        return v.strip() if v else v


class UserResponse(CustomModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    is_admin: bool = False
    is_banned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserWithCounts(UserResponse):
    """User enriched with graph counts, computed at read time"""
    followers_count: int = Field(0, ge=0)
    following_count: int = Field(0, ge=0)
    posts_count: int = Field(0, ge=0)
    is_following: bool = Field(False, description="Whether the viewer follows this user")
