from pydantic import Field, validator
from typing import Optional
from datetime import datetime
from src.models import CustomModel

# Constants for field descriptions
CONTENT_DESCRIPTION = "Post content"

class AuthorResponse(CustomModel):
    id: str = Field(..., description="Author ID")
    username: Optional[str] = Field(None, description="Author handle")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

class PostCreate(CustomModel):
    """Schema for creating a post; setting original_post_id makes it a repost"""
    content: str = Field(..., min_length=1, max_length=10000, description=CONTENT_DESCRIPTION)
    image_url: Optional[str] = Field(None, max_length=512, description="Attached image URL")
    parent_post_id: Optional[int] = Field(None, description="Post being replied to (reserved)")
    original_post_id: Optional[int] = Field(None, description="Post being reposted")

    @validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Post content must not be empty')
        return v.strip()

class PostResponse(CustomModel):
    """Post enriched with read-time counts and viewer flags"""
    id: int = Field(..., description="Post ID")
    user_id: str = Field(..., description="Author ID")
    content: str = Field(..., description=CONTENT_DESCRIPTION)
    image_url: Optional[str] = None
    parent_post_id: Optional[int] = None
    is_repost: bool = False
    original_post_id: Optional[int] = None
    user: AuthorResponse = Field(..., description="Author")
    likes_count: int = Field(0, ge=0)
    comments_count: int = Field(0, ge=0)
    reposts_count: int = Field(0, ge=0)
    is_liked: bool = Field(False, description="Whether the viewer liked this post")
    is_bookmarked: bool = Field(False, description="Whether the viewer bookmarked this post")
    created_at: datetime
    updated_at: Optional[datetime] = None

class PostLikeResponse(CustomModel):
    """Result of a like/unlike request"""
    post_id: int
    is_liked: bool
    changed: bool = Field(..., description="False when the request had no effect")
    likes_count: int = Field(..., ge=0)

class PostBookmarkResponse(CustomModel):
    post_id: int
    is_bookmarked: bool
    changed: bool = Field(..., description="False when the request had no effect")

class MessageResponse(CustomModel):
    message: str
