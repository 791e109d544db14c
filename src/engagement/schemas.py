from pydantic import Field
from src.models import CustomModel


class FollowResponse(CustomModel):
    """Result of a follow/unfollow request"""
    user_id: str = Field(..., description="Followed user")
    is_following: bool
    changed: bool = Field(..., description="False when the request had no effect")
    followers_count: int = Field(..., ge=0)
