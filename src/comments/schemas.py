from pydantic import Field, validator
from typing import Optional
from datetime import datetime
from src.models import CustomModel
from src.posts.schemas import AuthorResponse

class CommentCreate(CustomModel):
    content: str = Field(..., min_length=1, max_length=2000, description="Comment text")

    @validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Comment content must not be empty')
        return v.strip()

class CommentResponse(CustomModel):
    id: int
    post_id: int
    user_id: str
    content: str
    user: AuthorResponse
    created_at: datetime
    updated_at: Optional[datetime] = None
