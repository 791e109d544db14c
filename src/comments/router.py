import logging
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from src.database import get_db
from src.auth.dependencies import get_current_active_user
from src.users.models import User
from src.comments.schemas import CommentCreate, CommentResponse
from src.comments.service import CommentService
from src.comments.dependencies import get_comment_service
from src.exceptions import AppException
from src.posts.dependencies import require_post_id
from src.pagination import OffsetParams, get_offset_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts/{post_id}/comments", tags=["Comments"])

@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_active_user),
    post_id: int = Depends(require_post_id),
    service: CommentService = Depends(get_comment_service),
    db: AsyncSession = Depends(get_db)
):
    """
    Comment on a post

    - **content**: Comment text (not blank)
    """
    user_id = current_user.id
    try:
        return await service.create_comment(post_id, comment_data, user_id, db)
    except AppException:
        raise
    except Exception:
        logger.exception("Error creating comment on post %s", post_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create comment"
        )

@router.get("", response_model=List[CommentResponse])
async def get_comments(
    post_id: int = Depends(require_post_id),
    pagination: OffsetParams = Depends(get_offset_params),
    service: CommentService = Depends(get_comment_service),
    db: AsyncSession = Depends(get_db)
):
    """Comments on a post, newest first"""
    return await service.get_post_comments(post_id, db, pagination.limit, pagination.offset)
