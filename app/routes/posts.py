import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies.auth import AuthenticatedUser, get_current_user, get_optional_user
from app.dependencies.services import get_post_service
from app.repositories.posts import JoinTier
from app.schemas.post import PostCreate
from app.services.post_service import PostService
from app.utils.responses import api_response

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/posts")
def create_post(
    body: PostCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
):
    post = posts.create_post(user.user_id, body)
    return api_response("Post created successfully", post)

# Feed with author details; degrades to plain posts if the profile join fails
@router.get("/posts")
def list_posts(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    posts: PostService = Depends(get_post_service),
):
    tier, feed = posts.list_feed(user.user_id if user else None)
    if tier is JoinTier.DEGRADED:
        return api_response("Posts retrieved successfully (basic mode)", feed)
    return api_response("Posts retrieved successfully", feed)
