import logging

from fastapi import APIRouter, Depends

from app.dependencies.auth import AuthenticatedUser, get_current_user
from app.dependencies.services import get_auth_service, get_profile_service
from app.schemas.profile import ProfileIn, SkillsOut
from app.services.auth_service import AuthService
from app.services.errors import ServiceError, UpstreamError
from app.services.profile_service import ProfileService
from app.utils.responses import api_response
from app.utils.validators import VALID_SKILLS

logger = logging.getLogger(__name__)

router = APIRouter()

# Public list of skill options
@router.get("/skills")
def get_skills():
    return api_response("Skills retrieved successfully", SkillsOut(skills=list(VALID_SKILLS), total=len(VALID_SKILLS)))

# Current user's profile; null data means the profile is still to be completed
@router.get("/profile")
def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        profile = auth.get_profile(user.user_id)
    except UpstreamError as e:
        raise ServiceError("Failed to retrieve profile") from e

    if profile is None:
        logger.info(f"No profile found for user {user.user_id}")
        return api_response("No profile found", None)
    return api_response("Profile retrieved successfully", profile)

@router.put("/profile")
def update_profile(
    body: ProfileIn,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    updated = profiles.update_profile(user.user_id, body)
    return api_response("Profile updated successfully", updated)
