import logging

from fastapi import APIRouter, Depends

from app.dependencies.services import get_auth_service
from app.schemas.auth import (
    CompleteProfileRequest,
    LoginRequest,
    LoginResponse,
    ProfileCompleteResponse,
    SignupRequest,
    SignupResponse,
)
from app.services.auth_service import AuthService
from app.services.errors import ServiceError, UpstreamError
from app.utils.responses import api_response

logger = logging.getLogger(__name__)

router = APIRouter()

# -------- Signup: create the account only, no session --------
@router.post("/signup", status_code=201)
def signup(body: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    user_id = auth.signup(body.email, body.password)
    return api_response("Account created", SignupResponse(
        user_id=str(user_id),
        message="Account created successfully. Please complete your profile to continue.",
        next_step="complete_profile",
    ))

# -------- Complete profile: save profile data and log in --------
@router.post("/complete-profile", status_code=201)
def complete_profile(body: CompleteProfileRequest, auth: AuthService = Depends(get_auth_service)):
    completed = auth.complete_profile(body.email, body.password, body.profile)
    return api_response("Profile completed and logged in", ProfileCompleteResponse(
        session=completed.session,
        profile=completed.profile,
        message="Profile completed successfully! Now you can upload a profile picture.",
        next_step="upload_profile",
    ))

# -------- Login: route the client by whether a profile exists --------
@router.post("/login")
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    session, user_id = auth.login(body.email, body.password)

    try:
        profile = auth.get_profile(user_id)
    except UpstreamError as e:
        logger.error(f"Failed to check profile for user {user_id}: {str(e)}")
        raise ServiceError("Failed to verify account status") from e

    if profile is None:
        return api_response("Profile required", LoginResponse(
            session=session,
            message="Please complete your profile to continue.",
            next_step="complete_profile",
        ))

    return api_response("Login successful", LoginResponse(
        session=session,
        profile=profile,
        message="Login successful! Welcome back.",
        next_step="dashboard",
    ))
