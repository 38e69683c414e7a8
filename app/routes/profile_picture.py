import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.dependencies.auth import AuthenticatedUser, get_current_user
from app.dependencies.services import get_auth_service, get_picture_storage
from app.schemas.profile_picture import (
    ProfilePictureResponse,
    SkipProfilePictureResponse,
    UploadProfilePictureRequest,
)
from app.services.auth_service import AuthService
from app.services.errors import NotFoundError, StorageError, UpstreamError
from app.services.storage import ProfilePictureStorage
from app.utils.responses import api_response

logger = logging.getLogger(__name__)

router = APIRouter()

# -------- Upload: stage the file, point the profile row at it, then commit --------
@router.post("/profile-picture/upload")
def upload_profile_picture(
    body: UploadProfilePictureRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
    storage: ProfilePictureStorage = Depends(get_picture_storage),
):
    logger.info(f"Profile picture upload for user {user.user_id}: {body.file_name} ({body.content_type})")
    picture = storage.save(user.user_id, body.content_type, body.image_data)

    try:
        attached = auth.update_profile_picture(user.user_id, picture.public_url)
    except UpstreamError as e:
        logger.error(f"Failed to update profile picture for user {user.user_id}: {str(e)}")
        attached = False

    if not attached:
        # The live picture stays in place until the row points at the new one
        storage.discard(picture)
        raise StorageError("Failed to save profile picture information")

    storage.commit(user.user_id, picture)

    return api_response("Profile picture uploaded", ProfilePictureResponse(
        profile_picture_url=picture.public_url,
        message="Profile picture uploaded successfully!",
    ))

@router.post("/profile-picture/skip")
def skip_profile_picture(user: AuthenticatedUser = Depends(get_current_user)):
    return api_response("Profile setup completed", SkipProfilePictureResponse(
        message="Profile picture skipped. You can add one later from your profile settings.",
        next_step="dashboard",
    ))

# Public; only the base name of the requested path is honoured
@router.get("/uploads/profile_pictures/{filename:path}")
def serve_profile_picture(filename: str, storage: ProfilePictureStorage = Depends(get_picture_storage)):
    resolved = storage.resolve(filename)
    if resolved is None:
        raise NotFoundError("Profile picture not found")
    path, media_type = resolved
    return FileResponse(path, media_type=media_type)
