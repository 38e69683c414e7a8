from fastapi import Depends, Request

from app.repositories.posts import PostRepository
from app.repositories.profiles import ProfileRepository
from app.services.auth_service import AuthService
from app.services.post_service import PostService
from app.services.profile_service import ProfileService
from app.services.storage import ProfilePictureStorage
from app.services.supabase import BaasClient


def get_baas(request: Request) -> BaasClient:
    return request.app.state.baas


def get_picture_storage(request: Request) -> ProfilePictureStorage:
    return request.app.state.picture_storage


def get_auth_service(baas: BaasClient = Depends(get_baas)) -> AuthService:
    return AuthService(baas, ProfileRepository(baas))


def get_profile_service(baas: BaasClient = Depends(get_baas)) -> ProfileService:
    return ProfileService(ProfileRepository(baas))


def get_post_service(baas: BaasClient = Depends(get_baas)) -> PostService:
    return PostService(PostRepository(baas))
