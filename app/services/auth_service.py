import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from uuid import UUID

import httpx
from supabase import AuthError

from app.repositories.profiles import ProfileRepository
from app.schemas.auth import SessionOut
from app.schemas.profile import ProfileIn, ProfileOut
from app.services.errors import AuthenticationError, InputError, UpstreamError
from app.services.supabase import BaasClient
from app.utils import validators

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


class SignupError(InputError):
    pass


@dataclass
class CompletedProfile:
    session: SessionOut
    profile: ProfileOut


class AuthService:
    def __init__(self, baas: BaasClient, profiles: ProfileRepository):
        self.baas = baas
        self.profiles = profiles

    # -------- Signup --------
    def signup(self, email: str, password: str) -> UUID:
        email = validators.normalize_email(email)
        validators.validate_signup(email, password)

        try:
            response = self.baas.auth_client().auth.sign_up({"email": email, "password": password})
        except (AuthError, httpx.HTTPError) as e:
            logger.error(f"Supabase signup failed for {email}: {str(e)}")
            if "already registered" in str(e).lower():
                raise SignupError("Email already exists. Please login instead.") from e
            raise SignupError("Failed to create account. Please try again.") from e

        user = getattr(response, "user", None)
        try:
            user_id = UUID(str(user.id))
        except (AttributeError, ValueError) as e:
            logger.error(f"Supabase signup for {email} returned no usable user id")
            raise SignupError("Failed to create account. Please try again.") from e

        logger.info(f"Created account {user_id}")
        return user_id

    # -------- Login --------
    def login(self, email: str, password: str) -> Tuple[SessionOut, UUID]:
        """Password grant; the user id comes from the embedded user object."""
        email = validators.normalize_email(email)
        try:
            response = self.baas.auth_client().auth.sign_in_with_password({"email": email, "password": password})
        except (AuthError, httpx.HTTPError) as e:
            logger.warning(f"Supabase login failed for {email}: {str(e)}")
            raise AuthenticationError("Invalid email or password") from e

        session = getattr(response, "session", None)
        user = getattr(response, "user", None)
        if session is None or user is None:
            logger.warning(f"Supabase login for {email} returned no session or user")
            raise AuthenticationError("Invalid email or password")

        try:
            user_id = UUID(str(user.id))
        except ValueError as e:
            raise AuthenticationError("Invalid email or password") from e

        return (
            SessionOut(
                access_token=session.access_token,
                refresh_token=session.refresh_token,
                expires_in=session.expires_in,
                token_type=session.token_type,
            ),
            user_id,
        )

    # -------- Profile completion --------
    def complete_profile(self, email: str, password: str, profile: ProfileIn) -> CompletedProfile:
        """
        Validate, re-authenticate with the given credentials, then upsert the
        profile row for the authenticated user.
        """
        required = (email, password, profile.date_of_birth, profile.primary_skill, profile.skill_to_learn, profile.bio)
        if any(not (value or "").strip() for value in required):
            raise InputError("All fields are required")

        born = validators.parse_date(profile.date_of_birth, validators.COMPLETION_DATE_FORMATS)
        if born is None:
            raise InputError("Invalid date format. Use DD/MM/YYYY")

        validators.validate_profile_rules(profile.primary_skill, profile.skill_to_learn, profile.bio, born=born)

        try:
            session, user_id = self.login(email, password)
        except AuthenticationError as e:
            raise AuthenticationError("Invalid credentials or account not activated") from e

        try:
            row = self.profiles.upsert(user_id, {
                "date_of_birth": born.isoformat(),
                "primary_skill": profile.primary_skill,
                "skill_to_learn": profile.skill_to_learn,
                "bio": profile.bio.strip(),
                "role": DEFAULT_ROLE,
            })
        except UpstreamError as e:
            raise UpstreamError("Failed to save profile. Please try again.") from e

        return CompletedProfile(session=session, profile=ProfileOut.from_row(row))

    # -------- Profile reads / picture --------
    def get_profile(self, user_id: UUID) -> Optional[ProfileOut]:
        row = self.profiles.get(user_id)
        return ProfileOut.from_row(row) if row else None

    def update_profile_picture(self, user_id: UUID, url: Optional[str]) -> bool:
        """False when the user has no profile row to attach the picture to."""
        return self.profiles.update_picture(user_id, url) is not None
