import logging
from uuid import UUID

from app.repositories.profiles import ProfileRepository
from app.schemas.profile import ProfileIn, ProfileOut
from app.services.errors import InputError
from app.utils import validators

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, profiles: ProfileRepository):
        self.profiles = profiles

    def update_profile(self, user_id: UUID, profile: ProfileIn) -> ProfileOut:
        primary_skill = profile.primary_skill.strip()
        skill_to_learn = profile.skill_to_learn.strip()
        if not primary_skill:
            raise InputError("Primary skill is required")
        if not skill_to_learn:
            raise InputError("Skill to learn is required")

        # An empty date clears the column
        born = None
        raw_date = profile.date_of_birth.strip()
        if raw_date:
            born = validators.parse_date(raw_date, validators.UPDATE_DATE_FORMATS)
            if born is None:
                raise InputError(f"Invalid date format: '{raw_date}'. Use YYYY-MM-DD")

        bio = profile.bio.strip()
        validators.validate_profile_rules(primary_skill, skill_to_learn, bio, born=born)

        row = self.profiles.upsert(user_id, {
            "date_of_birth": born.isoformat() if born else None,
            "primary_skill": primary_skill,
            "skill_to_learn": skill_to_learn,
            "bio": bio,
        })
        logger.info(f"Updated profile for user {user_id}")
        return ProfileOut.from_row(row)
