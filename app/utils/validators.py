import re
from datetime import date, datetime
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from app.services.errors import InputError

# Matches the options offered by the frontend
VALID_SKILLS = (
    "Music",
    "Art",
    "Cooking",
    "Photography",
    "Design",
    "Programming",
    "Writing",
    "Fitness",
    "Gardening",
)

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)

MIN_PASSWORD_LENGTH = 6
MIN_AGE = 13
MAX_AGE = 120
MAX_SKILL_LENGTH = 100
MIN_BIO_LENGTH = 10
MAX_BIO_LENGTH = 1000

# Profile completion: frontend sends DD/MM/YYYY, ISO accepted as fallback
COMPLETION_DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d")
# Profile update: ISO first, then day-first, then month-first
UPDATE_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def looks_like_email(email: str) -> bool:
    return EMAIL_RE.match(email or "") is not None


def is_valid_skill(skill: str) -> bool:
    return skill in VALID_SKILLS


def parse_date(value: str, formats: Iterable[str]) -> Optional[date]:
    """Try each format in order; None when nothing matches."""
    value = (value or "").strip()
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def age_in_years(born: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return relativedelta(today, born).years


def is_valid_age(born: date, today: Optional[date] = None) -> bool:
    return MIN_AGE <= age_in_years(born, today) <= MAX_AGE


def validate_signup(email: str, password: str) -> None:
    if not looks_like_email(email):
        raise InputError("Invalid email format")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise InputError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def validate_profile_rules(
    primary_skill: str,
    skill_to_learn: str,
    bio: str,
    born: Optional[date] = None,
    today: Optional[date] = None,
) -> None:
    """
    Rules every profile write must satisfy.

    Raises InputError with a field-specific message on the first violation.
    """
    if born is not None and not is_valid_age(born, today):
        raise InputError(f"Age must be between {MIN_AGE} and {MAX_AGE} years")

    if len(primary_skill) > MAX_SKILL_LENGTH or len(skill_to_learn) > MAX_SKILL_LENGTH:
        raise InputError(f"Skills must be less than {MAX_SKILL_LENGTH} characters each")

    if not is_valid_skill(primary_skill):
        raise InputError("Invalid primary skill. Please select from available options.")
    if not is_valid_skill(skill_to_learn):
        raise InputError("Invalid skill to learn. Please select from available options.")
    if primary_skill == skill_to_learn:
        raise InputError("Primary skill and skill to learn cannot be the same.")

    bio = (bio or "").strip()
    if not bio:
        raise InputError("Bio cannot be empty")
    if len(bio) > MAX_BIO_LENGTH:
        raise InputError(f"Bio must be less than {MAX_BIO_LENGTH} characters")
    if len(bio) < MIN_BIO_LENGTH:
        raise InputError(f"Bio must be at least {MIN_BIO_LENGTH} characters long")
