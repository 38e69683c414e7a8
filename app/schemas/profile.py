from pydantic import BaseModel
from typing import Any, Dict, List, Optional

# --- Profiles (auth.users.id -> profiles.id) ---
class ProfileIn(BaseModel):
    date_of_birth: str
    primary_skill: str
    skill_to_learn: str
    bio: str

class ProfileOut(BaseModel):
    id: str
    user_id: str  # same value as id
    date_of_birth: str = ""  # ISO "YYYY-MM-DD"
    primary_skill: str = ""
    skill_to_learn: str = ""
    bio: str = ""
    profile_picture_url: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProfileOut":
        profile_id = str(row.get("id") or "")
        return cls(
            id=profile_id,
            user_id=profile_id,
            date_of_birth=row.get("date_of_birth") or "",
            primary_skill=row.get("primary_skill") or "",
            skill_to_learn=row.get("skill_to_learn") or "",
            bio=row.get("bio") or "",
            profile_picture_url=row.get("profile_picture_url"),
            full_name=row.get("full_name"),
            role=row.get("role"),
        )

class SkillsOut(BaseModel):
    skills: List[str]
    total: int
