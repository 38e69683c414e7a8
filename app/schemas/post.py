from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

# --- Posts ---
class PostCreate(BaseModel):
    content: str = Field(..., max_length=5000)
    image_url: Optional[str] = None

class PostOut(BaseModel):
    id: str
    user_id: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PostOut":
        user_id = row.get("user_id")
        return cls(
            id=str(row.get("id") or ""),
            user_id=str(user_id) if user_id is not None else None,
            content=row.get("content"),
            image_url=row.get("image_url"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

# --- Posts enriched with a snapshot of the author's profile ---
class EnhancedPostOut(BaseModel):
    id: str
    user_id: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    author_name: str
    author_avatar: Optional[str] = None
    author_role: str
    author_primary_skill: Optional[str] = None
    is_own_post: bool
