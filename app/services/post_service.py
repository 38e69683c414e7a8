import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from app.repositories.posts import JoinTier, PostListing, PostRepository
from app.schemas.post import EnhancedPostOut, PostCreate, PostOut
from app.services.errors import InputError

logger = logging.getLogger(__name__)


def _non_blank(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return value


def _embedded_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    # PostgREST embeds a to-one relation as an object, but may return a list
    profile = row.get("profiles")
    if isinstance(profile, list):
        profile = profile[0] if profile else None
    return profile or {}


def enrich_joined(row: Dict[str, Any], current_user_id: Optional[str]) -> EnhancedPostOut:
    post = PostOut.from_row(row)
    profile = _embedded_profile(row)
    is_own_post = current_user_id is not None and current_user_id == post.user_id

    author_name = _non_blank(profile.get("full_name")) or ("You" if is_own_post else "Anonymous User")
    author_role = _non_blank(profile.get("role")) or _non_blank(profile.get("primary_skill")) or "User"

    return EnhancedPostOut(
        **post.model_dump(exclude={"user_id"}),
        user_id=post.user_id or "",
        author_name=author_name,
        author_avatar=_non_blank(profile.get("profile_picture_url")),
        author_role=author_role,
        author_primary_skill=_non_blank(profile.get("primary_skill")),
        is_own_post=is_own_post,
    )


def enrich_plain(row: Dict[str, Any], current_user_id: Optional[str]) -> EnhancedPostOut:
    post = PostOut.from_row(row)
    post_user_id = post.user_id or ""
    is_own_post = bool(post_user_id) and current_user_id == post_user_id

    return EnhancedPostOut(
        **post.model_dump(exclude={"user_id"}),
        user_id=post_user_id,
        author_name="You" if is_own_post else "Member",
        author_avatar=None,
        author_role="User",
        author_primary_skill=None,
        is_own_post=is_own_post,
    )


class PostService:
    def __init__(self, posts: PostRepository):
        self.posts = posts

    def create_post(self, user_id: UUID, post: PostCreate) -> PostOut:
        content = post.content.strip()
        if not content:
            raise InputError("Post content is required")
        row = self.posts.create(user_id, content, _non_blank(post.image_url))
        logger.info(f"User {user_id} created post {row.get('id')}")
        return PostOut.from_row(row)

    def list_feed(self, current_user_id: Optional[UUID] = None) -> Tuple[JoinTier, List[EnhancedPostOut]]:
        listing: PostListing = self.posts.list_with_profiles()
        viewer = str(current_user_id) if current_user_id else None
        enrich = enrich_joined if listing.has_profiles else enrich_plain
        logger.info(f"Listing {len(listing.rows)} posts ({listing.tier.value})")
        return listing.tier, [enrich(row, viewer) for row in listing.rows]
