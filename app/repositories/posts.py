import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
from supabase import PostgrestAPIError

from app.services.errors import UpstreamError
from app.services.supabase import BaasClient

logger = logging.getLogger(__name__)

POSTS_TABLE = "posts"
PROFILE_COLUMNS = "full_name,primary_skill,bio,profile_picture_url,role"
# Embed through the explicit foreign key, then let PostgREST infer it
JOINED_SELECT = f"*, profiles!posts_user_id_fkey({PROFILE_COLUMNS})"
FALLBACK_SELECT = f"*, profiles({PROFILE_COLUMNS})"
DEFAULT_LIMIT = 50


class JoinTier(str, Enum):
    JOINED = "joined"
    JOIN_FALLBACK = "join_fallback"
    DEGRADED = "degraded"


@dataclass
class PostListing:
    tier: JoinTier
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def has_profiles(self) -> bool:
        return self.tier is not JoinTier.DEGRADED


class PostRepository:
    def __init__(self, baas: BaasClient):
        self.baas = baas

    def _table(self):
        return self.baas.rest.table(POSTS_TABLE)

    def _select(self, columns: str, limit: int) -> List[Dict[str, Any]]:
        return self._table().select(columns).order("created_at", desc=True).limit(limit).execute().data

    def create(self, user_id: UUID, content: str, image_url: Optional[str] = None) -> Dict[str, Any]:
        payload = {"user_id": str(user_id), "content": content, "image_url": image_url}
        try:
            response = self._table().insert(payload).execute()
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Post creation failed for user {user_id}: {str(e)}")
            raise UpstreamError("Failed to create post") from e

        if not response.data:
            raise UpstreamError("No post returned from creation")
        return response.data[0]

    def list(self, limit: int = DEFAULT_LIMIT) -> List[Dict[str, Any]]:
        try:
            return self._select("*", limit)
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Listing posts failed: {str(e)}")
            raise UpstreamError("Failed to retrieve posts") from e

    def list_with_profiles(self, limit: int = DEFAULT_LIMIT) -> PostListing:
        """
        Best-effort author join.

        Tries the embed through the named foreign key, then the unqualified
        embed, then plain posts. Only a failure of the plain query raises.
        """
        for tier, columns in ((JoinTier.JOINED, JOINED_SELECT), (JoinTier.JOIN_FALLBACK, FALLBACK_SELECT)):
            try:
                return PostListing(tier=tier, rows=self._select(columns, limit))
            except (PostgrestAPIError, httpx.HTTPError) as e:
                logger.warning(f"Post query with profile embed failed ({tier.value}): {str(e)}")

        return PostListing(tier=JoinTier.DEGRADED, rows=self.list(limit))
