import logging
from typing import Any, Dict, Optional
from uuid import UUID

import httpx
from supabase import PostgrestAPIError

from app.services.errors import UpstreamError
from app.services.supabase import BaasClient

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"


class ProfileRepository:
    """
    The single write path for the `profiles` table.

    Rows are keyed by `id`, which is the Supabase Auth user id.
    """

    def __init__(self, baas: BaasClient):
        self.baas = baas

    def _table(self):
        return self.baas.rest.table(PROFILES_TABLE)

    def upsert(self, user_id: UUID, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = {"id": str(user_id), **fields}
        logger.info(f"Upserting profile for user {user_id}")
        try:
            response = self._table().upsert(payload).execute()
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Profile upsert failed for user {user_id}: {str(e)}")
            raise UpstreamError("Failed to save profile") from e

        if not response.data:
            logger.error(f"Profile upsert for user {user_id} returned no rows")
            raise UpstreamError("Failed to save profile")
        return response.data[0]

    def get(self, user_id: UUID) -> Optional[Dict[str, Any]]:
        try:
            response = self._table().select("*").eq("id", str(user_id)).execute()
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Profile lookup failed for user {user_id}: {str(e)}")
            raise UpstreamError("Failed to retrieve profile") from e
        return response.data[0] if response.data else None

    def update_picture(self, user_id: UUID, url: Optional[str]) -> Optional[Dict[str, Any]]:
        """Patch `profile_picture_url`; None when no row matched."""
        try:
            response = self._table().update({"profile_picture_url": url}).eq("id", str(user_id)).execute()
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Profile picture update failed for user {user_id}: {str(e)}")
            raise UpstreamError("Failed to update profile picture") from e
        return response.data[0] if response.data else None

    def delete(self, user_id: UUID) -> bool:
        try:
            response = self._table().delete().eq("id", str(user_id)).execute()
        except (PostgrestAPIError, httpx.HTTPError) as e:
            logger.error(f"Profile delete failed for user {user_id}: {str(e)}")
            raise UpstreamError("Failed to delete profile") from e
        return bool(response.data)
