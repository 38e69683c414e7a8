import logging
from dataclasses import dataclass
from typing import Any, Dict

import httpx
from supabase import Client, ClientOptions, create_client

from app.config import Settings, mask_key

logger = logging.getLogger(__name__)

USER_AGENT = "barterup-api/1.0"


@dataclass(frozen=True)
class BaasClient:
    """
    Supabase handles shared by every request.

    `rest` carries the service-role key and is only used for table access.
    Auth calls go through a fresh anon-key client so that a signed-in user
    session never replaces the service-role Authorization header.
    """

    url: str
    anon_key: str
    service_role_key: str
    rest: Client
    timeout: float = 30.0

    def auth_client(self) -> Client:
        return create_client(
            self.url,
            self.anon_key,
            options=ClientOptions(
                auto_refresh_token=False,
                persist_session=False,
                headers={"User-Agent": USER_AGENT},
            ),
        )

    def rest_headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "User-Agent": USER_AGENT,
        }

    def probe(self, table: str = "profiles") -> Dict[str, Any]:
        """Raw GET against the REST API, used by the diagnostic route."""
        url = f"{self.url}/rest/v1/{table}"
        response = httpx.get(url, params={"limit": 1}, headers=self.rest_headers(), timeout=self.timeout)
        return {"supabase_status": response.status_code, "body": response.text}


def create_baas_client(settings: Settings) -> BaasClient:
    logger.info(f"Creating Supabase client for {settings.supabase_url}")
    logger.info(f"Supabase service role key: {mask_key(settings.supabase_service_role_key)}")

    rest = create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
            postgrest_client_timeout=settings.supabase_timeout,
            headers={"User-Agent": USER_AGENT},
        ),
    )
    return BaasClient(
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        service_role_key=settings.supabase_service_role_key,
        rest=rest,
        timeout=settings.supabase_timeout,
    )
