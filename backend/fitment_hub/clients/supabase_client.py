"""
Supabase access for the fitment stores.

One service-role client is shared by every store in the process
(FastAPI workers and Celery tasks alike).
"""
import logging

from supabase import create_client, Client

from fitment_hub.core.config import Settings

logger = logging.getLogger("supabase_client")


class SupabaseClient:
    """Lazily created service-role client for the fitment database."""

    _instance: Client | None = None

    def __init__(self, settings: Settings) -> None:
        self._url = settings.supabase_url
        self._key = settings.supabase_service_role_key

        if not self._url or not self._key:
            raise RuntimeError(
                "Fitment data store unavailable: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
            )

    def get_client(self) -> Client:
        if SupabaseClient._instance is None:
            SupabaseClient._instance = create_client(self._url, self._key)
            logger.info("fitment database client ready url=%s", self._url)
        return SupabaseClient._instance

    @property
    def client(self) -> Client:
        return self.get_client()
