"""
Supabase client configuration for storage services.
Handles Supabase initialization with lazy client creation and cleanup.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from .settings import get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager.
    The service role key is used so the API can write to the photo bucket
    on behalf of authenticated users.
    """

    def __init__(self):
        self._client: Optional[Client] = None
        self.settings = get_settings()

    @property
    def client(self) -> Client:
        """Get or create Supabase client with lazy initialization."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self) -> Client:
        """Create Supabase client with proper configuration."""
        try:
            client_options = ClientOptions(
                schema="public",
                headers={
                    "User-Agent": f"FlorApi/{self.settings.APP_VERSION}",
                },
                auto_refresh_token=False,
                persist_session=False,
            )

            client = create_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_SERVICE_ROLE_KEY or self.settings.SUPABASE_ANON_KEY,
                options=client_options
            )

            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}")

    def get_storage_bucket(self, bucket_name: Optional[str] = None):
        """
        Get Supabase storage client for one bucket.

        Args:
            bucket_name: Storage bucket name (default: SUPABASE_STORAGE_BUCKET)
        """
        return self.client.storage.from_(bucket_name or self.settings.SUPABASE_STORAGE_BUCKET)

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform health check on Supabase storage.

        Returns:
            dict: Health status of the storage service
        """
        try:
            self.client.storage.get_bucket(self.settings.SUPABASE_STORAGE_BUCKET)
            return {"status": "healthy"}
        except Exception as e:
            logger.warning(f"Supabase storage check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}

    def close(self):
        """Drop the cached client."""
        if self._client:
            self._client = None
            logger.info("Supabase client connections closed")


@lru_cache()
def get_supabase_manager() -> SupabaseManager:
    """
    Get cached Supabase manager instance.

    Returns:
        SupabaseManager: Singleton Supabase manager
    """
    return SupabaseManager()


async def cleanup_supabase():
    """Cleanup Supabase connections on application shutdown."""
    get_supabase_manager().close()
    logger.info("Supabase cleanup completed")
