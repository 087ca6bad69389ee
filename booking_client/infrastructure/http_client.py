"""
HTTP client for the remote booking service.
Separated from the state manager so tests can inject their own transport.
"""

import httpx
from typing import Optional
from booking_client.core.config import get_settings


class HttpClient:
    """Singleton httpx client with connection pooling."""

    _instance: Optional[httpx.AsyncClient] = None

    @classmethod
    def get_client(cls) -> httpx.AsyncClient:
        """Get or create the shared client instance."""
        if cls._instance is None:
            settings = get_settings()
            cls._instance = httpx.AsyncClient(
                base_url=settings.BOOKING_API_URL,
                timeout=settings.REQUEST_TIMEOUT,
                headers={"Content-Type": "application/json"},
            )
        return cls._instance

    @classmethod
    async def close(cls):
        """Close the shared client."""
        if cls._instance:
            await cls._instance.aclose()
            cls._instance = None

# Convenience function
def get_http_client() -> httpx.AsyncClient:
    """Get the shared client instance."""
    return HttpClient.get_client()
