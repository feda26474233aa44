import logging
import threading

from adapter.sanity.client import SanityClient
from utils.settings import get_settings

logger = logging.getLogger(__name__)

_client_cache: SanityClient | None = None
_client_lock = threading.Lock()


def reset_client():
    global _client_cache
    with _client_lock:
        _client_cache = None


def get_sanity_client() -> SanityClient:
    """Get the process-wide Sanity client, creating it on first use.

    The client is immutable once built; the lock only guards the first
    initialization, since sync dependencies run in a thread pool.
    """
    global _client_cache

    if _client_cache is not None:
        return _client_cache

    with _client_lock:
        if _client_cache is None:
            settings = get_settings()
            _client_cache = SanityClient(
                project_id=settings.sanity_project_id,
                dataset=settings.sanity_dataset,
                api_version=settings.sanity_api_version,
                token=settings.sanity_write_token,
                use_cdn=True,
                timeout=settings.http_timeout_seconds,
            )
            logger.info(
                "[SANITY] Client initialized",
                extra={"projectId": settings.sanity_project_id, "dataset": settings.sanity_dataset},
            )
        return _client_cache
