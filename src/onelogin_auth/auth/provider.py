"""Service token provisioning for outgoing API calls."""

import logging
import threading
from typing import Optional

from ..context import Context
from ..models.token import ServiceToken
from .base import AuthProvider
from .token_manager import ServiceTokenManager

logger = logging.getLogger(__name__)


class ServiceTokenProvider(AuthProvider):
    """Holds the connection's service token and keeps it valid.

    A lock makes this provider the single writer of its token, so concurrent
    callers never refresh the same token twice.
    """

    def __init__(self, manager: ServiceTokenManager):
        self.manager = manager
        self._token: Optional[ServiceToken] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[ServiceToken]:
        return self._token

    def get_access_token(self, ctx: Optional[Context] = None) -> str:
        """
        Get a valid access token (acquire if none is held, refresh if expired).

        Returns:
            Valid access token string

        Raises:
            TransportError: If acquisition or refresh fails
        """
        with self._lock:
            if self._token is None:
                self.manager.transport.config.validate_credentials()
                self._token = self.manager.acquire(ctx)
                logger.info("Service token acquired")
            elif self.manager.is_expired(self._token):
                self.manager.refresh(self._token, ctx)
                logger.info("Service token refreshed")
            return self._token.access_token

    def clear_cache(self) -> None:
        """Forget the held token; the next call acquires a new one."""
        with self._lock:
            self._token = None
        logger.info("Service token cleared")
