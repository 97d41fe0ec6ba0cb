"""Abstract base class for authentication providers."""

from abc import ABC, abstractmethod
from typing import Optional

from ..context import Context


class AuthProvider(ABC):
    """Abstract base class for authentication providers."""

    @abstractmethod
    def get_access_token(self, ctx: Optional[Context] = None) -> str:
        """
        Get a valid access token, acquiring or refreshing as needed.

        Args:
            ctx: Cancellation context for any token request

        Returns:
            Valid access token string

        Raises:
            TransportError: If the token request fails
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Forget the held token."""
