"""Service token lifecycle: acquisition, expiry detection and refresh."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..context import Context
from ..models.token import (
    GRANT_CLIENT_CREDENTIALS,
    GRANT_REFRESH_TOKEN,
    ServiceToken,
    TokenRequest,
    TokenResponse,
)
from ..utils.exceptions import ResponseDecodeError

if TYPE_CHECKING:
    from ..client import Client

logger = logging.getLogger(__name__)

TOKEN_PATH = "/auth/oauth2/token"


class ServiceTokenManager:
    """Issues and renews the client's OAuth token.

    The manager is a mechanism only: it never decides when to refresh and
    holds no token itself. Callers sharing a token must serialize refresh()
    calls; concurrent refreshes of the same token race (last writer wins).
    """

    def __init__(self, transport: "Client"):
        self.transport = transport

    def acquire(self, ctx: Optional[Context] = None) -> ServiceToken:
        """
        Issue a new token with the client credentials grant.

        Args:
            ctx: Cancellation context

        Returns:
            Newly issued token

        Raises:
            TransportError: If the request fails or the response is malformed
        """
        config = self.transport.config
        request = self.transport.new_request(
            "POST", TOKEN_PATH, TokenRequest(grant_type=GRANT_CLIENT_CREDENTIALS)
        )
        request.headers["Authorization"] = (
            f"client_id: {config.client_id}, client_secret: {config.client_secret}"
        )

        record = self._single_record(self.transport.do(ctx, request, TokenResponse))
        token = ServiceToken.from_response(record)
        logger.debug(f"Service token issued for account {token.account_id}")
        return token

    @staticmethod
    def is_expired(token: ServiceToken, now: Optional[datetime] = None) -> bool:
        """
        Check token validity.

        Args:
            token: Token to check
            now: Reference time (defaults to the current UTC time)

        Returns:
            True if ``now - expires_in`` is after the creation time
        """
        return token.is_expired(now)

    def refresh(self, token: ServiceToken, ctx: Optional[Context] = None) -> None:
        """
        Renew ``token`` in place with its refresh token.

        Every field, the refresh token included, is replaced by the server's
        values. On any error the token is left unchanged.

        Args:
            token: Token to renew
            ctx: Cancellation context

        Raises:
            TransportError: If the request fails or the response is malformed
        """
        request = self.transport.new_request(
            "POST",
            TOKEN_PATH,
            TokenRequest(
                grant_type=GRANT_REFRESH_TOKEN,
                access_token=token.access_token,
                refresh_token=token._refresh_token,
            ),
        )

        record = self._single_record(self.transport.do(ctx, request, TokenResponse))
        token._overwrite(ServiceToken.from_response(record))
        logger.debug(f"Service token refreshed for account {token.account_id}")

    @staticmethod
    def _single_record(records: list[TokenResponse]) -> TokenResponse:
        if len(records) != 1:
            raise ResponseDecodeError(
                f"Expected one token record, got {len(records)}"
            )
        return records[0]
