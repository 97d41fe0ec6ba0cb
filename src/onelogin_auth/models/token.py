"""Service token model and the OAuth token wire records."""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, PrivateAttr

from ..utils.date_utils import ZERO_TIME, ensure_utc, parse_rfc3339_nano, utc_now

GRANT_CLIENT_CREDENTIALS = "client_credentials"
GRANT_REFRESH_TOKEN = "refresh_token"


class TokenRequest(BaseModel):
    """Body of a token issuance or refresh request."""

    grant_type: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class TokenResponse(BaseModel):
    """One token record as returned by ``/auth/oauth2/token``."""

    access_token: str
    account_id: int = 0
    created_at: str = ""
    expires_in: int = 0
    refresh_token: str = ""
    token_type: str = ""

    model_config = {"extra": "ignore"}


class ServiceToken(BaseModel):
    """OAuth token authorizing the client's API calls.

    Tokens are valid for ``expires_in`` seconds (3600 by default on OneLogin)
    and can be renewed with the refresh token, which is single-use.
    """

    access_token: str
    account_id: int = 0
    created_at: datetime = ZERO_TIME
    expires_in: int = 0
    token_type: str = ""

    _refresh_token: str = PrivateAttr(default="")

    @classmethod
    def from_response(cls, record: TokenResponse) -> "ServiceToken":
        """Build a token from a response record.

        An unparseable ``created_at`` becomes ``ZERO_TIME`` rather than an error.
        """
        created_at = parse_rfc3339_nano(record.created_at) or ZERO_TIME
        token = cls(
            access_token=record.access_token,
            account_id=record.account_id,
            created_at=created_at,
            expires_in=record.expires_in,
            token_type=record.token_type,
        )
        token._refresh_token = record.refresh_token
        return token

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once more than ``expires_in`` seconds passed since creation."""
        now = ensure_utc(now) if now is not None else utc_now()
        return now - ensure_utc(self.created_at) > timedelta(seconds=self.expires_in)

    def _overwrite(self, other: "ServiceToken") -> None:
        # Plain attribute writes; nothing here can raise half-way through.
        self.access_token = other.access_token
        self.account_id = other.account_id
        self.created_at = other.created_at
        self.expires_in = other.expires_in
        self.token_type = other.token_type
        self._refresh_token = other._refresh_token

    def __repr__(self) -> str:
        return (
            f"ServiceToken(account_id={self.account_id}, token_type={self.token_type!r}, "
            f"created_at={self.created_at.isoformat()}, expires_in={self.expires_in})"
        )
