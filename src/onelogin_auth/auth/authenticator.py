"""End-user login against the OneLogin API."""

import logging
from typing import TYPE_CHECKING, Optional

from ..context import Context
from ..models.user import (
    AuthenticatedUser,
    LoginOutcome,
    LoginOutcomeKind,
    LoginRequest,
    LoginResponseRecord,
    MFAVerification,
)
from ..utils.exceptions import AuthenticationFailed

if TYPE_CHECKING:
    from ..client import Client

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/1/login/auth"
MFA_CALLBACK_SUFFIX = "verify_factor"


def classify_login_response(records: list[LoginResponseRecord]) -> LoginOutcome:
    """
    Classify the login endpoint's response array.

    The endpoint reuses one shape for every outcome, so the record count and
    the ``callback_url`` suffix are the only signals, checked in that order:

    - not exactly one record: DENIED
    - no ``user``: PENDING
    - ``callback_url`` ending in ``verify_factor`` with devices: MFA_REQUIRED
    - anything else: DENIED

    A ``verify_factor`` callback that lists no devices is DENIED too: a user
    carries an MFA handle only together with at least one device to verify
    with, so such a response cannot be continued.

    Args:
        records: Decoded response array

    Returns:
        The classified outcome
    """
    if len(records) != 1:
        return LoginOutcome(kind=LoginOutcomeKind.DENIED)

    record = records[0]
    if record.user is None:
        return LoginOutcome(kind=LoginOutcomeKind.PENDING)

    callback_url = record.callback_url or ""
    if callback_url.endswith(MFA_CALLBACK_SUFFIX) and record.devices:
        user = record.user.model_copy(
            update={
                "devices": list(record.devices),
                "mfa_response": MFAVerification(
                    state_token=record.state_token or "",
                    expires_at=record.expires_at,
                ),
            }
        )
        return LoginOutcome(kind=LoginOutcomeKind.MFA_REQUIRED, user=user)

    return LoginOutcome(kind=LoginOutcomeKind.DENIED)


class UserAuthenticator:
    """Drives the user login flow."""

    def __init__(self, transport: "Client"):
        self.transport = transport

    def authenticate(
        self,
        username_or_email: str,
        password: str,
        ctx: Optional[Context] = None,
    ) -> Optional[AuthenticatedUser]:
        """
        Authenticate a user from an email (or username) and a password.

        Args:
            username_or_email: Login name or email address
            password: User password
            ctx: Cancellation context

        Returns:
            The user with ``devices`` and ``mfa_response`` set when a second
            factor is required, or None when the provider returned no user

        Raises:
            AuthenticationFailed: If the provider rejected the login
            TransportError: If the request or service authorization fails
        """
        request = self.transport.new_request(
            "POST",
            LOGIN_PATH,
            LoginRequest(
                username_or_email=username_or_email,
                password=password,
                subdomain=self.transport.subdomain,
            ),
        )
        self.transport.add_authorization(ctx, request)

        records = self.transport.do(ctx, request, LoginResponseRecord)
        outcome = classify_login_response(records)

        if outcome.kind is LoginOutcomeKind.MFA_REQUIRED:
            logger.info(f"MFA verification required for user {outcome.user.id}")
            return outcome.user
        if outcome.kind is LoginOutcomeKind.PENDING:
            logger.debug("Login response carried no user")
            return None
        raise AuthenticationFailed()
