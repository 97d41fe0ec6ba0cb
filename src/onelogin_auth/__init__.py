"""Client-side authentication for the OneLogin REST API."""

__version__ = "0.1.0"

from .auth.authenticator import UserAuthenticator, classify_login_response  # noqa: E402
from .auth.provider import ServiceTokenProvider  # noqa: E402
from .auth.token_manager import ServiceTokenManager  # noqa: E402
from .client import Client  # noqa: E402
from .config import ConnectionProfiles, OneLoginConfig  # noqa: E402
from .context import Context  # noqa: E402
from .models.token import ServiceToken  # noqa: E402
from .models.user import (  # noqa: E402
    AuthenticatedUser,
    LoginOutcome,
    LoginOutcomeKind,
    MFADevice,
    MFAVerification,
)
from .utils.exceptions import (  # noqa: E402
    APIError,
    AuthenticationFailed,
    ConfigurationError,
    DeadlineExceeded,
    MFARequired,
    OneLoginError,
    RequestCancelled,
    ResponseDecodeError,
    TransportError,
)

__all__ = [
    "__version__",
    "Client",
    "Context",
    "OneLoginConfig",
    "ConnectionProfiles",
    "ServiceToken",
    "ServiceTokenManager",
    "ServiceTokenProvider",
    "UserAuthenticator",
    "classify_login_response",
    "AuthenticatedUser",
    "LoginOutcome",
    "LoginOutcomeKind",
    "MFADevice",
    "MFAVerification",
    "OneLoginError",
    "ConfigurationError",
    "TransportError",
    "APIError",
    "ResponseDecodeError",
    "RequestCancelled",
    "DeadlineExceeded",
    "AuthenticationFailed",
    "MFARequired",
]
