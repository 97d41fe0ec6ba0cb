"""Custom exceptions for the OneLogin authentication client."""

from typing import Optional


class OneLoginError(Exception):
    """Base exception for OneLogin client errors."""


class ConfigurationError(OneLoginError):
    """Raised when configuration is invalid."""


class TransportError(OneLoginError):
    """Raised when an HTTP exchange cannot be completed or understood."""


class APIError(TransportError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, url: Optional[str] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.url = url


class ResponseDecodeError(TransportError):
    """Raised when a response body does not match the expected shape."""


class ContextError(OneLoginError):
    """Base exception for aborted request contexts."""


class RequestCancelled(ContextError):
    """Raised when the caller cancelled the context."""


class DeadlineExceeded(ContextError):
    """Raised when the context deadline passed."""


class AuthenticationFailed(OneLoginError):
    """Raised when the provider rejects a user login."""

    def __init__(self, message: str = "authentication failed"):
        super().__init__(message)


class MFARequired(OneLoginError):
    """MFA verification required.

    Not raised by ``UserAuthenticator.authenticate``, which signals a pending
    MFA challenge by returning a user carrying ``mfa_response``.
    """

    def __init__(self, message: str = "mfa verification required"):
        super().__init__(message)
