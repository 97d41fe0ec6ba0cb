"""User login models: request/response records, users and MFA handles."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class MFADevice(BaseModel):
    """An enrolled second-factor device."""

    type: str = Field(default="", alias="device_type")
    id: int = Field(default=0, alias="device_id")

    model_config = {"frozen": True, "populate_by_name": True}


class MFAVerification(BaseModel):
    """Continuation handle for a pending MFA challenge.

    Only valid for completing the login attempt that produced it. The
    provider's ``expires_at`` is carried as-is and not checked locally.
    """

    state_token: str
    expires_at: Optional[str] = None

    model_config = {"frozen": True}


class AuthenticatedUser(BaseModel):
    """User information returned by a login attempt."""

    id: int = 0
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstname")
    last_name: Optional[str] = Field(default=None, alias="lastname")

    # Populated only while MFA is pending
    devices: list[MFADevice] = Field(default_factory=list, exclude=True)
    mfa_response: Optional[MFAVerification] = Field(default=None, exclude=True)

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="after")
    def check_mfa_pairing(self) -> "AuthenticatedUser":
        if bool(self.devices) != (self.mfa_response is not None):
            raise ValueError("devices and mfa_response must be set together")
        return self

    @property
    def mfa_pending(self) -> bool:
        return self.mfa_response is not None


class LoginRequest(BaseModel):
    """Body of ``POST /api/1/login/auth``."""

    username_or_email: str
    password: str
    subdomain: str


class LoginResponseRecord(BaseModel):
    """One record of the login endpoint's response array.

    The provider reuses this shape for rejections, pending logins and MFA
    challenges, so every field is optional.
    """

    expires_at: Optional[str] = None
    return_to_url: Optional[str] = None
    session_token: Optional[str] = None
    status: Optional[str] = None
    user: Optional[AuthenticatedUser] = None
    state_token: Optional[str] = None
    callback_url: Optional[str] = None
    devices: Optional[list[MFADevice]] = None

    model_config = {"extra": "ignore"}


class LoginOutcomeKind(str, Enum):
    """Outcome of a login attempt."""

    SUCCESS = "success"
    MFA_REQUIRED = "mfa_required"
    PENDING = "pending"
    DENIED = "denied"


class LoginOutcome(BaseModel):
    """Classified login response."""

    kind: LoginOutcomeKind
    user: Optional[AuthenticatedUser] = None

    model_config = {"frozen": True}
