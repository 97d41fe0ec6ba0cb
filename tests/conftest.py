"""Pytest configuration shared across the suite."""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional, Union

import pytest
import pytz
import requests

from onelogin_auth.client import Client
from onelogin_auth.config import OneLoginConfig


def make_response(payload: Any, status_code: int = 200) -> requests.Response:
    """Build a requests.Response carrying a JSON payload."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    return response


def rfc3339(dt: datetime) -> str:
    """Format a UTC datetime with nanosecond precision, as the API does."""
    return dt.astimezone(pytz.utc).strftime("%Y-%m-%dT%H:%M:%S.%f") + "000Z"


def token_record(
    access_token: str = "at-1",
    refresh_token: str = "rt-1",
    created_at: Optional[str] = None,
    expires_in: int = 36000,
    account_id: int = 42,
    token_type: str = "bearer",
) -> dict[str, Any]:
    return {
        "access_token": access_token,
        "account_id": account_id,
        "created_at": created_at if created_at is not None else rfc3339(datetime.now(pytz.utc)),
        "expires_in": expires_in,
        "refresh_token": refresh_token,
        "token_type": token_type,
    }


Reply = Union[requests.Response, Exception, Callable[[requests.PreparedRequest], requests.Response]]


class FakeSession(requests.Session):
    """Session that records sent requests and replays queued replies."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[requests.PreparedRequest] = []
        self.timeouts: list[Any] = []
        self.replies: list[Reply] = []

    def queue(self, payload: Any, status_code: int = 200) -> None:
        self.replies.append(make_response(payload, status_code))

    def queue_reply(self, reply: Reply) -> None:
        self.replies.append(reply)

    def send(self, request, **kwargs):  # noqa: ANN001
        self.sent.append(request)
        self.timeouts.append(kwargs.get("timeout"))
        if not self.replies:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    def body(self, index: int) -> dict[str, Any]:
        return json.loads(self.sent[index].body)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a test."""
    yield
    logger = logging.getLogger("onelogin_auth")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def config() -> OneLoginConfig:
    # Use model_construct to bypass environment variable loading
    return OneLoginConfig.model_construct(
        client_id="cid",
        client_secret="csecret",
        subdomain="acme",
        region="us",
        timeout=30.0,
    )


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(config: OneLoginConfig, session: FakeSession) -> Client:
    return Client(config, session=session)
