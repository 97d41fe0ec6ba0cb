"""Tests for service token acquisition and refresh.

Coverage:
* client credentials request format and Authorization header
* refresh replaces every field, including the single-use refresh token
* failed refresh (HTTP, network, decoding, cancellation) leaves the token untouched
"""

from datetime import datetime

import pytest
import pytz
import requests

from conftest import FakeSession, make_response, token_record
from onelogin_auth.client import Client
from onelogin_auth.context import Context
from onelogin_auth.models.token import ServiceToken
from onelogin_auth.utils.exceptions import APIError, RequestCancelled, ResponseDecodeError


def _snapshot(token: ServiceToken) -> tuple:
    return (token.model_dump(), token._refresh_token)


# --------------------------------------------------------------------------- #
# acquire                                                                     #
# --------------------------------------------------------------------------- #
def test_acquire_sends_client_credentials(client: Client, session: FakeSession) -> None:
    session.queue([token_record()])

    client.tokens.manager.acquire()

    request = session.sent[0]
    assert request.method == "POST"
    assert request.url == "https://api.us.onelogin.com/auth/oauth2/token"
    assert request.headers["Authorization"] == "client_id: cid, client_secret: csecret"
    assert request.headers["Content-Type"] == "application/json"
    assert session.body(0) == {"grant_type": "client_credentials"}


def test_acquire_builds_token(client: Client, session: FakeSession) -> None:
    session.queue(
        [
            token_record(
                access_token="at-xyz",
                refresh_token="rt-xyz",
                created_at="2015-11-11T03:36:18.714Z",
                expires_in=36000,
                account_id=555,
                token_type="bearer",
            )
        ]
    )

    token = client.tokens.manager.acquire()

    assert token.access_token == "at-xyz"
    assert token.account_id == 555
    assert token.created_at == datetime(2015, 11, 11, 3, 36, 18, 714000, tzinfo=pytz.utc)
    assert token.expires_in == 36000
    assert token.token_type == "bearer"
    assert token._refresh_token == "rt-xyz"


def test_acquire_propagates_api_error(client: Client, session: FakeSession) -> None:
    session.queue({"status": {"error": True, "code": 401, "message": "Unauthorized"}}, 401)

    with pytest.raises(APIError) as excinfo:
        client.tokens.manager.acquire()

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Unauthorized"


def test_acquire_propagates_network_error_unchanged(client: Client, session: FakeSession) -> None:
    error = requests.ConnectionError("connection refused")
    session.queue_reply(error)

    with pytest.raises(requests.ConnectionError) as excinfo:
        client.tokens.manager.acquire()

    assert excinfo.value is error


def test_acquire_rejects_empty_response(client: Client, session: FakeSession) -> None:
    session.queue([])

    with pytest.raises(ResponseDecodeError):
        client.tokens.manager.acquire()


# --------------------------------------------------------------------------- #
# refresh                                                                     #
# --------------------------------------------------------------------------- #
@pytest.fixture
def token(client: Client, session: FakeSession) -> ServiceToken:
    session.queue([token_record(access_token="old-at", refresh_token="old-rt")])
    return client.tokens.manager.acquire()


def test_refresh_sends_current_tokens(client: Client, session: FakeSession, token: ServiceToken) -> None:
    session.queue([token_record(access_token="new-at", refresh_token="new-rt")])

    client.tokens.manager.refresh(token)

    request = session.sent[1]
    assert request.url == "https://api.us.onelogin.com/auth/oauth2/token"
    assert "Authorization" not in request.headers
    assert session.body(1) == {
        "grant_type": "refresh_token",
        "access_token": "old-at",
        "refresh_token": "old-rt",
    }


def test_refresh_overwrites_all_fields(client: Client, session: FakeSession, token: ServiceToken) -> None:
    session.queue(
        [
            token_record(
                access_token="new-at",
                refresh_token="new-rt",
                created_at="2030-01-02T03:04:05.000000006Z",
                expires_in=7200,
                account_id=99,
                token_type="Bearer",
            )
        ]
    )

    client.tokens.manager.refresh(token)

    assert token.access_token == "new-at"
    assert token.account_id == 99
    assert token.created_at == datetime(2030, 1, 2, 3, 4, 5, tzinfo=pytz.utc)
    assert token.expires_in == 7200
    assert token.token_type == "Bearer"
    assert token._refresh_token == "new-rt"
    assert token.model_dump()["access_token"] == "new-at"


def test_refresh_discards_old_refresh_token(client: Client, session: FakeSession, token: ServiceToken) -> None:
    session.queue([token_record(access_token="at-2", refresh_token="rt-2")])
    session.queue([token_record(access_token="at-3", refresh_token="rt-3")])

    client.tokens.manager.refresh(token)
    client.tokens.manager.refresh(token)

    assert session.body(2)["refresh_token"] == "rt-2"
    assert session.body(2)["access_token"] == "at-2"


@pytest.mark.parametrize(
    "reply",
    [
        make_response({"status": {"error": True, "message": "Invalid refresh token"}}, 401),
        make_response([]),
        make_response([token_record(), token_record()]),
        make_response([{"account_id": "not-a-number"}]),
        requests.Timeout("read timed out"),
    ],
    ids=["http-401", "empty", "two-records", "bad-shape", "timeout"],
)
def test_failed_refresh_leaves_token_unchanged(
    client: Client, session: FakeSession, token: ServiceToken, reply
) -> None:
    before = _snapshot(token)
    session.queue_reply(reply)

    with pytest.raises(Exception):
        client.tokens.manager.refresh(token)

    assert _snapshot(token) == before


def test_cancellation_during_refresh_leaves_token_unchanged(
    client: Client, session: FakeSession, token: ServiceToken
) -> None:
    before = _snapshot(token)
    ctx = Context()

    def cancel_while_in_flight(request):
        ctx.cancel()
        return make_response([token_record(access_token="late-at")])

    session.queue_reply(cancel_while_in_flight)

    with pytest.raises(RequestCancelled):
        client.tokens.manager.refresh(token, ctx=ctx)

    assert _snapshot(token) == before


def test_refresh_does_not_check_expiry(client: Client, session: FakeSession, token: ServiceToken) -> None:
    assert not token.is_expired()
    session.queue([token_record(access_token="forced")])

    client.tokens.manager.refresh(token)

    assert token.access_token == "forced"
