"""HTTP transport for the OneLogin REST API."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from . import __version__
from .auth.authenticator import UserAuthenticator
from .auth.provider import ServiceTokenProvider
from .auth.token_manager import ServiceTokenManager
from .config import OneLoginConfig
from .context import Context
from .utils.exceptions import APIError, ResponseDecodeError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Client:
    """Connection to the OneLogin API.

    Owns the service token (through ``tokens``) and exposes the user login
    flow as ``auth``.
    """

    def __init__(
        self,
        config: OneLoginConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection configuration
            session: HTTP session (a new one is created if omitted)
        """
        self.config = config
        self.session = session or requests.Session()
        self.user_agent = f"onelogin-auth/{__version__}"

        self.tokens = ServiceTokenProvider(ServiceTokenManager(self))
        self.auth = UserAuthenticator(self)

    @property
    def base_url(self) -> str:
        return self.config.api_url

    @property
    def subdomain(self) -> str:
        return self.config.subdomain or ""

    def new_request(
        self, method: str, path: str, body: Optional[Any] = None
    ) -> requests.PreparedRequest:
        """
        Build a JSON request against the base URL.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: Pydantic model or JSON-serialisable value

        Returns:
            Prepared request ready for do()
        """
        if isinstance(body, BaseModel):
            body = body.model_dump(by_alias=True, exclude_none=True)

        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if body is not None:
            headers["Content-Type"] = "application/json"

        request = requests.Request(
            method=method,
            url=f"{self.base_url}/{path.lstrip('/')}",
            headers=headers,
            json=body,
        )
        return self.session.prepare_request(request)

    def add_authorization(
        self, ctx: Optional[Context], request: requests.PreparedRequest
    ) -> None:
        """
        Attach the service bearer token, acquiring or refreshing it if needed.

        Raises:
            TransportError: If no valid token can be obtained
        """
        access_token = self.tokens.get_access_token(ctx)
        request.headers["Authorization"] = f"bearer:{access_token}"

    def do(
        self,
        ctx: Optional[Context],
        request: requests.PreparedRequest,
        model: type[ModelT],
    ) -> list[ModelT]:
        """
        Send a request and decode the response array.

        Args:
            ctx: Cancellation context (None for background)
            request: Request built by new_request()
            model: Record type of the response array

        Returns:
            Decoded records

        Raises:
            ContextError: If the context is cancelled or past its deadline
                before the response arrives
            APIError: If the API answers with a non-2xx status
            ResponseDecodeError: If the body is not an array of ``model``
        """
        ctx = ctx or Context.background()
        ctx.raise_if_done()

        timeout = self.config.timeout
        remaining = ctx.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)

        logger.debug(f"{request.method} {request.url}")
        response = self._send(ctx, request, timeout)

        # A cancellation that raced the call wins; the response is dropped.
        ctx.raise_if_done()

        if not response.ok:
            raise APIError(response.status_code, _error_message(response), request.url)

        if not response.content:
            return []

        try:
            payload = response.json()
        except ValueError as e:
            raise ResponseDecodeError(f"Invalid JSON from {request.url}: {e}") from e

        # The API wraps records in {"status": ..., "data": [...]}.
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        if payload is None:
            return []

        try:
            return TypeAdapter(list[model]).validate_python(payload)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"Unexpected response shape from {request.url}: {e}"
            ) from e

    def _send(
        self, ctx: Context, request: requests.PreparedRequest, timeout: float
    ) -> requests.Response:
        """Send on a worker thread, returning early if the context ends first."""
        wakeup = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="onelogin-http")
        try:
            future = executor.submit(self.session.send, request, timeout=timeout)
            future.add_done_callback(lambda _: wakeup.set())
            unsubscribe = ctx.on_cancel(wakeup.set)
            try:
                while not future.done():
                    ctx.raise_if_done()
                    wakeup.wait(ctx.remaining())
            finally:
                unsubscribe()
            ctx.raise_if_done()
            return future.result()
        finally:
            # The abandoned request finishes on its own thread.
            executor.shutdown(wait=False)


def _error_message(response: requests.Response) -> str:
    """Extract a readable error message from an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason or "Unknown error"

    status = payload.get("status") if isinstance(payload, dict) else None
    if isinstance(status, dict) and status.get("message"):
        return str(status["message"])
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text[:200]
