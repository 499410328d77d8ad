"""Microsoft Graph API client with MSAL authentication."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING, Any, TypeVar
from urllib import request as urllib_request
from urllib.error import HTTPError

import msal

from sharepoint_resources.schema.codec import (
    ODATA_NEXT_LINK,
    decode,
    decode_collection,
    parse_object,
)

if TYPE_CHECKING:
    from sharepoint_resources.config import AppConfig

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"
CLIENT_REQUEST_ID_HEADER = "client-request-id"

R = TypeVar("R")


class GraphAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response.

    Attributes:
        status_code: HTTP status of the response.
        message: Graph ``error.message``, or the HTTP reason when absent.
        code: Graph ``error.code`` (e.g. "itemNotFound"), if the body had one.
        request_id: The ``client-request-id`` sent with the failed request.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        label = f"{status_code} {code}" if code else str(status_code)
        super().__init__(f"Graph API error {label}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code
        self.request_id = request_id


class GraphClient:
    """Authenticated client for Microsoft Graph API."""

    def __init__(self, client_id: str, client_secret: str, tenant_id: str) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
        """
        authority = f"{AUTHORITY_BASE_URL}/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )

    def _acquire_token(self) -> str:
        """Acquire a Bearer token using client credentials flow.

        Returns:
            Access token string.

        Raises:
            GraphAuthError: If MSAL cannot acquire a token.
        """
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=GRAPH_SCOPES) or {}
        if "access_token" not in result:
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "No description provided")
            logger.error("[_acquire_token] MSAL token acquisition failed; error:%s", error)
            raise GraphAuthError(f"Token acquisition failed: {error}: {description}")
        return str(result["access_token"])

    def _fetch(self, path: str) -> bytes:
        """Send an authenticated GET and return the raw response body.

        Each request carries a fresh ``client-request-id`` so a failure can be
        matched against Graph's own diagnostics.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        token = self._acquire_token()
        request_id = str(uuid.uuid4())
        req = urllib_request.Request(
            f"{GRAPH_BASE_URL}{path}",
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                CLIENT_REQUEST_ID_HEADER: request_id,
            },
            method="GET",
        )
        try:
            with urllib_request.urlopen(req) as resp:
                body: bytes = resp.read()
        except HTTPError as exc:
            code, message = _error_detail(exc)
            logger.error(
                "[_fetch] Graph request failed; path:%s;status:%d;code:%s;request_id:%s",
                path,
                exc.code,
                code,
                request_id,
            )
            raise GraphApiError(exc.code, message, code=code, request_id=request_id) from exc
        logger.debug(
            "[_fetch] response received; path:%s;bytes:%d;request_id:%s",
            path,
            len(body),
            request_id,
        )
        return body

    def get(self, path: str) -> dict[str, Any]:
        """Perform an authenticated GET request to the Graph API.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/').

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
            MalformedPayloadError: If the body is not a JSON object.
        """
        return parse_object(self._fetch(path))

    def get_resource(self, path: str, cls: type[R], *, strict: bool = True) -> R:
        """GET a single resource and decode it into ``cls``."""
        return decode(cls, self.get(path), strict=strict)

    def get_collection(
        self, path: str, cls: type[R], *, strict: bool = True
    ) -> tuple[list[R], str | None]:
        """GET one page of a collection and decode its items.

        Returns:
            A tuple of (items, next_link) where next_link is the
            @odata.nextLink of the page, or None on the last page.
        """
        response = self.get(path)
        items = decode_collection(cls, response, strict=strict)
        next_link = response.get(ODATA_NEXT_LINK)
        return items, next_link if isinstance(next_link, str) else None


def _error_detail(exc: HTTPError) -> tuple[str | None, str]:
    """Return the Graph (error.code, error.message) of an HTTP error body.

    The message falls back to the HTTP reason when the body carries none.
    """
    try:
        error = json.loads(exc.read()).get("error", {})
        code, message = error.get("code"), error.get("message")
    except (ValueError, AttributeError, RecursionError):
        code, message = None, None
    return (
        str(code) if code else None,
        str(message) if message else str(exc.reason),
    )


def graph_client_from_config(config: AppConfig) -> GraphClient:
    """Construct a GraphClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GraphClient instance.
    """
    return GraphClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        tenant_id=config.tenant_id,
    )
