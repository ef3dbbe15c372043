"""
Upstream source client and error types.

Both inputs of the lineup pipeline are plain HTTP GETs:
- RotoWire lineups page: server-rendered HTML, no auth
- FPL bootstrap-static: JSON object whose "elements" array is the roster

Key features:
- Async context manager for proper resource cleanup
- One shared httpx.AsyncClient per request so both fetches can run concurrently
- No retries: a failed fetch raises immediately and the caller gives up
"""

import logging
from typing import Any, Optional

import httpx

from rotolink.config import Settings, settings as default_settings
from rotolink.players.identity import CanonicalPlayer

logger = logging.getLogger(__name__)

ROTOWIRE = "rotowire"
FPL = "fpl"

SOURCE_LABELS = {ROTOWIRE: "RotoWire", FPL: "FPL"}


class UpstreamError(Exception):
    """
    Base class for failures talking to an upstream source.

    Attributes:
        source: ROTOWIRE or FPL
        status_code: HTTP status of the failed response, if there was one
    """

    kind = "error"

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.source = source
        self.status_code = status_code

    @property
    def code(self) -> str:
        """Stable machine-readable code, e.g. 'rotowire_fetch_error'."""
        return f"{self.source}_{self.kind}"


class UpstreamFetchError(UpstreamError):
    """Non-2xx response or network failure. Never retried."""

    kind = "fetch_error"


class UpstreamDecodeError(UpstreamError):
    """Response body could not be decoded into the expected shape."""

    kind = "decode_error"


def parse_roster(payload: Any) -> list[CanonicalPlayer]:
    """
    Convert a decoded bootstrap-static payload into canonical players.

    Roster order is preserved; the identity matcher relies on it.

    Raises:
        UpstreamDecodeError: If the payload has no "elements" array or an
            element lacks id, web_name or team
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("elements"), list):
        raise UpstreamDecodeError(FPL, "FPL payload has no 'elements' array")

    try:
        return [CanonicalPlayer.from_fpl_element(element) for element in payload["elements"]]
    except (KeyError, TypeError, ValueError) as exc:
        raise UpstreamDecodeError(FPL, f"Malformed FPL element: {exc!r}") from exc


class SourceClient:
    """
    HTTP client for the two lineup sources.

    Usage:
        async with SourceClient() as client:
            html = await client.fetch_lineups_page()
            roster = await client.fetch_roster()

    An existing httpx.AsyncClient can be passed in (tests use one backed by
    httpx.MockTransport); it is not closed on exit.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or default_settings
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "SourceClient":
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.http_timeout_seconds),
                follow_redirects=True,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("SourceClient must be used as an async context manager")
        return self._client

    async def _get(self, source: str, url: str, headers: dict[str, str]) -> httpx.Response:
        label = SOURCE_LABELS[source]
        try:
            response = await self.client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("%s request failed: %s", label, exc)
            raise UpstreamFetchError(source, f"{label} fetch error: {exc}") from exc

        if not response.is_success:
            logger.error("%s returned HTTP %d", label, response.status_code)
            raise UpstreamFetchError(
                source,
                f"{label} fetch error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug("%s fetched %d bytes", label, len(response.content))
        return response

    async def fetch_lineups_page(self) -> str:
        """
        Fetch the RotoWire lineups page.

        Raises:
            UpstreamFetchError: On network failure or non-2xx status
        """
        response = await self._get(
            ROTOWIRE,
            self.config.rotowire_lineups_url,
            {"User-Agent": self.config.http_user_agent, "Accept": "text/html"},
        )
        return response.text

    async def fetch_roster(self) -> list[CanonicalPlayer]:
        """
        Fetch and decode the FPL roster.

        Raises:
            UpstreamFetchError: On network failure or non-2xx status
            UpstreamDecodeError: If the body is not the expected JSON
        """
        response = await self._get(
            FPL,
            self.config.fpl_bootstrap_url,
            {
                "User-Agent": self.config.http_user_agent,
                "Accept": "application/json",
                "Referer": self.config.fpl_referer,
            },
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamDecodeError(FPL, "FPL response is not valid JSON") from exc
        return parse_roster(payload)
