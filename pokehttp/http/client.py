from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable

import httpx

from pokehttp.errors import TransportError, TransportTimeout
from pokehttp.models import RequestSpec, Response

logger = logging.getLogger("pokehttp.client")

DEFAULT_TIMEOUT_S = 30.0

DROP_REQUEST_HEADERS = {
    "connection",
    "proxy-connection",
    "keep-alive",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "content-length",
}

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_BAD_VALUE_CHARS = ("\r", "\n", "\0")


def _valid_header(key: str, value: str) -> bool:
    if not _TOKEN_RE.match(key):
        return False
    if any(ch in value for ch in _BAD_VALUE_CHARS):
        return False
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


def outgoing_headers(headers: dict[str, str]) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for key, value in headers.items():
        if key.lower() in DROP_REQUEST_HEADERS:
            continue
        if not _valid_header(key, value):
            logger.debug("dropping invalid header %r", key)
            continue
        out.append((key, value))
    return out


def headers_list_to_text(headers: Iterable[tuple[str, str]]) -> str:
    return "\n".join(f"{key}: {value}" for key, value in headers)


class HttpClient:
    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        follow_redirects: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._follow_redirects = follow_redirects
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout_s,
                follow_redirects=self._follow_redirects,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def execute(self, request: RequestSpec) -> Response:
        """Send an already-resolved request.

        Raises TransportError for anything that keeps a response from
        arriving; HTTP error statuses are ordinary responses.
        """
        client = self._get_client()
        content = request.body.encode("utf-8") if request.body is not None else None

        logger.info("sending %s %s", request.method, request.url)
        start = time.perf_counter()
        try:
            response = await client.request(
                method=request.method.value,
                url=request.url,
                headers=outgoing_headers(request.headers),
                content=content,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", request.method, request.url)
            raise TransportTimeout from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("%s %s failed: %s", request.method, request.url, e)
            raise TransportError(f"Request failed: {e}") from e
        elapsed = time.perf_counter() - start

        result = Response(
            status=response.status_code,
            status_text=httpx.codes.get_reason_phrase(response.status_code) or "Unknown",
            headers=response.headers.multi_items(),
            body=response.text,
            elapsed=elapsed,
        )
        logger.info("%s %s -> %d in %.3fs", request.method, request.url, result.status, elapsed)
        return result
