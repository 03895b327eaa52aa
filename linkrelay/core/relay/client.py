from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx
from loguru import logger

from linkrelay.config import RELAY_HTTP_TIMEOUT_SECONDS, RELAY_USER_AGENT
from .errors import InvalidBackendResponse
from .types import VariantResult

# Static browser fingerprint; it does not vary per request.
BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": RELAY_USER_AGENT,
    "sec-ch-ua": '"Not;A=Brand";v="99", "Google Chrome";v="139", "Chromium";v="139"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
}

# The backend answers with the resolved link under one of these keys.
RESULT_KEYS: tuple[str, ...] = ("url", "mega")

_BODY_EXCERPT = 200

# Reserved and already-escaped characters stay as they are; everything else,
# non-ASCII included, is percent-encoded so the header value is ASCII.
_REFERER_SAFE = ":/?&=%#@!$'()*+,;[]~"


def _build_async_client() -> httpx.AsyncClient:
    """
    Build the AsyncClient shared by all variant calls, without env proxies.
    """
    logger.trace("Building resolver AsyncClient")
    timeout = httpx.Timeout(RELAY_HTTP_TIMEOUT_SECONDS or None)
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        trust_env=False,
    )


def encode_referer(url: str) -> str:
    """Percent-encode a client URL so it can travel in the Referer header."""
    return quote(url, safe=_REFERER_SAFE)


def build_headers(referer: str) -> dict[str, str]:
    """Return request headers for one backend call with the given Referer."""
    headers = {"Content-Type": "application/json", "Referer": encode_referer(referer)}
    headers.update(BROWSER_HEADERS)
    return headers


def extract_resolved_link(data: Any) -> Optional[str]:
    """
    Pick the resolved link out of a backend response body.

    Keys are checked in RESULT_KEYS order and the first non-empty string wins.
    Returns None when the body is not an object or carries neither key.
    """
    if not isinstance(data, Mapping):
        logger.debug(f"Backend body is not an object: {type(data).__name__}")
        return None
    for key in RESULT_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
        if value:
            logger.debug(f"Ignoring non-string '{key}' in backend body: {value!r}")
    return None


class ResolverClient:
    """
    Issues single variant lookups against the resolver backend.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._client = http_client or _build_async_client()

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(
        self, payload: Mapping[str, Any], endpoint_url: str, referer: str
    ) -> Any:
        """
        POST a payload to the backend and return the decoded JSON body.

        Raises:
            httpx.HTTPError: On transport failures and non-2xx responses.
            InvalidBackendResponse: If the body is not valid JSON.
        """
        response = await self._client.post(
            endpoint_url, json=dict(payload), headers=build_headers(referer)
        )
        logger.trace(
            "Backend POST {} status={}", endpoint_url, response.status_code
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidBackendResponse(str(exc)) from exc

    async def resolve(
        self,
        variant_key: str,
        payload: Mapping[str, Any],
        endpoint_url: str,
        referer: str,
    ) -> VariantResult:
        """
        Resolve one variant; failures are logged and reported as an empty result.

        Parameters:
            variant_key (str): Variant identifier, used for the result and log lines.
            payload (Mapping[str, Any]): Request body from the payload builder.
            endpoint_url (str): Transformed backend endpoint.
            referer (str): Original client URL, sent as the Referer header.

        Returns:
            VariantResult: The resolved link, or `resolved_url=None` when the call failed
            or the backend did not return a link.
        """
        try:
            data = await self.send(payload, endpoint_url, referer)
        except httpx.HTTPStatusError as exc:
            body = exc.response.text[:_BODY_EXCERPT]
            logger.warning(
                f"Failed to get link for {variant_key}: status={exc.response.status_code} body={body!r}"
            )
            return VariantResult(variant_key=variant_key)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning(
                f"Failed to get link for {variant_key}: {type(exc).__name__}: {exc}"
            )
            return VariantResult(variant_key=variant_key)
        except InvalidBackendResponse as exc:
            logger.warning(f"Failed to get link for {variant_key}: invalid JSON ({exc})")
            return VariantResult(variant_key=variant_key)

        resolved = extract_resolved_link(data)
        if resolved is None:
            logger.info(f"Backend returned no link for {variant_key}")
        else:
            logger.debug(f"Resolved {variant_key} -> {resolved}")
        return VariantResult(variant_key=variant_key, resolved_url=resolved)
