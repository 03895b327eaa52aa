from __future__ import annotations

import asyncio
from typing import Optional

from loguru import logger

from .client import ResolverClient
from .payloads import VARIANT_KEYS, build_payloads
from .types import (
    Credentials,
    ResolutionRequest,
    ResolutionResponse,
    TransformedTarget,
    VariantResult,
)
from .urls import build_target


async def resolve_all(
    target: TransformedTarget,
    credentials: Optional[Credentials],
    referer: str,
    client: ResolverClient,
) -> dict[str, Optional[str]]:
    """
    Run every variant lookup concurrently and merge the results by variant key.

    Each lookup runs to completion on its own; one failing variant never affects
    another. The returned mapping always holds every key of VARIANT_KEYS.

    Raises:
        CredentialsUnavailableError: If `credentials` is None (before any call is made).
    """
    payloads = build_payloads(credentials, target.file_name)
    keys = list(payloads)
    outcomes = await asyncio.gather(
        *(
            client.resolve(key, payloads[key], target.endpoint_url, referer)
            for key in keys
        ),
        return_exceptions=True,
    )

    results: dict[str, Optional[str]] = {key: None for key in VARIANT_KEYS}
    for key, outcome in zip(keys, outcomes):
        if isinstance(outcome, VariantResult):
            results[outcome.variant_key] = outcome.resolved_url
        elif isinstance(outcome, BaseException):
            logger.opt(exception=outcome).error(
                f"Variant {key} raised unexpectedly: {outcome}"
            )
    resolved = sum(1 for v in results.values() if v)
    logger.info(f"Resolved {resolved}/{len(results)} variants for {target.file_name}")
    return results


async def resolve_links(
    request: ResolutionRequest,
    credentials: Optional[Credentials],
    client: ResolverClient,
) -> ResolutionResponse:
    """
    Transform the source URL and fan out all variant lookups for it.

    Parameters:
        request (ResolutionRequest): Source URL supplied by the caller.
        credentials (Credentials | None): Loaded credentials.
        client (ResolverClient): Client used for the backend calls.

    Returns:
        ResolutionResponse: Echo of the requested URL, the processed endpoint, the file name and the per-variant results.
    """
    target = build_target(request.source_url)
    results = await resolve_all(target, credentials, request.source_url, client)
    return ResolutionResponse(
        requested_url=request.source_url,
        processed_url=target.endpoint_url,
        file_name=target.file_name,
        results=results,
    )
