from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger

from linkrelay.core.relay import (
    Credentials,
    CredentialsUnavailableError,
    ResolutionRequest,
    ResolverClient,
    resolve_links,
)


router = APIRouter(prefix="/api")


def get_credentials(request: Request) -> Optional[Credentials]:
    """
    Return the credentials loaded at startup, or None when loading failed.
    """
    return getattr(request.app.state, "credentials", None)


def get_resolver_client(request: Request) -> Optional[ResolverClient]:
    """
    Return the resolver client owned by the lifespan, or None outside of it.
    """
    return getattr(request.app.state, "resolver_client", None)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"status": False, "error": message}
    )


@router.get("/t")
@router.get("/resolve-links")
async def resolve(
    url: Optional[str] = Query(default=None, description="Source media URL"),
    credentials: Optional[Credentials] = Depends(get_credentials),
    client: Optional[ResolverClient] = Depends(get_resolver_client),
):
    """
    Resolve a hosted media URL into the per-variant download links.
    """
    if not url:
        logger.warning("Resolve request without 'url' parameter")
        return _error(400, "Missing 'url' query parameter.")

    if credentials is None:
        logger.error("Resolve request rejected: credentials not loaded")
        return _error(500, str(CredentialsUnavailableError()))

    if client is None:
        logger.error("Resolve request rejected: resolver client not initialized")
        return _error(500, "Server not initialized: resolver client unavailable.")

    logger.info(f"Resolve request for {url}")
    try:
        response = await resolve_links(ResolutionRequest(source_url=url), credentials, client)
    except Exception as exc:
        logger.exception(f"Fatal error while resolving {url}: {exc}")
        return _error(500, str(exc))
    return response.to_dict()
