from __future__ import annotations

from typing import Any, Iterable, Optional

from fastapi import FastAPI
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

# The relay only serves GET endpoints.
ALLOWED_METHODS = ["GET"]


def cors_options(
    origins: Iterable[str], allow_credentials: bool
) -> Optional[dict[str, Any]]:
    """
    Build CORSMiddleware keyword arguments for the configured origins.

    Origins are stripped of a trailing slash and de-duplicated in order. Returns
    None when no origin is configured. A "*" entry collapses the list to the
    wildcard and turns credentials off.
    """
    cleaned: list[str] = []
    for origin in origins:
        origin = origin.strip().rstrip("/")
        if origin and origin not in cleaned:
            cleaned.append(origin)
    if not cleaned:
        return None
    if "*" in cleaned:
        if allow_credentials:
            logger.warning("CORS wildcard origin configured; credentials disabled")
        return {
            "allow_origins": ["*"],
            "allow_credentials": False,
            "allow_methods": ALLOWED_METHODS,
            "allow_headers": ["*"],
        }
    return {
        "allow_origins": cleaned,
        "allow_credentials": allow_credentials,
        "allow_methods": ALLOWED_METHODS,
        "allow_headers": ["*"],
    }


def apply_cors_middleware(
    app: FastAPI, *, origins: Iterable[str], allow_credentials: bool
) -> None:
    """Install CORSMiddleware on `app` unless no origin is configured."""
    options = cors_options(origins, allow_credentials)
    if options is None:
        logger.debug("CORS disabled")
        return
    logger.info(f"CORS enabled for {options['allow_origins']}")
    app.add_middleware(CORSMiddleware, **options)
