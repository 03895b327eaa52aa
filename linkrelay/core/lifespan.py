from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from linkrelay.core.relay import ResolverClient, load_credentials


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Load credentials once and open the shared resolver client.

    A supplier placed on `app.state.credentials_supplier` before startup takes
    precedence over the configured one.
    """
    supplier = getattr(app.state, "credentials_supplier", None)
    app.state.credentials = load_credentials(supplier)
    app.state.resolver_client = ResolverClient()
    logger.info("Application startup: resolver client ready.")
    try:
        yield
    finally:
        client = getattr(app.state, "resolver_client", None)
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.warning(f"Closing resolver client failed: {e}")
        app.state.resolver_client = None
