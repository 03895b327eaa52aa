from __future__ import annotations

import sys
from loguru import logger

from linkrelay.config import RELAY_HOST, RELAY_PORT, RELAY_RELOAD


def _reload_enabled() -> bool:
    """Reload is opt-in via RELAY_RELOAD and never used by frozen builds."""
    if getattr(sys, "frozen", False) or hasattr(sys, "_MEIPASS"):
        return False
    return RELAY_RELOAD


def run_server(app_obj):
    """Run the Uvicorn server with the configured host and port."""
    import uvicorn

    logger.info(
        f"Server running on http://{RELAY_HOST}:{RELAY_PORT} "
        f"(API endpoint: /api/t?url=YOUR_FILE_URL)"
    )
    if _reload_enabled():
        logger.info("Uvicorn reload enabled (development mode).")
        uvicorn.run(
            "linkrelay.main:app",
            host=RELAY_HOST,
            port=RELAY_PORT,
            reload=True,
        )
    else:
        uvicorn.run(
            app_obj,
            host=RELAY_HOST,
            port=RELAY_PORT,
            reload=False,
        )


def main() -> None:
    from linkrelay.main import app

    run_server(app)
