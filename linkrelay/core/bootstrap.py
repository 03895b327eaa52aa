from __future__ import annotations

from dotenv import load_dotenv
from loguru import logger
from linkrelay.utils.logger import config as configure_logger, ensure_log_path
from linkrelay.config import DATA_DIR, RELAY_BACKEND_BASE_URL, RELAY_LOG_TO_FILE


def init() -> None:
    """Initialize environment and logging early.

    - Loads .env
    - Ensures the log file path under DATA_DIR when file logging is enabled
    - Configures loguru
    """
    load_dotenv()
    if RELAY_LOG_TO_FILE:
        ensure_log_path(DATA_DIR)
    configure_logger()
    logger.info(f"Resolver backend: {RELAY_BACKEND_BASE_URL}")
