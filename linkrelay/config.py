import os
from pathlib import Path
from dotenv import load_dotenv
from loguru import logger
from linkrelay.utils.logger import config as configure_logger

# Load .env as early as possible so all downstream imports see the intended env
load_dotenv()

# Configure logger after env is loaded (LOG_LEVEL honored)
configure_logger()


def _as_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on")


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        logger.warning(f"Invalid float value {val!r}; using {default}")
        return default


# --- Paths ---
DATA_DIR = Path(os.getenv("DATA_DIR", Path.cwd() / "data")).expanduser()
logger.debug(f"DATA_DIR={DATA_DIR}")

# --- Resolver backend ---
# Base URL that the google.com/serverN prefixes are rewritten to.
RELAY_BACKEND_BASE_URL = (
    os.getenv("RELAY_BACKEND_BASE_URL", "https://drive2.cscloud12.online").strip()
    or "https://drive2.cscloud12.online"
).rstrip("/")
logger.debug(f"RELAY_BACKEND_BASE_URL={RELAY_BACKEND_BASE_URL}")

# Transport timeout per variant call in seconds; 0 waits indefinitely.
RELAY_HTTP_TIMEOUT_SECONDS = max(
    0.0, _as_float(os.getenv("RELAY_HTTP_TIMEOUT_SECONDS"), 30.0)
)
logger.debug(f"RELAY_HTTP_TIMEOUT_SECONDS={RELAY_HTTP_TIMEOUT_SECONDS}")

# Browser identity sent upstream. The client hints below must describe the
# same browser, so only override this together with a matching build.
RELAY_USER_AGENT = os.getenv(
    "RELAY_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36",
).strip()

# --- Credentials ---
# Either all three static values are set, or the token/u/v triple is parsed
# from the credentials script once at startup.
RELAY_CREDENTIALS_SCRIPT = Path(
    os.getenv("RELAY_CREDENTIALS_SCRIPT", DATA_DIR / "deobfuscated.js")
).expanduser()
RELAY_TOKEN = os.getenv("RELAY_TOKEN", "").strip()
RELAY_USER_ID = os.getenv("RELAY_USER_ID", "").strip()
RELAY_VERSION = os.getenv("RELAY_VERSION", "").strip()
logger.debug(
    f"RELAY_CREDENTIALS_SCRIPT={RELAY_CREDENTIALS_SCRIPT}, "
    f"static credentials={'set' if RELAY_TOKEN else 'unset'}"
)

# --- CORS ---
# Comma separated origins; "*" allows any origin (credentials are then disabled).
CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if o.strip()
]
CORS_ALLOW_CREDENTIALS = _as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", None), False)
logger.debug(
    f"CORS_ALLOW_ORIGINS={CORS_ALLOW_ORIGINS}, CORS_ALLOW_CREDENTIALS={CORS_ALLOW_CREDENTIALS}"
)

# --- Logging ---
RELAY_LOG_TO_FILE = _as_bool(os.getenv("RELAY_LOG_TO_FILE", None), False)

# --- Server ---
RELAY_RELOAD = _as_bool(os.getenv("RELAY_RELOAD", None), False)
RELAY_HOST = os.getenv("RELAY_HOST", "0.0.0.0").strip() or "0.0.0.0"
RELAY_PORT = int(os.getenv("RELAY_PORT", "8000") or 8000)
