from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

from loguru import logger

from linkrelay.config import RELAY_BACKEND_BASE_URL
from .types import TransformedTarget

UNKNOWN_FILE_NAME = "unknown_file"

_SOURCE_BASE = "https://google.com"

# (source server, backend server). Order matters: only the first hit is
# rewritten, and server2x/server1x mirrors collapse onto one backend server.
_SERVER_MAP: tuple[tuple[str, str], ...] = (
    ("server5", "server5"),
    ("server4", "server4"),
    ("server3", "server3"),
    ("server21", "server2"),
    ("server22", "server2"),
    ("server23", "server2"),
    ("server11", "server1"),
    ("server12", "server1"),
    ("server13", "server1"),
)

# (extension form, query form). Every entry is applied, the bot-specific
# forms first so the plain extension does not swallow them.
EXTENSION_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    (".mp4?bot=cscloud2bot&code=", "?ext=mp4&bot=cscloud2bot&code="),
    (".mp4", "?ext=mp4"),
    (".mkv?bot=cscloud2bot&code=", "?ext=mkv&bot=cscloud2bot&code="),
    (".mkv", "?ext=mkv"),
    (".zip", "?ext=zip"),
)

_BAD_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def server_replacements(backend_base: str | None = None) -> list[tuple[str, str]]:
    """
    Build the ordered (source prefix, backend prefix) table for a backend base URL.

    Parameters:
        backend_base (str | None): Base URL of the resolver backend; defaults to RELAY_BACKEND_BASE_URL.

    Returns:
        list[tuple[str, str]]: Pairs such as ("https://google.com/server5/1:/", "<backend>/server5/").
    """
    base = (backend_base or RELAY_BACKEND_BASE_URL).rstrip("/")
    return [
        (f"{_SOURCE_BASE}/{source}/1:/", f"{base}/{target}/")
        for source, target in _SERVER_MAP
    ]


def replace_server(url: str, backend_base: str | None = None) -> str:
    """
    Rewrite the first matching source server prefix to its backend prefix.

    At most one substitution is applied; URLs without a known prefix are returned unchanged.
    """
    for old, new in server_replacements(backend_base):
        if old in url:
            logger.trace("Server prefix {} -> {}", old, new)
            return url.replace(old, new, 1)
    return url


def replace_extensions(url: str) -> str:
    """
    Turn file extensions into the backend's `?ext=` query form.

    All matching entries are applied in table order. An entry is skipped when its
    query form is already present, which makes the rewrite idempotent.
    """
    out = url
    for old, new in EXTENSION_REPLACEMENTS:
        if old in out and new not in out:
            logger.trace("Extension {} -> {}", old, new)
            out = out.replace(old, new, 1)
    return out


def transform_url(url: str, backend_base: str | None = None) -> str:
    """
    Map a client-supplied media URL to the resolver backend endpoint.

    Parameters:
        url (str): Original URL as received from the client.
        backend_base (str | None): Optional backend base overriding the configured one.

    Returns:
        str: The endpoint URL; identical to `url` when no pattern matches.
    """
    return replace_extensions(replace_server(url, backend_base))


def extract_file_name(url: str) -> str:
    """
    Extract the percent-decoded file name from the last path segment of a URL.

    Anything from the first `?` in that segment onwards is dropped. Parsing or
    decoding failures yield UNKNOWN_FILE_NAME instead of raising.

    Example: https://example.com/path/My%20Movie.mp4?x=1 -> "My Movie.mp4"
    """
    try:
        parsed = urlsplit(url)
        if not parsed.scheme:
            raise ValueError(f"not an absolute URL: {url!r}")
        # Raises for a non-numeric or out-of-range port.
        parsed.port
        segment = parsed.path.split("/")[-1]
        name = segment.split("?", 1)[0]
        if _BAD_PERCENT_RE.search(name):
            raise ValueError(f"malformed percent-encoding in {name!r}")
        return unquote(name, errors="strict")
    except (ValueError, UnicodeDecodeError) as exc:
        logger.warning(f"Could not extract file name from URL: {exc}")
        return UNKNOWN_FILE_NAME


def build_target(url: str, backend_base: str | None = None) -> TransformedTarget:
    """
    Derive the backend endpoint and file name for a source URL.

    The file name is taken from the original URL, not from the rewritten endpoint.
    """
    endpoint = transform_url(url, backend_base)
    file_name = extract_file_name(url)
    logger.debug(f"Transformed {url} -> {endpoint} (file={file_name})")
    return TransformedTarget(endpoint_url=endpoint, file_name=file_name)
