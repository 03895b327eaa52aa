from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger

from linkrelay.utils.logger import mask_secret
from .types import Credentials

_TOKEN_RE = re.compile(r"""token:\s*['"]([^'"]+)['"]""")
_USER_RE = re.compile(r"""u:\s*['"]([^'"]+)['"]""")
_VERSION_RE = re.compile(r"v:\s*(\d+)")


class CredentialsSupplier(Protocol):
    """Source of the static credentials, consulted once at startup."""

    def supply(self) -> Optional[Credentials]:
        """Return credentials, or None when they cannot be obtained."""
        ...


def extract_credentials(text: str) -> Optional[Credentials]:
    """
    Extract the token, user id and version from a credentials script.

    The script is expected to contain `token: "..."`, `u: "..."` and `v: N`
    somewhere in its text. The first match of each pattern is used.

    Returns:
        Credentials | None: Parsed credentials, or None if any of the three is missing.
    """
    token = _TOKEN_RE.search(text)
    user = _USER_RE.search(text)
    version = _VERSION_RE.search(text)
    if not (token and user and version):
        missing = [
            name
            for name, match in (("token", token), ("u", user), ("v", version))
            if not match
        ]
        logger.debug(f"Credentials script is missing: {', '.join(missing)}")
        return None
    return Credentials(
        token=token.group(1),
        user_id=user.group(1),
        version=int(version.group(1)),
    )


class ScriptCredentialsSupplier:
    """Reads credentials from a local script artifact."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def supply(self) -> Optional[Credentials]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Error reading credentials script {self.path}: {exc}")
            return None
        credentials = extract_credentials(text)
        if credentials is None:
            logger.error(
                f"Could not extract token or payload parameters from {self.path}."
            )
        return credentials


class StaticCredentialsSupplier:
    """Supplies credentials embedded in configuration."""

    def __init__(self, token: str, user_id: str, version: int | str):
        self.token = token
        self.user_id = user_id
        self.version = version

    def supply(self) -> Optional[Credentials]:
        try:
            version = int(self.version)
        except (TypeError, ValueError):
            logger.error(f"Static credentials version is not a number: {self.version!r}")
            return None
        if not self.token or not self.user_id:
            logger.error("Static credentials are incomplete (token and user id required).")
            return None
        return Credentials(token=self.token, user_id=self.user_id, version=version)


def supplier_from_config() -> CredentialsSupplier:
    """
    Pick the credentials supplier from configuration.

    Static values win when RELAY_TOKEN, RELAY_USER_ID and RELAY_VERSION are all
    set; otherwise the script at RELAY_CREDENTIALS_SCRIPT is parsed.
    """
    from linkrelay import config

    if config.RELAY_TOKEN and config.RELAY_USER_ID and config.RELAY_VERSION:
        logger.debug("Using static credentials from environment")
        return StaticCredentialsSupplier(
            config.RELAY_TOKEN, config.RELAY_USER_ID, config.RELAY_VERSION
        )
    logger.debug(f"Using credentials script {config.RELAY_CREDENTIALS_SCRIPT}")
    return ScriptCredentialsSupplier(config.RELAY_CREDENTIALS_SCRIPT)


def load_credentials(
    supplier: Optional[CredentialsSupplier] = None,
) -> Optional[Credentials]:
    """
    Load credentials once at startup; never raises.

    A failed load leaves the service running without credentials, so every
    resolve request answers with a configuration error.
    """
    supplier = supplier or supplier_from_config()
    try:
        credentials = supplier.supply()
    except Exception as exc:
        logger.error(f"Credentials supplier {type(supplier).__name__} failed: {exc}")
        return None
    if credentials is None:
        logger.error(
            "Credentials unavailable: resolve requests will fail until the service is reconfigured."
        )
        return None
    logger.success(
        f"Loaded credentials (token={mask_secret(credentials.token)}, "
        f"u={credentials.user_id}, v={credentials.version})"
    )
    return credentials
