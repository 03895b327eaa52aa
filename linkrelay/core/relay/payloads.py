from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import CredentialsUnavailableError
from .types import Credentials

# Variant key -> flags merged into the request body. The key order is the
# order of the `results` mapping in responses.
VARIANT_FLAGS: dict[str, dict[str, bool]] = {
    "direct": {"direct": True},
    "gdrive": {"gdrive": True},
    "second": {"gdrive": True, "second": True},
    "pix": {"pix": True},
    "nc": {"pix": True, "nc": True},
}

VARIANT_KEYS: tuple[str, ...] = tuple(VARIANT_FLAGS)


def build_payload(
    credentials: Optional[Credentials],
    file_name: str,
    flags: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Build the flat JSON body for one variant request.

    Parameters:
        credentials (Credentials | None): Static credentials; must be loaded.
        file_name (str): Decoded file name sent as `file`.
        flags (Mapping[str, Any]): Variant flags merged last, so they may add or overwrite keys.

    Returns:
        dict[str, Any]: `{"v", "u", "file", "token", **flags}`.

    Raises:
        CredentialsUnavailableError: If `credentials` is None.
    """
    if credentials is None:
        raise CredentialsUnavailableError()
    payload: dict[str, Any] = {
        "v": credentials.version,
        "u": credentials.user_id,
        "file": file_name,
        "token": credentials.token,
    }
    payload.update(flags)
    return payload


def build_payloads(
    credentials: Optional[Credentials], file_name: str
) -> dict[str, dict[str, Any]]:
    """Build one request body per variant, keyed by variant."""
    return {
        key: build_payload(credentials, file_name, flags)
        for key, flags in VARIANT_FLAGS.items()
    }
