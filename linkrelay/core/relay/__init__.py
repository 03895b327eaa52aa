from .types import (
    Credentials,
    ResolutionRequest,
    ResolutionResponse,
    TransformedTarget,
    VariantResult,
)
from .errors import CredentialsUnavailableError, RelayError
from .urls import UNKNOWN_FILE_NAME, build_target, extract_file_name, transform_url
from .payloads import VARIANT_FLAGS, VARIANT_KEYS, build_payload, build_payloads
from .client import ResolverClient
from .fanout import resolve_all, resolve_links
from .credentials import (
    CredentialsSupplier,
    ScriptCredentialsSupplier,
    StaticCredentialsSupplier,
    extract_credentials,
    load_credentials,
)

__all__ = [
    "Credentials",
    "ResolutionRequest",
    "ResolutionResponse",
    "TransformedTarget",
    "VariantResult",
    "CredentialsUnavailableError",
    "RelayError",
    "UNKNOWN_FILE_NAME",
    "build_target",
    "extract_file_name",
    "transform_url",
    "VARIANT_FLAGS",
    "VARIANT_KEYS",
    "build_payload",
    "build_payloads",
    "ResolverClient",
    "resolve_all",
    "resolve_links",
    "CredentialsSupplier",
    "ScriptCredentialsSupplier",
    "StaticCredentialsSupplier",
    "extract_credentials",
    "load_credentials",
]
