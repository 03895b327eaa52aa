from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass(frozen=True)
class Credentials:
    """
    Static request credentials shared by every variant call.

    Built once at startup and never mutated afterwards, so concurrent requests
    can read it without coordination.
    """

    token: str
    user_id: str
    version: int


@dataclass(frozen=True)
class ResolutionRequest:
    source_url: str


@dataclass(frozen=True)
class TransformedTarget:
    """
    Backend endpoint and file name derived from a client-supplied URL.
    """

    endpoint_url: str
    file_name: str


@dataclass(frozen=True)
class VariantResult:
    variant_key: str
    resolved_url: Optional[str] = None


@dataclass(frozen=True)
class ResolutionResponse:
    """
    Aggregate result of one resolution request.

    `results` always carries every variant key; failed variants map to None.
    """

    requested_url: str
    processed_url: str
    file_name: str
    results: Mapping[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """
        Serialize to the JSON body returned by the resolve endpoint.

        Returns:
            dict: `{status, requestedUrl, processedUrl, fileName, results}` with `status` always True.
        """
        return {
            "status": True,
            "requestedUrl": self.requested_url,
            "processedUrl": self.processed_url,
            "fileName": self.file_name,
            "results": dict(self.results),
        }
