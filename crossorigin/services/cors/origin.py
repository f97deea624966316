"""
Cross-Origin Gateway - Origin Extraction
========================================
Request view and origin detection, including the legacy WebKit fallback
"""

import re
from dataclasses import dataclass
from typing import Optional

from starlette.datastructures import Headers
from starlette.requests import Request


# Preflighted GETs from older WebKit builds omit Origin on the actual request.
# https://bugs.webkit.org/show_bug.cgi?id=50773
WEBKIT_VERSION_PATTERN = re.compile(r"\bAppleWebKit/(\d+\.\d+)")
WEBKIT_FIXED_VERSION = 534.19
REFERER_ORIGIN_PATTERN = re.compile(r"\A(\w+://[^/]+)")


@dataclass(frozen=True)
class RequestView:
    """Read-only projection of the request fields CORS handling needs."""

    method: str
    headers: Headers

    @classmethod
    def from_request(cls, request: Request) -> "RequestView":
        return cls(method=request.method, headers=request.headers)


@dataclass(frozen=True)
class ExtractedOrigin:
    """Claimed origin of a request."""

    value: str
    inferred: bool = False

    @property
    def tokens(self) -> list[str]:
        """Space-separated origin tokens (some browsers send several)."""
        return self.value.split(" ")


def is_legacy_webkit(user_agent: Optional[str]) -> bool:
    """True for WebKit builds older than 534.19, compared as a decimal number."""
    if not user_agent:
        return False
    match = WEBKIT_VERSION_PATTERN.search(user_agent)
    if match is None:
        return False
    return float(match.group(1)) < WEBKIT_FIXED_VERSION


def origin_from_referer(referer: Optional[str]) -> Optional[str]:
    """Extract the ``scheme://authority`` prefix of a Referer."""
    if not referer:
        return None
    match = REFERER_ORIGIN_PATTERN.match(referer)
    return match.group(1) if match else None


def extract_origin(request: RequestView) -> Optional[ExtractedOrigin]:
    """
    Determine the request's claimed origin.

    Falls back to the Referer for GET requests from legacy WebKit builds;
    such origins are marked as inferred.

    Returns:
        ExtractedOrigin, or None for requests that are not cross-origin
    """
    origin = request.headers.get("origin")
    if origin:
        return ExtractedOrigin(origin)

    if request.method == "GET" and is_legacy_webkit(request.headers.get("user-agent")):
        referer_origin = origin_from_referer(request.headers.get("referer"))
        if referer_origin:
            return ExtractedOrigin(referer_origin, inferred=True)

    return None
