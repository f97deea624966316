"""
Cross-Origin Gateway - Preflight Detection
==========================================
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .origin import RequestView


HEADER_LIST_SEPARATOR = re.compile(r",\s*")


@dataclass(frozen=True)
class Preflight:
    """Preflight classification of a request."""

    is_preflight: bool
    requested_method: Optional[str] = None
    requested_headers: Tuple[str, ...] = ()


def split_header_list(value: Optional[str]) -> Tuple[str, ...]:
    """
    Split an Access-Control-Request-Headers value into header names.

    Empty entries between commas are kept, so ``X-A,,X-B`` names an empty
    header that no explicit allow-list admits; trailing empties are dropped.
    """
    if not value:
        return ()
    names = HEADER_LIST_SEPARATOR.split(value)
    while names and not names[-1]:
        names.pop()
    return tuple(names)


def detect_preflight(request: RequestView) -> Preflight:
    """Classify a request as a CORS preflight (OPTIONS + requested method)."""
    requested_method = request.headers.get("access-control-request-method")
    if request.method != "OPTIONS" or not requested_method:
        return Preflight(is_preflight=False)

    return Preflight(
        is_preflight=True,
        requested_method=requested_method,
        requested_headers=split_header_list(
            request.headers.get("access-control-request-headers")
        ),
    )
