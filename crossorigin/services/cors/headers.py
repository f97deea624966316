"""
Cross-Origin Gateway - CORS Response Headers
============================================
Header sets for preflight and actual responses, plus the fixed responses
"""

from typing import Iterable, List, Sequence, Tuple

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response

from .policy import SIMPLE_RESPONSE_HEADERS, WILDCARD, PolicyConfig


HeaderList = List[Tuple[str, str]]

ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_ORIGIN = "Access-Control-Allow-Origin"
MAX_AGE = "Access-Control-Max-Age"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"

PREFLIGHT_BASE_HEADERS = {"Content-Type": "text/plain"}


# =============================================================================
# Header Composition
# =============================================================================


def allow_origin_headers(policy: PolicyConfig, origin: str) -> HeaderList:
    """
    Credentials and Allow-Origin headers shared by both response kinds.

    A credentialed response always echoes the concrete origin, never ``*``.
    """
    headers: HeaderList = []
    if policy.credentials:
        headers.append((ALLOW_CREDENTIALS, "true"))
    elif policy.origins.is_wildcard:
        origin = WILDCARD
    headers.append((ALLOW_ORIGIN, origin))
    return headers


def preflight_headers(
    policy: PolicyConfig,
    origin: str,
    methods: Iterable[str],
    headers: Iterable[str],
) -> HeaderList:
    """Full header set for a successful preflight, one field per method/header."""
    result = allow_origin_headers(policy, origin)
    if policy.max_age is not None:
        result.append((MAX_AGE, str(policy.max_age)))
    result.extend((ALLOW_METHODS, method) for method in methods)
    result.extend((ALLOW_HEADERS, header) for header in headers)
    return result


def expose_header_names(policy: PolicyConfig, response_headers: Headers) -> List[str]:
    """
    Names for Access-Control-Expose-Headers.

    A wildcard exposes every header the downstream response set, minus the
    simple response headers browsers can always read. Those names come out
    lower case, as ASGI stores them, not in the spelling the application
    used; field names are case-insensitive so browsers match them either way.
    Repeated headers are listed once, in first-seen order.
    """
    if not policy.expose_headers.is_wildcard:
        return list(policy.expose_headers)

    names: List[str] = []
    seen = set()
    for name in response_headers.keys():
        folded = name.lower()
        if folded in SIMPLE_RESPONSE_HEADERS or folded in seen:
            continue
        seen.add(folded)
        names.append(name)
    return names


def decorate_response(
    response: Response, headers: Sequence[Tuple[str, str]], policy: PolicyConfig
) -> Response:
    """Append CORS headers to a downstream response; existing headers are kept."""
    exposed = expose_header_names(policy, response.headers)

    response_headers: MutableHeaders = response.headers
    for name, value in headers:
        response_headers.append(name, value)
    for name in exposed:
        response_headers.append(EXPOSE_HEADERS, name)
    return response


# =============================================================================
# Fixed Responses
# =============================================================================


def forbidden_response() -> Response:
    """403 returned for disallowed cross-origin requests."""
    return Response(
        content=b"forbidden",
        status_code=403,
        headers={"Content-Type": "text/plain"},
    )


def preflight_response(
    headers: Sequence[Tuple[str, str]], policy: PolicyConfig
) -> Response:
    """
    Empty 200 answering a successful preflight.

    Expose headers are attached as on any other response; under a wildcard
    they are computed from this response's own headers, which are all simple.
    """
    exposed = expose_header_names(policy, Headers(headers=PREFLIGHT_BASE_HEADERS))

    response = Response(status_code=200, headers=PREFLIGHT_BASE_HEADERS)
    for name, value in headers:
        response.headers.append(name, value)
    for name in exposed:
        response.headers.append(EXPOSE_HEADERS, name)
    return response
