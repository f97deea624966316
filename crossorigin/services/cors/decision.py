"""
Cross-Origin Gateway - Access Decision Engine
=============================================
Validates origin, method, and requested headers against the policy
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .headers import allow_origin_headers, preflight_headers
from .origin import ExtractedOrigin
from .policy import PolicyConfig
from .preflight import Preflight


# =============================================================================
# Decision Types
# =============================================================================


@dataclass(frozen=True)
class PassThrough:
    """Forward to the downstream app and return its response unmodified."""

    reason: str = ""


@dataclass(frozen=True)
class Forbidden:
    """Reject with the fixed 403 response."""

    reason: str = ""


@dataclass(frozen=True)
class Allowed:
    """
    Request is permitted.

    For a preflight, ``headers`` is the complete synthesized response header
    set; otherwise it is appended to the downstream response.
    """

    headers: Tuple[Tuple[str, str], ...]
    preflight: bool = False


Decision = Union[PassThrough, Forbidden, Allowed]

ORIGIN_NOT_ALLOWED = "origin_not_allowed"
METHOD_NOT_ALLOWED = "method_not_allowed"
HEADERS_NOT_ALLOWED = "headers_not_allowed"


# =============================================================================
# Decision
# =============================================================================


def decide(origin: ExtractedOrigin, preflight: Preflight, policy: PolicyConfig) -> Decision:
    """
    Decide how to handle a cross-origin request.

    An origin mismatch on a simple request is forwarded untouched when
    ``continue_on_failure`` is set or the origin was inferred from the
    Referer. Preflight violations are always forbidden.
    """
    if not policy.origins.allows_all(origin.tokens):
        if (policy.continue_on_failure or origin.inferred) and not preflight.is_preflight:
            return PassThrough(ORIGIN_NOT_ALLOWED)
        return Forbidden(ORIGIN_NOT_ALLOWED)

    if not preflight.is_preflight:
        return Allowed(tuple(allow_origin_headers(policy, origin.value)))

    requested_method = preflight.requested_method
    if policy.methods.is_wildcard:
        methods: Tuple[str, ...] = (requested_method,)
    elif requested_method in policy.methods:
        methods = tuple(policy.methods)
    else:
        return Forbidden(METHOD_NOT_ALLOWED)

    if policy.headers.is_wildcard:
        headers = preflight.requested_headers
    elif policy.headers.allows_all(preflight.requested_headers):
        headers = tuple(policy.headers)
    else:
        return Forbidden(HEADERS_NOT_ALLOWED)

    return Allowed(
        tuple(preflight_headers(policy, origin.value, methods, headers)),
        preflight=True,
    )
