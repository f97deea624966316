"""
Cross-Origin Gateway - CORS Services
====================================
Policy resolution, request classification, decisions, and header composition
"""

from .decision import Allowed, Decision, Forbidden, PassThrough, decide
from .headers import (
    decorate_response,
    expose_header_names,
    forbidden_response,
    preflight_headers,
    preflight_response,
)
from .origin import ExtractedOrigin, RequestView, extract_origin, is_legacy_webkit
from .policy import (
    AllowList,
    CORSConfigurationError,
    PolicyConfig,
    resolve_policy,
    resolve_policy_from_settings,
)
from .preflight import Preflight, detect_preflight

__all__ = [
    "Allowed",
    "AllowList",
    "CORSConfigurationError",
    "Decision",
    "ExtractedOrigin",
    "Forbidden",
    "PassThrough",
    "PolicyConfig",
    "Preflight",
    "RequestView",
    "decide",
    "decorate_response",
    "detect_preflight",
    "expose_header_names",
    "extract_origin",
    "forbidden_response",
    "is_legacy_webkit",
    "preflight_headers",
    "preflight_response",
    "resolve_policy",
    "resolve_policy_from_settings",
]
