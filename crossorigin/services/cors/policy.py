"""
Cross-Origin Gateway - CORS Policy
==================================
Allow-lists and the resolved, immutable policy configuration
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Tuple


# =============================================================================
# Constants
# =============================================================================

WILDCARD = "*"

HTTP_METHODS = ("GET", "HEAD", "POST")

WEBDAV_METHODS = HTTP_METHODS + (
    "CANCELUPLOAD",
    "CHECKIN",
    "CHECKOUT",
    "COPY",
    "DELETE",
    "GETLIB",
    "LOCK",
    "MKCOL",
    "MOVE",
    "OPTIONS",
    "PROPFIND",
    "PROPPATCH",
    "PUT",
    "REPORT",
    "UNCHECKOUT",
    "UNLOCK",
    "UPDATE",
    "VERSION-CONTROL",
)

COMMON_HEADERS = (
    "Cache-Control",
    "Depth",
    "If-Modified-Since",
    "User-Agent",
    "X-File-Name",
    "X-File-Size",
    "X-Requested-With",
    "X-Prototype-Version",
)

# Always readable by browsers, never listed in Access-Control-Expose-Headers
SIMPLE_RESPONSE_HEADERS = frozenset(
    name.lower()
    for name in (
        "Cache-Control",
        "Content-Language",
        "Content-Type",
        "Expires",
        "Last-Modified",
        "Pragma",
    )
)


# =============================================================================
# Exceptions
# =============================================================================


class CORSConfigurationError(ValueError):
    """Raised at setup time when the CORS options are malformed."""

    def __init__(self, message: str, option: Optional[str] = None):
        super().__init__(message)
        self.option = option


# =============================================================================
# Policy Types
# =============================================================================


@dataclass(frozen=True)
class AllowList:
    """
    Ordered permitted values plus a lookup set.

    Case-insensitive lists fold the lookup set to lower case; ``values``
    keeps the configured spelling for echoing back in headers.
    """

    values: Tuple[str, ...] = ()
    case_insensitive: bool = False
    lookup: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup = (v.lower() for v in self.values) if self.case_insensitive else self.values
        object.__setattr__(self, "lookup", frozenset(lookup))

    @property
    def is_wildcard(self) -> bool:
        return WILDCARD in self.lookup

    def __contains__(self, value: str) -> bool:
        if self.case_insensitive:
            value = value.lower()
        return value in self.lookup

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def allows(self, value: str) -> bool:
        """True for a wildcard list or an exact member."""
        return self.is_wildcard or value in self

    def allows_all(self, values: Iterable[str]) -> bool:
        """True when every value is permitted."""
        return self.is_wildcard or all(v in self for v in values)


@dataclass(frozen=True)
class PolicyConfig:
    """Resolved CORS policy. Built once, shared read-only by all requests."""

    origins: AllowList = field(default_factory=AllowList)
    methods: AllowList = field(default_factory=lambda: AllowList(WEBDAV_METHODS))
    headers: AllowList = field(
        default_factory=lambda: AllowList(COMMON_HEADERS, case_insensitive=True)
    )
    expose_headers: AllowList = field(
        default_factory=lambda: AllowList(case_insensitive=True)
    )
    credentials: bool = False
    max_age: Optional[int] = None
    continue_on_failure: bool = False

    def summary(self) -> dict:
        """Loggable view of the policy."""
        return {
            "origins": list(self.origins),
            "methods": "*" if self.methods.is_wildcard else len(self.methods),
            "headers": "*" if self.headers.is_wildcard else len(self.headers),
            "expose_headers": list(self.expose_headers),
            "credentials": self.credentials,
            "max_age": self.max_age,
            "continue_on_failure": self.continue_on_failure,
        }


# =============================================================================
# Configuration Resolver
# =============================================================================


def _as_values(option: str, raw: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if raw is None:
        return default
    if isinstance(raw, str):
        return (raw,)
    if not isinstance(raw, (list, tuple, set, frozenset)):
        raise CORSConfigurationError(
            f"{option} must be a string or a list of strings, got {type(raw).__name__}",
            option=option,
        )
    values = tuple(raw)
    for value in values:
        if not isinstance(value, str):
            raise CORSConfigurationError(
                f"{option} entries must be strings, got {type(value).__name__}",
                option=option,
            )
    return values


def _as_flag(option: str, raw: Any) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise CORSConfigurationError(f"{option} must be a boolean", option=option)
    return raw


def resolve_policy(
    origins: Any = None,
    methods: Any = None,
    headers: Any = None,
    expose_headers: Any = None,
    max_age: Any = None,
    credentials: Any = None,
    continue_on_failure: Any = None,
) -> PolicyConfig:
    """
    Normalize raw CORS options into a PolicyConfig.

    Each list option may be omitted, a single string, or a list of strings;
    ``"*"`` anywhere in a list makes it a wildcard.

    Raises:
        CORSConfigurationError: If an option has the wrong type
    """
    if max_age is not None:
        if isinstance(max_age, bool) or not isinstance(max_age, int):
            raise CORSConfigurationError("max_age must be an integer", option="max_age")
        if max_age < 0:
            raise CORSConfigurationError("max_age must not be negative", option="max_age")

    return PolicyConfig(
        origins=AllowList(_as_values("origins", origins, ())),
        methods=AllowList(_as_values("methods", methods, WEBDAV_METHODS)),
        headers=AllowList(
            _as_values("headers", headers, COMMON_HEADERS), case_insensitive=True
        ),
        expose_headers=AllowList(
            _as_values("expose_headers", expose_headers, ()), case_insensitive=True
        ),
        credentials=_as_flag("credentials", credentials),
        max_age=max_age,
        continue_on_failure=_as_flag("continue_on_failure", continue_on_failure),
    )


def resolve_policy_from_settings(settings: Any) -> PolicyConfig:
    """Build the policy from environment-backed Settings."""
    return resolve_policy(
        origins=settings.cors_origins_list,
        methods=settings.cors_methods_list,
        headers=settings.cors_headers_list,
        expose_headers=settings.cors_expose_headers_list,
        max_age=settings.cors_max_age,
        credentials=settings.cors_credentials,
        continue_on_failure=settings.cors_continue_on_failure,
    )
