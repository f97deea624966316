"""
Cross-Origin Gateway - CORS Middleware
======================================
Origin checks, preflight answers, and response decoration
"""

from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ...core.config import settings
from ...core.logging import logger
from ...services.cors import (
    CORSConfigurationError,
    Forbidden,
    PassThrough,
    PolicyConfig,
    RequestView,
    decide,
    decorate_response,
    detect_preflight,
    extract_origin,
    forbidden_response,
    preflight_response,
    resolve_policy,
    resolve_policy_from_settings,
)


class CrossOriginMiddleware(BaseHTTPMiddleware):
    """
    Middleware enforcing the CORS policy.

    Requests without an origin are forwarded untouched. Preflights are
    answered here and never reach the application. Allowed simple requests
    get CORS headers appended after the application responds.

    Accepts either a resolved ``policy`` or the raw options understood by
    ``resolve_policy``.
    """

    def __init__(
        self, app: ASGIApp, policy: Optional[PolicyConfig] = None, **options: Any
    ) -> None:
        super().__init__(app)
        if policy is not None and options:
            raise CORSConfigurationError("Pass either a policy or CORS options, not both")
        self.policy = policy if policy is not None else resolve_policy(**options)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        view = RequestView.from_request(request)

        origin = extract_origin(view)
        if origin is None:
            return await call_next(request)

        if origin.inferred:
            logger.debug(
                "CORS origin inferred from Referer",
                origin=origin.value,
                path=request.url.path,
            )

        preflight = detect_preflight(view)
        decision = decide(origin, preflight, self.policy)

        if isinstance(decision, Forbidden):
            logger.info(
                "CORS request rejected",
                reason=decision.reason,
                origin=origin.value,
                method=request.method,
                requested_method=preflight.requested_method,
                path=request.url.path,
            )
            return forbidden_response()

        if isinstance(decision, PassThrough):
            logger.debug(
                "CORS check failed, forwarding without CORS headers",
                reason=decision.reason,
                origin=origin.value,
                path=request.url.path,
            )
            return await call_next(request)

        if decision.preflight:
            return preflight_response(decision.headers, self.policy)

        response = await call_next(request)
        return decorate_response(response, decision.headers, self.policy)


def setup_cors_middleware(app: FastAPI, policy: Optional[PolicyConfig] = None) -> PolicyConfig:
    """
    Configure CORS middleware for the application.

    The policy is resolved here, so malformed settings fail application
    setup rather than individual requests.

    Args:
        app: FastAPI application instance
        policy: Explicit policy; resolved from settings when omitted

    Returns:
        The policy the middleware enforces
    """
    if policy is None:
        policy = resolve_policy_from_settings(settings)

    if not len(policy.origins):
        logger.warning("No CORS origins configured, cross-origin requests will be rejected")

    app.add_middleware(CrossOriginMiddleware, policy=policy)

    logger.info("CORS middleware configured", **policy.summary())
    return policy
