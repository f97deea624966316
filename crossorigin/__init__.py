"""
Cross-Origin Gateway
====================
CORS enforcement middleware for Starlette and FastAPI applications
"""

from .api.middleware.cors import CrossOriginMiddleware, setup_cors_middleware
from .services.cors import AllowList, CORSConfigurationError, PolicyConfig, resolve_policy

__version__ = "1.0.0"

__all__ = [
    "AllowList",
    "CORSConfigurationError",
    "CrossOriginMiddleware",
    "PolicyConfig",
    "resolve_policy",
    "setup_cors_middleware",
]
