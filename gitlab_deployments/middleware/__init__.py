"""
Middleware package for the HTTP surface.

Contains request logging and the GitLab error handlers.
"""

from .error_handling import register_error_handlers
from .logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
    "register_error_handlers",
]
