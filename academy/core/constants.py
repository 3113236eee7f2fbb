"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and common response definitions for API routes.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    USER = RouteConfig(prefix="/users", tag="users")
    GROUP = RouteConfig(prefix="/groups", tag="groups")
    PROGRAM = RouteConfig(prefix="/programs", tag="programs")
    HEALTH = RouteConfig(prefix="/health", tag="health")


class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int | str, dict[str, Any]] = {
        401: {"description": "Not authenticated or invalid credentials"}
    }
    FORBIDDEN: dict[int | str, dict[str, Any]] = {
        403: {"description": "Caller lacks the required role"}
    }
    NOT_FOUND: dict[int | str, dict[str, Any]] = {
        404: {"description": "Resource not found"}
    }
    CONFLICT: dict[int | str, dict[str, Any]] = {
        409: {"description": "Resource already exists"}
    }
    BAD_REQUEST: dict[int | str, dict[str, Any]] = {
        400: {"description": "Invalid request data"}
    }


# Group payloads change often from the admin UI; never let a proxy cache them.
NO_STORE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
