"""CORS header helpers for the speed test endpoints."""

from fastapi import Response, status

from common.constants import NO_CACHE_HEADERS
from server import config

PREFLIGHT_ALLOW_HEADERS = "Content-Type, Range"


def cors_headers(methods: str) -> dict:
    """
    Headers attached to every cross-origin response.

    Args:
        methods: Allowed methods for the resource (e.g. "GET, OPTIONS")
    """
    return {
        "Access-Control-Allow-Origin": config.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def no_cache_headers(methods: str) -> dict:
    """CORS headers plus the directives that keep measurements off caches."""
    headers = cors_headers(methods)
    headers.update(NO_CACHE_HEADERS)
    return headers


def preflight_response(methods: str) -> Response:
    """
    Build the 204 answer to a browser preflight request.
    """
    headers = cors_headers(methods)
    headers["Access-Control-Allow-Headers"] = PREFLIGHT_ALLOW_HEADERS
    headers["Access-Control-Max-Age"] = str(config.CORS_MAX_AGE)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)
