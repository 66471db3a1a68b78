"""Latency probe route."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from server.cors import no_cache_headers, preflight_response

router = APIRouter(tags=["Latency"])

PING_METHODS = "GET, OPTIONS"


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    """Answer immediately with a fixed body; round-trip timing is done by the client."""
    return PlainTextResponse("pong", headers=no_cache_headers(PING_METHODS))


@router.options("/ping")
async def ping_preflight():
    return preflight_response(PING_METHODS)
