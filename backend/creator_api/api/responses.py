"""
Response envelope and CORS helpers shared by the endpoints
"""

from typing import Any, Dict

from fastapi.responses import JSONResponse, PlainTextResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def envelope_response(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    """JSON response carrying the permissive CORS headers"""
    return JSONResponse(content=content, status_code=status_code, headers=dict(CORS_HEADERS))


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return envelope_response({"success": False, "error": message}, status_code=status_code)


def preflight_response() -> PlainTextResponse:
    """Answer to an unauthenticated OPTIONS probe"""
    return PlainTextResponse("ok", headers=dict(CORS_HEADERS))
