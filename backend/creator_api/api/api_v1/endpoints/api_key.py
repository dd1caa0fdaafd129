"""
API key management endpoint
"""

from fastapi import APIRouter, Depends, Request

from creator_api.api.deps import get_credential_admin, read_body
from creator_api.api.responses import envelope_response, preflight_response
from creator_api.core.security import AuthenticatedUser, get_current_user
from creator_api.schemas.credential import ApiKeyActionRequest, MessageResponse
from creator_api.services.credential_admin import CredentialAdmin

router = APIRouter()


@router.options("")
async def handle_api_key_probe():
    """CORS pre-flight; no authentication"""
    return preflight_response()


@router.post("", response_model=MessageResponse)
async def handle_api_key(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    admin: CredentialAdmin = Depends(get_credential_admin),
):
    """
    Save or delete the caller's OpenAI API key

    Expected payload:
    {
        "action": "save",
        "apiKey": "sk-..."
    }
    or
    {
        "action": "delete"
    }
    """
    request_data = await read_body(request, ApiKeyActionRequest)
    message = admin.handle(user, request_data.action, request_data.api_key)
    return envelope_response(MessageResponse(message=message).model_dump())
