"""
Content generation endpoint
"""

from fastapi import APIRouter, Depends, Request
import logging

from creator_api.api.deps import get_generation_orchestrator, read_body
from creator_api.api.responses import envelope_response, preflight_response
from creator_api.core.security import AuthenticatedUser, get_current_user
from creator_api.schemas.generation import GenerateRequest, GenerateResponse
from creator_api.services.generation import GenerationOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.options("")
async def generate_content_probe():
    """CORS pre-flight; no authentication"""
    return preflight_response()


@router.post("", response_model=GenerateResponse)
async def generate_content(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
):
    """
    Generate text and a placeholder image for a prompt

    Expected payload:
    {
        "prompt": "Write a tagline for a coffee shop"
    }
    """
    request_data = await read_body(request, GenerateRequest)
    result = await orchestrator.generate(user, request_data.prompt)
    return envelope_response(
        GenerateResponse(
            generated_text=result.generated_text,
            generated_image_url=result.generated_image_url,
        ).model_dump()
    )
