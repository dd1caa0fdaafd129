"""
Pydantic schemas for the generate-content endpoint
"""

from pydantic import BaseModel, Field
from typing import Optional


class GenerateRequest(BaseModel):
    """Body of a generate-content call; blank prompts are rejected by the handler"""

    prompt: Optional[str] = Field(
        None,
        description="Prompt sent to the language model",
        examples=["Write a tagline for a coffee shop"]
    )


class GenerateResponse(BaseModel):
    success: bool = True
    generated_text: str = Field(..., description="Text produced by the provider")
    generated_image_url: str = Field(..., description="Placeholder image for the prompt")
