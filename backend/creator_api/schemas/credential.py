"""
Pydantic schemas for the handle-api-key endpoint
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ApiKeyActionRequest(BaseModel):
    """Either {"action": "save", "apiKey": "..."} or {"action": "delete"}"""

    model_config = ConfigDict(populate_by_name=True)

    action: Optional[str] = Field(
        None,
        description='"save" or "delete"',
        examples=["save"]
    )

    api_key: Optional[str] = Field(
        None,
        alias="apiKey",
        description="OpenAI API key, required for save",
        examples=["sk-..."]
    )


class MessageResponse(BaseModel):
    success: bool = True
    message: str
