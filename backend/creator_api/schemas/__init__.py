"""
Pydantic schemas for API request/response validation
"""

from .generation import GenerateRequest, GenerateResponse
from .credential import ApiKeyActionRequest, MessageResponse
from .account import AccountProfile, CreationResponse, CreationList

__all__ = [
    "GenerateRequest", "GenerateResponse",
    "ApiKeyActionRequest", "MessageResponse",
    "AccountProfile", "CreationResponse", "CreationList",
]
