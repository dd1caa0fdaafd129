"""
Pydantic schemas for account and creation read endpoints
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime
from uuid import UUID


class AccountProfile(BaseModel):
    """Dashboard view of the caller's account"""

    id: str
    email: str
    display_name: str
    is_pro_member: bool
    daily_limit: int = Field(..., description="Generations allowed per UTC day")
    generations_today: int = Field(..., description="Generations used today")
    remaining_today: int = Field(..., description="Generations left today")
    last_generation_date: Optional[date] = None
    has_api_key: bool
    total_creations: int = 0


class CreationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    prompt: str
    generated_text: str
    generated_image_url: str
    created_at: datetime


class CreationList(BaseModel):
    creations: List[CreationResponse] = Field(..., description="Creations, newest first")
    total: int = Field(..., description="Number of creations returned")
