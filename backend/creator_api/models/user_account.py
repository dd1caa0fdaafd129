"""
UserAccount model: one row per identity-provider user
"""

from sqlalchemy import Boolean, Column, Date, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from creator_api.models.base import BaseModel


class UserAccount(BaseModel):
    """
    Account record holding the daily generation counter and the stored API key
    """
    __tablename__ = "users"

    id = Column(
        String(255),
        primary_key=True,
        comment="Opaque user identity from the identity provider (JWT sub)"
    )

    email = Column(
        String(255),
        nullable=False,
        default="",
        comment="Email address reported by the identity provider"
    )

    display_name = Column(
        String(255),
        nullable=False,
        default="User",
        comment="Name shown on the dashboard"
    )

    daily_generation_count = Column(
        Integer,
        nullable=False,
        default=0,
        comment="Generations used on last_generation_date"
    )

    last_generation_date = Column(
        Date,
        nullable=True,
        comment="UTC day the counter applies to; any other day means zero used"
    )

    is_pro_member = Column(
        Boolean,
        nullable=False,
        default=False,
        comment="Pro members bypass the daily quota"
    )

    api_key_encrypted = Column(
        Text,
        nullable=True,
        comment="Hex blob salt||iv||ciphertext of the user's OpenAI API key"
    )

    creations = relationship("Creation", back_populates="user")

    @validates("daily_generation_count")
    def validate_daily_generation_count(self, key: str, count: int) -> int:
        if count is not None and count < 0:
            raise ValueError("daily_generation_count cannot be negative")
        return count

    def has_api_key(self) -> bool:
        return bool(self.api_key_encrypted)
