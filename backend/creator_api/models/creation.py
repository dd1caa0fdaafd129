"""
Creation model: the immutable output of one successful generation
"""

from sqlalchemy import Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
import uuid

from creator_api.models.base import BaseModel


class Creation(BaseModel):
    """
    A prompt together with the text and image generated for it
    """
    __tablename__ = "creations"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )

    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning account"
    )

    prompt = Column(
        Text,
        nullable=False,
        comment="Prompt as submitted"
    )

    generated_text = Column(
        Text,
        nullable=False,
        comment="Text returned by the generation provider"
    )

    generated_image_url = Column(
        String(1024),
        nullable=False,
        comment="Placeholder image reference"
    )

    user = relationship("UserAccount", back_populates="creations")
