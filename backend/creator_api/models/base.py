"""
Base model class with common fields and functionality
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base

# Create the base class
Base = declarative_base()


class BaseModel(Base):
    """
    Base model class that provides timestamp columns
    for all database models
    """
    __abstract__ = True

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
