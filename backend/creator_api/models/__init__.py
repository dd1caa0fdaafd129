"""
Database models package
"""

from .base import Base, BaseModel
from .user_account import UserAccount
from .creation import Creation

__all__ = ["Base", "BaseModel", "UserAccount", "Creation"]
