"""SQLAlchemy models."""

from app.models.user import User
from app.models.chat import Chat

__all__ = [
    "User",
    "Chat",
]
