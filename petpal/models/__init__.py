"""SQLAlchemy models for the application."""
from petpal.models.user import User
from petpal.models.category import Category
from petpal.models.animal import Animal
from petpal.models.favorite import Favorite
from petpal.models.message import Message

__all__ = [
    "User",
    "Category",
    "Animal",
    "Favorite",
    "Message",
]
