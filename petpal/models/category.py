"""Category model for classifying animals (dogs, cats, ...)."""
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from petpal.database import Base


class Category(Base):
    """Animal category. Names are unique."""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
