"""Base model classes for the scoring database."""

from typing import Any

from sqlalchemy import Column, Integer, DateTime, func
from sqlalchemy.orm import declarative_base


class Base:
    """Base class for all database models."""
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def to_dict(self) -> dict[str, Any]:
        """Convert model instance to dictionary."""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


# Create the declarative base
Base = declarative_base(cls=Base)
