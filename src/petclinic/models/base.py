"""
Base model class for all SQLAlchemy models in the petclinic package.

This module provides the foundational base model class that all other models
inherit from: an integer surrogate key assigned by the store on first flush,
and a handful of utility methods.

Example:
    >>> from petclinic.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class MyModel(BaseModel):
    ...     __tablename__ = "my_table"
    ...     name: Mapped[str] = mapped_column(String(80))

    >>> instance = MyModel(name="Test")
    >>> instance.is_new()  # True until the instance is flushed
    True
"""

from datetime import date, datetime
from typing import Any, Dict, TypeVar

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


class Base(DeclarativeBase):
    """Base declarative class for all SQLAlchemy models."""


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (int): Primary key. ``None`` until the entity is first
            persisted, after which the store assigns a unique value.

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    def __repr__(self) -> str:
        """
        Return string representation of the model instance.

        Returns:
            String in format: <ModelName(id=1)>
        """
        return f"<{self.__class__.__name__}(id={self.id})>"

    def is_new(self) -> bool:
        """
        Whether the entity has not been persisted yet.

        Repositories use this to choose between insert and update-merge.
        """
        return self.id is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the column values of the instance to a dictionary.

        Dates are rendered as ISO strings; relationships are not included.

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key, None)
            if isinstance(value, (date, datetime)):
                result[column.key] = value.isoformat()
            else:
                result[column.key] = value
        return result

    @classmethod
    def get_table_name(cls) -> str:
        """
        Get the database table name for this model.

        Example:
            >>> PetType.get_table_name()
            'types'
        """
        return cls.__tablename__

    def update_fields(self, **kwargs: Any) -> None:
        """
        Update multiple fields on the model instance in a single operation.

        Args:
            **kwargs: Field names as keys and new values as values.
                     Only existing model attributes can be updated.

        Raises:
            AttributeError: If any field name doesn't exist on the model.

        Note:
            This method only modifies the instance. The change is persisted
            when the owning session is flushed.
        """
        for field, value in kwargs.items():
            if hasattr(self, field):
                setattr(self, field, value)
            else:
                raise AttributeError(
                    f"'{self.__class__.__name__}' has no attribute '{field}'"
                )
