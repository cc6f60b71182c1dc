# models/base.py
import re

from sqlalchemy import Column, DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, declared_attr

# Deterministic constraint names so migrations can drop them on MS SQL
NAMING_CONVENTION = {
     "ix": "ix_%(table_name)s_%(column_0_name)s",
     "uq": "uq_%(table_name)s_%(column_0_name)s",
     "ck": "ck_%(table_name)s_%(constraint_name)s",
     "fk": "fk_%(table_name)s_%(column_0_name)s",
     "pk": "pk_%(table_name)s",
}


def table_name_for(class_name: str) -> str:
     """
     Snake-case and pluralize a model class name.
     Example: VendingMachine -> vending_machines, Slot -> slots
     """
     name = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).lower()
     if name.endswith('y'):
          return name[:-1] + 'ies'
     if name.endswith('s'):
          return name + 'es'
     return name + 's'


class Base(DeclarativeBase):
     """Base class for all vending models."""

     metadata = MetaData(naming_convention=NAMING_CONVENTION)

     @declared_attr.directive
     def __tablename__(cls) -> str:
          return table_name_for(cls.__name__)


class CreatedAtMixin:
     """Adds a server-side creation timestamp."""

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
