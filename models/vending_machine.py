# models/vending_machine.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base, CreatedAtMixin


class VendingMachine(CreatedAtMixin, Base):
     """Vending machine - a named container of slots."""

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)

     # Relationships
     slots = relationship(
          "Slot",
          back_populates="vending_machine",
          cascade="all, delete-orphan",
          order_by="Slot.index",
     )

     def __repr__(self):
          return f"<VendingMachine(id={self.id}, name='{self.name}')>"
