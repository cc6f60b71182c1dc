# models/slot.py
from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class Slot(Base):
     """
     Slot model - a numbered stock position inside a vending machine.

     A slot without a product is unstocked regardless of its stock counter.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     index = Column(Integer, nullable=False)
     stock = Column(Integer, default=0, nullable=False)
     product_id = Column(
          Integer,
          ForeignKey("products.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )
     vending_machine_id = Column(
          Integer,
          ForeignKey("vending_machines.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     __table_args__ = (
          CheckConstraint("stock >= 0", name="stock_non_negative"),
          UniqueConstraint("vending_machine_id", "index", name="uq_slots_machine_index"),
     )

     # Relationships
     product = relationship("Product")
     vending_machine = relationship("VendingMachine", back_populates="slots")

     def __repr__(self):
          return f"<Slot(id={self.id}, index={self.index}, stock={self.stock}, product_id={self.product_id})>"

     @property
     def is_stocked(self) -> bool:
          return self.product_id is not None and self.stock > 0
