# models/product.py
from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint
from .base import Base, CreatedAtMixin


class Product(CreatedAtMixin, Base):
     """Product model - something a slot can hold. Only price matters to the ledger."""

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False, index=True)
     price = Column(Numeric(12, 2), nullable=False)
     image = Column(String(500), nullable=True)

     __table_args__ = (
          CheckConstraint("price >= 0", name="price_non_negative"),
     )

     def __repr__(self):
          return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
