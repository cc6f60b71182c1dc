# models/transaction.py
"""
Transaction model - a purchase redeemed at the machine with a one-time code.

Created unconfirmed; approval flips has_confirmed exactly once and is terminal.
Cancellation deletes the row while it is still unconfirmed.
"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Transaction(Base):
     """
     Purchase transaction. product_id and vending_machine_id are snapshots
     of the slot taken when the transaction was created.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     code = Column(String(8), nullable=False, unique=True, index=True)
     user_id = Column(
          Integer,
          ForeignKey("users.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     slot_id = Column(Integer, ForeignKey("slots.id", ondelete="SET NULL"), nullable=True)
     # No ON DELETE on the snapshots: MS SQL allows one cascade path per table pair.
     # The product and machine delete routes clear them instead.
     product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
     vending_machine_id = Column(
          Integer,
          ForeignKey("vending_machines.id"),
          nullable=True,
          index=True
     )
     has_confirmed = Column(Boolean, default=False, nullable=False)

     # Timestamps, naive UTC written from Python so expiry does not follow the server clock
     created_at = Column(DateTime, default=datetime.utcnow, server_default=func.now(), nullable=False)
     confirmed_at = Column(DateTime, nullable=True)

     # Relationships
     user = relationship("User")
     slot = relationship("Slot")
     product = relationship("Product")

     def __repr__(self):
          return f"<Transaction(id={self.id}, code='{self.code}', confirmed={self.has_confirmed})>"

     def is_expired(self, ttl_minutes: Optional[int], now: Optional[datetime] = None) -> bool:
          """Unconfirmed and older than the TTL. Never expires when no TTL is set."""
          if ttl_minutes is None or self.has_confirmed:
               return False
          now = now or datetime.utcnow()
          return self.created_at < now - timedelta(minutes=ttl_minutes)
