# schemas/transaction.py
"""
Pydantic schemas for the transaction / redemption API.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, ConfigDict

from .base import CamelModel


class TransactionCreate(CamelModel):
     """Request body for POST /transactions."""

     user_id: int = Field(..., gt=0)
     slot_id: int = Field(..., gt=0)

     model_config = ConfigDict(
          json_schema_extra={"example": {"userId": 2, "slotId": 7}}
     )


class CodeRequest(CamelModel):
     """Request body for /transactions/by-code and /transactions/confirm."""

     code: str = Field(..., min_length=1, max_length=8)


class ApproveRequest(CamelModel):
     """Request body for PUT /transactions/approve, sent by the machine."""

     code: str = Field(..., min_length=1, max_length=8)
     vending_machine_id: int = Field(..., gt=0)

     model_config = ConfigDict(
          json_schema_extra={"example": {"code": "48213377", "vendingMachineId": 1}}
     )


class TransactionResponse(CamelModel):
     id: int
     code: str
     user_id: int
     slot_id: Optional[int] = None
     product_id: Optional[int] = None
     vending_machine_id: Optional[int] = None
     has_confirmed: bool
     created_at: datetime
     confirmed_at: Optional[datetime] = None


class TransactionStatus(CamelModel):
     """Response for PUT /transactions/confirm."""

     id: int
     has_confirmed: bool
     vending_machine_id: Optional[int] = None


class DispenseSlot(CamelModel):
     id: int
     index: int
     stock: int


class DispenseProduct(CamelModel):
     id: int
     name: str
     price: Decimal


class ApproveResponse(TransactionResponse):
     """Confirmed transaction plus what the machine should dispense."""

     slot: DispenseSlot
     product: DispenseProduct


class PurgeResponse(CamelModel):
     deleted: int
