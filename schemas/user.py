# schemas/user.py
"""
Pydantic schemas for account management.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from models.user import Role
from .base import CamelModel


class UserResponse(CamelModel):
     id: int
     name: str
     username: str
     role: Role
     balance: Decimal
     vending_machine_id: Optional[int] = None


class UserListResponse(CamelModel):
     items: List[UserResponse]
     count: int


class BalanceUpdateRequest(CamelModel):
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class BalanceResponse(CamelModel):
     id: int
     balance: Decimal


class MachineBindingRequest(CamelModel):
     """Bind a machine-role account to the vending machine it speaks for."""

     vending_machine_id: int = Field(..., gt=0)
