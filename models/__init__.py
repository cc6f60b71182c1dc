# models/__init__.py
from .base import Base
from .user import User, Role
from .product import Product
from .vending_machine import VendingMachine
from .slot import Slot
from .transaction import Transaction

__all__ = [
     "Base",
     "User",
     "Role",
     "Product",
     "VendingMachine",
     "Slot",
     "Transaction",
]
