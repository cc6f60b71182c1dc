# exceptions.py
"""
Vending backend exception hierarchy.

Every error carries a human-readable message and the HTTP status it maps to.
Handlers in main.py render them as {"message": ...}.
"""
from typing import Any, Dict, Optional


class VendingError(Exception):
     """Base exception for all domain errors."""

     status_code = 500

     def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
          self.message = message
          self.details = details or {}
          super().__init__(message)

     def to_dict(self) -> Dict[str, Any]:
          """Convert exception to API error response format."""
          return {"message": self.message}


class ValidationError(VendingError):
     """Missing or malformed fields."""

     status_code = 400


class AuthenticationError(VendingError):
     """Missing token, invalid token or bad credentials."""

     status_code = 401


class ForbiddenError(VendingError):
     """
     The actor is not allowed to perform the operation.

     Examples:
     - Role not in the operation's allowed set
     - Deleting an admin account
     - A machine approving on behalf of another machine
     """

     status_code = 403


class NotFoundError(VendingError):
     status_code = 404

     def __init__(self, entity: str, details: Optional[Dict[str, Any]] = None):
          super().__init__(f"{entity} not found", details)


class ConflictError(VendingError):
     """The request is well-formed but conflicts with current state."""

     status_code = 400


class OutOfStockError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Slot is out of stock", details)


class InsufficientFundsError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Insufficient balance", details)


class AlreadyConfirmedError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Transaction already approved", details)


class WrongMachineError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Invalid vending machine", details)


class TransactionExpiredError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Transaction has expired", details)


class UsernameTakenError(ConflictError):
     def __init__(self, details: Optional[Dict[str, Any]] = None):
          super().__init__("Username already exists", details)


class InternalError(VendingError):
     status_code = 500


class CodeGenerationError(InternalError):
     """No unused redemption code found within the attempt budget."""

     def __init__(self, attempts: int):
          super().__init__(
               f"Failed to generate a unique redemption code after {attempts} attempts",
               {"attempts": attempts},
          )
