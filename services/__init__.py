# services/__init__.py
from .code_generator import generate_code, issue_code
from .ledger_service import (
     Approval,
     list_transactions,
     find_by_code,
     get_by_code,
     create_transaction,
     approve_transaction,
     cancel_transaction,
     purge_expired,
)

__all__ = [
     "generate_code",
     "issue_code",
     "Approval",
     "list_transactions",
     "find_by_code",
     "get_by_code",
     "create_transaction",
     "approve_transaction",
     "cancel_transaction",
     "purge_expired",
]
