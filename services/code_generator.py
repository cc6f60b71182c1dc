# services/code_generator.py
"""
Redemption code generator.

Codes are 8-digit numeric strings drawn uniformly from 10000000-99999999
with a CSPRNG, and must not collide with any stored transaction code.
"""
import logging
import secrets
from typing import Callable, Optional

from sqlalchemy.orm import Session

from exceptions import CodeGenerationError
from models import Transaction

logger = logging.getLogger(__name__)

CODE_LENGTH = 8
_LOWEST = 10 ** (CODE_LENGTH - 1)
_HIGHEST = 10 ** CODE_LENGTH - 1


def generate_code() -> str:
     """Draw one code uniformly from the 8-digit range."""
     return str(_LOWEST + secrets.randbelow(_HIGHEST - _LOWEST + 1))


def code_in_use(db: Session, code: str) -> bool:
     return db.query(Transaction.id).filter(Transaction.code == code).first() is not None


def issue_code(
     db: Session,
     max_attempts: int,
     generate: Optional[Callable[[], str]] = None,
) -> str:
     """
     Generate codes until one is not held by any transaction.

     Raises:
          CodeGenerationError: if every attempt collided.
     """
     generate = generate or generate_code
     for attempt in range(1, max_attempts + 1):
          code = generate()
          if not code_in_use(db, code):
               return code
          logger.warning(f"Redemption code collision on attempt {attempt}/{max_attempts}")
     raise CodeGenerationError(max_attempts)
