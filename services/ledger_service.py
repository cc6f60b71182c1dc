# services/ledger_service.py
"""
Redemption Ledger Service - purchase transactions redeemed with one-time codes.

Lifecycle:
1. create: a user reserves nothing, but gets a code for a stocked slot it can afford
2. approve: the machine redeems the code; confirm flag, slot stock and user
   balance change together in one storage transaction
3. cancel: an unconfirmed transaction is deleted

Approval reads its rows with SELECT ... FOR UPDATE where the dialect supports it,
and every write is a guarded UPDATE whose affected-row count is checked, so two
racing approvals can never both decrement stock or both confirm one code.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import (
     AlreadyConfirmedError,
     CodeGenerationError,
     ForbiddenError,
     InsufficientFundsError,
     NotFoundError,
     OutOfStockError,
     TransactionExpiredError,
     WrongMachineError,
)
from models import Product, Role, Slot, Transaction, User
from services.code_generator import code_in_use, issue_code

logger = logging.getLogger(__name__)

DEFAULT_CODE_ATTEMPTS = 10


@dataclass
class Approval:
     """Result of a successful approval: what the machine should dispense."""

     transaction: Transaction
     slot: Slot
     product: Product


def _ensure_owner_or_admin(actor: User, owner_id: int, action: str) -> None:
     if actor.role == Role.ADMIN:
          return
     if actor.role == Role.USER and actor.id == owner_id:
          return
     raise ForbiddenError(f"You do not have permission to {action} this transaction")


def list_transactions(db: Session, actor: User) -> List[Transaction]:
     """Admins see every transaction, users only their own. Newest first."""
     query = db.query(Transaction)
     if actor.role != Role.ADMIN:
          query = query.filter(Transaction.user_id == actor.id)
     return query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).all()


def find_by_code(db: Session, code: str) -> Optional[Transaction]:
     return db.query(Transaction).filter(Transaction.code == code).first()


def get_by_code(db: Session, code: str) -> Transaction:
     transaction = find_by_code(db, code)
     if transaction is None:
          raise NotFoundError("Transaction")
     return transaction


def create_transaction(
     db: Session,
     actor: User,
     user_id: int,
     slot_id: int,
     max_code_attempts: int = DEFAULT_CODE_ATTEMPTS,
) -> Transaction:
     """
     Create an unconfirmed transaction for a slot.

     Stock and balance are only checked here, not reserved; approval is the
     authoritative check.

     Raises:
          ForbiddenError: a user creating on behalf of someone else
          NotFoundError: slot or user missing
          OutOfStockError: slot has no product or no stock
          InsufficientFundsError: balance below product price
          CodeGenerationError: no free code within the attempt budget
     """
     _ensure_owner_or_admin(actor, user_id, "create")

     slot = db.get(Slot, slot_id)
     if slot is None:
          raise NotFoundError("Slot")
     if not slot.is_stocked or slot.product is None:
          raise OutOfStockError({"slot_id": slot_id})
     product = slot.product

     user = db.get(User, user_id)
     if user is None:
          raise NotFoundError("User")
     if user.balance < product.price:
          raise InsufficientFundsError({"user_id": user_id, "price": str(product.price)})

     # Snapshot before any rollback expires the loaded rows
     product_id = slot.product_id
     vending_machine_id = slot.vending_machine_id

     # One budget covers both pre-insert collisions and insert-time conflicts
     for attempt in range(1, max_code_attempts + 1):
          try:
               code = issue_code(db, 1)
          except CodeGenerationError:
               continue
          transaction = Transaction(
               code=code,
               user_id=user_id,
               slot_id=slot_id,
               product_id=product_id,
               vending_machine_id=vending_machine_id,
               has_confirmed=False,
          )
          db.add(transaction)
          try:
               db.commit()
          except IntegrityError:
               db.rollback()
               # Another request took the code between the check and the insert
               if not code_in_use(db, code):
                    raise
               logger.warning(f"Redemption code taken concurrently, retrying ({attempt}/{max_code_attempts})")
               continue
          db.refresh(transaction)
          logger.info(
               f"Created transaction id={transaction.id} user={user_id} slot={slot_id} "
               f"machine={vending_machine_id}"
          )
          return transaction

     raise CodeGenerationError(max_code_attempts)


def approve_transaction(
     db: Session,
     actor: User,
     code: str,
     vending_machine_id: int,
     ttl_minutes: Optional[int] = None,
) -> Approval:
     """
     Redeem a code at a machine: confirm, take one unit of stock, charge the user.

     All three writes commit together or not at all.

     Raises:
          ForbiddenError: actor is neither admin nor the machine itself
          NotFoundError: no transaction with this code, or its product/user vanished
          WrongMachineError: code belongs to another machine
          AlreadyConfirmedError: code already redeemed
          TransactionExpiredError: unconfirmed past the TTL
          OutOfStockError: slot empty or no longer holding the product
          InsufficientFundsError: balance no longer covers the price
     """
     if actor.role not in (Role.ADMIN, Role.MACHINE):
          raise ForbiddenError("Only admins and machines can approve transactions")
     if actor.role == Role.MACHINE and actor.vending_machine_id != vending_machine_id:
          raise ForbiddenError("Machines can only approve transactions at their own vending machine")

     try:
          transaction = (
               db.query(Transaction)
               .filter(Transaction.code == code)
               .with_for_update()
               .populate_existing()
               .first()
          )
          if transaction is None:
               raise NotFoundError("Transaction")
          if transaction.vending_machine_id != vending_machine_id:
               raise WrongMachineError({"code": code, "vending_machine_id": vending_machine_id})
          if transaction.has_confirmed:
               raise AlreadyConfirmedError({"transaction_id": transaction.id})
          if transaction.is_expired(ttl_minutes):
               raise TransactionExpiredError({"transaction_id": transaction.id})

          slot = (
               db.query(Slot)
               .filter(Slot.id == transaction.slot_id)
               .with_for_update()
               .populate_existing()
               .first()
          )
          if (
               slot is None
               or transaction.product_id is None
               or slot.product_id != transaction.product_id
               or slot.stock <= 0
          ):
               raise OutOfStockError({"slot_id": transaction.slot_id})

          product = (
               db.query(Product)
               .filter(Product.id == transaction.product_id)
               .populate_existing()
               .first()
          )
          if product is None:
               raise NotFoundError("Product")
          price = product.price

          confirmed = db.execute(
               update(Transaction)
               .where(Transaction.id == transaction.id, Transaction.has_confirmed == False)  # noqa: E712
               .values(has_confirmed=True, confirmed_at=datetime.utcnow())
               .execution_options(synchronize_session=False)
          )
          if confirmed.rowcount != 1:
               # Cancelled between the read above and this update
               if db.query(Transaction.id).filter(Transaction.id == transaction.id).first() is None:
                    raise NotFoundError("Transaction")
               raise AlreadyConfirmedError({"transaction_id": transaction.id})

          taken = db.execute(
               update(Slot)
               .where(
                    Slot.id == slot.id,
                    Slot.product_id == transaction.product_id,
                    Slot.stock > 0,
               )
               .values(stock=Slot.stock - 1)
               .execution_options(synchronize_session=False)
          )
          if taken.rowcount != 1:
               raise OutOfStockError({"slot_id": slot.id})

          charged = db.execute(
               update(User)
               .where(User.id == transaction.user_id, User.balance >= price)
               .values(balance=User.balance - price)
               .execution_options(synchronize_session=False)
          )
          if charged.rowcount != 1:
               if db.get(User, transaction.user_id) is None:
                    raise NotFoundError("User")
               raise InsufficientFundsError({"user_id": transaction.user_id, "price": str(price)})

          db.commit()
     except Exception:
          db.rollback()
          raise

     db.refresh(transaction)
     db.refresh(slot)
     logger.info(
          f"Approved transaction id={transaction.id} machine={vending_machine_id} "
          f"slot={slot.id} stock_left={slot.stock} charged={price}"
     )
     return Approval(transaction=transaction, slot=slot, product=product)


def cancel_transaction(db: Session, actor: User, transaction_id: int) -> Transaction:
     """
     Delete an unconfirmed transaction. Nothing to compensate: stock and balance
     only move on approval.

     Raises:
          NotFoundError, AlreadyConfirmedError, ForbiddenError
     """
     try:
          transaction = (
               db.query(Transaction)
               .filter(Transaction.id == transaction_id)
               .with_for_update()
               .populate_existing()
               .first()
          )
          if transaction is None:
               raise NotFoundError("Transaction")
          _ensure_owner_or_admin(actor, transaction.user_id, "cancel")
          if transaction.has_confirmed:
               raise AlreadyConfirmedError({"transaction_id": transaction_id})

          deleted = db.execute(
               delete(Transaction)
               .where(Transaction.id == transaction_id, Transaction.has_confirmed == False)  # noqa: E712
               .execution_options(synchronize_session=False)
          )
          if deleted.rowcount != 1:
               raise AlreadyConfirmedError({"transaction_id": transaction_id})
          db.commit()
     except Exception:
          db.rollback()
          raise

     db.expunge(transaction)
     logger.info(f"Cancelled transaction id={transaction_id} by user={actor.id}")
     return transaction


def purge_expired(db: Session, ttl_minutes: Optional[int], now: Optional[datetime] = None) -> int:
     """
     Delete unconfirmed transactions older than the TTL.

     Returns:
          Number of transactions deleted (0 when no TTL is configured)
     """
     if ttl_minutes is None:
          return 0
     cutoff = (now or datetime.utcnow()) - timedelta(minutes=ttl_minutes)
     result = db.execute(
          delete(Transaction)
          .where(Transaction.has_confirmed == False, Transaction.created_at < cutoff)  # noqa: E712
          .execution_options(synchronize_session=False)
     )
     db.commit()
     if result.rowcount:
          logger.info(f"Purged {result.rowcount} expired transactions")
     return result.rowcount
