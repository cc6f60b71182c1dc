# models/user.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Enum, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, CreatedAtMixin


class Role(str, enum.Enum):
     """Closed set of capabilities an account can hold."""
     ADMIN = "admin"
     USER = "user"
     MACHINE = "machine"


class User(CreatedAtMixin, Base):
     """
     User model - accounts, credentials and spending balance.

     Machine accounts (role=machine) are bound to the vending machine
     they approve transactions for.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     username = Column(String(255), unique=True, nullable=False, index=True)
     password = Column(String(255), nullable=False)  # bcrypt hash
     role = Column(
          Enum(
               Role,
               name="user_role",
               create_constraint=True,
               values_callable=lambda roles: [r.value for r in roles],
          ),
          default=Role.USER,
          nullable=False,
     )
     balance = Column(Numeric(12, 2), default=0, nullable=False)
     vending_machine_id = Column(
          Integer,
          ForeignKey("vending_machines.id"),
          nullable=True,
     )

     # Relationships
     vending_machine = relationship("VendingMachine")

     def __repr__(self):
          return f"<User(id={self.id}, username='{self.username}', role='{self.role.value}')>"
