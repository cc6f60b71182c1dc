# routers/auth.py
"""
Signup, login and "who am I" routes.

Public signup creates plain user accounts; admin and machine accounts can
only be created by an authenticated admin.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import Settings
from database import get_session
from dependencies import get_app_settings, get_current_user, get_optional_user
from exceptions import UsernameTakenError
from models import Role, User
from schemas.auth import AuthResponse, AuthUser, LoginRequest, SignUpRequest
from schemas.user import UserResponse
from utils.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _auth_response(settings: Settings, user: User) -> AuthResponse:
     token = create_access_token(settings, user.id, user.username, user.role.value)
     return AuthResponse(
          user=AuthUser(id=user.id, token=token, role=user.role, username=user.username)
     )


@router.post("/signUp", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
     body: SignUpRequest,
     db: Session = Depends(get_session),
     settings: Settings = Depends(get_app_settings),
     caller: Optional[User] = Depends(get_optional_user),
):
     """
     Register an account and return a signed token.

     - **role**: optional; anything other than `user` requires an admin token
     """
     role = Role.USER
     if body.role is not None:
          try:
               role = Role(body.role)
          except ValueError:
               raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid role: {body.role}"
               )
     if role != Role.USER and (caller is None or caller.role != Role.ADMIN):
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail=f"Only admins can create {role.value} accounts"
          )

     if db.query(User).filter(User.username == body.username).first():
          raise UsernameTakenError({"username": body.username})

     user = User(
          name=body.name,
          username=body.username,
          password=hash_password(body.password),
          role=role,
          balance=0,
     )
     db.add(user)
     try:
          db.commit()
     except IntegrityError:
          # Another signup took the username after the check above
          db.rollback()
          raise UsernameTakenError({"username": body.username})
     db.refresh(user)
     logger.info(f"Registered user id={user.id} role={role.value}")

     return _auth_response(settings, user)


@router.post("/login", response_model=AuthResponse)
def login(
     body: LoginRequest,
     db: Session = Depends(get_session),
     settings: Settings = Depends(get_app_settings),
):
     user = db.query(User).filter(User.username == body.username).first()
     if not user or not verify_password(body.password, user.password):
          raise HTTPException(
               status_code=status.HTTP_401_UNAUTHORIZED,
               detail="Invalid username or password"
          )
     return _auth_response(settings, user)


@router.get("/auth", response_model=UserResponse)
def who_am_i(user: User = Depends(get_current_user)):
     return user
