# dependencies.py
"""
FastAPI dependencies: settings, token verification and role gating.
"""
from typing import Any, Callable, Dict, Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from config import Settings
from database import get_session
from exceptions import AuthenticationError, ForbiddenError
from models import Role, User
from utils.security import decode_access_token


def get_app_settings(request: Request) -> Settings:
     return request.app.state.settings


def authorize(role: Role, allowed: Iterable[Role]) -> None:
     """Single authorization check: the actor's role must be in the allowed set."""
     if role not in set(allowed):
          raise ForbiddenError("You do not have permission to perform this action")


# Token Auth Dependency
def verify_token(request: Request, settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise AuthenticationError("Missing token")
     token = auth.split(" ", 1)[1]
     return decode_access_token(settings, token)


def get_current_user(
     token: Dict[str, Any] = Depends(verify_token),
     db: Session = Depends(get_session),
) -> User:
     """Load the account behind the token; its stored role is authoritative."""
     user_id = token.get("id")
     user = db.get(User, user_id) if user_id is not None else None
     if user is None:
          raise AuthenticationError("Invalid token")
     return user


def require_roles(*roles: Role) -> Callable[..., User]:
     """
     Dependency factory gating a route to a set of roles.

     Usage:
          @router.get("/", dependencies=[Depends(require_roles(Role.ADMIN))])
     """

     def dependency(user: User = Depends(get_current_user)) -> User:
          authorize(user.role, roles)
          return user

     return dependency


def get_optional_user(
     request: Request,
     settings: Settings = Depends(get_app_settings),
     db: Session = Depends(get_session),
) -> Optional[User]:
     """The authenticated account if a bearer token was sent, else None."""
     if not request.headers.get("Authorization"):
          return None
     token = verify_token(request, settings)
     return get_current_user(token, db)
