# routers/__init__.py
from .auth import router as auth_router
from .users import router as users_router
from .products import router as products_router
from .vending_machines import router as vending_machines_router
from .slots import router as slots_router
from .transactions import router as transactions_router

all_routers = [
     auth_router,
     users_router,
     products_router,
     vending_machines_router,
     slots_router,
     transactions_router,
]

__all__ = [
     "auth_router",
     "users_router",
     "products_router",
     "vending_machines_router",
     "slots_router",
     "transactions_router",
     "all_routers",
]
