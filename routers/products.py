# routers/products.py
"""
Product catalogue routes.

Admins and users can read; only admins can write.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_roles
from models import Product, Role, Transaction
from schemas.product import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from schemas.query import QueryRequest
from utils.query import field_map, run_query

logger = logging.getLogger(__name__)

router = APIRouter(
     prefix="/api/products",
     tags=["products"],
     dependencies=[Depends(require_roles(Role.ADMIN, Role.USER))],
)

admin_only = [Depends(require_roles(Role.ADMIN))]

PRODUCT_FIELDS = field_map(Product.id, Product.name, Product.price, Product.image)


def _get_product_or_404(db: Session, product_id: int) -> Product:
     product = db.get(Product, product_id)
     if not product:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Product with ID {product_id} not found"
          )
     return product


@router.get("", response_model=List[ProductResponse])
def list_products(db: Session = Depends(get_session)):
     return db.query(Product).order_by(Product.id).all()


@router.post("/query", response_model=ProductListResponse, summary="Filter, sort and paginate products")
def query_products(body: QueryRequest, db: Session = Depends(get_session)):
     products, count = run_query(db.query(Product), body.query, PRODUCT_FIELDS)
     return ProductListResponse(items=products, count=count)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_session)):
     return _get_product_or_404(db, product_id)


@router.post(
     "",
     response_model=ProductResponse,
     status_code=status.HTTP_201_CREATED,
     dependencies=admin_only,
)
def create_product(body: ProductCreate, db: Session = Depends(get_session)):
     product = Product(name=body.name, price=body.price, image=body.image)
     db.add(product)
     db.commit()
     db.refresh(product)
     logger.info(f"Created product id={product.id}")
     return product


@router.put("/{product_id}", response_model=ProductResponse, dependencies=admin_only)
def update_product(product_id: int, body: ProductUpdate, db: Session = Depends(get_session)):
     """
     Update an existing product. Only provided fields are updated.

     Pending transactions keep the product id they snapshotted; approval
     charges the price current at approval time.
     """
     product = _get_product_or_404(db, product_id)
     for field, value in body.model_dump(exclude_unset=True).items():
          setattr(product, field, value)
     db.commit()
     db.refresh(product)
     return product


@router.delete("/{product_id}", response_model=ProductResponse, dependencies=admin_only)
def delete_product(product_id: int, db: Session = Depends(get_session)):
     """Delete a product. Slots holding it become empty slots."""
     product = _get_product_or_404(db, product_id)
     response = ProductResponse.model_validate(product)
     db.execute(
          update(Transaction)
          .where(Transaction.product_id == product_id)
          .values(product_id=None)
          .execution_options(synchronize_session=False)
     )
     db.delete(product)
     db.commit()
     logger.info(f"Deleted product id={product_id}")
     return response
