# pos/routers/products.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from pos.database import get_db, get_write_db
from pos.models.categories import Category
from pos.models.products import Product
from pos.models.suppliers import Supplier
from pos.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(
    prefix="/api/products",
    tags=["Products"],
)


def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    return product


def _check_references(db: Session, category_id: Optional[int], supplier_id: Optional[int]):
    if category_id is not None and db.get(Category, category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    if supplier_id is not None and db.get(Supplier, supplier_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found",
        )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_write_db),
):
    _check_references(db, product_data.category_id, product_data.supplier_id)

    product = Product(**product_data.model_dump())

    db.add(product)
    db.commit()
    db.refresh(product)

    return product


@router.get("", response_model=list[ProductResponse])
def list_products(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None),
):
    query = db.query(Product)

    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(Product.name.ilike(pattern), Product.brand.ilike(pattern))
        )

    return query.order_by(Product.id.desc()).all()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    return _get_product_or_404(db, product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_write_db),
):
    product = _get_product_or_404(db, product_id)

    changes = product_data.model_dump(exclude_unset=True)

    # Required columns cannot be cleared, only replaced
    for field in ("name", "cost_price", "sell_price", "quantity"):
        if field in changes and changes[field] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{field} cannot be null",
            )

    _check_references(db, changes.get("category_id"), changes.get("supplier_id"))

    for field, value in changes.items():
        setattr(product, field, value)

    db.commit()
    db.refresh(product)

    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_write_db),
):
    product = _get_product_or_404(db, product_id)

    # Historical sale items keep their rows; product_id is nulled by the FK
    db.delete(product)
    db.commit()

    return {"success": True}
