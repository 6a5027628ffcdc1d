# pos/routers/suppliers.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from pos.database import get_db, get_write_db
from pos.models.suppliers import Supplier
from pos.schemas.supplier import (
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
)

router = APIRouter(
    prefix="/api/suppliers",
    tags=["Suppliers"],
)


def _get_supplier_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()

    if not supplier:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Supplier not found",
        )

    return supplier


@router.get("", response_model=list[SupplierResponse])
def list_suppliers(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None),
):
    query = db.query(Supplier)

    if search:
        query = query.filter(Supplier.name.ilike(f"%{search.strip()}%"))

    return query.order_by(Supplier.name).all()


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_supplier(
    supplier_data: SupplierCreate,
    db: Session = Depends(get_write_db),
):
    supplier = Supplier(
        name=supplier_data.name.strip(),
        contact=supplier_data.contact,
        address=supplier_data.address,
    )

    db.add(supplier)
    db.commit()
    db.refresh(supplier)

    return supplier


@router.put("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: int,
    supplier_data: SupplierUpdate,
    db: Session = Depends(get_write_db),
):
    supplier = _get_supplier_or_404(db, supplier_id)

    if supplier_data.name is not None:
        supplier.name = supplier_data.name.strip()

    if supplier_data.contact is not None:
        supplier.contact = supplier_data.contact

    if supplier_data.address is not None:
        supplier.address = supplier_data.address

    db.commit()
    db.refresh(supplier)

    return supplier


@router.delete("/{supplier_id}")
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_write_db),
):
    supplier = _get_supplier_or_404(db, supplier_id)

    # Products keep existing with supplier_id set to NULL
    db.delete(supplier)
    db.commit()

    return {"success": True}
