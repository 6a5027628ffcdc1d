# pos/core/errors.py

from fastapi import HTTPException, status


class PosError(Exception):
    """Base app error."""


class ValidationError(PosError):
    pass


class NotFoundError(PosError):
    pass


class InsufficientStockError(PosError):
    """A checkout line asks for more units than the product has on hand."""

    def __init__(self, line: int, product_id: int, product_name: str, requested: int, available: int):
        self.line = line
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient inventory for {product_name}")

    def to_detail(self) -> dict:
        return {
            "message": str(self),
            "line": self.line,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "requested": self.requested,
            "available": self.available,
        }


def to_http_exception(exc: PosError) -> HTTPException:
    if isinstance(exc, InsufficientStockError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_detail(),
        )

    if isinstance(exc, NotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        )

    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(exc),
    )
