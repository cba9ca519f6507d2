"""Request and response bodies of the HTTP API."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from catalog.application.dto import ProductListResult, ProductStatusResult
from catalog.domain.model.product import Product
from catalog.domain.model.read_model import ProductReadModel


class CreateProductRequest(BaseModel):
    name: str
    description: str = ""
    price: Decimal
    currency: str
    stock_level: int
    stock_unit: str


class UpdateProductRequest(BaseModel):
    """Omitted fields are left unchanged; ``version`` is always required."""

    version: int
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    stock_level: Optional[int] = None


class ChangeStatusRequest(BaseModel):
    action: str = Field(..., description="activate, deactivate or discontinue")
    version: int


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    price_amount: Decimal
    currency: str
    stock_level: int
    stock_unit: str
    status: str
    version: int

    @classmethod
    def from_product(cls, product: Product) -> ProductResponse:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price_amount=product.price.amount,
            currency=product.price.currency,
            stock_level=product.stock.quantity,
            stock_unit=product.stock.unit,
            status=product.status.value,
            version=product.version,
        )

    @classmethod
    def from_read_model(cls, model: ProductReadModel) -> ProductResponse:
        return cls(**model.to_dict())


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int

    @classmethod
    def from_result(cls, result: ProductListResult) -> ProductListResponse:
        return cls(
            products=[ProductResponse.from_read_model(m) for m in result.products],
            total=result.total,
        )


class StatusResponse(BaseModel):
    id: str
    status: str
    version: int

    @classmethod
    def from_result(cls, result: ProductStatusResult) -> StatusResponse:
        return cls(id=result.id, status=result.status.value, version=result.version)
