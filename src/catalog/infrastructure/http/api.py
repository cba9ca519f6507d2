"""FastAPI app exposing the catalog handlers over REST.

The routes only decode requests into commands/queries, call the handler,
and encode the result. Every core error is turned into a JSON body by a
single exception handler keyed on the error kind.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from structlog.typing import FilteringBoundLogger

from catalog.application.dto import (
    ChangeProductStatusCommand,
    CreateProductCommand,
    DeleteProductCommand,
    GetProductQuery,
    ListProductsQuery,
    UpdateProductCommand,
)
from catalog.domain.exceptions import CatalogError
from catalog.domain.model.product import ProductStatus
from catalog.infrastructure.bootstrap import Catalog
from catalog.infrastructure.http.schemas import (
    ChangeStatusRequest,
    CreateProductRequest,
    ProductListResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)

STATUS_BY_KIND = {
    "validation": 400,
    "domain_rule": 422,
    "not_found": 404,
    "version_conflict": 409,
    "storage": 500,
}


def create_app(
    catalog: Catalog,
    logger: FilteringBoundLogger | None = None,
) -> FastAPI:
    log = logger or structlog.get_logger("catalog.http")
    app = FastAPI(title="Product Catalog")

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        status_code = STATUS_BY_KIND.get(exc.kind, 500)
        if status_code >= 500:
            log.error("http.error", path=request.url.path, kind=exc.kind, detail=str(exc))
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind, "detail": str(exc)},
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "http.request",
                method=request.method,
                path=request.url.path,
                status=500,
            )
            raise
        log.info(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response

    prefix = "/api/v1/products"

    @app.post(prefix, status_code=201, response_model=ProductResponse)
    def create_product(body: CreateProductRequest):
        product = catalog.create_product.handle(
            CreateProductCommand(
                name=body.name,
                description=body.description,
                price=body.price,
                currency=body.currency,
                stock_level=body.stock_level,
                stock_unit=body.stock_unit,
            )
        )
        return ProductResponse.from_product(product)

    @app.get(prefix, response_model=ProductListResponse)
    def list_products(
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        status: Optional[str] = None,
        min_stock: Optional[int] = None,
        search: str = "",
        page_size: int = 0,
        page: int = 0,
    ):
        result = catalog.list_products.handle(
            ListProductsQuery(
                min_price=min_price,
                max_price=max_price,
                status=ProductStatus.parse(status) if status else None,
                min_stock=min_stock,
                search_term=search,
                page_size=page_size,
                page_number=page,
            )
        )
        return ProductListResponse.from_result(result)

    @app.get(prefix + "/status/{status}", response_model=ProductListResponse)
    def list_products_by_status(status: str):
        result = catalog.list_products_by_status.handle(ProductStatus.parse(status))
        return ProductListResponse.from_result(result)

    @app.get(prefix + "/{product_id}", response_model=ProductResponse)
    def get_product(product_id: str):
        model = catalog.get_product.handle(GetProductQuery(product_id))
        return ProductResponse.from_read_model(model)

    @app.put(prefix + "/{product_id}", response_model=ProductResponse)
    def update_product(product_id: str, body: UpdateProductRequest):
        product = catalog.update_product.handle(
            UpdateProductCommand(
                product_id=product_id,
                version=body.version,
                price=body.price,
                currency=body.currency,
                stock_level=body.stock_level,
            )
        )
        return ProductResponse.from_product(product)

    @app.put(prefix + "/{product_id}/status", response_model=StatusResponse)
    def change_product_status(product_id: str, body: ChangeStatusRequest):
        result = catalog.change_product_status.handle(
            ChangeProductStatusCommand(
                product_id=product_id, action=body.action, version=body.version
            )
        )
        return StatusResponse.from_result(result)

    @app.delete(prefix + "/{product_id}", response_model=ProductResponse)
    def delete_product(product_id: str):
        product = catalog.delete_product.handle(DeleteProductCommand(product_id))
        return ProductResponse.from_product(product)

    return app
