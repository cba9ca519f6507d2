"""CLI commands for the Product aggregate."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

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
from catalog.domain.model.read_model import ProductReadModel
from catalog.infrastructure.bootstrap import Catalog, bootstrap


def get_catalog(ctx: click.Context) -> Catalog:
    """Wire the handlers on first use so ``--help`` never touches storage."""
    root = ctx.find_root()
    if root.obj is None:
        root.obj = bootstrap()
    return root.obj


class DecimalParam(click.ParamType):
    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value))
        except InvalidOperation:
            self.fail(f"'{value}' is not a valid amount.", param, ctx)


DECIMAL = DecimalParam()
STATUS_CHOICE = click.Choice([s.value for s in ProductStatus], case_sensitive=False)


def _display_list(products: list[ProductReadModel]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<36}  {'Name':<20} {'Price':>12} {'Stock':>10} {'Status':<13} {'Ver':>4}"
    )
    click.echo("-" * 102)
    for p in products:
        price = f"{p.price_amount:.2f} {p.currency}"
        click.echo(
            f"{p.id:<36}  {p.name:<20} {price:>12} {p.stock_level:>10} "
            f"{p.status.value:<13} {p.version:>4}"
        )


@click.command("create")
@click.option("--name", required=True, help="Product name.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--price", required=True, type=DECIMAL, help="Price (e.g. 9.99).")
@click.option("--currency", default="USD", show_default=True, help="Currency code.")
@click.option("--stock", "stock_level", default=0, type=int, help="Units on hand.")
@click.option("--unit", default="unit", show_default=True, help="Stock unit.")
@click.pass_context
def product_create(
    ctx: click.Context,
    name: str,
    description: str,
    price: Decimal,
    currency: str,
    stock_level: int,
    unit: str,
) -> None:
    """Add a new product to the catalog (status DRAFT)."""
    handler = get_catalog(ctx).create_product

    try:
        product = handler.handle(
            CreateProductCommand(
                name=name,
                description=description,
                price=price,
                currency=currency,
                stock_level=stock_level,
                stock_unit=unit,
            )
        )
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' created at {product.price}")
    click.echo(f"Status: {product.status.value}  Version: {product.version}")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_context
def product_show(ctx: click.Context, product_id: str) -> None:
    """Show a single product."""
    handler = get_catalog(ctx).get_product

    try:
        p = handler.handle(GetProductQuery(product_id))
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {p.id}  (status={p.status.value}, version={p.version})")
    click.echo(f"Name:        {p.name}")
    click.echo(f"Description: {p.description}")
    click.echo(f"Price:       {p.price_amount:.2f} {p.currency}")
    click.echo(f"Stock:       {p.stock_level} {p.stock_unit}")


@click.command("list")
@click.option("--min-price", type=DECIMAL, default=None)
@click.option("--max-price", type=DECIMAL, default=None)
@click.option("--status", type=STATUS_CHOICE, default=None)
@click.option("--min-stock", type=int, default=None)
@click.option("--search", default="", help="Match name or description.")
@click.option("--page-size", type=int, default=0, help="0 lists everything.")
@click.option("--page", "page_number", type=int, default=0, help="Zero-indexed page.")
@click.pass_context
def product_list(
    ctx: click.Context,
    min_price: Decimal | None,
    max_price: Decimal | None,
    status: str | None,
    min_stock: int | None,
    search: str,
    page_size: int,
    page_number: int,
) -> None:
    """List products in the catalog."""
    handler = get_catalog(ctx).list_products

    try:
        result = handler.handle(
            ListProductsQuery(
                min_price=min_price,
                max_price=max_price,
                status=ProductStatus.parse(status) if status else None,
                min_stock=min_stock,
                search_term=search,
                page_size=page_size,
                page_number=page_number,
            )
        )
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    _display_list(result.products)


@click.command("by-status")
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def product_by_status(ctx: click.Context, status: str) -> None:
    """List every product in STATUS."""
    handler = get_catalog(ctx).list_products_by_status

    try:
        result = handler.handle(ProductStatus.parse(status))
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    _display_list(result.products)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--version", required=True, type=int, help="Version you last read.")
@click.option("--price", type=DECIMAL, default=None, help="New price.")
@click.option("--currency", default=None, help="New currency.")
@click.option("--stock", "stock_level", type=int, default=None, help="New stock level.")
@click.pass_context
def product_update(
    ctx: click.Context,
    product_id: str,
    version: int,
    price: Decimal | None,
    currency: str | None,
    stock_level: int | None,
) -> None:
    """Update a product's price and/or stock level."""
    handler = get_catalog(ctx).update_product

    try:
        product = handler.handle(
            UpdateProductCommand(
                product_id=product_id,
                version=version,
                price=price,
                currency=currency,
                stock_level=stock_level,
            )
        )
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product {product.id} updated: {product.price}, {product.stock} "
        f"(version {product.version})"
    )


@click.command("status")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option(
    "--action",
    required=True,
    type=click.Choice(["activate", "deactivate", "discontinue"], case_sensitive=False),
)
@click.option("--version", required=True, type=int, help="Version you last read.")
@click.pass_context
def product_status(ctx: click.Context, product_id: str, action: str, version: int) -> None:
    """Activate, deactivate or discontinue a product."""
    handler = get_catalog(ctx).change_product_status

    try:
        result = handler.handle(
            ChangeProductStatusCommand(
                product_id=product_id, action=action, version=version
            )
        )
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product {result.id} is now {result.status.value} (version {result.version})"
    )


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_context
def product_delete(ctx: click.Context, product_id: str) -> None:
    """Remove a product from the catalog."""
    handler = get_catalog(ctx).delete_product

    try:
        product = handler.handle(DeleteProductCommand(product_id))
    except CatalogError as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' deleted.")
