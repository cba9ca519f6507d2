import click
import uvicorn

from catalog.infrastructure.cli.product_commands import (
    get_catalog,
    product_by_status,
    product_create,
    product_delete,
    product_list,
    product_show,
    product_status,
    product_update,
)
from catalog.infrastructure.config import load_settings
from catalog.infrastructure.http.api import create_app


@click.group()
def cli() -> None:
    """Product Catalog"""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: CATALOG_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: CATALOG_PORT).")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Serve the REST API."""
    settings = load_settings()
    app = create_app(get_catalog(ctx))
    uvicorn.run(
        app,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


# Register subcommands
product.add_command(product_create)
product.add_command(product_show)
product.add_command(product_list)
product.add_command(product_by_status)
product.add_command(product_update)
product.add_command(product_status)
product.add_command(product_delete)
