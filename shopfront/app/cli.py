from __future__ import annotations

import click
from flask import Blueprint

from shopfront.app.extensions import storefront

cli_bp = Blueprint("cli", __name__)


@cli_bp.cli.command("shop-info")
@click.option("--limit", default=10, show_default=True, help="How many products to list.")
def shop_info(limit: int) -> None:
    """Check the Storefront API credentials.

    Prints the shop name and the first few products; fails loudly when the
    domain or token is wrong.
    """

    api = storefront.api
    shop = api.get_shop()
    products = api.get_products(limit)

    click.echo(f"Shop: {shop.name}")
    if shop.primary_domain:
        click.echo(f"Domain: {shop.primary_domain}")
    click.echo(f"Products ({len(products)}):")
    for p in products:
        stock = "in stock" if p.in_stock else "sold out"
        click.echo(f"  {p.handle:<30} {p.price:>12}  {len(p.variants)} variant(s), {stock}")
