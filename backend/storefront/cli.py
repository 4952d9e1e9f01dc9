# Overview: Flask CLI command groups for quoting prices and tracking orders.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to storefront (PowerShell: $env:FLASK_APP="storefront").
# - Use: python -m flask <group> <command> [options]
#
# Pricing:
# - python -m flask pricing quote --price 1000 --discounted 800 --tier 3:5 --quantity 3
#   Price a product at a quantity (unit price, line total, badge, savings).
#   --tier may be repeated; --tax overrides the default tax percent.
#
# Orders:
# - python -m flask orders track ORD-1001
#   Fetch an order from the remote store and print its timeline.

import click
from decimal import Decimal
from flask import current_app
from flask.cli import with_appcontext

from .errors import StorefrontError, ValidationError
from .extensions import storefront_api
from .models import BulkDiscountTier, CartLine, Product, to_decimal
from .services import order_lookup_service, pricing_service, timeline_service
from .services.pricing_service import quantize_money


def _parse_tier(value: str) -> BulkDiscountTier:
    try:
        min_quantity, percent = value.split(":", 1)
        return BulkDiscountTier(min_quantity=int(min_quantity), discount_percent=Decimal(percent))
    except (ValueError, ArithmeticError):
        raise click.BadParameter(f"expected MIN:PERCENT, got '{value}'")


@click.group('pricing')
def pricing_group():
    """Price engine commands."""


@pricing_group.command('quote')
@click.option('--price', required=True, help='List price')
@click.option('--discounted', default=None, help='Homepage (promotional) price')
@click.option('--tier', 'tiers', multiple=True, help='Bulk tier as MIN:PERCENT (repeatable)')
@click.option('--quantity', type=int, default=1, show_default=True, help='Quantity')
@click.option('--tax', default=None, help='Tax percent for this product')
@with_appcontext
def quote_cli(price, discounted, tiers, quantity, tax):
    """Price a product at a quantity."""
    try:
        product = Product(
            id="cli",
            name="Quoted product",
            base_price=to_decimal(price, "price"),
            discounted_price=to_decimal(discounted, "discounted") if discounted else None,
            bulk_discounts=tuple(_parse_tier(t) for t in tiers),
            tax_percent=to_decimal(tax, "tax") if tax else None,
        )
        line = pricing_service.price_line(product, quantity)
        tax_amount = pricing_service.total_tax(
            [CartLine(product=product, quantity=quantity)],
            current_app.config["DEFAULT_TAX_PERCENT"],
        )
    except ValidationError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(f"Unit price:    {quantize_money(line.unit_price)}")
    click.echo(f"Line total:    {quantize_money(line.line_total)}")
    click.echo(f"Tax:           {quantize_money(tax_amount)}")
    if line.applied_tier:
        click.echo(
            f"Bulk tier:     {line.applied_tier.min_quantity}+ at {line.applied_tier.discount_percent}%"
        )
    click.echo(f"Badge:         {pricing_service.badge_percent(line.total_discount_percent)}% OFF")
    click.echo(f"You save:      {quantize_money(line.savings)}")


@click.group('orders')
def orders_group():
    """Order tracking commands."""


@orders_group.command('track')
@click.argument('order_id')
@with_appcontext
def track_cli(order_id):
    """Print an order's status timeline."""
    try:
        with storefront_api() as api:
            order = order_lookup_service.lookup_order(api, order_id)
    except StorefrontError as e:
        click.echo(f"FAIL {order_lookup_service.user_message(e)}")
        raise SystemExit(1)

    click.echo("\n" + "="*80)
    click.echo(f"Order {order.display_id}  [{order.status.value}]")
    click.echo("="*80)

    for entry in timeline_service.render_timeline(order):
        where = f" @ {entry.location}" if entry.location else ""
        when = entry.date.strftime("%Y-%m-%d %H:%M") if entry.date else "-"
        click.echo(f"{when:<17} {entry.status.value:<18} {entry.description}{where}")

    rows = timeline_service.format_tracking(order)
    if rows:
        click.echo("-"*80)
        for label, value in rows:
            click.echo(f"{label + ':':<20} {value}")

    click.echo("="*80 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(pricing_group)
    app.cli.add_command(orders_group)
