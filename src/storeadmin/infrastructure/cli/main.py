import click

from storeadmin.infrastructure.cli.category_commands import (
    category_add,
    category_delete,
    category_list,
    category_update,
)
from storeadmin.infrastructure.cli.config_commands import config_set, config_show
from storeadmin.infrastructure.cli.customer_commands import customer_add, customer_list
from storeadmin.infrastructure.cli.order_commands import (
    order_create,
    order_list,
    order_show,
    order_status,
)
from storeadmin.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_update,
)
from storeadmin.infrastructure.cli.report_commands import (
    report_categories,
    report_daily,
    report_kpis,
    report_low_stock,
    report_recent,
    report_sales,
    report_top_products,
)
from storeadmin.infrastructure.logging_config import configure_logging
from storeadmin.infrastructure.settings import get_settings


@click.group()
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Override STOREADMIN_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """storeadmin: store back office"""
    configure_logging(log_level or get_settings().log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def config() -> None:
    """Store name and logo."""


@cli.group()
def report() -> None:
    """Dashboard and sales reports."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_update)
category.add_command(category_add)
category.add_command(category_delete)
category.add_command(category_list)
category.add_command(category_update)
customer.add_command(customer_add)
customer.add_command(customer_list)
config.add_command(config_set)
config.add_command(config_show)
report.add_command(report_categories)
report.add_command(report_daily)
report.add_command(report_kpis)
report.add_command(report_low_stock)
report.add_command(report_recent)
report.add_command(report_sales)
report.add_command(report_top_products)
