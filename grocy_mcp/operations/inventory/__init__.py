"""Inventory operations: products, stock queries, stock transactions and stock entries."""

from ...registry.operation_registry import OperationModule
from . import handlers
from .definitions import definitions
from .validations import validate_lookup_options

MODULE = OperationModule(
    name="inventory",
    definitions=definitions,
    handlers={
        # Products
        "inventory_products_get": handlers.get_products,
        "inventory_products_get_groups": handlers.get_product_groups,
        "inventory_products_get_price_history": handlers.get_price_history,
        "inventory_products_lookup": handlers.lookup_product,
        "inventory_products_print_label": handlers.print_product_label,
        # Stock queries
        "inventory_stock_get_all": handlers.get_all_stock,
        "inventory_stock_get_by_product": handlers.get_stock_by_product,
        "inventory_stock_get_volatile": handlers.get_stock_volatile,
        "inventory_stock_get_by_location": handlers.get_stock_by_location,
        # Stock transactions
        "inventory_transactions_purchase": handlers.purchase_product,
        "inventory_transactions_consume": handlers.consume_product,
        "inventory_transactions_transfer": handlers.transfer_product,
        "inventory_transactions_adjust": handlers.adjust_product,
        "inventory_transactions_open": handlers.open_product,
        # Stock entries
        "inventory_stock_entry_print_label": handlers.print_stock_entry_label,
        "inventory_stock_entry_consume": handlers.consume_stock_entry,
        "inventory_stock_entry_transfer": handlers.transfer_stock_entry,
        "inventory_stock_entry_open": handlers.open_stock_entry,
    },
    validators={
        "inventory_products_lookup": validate_lookup_options,
    },
)

__all__ = ['MODULE', 'definitions']
