"""Shopping operations."""

from ...registry.operation_registry import OperationModule
from . import handlers
from .definitions import definitions

MODULE = OperationModule(
    name="shopping",
    definitions=definitions,
    handlers={
        "shopping_list_get": handlers.get_shopping_list,
        "shopping_list_add_item": handlers.add_shopping_list_item,
        "shopping_list_remove_item": handlers.remove_shopping_list_item,
        "shopping_list_print_thermal": handlers.print_shopping_list,
        "shopping_locations_get": handlers.get_shopping_locations,
    },
)

__all__ = ['MODULE', 'definitions']
