"""System operations: locations, units, users and raw API access."""

from ...registry.operation_registry import OperationModule
from . import handlers
from .definitions import definitions

MODULE = OperationModule(
    name="system",
    definitions=definitions,
    handlers={
        "system_locations_get": handlers.get_locations,
        "system_units_get": handlers.get_quantity_units,
        "system_users_get": handlers.get_users,
        "system_dev_call_api": handlers.call_grocy_api,
        "system_dev_test_request": handlers.test_request,
    },
)

__all__ = ['MODULE', 'definitions']
