"""Household operations: chores, tasks, batteries, equipment."""

from ...registry.operation_registry import OperationModule
from . import handlers
from .definitions import definitions

MODULE = OperationModule(
    name="household",
    definitions=definitions,
    handlers={
        "household_chores_get": handlers.get_chores,
        "household_chores_execute": handlers.execute_chore,
        "household_tasks_get": handlers.get_tasks,
        "household_tasks_complete": handlers.complete_task,
        "household_batteries_get": handlers.get_batteries,
        "household_batteries_charge": handlers.charge_battery,
        "household_equipment_get": handlers.get_equipment,
        "household_actions_undo": handlers.undo_action,
    },
)

__all__ = ['MODULE', 'definitions']
