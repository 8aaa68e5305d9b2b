"""Household operation definitions: chores, tasks, batteries, equipment."""

from ...registry.operation_registry import OperationDefinition
from ..base import id_property, object_schema

TRACKED_TIME = {
    "type": "string",
    "description": "Time of execution in YYYY-MM-DD HH:mm:ss format (default: now)",
}
NOTE = {"type": "string", "description": "Optional note"}

UNDO_ENTITY_TYPES = ["chore", "battery", "task"]


definitions = [
    # Chores
    OperationDefinition(
        name="household_chores_get",
        description="[HOUSEHOLD/CHORES] Get all chores.",
    ),
    OperationDefinition(
        name="household_chores_execute",
        description="[HOUSEHOLD/CHORES] Track the execution of a chore.",
        input_schema=object_schema(
            {
                "choreId": id_property("ID of the chore. Use household_chores_get to find chore IDs."),
                "executedBy": id_property("ID of the user who did the chore. Use system_users_get to find user IDs."),
                "trackedTime": TRACKED_TIME,
                "note": NOTE,
            },
            required=["choreId"],
        ),
    ),

    # Tasks
    OperationDefinition(
        name="household_tasks_get",
        description="[HOUSEHOLD/TASKS] Get all tasks.",
    ),
    OperationDefinition(
        name="household_tasks_complete",
        description="[HOUSEHOLD/TASKS] Mark a task as completed.",
        input_schema=object_schema(
            {
                "taskId": id_property("ID of the task. Use household_tasks_get to find task IDs."),
                "note": NOTE,
            },
            required=["taskId"],
        ),
    ),

    # Batteries
    OperationDefinition(
        name="household_batteries_get",
        description="[HOUSEHOLD/BATTERIES] Get all batteries.",
    ),
    OperationDefinition(
        name="household_batteries_charge",
        description="[HOUSEHOLD/BATTERIES] Track a charge cycle of a battery.",
        input_schema=object_schema(
            {
                "batteryId": id_property("ID of the battery. Use household_batteries_get to find battery IDs."),
                "trackedTime": TRACKED_TIME,
                "note": NOTE,
            },
            required=["batteryId"],
        ),
    ),

    # Equipment
    OperationDefinition(
        name="household_equipment_get",
        description="[HOUSEHOLD/EQUIPMENT] Get all equipment.",
    ),

    # Undo
    OperationDefinition(
        name="household_actions_undo",
        description="[HOUSEHOLD/ACTIONS] Undo a chore execution, battery charge cycle or task completion.",
        input_schema=object_schema(
            {
                "entityType": {
                    "type": "string",
                    "enum": UNDO_ENTITY_TYPES,
                    "description": "Kind of action to undo",
                },
                "id": id_property("ID of the chore execution, charge cycle or task"),
            },
            required=["entityType", "id"],
        ),
    ),
]
