"""Household operation handlers."""

from datetime import datetime
from typing import Any, Dict

from ..base import ArgumentError, call_api, handle_errors, require, success

UNDO_ENDPOINTS = {
    "chore": "/chores/executions/{id}/undo",
    "battery": "/batteries/charge-cycles/{id}/undo",
    "task": "/tasks/{id}/undo",
}
PLURALS = {"chores": "chore", "batteries": "battery", "tasks": "task"}


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


# ============================================================================
# Chores
# ============================================================================

@handle_errors
async def get_chores(client, arguments, options):
    data = await call_api(client, "/objects/chores")
    return success(client, data)


@handle_errors
async def execute_chore(client, arguments, options):
    require(arguments, "choreId")
    body: Dict[str, Any] = {"tracked_time": arguments.get("trackedTime") or _now()}
    if arguments.get("executedBy"):
        body["done_by"] = arguments["executedBy"]
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/chores/{arguments['choreId']}/execute", "POST", body)
    return success(client, data, "Chore execution tracked successfully")


# ============================================================================
# Tasks
# ============================================================================

@handle_errors
async def get_tasks(client, arguments, options):
    data = await call_api(client, "/objects/tasks")
    return success(client, data)


@handle_errors
async def complete_task(client, arguments, options):
    require(arguments, "taskId")
    body = {"note": arguments["note"]} if arguments.get("note") else {}
    data = await call_api(client, f"/tasks/{arguments['taskId']}/complete", "POST", body)
    return success(client, data, "Task completed successfully")


# ============================================================================
# Batteries and Equipment
# ============================================================================

@handle_errors
async def get_batteries(client, arguments, options):
    data = await call_api(client, "/objects/batteries")
    return success(client, data)


@handle_errors
async def charge_battery(client, arguments, options):
    require(arguments, "batteryId")
    body: Dict[str, Any] = {"tracked_time": arguments.get("trackedTime") or _now()}
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/batteries/{arguments['batteryId']}/charge", "POST", body)
    return success(client, data, "Battery charged successfully")


@handle_errors
async def get_equipment(client, arguments, options):
    data = await call_api(client, "/objects/equipment")
    return success(client, data)


# ============================================================================
# Undo
# ============================================================================

@handle_errors
async def undo_action(client, arguments, options):
    require(arguments, "entityType", "id")
    entity_type = str(arguments["entityType"]).lower()
    entity_type = PLURALS.get(entity_type, entity_type)
    if entity_type not in UNDO_ENDPOINTS:
        raise ArgumentError(
            f"Unsupported entity type: {arguments['entityType']}. "
            f"Valid types: {', '.join(UNDO_ENDPOINTS)}"
        )

    endpoint = UNDO_ENDPOINTS[entity_type].format(id=arguments["id"])
    data = await call_api(client, endpoint, "POST")
    return success(client, data, f"{entity_type} action undone successfully")
