"""Tests for household handlers."""

import pytest

from grocy_mcp.operations.household import MODULE, handlers
from grocy_mcp.utils.response import result_texts


def test_module_bundle_complete():
    assert {d.name for d in MODULE.definitions} == set(MODULE.handlers)


@pytest.mark.asyncio
async def test_execute_chore(fake_client):
    await handlers.execute_chore(
        fake_client, {"choreId": 3, "executedBy": 1, "trackedTime": "2026-10-19 08:00:00"}, {}
    )

    call = fake_client.calls[0]
    assert (call["method"], call["endpoint"]) == ("POST", "/chores/3/execute")
    assert call["body"] == {"tracked_time": "2026-10-19 08:00:00", "done_by": 1}


@pytest.mark.asyncio
async def test_execute_chore_defaults_to_now(fake_client):
    await handlers.execute_chore(fake_client, {"choreId": 3}, {})

    tracked = fake_client.calls[0]["body"]["tracked_time"]
    assert len(tracked) == len("2026-10-19 08:00:00")


@pytest.mark.asyncio
async def test_complete_task(fake_client):
    await handlers.complete_task(fake_client, {"taskId": 5, "note": "done early"}, {})

    call = fake_client.calls[0]
    assert call["endpoint"] == "/tasks/5/complete"
    assert call["body"] == {"note": "done early"}


@pytest.mark.asyncio
async def test_charge_battery(fake_client):
    await handlers.charge_battery(fake_client, {"batteryId": 2, "trackedTime": "2026-10-19 09:00:00"}, {})

    call = fake_client.calls[0]
    assert call["endpoint"] == "/batteries/2/charge"
    assert call["body"] == {"tracked_time": "2026-10-19 09:00:00"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "entity_type, endpoint",
    [
        ("chore", "/chores/executions/7/undo"),
        ("Chores", "/chores/executions/7/undo"),
        ("battery", "/batteries/charge-cycles/7/undo"),
        ("task", "/tasks/7/undo"),
    ],
)
async def test_undo_endpoints(fake_client, entity_type, endpoint):
    result = await handlers.undo_action(fake_client, {"entityType": entity_type, "id": 7}, {})

    assert not result.isError
    assert fake_client.calls[0]["endpoint"] == endpoint
    assert fake_client.calls[0]["method"] == "POST"


@pytest.mark.asyncio
async def test_undo_unsupported_type(fake_client):
    result = await handlers.undo_action(fake_client, {"entityType": "equipment", "id": 7}, {})

    assert result.isError
    assert "Unsupported entity type: equipment" in result_texts(result)[0]
    assert fake_client.calls == []
