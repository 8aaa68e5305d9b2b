"""Tests for resolving enabled operations and their options."""

import logging

import pytest

from grocy_mcp.registry import (
    OperationDefinition,
    OperationModule,
    OperationRegistry,
    UnknownOperationError,
    resolve_enablement,
)
from grocy_mcp.utils.response import success_response


async def handler(client, arguments, options):
    return success_response({})


@pytest.fixture
def registry():
    names = ["inventory_stock_get_all", "inventory_transactions_purchase", "shopping_list_get"]
    return OperationRegistry.from_modules([
        OperationModule(
            name="test",
            definitions=[OperationDefinition(name=n, description=n) for n in names],
            handlers={n: handler for n in names},
        )
    ])


def test_enabled_set_and_options(make_config, registry):
    config = make_config(
        """
operations:
  inventory_stock_get_all:
    enabled: true
  inventory_transactions_purchase:
    enabled: true
    proof_token: ALPHA_TOKEN
    some_option: 3
  shopping_list_get:
    enabled: false
    ignored_option: true
"""
    )

    result = resolve_enablement(config, registry)

    assert result.enabled == frozenset({"inventory_stock_get_all", "inventory_transactions_purchase"})
    assert result.is_enabled("inventory_stock_get_all")
    assert not result.is_enabled("shopping_list_get")
    # Only enabled operations with extra keys get an entry
    assert list(result.options) == ["inventory_transactions_purchase"]
    assert dict(result.options_for("inventory_transactions_purchase")) == {"some_option": 3}
    assert dict(result.options_for("inventory_stock_get_all")) == {}
    assert dict(result.options_for("shopping_list_get")) == {}


def test_unknown_enabled_operation_is_fatal(make_config, registry):
    config = make_config(
        """
operations:
  shopping_list_get:
    enabled: true
  zzz_missing:
    enabled: true
  aaa_missing:
    enabled: true
"""
    )

    with pytest.raises(UnknownOperationError) as exc_info:
        resolve_enablement(config, registry)

    assert exc_info.value.invalid == ["aaa_missing", "zzz_missing"]
    assert exc_info.value.valid == registry.get_names()
    assert "aaa_missing" in str(exc_info.value)


def test_unknown_disabled_operation_is_ignored(make_config, registry):
    config = make_config("operations:\n  zzz_missing:\n    enabled: false\n")

    result = resolve_enablement(config, registry)

    assert result.enabled == frozenset()


def test_nothing_enabled_warns(make_config, registry, caplog):
    config = make_config("")

    with caplog.at_level(logging.WARNING):
        result = resolve_enablement(config, registry)

    assert result.enabled == frozenset()
    assert "No operations enabled" in caplog.text


def test_options_are_read_only(make_config, registry):
    config = make_config("operations:\n  shopping_list_get:\n    enabled: true\n    list_id: 2\n")

    result = resolve_enablement(config, registry)

    with pytest.raises(TypeError):
        result.options_for("shopping_list_get")["list_id"] = 3
