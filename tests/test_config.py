"""Tests for the layered YAML + environment configuration resolver."""

import pytest
from pydantic import ValidationError

from grocy_mcp.config import ConfigurationError, load_config
from grocy_mcp.config.settings import (
    apply_env_overrides,
    collect_custom_headers,
    find_config_file,
)


def issue_paths(error: ConfigurationError):
    return [path for path, _ in error.issues]


# ========== Defaults ==========

def test_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"), environ={})

    assert config.transport.enabled is False
    assert config.transport.port == 8080
    assert config.downstream.base_url == "http://localhost:9283"
    assert config.downstream.verify_tls is True
    assert config.downstream.response_size_limit == 10000
    assert config.registry.duplicate_names == "error"
    assert config.operations == {}
    assert config.enabled_operations() == []


def test_empty_file_uses_defaults(make_config):
    config = make_config("")

    assert config.downstream.base_url == "http://localhost:9283"
    assert config.enabled_operations() == []


def test_api_url_strips_trailing_slashes(make_config):
    config = make_config("downstream:\n  base_url: https://grocy.example.com//\n")

    assert config.api_url == "https://grocy.example.com/api"


def test_config_is_frozen(make_config):
    config = make_config("")

    with pytest.raises(ValidationError):
        config.downstream.verify_tls = False


# ========== File Values ==========

def test_operations_enabled_and_options(make_config):
    config = make_config(
        """
operations:
  inventory_stock_get_all:
    enabled: true
  inventory_transactions_purchase:
    enabled: true
    proof_token: ALPHA_TOKEN
  recipes_cooking_cooked_something:
    enabled: true
    print_labels: false
  shopping_list_get:
    enabled: false
  system_users_get:
"""
    )

    assert config.enabled_operations() == [
        "inventory_stock_get_all",
        "inventory_transactions_purchase",
        "recipes_cooking_cooked_something",
    ]
    assert config.operations_with_proof_tokens() == ["inventory_transactions_purchase"]
    assert config.proof_token("inventory_transactions_purchase") == "ALPHA_TOKEN"
    assert config.proof_token("inventory_stock_get_all") is None
    assert dict(config.operation_options("recipes_cooking_cooked_something")) == {"print_labels": False}
    assert dict(config.operation_options("inventory_transactions_purchase")) == {}
    assert config.operations["system_users_get"].enabled is False


def test_unknown_operation_names_accepted(make_config):
    config = make_config("operations:\n  no_such_operation:\n    enabled: true\n")

    assert config.enabled_operations() == ["no_such_operation"]


# ========== Environment Overrides ==========

@pytest.mark.parametrize(
    "env_name, value, section, field, expected",
    [
        ("GROCY_BASE_URL", "https://env.example.com", "downstream", "base_url", "https://env.example.com"),
        ("GROCY_APIKEY_VALUE", "secret", "downstream", "api_key", "secret"),
        ("GROCY_ENABLE_SSL_VERIFY", "false", "downstream", "verify_tls", False),
        ("REST_RESPONSE_SIZE_LIMIT", "500", "downstream", "response_size_limit", 500),
        ("ENABLE_HTTP_SERVER", "true", "transport", "enabled", True),
        ("HTTP_SERVER_PORT", "9000", "transport", "port", 9000),
    ],
)
def test_env_beats_file(make_config, env_name, value, section, field, expected):
    config = make_config(
        """
transport:
  enabled: false
  port: 8081
downstream:
  base_url: http://file.example.com
  api_key: file-key
  verify_tls: true
  response_size_limit: 20000
""",
        environ={env_name: value},
    )

    assert getattr(getattr(config, section), field) == expected


def test_file_beats_default(make_config):
    config = make_config("transport:\n  port: 8081\n")

    assert config.transport.port == 8081


def test_empty_env_value_is_ignored(make_config):
    config = make_config("transport:\n  port: 8081\n", environ={"HTTP_SERVER_PORT": ""})

    assert config.transport.port == 8081


def test_apply_env_overrides_does_not_mutate_input():
    data = {"downstream": {"base_url": "http://a.example.com"}}

    merged = apply_env_overrides(data, {"GROCY_BASE_URL": "http://b.example.com"})

    assert merged["downstream"]["base_url"] == "http://b.example.com"
    assert data["downstream"]["base_url"] == "http://a.example.com"


def test_custom_headers_from_env(make_config):
    config = make_config("", environ={"HEADER_X-Forwarded-User": "alice", "OTHER": "x"})

    assert config.custom_headers == {"X-Forwarded-User": "alice"}
    assert collect_custom_headers({"HEADER_": "ignored"}) == {}


def test_config_path_from_env(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("transport:\n  port: 7000\n")

    config = load_config(environ={"GROCY_MCP_CONFIG": str(path)})

    assert config.transport.port == 7000


def test_default_file_lookup_prefers_yaml(tmp_path):
    (tmp_path / "grocy-mcp.yml").write_text("transport:\n  port: 7001\n")
    assert find_config_file(environ={}, cwd=tmp_path) == tmp_path / "grocy-mcp.yml"

    (tmp_path / "grocy-mcp.yaml").write_text("transport:\n  port: 7002\n")
    assert find_config_file(environ={}, cwd=tmp_path) == tmp_path / "grocy-mcp.yaml"


# ========== Violations ==========

@pytest.mark.parametrize("port", [0, 65536, -1])
def test_port_out_of_range(make_config, port):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config(f"transport:\n  port: {port}\n")

    assert issue_paths(exc_info.value) == ["transport.port"]


def test_port_from_env_not_a_number(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("", environ={"HTTP_SERVER_PORT": "eighty"})

    assert issue_paths(exc_info.value) == ["transport.port"]


@pytest.mark.parametrize("url", ["not a url", "ftp://grocy.example.com", "grocy.example.com"])
def test_base_url_must_be_http(make_config, url):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config(f"downstream:\n  base_url: '{url}'\n")

    assert issue_paths(exc_info.value) == ["downstream.base_url"]


@pytest.mark.parametrize("limit", [0, -5])
def test_response_size_limit_positive(make_config, limit):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config(f"downstream:\n  response_size_limit: {limit}\n")

    assert issue_paths(exc_info.value) == ["downstream.response_size_limit"]


def test_every_violation_reported(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config(
            """
transport:
  port: 0
downstream:
  response_size_limit: 0
"""
        )

    assert sorted(issue_paths(exc_info.value)) == [
        "downstream.response_size_limit",
        "transport.port",
    ]


def test_unknown_section_key_rejected(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("transport:\n  prot: 8080\n")

    assert issue_paths(exc_info.value) == ["transport.prot"]


def test_invalid_duplicate_policy(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("registry:\n  duplicate_names: ignore\n")

    assert issue_paths(exc_info.value) == ["registry.duplicate_names"]


def test_non_mapping_file(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("- just\n- a list\n")

    assert issue_paths(exc_info.value) == ["<root>"]


def test_invalid_yaml(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("transport: [unclosed\n")

    assert issue_paths(exc_info.value) == ["<file>"]


def test_custom_headers_not_allowed_in_file(make_config):
    with pytest.raises(ConfigurationError) as exc_info:
        make_config("custom_headers:\n  X-Test: 1\n")

    assert issue_paths(exc_info.value) == ["custom_headers"]
