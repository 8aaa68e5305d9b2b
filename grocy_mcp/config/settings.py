"""
Configuration resolver for grocy-mcp.

Loads ``grocy-mcp.yaml``, layers environment overrides on top of it and
validates the result into one frozen ``AppConfig``.

Precedence (highest first):
    1. Environment variables (see ENV_OVERRIDES)
    2. YAML file values
    3. Schema defaults

Usage:
    from grocy_mcp.config import load_config, ConfigurationError

    try:
        config = load_config()
    except ConfigurationError as e:
        for path, message in e.issues:
            logger.error(f"{path}: {message}")

The resolver never terminates the process. ``grocy_mcp.server.main`` is the
only place that turns a ``ConfigurationError`` into an exit code.
"""

import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Keys every operation entry understands; everything else is an option.
RESERVED_OPERATION_KEYS = frozenset({"enabled", "proof_token"})

DEFAULT_CONFIG_FILES = ("grocy-mcp.yaml", "grocy-mcp.yml")
CONFIG_PATH_ENV = "GROCY_MCP_CONFIG"
HEADER_ENV_PREFIX = "HEADER_"

# Environment variable -> (section, field)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "GROCY_BASE_URL": ("downstream", "base_url"),
    "GROCY_APIKEY_VALUE": ("downstream", "api_key"),
    "GROCY_ENABLE_SSL_VERIFY": ("downstream", "verify_tls"),
    "REST_RESPONSE_SIZE_LIMIT": ("downstream", "response_size_limit"),
    "ENABLE_HTTP_SERVER": ("transport", "enabled"),
    "HTTP_SERVER_PORT": ("transport", "port"),
}


# ============================================================================
# Exceptions
# ============================================================================

class ConfigurationError(Exception):
    """Configuration could not be loaded or failed validation.

    Attributes:
        issues: One ``(field_path, message)`` pair per violation
        source: Path of the configuration file involved, if any
    """

    def __init__(self, issues: List[Tuple[str, str]], source: Optional[Path] = None):
        self.issues = list(issues)
        self.source = source
        summary = "; ".join(f"{path}: {message}" for path, message in self.issues)
        super().__init__(f"Invalid configuration: {summary}")


# ============================================================================
# Schema
# ============================================================================

class TransportSettings(BaseModel):
    """Settings for the optional HTTP/SSE transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = Field(default=False, description="Serve MCP over HTTP/SSE")
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP listen port")
    host: str = Field(default="0.0.0.0", description="HTTP bind address")


class DownstreamSettings(BaseModel):
    """Connection settings for the Grocy REST service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = Field(default="http://localhost:9283", description="Grocy base URL")
    verify_tls: bool = Field(default=True, description="Verify TLS certificates")
    response_size_limit: int = Field(
        default=10000, gt=0, description="Maximum characters of response data returned to the caller"
    )
    api_key: Optional[str] = Field(default=None, description="Value of the GROCY-API-KEY header")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"must be an absolute http(s) URL, got '{v}'")
        return v

    @property
    def api_url(self) -> str:
        """Base URL of the REST API (``<base_url>/api``)."""
        return f"{self.base_url.rstrip('/')}/api"


class RegistrySettings(BaseModel):
    """How the operation registry treats name collisions between modules."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    duplicate_names: Literal["error", "overwrite"] = "error"


class OperationSettings(BaseModel):
    """Per-operation entry. Extra keys are operation options."""

    model_config = ConfigDict(frozen=True, extra="allow")

    enabled: bool = False
    proof_token: Optional[str] = None

    @property
    def options(self) -> Mapping[str, Any]:
        """Operation-specific keys, excluding ``enabled`` and ``proof_token``."""
        extra = self.model_extra or {}
        return MappingProxyType(
            {k: v for k, v in extra.items() if k not in RESERVED_OPERATION_KEYS}
        )


class AppConfig(BaseModel):
    """Resolved, read-only configuration for the whole process."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    transport: TransportSettings = Field(default_factory=TransportSettings)
    downstream: DownstreamSettings = Field(default_factory=DownstreamSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    operations: Dict[str, OperationSettings] = Field(default_factory=dict)
    custom_headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("operations", mode="before")
    @classmethod
    def empty_operation_entries(cls, v: Any) -> Any:
        """Treat ``operations: {name: }`` (null entry) as an empty entry."""
        if isinstance(v, dict):
            return {name: ({} if entry is None else entry) for name, entry in v.items()}
        return v

    @property
    def api_url(self) -> str:
        return self.downstream.api_url

    def enabled_operations(self) -> List[str]:
        """Names configured with ``enabled: true``, sorted."""
        return sorted(name for name, op in self.operations.items() if op.enabled)

    def operations_with_proof_tokens(self) -> List[str]:
        """Enabled operations that carry a proof token, sorted."""
        return sorted(
            name for name, op in self.operations.items()
            if op.enabled and op.proof_token
        )

    def proof_token(self, name: str) -> Optional[str]:
        op = self.operations.get(name)
        return op.proof_token if op else None

    def operation_options(self, name: str) -> Mapping[str, Any]:
        op = self.operations.get(name)
        return op.options if op else MappingProxyType({})


# ============================================================================
# Loading
# ============================================================================

def find_config_file(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> Path:
    """
    Locate the configuration file.

    Args:
        config_path: Explicit path (wins over everything)
        environ: Environment mapping, consulted for GROCY_MCP_CONFIG
        cwd: Directory searched for the default file names

    Returns:
        Path to use. It may not exist; a missing file means defaults.
    """
    if config_path:
        return Path(config_path)

    env = os.environ if environ is None else environ
    if env.get(CONFIG_PATH_ENV):
        return Path(env[CONFIG_PATH_ENV])

    base = cwd or Path.cwd()
    candidates = [base / name for name in DEFAULT_CONFIG_FILES]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read raw YAML configuration data.

    Missing and empty files both yield an empty dict.

    Raises:
        ConfigurationError: Unreadable file, invalid YAML, or a top-level
            value that is not a mapping
    """
    if not path.exists():
        logger.info(f"No configuration file found at {path}, using defaults")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError([("<file>", f"invalid YAML: {e}")], source=path) from e
    except OSError as e:
        raise ConfigurationError([("<file>", f"cannot read file: {e}")], source=path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            [("<root>", f"expected a mapping, got {type(data).__name__}")], source=path
        )

    logger.info(f"Loaded configuration from: {path}")
    return data


def apply_env_overrides(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """
    Layer environment overrides on top of raw file data.

    Values stay strings; pydantic coerces them during validation so that a
    bad value is reported with the same field path as a bad file value.

    Returns:
        New dict; ``data`` is left untouched.
    """
    merged = dict(data)
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        current = merged.get(section)
        if current is not None and not isinstance(current, dict):
            # Leave the malformed section for the schema to report.
            continue
        section_data = dict(current) if current else {}
        section_data[field] = value
        merged[section] = section_data
        logger.debug(f"Environment override {env_name} -> {section}.{field}")
    return merged


def collect_custom_headers(environ: Mapping[str, str]) -> Dict[str, str]:
    """Map every ``HEADER_<name>`` variable to a request header ``<name>``."""
    headers = {}
    for key, value in environ.items():
        if key.upper().startswith(HEADER_ENV_PREFIX) and len(key) > len(HEADER_ENV_PREFIX):
            headers[key[len(HEADER_ENV_PREFIX):]] = value
    return headers


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> AppConfig:
    """
    Resolve the process configuration.

    Args:
        config_path: Explicit YAML path
        environ: Environment snapshot (default: ``os.environ``)
        cwd: Directory searched for default file names

    Returns:
        Frozen AppConfig

    Raises:
        ConfigurationError: With one issue per violated field
    """
    env = dict(os.environ if environ is None else environ)
    path = find_config_file(config_path, env, cwd)

    data = read_config_file(path)
    data = apply_env_overrides(data, env)
    if "custom_headers" in data:
        raise ConfigurationError(
            [("custom_headers", "set via HEADER_<name> environment variables, not the file")],
            source=path,
        )
    data["custom_headers"] = collect_custom_headers(env)

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(_issues_from_validation_error(e), source=path) from e

    log_configuration(config)
    return config


def _issues_from_validation_error(error: ValidationError) -> List[Tuple[str, str]]:
    issues = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"]) or "<root>"
        issues.append((path, err["msg"]))
    return issues


def log_configuration(config: AppConfig) -> None:
    """Log a one-screen summary of the resolved configuration."""
    downstream = config.downstream
    transport = config.transport

    logger.info(f"Grocy base URL: {downstream.base_url}")
    logger.info(f"TLS verification: {'enabled' if downstream.verify_tls else 'disabled'}")
    logger.info(f"API key: {'configured' if downstream.api_key else 'not configured'}")
    logger.info(f"Response size limit: {downstream.response_size_limit}")
    if transport.enabled:
        logger.info(f"HTTP transport: enabled on {transport.host}:{transport.port}")
    else:
        logger.info("HTTP transport: disabled")

    enabled = config.enabled_operations()
    if enabled:
        logger.info(f"Enabled operations ({len(enabled)}): {', '.join(enabled)}")
    else:
        logger.info("No operations enabled")

    with_tokens = config.operations_with_proof_tokens()
    if with_tokens:
        logger.info(f"Operations with proof tokens ({len(with_tokens)}): {', '.join(with_tokens)}")
