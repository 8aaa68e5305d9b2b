"""
Sub-configuration (operation options) validation.

Validators are registered explicitly by each operation module, next to its
definitions and handlers, and looked up in the OperationRegistry by
operation name. An operation without a validator accepts its options as-is.

The helpers below are the building blocks validators use.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from ..config.settings import RESERVED_OPERATION_KEYS
from .operation_registry import OperationRegistry

logger = logging.getLogger(__name__)


class SubConfigValidationError(ValueError):
    """Operation options failed validation.

    Attributes:
        operation: Operation whose options were rejected
        field: Offending option key, when one can be named
    """

    def __init__(self, message: str, field: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.operation = operation

    def to_dict(self) -> dict:
        data = {"message": str(self)}
        if self.field:
            data["field"] = self.field
        if self.operation:
            data["operation"] = self.operation
        return data


# ============================================================================
# Helpers
# ============================================================================

def validate_boolean(value: Any, field: str) -> None:
    """Absent (None) or a bool."""
    if value is not None and not isinstance(value, bool):
        raise SubConfigValidationError(
            f"{field} must be a boolean, got {type(value).__name__}", field=field
        )


def validate_string(value: Any, field: str) -> None:
    """Absent (None) or a str."""
    if value is not None and not isinstance(value, str):
        raise SubConfigValidationError(
            f"{field} must be a string, got {type(value).__name__}", field=field
        )


def validate_number(
    value: Any,
    field: str,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    integer: bool = False,
) -> None:
    """Absent (None) or a number within the optional bounds."""
    if value is None:
        return
    # bool is an int subclass; a flag is never a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SubConfigValidationError(
            f"{field} must be a number, got {type(value).__name__}", field=field
        )
    if integer and not isinstance(value, int):
        raise SubConfigValidationError(f"{field} must be an integer", field=field)
    if min_value is not None and value < min_value:
        raise SubConfigValidationError(f"{field} must be at least {min_value}", field=field)
    if max_value is not None and value > max_value:
        raise SubConfigValidationError(f"{field} must be at most {max_value}", field=field)


def validate_known_options(
    options: Mapping[str, Any],
    known_options: Iterable[str],
    operation: str,
) -> None:
    """
    Reject option keys outside the allow-list.

    Raises:
        SubConfigValidationError: Naming the first unknown key and listing
            the valid ones
    """
    known = set(known_options) | RESERVED_OPERATION_KEYS
    for key in options:
        if key not in known:
            valid = ", ".join(sorted(set(known_options) - RESERVED_OPERATION_KEYS))
            raise SubConfigValidationError(
                f"Unknown option '{key}' for operation {operation}. "
                f"Valid options are: {valid}",
                field=key,
                operation=operation,
            )


# ============================================================================
# Dispatch
# ============================================================================

def validate_operation_options(
    registry: OperationRegistry,
    name: str,
    options: Mapping[str, Any],
) -> None:
    """
    Run the validator registered for ``name`` against its options.

    Raises:
        SubConfigValidationError: If a registered validator rejects them
    """
    validator = registry.get_validator(name)
    if validator is None:
        logger.debug(f"No options validator for {name}; accepting {sorted(options)}")
        return

    try:
        validator(options)
    except SubConfigValidationError as e:
        if e.operation is None:
            e.operation = name
        raise
    except (TypeError, ValueError) as e:
        raise SubConfigValidationError(str(e), operation=name) from e
