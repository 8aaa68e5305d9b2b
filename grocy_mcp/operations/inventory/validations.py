"""Options validation for inventory operations."""

from typing import Any, Mapping

from ...registry.validation import validate_boolean, validate_known_options, validate_number

LOOKUP_OPTIONS = ("max_results", "include_stock")


def validate_lookup_options(options: Mapping[str, Any]) -> None:
    validate_number(options.get("max_results"), "max_results", min_value=1, max_value=50, integer=True)
    validate_boolean(options.get("include_stock"), "include_stock")
    validate_known_options(options, LOOKUP_OPTIONS, "inventory_products_lookup")
