"""Options validation for recipe operations."""

from typing import Any, Mapping

from ...registry.validation import SubConfigValidationError, validate_boolean, validate_known_options

COOKED_SOMETHING_OPTIONS = ("allow_meal_plan_entry_already_done", "allow_no_meal_plan", "print_labels")


def validate_cooked_something_options(options: Mapping[str, Any]) -> None:
    """
    Options of recipes_cooking_cooked_something.

    ``allow_no_meal_plan`` switches to cooking a recipe directly, so it
    cannot be combined with ``allow_meal_plan_entry_already_done``.
    """
    for key in COOKED_SOMETHING_OPTIONS:
        validate_boolean(options.get(key), key)

    if options.get("allow_no_meal_plan") and options.get("allow_meal_plan_entry_already_done"):
        raise SubConfigValidationError(
            "allow_no_meal_plan and allow_meal_plan_entry_already_done cannot both be true",
            field="allow_no_meal_plan",
        )

    validate_known_options(options, COOKED_SOMETHING_OPTIONS, "recipes_cooking_cooked_something")
