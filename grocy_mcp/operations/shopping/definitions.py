"""Shopping list and shopping location operation definitions."""

from ...registry.operation_registry import OperationDefinition
from ..base import id_property, object_schema

definitions = [
    OperationDefinition(
        name="shopping_list_get",
        description="[SHOPPING/LIST] Get your current shopping list items.",
    ),
    OperationDefinition(
        name="shopping_list_add_item",
        description=(
            "[SHOPPING/LIST] Add an item to your shopping list. "
            "Use inventory_products_lookup first to find the product ID."
        ),
        input_schema=object_schema(
            {
                "productId": id_property("ID of the product to add"),
                "amount": {
                    "type": "number",
                    "description": "Amount in the product's stock unit (default: 1)",
                    "default": 1,
                },
                "shoppingListId": {
                    "type": "number",
                    "description": "ID of the shopping list (default: 1)",
                    "default": 1,
                },
                "note": {"type": "string", "description": "Optional note for the item"},
            },
            required=["productId"],
        ),
    ),
    OperationDefinition(
        name="shopping_list_remove_item",
        description=(
            "[SHOPPING/LIST] Remove an item from your shopping list. "
            "Use shopping_list_get first to find the item ID."
        ),
        input_schema=object_schema(
            {"shoppingListItemId": id_property("ID of the shopping list item to remove")},
            required=["shoppingListItemId"],
        ),
    ),
    OperationDefinition(
        name="shopping_list_print_thermal",
        description="[SHOPPING/PRINTING] Print the shopping list with a thermal printer.",
    ),
    OperationDefinition(
        name="shopping_locations_get",
        description="[SHOPPING/LOCATIONS] Get all shopping locations (stores).",
    ),
]
