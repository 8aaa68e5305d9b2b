"""Inventory operation definitions: products, stock queries, stock transactions, stock entries."""

from ...registry.operation_registry import OperationDefinition
from ..base import id_property, object_schema

PRODUCT_FIELDS = [
    "id", "name", "description", "product_group_id", "active", "location_id",
    "shopping_location_id", "qu_id_purchase", "qu_id_stock", "min_stock_amount",
    "default_best_before_days", "default_best_before_days_after_open",
    "default_best_before_days_after_freezing", "default_best_before_days_after_thawing",
    "picture_file_name", "calories", "should_not_be_frozen",
    "treat_opened_as_out_of_stock", "no_own_stock", "parent_product_id",
    "quick_consume_amount", "hide_on_stock_overview",
]

PRODUCT_ID = id_property(
    "ID of the product. Use inventory_products_lookup to find the product ID by name."
)
STOCK_ID = id_property("ID of the stock entry. Use inventory_stock_get_by_product to find stock entry IDs.")
ENTRY_PRODUCT_ID = id_property("ID of the product the stock entry belongs to. Checked against the stock entry.")
LOCATION_ID = id_property("ID of the location. Use system_locations_get to find location IDs.")
NOTE = {"type": "string", "description": "Optional note for the transaction"}
AMOUNT = {
    "type": "number",
    "description": "Amount in the product's stock unit (e.g., 2 pieces, 1.5 kg, 750 ml).",
}
BEST_BEFORE_DATE = {
    "type": "string",
    "description": "Best before date in YYYY-MM-DD format.",
}


definitions = [
    # Products
    OperationDefinition(
        name="inventory_products_get",
        description="[INVENTORY/PRODUCTS] Get specific fields for all products. You must specify which fields to retrieve.",
        input_schema=object_schema(
            {
                "fields": {
                    "type": "array",
                    "items": {"type": "string", "enum": PRODUCT_FIELDS},
                    "description": 'Field names to retrieve. For basic lookup use ["id", "name"].',
                }
            },
            required=["fields"],
        ),
    ),
    OperationDefinition(
        name="inventory_products_get_groups",
        description="[INVENTORY/PRODUCTS] Get all product groups.",
    ),
    OperationDefinition(
        name="inventory_products_get_price_history",
        description="[INVENTORY/PRODUCTS] Get the price history of a product.",
        input_schema=object_schema({"productId": PRODUCT_ID}, required=["productId"]),
    ),
    OperationDefinition(
        name="inventory_products_lookup",
        description=(
            "[INVENTORY/PRODUCTS] Find products by approximate name and return their IDs, "
            "units and current stock entries, best match first."
        ),
        input_schema=object_schema(
            {"productName": {"type": "string", "description": "Product name to search for"}},
            required=["productName"],
        ),
    ),
    OperationDefinition(
        name="inventory_products_print_label",
        description="[INVENTORY/PRODUCTS] Print a label for a product.",
        input_schema=object_schema({"productId": PRODUCT_ID}, required=["productId"]),
    ),

    # Stock queries
    OperationDefinition(
        name="inventory_stock_get_all",
        description="[INVENTORY/STOCK] Get the current stock of every product in every location.",
    ),
    OperationDefinition(
        name="inventory_stock_get_by_product",
        description="[INVENTORY/STOCK] Get stock entries for a specific product.",
        input_schema=object_schema({"productId": PRODUCT_ID}, required=["productId"]),
    ),
    OperationDefinition(
        name="inventory_stock_get_volatile",
        description="[INVENTORY/STOCK] Get due, overdue, expired and missing products.",
        input_schema=object_schema(
            {
                "dueSoonDays": {
                    "type": "number",
                    "description": "Days ahead that count as due soon (default: Grocy setting)",
                }
            }
        ),
    ),
    OperationDefinition(
        name="inventory_stock_get_by_location",
        description="[INVENTORY/STOCK] Get stock entries stored in a specific location.",
        input_schema=object_schema({"locationId": LOCATION_ID}, required=["locationId"]),
    ),

    # Stock transactions
    OperationDefinition(
        name="inventory_transactions_purchase",
        description="[INVENTORY/TRANSACTIONS] Add a product to stock (purchase).",
        input_schema=object_schema(
            {
                "productId": PRODUCT_ID,
                "amount": AMOUNT,
                "bestBeforeDate": BEST_BEFORE_DATE,
                "price": {"type": "number", "description": "Price per stock unit"},
                "locationId": LOCATION_ID,
                "note": NOTE,
            },
            required=["productId", "amount"],
        ),
    ),
    OperationDefinition(
        name="inventory_transactions_consume",
        description="[INVENTORY/TRANSACTIONS] Remove a product from stock (consume or spoil).",
        input_schema=object_schema(
            {
                "productId": PRODUCT_ID,
                "amount": AMOUNT,
                "spoiled": {"type": "boolean", "description": "Whether the product was spoiled"},
                "locationId": LOCATION_ID,
                "note": NOTE,
            },
            required=["productId", "amount"],
        ),
    ),
    OperationDefinition(
        name="inventory_transactions_transfer",
        description="[INVENTORY/TRANSACTIONS] Move a product between locations.",
        input_schema=object_schema(
            {
                "productId": PRODUCT_ID,
                "amount": AMOUNT,
                "fromLocationId": LOCATION_ID,
                "toLocationId": LOCATION_ID,
                "note": NOTE,
            },
            required=["productId", "amount", "fromLocationId", "toLocationId"],
        ),
    ),
    OperationDefinition(
        name="inventory_transactions_adjust",
        description="[INVENTORY/TRANSACTIONS] Set the absolute stock amount of a product (inventory correction).",
        input_schema=object_schema(
            {
                "productId": PRODUCT_ID,
                "newAmount": {"type": "number", "description": "New total amount in stock"},
                "bestBeforeDate": BEST_BEFORE_DATE,
                "locationId": LOCATION_ID,
                "note": NOTE,
            },
            required=["productId", "newAmount"],
        ),
    ),
    OperationDefinition(
        name="inventory_transactions_open",
        description="[INVENTORY/TRANSACTIONS] Mark an amount of a product as opened.",
        input_schema=object_schema(
            {
                "productId": PRODUCT_ID,
                "amount": {"type": "number", "description": "Amount to open (default: 1)", "default": 1},
                "note": NOTE,
            },
            required=["productId"],
        ),
    ),

    # Stock entries
    OperationDefinition(
        name="inventory_stock_entry_print_label",
        description=(
            "[INVENTORY/STOCK] Print a label for a specific stock entry. "
            "Use inventory_stock_get_by_product to find valid stockId values."
        ),
        input_schema=object_schema(
            {"stockId": STOCK_ID, "productId": ENTRY_PRODUCT_ID},
            required=["stockId", "productId"],
        ),
    ),
    OperationDefinition(
        name="inventory_stock_entry_consume",
        description=(
            "[INVENTORY/STOCK] Consume from a specific stock entry. "
            "Use inventory_stock_get_by_product to find valid stockId values."
        ),
        input_schema=object_schema(
            {
                "stockId": STOCK_ID,
                "productId": ENTRY_PRODUCT_ID,
                "amount": AMOUNT,
                "spoiled": {
                    "type": "boolean",
                    "description": "Whether the product is spoiled (default: false)",
                    "default": False,
                },
                "note": NOTE,
            },
            required=["stockId", "productId", "amount"],
        ),
    ),
    OperationDefinition(
        name="inventory_stock_entry_transfer",
        description=(
            "[INVENTORY/STOCK] Transfer a specific stock entry to another location. "
            "Use inventory_stock_get_by_product to find valid stockId values."
        ),
        input_schema=object_schema(
            {
                "stockId": STOCK_ID,
                "productId": ENTRY_PRODUCT_ID,
                "amount": AMOUNT,
                "locationIdTo": id_property("ID of the destination location."),
                "note": NOTE,
            },
            required=["stockId", "productId", "amount", "locationIdTo"],
        ),
    ),
    OperationDefinition(
        name="inventory_stock_entry_open",
        description=(
            "[INVENTORY/STOCK] Mark a specific stock entry as opened. "
            "Use inventory_stock_get_by_product to find valid stockId values."
        ),
        input_schema=object_schema(
            {
                "stockId": STOCK_ID,
                "productId": ENTRY_PRODUCT_ID,
                "amount": AMOUNT,
                "note": NOTE,
            },
            required=["stockId", "productId", "amount"],
        ),
    ),
]
