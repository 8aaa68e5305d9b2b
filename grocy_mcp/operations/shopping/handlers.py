"""Shopping operation handlers."""

from ..base import call_api, handle_errors, parse_number, require, success


@handle_errors
async def get_shopping_list(client, arguments, options):
    data = await call_api(client, "/objects/shopping_list")
    return success(client, data, "Shopping list retrieved successfully")


@handle_errors
async def add_shopping_list_item(client, arguments, options):
    require(arguments, "productId")
    body = {
        "product_id": parse_number(arguments["productId"], "productId"),
        "amount": parse_number(arguments.get("amount"), "amount", required=False) or 1,
        "shopping_list_id": parse_number(arguments.get("shoppingListId"), "shoppingListId", required=False) or 1,
        "note": arguments.get("note") or "",
    }
    data = await call_api(client, "/objects/shopping_list", "POST", body)
    return success(client, data, "Shopping list item added successfully")


@handle_errors
async def remove_shopping_list_item(client, arguments, options):
    require(arguments, "shoppingListItemId")
    data = await call_api(client, f"/objects/shopping_list/{arguments['shoppingListItemId']}", "DELETE")
    return success(client, data, "Shopping list item removed successfully")


@handle_errors
async def print_shopping_list(client, arguments, options):
    data = await call_api(client, "/print/shoppinglist/thermal")
    return success(client, data, "Shopping list sent to thermal printer")


@handle_errors
async def get_shopping_locations(client, arguments, options):
    data = await call_api(client, "/objects/shopping_locations")
    return success(client, data, "Shopping locations retrieved successfully")
