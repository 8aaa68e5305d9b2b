"""Inventory operation handlers."""

import asyncio
import logging
from datetime import date
from difflib import SequenceMatcher
from typing import Any, Dict, List, Mapping

from ...api.client import ApiError
from ..base import (
    ArgumentError,
    as_list,
    call_api,
    handle_errors,
    parse_list,
    parse_number,
    pick_fields,
    require,
    success,
)
from ...utils.response import error_response

logger = logging.getLogger(__name__)

# Lookup ranking
NAME_WEIGHT = 1.0
DESCRIPTION_WEIGHT = 0.3
MATCH_THRESHOLD = 0.4
PERMISSIVE_THRESHOLD = 0.2
DEFAULT_MAX_RESULTS = 5


# ============================================================================
# Products
# ============================================================================

@handle_errors
async def get_products(client, arguments, options):
    fields = parse_list(arguments.get("fields"), "fields")
    products = await call_api(client, "/objects/products")
    return success(client, pick_fields(as_list(products), [str(f) for f in fields]))


@handle_errors
async def get_product_groups(client, arguments, options):
    data = await call_api(client, "/objects/product_groups")
    return success(client, data)


@handle_errors
async def get_price_history(client, arguments, options):
    require(arguments, "productId")
    data = await call_api(client, f"/stock/products/{arguments['productId']}/price-history")
    return success(client, data)


@handle_errors
async def print_product_label(client, arguments, options):
    require(arguments, "productId")
    data = await call_api(client, f"/stock/products/{arguments['productId']}/printlabel")
    return success(client, data, "Product label printed successfully")


# ============================================================================
# Stock Queries
# ============================================================================

@handle_errors
async def get_all_stock(client, arguments, options):
    data = await call_api(client, "/stock")
    return success(client, data)


@handle_errors
async def get_stock_by_product(client, arguments, options):
    require(arguments, "productId")
    entries = await call_api(client, f"/stock/products/{arguments['productId']}/entries")
    essential = pick_fields(
        as_list(entries),
        ["id", "amount", "best_before_date", "location_id", "open", "price", "purchased_date"],
    )
    return success(client, essential)


@handle_errors
async def get_stock_volatile(client, arguments, options):
    query = {}
    if arguments.get("dueSoonDays") is not None:
        query["due_soon_days"] = arguments["dueSoonDays"]
    data = await call_api(client, "/stock/volatile", query_params=query or None)
    return success(client, data)


@handle_errors
async def get_stock_by_location(client, arguments, options):
    require(arguments, "locationId")
    data = await call_api(client, f"/stock/locations/{arguments['locationId']}/entries")
    return success(client, data)


# ============================================================================
# Stock Transactions
# ============================================================================

@handle_errors
async def purchase_product(client, arguments, options):
    require(arguments, "productId", "amount")
    body: Dict[str, Any] = {"amount": arguments["amount"], "transaction_type": "purchase"}
    if arguments.get("bestBeforeDate"):
        body["best_before_date"] = arguments["bestBeforeDate"]
    if arguments.get("price") is not None:
        body["price"] = arguments["price"]
    if arguments.get("locationId"):
        body["location_id"] = arguments["locationId"]
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{arguments['productId']}/add", "POST", body)
    return success(client, data, "Product purchased successfully")


@handle_errors
async def consume_product(client, arguments, options):
    require(arguments, "productId", "amount")
    spoiled = bool(arguments.get("spoiled", False))
    body: Dict[str, Any] = {"amount": arguments["amount"], "transaction_type": "consume", "spoiled": spoiled}
    if arguments.get("locationId"):
        body["location_id"] = arguments["locationId"]
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{arguments['productId']}/consume", "POST", body)
    return success(client, data, "Product consumed successfully")


@handle_errors
async def transfer_product(client, arguments, options):
    require(arguments, "productId", "amount", "fromLocationId", "toLocationId")
    if arguments["fromLocationId"] == arguments["toLocationId"]:
        raise ArgumentError("fromLocationId and toLocationId must differ")
    body = {
        "amount": arguments["amount"],
        "location_id_from": arguments["fromLocationId"],
        "location_id_to": arguments["toLocationId"],
    }
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{arguments['productId']}/transfer", "POST", body)
    return success(client, data, "Product transferred successfully")


@handle_errors
async def adjust_product(client, arguments, options):
    require(arguments, "productId", "newAmount")
    body: Dict[str, Any] = {"new_amount": arguments["newAmount"]}
    if arguments.get("bestBeforeDate"):
        body["best_before_date"] = arguments["bestBeforeDate"]
    if arguments.get("locationId"):
        body["location_id"] = arguments["locationId"]
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{arguments['productId']}/inventory", "POST", body)
    return success(client, data, "Product inventory updated successfully")


@handle_errors
async def open_product(client, arguments, options):
    require(arguments, "productId")
    body: Dict[str, Any] = {"amount": arguments.get("amount", 1)}
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{arguments['productId']}/open", "POST", body)
    return success(client, data, "Product opened successfully")


# ============================================================================
# Stock Entries
# ============================================================================

async def resolve_stock_entry(client, arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Fetch the stock entry ``stockId`` and check it belongs to ``productId``.

    Raises:
        ArgumentError: If the entry has no product or belongs to another one
    """
    stock_id = parse_number(arguments["stockId"], "stockId")
    product_id = parse_number(arguments["productId"], "productId")

    entry = await call_api(client, f"/stock/entry/{stock_id}")
    if not isinstance(entry, dict) or not entry.get("product_id"):
        raise ArgumentError(f"Could not resolve product ID from stock entry {stock_id}")

    owner = parse_number(entry["product_id"], "product_id")
    if owner != product_id:
        raise ArgumentError(
            f"Product ID mismatch: stock entry {stock_id} belongs to product {owner}, "
            f"but {product_id} was provided"
        )
    return entry


@handle_errors
async def print_stock_entry_label(client, arguments, options):
    require(arguments, "stockId", "productId")
    await resolve_stock_entry(client, arguments)

    data = await call_api(client, f"/stock/entry/{arguments['stockId']}/printlabel")
    return success(client, data, "Stock entry label printed successfully")


@handle_errors
async def consume_stock_entry(client, arguments, options):
    require(arguments, "stockId", "productId", "amount")
    entry = await resolve_stock_entry(client, arguments)
    body: Dict[str, Any] = {
        "amount": arguments["amount"],
        "spoiled": bool(arguments.get("spoiled", False)),
        "stock_entry_id": entry.get("stock_id"),
        "location_id": entry.get("location_id"),
    }
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{entry['product_id']}/consume", "POST", body)
    return success(client, data, "Stock entry consumed successfully")


@handle_errors
async def transfer_stock_entry(client, arguments, options):
    require(arguments, "stockId", "productId", "amount", "locationIdTo")
    entry = await resolve_stock_entry(client, arguments)
    body: Dict[str, Any] = {
        "amount": arguments["amount"],
        "location_id_from": entry.get("location_id"),
        "location_id_to": arguments["locationIdTo"],
        "transaction_type": "transfer",
        "stock_entry_id": entry.get("stock_id"),
    }
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{entry['product_id']}/transfer", "POST", body)
    return success(client, data, "Stock entry transferred successfully")


@handle_errors
async def open_stock_entry(client, arguments, options):
    require(arguments, "stockId", "productId", "amount")
    entry = await resolve_stock_entry(client, arguments)
    body: Dict[str, Any] = {
        "amount": arguments["amount"],
        "stock_entry_id": entry.get("stock_id"),
        "location_id": entry.get("location_id"),
    }
    if arguments.get("note"):
        body["note"] = arguments["note"]

    data = await call_api(client, f"/stock/products/{entry['product_id']}/open", "POST", body)
    return success(client, data, "Stock entry opened successfully")


# ============================================================================
# Product Lookup
# ============================================================================

def _similarity(query: str, text: Any) -> float:
    if not text:
        return 0.0
    candidate = str(text).lower()
    if query in candidate:
        # Substring hits rank above any fuzzy match of similar length
        return 0.75 + 0.25 * (len(query) / len(candidate))
    return SequenceMatcher(None, query, candidate).ratio()


def rank_products(query: str, products: List[Mapping[str, Any]], threshold: float) -> List[Dict[str, Any]]:
    """
    Score products against ``query`` by name (and, weakly, description).

    Returns:
        Products with a ``matchScore`` (0-100) at or above ``threshold``,
        best first; ties keep catalog order
    """
    needle = query.strip().lower()
    scored = []
    for index, product in enumerate(products):
        score = max(
            NAME_WEIGHT * _similarity(needle, product.get("name")),
            DESCRIPTION_WEIGHT * _similarity(needle, product.get("description")),
        )
        if score >= threshold:
            scored.append((score, index, product))

    scored.sort(key=lambda item: (-item[0], item[1]))
    return [dict(product, matchScore=round(score * 100)) for score, _, product in scored]


def _sort_key(entry: Dict[str, Any]):
    # Entries without a best before date go last
    value = entry.get("bestBeforeDate")
    try:
        return (0, date.fromisoformat(str(value)[:10]))
    except ValueError:
        return (1, date.max)


async def _product_stock(client, product_id: Any) -> List[Dict[str, Any]]:
    try:
        entries = as_list(await call_api(client, f"/stock/products/{product_id}/entries"))
    except ApiError as e:
        logger.debug(f"No stock entries for product {product_id}: {e}")
        entries = []

    stock = [
        {
            "stockId": entry.get("id"),
            "amount": entry.get("amount"),
            "bestBeforeDate": entry.get("best_before_date"),
            "locationId": entry.get("location_id"),
        }
        for entry in entries
    ]
    stock.sort(key=_sort_key)
    return stock


@handle_errors
async def lookup_product(client, arguments, options):
    require(arguments, "productName")
    query = str(arguments["productName"])
    max_results = options.get("max_results", DEFAULT_MAX_RESULTS)
    include_stock = options.get("include_stock", True)

    products, locations, units = await asyncio.gather(
        call_api(client, "/objects/products"),
        call_api(client, "/objects/locations"),
        call_api(client, "/objects/quantity_units"),
    )
    products, locations, units = as_list(products), as_list(locations), as_list(units)

    matches = rank_products(query, products, MATCH_THRESHOLD)
    permissive = False
    if not matches:
        matches = rank_products(query, products, PERMISSIVE_THRESHOLD)
        permissive = bool(matches)
    matches = matches[:max_results]

    if not matches:
        return error_response(
            f'No products found matching "{query}"',
            {
                "suggestion": "Try a different product name or check the spelling",
                "availableProducts": [p.get("name") for p in products[:10]],
            },
        )

    units_by_id = {str(u.get("id")): u for u in units}
    stocks = []
    if include_stock:
        stocks = await asyncio.gather(*(_product_stock(client, m.get("id")) for m in matches))

    results = []
    for i, product in enumerate(matches):
        unit = units_by_id.get(str(product.get("qu_id_stock")))
        entry: Dict[str, Any] = {
            "productId": product.get("id"),
            "productName": product.get("name"),
            "matchScore": product["matchScore"],
            "unit": {"id": unit.get("id"), "name": unit.get("name")} if unit else {"id": None, "name": "pieces"},
        }
        if permissive:
            entry["isPermissiveMatch"] = True
        if include_stock:
            stock = stocks[i]
            entry["stockEntries"] = stock
            entry["totalStockAmount"] = sum(float(s.get("amount") or 0) for s in stock)
            if len({s.get("locationId") for s in stock}) > 1:
                entry["locationInstructions"] = (
                    "IMPORTANT: This product has stock in multiple locations. Confirm the "
                    "locationId with the user before performing any operations."
                )
        results.append(entry)

    return success(
        client,
        {
            "productMatches": results,
            "allAvailableLocations": [{"id": l.get("id"), "name": l.get("name")} for l in locations],
        },
        f'Found {len(results)} product matches for "{query}" (most likely first)',
    )
