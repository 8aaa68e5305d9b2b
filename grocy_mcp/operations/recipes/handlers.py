"""Recipe operation handlers."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List

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

logger = logging.getLogger(__name__)


# ============================================================================
# Management
# ============================================================================

@handle_errors
async def get_recipes(client, arguments, options):
    fields = parse_list(arguments.get("fields"), "fields")
    recipes = await call_api(client, "/objects/recipes", query_params={"query[]": "type=normal"})
    return success(client, pick_fields(as_list(recipes), [str(f) for f in fields]))


@handle_errors
async def get_recipe_by_id(client, arguments, options):
    require(arguments, "recipeId")
    recipe_id = parse_number(arguments["recipeId"], "recipeId")
    data = await call_api(client, f"/objects/recipes/{recipe_id}")
    return success(client, data)


@handle_errors
async def create_recipe(client, arguments, options):
    require(arguments, "name")
    body = {
        "name": arguments["name"],
        "description": arguments.get("description") or "",
        "base_servings": parse_number(arguments.get("baseServings"), "baseServings", required=False) or 1,
        "type": "normal",
        "instructions": arguments.get("instructions") or "",
    }
    data = await call_api(client, "/objects/recipes", "POST", body)
    return success(client, data, f'Recipe "{arguments["name"]}" created successfully')


# ============================================================================
# Fulfillment
# ============================================================================

@handle_errors
async def get_recipe_fulfillment(client, arguments, options):
    require(arguments, "recipeId")
    recipe_id = parse_number(arguments["recipeId"], "recipeId")
    data = await call_api(client, f"/recipes/{recipe_id}/fulfillment")
    return success(client, data)


@handle_errors
async def get_all_recipe_fulfillment(client, arguments, options):
    data = await call_api(client, "/recipes/fulfillment")
    return success(client, data)


# ============================================================================
# Meal Plan
# ============================================================================

def meal_plan_days(target: date, weekly: bool) -> List[date]:
    """
    Days to query for a meal plan request.

    One extra day on each side absorbs timezone differences between the
    caller and the Grocy instance.
    """
    if weekly:
        monday = target - timedelta(days=target.weekday())
        return [monday + timedelta(days=offset) for offset in range(-1, 8)]
    return [target + timedelta(days=offset) for offset in (-1, 0, 1)]


@handle_errors
async def get_meal_plan(client, arguments, options):
    require(arguments, "date")
    try:
        target = date.fromisoformat(str(arguments["date"]))
    except ValueError:
        raise ArgumentError("Invalid date format. Use YYYY-MM-DD.")
    weekly = bool(arguments.get("weekly", False))

    days = await asyncio.gather(*(
        call_api(client, "/objects/meal_plan", query_params={"query[]": f"day={day.isoformat()}", "order": "day"})
        for day in meal_plan_days(target, weekly)
    ))
    entries = [entry for day in days for entry in as_list(day)]

    if not entries:
        return success(
            client,
            {
                "message": "No meals planned for the requested week" if weekly
                else "No meals planned for the requested date",
                "meal_plan_by_date": {},
            },
            "Meal plan retrieved successfully",
        )

    recipe_ids = list(dict.fromkeys(e.get("recipe_id") for e in entries if e.get("recipe_id")))
    recipes, sections = await asyncio.gather(
        asyncio.gather(*(call_api(client, f"/objects/recipes/{rid}") for rid in recipe_ids)),
        call_api(client, "/objects/meal_plan_sections"),
    )

    by_date: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        by_date.setdefault(entry.get("day"), []).append({
            key: entry.get(key)
            for key in ("id", "day", "section_id", "recipe_id", "recipe_servings", "note", "done")
        })

    return success(
        client,
        {
            "meal_plan_by_date": by_date,
            "recipes": pick_fields([r for r in recipes if isinstance(r, dict)], ["id", "name", "product_id"]),
            "sections": pick_fields(as_list(sections), ["id", "name", "time_info"]),
        },
        "Meal plan retrieved successfully",
    )


@handle_errors
async def get_meal_plan_sections(client, arguments, options):
    data = await call_api(client, "/objects/meal_plan_sections")
    return success(client, data, "Meal plan sections retrieved successfully")


@handle_errors
async def add_recipe_to_meal_plan(client, arguments, options):
    require(arguments, "recipeId", "day", "servings", "sectionId")
    body = {
        "day": arguments["day"],
        "type": "recipe",
        "recipe_id": parse_number(arguments["recipeId"], "recipeId"),
        "recipe_servings": parse_number(arguments["servings"], "servings"),
        "section_id": parse_number(arguments["sectionId"], "sectionId"),
    }
    data = await call_api(client, "/objects/meal_plan", "POST", body)
    return success(client, data, "Recipe added to meal plan successfully")


@handle_errors
async def delete_meal_plan_entry(client, arguments, options):
    require(arguments, "mealPlanEntryId")
    data = await call_api(client, f"/objects/meal_plan/{arguments['mealPlanEntryId']}", "DELETE")
    return success(client, data, "Recipe deleted from meal plan successfully")


# ============================================================================
# Cooking
# ============================================================================

@handle_errors
async def consume_recipe(client, arguments, options):
    require(arguments, "recipeId")
    recipe_id = parse_number(arguments["recipeId"], "recipeId")
    servings = parse_number(arguments.get("servings"), "servings", required=False)

    if servings is not None:
        await call_api(client, f"/objects/recipes/{recipe_id}", "PUT", {"desired_servings": servings})
    data = await call_api(client, f"/recipes/{recipe_id}/consume", "POST")

    suffix = f" ({servings} servings)" if servings is not None else ""
    return success(client, data, f"Recipe {recipe_id} consumed{suffix}")


def _parse_stock_amounts(value: Any) -> List[float]:
    amounts = parse_list(value, "stockAmounts")
    for i, amount in enumerate(amounts):
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise ArgumentError(f"stockAmounts[{i}] must be a positive number, got: {amount}")
    return amounts


async def _stock_row_id(client, product_id: Any, stock_id: Any) -> Any:
    """
    Row id of the stock entry a booking created.

    Raises:
        ApiError: If no stock row carries ``stock_id`` for ``product_id``
    """
    rows = as_list(await call_api(client, "/objects/stock"))
    for row in rows:
        if str(row.get("product_id")) == str(product_id) and row.get("stock_id") == stock_id:
            return row.get("id")
    raise ApiError(
        f"Could not find created stock entry with product_id {product_id} and stock_id {stock_id}",
        operation="GET /api/objects/stock",
    )


async def split_stock_entry(
    client,
    entry: Dict[str, Any],
    amounts: List[float],
    unit_form: Callable[[float], str],
) -> List[Dict[str, Any]]:
    """
    Split ``entry`` into one stock entry per amount.

    The first amount replaces the original entry in place; every further
    amount is booked as a new purchase with the same dates and location.
    A created entry is reported by its stock row id, looked up in
    ``/objects/stock`` by the booking's stock id.
    """
    base_note = entry.get("note") or ""
    split = []
    for i, amount in enumerate(amounts):
        note = f"{base_note} - {entry.get('id')} - {i + 1}"
        if i == 0:
            await call_api(client, f"/stock/entry/{entry.get('id')}", "PUT", {
                "amount": amount,
                "open": False,
                "note": note,
                "best_before_date": entry.get("best_before_date"),
                "purchased_date": entry.get("purchased_date"),
                "location_id": entry.get("location_id"),
            })
            split.append({"stockId": entry.get("id"), "amount": amount, "type": "updated", "unit": unit_form(amount)})
            continue

        created = await call_api(client, f"/stock/products/{entry.get('product_id')}/add", "POST", {
            "amount": amount,
            "best_before_date": entry.get("best_before_date"),
            "purchased_date": entry.get("purchased_date"),
            "transaction_type": "purchase",
            "location_id": entry.get("location_id"),
            "note": note,
        })
        booking = as_list(created)[0] if as_list(created) else {}
        row_id = await _stock_row_id(client, entry.get("product_id"), booking.get("stock_id") or booking.get("id"))
        split.append({
            "stockId": row_id,
            "amount": amount,
            "type": "created",
            "unit": unit_form(amount),
        })
    return split


async def _unit_form(client, product: Dict[str, Any]) -> Callable[[float], str]:
    unit = None
    if product.get("qu_id_stock"):
        try:
            unit = await call_api(client, f"/objects/quantity_units/{product['qu_id_stock']}")
        except ApiError as e:
            logger.warning(f"Failed to fetch quantity unit {product['qu_id_stock']}: {e}")

    def form(amount: float) -> str:
        if not unit or not unit.get("name"):
            return ""
        if amount == 1:
            return unit["name"]
        return unit.get("name_plural") or unit["name"]

    return form


@handle_errors
async def cooked_something(client, arguments, options):
    allow_already_done = options.get("allow_meal_plan_entry_already_done", False)
    allow_no_meal_plan = options.get("allow_no_meal_plan", False)
    print_labels = options.get("print_labels", True)

    meal_plan_entry_id = arguments.get("mealPlanEntryId")
    if allow_no_meal_plan:
        if meal_plan_entry_id:
            raise ArgumentError(
                "mealPlanEntryId should not be provided when allow_no_meal_plan is true. Use recipeId instead."
            )
        if not arguments.get("recipeId"):
            raise ArgumentError("recipeId is required when allow_no_meal_plan is true.")
    elif not meal_plan_entry_id:
        raise ArgumentError("mealPlanEntryId is required when allow_no_meal_plan is false.")

    amounts = _parse_stock_amounts(arguments.get("stockAmounts"))
    total_servings = sum(amounts)
    steps = []

    if allow_no_meal_plan:
        recipe_id = parse_number(arguments["recipeId"], "recipeId")
        await call_api(client, f"/recipes/{recipe_id}/consume", "POST")
        steps.append("Recipe consumed directly (no meal plan entry)")
    else:
        entry = await call_api(client, f"/objects/meal_plan/{meal_plan_entry_id}")
        if not entry:
            raise ArgumentError(f"Meal plan entry {meal_plan_entry_id} not found.")
        if str(entry.get("done")) == "1" and not allow_already_done:
            raise ArgumentError(
                f"Meal plan entry {meal_plan_entry_id} is already marked as done. Cannot mark as cooked again."
            )

        recipe_id = entry.get("recipe_id")
        day = entry.get("day") or date.today().isoformat()
        await call_api(client, f"/objects/meal_plan/{meal_plan_entry_id}", "PUT", {
            "done": 1,
            "recipe_servings": total_servings,
        })
        steps.append("Meal plan entry marked as done")

        # Grocy books meal plan cooking against a generated "<day>#<entry id>" recipe
        shadow_name = f"{day}#{meal_plan_entry_id}"
        shadows = as_list(await call_api(client, "/objects/recipes", query_params={"query[]": f"name={shadow_name}"}))
        if not shadows:
            raise ArgumentError(f"Meal plan recipe '{shadow_name}' not found. Cannot consume ingredients.")
        await call_api(client, f"/recipes/{shadows[0].get('id')}/consume", "POST")
        steps.append("Recipe consumed via meal plan entry")

    split: List[Dict[str, Any]] = []
    labels_printed = 0
    recipe = await call_api(client, f"/objects/recipes/{recipe_id}") if recipe_id else None
    product_id = recipe.get("product_id") if isinstance(recipe, dict) else None

    if product_id:
        product, entries = await asyncio.gather(
            call_api(client, f"/objects/products/{product_id}"),
            call_api(
                client,
                f"/stock/products/{product_id}/entries",
                query_params={"order": "row_created_timestamp:desc", "limit": "1"},
            ),
        )
        entries = as_list(entries)
        if entries:
            unit_form = await _unit_form(client, product or {})
            split = await split_stock_entry(client, entries[0], amounts, unit_form)
            steps.append(f"Stock split into {len(split)} entries")

            if print_labels:
                for stock in split:
                    try:
                        await call_api(client, f"/stock/entry/{stock['stockId']}/printlabel")
                        labels_printed += 1
                    except ApiError as e:
                        logger.error(f"Failed to print label for stock entry {stock['stockId']}: {e}")

    return success(
        client,
        {
            "message": (
                f"Recipe {recipe_id} cooked ({total_servings} servings consumed, "
                f"{len(split)} stock entries created, {labels_printed} labels printed)"
            ),
            "stockEntries": {"splitEntries": split, "labelsPrinted": labels_printed},
            "completedSteps": steps,
        },
    )


# ============================================================================
# Shopping Integration
# ============================================================================

@handle_errors
async def add_all_products_to_shopping(client, arguments, options):
    require(arguments, "recipeId")
    recipe_id = parse_number(arguments["recipeId"], "recipeId")
    data = await call_api(client, f"/recipes/{recipe_id}/add-all-ingredients-to-shopping-list", "POST")
    return success(client, data, "All recipe products added to shopping list")


@handle_errors
async def add_missing_products_to_shopping(client, arguments, options):
    require(arguments, "recipeId")
    recipe_id = parse_number(arguments["recipeId"], "recipeId")
    data = await call_api(client, f"/recipes/{recipe_id}/add-not-fulfilled-products-to-shopping-list", "POST")
    return success(client, data, "Missing recipe products added to shopping list")
