"""Tests for recipe, meal plan and cooking handlers."""

import json
from datetime import date

import pytest

from grocy_mcp.api import ApiError
from grocy_mcp.operations.recipes import MODULE, handlers
from grocy_mcp.utils.response import result_texts


def data_of(result):
    return json.loads(result_texts(result)[1])


def test_module_bundle_complete():
    assert {d.name for d in MODULE.definitions} == set(MODULE.handlers)
    assert set(MODULE.validators) == {"recipes_cooking_cooked_something"}


# ========== Management ==========

@pytest.mark.asyncio
async def test_get_recipes_filters_normal_type(make_client):
    client = make_client({
        ("GET", "/objects/recipes"): [{"id": 1, "name": "Soup", "description": "Hot", "type": "normal"}],
    })

    result = await handlers.get_recipes(client, {"fields": ["id", "name"]}, {})

    assert data_of(result) == [{"id": 1, "name": "Soup"}]
    assert client.calls[0]["query_params"] == {"query[]": "type=normal"}


@pytest.mark.asyncio
async def test_create_recipe(fake_client):
    result = await handlers.create_recipe(fake_client, {"name": "Pancakes", "baseServings": 4}, {})

    assert result_texts(result)[0] == 'Recipe "Pancakes" created successfully'
    assert fake_client.calls[0]["body"] == {
        "name": "Pancakes",
        "description": "",
        "base_servings": 4,
        "type": "normal",
        "instructions": "",
    }


@pytest.mark.asyncio
async def test_recipe_id_must_be_numeric(fake_client):
    result = await handlers.get_recipe_by_id(fake_client, {"recipeId": "soup"}, {})

    assert result.isError
    assert "recipeId must be a valid number" in result_texts(result)[0]


# ========== Meal Plan ==========

def test_meal_plan_days_single():
    days = handlers.meal_plan_days(date(2026, 10, 21), weekly=False)

    assert days == [date(2026, 10, 20), date(2026, 10, 21), date(2026, 10, 22)]


def test_meal_plan_days_weekly():
    # 2026-10-21 is a Wednesday; the week starts on Monday 2026-10-19
    days = handlers.meal_plan_days(date(2026, 10, 21), weekly=True)

    assert days[0] == date(2026, 10, 18)
    assert days[1] == date(2026, 10, 19)
    assert days[-1] == date(2026, 10, 26)
    assert len(days) == 9


@pytest.mark.asyncio
async def test_get_meal_plan(make_client):
    def meal_plan(body, query_params):
        if query_params["query[]"] == "day=2026-10-21":
            return [{"id": 5, "day": "2026-10-21", "recipe_id": 9, "section_id": 2,
                     "recipe_servings": 2, "note": None, "done": 0, "row_created_timestamp": "x"}]
        return []

    client = make_client({
        ("GET", "/objects/meal_plan"): meal_plan,
        ("GET", "/objects/recipes/9"): {"id": 9, "name": "Chili", "product_id": 30, "instructions": "..."},
        ("GET", "/objects/meal_plan_sections"): [{"id": 2, "name": "Dinner", "time_info": "19:00", "sort_number": 3}],
    })

    result = await handlers.get_meal_plan(client, {"date": "2026-10-21"}, {})

    data = data_of(result)
    assert list(data["meal_plan_by_date"]) == ["2026-10-21"]
    assert data["meal_plan_by_date"]["2026-10-21"][0] == {
        "id": 5, "day": "2026-10-21", "section_id": 2, "recipe_id": 9,
        "recipe_servings": 2, "note": None, "done": 0,
    }
    assert data["recipes"] == [{"id": 9, "name": "Chili", "product_id": 30}]
    assert data["sections"] == [{"id": 2, "name": "Dinner", "time_info": "19:00"}]
    assert len(client.calls_to("/objects/meal_plan")) == 3


@pytest.mark.asyncio
async def test_get_meal_plan_empty(make_client):
    client = make_client({("GET", "/objects/meal_plan"): []})

    result = await handlers.get_meal_plan(client, {"date": "2026-10-21", "weekly": True}, {})

    assert data_of(result) == {"message": "No meals planned for the requested week", "meal_plan_by_date": {}}
    assert len(client.calls) == 9


@pytest.mark.asyncio
async def test_get_meal_plan_bad_date(fake_client):
    result = await handlers.get_meal_plan(fake_client, {"date": "21.10.2026"}, {})

    assert result.isError
    assert "YYYY-MM-DD" in result_texts(result)[0]


@pytest.mark.asyncio
async def test_add_recipe_to_meal_plan(fake_client):
    await handlers.add_recipe_to_meal_plan(
        fake_client, {"recipeId": 9, "day": "2026-10-21", "servings": 2, "sectionId": 3}, {}
    )

    assert fake_client.calls[0]["body"] == {
        "day": "2026-10-21",
        "type": "recipe",
        "recipe_id": 9,
        "recipe_servings": 2,
        "section_id": 3,
    }


# ========== Cooking ==========

@pytest.mark.asyncio
async def test_consume_recipe_with_servings(fake_client):
    await handlers.consume_recipe(fake_client, {"recipeId": 9, "servings": 3}, {})

    assert [(c["method"], c["endpoint"]) for c in fake_client.calls] == [
        ("PUT", "/objects/recipes/9"),
        ("POST", "/recipes/9/consume"),
    ]
    assert fake_client.calls[0]["body"] == {"desired_servings": 3}


@pytest.fixture
def kitchen(make_client):
    """Client for a meal plan entry 5 (recipe 9, producing product 30)."""
    return make_client({
        ("GET", "/objects/meal_plan/5"): {"id": 5, "day": "2026-10-21", "recipe_id": 9, "done": 0},
        ("GET", "/objects/recipes"): [{"id": 1009, "name": "2026-10-21#5"}],
        ("GET", "/objects/recipes/9"): {"id": 9, "name": "Chili", "product_id": 30},
        ("GET", "/objects/products/30"): {"id": 30, "name": "Chili portion", "qu_id_stock": 4},
        ("GET", "/objects/quantity_units/4"): {"id": 4, "name": "Serving", "name_plural": "Servings"},
        ("GET", "/stock/products/30/entries"): [
            {"id": 70, "product_id": 30, "amount": 5, "note": "batch",
             "best_before_date": "2026-10-24", "purchased_date": "2026-10-21", "location_id": 1},
        ],
        ("POST", "/stock/products/30/add"): [{"id": 900, "stock_id": "s-71"}],
        ("GET", "/objects/stock"): [
            {"id": 70, "product_id": 30, "stock_id": "s-70"},
            {"id": 66, "product_id": 12, "stock_id": "s-71"},
            {"id": 71, "product_id": "30", "stock_id": "s-71"},
        ],
    })


@pytest.mark.asyncio
async def test_cooked_something_from_meal_plan(kitchen):
    result = await handlers.cooked_something(kitchen, {"mealPlanEntryId": 5, "stockAmounts": [1, 2]}, {})

    assert not result.isError
    data = data_of(result)
    assert data["completedSteps"][:2] == ["Meal plan entry marked as done", "Recipe consumed via meal plan entry"]
    assert data["stockEntries"]["splitEntries"] == [
        {"stockId": 70, "amount": 1, "type": "updated", "unit": "Serving"},
        {"stockId": 71, "amount": 2, "type": "created", "unit": "Servings"},
    ]
    assert data["stockEntries"]["labelsPrinted"] == 2

    assert kitchen.calls_to("/objects/meal_plan/5", "PUT")[0]["body"] == {"done": 1, "recipe_servings": 3}
    assert kitchen.calls_to("/objects/recipes")[0]["query_params"] == {"query[]": "name=2026-10-21#5"}
    assert kitchen.calls_to("/recipes/1009/consume", "POST")
    assert kitchen.calls_to("/stock/entry/70", "PUT")[0]["body"]["note"] == "batch - 70 - 1"
    assert kitchen.calls_to("/stock/entry/70/printlabel")
    assert kitchen.calls_to("/stock/entry/71/printlabel")
    assert not kitchen.calls_to("/stock/entry/s-71/printlabel")


@pytest.mark.asyncio
async def test_cooked_something_created_entry_not_found(kitchen):
    kitchen.responses[("GET", "/objects/stock")] = [{"id": 66, "product_id": 12, "stock_id": "s-71"}]

    result = await handlers.cooked_something(kitchen, {"mealPlanEntryId": 5, "stockAmounts": [1, 2]}, {})

    assert result.isError
    assert "Could not find created stock entry with product_id 30 and stock_id s-71" in result_texts(result)[0]
    assert not kitchen.calls_to("/stock/entry/s-71/printlabel")


@pytest.mark.asyncio
async def test_cooked_something_without_labels(kitchen):
    result = await handlers.cooked_something(
        kitchen, {"mealPlanEntryId": 5, "stockAmounts": [3]}, {"print_labels": False}
    )

    assert data_of(result)["stockEntries"]["labelsPrinted"] == 0
    assert not kitchen.calls_to("/stock/entry/70/printlabel")


@pytest.mark.asyncio
async def test_cooked_something_label_failure_is_not_fatal(kitchen):
    kitchen.responses[("GET", "/stock/entry/70/printlabel")] = ApiError("No printer", status_code=500)

    result = await handlers.cooked_something(kitchen, {"mealPlanEntryId": 5, "stockAmounts": [1, 1]}, {})

    assert not result.isError
    assert data_of(result)["stockEntries"]["labelsPrinted"] == 1


@pytest.mark.asyncio
async def test_cooked_something_entry_already_done(kitchen):
    kitchen.responses[("GET", "/objects/meal_plan/5")] = {"id": 5, "day": "2026-10-21", "recipe_id": 9, "done": 1}

    refused = await handlers.cooked_something(kitchen, {"mealPlanEntryId": 5, "stockAmounts": [1]}, {})
    allowed = await handlers.cooked_something(
        kitchen, {"mealPlanEntryId": 5, "stockAmounts": [1]}, {"allow_meal_plan_entry_already_done": True}
    )

    assert refused.isError
    assert "already marked as done" in result_texts(refused)[0]
    assert not allowed.isError


@pytest.mark.asyncio
async def test_cooked_something_direct_recipe(kitchen):
    result = await handlers.cooked_something(
        kitchen, {"recipeId": 9, "stockAmounts": [2]}, {"allow_no_meal_plan": True}
    )

    assert not result.isError
    assert kitchen.calls_to("/recipes/9/consume", "POST")
    assert not kitchen.calls_to("/objects/meal_plan/5")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments, options, message",
    [
        ({"stockAmounts": [1]}, {}, "mealPlanEntryId is required"),
        ({"stockAmounts": [1]}, {"allow_no_meal_plan": True}, "recipeId is required"),
        ({"mealPlanEntryId": 5, "recipeId": 9, "stockAmounts": [1]}, {"allow_no_meal_plan": True},
         "mealPlanEntryId should not be provided"),
        ({"mealPlanEntryId": 5}, {}, "stockAmounts is required"),
        ({"mealPlanEntryId": 5, "stockAmounts": []}, {}, "stockAmounts cannot be empty"),
        ({"mealPlanEntryId": 5, "stockAmounts": [1, -2]}, {}, "stockAmounts[1] must be a positive number"),
    ],
)
async def test_cooked_something_argument_errors(fake_client, arguments, options, message):
    result = await handlers.cooked_something(fake_client, arguments, options)

    assert result.isError
    assert message in result_texts(result)[0]
    assert fake_client.calls == []
