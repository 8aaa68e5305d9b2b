"""Recipe, meal plan and cooking operation definitions."""

from ...registry.operation_registry import OperationDefinition
from ..base import id_property, object_schema

RECIPE_FIELDS = [
    "id", "name", "description", "base_servings", "desired_servings",
    "not_check_shoppinglist", "type", "picture_file_name", "product_id",
    "instructions",
]

RECIPE_ID = id_property("ID of the recipe. Use recipes_management_get to find recipe IDs by name.")
MEAL_PLAN_ENTRY_ID = id_property("ID of the meal plan entry. Use recipes_mealplan_get to find entry IDs.")


definitions = [
    # Management
    OperationDefinition(
        name="recipes_management_get",
        description="[RECIPES/MANAGEMENT] Get specific fields for all recipes. You must specify which fields to retrieve.",
        input_schema=object_schema(
            {
                "fields": {
                    "type": "array",
                    "items": {"type": "string", "enum": RECIPE_FIELDS},
                    "description": 'Field names to retrieve. For basic lookup use ["id", "name"].',
                }
            },
            required=["fields"],
        ),
    ),
    OperationDefinition(
        name="recipes_management_get_by_id",
        description="[RECIPES/MANAGEMENT] Get a specific recipe by its ID.",
        input_schema=object_schema({"recipeId": RECIPE_ID}, required=["recipeId"]),
    ),
    OperationDefinition(
        name="recipes_management_create",
        description="[RECIPES/MANAGEMENT] Create a new recipe.",
        input_schema=object_schema(
            {
                "name": {"type": "string", "description": "Name of the recipe"},
                "description": {"type": "string", "description": "Description of the recipe"},
                "baseServings": {"type": "number", "description": "Base servings (default: 1)", "default": 1},
                "instructions": {"type": "string", "description": "Preparation instructions"},
            },
            required=["name"],
        ),
    ),

    # Fulfillment
    OperationDefinition(
        name="recipes_fulfillment_get",
        description="[RECIPES/FULFILLMENT] Check which ingredients of a recipe are in stock and which are missing.",
        input_schema=object_schema({"recipeId": RECIPE_ID}, required=["recipeId"]),
    ),
    OperationDefinition(
        name="recipes_fulfillment_get_all",
        description="[RECIPES/FULFILLMENT] Get the fulfillment status of every recipe.",
    ),

    # Meal plan
    OperationDefinition(
        name="recipes_mealplan_get",
        description=(
            "[RECIPES/MEALPLAN] Get the meal plan for a date (plus the day before and after), "
            "or for the whole calendar week containing it."
        ),
        input_schema=object_schema(
            {
                "date": {"type": "string", "description": "Date in YYYY-MM-DD format"},
                "weekly": {
                    "type": "boolean",
                    "description": "If true, return the whole calendar week containing the date",
                },
            },
            required=["date"],
        ),
    ),
    OperationDefinition(
        name="recipes_mealplan_get_sections",
        description="[RECIPES/MEALPLAN] Get the meal plan sections (e.g., Breakfast, Lunch, Dinner).",
    ),
    OperationDefinition(
        name="recipes_mealplan_add_recipe",
        description="[RECIPES/MEALPLAN] Add a recipe to the meal plan for a day and section.",
        input_schema=object_schema(
            {
                "recipeId": RECIPE_ID,
                "day": {"type": "string", "description": "Day in YYYY-MM-DD format"},
                "servings": {"type": "number", "description": "Number of servings"},
                "sectionId": id_property(
                    "ID of the meal plan section. Use recipes_mealplan_get_sections to find section IDs."
                ),
            },
            required=["recipeId", "day", "servings", "sectionId"],
        ),
    ),
    OperationDefinition(
        name="recipes_mealplan_delete_entry",
        description="[RECIPES/MEALPLAN] Delete an entry from the meal plan.",
        input_schema=object_schema({"mealPlanEntryId": MEAL_PLAN_ENTRY_ID}, required=["mealPlanEntryId"]),
    ),

    # Cooking
    OperationDefinition(
        name="recipes_cooking_consume",
        description="[RECIPES/COOKING] Consume a recipe, removing its ingredients from stock.",
        input_schema=object_schema(
            {
                "recipeId": RECIPE_ID,
                "servings": {"type": "number", "description": "Servings to cook (default: recipe setting)"},
            },
            required=["recipeId"],
        ),
    ),
    OperationDefinition(
        name="recipes_cooking_cooked_something",
        description=(
            "[RECIPES/COOKING] Record that something was cooked: marks the meal plan entry done, "
            "consumes the ingredients and stores the result as portioned stock entries. "
            "Pass mealPlanEntryId, or recipeId when cooking without a meal plan is allowed."
        ),
        input_schema=object_schema(
            {
                "mealPlanEntryId": MEAL_PLAN_ENTRY_ID,
                "recipeId": RECIPE_ID,
                "stockAmounts": {
                    "type": "array",
                    "items": {"type": "number", "minimum": 0.1},
                    "description": (
                        "Serving amount of each stock entry to create "
                        "(e.g., [1, 2, 2] for one single and two double portions)."
                    ),
                },
            },
            required=["stockAmounts"],
        ),
    ),

    # Shopping integration
    OperationDefinition(
        name="recipes_shopping_add_all_products",
        description="[RECIPES/SHOPPING] Add all products of a recipe to the shopping list.",
        input_schema=object_schema({"recipeId": RECIPE_ID}, required=["recipeId"]),
    ),
    OperationDefinition(
        name="recipes_shopping_add_missing_products",
        description="[RECIPES/SHOPPING] Add the products of a recipe that are not in stock to the shopping list.",
        input_schema=object_schema({"recipeId": RECIPE_ID}, required=["recipeId"]),
    ),
]
