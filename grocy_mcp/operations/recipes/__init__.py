"""Recipe operations: management, fulfillment, meal plan, cooking."""

from ...registry.operation_registry import OperationModule
from . import handlers
from .definitions import definitions
from .validations import validate_cooked_something_options

MODULE = OperationModule(
    name="recipes",
    definitions=definitions,
    handlers={
        "recipes_management_get": handlers.get_recipes,
        "recipes_management_get_by_id": handlers.get_recipe_by_id,
        "recipes_management_create": handlers.create_recipe,
        "recipes_fulfillment_get": handlers.get_recipe_fulfillment,
        "recipes_fulfillment_get_all": handlers.get_all_recipe_fulfillment,
        "recipes_mealplan_get": handlers.get_meal_plan,
        "recipes_mealplan_get_sections": handlers.get_meal_plan_sections,
        "recipes_mealplan_add_recipe": handlers.add_recipe_to_meal_plan,
        "recipes_mealplan_delete_entry": handlers.delete_meal_plan_entry,
        "recipes_cooking_consume": handlers.consume_recipe,
        "recipes_cooking_cooked_something": handlers.cooked_something,
        "recipes_shopping_add_all_products": handlers.add_all_products_to_shopping,
        "recipes_shopping_add_missing_products": handlers.add_missing_products_to_shopping,
    },
    validators={
        "recipes_cooking_cooked_something": validate_cooked_something_options,
    },
)

__all__ = ['MODULE', 'definitions']
