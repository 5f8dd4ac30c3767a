from __future__ import annotations

import logging

from core.database import connection_scope, transaction_scope
from core.errors import BadRequestError
from models.preparation import DeductionResult, PreparationCheck
from models.recipe import ScaledRecipe
from services.ingredient_utils import scale_ingredients, scaling_factor
from services.inventory_service import inventory_service
from services.reconciliation import plan_deduction, validate_preparation
from services.recipe_service import recipe_service

log = logging.getLogger("kitchen_pal.preparation")


class _PlanRejected(Exception):
    """Intern signal för att rulla tillbaka avdragstransaktionen."""


class PreparationService:
    def scale(self, user_id: str, recipe_id: str, servings: int) -> ScaledRecipe:
        recipe = recipe_service.get_recipe(user_id, recipe_id)
        return ScaledRecipe(
            recipe_id=recipe.id,
            name=recipe.name,
            default_servings=recipe.default_servings,
            servings=servings,
            scaling_factor=scaling_factor(servings, recipe.default_servings),
            ingredients=scale_ingredients(recipe.ingredients, servings, recipe.default_servings),
        )

    def check(self, user_id: str, recipe_id: str, servings: int | None = None) -> PreparationCheck:
        recipe = recipe_service.get_recipe(user_id, recipe_id)
        with connection_scope() as conn:
            inventory = inventory_service.load_inventory(conn, user_id)
        return validate_preparation(recipe, servings or recipe.default_servings, inventory)

    def prepare(self, user_id: str, recipe_id: str, servings: int) -> DeductionResult:
        """Laga receptet: dra av ingredienserna ur lagret, allt eller inget."""
        if servings < 1:
            raise BadRequestError("Servings must be at least 1")
        recipe = recipe_service.get_recipe(user_id, recipe_id)
        rejected: DeductionResult | None = None
        try:
            with transaction_scope() as conn:
                inventory = inventory_service.load_inventory(conn, user_id)
                plan = plan_deduction(recipe, servings, inventory)
                if not plan.result.success:
                    rejected = plan.result
                    raise _PlanRejected()
                inventory_service.set_quantities(conn, user_id, plan.new_quantities)
        except _PlanRejected:
            log.warning("Preparation of recipe %s aborted: %s", recipe_id, "; ".join(rejected.errors))
            return DeductionResult(success=False, errors=rejected.errors)

        log.info("Prepared recipe %s (%d servings), %d ingredients deducted", recipe_id, servings, len(plan.result.deducted))
        return plan.result


# Delad instans
preparation_service = PreparationService()

__all__ = ["PreparationService", "preparation_service"]
