from __future__ import annotations

import logging
from typing import List

from core.errors import BadRequestError, ConflictError, NotFoundError
from models.recipe import Recipe, RecipeCreate, RecipeIngredient, RecipeIngredientUpdate, RecipeUpdate
from services.recipe_repository import recipe_repo

log = logging.getLogger("kitchen_pal.recipes")

_REQUIRED_FIELDS = ("name", "instructions", "default_servings", "ingredients", "tags")


class RecipeService:
    """Affärsregler för recept ovanpå RecipeRepository: ägarskap och unika namn."""

    def list_recipes(self, user_id: str, query: str | None = None, tag: str | None = None) -> List[Recipe]:
        if query or tag:
            return recipe_repo.search_recipes(user_id, query=query, tag=tag)
        return recipe_repo.list_recipes(user_id)

    def get_recipe(self, user_id: str, recipe_id: str) -> Recipe:
        recipe = recipe_repo.get_recipe(user_id, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    def add_recipe(self, user_id: str, data: RecipeCreate) -> Recipe:
        self._check_unique_name(user_id, data.name)
        recipe = recipe_repo.add_recipe(user_id, data)
        log.info("Created recipe %s with %d ingredients", recipe.id, len(recipe.ingredients))
        return recipe

    def update_recipe(self, user_id: str, recipe_id: str, changes: RecipeUpdate) -> Recipe:
        self.get_recipe(user_id, recipe_id)
        fields = changes.model_dump(exclude_unset=True)
        for required in _REQUIRED_FIELDS:
            if required in fields and fields[required] is None:
                raise BadRequestError(f"{required} cannot be null")
        if "name" in fields:
            fields["name"] = fields["name"].strip()
            self._check_unique_name(user_id, fields["name"], exclude_id=recipe_id)
        if not fields:
            return self.get_recipe(user_id, recipe_id)
        recipe = recipe_repo.update_recipe(user_id, recipe_id, fields)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    def delete_recipe(self, user_id: str, recipe_id: str) -> None:
        if not recipe_repo.delete_recipe(user_id, recipe_id):
            raise NotFoundError("Recipe not found")

    def add_ingredient(self, user_id: str, recipe_id: str, ingredient: RecipeIngredient) -> Recipe:
        self.get_recipe(user_id, recipe_id)
        recipe_repo.add_ingredient(recipe_id, ingredient)
        return self.get_recipe(user_id, recipe_id)

    def update_ingredient(self, user_id: str, ingredient_id: str, changes: RecipeIngredientUpdate) -> Recipe:
        found = recipe_repo.get_ingredient(user_id, ingredient_id)
        if found is None:
            raise NotFoundError("Ingredient not found")
        recipe_id, _ = found
        fields = changes.model_dump(exclude_unset=True)
        for required in ("ingredient_name", "quantity", "unit", "is_optional"):
            if required in fields and fields[required] is None:
                raise BadRequestError(f"{required} cannot be null")
        if "ingredient_name" in fields:
            fields["ingredient_name"] = fields["ingredient_name"].strip()
        if fields:
            recipe_repo.update_ingredient(recipe_id, ingredient_id, fields)
        return self.get_recipe(user_id, recipe_id)

    def delete_ingredient(self, user_id: str, ingredient_id: str) -> Recipe:
        found = recipe_repo.get_ingredient(user_id, ingredient_id)
        if found is None:
            raise NotFoundError("Ingredient not found")
        recipe_id, _ = found
        recipe_repo.delete_ingredient(recipe_id, ingredient_id)
        return self.get_recipe(user_id, recipe_id)

    def _check_unique_name(self, user_id: str, name: str, exclude_id: str | None = None) -> None:
        existing = recipe_repo.find_id_by_name(user_id, name, exclude_id=exclude_id)
        if existing:
            raise ConflictError("A recipe with this name already exists", {"existing_recipe_id": existing})


recipe_service = RecipeService()

__all__ = ["RecipeService", "recipe_service"]
