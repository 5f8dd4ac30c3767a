"""Datamodeller för användare, lager, recept, betyg, inköpslistor och måltidsplaner."""

from models.inventory import InventoryItem  # noqa: F401
from models.meal_plan import MealPlan  # noqa: F401
from models.recipe import Recipe  # noqa: F401
from models.shopping_list import ShoppingList  # noqa: F401
from models.store import Store  # noqa: F401
from models.user import User  # noqa: F401
from models.review import Review  # noqa: F401
