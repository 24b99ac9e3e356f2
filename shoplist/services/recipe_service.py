import json
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from shoplist.core.errors import Forbidden, NotFound, ValidationError
from shoplist.db.models import Recipe, ShoppingList, User
from shoplist.services import access
from shoplist.services.base import clean, optional_clean
from shoplist.services.list_service import BulkResult, ItemEntry, ListService

RECIPE_NOT_FOUND = "Recipe not found"


def load_ingredients(recipe: Recipe) -> List[str]:
	try:
		ingredients = json.loads(recipe.ingredients or "[]")
	except ValueError:
		return []
	return [str(i) for i in ingredients if isinstance(i, str)]

def recipe_list_name(recipe: Recipe) -> str:
	return f"🛒 {recipe.title}"


class RecipeService:
	def __init__(self, db: Session):
		self.db = db

	def list_recipes(self, user: User) -> List[Recipe]:
		return (
			self.db.query(Recipe)
			.filter(Recipe.user_id == user.id)
			.order_by(Recipe.created_at.desc(), Recipe.id.desc())
			.all()
		)

	def create_recipe(
		self,
		user: User,
		title: Optional[str],
		ingredients: Optional[List[str]],
		instructions: Optional[str],
		description: Optional[str] = None,
		cooking_time: Optional[int] = None,
		servings: Optional[int] = None,
	) -> Recipe:
		title = clean(title)
		if not title:
			raise ValidationError("Recipe title is required")
		ingredients = [clean(i) for i in (ingredients or []) if clean(i)]
		if not ingredients:
			raise ValidationError("Add at least one ingredient")
		instructions = clean(instructions)
		if not instructions:
			raise ValidationError("Instructions are required")

		recipe = Recipe(
			user_id=user.id,
			title=title,
			description=optional_clean(description),
			ingredients=json.dumps(ingredients, ensure_ascii=False),
			instructions=instructions,
			cooking_time=cooking_time or None,
			servings=servings or None,
		)
		self.db.add(recipe)
		self.db.commit()
		self.db.refresh(recipe)
		return recipe

	def get_recipe(self, user: User, recipe_id: int) -> Recipe:
		recipe = self.db.query(Recipe).filter(Recipe.id == recipe_id).first()
		if not recipe or recipe.user_id != user.id:
			raise NotFound(RECIPE_NOT_FOUND)
		return recipe

	def delete_recipe(self, user: User, recipe_id: int) -> None:
		recipe = self.db.query(Recipe).filter(Recipe.id == recipe_id).first()
		if not recipe:
			raise NotFound(RECIPE_NOT_FOUND)
		if recipe.user_id != user.id:
			raise Forbidden("You can only delete your own recipes")
		self.db.delete(recipe)
		self.db.commit()

	def add_to_list(
		self, user: User, recipe_id: int, list_id: Optional[int] = None
	) -> Tuple[ShoppingList, bool, BulkResult]:
		"""Copy a recipe's ingredients into a list, creating one when none is given.

		Returns the target list, whether it was created, and the per-ingredient result.
		"""
		recipe = self.get_recipe(user, recipe_id)
		lists = ListService(self.db)
		created = False
		if list_id is None:
			shopping_list = lists.create_list(user, recipe_list_name(recipe))
			created = True
		else:
			shopping_list = access.get_accessible_list(self.db, user.id, list_id)

		entries = [ItemEntry(name=name, quantity=1) for name in load_ingredients(recipe)]
		result = lists.bulk_add_items(user, shopping_list.id, entries)
		self.db.refresh(shopping_list)
		return shopping_list, created, result
