from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.recipes import RecipeCreate, RecipeOut, AddToListRequest
from shoplist.core.security import get_current_user
from shoplist.core.logging import log_event, request_id
from shoplist.routers.shopping_lists import serialize_bulk, serialize_list
from shoplist.services.recipe_service import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])

@router.get("")
def list_recipes(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	rows = RecipeService(db).list_recipes(user)
	return {"recipes": [RecipeOut.model_validate(r) for r in rows]}

@router.post("", status_code=201)
def create_recipe(
	request: Request,
	payload: RecipeCreate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	recipe = RecipeService(db).create_recipe(
		user,
		title=payload.title,
		ingredients=payload.ingredients,
		instructions=payload.instructions,
		description=payload.description,
		cooking_time=payload.cooking_time,
		servings=payload.servings,
	)
	log_event("recipe_created", recipe_id=recipe.id, owner_id=user.id, request_id=request_id(request))
	return {"recipe": RecipeOut.model_validate(recipe)}

@router.get("/{recipe_id}")
def get_recipe(recipe_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	recipe = RecipeService(db).get_recipe(user, recipe_id)
	return {"recipe": RecipeOut.model_validate(recipe)}

@router.delete("/{recipe_id}")
def delete_recipe(
	request: Request,
	recipe_id: int,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	RecipeService(db).delete_recipe(user, recipe_id)
	log_event("recipe_deleted", recipe_id=recipe_id, actor_id=user.id, request_id=request_id(request))
	return {"message": "Recipe deleted"}

@router.post("/{recipe_id}/add-to-list")
def add_recipe_to_list(
	request: Request,
	recipe_id: int,
	payload: AddToListRequest | None = None,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	list_id = payload.list_id if payload else None
	shopping_list, created, result = RecipeService(db).add_to_list(user, recipe_id, list_id=list_id)
	log_event(
		"recipe_added_to_list",
		recipe_id=recipe_id,
		list_id=shopping_list.id,
		list_created=created,
		added=result.added_count,
		failed=result.failed_count,
		request_id=request_id(request),
	)
	body = serialize_bulk(result).model_dump(by_alias=True)
	body["shoppingList"] = serialize_list(shopping_list, user)
	body["listCreated"] = created
	return JSONResponse(status_code=201 if created else 200, content=jsonable_encoder(body))
