from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import ShoppingList, User
from shoplist.schemas.lists import (
	ListCreate, ListUpdate, ItemCreate, BulkItemsRequest,
	ItemOut, ShoppingListOut, BulkItemsResult, FailedItem,
)
from shoplist.core.security import get_current_user
from shoplist.core.logging import log_event, request_id
from shoplist.services.list_service import BulkResult, ItemEntry, ListService

router = APIRouter(prefix="/shopping-lists", tags=["shopping-lists"])

def serialize_list(shopping_list: ShoppingList, user: User) -> ShoppingListOut:
	is_owner = shopping_list.user_id == user.id
	return ShoppingListOut.model_validate(shopping_list).model_copy(
		update={"is_owner": is_owner, "is_shared": not is_owner}
	)

def serialize_bulk(result: BulkResult) -> BulkItemsResult:
	return BulkItemsResult(
		added=[ItemOut.model_validate(item) for item in result.added],
		failed=[FailedItem(**row) for row in result.failed],
		added_count=result.added_count,
		failed_count=result.failed_count,
	)

@router.get("")
def list_shopping_lists(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	rows = ListService(db).visible_lists(user)
	return {"shoppingLists": [serialize_list(row, user) for row in rows]}

@router.post("", status_code=201)
def create_shopping_list(
	request: Request,
	payload: ListCreate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	shopping_list = ListService(db).create_list(user, payload.name)
	log_event("list_created", list_id=shopping_list.id, owner_id=user.id, request_id=request_id(request))
	return {"shoppingList": serialize_list(shopping_list, user)}

@router.get("/{list_id}")
def get_shopping_list(list_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	shopping_list = ListService(db).get_list(user, list_id)
	return {"shoppingList": serialize_list(shopping_list, user)}

@router.put("/{list_id}")
def rename_shopping_list(
	list_id: int,
	payload: ListUpdate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	shopping_list = ListService(db).rename_list(user, list_id, payload.name)
	return {"shoppingList": serialize_list(shopping_list, user)}

@router.delete("/{list_id}")
def delete_shopping_list(
	request: Request,
	list_id: int,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	ListService(db).delete_list(user, list_id)
	log_event("list_deleted", list_id=list_id, actor_id=user.id, request_id=request_id(request))
	return {"message": "Shopping list deleted"}

@router.post("/{list_id}/items", status_code=201)
def add_item(
	list_id: int,
	payload: ItemCreate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	item = ListService(db).add_item(
		user, list_id, payload.name, quantity=payload.quantity, product_id=payload.product_id
	)
	return {"item": ItemOut.model_validate(item)}

@router.post("/{list_id}/items/bulk")
def add_items_bulk(
	request: Request,
	list_id: int,
	payload: BulkItemsRequest,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	entries = [ItemEntry(name=i.name or "", quantity=i.quantity, product_id=i.product_id) for i in payload.items]
	result = ListService(db).bulk_add_items(user, list_id, entries)
	log_event(
		"items_bulk_added",
		list_id=list_id,
		added=result.added_count,
		failed=result.failed_count,
		request_id=request_id(request),
	)
	return serialize_bulk(result)

@router.post("/{list_id}/categories/{category_id}")
def add_category_items(
	request: Request,
	list_id: int,
	category_id: int,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	result = ListService(db).add_category_to_list(user, list_id, category_id)
	log_event(
		"category_added_to_list",
		list_id=list_id,
		category_id=category_id,
		added=result.added_count,
		failed=result.failed_count,
		request_id=request_id(request),
	)
	return serialize_bulk(result)

@router.patch("/{list_id}/deselect-all")
def deselect_all(list_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	items = ListService(db).deselect_all(user, list_id)
	return {"items": [ItemOut.model_validate(item) for item in items]}
