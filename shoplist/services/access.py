"""List access control.

A user can access a list when they own it or hold a share on it. Generic
list/item lookups report inaccessible rows exactly like missing ones so a
caller cannot probe for lists it cannot see. Share management is owner-only
and answers with an explicit Forbidden instead.
"""

from sqlalchemy.orm import Session

from shoplist.core.errors import Forbidden, NotFound
from shoplist.db.models import Item, ListShare, ShoppingList

LIST_NOT_FOUND = "Shopping list not found"
ITEM_NOT_FOUND = "Item not found"


def is_owner(db: Session, user_id: int, list_id: int) -> bool:
	return (
		db.query(ShoppingList.id)
		.filter(ShoppingList.id == list_id, ShoppingList.user_id == user_id)
		.first()
		is not None
	)

def is_shared_with(db: Session, user_id: int, list_id: int) -> bool:
	return (
		db.query(ListShare.id)
		.filter(ListShare.list_id == list_id, ListShare.user_id == user_id)
		.first()
		is not None
	)

def can_access(db: Session, user_id: int, list_id: int) -> bool:
	return is_owner(db, user_id, list_id) or is_shared_with(db, user_id, list_id)

def get_accessible_list(db: Session, user_id: int, list_id: int) -> ShoppingList:
	shopping_list = db.query(ShoppingList).filter(ShoppingList.id == list_id).first()
	if not shopping_list:
		raise NotFound(LIST_NOT_FOUND)
	if shopping_list.user_id != user_id and not is_shared_with(db, user_id, list_id):
		raise NotFound(LIST_NOT_FOUND)
	return shopping_list

def get_owned_list(db: Session, user_id: int, list_id: int) -> ShoppingList:
	shopping_list = db.query(ShoppingList).filter(ShoppingList.id == list_id).first()
	if not shopping_list:
		raise NotFound(LIST_NOT_FOUND)
	if shopping_list.user_id != user_id:
		raise Forbidden("Only the list owner can do this")
	return shopping_list

def get_accessible_item(db: Session, user_id: int, item_id: int) -> Item:
	item = db.query(Item).filter(Item.id == item_id).first()
	if not item or not can_access(db, user_id, item.list_id):
		raise NotFound(ITEM_NOT_FOUND)
	return item
