"""Shopping lists and their items.

Every operation except list creation goes through :mod:`shoplist.services.access`
before touching a row. ``toggle_item`` is a plain read-modify-write: two
concurrent toggles of the same item can lose one update (last write wins).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shoplist.core.errors import Forbidden, NotFound, ValidationError
from shoplist.core.logging import logger
from shoplist.db.models import Category, Item, ListShare, Product, ShoppingList, User
from shoplist.services import access
from shoplist.services.base import clean


@dataclass
class ItemEntry:
	name: str
	quantity: int = 1
	product_id: Optional[int] = None


@dataclass
class BulkResult:
	added: List[Item] = field(default_factory=list)
	failed: List[dict] = field(default_factory=list)

	@property
	def added_count(self) -> int:
		return len(self.added)

	@property
	def failed_count(self) -> int:
		return len(self.failed)


def clamp_quantity(quantity: Optional[int]) -> int:
	if quantity is None:
		return 1
	return max(1, int(quantity))

def delete_list_cascade(db: Session, shopping_list: ShoppingList) -> None:
	"""Remove a list's items and shares, then the list itself (no commit)."""
	db.query(Item).filter(Item.list_id == shopping_list.id).delete(synchronize_session=False)
	db.query(ListShare).filter(ListShare.list_id == shopping_list.id).delete(synchronize_session=False)
	db.delete(shopping_list)


class ListService:
	def __init__(self, db: Session):
		self.db = db

	# lists

	def visible_lists(self, user: User) -> List[ShoppingList]:
		shared_ids = self.db.query(ListShare.list_id).filter(ListShare.user_id == user.id)
		return (
			self.db.query(ShoppingList)
			.filter(or_(ShoppingList.user_id == user.id, ShoppingList.id.in_(shared_ids)))
			.order_by(ShoppingList.updated_at.desc(), ShoppingList.id.desc())
			.all()
		)

	def create_list(self, user: User, name: Optional[str]) -> ShoppingList:
		name = clean(name)
		if not name:
			raise ValidationError("List name is required")
		shopping_list = ShoppingList(name=name, user_id=user.id)
		self.db.add(shopping_list)
		self.db.commit()
		self.db.refresh(shopping_list)
		return shopping_list

	def get_list(self, user: User, list_id: int) -> ShoppingList:
		return access.get_accessible_list(self.db, user.id, list_id)

	def _get_list_for_owner_action(self, user: User, list_id: int) -> ShoppingList:
		shopping_list = access.get_accessible_list(self.db, user.id, list_id)
		if shopping_list.user_id != user.id:
			raise Forbidden("Only the list owner can do this")
		return shopping_list

	def rename_list(self, user: User, list_id: int, name: Optional[str]) -> ShoppingList:
		name = clean(name)
		if not name:
			raise ValidationError("List name is required")
		shopping_list = self._get_list_for_owner_action(user, list_id)
		shopping_list.name = name
		self.db.commit()
		self.db.refresh(shopping_list)
		return shopping_list

	def delete_list(self, user: User, list_id: int) -> None:
		shopping_list = self._get_list_for_owner_action(user, list_id)
		delete_list_cascade(self.db, shopping_list)
		self.db.commit()

	def admin_delete_list(self, list_id: int) -> None:
		shopping_list = self.db.query(ShoppingList).filter(ShoppingList.id == list_id).first()
		if not shopping_list:
			raise NotFound(access.LIST_NOT_FOUND)
		delete_list_cascade(self.db, shopping_list)
		self.db.commit()

	# items

	def _check_product(self, product_id: Optional[int]) -> None:
		if product_id is None:
			return
		if not self.db.query(Product.id).filter(Product.id == product_id).first():
			raise NotFound("Product not found")

	def _touch(self, shopping_list: ShoppingList) -> None:
		shopping_list.updated_at = datetime.utcnow()

	def add_item(
		self,
		user: User,
		list_id: int,
		name: Optional[str],
		quantity: Optional[int] = 1,
		product_id: Optional[int] = None,
	) -> Item:
		name = clean(name)
		if not name:
			raise ValidationError("Item name is required")
		shopping_list = access.get_accessible_list(self.db, user.id, list_id)
		self._check_product(product_id)

		# Duplicate names are allowed here; the soft check lives in bulk_add_items and the client.
		item = Item(
			name=name,
			quantity=clamp_quantity(quantity),
			purchased=False,
			list_id=shopping_list.id,
			product_id=product_id,
		)
		self.db.add(item)
		self._touch(shopping_list)
		self.db.commit()
		self.db.refresh(item)
		return item

	def update_item(
		self,
		user: User,
		item_id: int,
		name: Optional[str] = None,
		quantity: Optional[int] = None,
	) -> Item:
		item = access.get_accessible_item(self.db, user.id, item_id)
		if name is not None:
			name = clean(name)
			if not name:
				raise ValidationError("Item name cannot be empty")
			item.name = name
		if quantity is not None:
			item.quantity = clamp_quantity(quantity)
		self._touch(item.shopping_list)
		self.db.commit()
		self.db.refresh(item)
		return item

	def toggle_item(self, user: User, item_id: int) -> Item:
		item = access.get_accessible_item(self.db, user.id, item_id)
		item.purchased = not item.purchased
		self._touch(item.shopping_list)
		self.db.commit()
		self.db.refresh(item)
		return item

	def delete_item(self, user: User, item_id: int) -> None:
		item = access.get_accessible_item(self.db, user.id, item_id)
		self._touch(item.shopping_list)
		self.db.delete(item)
		self.db.commit()

	def deselect_all(self, user: User, list_id: int) -> List[Item]:
		shopping_list = access.get_accessible_list(self.db, user.id, list_id)
		self.db.query(Item).filter(Item.list_id == shopping_list.id, Item.purchased.is_(True)).update(
			{Item.purchased: False}, synchronize_session=False
		)
		self._touch(shopping_list)
		self.db.commit()
		return self.db.query(Item).filter(Item.list_id == shopping_list.id).order_by(Item.id.asc()).all()

	def bulk_add_items(self, user: User, list_id: int, entries: Iterable[ItemEntry]) -> BulkResult:
		"""Add several items, each one independently.

		An entry fails on its own (empty name, name already in the list, unknown
		product, storage error) without undoing the entries around it.
		"""
		shopping_list = access.get_accessible_list(self.db, user.id, list_id)
		list_pk = shopping_list.id
		seen = {
			row.name.strip().lower()
			for row in self.db.query(Item.name).filter(Item.list_id == list_pk).all()
		}
		result = BulkResult()

		for entry in entries:
			name = clean(entry.name)
			if not name:
				result.failed.append({"name": entry.name or "", "error": "Item name is required"})
				continue
			key = name.lower()
			if key in seen:
				result.failed.append({"name": name, "error": "Item is already in the list"})
				continue
			try:
				self._check_product(entry.product_id)
			except NotFound as exc:
				result.failed.append({"name": name, "error": exc.message})
				continue

			item = Item(
				name=name,
				quantity=clamp_quantity(entry.quantity),
				purchased=False,
				list_id=list_pk,
				product_id=entry.product_id,
			)
			self.db.add(item)
			try:
				self.db.query(ShoppingList).filter(ShoppingList.id == list_pk).update(
					{ShoppingList.updated_at: datetime.utcnow()}, synchronize_session=False
				)
				self.db.commit()
			except SQLAlchemyError as exc:
				self.db.rollback()
				logger.warning("bulk item insert failed for %r in list %s: %s", name, list_pk, exc)
				result.failed.append({"name": name, "error": "Could not add item"})
				continue
			self.db.refresh(item)
			seen.add(key)
			result.added.append(item)
		return result

	def add_category_to_list(self, user: User, list_id: int, category_id: int) -> BulkResult:
		access.get_accessible_list(self.db, user.id, list_id)
		category = self.db.query(Category).filter(Category.id == category_id).first()
		if not category:
			raise NotFound("Category not found")
		entries = [ItemEntry(name=p.name, quantity=1, product_id=p.id) for p in category.products]
		return self.bulk_add_items(user, list_id, entries)
