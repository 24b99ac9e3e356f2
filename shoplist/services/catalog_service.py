"""Categories and products.

Names are compared after trimming. Category names are unique globally,
product names only within their category. Deletion is refused while
anything still references the row.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from shoplist.core.errors import Conflict, NotFound, ValidationError
from shoplist.db.models import Category, Item, Product
from shoplist.services.base import clean, commit_or_conflict, like_pattern, optional_clean

CATEGORY_EXISTS = "A category with this name already exists"
PRODUCT_EXISTS = "This product already exists in the category"


class CatalogService:
	def __init__(self, db: Session):
		self.db = db

	# categories

	def list_categories(self) -> List[Category]:
		return self.db.query(Category).order_by(Category.sort_order.asc(), Category.id.asc()).all()

	def category_product_counts(self) -> dict:
		rows = (
			self.db.query(Product.category_id, func.count(Product.id))
			.group_by(Product.category_id)
			.all()
		)
		return {category_id: count for category_id, count in rows}

	def get_category(self, category_id: int) -> Category:
		category = self.db.query(Category).filter(Category.id == category_id).first()
		if not category:
			raise NotFound("Category not found")
		return category

	def _next_sort_order(self) -> int:
		current = self.db.query(func.max(Category.sort_order)).scalar()
		return (current or 0) + 1

	def create_category(self, name: Optional[str], icon: Optional[str] = None, sort_order: Optional[int] = None) -> Category:
		name = clean(name)
		if not name:
			raise ValidationError("Category name is required")
		if self.db.query(Category.id).filter(Category.name == name).first():
			raise Conflict(CATEGORY_EXISTS)

		if sort_order is None:
			sort_order = self._next_sort_order()
		category = Category(name=name, icon=optional_clean(icon), sort_order=sort_order)
		self.db.add(category)
		commit_or_conflict(self.db, CATEGORY_EXISTS)
		self.db.refresh(category)
		return category

	def update_category(
		self,
		category_id: int,
		name: Optional[str],
		icon: Optional[str] = None,
		sort_order: Optional[int] = None,
	) -> Category:
		name = clean(name)
		if not name:
			raise ValidationError("Category name is required")
		category = self.get_category(category_id)
		taken = (
			self.db.query(Category.id)
			.filter(Category.name == name, Category.id != category.id)
			.first()
		)
		if taken:
			raise Conflict(CATEGORY_EXISTS)

		category.name = name
		category.icon = optional_clean(icon)
		if sort_order is not None:
			category.sort_order = sort_order
		commit_or_conflict(self.db, CATEGORY_EXISTS)
		self.db.refresh(category)
		return category

	def delete_category(self, category_id: int) -> None:
		category = self.get_category(category_id)
		products_count = self.db.query(Product).filter(Product.category_id == category.id).count()
		if products_count > 0:
			raise Conflict(
				f"Cannot delete category with {products_count} products. Delete or move the products first."
			)
		self.db.delete(category)
		self.db.commit()

	# products

	def list_products(self, category_id: Optional[int] = None, search: Optional[str] = None) -> List[Product]:
		query = self.db.query(Product).options(joinedload(Product.category))
		if category_id is not None:
			query = query.filter(Product.category_id == category_id)
		search = clean(search)
		if search:
			query = query.filter(func.lower(Product.name).like(like_pattern(search.lower()), escape="\\"))
		return query.order_by(Product.name.asc(), Product.id.asc()).all()

	def get_product(self, product_id: int) -> Product:
		product = self.db.query(Product).filter(Product.id == product_id).first()
		if not product:
			raise NotFound("Product not found")
		return product

	def _validate_product(self, name: Optional[str], category_id: Optional[int]) -> str:
		name = clean(name)
		if not name:
			raise ValidationError("Product name is required")
		if not category_id:
			raise ValidationError("Category is required")
		return name

	def create_product(self, name: Optional[str], category_id: Optional[int], unit: Optional[str] = None) -> Product:
		name = self._validate_product(name, category_id)
		self.get_category(category_id)
		exists = (
			self.db.query(Product.id)
			.filter(Product.category_id == category_id, Product.name == name)
			.first()
		)
		if exists:
			raise Conflict(PRODUCT_EXISTS)

		product = Product(name=name, category_id=category_id, unit=optional_clean(unit))
		self.db.add(product)
		commit_or_conflict(self.db, PRODUCT_EXISTS)
		self.db.refresh(product)
		return product

	def update_product(
		self,
		product_id: int,
		name: Optional[str],
		category_id: Optional[int],
		unit: Optional[str] = None,
	) -> Product:
		name = self._validate_product(name, category_id)
		product = self.get_product(product_id)
		self.get_category(category_id)
		taken = (
			self.db.query(Product.id)
			.filter(Product.category_id == category_id, Product.name == name, Product.id != product.id)
			.first()
		)
		if taken:
			raise Conflict(PRODUCT_EXISTS)

		product.name = name
		product.category_id = category_id
		product.unit = optional_clean(unit)
		commit_or_conflict(self.db, PRODUCT_EXISTS)
		self.db.refresh(product)
		return product

	def delete_product(self, product_id: int) -> None:
		product = self.get_product(product_id)
		items_count = self.db.query(Item).filter(Item.product_id == product.id).count()
		if items_count > 0:
			raise Conflict(f"Product is used by {items_count} items and cannot be deleted")
		self.db.delete(product)
		self.db.commit()

	def recommendations(self) -> List[Category]:
		return (
			self.db.query(Category)
			.options(joinedload(Category.products))
			.order_by(Category.sort_order.asc(), Category.id.asc())
			.all()
		)
