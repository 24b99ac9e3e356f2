import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint, Boolean, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from shoplist.db.base import Base


class Role(str, enum.Enum):
	USER = "user"
	ADMIN = "admin"


class User(Base):
	__tablename__ = "users"

	id = Column(Integer, primary_key=True, index=True)
	email = Column(String, unique=True, index=True, nullable=False)
	username = Column(String, unique=True, index=True, nullable=False)
	password_hash = Column(String, nullable=False)
	name = Column(String, nullable=True)
	role = Column(
		Enum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
		nullable=False,
		default=Role.USER,
	)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	shopping_lists = relationship("ShoppingList", back_populates="owner", passive_deletes="all")
	recipes = relationship("Recipe", back_populates="owner", passive_deletes="all")

	@property
	def is_admin(self) -> bool:
		return self.role == Role.ADMIN

class ShoppingList(Base):
	__tablename__ = "shopping_lists"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String, nullable=False)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	owner = relationship("User", back_populates="shopping_lists")
	items = relationship(
		"Item",
		back_populates="shopping_list",
		order_by="Item.id",
		passive_deletes="all",
	)
	shares = relationship("ListShare", back_populates="shopping_list", passive_deletes="all")

class Item(Base):
	__tablename__ = "items"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String, nullable=False)
	quantity = Column(Integer, nullable=False, default=1)
	purchased = Column(Boolean, nullable=False, default=False)
	list_id = Column(Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), index=True, nullable=False)
	product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), index=True, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	shopping_list = relationship("ShoppingList", back_populates="items")
	product = relationship("Product", back_populates="items")

class ListShare(Base):
	__tablename__ = "list_shares"
	__table_args__ = (UniqueConstraint("list_id", "user_id", name="uq_list_share"),)

	id = Column(Integer, primary_key=True, index=True)
	list_id = Column(Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), index=True, nullable=False)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow)

	shopping_list = relationship("ShoppingList", back_populates="shares")
	user = relationship("User")

class Category(Base):
	__tablename__ = "categories"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String, unique=True, index=True, nullable=False)
	icon = Column(String, nullable=True)
	sort_order = Column(Integer, nullable=False, default=0)
	created_at = Column(DateTime, default=datetime.utcnow)

	products = relationship("Product", back_populates="category", order_by="Product.name")

class Product(Base):
	__tablename__ = "products"
	__table_args__ = (UniqueConstraint("category_id", "name", name="uq_category_product"),)

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String, index=True, nullable=False)
	unit = Column(String, nullable=True)
	category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), index=True, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow)

	category = relationship("Category", back_populates="products")
	items = relationship("Item", back_populates="product")

class Recipe(Base):
	__tablename__ = "recipes"

	id = Column(Integer, primary_key=True, index=True)
	user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
	title = Column(String, nullable=False)
	description = Column(Text, nullable=True)
	ingredients = Column(Text, nullable=False)  # JSON-encoded list of strings
	instructions = Column(Text, nullable=False)
	cooking_time = Column(Integer, nullable=True)
	servings = Column(Integer, nullable=True)
	created_at = Column(DateTime, default=datetime.utcnow)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	owner = relationship("User", back_populates="recipes")
