from typing import Iterable, Sequence, Tuple

from sqlalchemy.orm import Session

from shoplist.core.config import settings
from shoplist.core.security import hash_password
from shoplist.db.models import Category, Product, Role, User

# (name, icon, products)
DEFAULT_CATALOG: Sequence[Tuple[str, str, Sequence[str]]] = (
	("Fruits & Vegetables", "🥦", ("Apples", "Bananas", "Carrots", "Lemons", "Onions", "Potatoes", "Tomatoes")),
	("Dairy & Eggs", "🥛", ("Butter", "Cheese", "Eggs", "Milk", "Yogurt")),
	("Bakery", "🍞", ("Baguette", "Bread", "Croissants")),
	("Meat & Fish", "🍗", ("Chicken breast", "Ground beef", "Salmon")),
	("Pantry", "🥫", ("Flour", "Olive oil", "Pasta", "Rice", "Salt", "Sugar")),
	("Drinks", "🧃", ("Coffee", "Juice", "Tea", "Water")),
	("Household", "🧻", ("Dish soap", "Paper towels", "Toilet paper")),
)


def seed_categories(db: Session, catalog: Iterable[Tuple[str, str, Sequence[str]]] = DEFAULT_CATALOG) -> int:
	"""Insert the categories and products that are not there yet; returns how many rows were added."""
	categories = {row.name: row for row in db.query(Category).all()}
	next_order = max([c.sort_order for c in categories.values()] or [0]) + 1
	count = 0
	for name, icon, products in catalog:
		category = categories.get(name)
		if category is None:
			category = Category(name=name, icon=icon, sort_order=next_order)
			next_order += 1
			db.add(category)
			db.flush()
			categories[name] = category
			count += 1
		existing = {p.name for p in db.query(Product.name).filter(Product.category_id == category.id).all()}
		for product_name in products:
			if product_name in existing:
				continue
			db.add(Product(name=product_name, category_id=category.id))
			count += 1
	if count:
		db.commit()
	return count


def bootstrap_admin(db: Session, email: str, password: str, username: str = "admin") -> User:
	email = email.strip().lower()
	user = db.query(User).filter(User.email == email).first()
	if not user:
		if db.query(User.id).filter(User.username == username).first():
			username = email.split("@")[0]
		user = User(
			email=email,
			username=username,
			name=username,
			password_hash=hash_password(password),
			role=Role.ADMIN,
		)
		db.add(user)
	else:
		user.role = Role.ADMIN
		user.password_hash = hash_password(password)
	db.commit()
	db.refresh(user)
	return user


def seed_startup_data(session_factory) -> None:
	db = session_factory()
	try:
		if settings.SEED_CATALOG:
			seed_categories(db)
		if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
			bootstrap_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_USERNAME)
	finally:
		db.close()
