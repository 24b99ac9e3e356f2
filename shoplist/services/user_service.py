from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shoplist.core.errors import Conflict, Forbidden, NotFound, ValidationError
from shoplist.db.models import ListShare, Recipe, Role, ShoppingList, User
from shoplist.services.base import clean, commit_or_conflict, like_pattern
from shoplist.services.list_service import delete_list_cascade

SEARCH_LIMIT = 10


class UserService:
	def __init__(self, db: Session):
		self.db = db

	def get_user(self, user_id: int) -> User:
		user = self.db.query(User).filter(User.id == user_id).first()
		if not user:
			raise NotFound("User not found")
		return user

	def get_profile(self, actor: User, user_id: int) -> User:
		if actor.id != user_id:
			raise Forbidden("You can only view your own profile")
		return self.get_user(user_id)

	def update_profile(self, actor: User, user_id: int, name: Optional[str] = None, email: Optional[str] = None) -> User:
		if actor.id != user_id:
			raise Forbidden("You can only update your own profile")
		name = clean(name)
		email = clean(email).lower()
		if not name and not email:
			raise ValidationError("Provide a name or email to update")

		user = self.get_user(user_id)
		if email and email != user.email:
			taken = self.db.query(User.id).filter(User.email == email, User.id != user.id).first()
			if taken:
				raise Conflict("A user with this email already exists")
			user.email = email
		if name:
			user.name = name
		commit_or_conflict(self.db, "A user with this email already exists")
		self.db.refresh(user)
		return user

	def search(self, actor: User, query: Optional[str]) -> List[User]:
		query = clean(query)
		if not query:
			raise ValidationError("Search query is required")
		pattern = like_pattern(query.lower())
		return (
			self.db.query(User)
			.filter(User.id != actor.id)
			.filter(
				or_(
					func.lower(User.username).like(pattern, escape="\\"),
					func.lower(User.name).like(pattern, escape="\\"),
				)
			)
			.order_by(User.username.asc())
			.limit(SEARCH_LIMIT)
			.all()
		)

	# administration

	def list_users(self) -> List[User]:
		return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

	def recipe_counts(self) -> dict:
		rows = self.db.query(Recipe.user_id, func.count(Recipe.id)).group_by(Recipe.user_id).all()
		return {user_id: count for user_id, count in rows}

	def delete_user(self, admin: User, user_id: int) -> None:
		user = self.get_user(user_id)
		if user.id == admin.id:
			# the actor may delete users, just not their own account
			raise ValidationError("You cannot delete your own account")

		for shopping_list in self.db.query(ShoppingList).filter(ShoppingList.user_id == user.id).all():
			delete_list_cascade(self.db, shopping_list)
		self.db.query(ListShare).filter(ListShare.user_id == user.id).delete(synchronize_session=False)
		self.db.query(Recipe).filter(Recipe.user_id == user.id).delete(synchronize_session=False)
		self.db.delete(user)
		self.db.commit()

	def set_role(self, user_id: int, role: Role) -> User:
		user = self.get_user(user_id)
		user.role = role
		self.db.commit()
		self.db.refresh(user)
		return user

	def set_role_by_email(self, email: str, role: Role) -> User:
		user = self.db.query(User).filter(User.email == clean(email).lower()).first()
		if not user:
			raise NotFound("User not found")
		return self.set_role(user.id, role)
