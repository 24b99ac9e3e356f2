from typing import Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shoplist.core import security
from shoplist.core.config import settings
from shoplist.core.errors import Conflict, InvalidCredentials, ValidationError
from shoplist.db.models import Role, User
from shoplist.services.base import clean, commit_or_conflict

EMAIL_TAKEN = "A user with this email already exists"
USERNAME_TAKEN = "A user with this username already exists"


def check_password_length(password: str, label: str = "Password") -> None:
	if len(password) < settings.PASSWORD_MIN_LENGTH:
		raise ValidationError(f"{label} must be at least {settings.PASSWORD_MIN_LENGTH} characters")


class AuthService:
	def __init__(self, db: Session):
		self.db = db

	def register(
		self,
		email: Optional[str],
		username: Optional[str],
		password: Optional[str],
		name: Optional[str] = None,
	) -> Tuple[User, str]:
		email = clean(email).lower()
		username = clean(username)
		if not email or not username or not password:
			raise ValidationError("Email, username and password are required")
		check_password_length(password)

		existing = (
			self.db.query(User)
			.filter(or_(User.email == email, User.username == username))
			.first()
		)
		if existing:
			if existing.email == email:
				raise Conflict(EMAIL_TAKEN)
			raise Conflict(USERNAME_TAKEN)

		user = User(
			email=email,
			username=username,
			password_hash=security.hash_password(password),
			name=clean(name) or username,
			role=Role.USER,
		)
		self.db.add(user)
		commit_or_conflict(self.db, "Email or username already registered")
		self.db.refresh(user)
		return user, security.create_access_token(user.id)

	def login(self, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
		email = clean(email).lower()
		if not email or not password:
			raise ValidationError("Email and password are required")

		user = self.db.query(User).filter(User.email == email).first()
		# Same error for unknown email and wrong password.
		if not user or not security.verify_password(password, user.password_hash):
			raise InvalidCredentials()
		return user, security.create_access_token(user.id)

	def change_password(self, user: User, current_password: Optional[str], new_password: Optional[str]) -> None:
		if not current_password or not new_password:
			raise ValidationError("Current and new password are required")
		check_password_length(new_password, label="New password")
		if not security.verify_password(current_password, user.password_hash):
			raise InvalidCredentials("Current password is incorrect")

		user.password_hash = security.hash_password(new_password)
		self.db.commit()
