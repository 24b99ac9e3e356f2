from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from shoplist.core.config import settings
from shoplist.core.errors import Forbidden, Unauthenticated
from shoplist.db.session import get_db
from shoplist.db.models import Role, User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
# auto_error is off so a missing header gets the same 401 body as a bad token
security = HTTPBearer(auto_error=False)

def _normalize_password(password: str) -> str:
	# bcrypt only considers the first 72 bytes; truncate consistently to avoid errors.
	raw = password.encode("utf-8")
	if len(raw) <= 72:
		return password
	return raw[:72].decode("utf-8", errors="ignore")

def hash_password(password: str) -> str:
	return pwd_context.hash(_normalize_password(password))

def verify_password(password: str, password_hash: str) -> bool:
	try:
		return pwd_context.verify(_normalize_password(password), password_hash)
	except ValueError:
		# malformed stored hash
		return False

def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
	now = datetime.utcnow()
	if expires_delta is None:
		expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRES_MIN)
	payload = {
		"sub": str(user_id),
		"type": "access",
		"iat": int(now.timestamp()),
		"exp": int((now + expires_delta).timestamp()),
	}
	return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)

def decode_token(token: str) -> dict:
	return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])

def verify_token(token: str) -> Optional[int]:
	"""Return the user id carried by a valid access token, or None."""
	try:
		payload = decode_token(token)
	except JWTError:
		return None
	if payload.get("type") != "access":
		return None
	try:
		return int(payload.get("sub"))
	except (TypeError, ValueError):
		return None

def get_current_user(
	creds: HTTPAuthorizationCredentials | None = Depends(security),
	db: Session = Depends(get_db),
) -> User:
	if not creds or creds.scheme.lower() != "bearer":
		raise Unauthenticated()
	user_id = verify_token(creds.credentials)
	if user_id is None:
		raise Unauthenticated()

	user = db.query(User).filter(User.id == user_id).first()
	if not user:
		raise Unauthenticated()
	return user

def require_role(*allowed_roles: Role):
	def _role_guard(user: User = Depends(get_current_user)) -> User:
		if user.role not in allowed_roles:
			raise Forbidden("Administrator access required")
		return user
	return _role_guard

require_admin = require_role(Role.ADMIN)
