from datetime import datetime
from typing import Optional

from pydantic import EmailStr

from shoplist.db.models import Role
from shoplist.schemas.base import CamelModel

class RegisterRequest(CamelModel):
	# presence and length are checked by the service so the messages stay uniform
	email: Optional[EmailStr] = None
	username: Optional[str] = None
	password: Optional[str] = None
	name: Optional[str] = None

class LoginRequest(CamelModel):
	email: Optional[str] = None
	password: Optional[str] = None

class UserOut(CamelModel):
	id: int
	email: str
	username: str
	name: Optional[str] = None
	role: Role
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

class UserSummary(CamelModel):
	id: int
	username: str
	name: Optional[str] = None
	email: str

class AuthResponse(CamelModel):
	user: UserOut
	token: str

class ChangePasswordRequest(CamelModel):
	current_password: Optional[str] = None
	new_password: Optional[str] = None

class ProfileUpdate(CamelModel):
	name: Optional[str] = None
	email: Optional[EmailStr] = None

class RoleUpdate(CamelModel):
	role: Role
