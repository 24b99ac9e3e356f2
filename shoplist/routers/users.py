from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.auth import ChangePasswordRequest, ProfileUpdate, UserOut, UserSummary
from shoplist.core.security import get_current_user
from shoplist.core.errors import Forbidden
from shoplist.services.auth_service import AuthService
from shoplist.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/search")
def search_users(
	q: str | None = Query(None),
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	rows = UserService(db).search(user, q)
	return {"users": [UserSummary.model_validate(u) for u in rows]}

@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	target = UserService(db).get_profile(user, user_id)
	return {"user": UserOut.model_validate(target)}

@router.patch("/{user_id}")
def update_user(
	user_id: int,
	payload: ProfileUpdate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	target = UserService(db).update_profile(user, user_id, name=payload.name, email=payload.email)
	return {"user": UserOut.model_validate(target), "message": "Profile updated"}

@router.patch("/{user_id}/password")
def change_password(
	user_id: int,
	payload: ChangePasswordRequest,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	if user.id != user_id:
		raise Forbidden("You can only change your own password")
	AuthService(db).change_password(user, payload.current_password, payload.new_password)
	return {"message": "Password changed"}
