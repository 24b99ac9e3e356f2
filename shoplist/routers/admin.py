from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.auth import RoleUpdate, UserOut
from shoplist.core.security import require_admin
from shoplist.core.logging import log_event, request_id
from shoplist.services.list_service import ListService
from shoplist.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/users")
def list_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
	users = UserService(db)
	recipe_counts = users.recipe_counts()
	rows = []
	for u in users.list_users():
		lists = sorted(u.shopping_lists, key=lambda row: (row.updated_at, row.id), reverse=True)
		payload = UserOut.model_validate(u).model_dump(by_alias=True)
		payload["counts"] = {"shoppingLists": len(lists), "recipes": recipe_counts.get(u.id, 0)}
		payload["shoppingLists"] = [
			{
				"id": row.id,
				"name": row.name,
				"createdAt": row.created_at,
				"updatedAt": row.updated_at,
				"itemCount": len(row.items),
			}
			for row in lists
		]
		rows.append(payload)
	return {"users": rows}

@router.delete("/users/{user_id}")
def delete_user(
	request: Request,
	user_id: int,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	UserService(db).delete_user(admin, user_id)
	log_event("user_deleted", user_id=user_id, actor_id=admin.id, request_id=request_id(request))
	return {"message": "User deleted"}

@router.put("/users/{user_id}/role")
def update_role(
	request: Request,
	user_id: int,
	payload: RoleUpdate,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	target = UserService(db).set_role(user_id, payload.role)
	log_event("user_role_changed", user_id=target.id, role=target.role.value, actor_id=admin.id, request_id=request_id(request))
	return {"user": UserOut.model_validate(target)}

@router.delete("/shopping-lists/{list_id}")
def delete_any_list(
	request: Request,
	list_id: int,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	ListService(db).admin_delete_list(list_id)
	log_event("list_deleted", list_id=list_id, actor_id=admin.id, by_admin=True, request_id=request_id(request))
	return {"message": "Shopping list deleted"}
