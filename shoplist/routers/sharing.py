from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.lists import ShareCreate, ShareOut
from shoplist.core.security import get_current_user
from shoplist.core.logging import log_event, request_id
from shoplist.services.sharing_service import SharingService

router = APIRouter(prefix="/shopping-lists", tags=["sharing"])

@router.get("/{list_id}/share")
def list_shares(list_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	shares = SharingService(db).list_shares(user, list_id)
	return {"shares": [ShareOut.model_validate(share) for share in shares]}

@router.post("/{list_id}/share", status_code=201)
def share_list(
	request: Request,
	list_id: int,
	payload: ShareCreate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	share = SharingService(db).share_list(user, list_id, payload.target_user_id)
	log_event(
		"list_shared",
		list_id=list_id,
		owner_id=user.id,
		target_user_id=share.user_id,
		request_id=request_id(request),
	)
	return {"share": ShareOut.model_validate(share)}

@router.delete("/{list_id}/share")
def revoke_share(
	request: Request,
	list_id: int,
	user_id: int | None = Query(None, alias="userId"),
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	SharingService(db).revoke_share(user, list_id, user_id)
	log_event(
		"share_revoked",
		list_id=list_id,
		owner_id=user.id,
		target_user_id=user_id,
		request_id=request_id(request),
	)
	return {"success": True}

@router.post("/{list_id}/leave")
def leave_list(
	request: Request,
	list_id: int,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	SharingService(db).leave_list(user, list_id)
	log_event("list_left", list_id=list_id, user_id=user.id, request_id=request_id(request))
	return {"success": True}
