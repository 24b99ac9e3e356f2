from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.lists import ItemUpdate, ItemOut
from shoplist.core.security import get_current_user
from shoplist.services.list_service import ListService

router = APIRouter(prefix="/items", tags=["items"])

@router.put("/{item_id}")
def update_item(
	item_id: int,
	payload: ItemUpdate,
	db: Session = Depends(get_db),
	user: User = Depends(get_current_user),
):
	item = ListService(db).update_item(user, item_id, name=payload.name, quantity=payload.quantity)
	return {"item": ItemOut.model_validate(item)}

@router.patch("/{item_id}/toggle")
def toggle_item(item_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	item = ListService(db).toggle_item(user, item_id)
	return {"item": ItemOut.model_validate(item)}

@router.delete("/{item_id}")
def delete_item(item_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	ListService(db).delete_item(user, item_id)
	return {"message": "Item deleted"}
