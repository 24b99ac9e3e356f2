from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.catalog import Recommendation
from shoplist.core.security import get_current_user
from shoplist.services.catalog_service import CatalogService

router = APIRouter(prefix="/recommendations", tags=["catalog"])

@router.get("")
def recommendations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
	rows = CatalogService(db).recommendations()
	return {
		"recommendations": [
			Recommendation(category_id=c.id, category=c.name, icon=c.icon, items=[p.name for p in c.products])
			for c in rows
			if c.products
		]
	}
