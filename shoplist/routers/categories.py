from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.catalog import CategoryCreate, CategoryUpdate, CategoryOut, CategoryWithProducts
from shoplist.core.security import require_admin
from shoplist.core.logging import log_event, request_id
from shoplist.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["catalog"])

@router.get("")
def list_categories(db: Session = Depends(get_db)):
	catalog = CatalogService(db)
	counts = catalog.category_product_counts()
	return {
		"categories": [
			CategoryOut.model_validate(c).model_copy(update={"product_count": counts.get(c.id, 0)})
			for c in catalog.list_categories()
		]
	}

@router.get("/admin")
def admin_list_categories(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
	rows = CatalogService(db).recommendations()
	return {
		"categories": [
			CategoryWithProducts.model_validate(c).model_copy(update={"product_count": len(c.products)})
			for c in rows
		]
	}

@router.post("/admin", status_code=201)
def create_category(
	request: Request,
	payload: CategoryCreate,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	category = CatalogService(db).create_category(payload.name, icon=payload.icon, sort_order=payload.sort_order)
	log_event("category_created", category_id=category.id, name=category.name, request_id=request_id(request))
	return {"category": CategoryWithProducts.model_validate(category)}

@router.put("/admin/{category_id}")
def update_category(
	request: Request,
	category_id: int,
	payload: CategoryUpdate,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	category = CatalogService(db).update_category(
		category_id, payload.name, icon=payload.icon, sort_order=payload.sort_order
	)
	log_event("category_updated", category_id=category.id, request_id=request_id(request))
	return {"category": CategoryWithProducts.model_validate(category)}

@router.delete("/admin/{category_id}")
def delete_category(
	request: Request,
	category_id: int,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	CatalogService(db).delete_category(category_id)
	log_event("category_deleted", category_id=category_id, request_id=request_id(request))
	return {"success": True}
