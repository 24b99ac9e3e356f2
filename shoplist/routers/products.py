from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.catalog import ProductCreate, ProductUpdate, ProductOut
from shoplist.core.security import require_admin
from shoplist.core.logging import log_event, request_id
from shoplist.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["catalog"])

@router.get("")
def list_products(
	category_id: int | None = Query(None, alias="categoryId"),
	search: str | None = None,
	db: Session = Depends(get_db),
):
	rows = CatalogService(db).list_products(category_id=category_id, search=search)
	return {"products": [ProductOut.model_validate(p) for p in rows]}

@router.get("/admin")
def admin_list_products(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
	rows = CatalogService(db).list_products()
	return {"products": [ProductOut.model_validate(p) for p in rows]}

@router.post("/admin", status_code=201)
def create_product(
	request: Request,
	payload: ProductCreate,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	product = CatalogService(db).create_product(payload.name, payload.category_id, unit=payload.unit)
	log_event("product_created", product_id=product.id, category_id=product.category_id, request_id=request_id(request))
	return {"product": ProductOut.model_validate(product)}

@router.put("/admin/{product_id}")
def update_product(
	request: Request,
	product_id: int,
	payload: ProductUpdate,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	product = CatalogService(db).update_product(product_id, payload.name, payload.category_id, unit=payload.unit)
	log_event("product_updated", product_id=product.id, request_id=request_id(request))
	return {"product": ProductOut.model_validate(product)}

@router.delete("/admin/{product_id}")
def delete_product(
	request: Request,
	product_id: int,
	db: Session = Depends(get_db),
	admin: User = Depends(require_admin),
):
	CatalogService(db).delete_product(product_id)
	log_event("product_deleted", product_id=product_id, request_id=request_id(request))
	return {"success": True}
