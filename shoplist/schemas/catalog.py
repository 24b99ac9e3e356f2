from datetime import datetime
from typing import List, Optional

from pydantic import Field

from shoplist.schemas.base import MAX_INT, CamelModel

class CategoryCreate(CamelModel):
	name: Optional[str] = None
	icon: Optional[str] = None
	sort_order: Optional[int] = Field(None, ge=-MAX_INT, le=MAX_INT)

class CategoryUpdate(CategoryCreate):
	pass

class ProductCreate(CamelModel):
	name: Optional[str] = None
	category_id: Optional[int] = Field(None, le=MAX_INT)
	unit: Optional[str] = None

class ProductUpdate(ProductCreate):
	pass

class CategorySummary(CamelModel):
	id: int
	name: str
	icon: Optional[str] = None

class ProductBrief(CamelModel):
	id: int
	name: str
	unit: Optional[str] = None

class ProductOut(CamelModel):
	id: int
	name: str
	unit: Optional[str] = None
	category_id: int
	category: Optional[CategorySummary] = None
	created_at: Optional[datetime] = None

class CategoryOut(CamelModel):
	id: int
	name: str
	icon: Optional[str] = None
	sort_order: int
	created_at: Optional[datetime] = None
	product_count: Optional[int] = None

class CategoryWithProducts(CategoryOut):
	products: List[ProductBrief] = Field(default_factory=list)

class Recommendation(CamelModel):
	category_id: int
	category: str
	icon: Optional[str] = None
	items: List[str] = Field(default_factory=list)
