from datetime import datetime
from typing import List, Optional

from pydantic import Field

from shoplist.schemas.auth import UserSummary
from shoplist.schemas.base import MAX_INT, CamelModel

class ListCreate(CamelModel):
	name: Optional[str] = None

class ListUpdate(CamelModel):
	name: Optional[str] = None

class ItemCreate(CamelModel):
	name: Optional[str] = None
	quantity: Optional[int] = Field(1, le=MAX_INT)
	product_id: Optional[int] = Field(None, le=MAX_INT)

class ItemUpdate(CamelModel):
	name: Optional[str] = None
	quantity: Optional[int] = Field(None, le=MAX_INT)

class BulkItemsRequest(CamelModel):
	items: List[ItemCreate] = Field(default_factory=list)

class ItemOut(CamelModel):
	id: int
	name: str
	quantity: int
	purchased: bool
	list_id: int
	product_id: Optional[int] = None
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

class ShoppingListOut(CamelModel):
	id: int
	name: str
	user_id: int
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None
	items: List[ItemOut] = Field(default_factory=list)
	owner: Optional[UserSummary] = None
	is_owner: bool = False
	is_shared: bool = False

class FailedItem(CamelModel):
	name: str
	error: str

class BulkItemsResult(CamelModel):
	added: List[ItemOut] = Field(default_factory=list)
	failed: List[FailedItem] = Field(default_factory=list)
	added_count: int = 0
	failed_count: int = 0

class ShareCreate(CamelModel):
	target_user_id: Optional[int] = Field(None, le=MAX_INT)

class ShareOut(CamelModel):
	id: int
	list_id: int
	user_id: int
	created_at: Optional[datetime] = None
	user: UserSummary
