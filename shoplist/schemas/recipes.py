import json
from datetime import datetime
from typing import List, Optional

from pydantic import Field, validator

from shoplist.schemas.base import MAX_INT, CamelModel

class RecipeCreate(CamelModel):
	title: Optional[str] = None
	description: Optional[str] = None
	ingredients: Optional[List[str]] = None
	instructions: Optional[str] = None
	cooking_time: Optional[int] = Field(None, le=MAX_INT)
	servings: Optional[int] = Field(None, le=MAX_INT)

class RecipeOut(CamelModel):
	id: int
	user_id: int
	title: str
	description: Optional[str] = None
	ingredients: List[str]
	instructions: str
	cooking_time: Optional[int] = None
	servings: Optional[int] = None
	created_at: Optional[datetime] = None

	@validator("ingredients", pre=True)
	def decode_ingredients(cls, v):
		# stored as JSON text on the model
		if isinstance(v, str):
			try:
				v = json.loads(v or "[]")
			except ValueError:
				return []
		return v

class AddToListRequest(CamelModel):
	list_id: Optional[int] = Field(None, le=MAX_INT)
