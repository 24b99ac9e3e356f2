from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoplist.core.errors import Conflict


def clean(value: Optional[str]) -> str:
	return value.strip() if isinstance(value, str) else ""

def optional_clean(value: Optional[str]) -> Optional[str]:
	value = clean(value)
	return value or None

def commit_or_conflict(db: Session, message: str) -> None:
	# The uniqueness pre-checks are not transactional; a concurrent writer can
	# still trip the storage constraint between check and commit.
	try:
		db.commit()
	except IntegrityError:
		db.rollback()
		raise Conflict(message)

def like_pattern(value: str) -> str:
	"""Contains-pattern for ``LIKE`` that matches ``%`` and ``_`` literally; query with ``escape="\\"``."""
	escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
	return f"%{escaped}%"
