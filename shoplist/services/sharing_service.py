from typing import List, Optional

from sqlalchemy.orm import Session

from shoplist.core.errors import Conflict, NotFound, ValidationError
from shoplist.db.models import ListShare, User
from shoplist.services import access
from shoplist.services.base import commit_or_conflict

ALREADY_SHARED = "The list is already shared with this user"


class SharingService:
	def __init__(self, db: Session):
		self.db = db

	def list_shares(self, owner: User, list_id: int) -> List[ListShare]:
		access.get_owned_list(self.db, owner.id, list_id)
		return (
			self.db.query(ListShare)
			.filter(ListShare.list_id == list_id)
			.order_by(ListShare.created_at.desc(), ListShare.id.desc())
			.all()
		)

	def share_list(self, owner: User, list_id: int, target_user_id: Optional[int]) -> ListShare:
		if not target_user_id:
			raise ValidationError("Target user id is required")
		shopping_list = access.get_owned_list(self.db, owner.id, list_id)
		if target_user_id == shopping_list.user_id:
			raise Conflict("The owner already has access to this list")

		target = self.db.query(User).filter(User.id == target_user_id).first()
		if not target:
			raise NotFound("User not found")
		if access.is_shared_with(self.db, target.id, shopping_list.id):
			raise Conflict(ALREADY_SHARED)

		share = ListShare(list_id=shopping_list.id, user_id=target.id)
		self.db.add(share)
		commit_or_conflict(self.db, ALREADY_SHARED)
		self.db.refresh(share)
		return share

	def revoke_share(self, owner: User, list_id: int, target_user_id: Optional[int]) -> None:
		# A missing share is an error rather than a no-op.
		if not target_user_id:
			raise ValidationError("User id is required")
		access.get_owned_list(self.db, owner.id, list_id)
		share = (
			self.db.query(ListShare)
			.filter(ListShare.list_id == list_id, ListShare.user_id == target_user_id)
			.first()
		)
		if not share:
			raise NotFound("Share not found")
		self.db.delete(share)
		self.db.commit()

	def leave_list(self, user: User, list_id: int) -> None:
		share = (
			self.db.query(ListShare)
			.filter(ListShare.list_id == list_id, ListShare.user_id == user.id)
			.first()
		)
		if not share:
			raise NotFound(access.LIST_NOT_FOUND)
		self.db.delete(share)
		self.db.commit()
