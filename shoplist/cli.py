"""Out-of-band administration: ``shoplist-admin promote|demote <email>``."""

import argparse
import sys

from shoplist.core.errors import AppError
from shoplist.core.logging import log_event
from shoplist.db.models import Role
from shoplist.db.session import SessionLocal, init_db
from shoplist.services.user_service import UserService


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="shoplist-admin", description="Manage shoplist user roles.")
	sub = parser.add_subparsers(dest="command", required=True)
	promote = sub.add_parser("promote", help="Give a user the admin role")
	promote.add_argument("email")
	demote = sub.add_parser("demote", help="Return an admin to the user role")
	demote.add_argument("email")
	return parser


def main(argv=None, session_factory=SessionLocal) -> int:
	args = build_parser().parse_args(argv)
	role = Role.ADMIN if args.command == "promote" else Role.USER
	if session_factory is SessionLocal:
		init_db()
	db = session_factory()
	try:
		user = UserService(db).set_role_by_email(args.email, role)
	except AppError as exc:
		print(f"error: {exc.message}", file=sys.stderr)
		return 1
	finally:
		db.close()
	log_event("user_role_changed", user_id=user.id, role=role.value, source="cli")
	print(f"{user.email} is now {role.value}")
	return 0


if __name__ == "__main__":
	sys.exit(main())
