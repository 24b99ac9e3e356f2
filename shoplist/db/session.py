from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from shoplist.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def enable_sqlite_foreign_keys(target_engine):
	if target_engine.dialect.name != "sqlite":
		return

	@event.listens_for(target_engine, "connect")
	def _set_sqlite_pragma(dbapi_conn, connection_record):
		cursor = dbapi_conn.cursor()
		cursor.execute("PRAGMA foreign_keys=ON")
		cursor.close()

enable_sqlite_foreign_keys(engine)

def init_db(bind=None):
	from shoplist.db import models  # noqa: F401 registers tables
	from shoplist.db.base import Base

	Base.metadata.create_all(bind=bind or engine)

def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()
