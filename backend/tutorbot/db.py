from __future__ import annotations
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./tutorbot.db"

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


# Best-effort lightweight migrations for development (SQLite-friendly)
def ensure_schema() -> None:
	try:
		inspector = inspect(engine)
		tables = set(inspector.get_table_names())
	except Exception:
		return
	if "interviews" in tables:
		cols = {c["name"] for c in inspector.get_columns("interviews")}
		with engine.begin() as conn:
			if "time_limit" not in cols:
				conn.exec_driver_sql("ALTER TABLE interviews ADD COLUMN time_limit INTEGER DEFAULT 0 NOT NULL")
			if "record_audio" not in cols:
				conn.exec_driver_sql("ALTER TABLE interviews ADD COLUMN record_audio BOOLEAN DEFAULT 0 NOT NULL")
