import os
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

# Ensure the parent directory exists before creating the database
DB_PATH = os.environ.get("DATABASE_URL", "sqlite:///./data/database.sqlite")
if DB_PATH.startswith("sqlite:///"):
    # Extract local path from sqlite URL
    local_path = DB_PATH.replace("sqlite:///", "")
    if os.path.dirname(local_path):
        os.makedirs(os.path.dirname(local_path), exist_ok=True)

engine = create_engine(DB_PATH, connect_args={"check_same_thread": False} if DB_PATH.startswith("sqlite") else {})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


Base.metadata.create_all(bind=engine)


class KeyValueStore:
    """String-keyed get/set over the settings table. One short session per call."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        db = self.session_factory()
        try:
            row = db.get(Setting, key)
            return row.value if row else None
        finally:
            db.close()

    def set(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            row = db.get(Setting, key)
            if row:
                row.value = value
            else:
                db.add(Setting(key=key, value=value))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
