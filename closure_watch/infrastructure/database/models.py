"""SQLAlchemy ORM models for persisted scan snapshots"""

from sqlalchemy import Column, DateTime, Integer, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

LATEST_SCAN_KEY = "latest"


class ScanSnapshot(Base):
    """Key-value blob holding a serialized scan result"""

    __tablename__ = "scan_snapshot"

    key = Column(Text, primary_key=True)
    payload = Column(JSON, nullable=False)
    count = Column(Integer, nullable=False, default=0)
    scanned_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
