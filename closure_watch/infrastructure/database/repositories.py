"""Data access layer for scan snapshots"""

from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from closure_watch.infrastructure.database.models import LATEST_SCAN_KEY, ScanSnapshot
from closure_watch.domain.models import ScanResult


class ScanSnapshotRepository:
    """Overwrite-only store for the most recent scan"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, result: ScanResult) -> None:
        """Replace the latest snapshot (last write wins)"""
        snapshot = ScanSnapshot(
            key=LATEST_SCAN_KEY,
            payload=result.to_payload(),
            count=result.count,
            scanned_at=result.scanned_at,
        )
        self.db.merge(snapshot)
        self.db.flush()

    def get_latest(self) -> Optional[Dict[str, Any]]:
        """Stored payload of the latest scan, or None before the first scan"""
        snapshot = self.db.get(ScanSnapshot, LATEST_SCAN_KEY)
        if snapshot is None:
            return None
        return snapshot.payload
