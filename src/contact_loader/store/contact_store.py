"""SQLite-backed campaign contacts and contact load jobs."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from contact_loader.models.contact import NormalizedContact
from contact_loader.models.job import ContactLoadJob

logger = logging.getLogger(__name__)

_CONTACT_COLUMNS = (
    "campaign_id",
    "first_name",
    "last_name",
    "cell",
    "zip",
    "timezone_offset",
    "message_status",
)


class ContactStore:
    """
    SQLite store for campaign contacts plus the job rows that request loads.
    Delete-then-insert for one campaign is not isolated from a concurrent load
    of the same campaign; callers serialize loads per campaign.
    """

    def __init__(self, db_path: str | Path = "contact_loader.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def create_job(self, campaign_id: int, payload: str) -> ContactLoadJob:
        """Record a pending contact load job."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            cursor = conn.execute(
                "INSERT INTO job_request (campaign_id, payload, status, created_at) VALUES (?, ?, 'pending', ?)",
                (campaign_id, payload, now),
            )
            conn.commit()
            job_id = cursor.lastrowid
        return ContactLoadJob(id=job_id or 0, campaign_id=campaign_id, payload=payload)

    def get_job(self, job_id: int) -> Optional[ContactLoadJob]:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM job_request WHERE id = ?", (job_id,)).fetchone()
        if not row:
            return None
        return ContactLoadJob(
            id=row["id"],
            campaign_id=row["campaign_id"],
            payload=row["payload"],
            status=row["status"],
            result_message=row["result_message"],
        )

    def complete_load(
        self,
        job: ContactLoadJob,
        error: Optional[str],
        requested_count: str,
        result_json: Optional[str],
    ) -> None:
        """Mark the job completed (result_json) or failed (error)."""
        now = datetime.now(timezone.utc).isoformat()
        status = "failed" if error else "completed"
        with self._connection() as conn:
            conn.execute(
                """
                UPDATE job_request SET status = ?, requested_count = ?, result_message = ?, finished_at = ?
                WHERE id = ?
                """,
                (status, requested_count, error or result_json, now, job.id),
            )
            conn.commit()
        logger.info("Job %d %s (requested %s)", job.id, status, requested_count or "?")

    def delete_contacts_for_campaign(self, campaign_id: int) -> int:
        """Delete every contact of a campaign. Returns rows deleted."""
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM campaign_contact WHERE campaign_id = ?", (campaign_id,))
            conn.commit()
        return cursor.rowcount

    def bulk_insert(self, contacts: Sequence[NormalizedContact], batch_size: int = 100) -> int:
        """Insert contacts, committing every batch_size rows. Returns rows inserted."""
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        placeholders = ", ".join("?" for _ in _CONTACT_COLUMNS)
        sql = f"INSERT INTO campaign_contact ({', '.join(_CONTACT_COLUMNS)}) VALUES ({placeholders})"
        inserted = 0
        with self._connection() as conn:
            for start in range(0, len(contacts), batch_size):
                batch = contacts[start:start + batch_size]
                conn.executemany(
                    sql,
                    [tuple(getattr(contact, col) for col in _CONTACT_COLUMNS) for contact in batch],
                )
                conn.commit()
                inserted += len(batch)
        return inserted

    def contacts_for_campaign(self, campaign_id: int) -> list[NormalizedContact]:
        """Return a campaign's contacts in insertion order."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM campaign_contact WHERE campaign_id = ? ORDER BY id",
                (campaign_id,),
            ).fetchall()
        return [
            NormalizedContact.model_validate({col: row[col] for col in _CONTACT_COLUMNS})
            for row in rows
        ]

    def count(self, campaign_id: int) -> int:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM campaign_contact WHERE campaign_id = ?",
                (campaign_id,),
            ).fetchone()
        return row["n"]
