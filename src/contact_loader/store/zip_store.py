"""Zip code to timezone lookup backed by the zip_code table."""

import csv
import sqlite3
from pathlib import Path


def normalize_zip(postal_code: str) -> str:
    """Five-digit zip: ZIP+4 suffix dropped, short numeric zips left-padded ("2118" -> "02118")."""
    return (postal_code or "").strip()[:5].zfill(5)


class ZipCodeStore:
    """
    Timezone offsets by US zip code.
    Values are "<offset>_<has_dst>" (e.g. "-5_1"); unknown zips give "".
    Hits are memoized for the life of the store.
    """

    def __init__(self, db_path: str | Path = "contact_loader.db"):
        self._db_path = Path(db_path)
        self._memo: dict[str, str] = {}
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def timezone_for_postal_code(self, postal_code: str) -> str:
        zip5 = normalize_zip(postal_code)
        if zip5 in self._memo:
            return self._memo[zip5]
        with self._connection() as conn:
            row = conn.execute(
                "SELECT timezone_offset, has_dst FROM zip_code WHERE zip = ?",
                (zip5,),
            ).fetchone()
        if not row:
            return ""
        value = f"{row['timezone_offset']}_{int(bool(row['has_dst']))}"
        self._memo[zip5] = value
        return value

    def upsert(self, zip_code: str, timezone_offset: int, has_dst: bool) -> None:
        zip5 = normalize_zip(zip_code)
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO zip_code (zip, timezone_offset, has_dst) VALUES (?, ?, ?)
                ON CONFLICT(zip) DO UPDATE SET timezone_offset = excluded.timezone_offset, has_dst = excluded.has_dst
                """,
                (zip5, timezone_offset, int(has_dst)),
            )
            conn.commit()
        self._memo.pop(zip5, None)

    def import_csv(self, path: str | Path) -> int:
        """
        Load rows with columns zip, timezone_offset, has_dst (1/0 or true/false).
        Returns rows imported.
        """
        with Path(path).open(newline="", encoding="utf-8") as f:
            rows = [
                (
                    normalize_zip(row["zip"]),
                    int(row["timezone_offset"]),
                    1 if str(row.get("has_dst", "0")).strip().lower() in ("1", "true", "yes") else 0,
                )
                for row in csv.DictReader(f)
            ]
        with self._connection() as conn:
            conn.executemany(
                """
                INSERT INTO zip_code (zip, timezone_offset, has_dst) VALUES (?, ?, ?)
                ON CONFLICT(zip) DO UPDATE SET timezone_offset = excluded.timezone_offset, has_dst = excluded.has_dst
                """,
                rows,
            )
            conn.commit()
        self._memo.clear()
        return len(rows)
