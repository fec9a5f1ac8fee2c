"""
Recycle bin service - soft delete, restore and purge.

Each operation is two writes (the original row and the bin entry) ordered so
that a failure between them leaves a duplicate rather than losing data:

- delete:  insert bin entry, then flag the row deleted
- restore: unflag the row, then remove the bin entry
- purge:   remove the row, then the bin entry
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from psycopg2.extras import Json
from pydantic import TypeAdapter

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.event_bus import EventBus
from core.events import ItemDeleted, ItemRestored, ItemPurged
from core.models import EntityType, RecycleBinEntry
from core.recycle_bin import is_eligible_for_purge, is_eligible_for_restore
from utils.user_context import get_current_user_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_ROW_ADAPTER = TypeAdapter(dict[str, Any])


class RecycleBinService:
    """Service for the recycle bin."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger, event_bus: EventBus):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus

    def move_to_bin(self, entity_type: EntityType, entity_id: UUID) -> RecycleBinEntry:
        """
        Soft delete a record.

        Raises:
            ValueError: If the record is not found or already deleted
        """
        user_id = get_current_user_id()
        table = entity_type.table

        row = self.postgres.execute_single(
            f"SELECT * FROM {table} WHERE id = %s AND is_deleted = FALSE",
            (entity_id,)
        )
        if row is None:
            raise ValueError(f"{entity_type.value.capitalize()} {entity_id} not found")

        snapshot = _jsonable(row)
        now = now_utc()

        entry_row = self.postgres.execute_returning(
            """
            INSERT INTO recycle_bin (id, user_id, original_id, entity_type, data, deleted_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (uuid4(), user_id, entity_id, entity_type.value, Json(snapshot), now)
        )[0]
        entry = RecycleBinEntry.model_validate(entry_row)

        self.postgres.execute_returning(
            f"""
            UPDATE {table}
            SET is_deleted = TRUE, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, entity_id)
        )

        self.audit.log_change(
            entity_type=entity_type.value,
            entity_id=entity_id,
            action=AuditAction.DELETE,
            changes={"deleted": snapshot}
        )

        self.event_bus.publish(ItemDeleted.create(entry=entry))

        return entry

    def get_entry(self, entry_id: UUID) -> RecycleBinEntry | None:
        row = self.postgres.execute_single(
            "SELECT * FROM recycle_bin WHERE id = %s",
            (entry_id,)
        )
        return RecycleBinEntry.model_validate(row) if row else None

    def list_entries(self) -> list[RecycleBinEntry]:
        """Bin entries, most recently deleted first."""
        rows = self.postgres.execute(
            "SELECT * FROM recycle_bin ORDER BY deleted_at DESC"
        )
        return [RecycleBinEntry.model_validate(row) for row in rows]

    def restore(self, entry_id: UUID, now: datetime | None = None) -> RecycleBinEntry:
        """
        Put a record back where it was.

        Raises:
            ValueError: If the entry is not found, its restore window has
                passed, or the original row no longer exists
        """
        now = now or now_utc()

        entry = self.get_entry(entry_id)
        if entry is None:
            raise ValueError(f"Recycle bin entry {entry_id} not found")

        if not is_eligible_for_restore(entry, now):
            raise ValueError(f"Recycle bin entry {entry_id} is past its restore window")

        restored = self.postgres.execute_returning(
            f"""
            UPDATE {entry.entity_type.table}
            SET is_deleted = FALSE, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, entry.original_id)
        )
        if not restored:
            raise ValueError(
                f"{entry.entity_type.value.capitalize()} {entry.original_id} not found"
            )

        self.postgres.execute_rowcount(
            "DELETE FROM recycle_bin WHERE id = %s",
            (entry_id,)
        )

        self.audit.log_change(
            entity_type=entry.entity_type.value,
            entity_id=entry.original_id,
            action=AuditAction.RESTORE,
            changes={"restored_from": str(entry_id)}
        )
        logger.info("Restored %s %s", entry.entity_type.value, entry.original_id)

        self.event_bus.publish(ItemRestored.create(entry=entry))

        return entry

    def permanently_delete(self, entry_id: UUID) -> bool:
        """
        Remove a record and its bin entry for good.

        Returns:
            True if removed, False if the entry was not found
        """
        entry = self.get_entry(entry_id)
        if entry is None:
            return False

        self._purge(entry)
        return True

    def purge_expired(self, now: datetime | None = None) -> int:
        """
        Permanently remove every entry past its restore window.

        Returns:
            Number of entries purged
        """
        now = now or now_utc()

        expired = [entry for entry in self.list_entries() if is_eligible_for_purge(entry, now)]
        for entry in expired:
            self._purge(entry)

        if expired:
            logger.info("Purged %d expired recycle bin entries", len(expired))

        return len(expired)

    def _purge(self, entry: RecycleBinEntry) -> None:
        self.postgres.execute_rowcount(
            f"DELETE FROM {entry.entity_type.table} WHERE id = %s AND is_deleted = TRUE",
            (entry.original_id,)
        )
        self.postgres.execute_rowcount(
            "DELETE FROM recycle_bin WHERE id = %s",
            (entry.id,)
        )

        self.audit.log_change(
            entity_type=entry.entity_type.value,
            entity_id=entry.original_id,
            action=AuditAction.PURGE,
            changes={"deleted": entry.data}
        )

        self.event_bus.publish(ItemPurged.create(entry=entry))


def _jsonable(row: dict[str, Any]) -> dict[str, Any]:
    """Row values as JSON-safe primitives for the snapshot column."""
    return _ROW_ADAPTER.dump_python(row, mode="json")
