"""Data access layer for liquidity snapshots"""

from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence
from sqlalchemy.orm import Session
from treasury_pooling.infrastructure.database.models import CURRENT_FORM_STATE_ID, FormState, SavedSnapshot
from treasury_pooling.domain.exceptions import InvalidSnapshotError, SnapshotNotFoundError
from treasury_pooling.domain.models import ClientEntry


def entries_to_snapshot(entries: Sequence[ClientEntry]) -> List[dict]:
    """Serialize entries to the camelCase JSON snapshot shape"""
    return [entry.to_dict() for entry in entries]


# Raw form values are kept as stored, but only JSON scalars are readable
RAW_VALUE_TYPES = (int, float, str, type(None))


def entries_from_snapshot(data: Any) -> List[ClientEntry]:
    """
    Rebuild entries from a stored snapshot payload.

    Raises:
        InvalidSnapshotError: If the payload is not a list of entry objects, or
            a numeric field holds a list or object
    """
    if not isinstance(data, list):
        raise InvalidSnapshotError("Snapshot payload must be a list of client entries")
    try:
        entries = [ClientEntry.from_dict(item) for item in data]
    except (AttributeError, TypeError) as e:
        raise InvalidSnapshotError(f"Malformed snapshot entry: {e}") from e

    for entry in entries:
        for position in entry.currencies:
            raw_values = (
                position.cash_amount,
                position.cash_interest_rate,
                position.borrowing_amount,
                position.borrowing_interest_rate,
            )
            if not all(isinstance(value, RAW_VALUE_TYPES) for value in raw_values):
                raise InvalidSnapshotError(
                    f"Malformed amount in snapshot entry {entry.client_name!r}, currency {position.currency_code!r}"
                )
    return entries


class SnapshotRepository:
    """Repository for named snapshots (last write wins)"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, name: str, entries: Sequence[ClientEntry]) -> SavedSnapshot:
        """Insert or fully replace the snapshot stored under name"""
        snapshot = self.db.get(SavedSnapshot, name)
        if snapshot is None:
            snapshot = SavedSnapshot(name=name)
            self.db.add(snapshot)

        snapshot.data = entries_to_snapshot(entries)
        snapshot.saved_at = datetime.now(timezone.utc)
        self.db.flush()
        return snapshot

    def get(self, name: str) -> SavedSnapshot:
        """
        Fetch one snapshot by name.

        Raises:
            SnapshotNotFoundError: If nothing is stored under name
        """
        snapshot = self.db.get(SavedSnapshot, name)
        if snapshot is None:
            raise SnapshotNotFoundError(f"Snapshot {name!r} not found")
        return snapshot

    def load_entries(self, name: str) -> List[ClientEntry]:
        return entries_from_snapshot(self.get(name).data)

    def list_all(self) -> List[SavedSnapshot]:
        """All snapshots, most recently saved first"""
        return (
            self.db.query(SavedSnapshot)
            .order_by(SavedSnapshot.saved_at.desc(), SavedSnapshot.name)
            .all()
        )

    def delete(self, name: str) -> None:
        snapshot = self.get(name)
        self.db.delete(snapshot)
        self.db.flush()


class FormStateRepository:
    """Repository for the single unnamed working-state snapshot"""

    def __init__(self, db: Session):
        self.db = db

    def save_current(self, entries: Sequence[ClientEntry]) -> FormState:
        state = self.db.get(FormState, CURRENT_FORM_STATE_ID)
        if state is None:
            state = FormState(id=CURRENT_FORM_STATE_ID)
            self.db.add(state)

        state.data = entries_to_snapshot(entries)
        state.saved_at = datetime.now(timezone.utc)
        self.db.flush()
        return state

    def load_current(self) -> Optional[FormState]:
        return self.db.get(FormState, CURRENT_FORM_STATE_ID)
