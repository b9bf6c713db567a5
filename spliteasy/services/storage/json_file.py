"""
JSON File Storage Implementation

DESIGN DECISION: Recent splits live in a single JSON file because:
1. There are at most a handful of them (10 by default)
2. Users can inspect or back up the file directly
3. No database setup required

TRADEOFFS:
- Single writer only; concurrent processes can lose updates
- The whole list is rewritten on every change (fine at this size)

Reading is forgiving: a corrupt file is discarded and entries that no
longer validate are dropped, the same way a browser would treat broken
local storage.
"""

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from spliteasy.config import get_settings
from spliteasy.editing import generate_id
from spliteasy.log import get_logger
from spliteasy.models.bill import BillState, StoredSplit
from spliteasy.services.storage.interface import (
    SplitStorageInterface,
    StorageError,
)
from spliteasy.services.storage.serialization import generate_split_name
from spliteasy.validation import BillStateValidator


class JsonFileSplitStorage(SplitStorageInterface):
    """
    Recent splits stored as a JSON list in one file.

    Splits are kept newest first and capped at max_splits.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        max_splits: Optional[int] = None,
        validator: Optional[BillStateValidator] = None,
    ):
        settings = get_settings().storage
        self._path = Path(path).expanduser() if path else settings.resolved_path
        self._max_splits = max_splits or settings.max_stored_splits
        self._validator = validator or BillStateValidator()
        self._logger = get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def _discard_file(self, reason: str) -> None:
        self._logger.warning("stored_splits_discarded", path=str(self._path), reason=reason)
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove corrupt splits file: {e}")

    def _read_entries(self) -> list:
        """Raw JSON entries from disk ([] if there is no usable file)."""
        if not self._path.exists():
            return []

        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read splits: {e}")

        try:
            entries = json.loads(text)
        except json.JSONDecodeError as e:
            self._discard_file(f"invalid JSON: {e}")
            return []

        if not isinstance(entries, list):
            self._discard_file("expected a JSON list")
            return []

        return entries

    def _parse_entries(self, entries: list) -> list[StoredSplit]:
        splits = []
        for entry in entries:
            try:
                split = StoredSplit.model_validate(entry)
            except ValidationError as e:
                self._logger.info("stored_split_skipped", reason="malformed", errors=e.error_count())
                continue

            if not self._validator.validate(split.state).is_valid:
                self._logger.info("stored_split_skipped", reason="invalid_state", split_id=split.id)
                continue

            splits.append(split)

        return self._newest_first(splits)

    def _newest_first(self, splits: list[StoredSplit]) -> list[StoredSplit]:
        splits = sorted(splits, key=lambda s: s.timestamp, reverse=True)
        return splits[:self._max_splits]

    def _write(self, splits: list[StoredSplit]) -> None:
        """Atomically replace the file with the given splits."""
        payload = json.dumps(
            [split.model_dump(mode="json") for split in splits],
            indent=2,
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Failed to write splits: {e}")

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write splits: {e}")

    async def load_recent_splits(self) -> list[StoredSplit]:
        """Load recent splits, newest first."""
        return self._parse_entries(self._read_entries())

    async def save_split(
        self,
        state: BillState,
        existing_split_id: Optional[str] = None,
    ) -> Optional[str]:
        """Save or update a split. Incomplete bills are not saved."""
        completeness = self._validator.check_completeness(state)
        if not completeness.is_complete:
            self._logger.warning("split_not_saved", warnings=completeness.warnings)
            return None

        splits = await self.load_recent_splits()
        snapshot = state.model_copy(deep=True)
        name = generate_split_name(state)
        now = datetime.utcnow()

        existing_index = next(
            (i for i, s in enumerate(splits) if existing_split_id and s.id == existing_split_id),
            None,
        )

        if existing_index is not None:
            split_id = existing_split_id
            splits[existing_index] = splits[existing_index].model_copy(
                update={"state": snapshot, "name": name, "timestamp": now}
            )
        else:
            split_id = generate_id()
            splits.insert(0, StoredSplit(id=split_id, timestamp=now, state=snapshot, name=name))

        self._write(self._newest_first(splits))
        self._logger.info("split_saved", split_id=split_id, name=name)

        return split_id

    async def get_split(self, split_id: str) -> Optional[BillState]:
        """Retrieve a saved bill by split ID."""
        for split in await self.load_recent_splits():
            if split.id == split_id:
                return split.state
        return None

    async def delete_split(self, split_id: str) -> bool:
        """Delete a split by ID."""
        splits = await self.load_recent_splits()
        remaining = [s for s in splits if s.id != split_id]

        if len(remaining) == len(splits):
            return False

        self._write(remaining)
        return True

    async def clear_splits(self) -> None:
        """Remove all recent splits."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to clear splits: {e}")
