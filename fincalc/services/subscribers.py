"""
Flat-file subscriber storage.

Subscribers live in a single JSON array keyed by lower-cased email.
"""

import csv
import io
import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from fincalc.config import get_settings

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Email", "Subscribed At", "Source", "Path"]


class SubscriberStoreError(Exception):
    """The subscriber file could not be read or written."""

    pass


class SubscriberStore:
    """Append-or-update store backed by one JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise SubscriberStoreError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise SubscriberStoreError(f"{self.path} does not hold a list")
        return data

    def _write(self, subscribers: List[Dict[str, Any]]) -> None:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(subscribers, fh, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise SubscriberStoreError(f"Cannot write {self.path}: {e}") from e

    def list(self) -> List[Dict[str, Any]]:
        """Return every stored subscriber record."""
        with self._lock:
            return self._read()

    def append_or_update(
        self,
        email: str,
        source: Optional[str] = None,
        path: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Add a subscriber, or refresh the record if the email is known.

        Matching ignores case. Metadata keys are merged over the stored
        record; subscribedAt is only set on creation.

        Returns:
            Tuple of (record, created)
        """
        email = email.strip().lower()
        timestamp = datetime.now(timezone.utc).isoformat()
        extra = dict(metadata or {})

        with self._lock:
            subscribers = self._read()
            existing_index = next(
                (
                    i
                    for i, sub in enumerate(subscribers)
                    if str(sub.get("email", "")).lower() == email
                ),
                None,
            )

            if existing_index is not None:
                record = {
                    **subscribers[existing_index],
                    "lastUpdated": timestamp,
                    "source": source,
                    "path": path,
                    **extra,
                }
                subscribers[existing_index] = record
            else:
                record = {
                    "email": email,
                    "subscribedAt": timestamp,
                    "lastUpdated": timestamp,
                    "source": source,
                    "path": path,
                    **extra,
                }
                subscribers.append(record)

            self._write(subscribers)

        created = existing_index is None
        logger.info(f"Subscriber {'added' if created else 'updated'}: {email}")
        return record, created


def export_csv(subscribers: List[Dict[str, Any]]) -> str:
    """Render subscribers as CSV with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for sub in subscribers:
        writer.writerow(
            [
                sub.get("email") or "",
                sub.get("subscribedAt") or "",
                sub.get("source") or "",
                sub.get("path") or "",
            ]
        )
    return buffer.getvalue()


_store: Optional[SubscriberStore] = None


def get_subscriber_store() -> SubscriberStore:
    """Get the subscriber store for the configured file."""
    global _store
    if _store is None:
        _store = SubscriberStore(get_settings().subscribers_file)
    return _store
