"""
This module defines the `AuditLog`, the append-only history of user actions.

Entries are kept newest-first. No entry is ever edited or removed on its own; the
only way to shrink the log is a bulk `clear`, which immediately records itself.
"""
# teamnotes/modules/audit.py

from __future__ import annotations

import copy
import logging
from typing import Dict, List, Optional

import pandas as pd

from modules.models import AuditEntry
from modules.storage import AUDIT_KEY

logger = logging.getLogger(__name__)

AUDIT_COLUMNS = ["at", "actor_name", "text"]


class AuditLog:
    """Owns the audit trail of the running application."""

    def __init__(self, teamnotes_service) -> None:
        """Initializes the log from the store of the main `TeamNotesService`.

        Args:
            teamnotes_service: An instance of the main TeamNotesService.
        """
        self._service = teamnotes_service
        self._entries: List[Dict] = self._service.store.load(AUDIT_KEY)

    def _save(self) -> None:
        self._service.store.save(AUDIT_KEY, self._entries)

    def append(self, text: str, actor_name: Optional[str] = None) -> Dict:
        """Records an action at the top of the log.

        Args:
            text: A human-readable description of the action.
            actor_name: Who performed it; defaults to the current profile's name.

        Returns:
            A copy of the new entry.
        """
        if actor_name is None:
            actor_name = self._service.profiles.current()['name']
        entry = AuditEntry(text, actor_name).to_dict()
        self._entries.insert(0, entry)
        self._save()
        logger.info("Audit: %s (%s)", text, actor_name)
        return dict(entry)

    def clear(self) -> None:
        """Empties the log and records the clearing as its only entry."""
        self._entries = []
        self._save()
        self.append('Cleared audit log')

    def list(self) -> List[Dict]:
        return copy.deepcopy(self._entries)

    def replace(self, entries: List[Dict]) -> None:
        """Overwrites the whole log, used by bundle import."""
        self._entries = copy.deepcopy(entries)
        self._save()

    def to_frame(self) -> pd.DataFrame:
        """Returns the log as a DataFrame for tabular display and CSV download."""
        frame = pd.DataFrame(self._entries)
        # Ensure all display columns exist, even for an empty or imported log.
        for col in AUDIT_COLUMNS:
            if col not in frame.columns:
                frame[col] = None
        return frame[AUDIT_COLUMNS]
