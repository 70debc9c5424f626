"""
This module defines the `TransferService` for exporting and importing data bundles.

A bundle is a single JSON document holding the notes, the audit log and the active
profile. Importing a bundle overwrites each collection it contains; collections
missing from the bundle are left as they are.
"""
# teamnotes/modules/transfer.py

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Dict

from modules.errors import FormatError
from modules.models import invariant_violations, note_id_of, now_iso

logger = logging.getLogger(__name__)

BUNDLE_LISTS = ('notes', 'audit')
# The export file keeps the camelCase timestamp key of the shared file format.
EXPORTED_AT_KEY = 'exportedAt'


class TransferService:
    """Serializes the full application state and restores it."""

    def __init__(self, teamnotes_service) -> None:
        self._service = teamnotes_service

    def export_bundle(self) -> Dict:
        """Returns a point-in-time snapshot of notes, audit log and profile."""
        return {
            "notes": self._service.notes.list(),
            "audit": self._service.audit.list(),
            "profile": self._service.profiles.current(),
            EXPORTED_AT_KEY: now_iso(),
        }

    def export_json(self) -> str:
        return json.dumps(self.export_bundle(), indent=2)

    @staticmethod
    def export_filename() -> str:
        return f"tna-export-{date.today().isoformat()}.json"

    def _parse(self, payload) -> Dict:
        """Decodes `payload` into a bundle dictionary and checks its top-level shape.

        Raises:
            FormatError: If the payload isn't JSON or its collections have the wrong type.
        """
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = payload.decode('utf-8')
            except UnicodeDecodeError as e:
                raise FormatError("Import file is not UTF-8 text") from e
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise FormatError(f"Import file is not valid JSON: {e.msg}") from e
        if not isinstance(payload, dict):
            raise FormatError("Import file must contain a JSON object")

        for key in BUNDLE_LISTS:
            if key in payload and payload[key] is not None and not isinstance(payload[key], list):
                raise FormatError(f"'{key}' must be a list")
        if 'profile' in payload and payload['profile'] is not None and not isinstance(payload['profile'], dict):
            raise FormatError("'profile' must be an object")
        return payload

    def import_bundle(self, payload) -> Dict:
        """Overwrites notes, audit log and profile with the contents of a bundle.

        Note contents are not validated; notes that break the note invariants, or
        that share an id with an earlier note, are imported anyway and reported in
        the returned 'warnings'.

        A bundle that carries an audit log replaces the local one unchanged, so
        importing an export reproduces it exactly. Only a bundle without an audit
        log records the import as a new audit entry.

        Args:
            payload: The bundle as JSON text, UTF-8 bytes, or an already-parsed dict.

        Returns:
            dict: How many notes and audit entries were imported, whether the profile
                was replaced, and any invariant warnings.

        Raises:
            FormatError: If the payload can't be parsed as a bundle. Nothing is
                changed in that case.
        """
        data = self._parse(payload)
        warnings = []
        summary = {"notes": None, "audit": None, "profile": False, "warnings": warnings}

        notes = data.get('notes')
        if notes is not None:
            seen_ids = set()
            for idx, note in enumerate(notes):
                note_id = note_id_of(note)
                problems = invariant_violations(note)
                if note_id and note_id in seen_ids:
                    problems.append("shares its id with an earlier note")
                seen_ids.add(note_id)
                for problem in problems:
                    message = f"Imported note {note_id or '#' + str(idx)} {problem}"
                    logger.warning(message)
                    warnings.append(message)
            self._service.notes.replace(notes)
            summary["notes"] = len(notes)

        audit = data.get('audit')
        if audit is not None:
            self._service.audit.replace(audit)
            summary["audit"] = len(audit)

        profile = data.get('profile')
        if profile is not None:
            self._service.profiles.replace_current(profile)
            summary["profile"] = True

        if audit is None:
            self._service.audit.append('Imported data bundle')
        logger.info("Imported bundle: %s notes, %s audit entries", summary["notes"], summary["audit"])
        return summary
