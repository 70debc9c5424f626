"""
This module defines the `NoteRepository`, which owns the collection of shift notes.

It is responsible for:
- Creating, editing, acknowledging and deleting notes.
- Enforcing field defaults and the note status transition
  (`active` -> `completed` on acknowledgement, never back).
- Filtering and searching the collection for display.

Notes are kept newest-first. Every mutating operation persists the notes key and
appends exactly one entry to the audit log.
"""
# teamnotes/modules/notes.py

from __future__ import annotations

import copy
import logging
from typing import Dict, List, Optional, Set

from modules.errors import NotFoundError, ValidationError
from modules.models import (
    Acknowledgement, CATEGORIES, DEFAULT_CATEGORY, DEFAULT_PRIORITY, Note, PRIORITIES,
    Profile, note_id_of, now_iso,
)
from modules.storage import NOTES_KEY

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('message', 'category', 'priority', 'patient_reference')
ALL = 'all'


def _as_profile(profile) -> Profile:
    if isinstance(profile, Profile):
        return profile
    return Profile.from_dict(profile)


def _clean_fields(fields: Dict) -> Dict:
    """Trims and validates the editable fields present in `fields`.

    Raises:
        ValidationError: If the message is blank or a category/priority is unknown.
    """
    cleaned = {}
    if 'message' in fields:
        message = str(fields.get('message') or '').strip()
        if not message:
            raise ValidationError("Message is required")
        cleaned['message'] = message
    if 'category' in fields:
        category = str(fields.get('category') or '').strip() or DEFAULT_CATEGORY
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")
        cleaned['category'] = category
    if 'priority' in fields:
        priority = str(fields.get('priority') or '').strip().lower() or DEFAULT_PRIORITY
        if priority not in PRIORITIES:
            raise ValidationError(f"Unknown priority: {priority}")
        cleaned['priority'] = priority
    if 'patient_reference' in fields:
        cleaned['patient_reference'] = str(fields.get('patient_reference') or '').strip()
    return cleaned


class NoteRepository:
    """Owns the notes of the running application."""

    def __init__(self, teamnotes_service) -> None:
        """Initializes the repository from the store of the main `TeamNotesService`.

        Args:
            teamnotes_service: An instance of the main TeamNotesService.
        """
        self._service = teamnotes_service
        self._notes: List[Dict] = self._service.store.load(NOTES_KEY)

    def _save(self) -> None:
        self._service.store.save(NOTES_KEY, self._notes)

    def _find(self, note_id: str) -> Dict:
        for note in self._notes:
            if isinstance(note, dict) and note.get('id') == note_id:
                return note
        raise NotFoundError(f"Note {note_id} not found")

    def create(self, fields: Dict, acting_profile) -> Dict:
        """Adds a new active note at the top of the collection.

        Args:
            fields: The note content: 'message' (required), 'category', 'priority'
                and 'patient_reference'.
            acting_profile: The profile whose name, role and license are recorded.

        Returns:
            A copy of the created note.

        Raises:
            ValidationError: If the message is blank or a category/priority is unknown.
        """
        cleaned = _clean_fields({k: fields.get(k) for k in EDITABLE_FIELDS})
        profile = _as_profile(acting_profile)
        note = Note(
            message=cleaned['message'], profile=profile, category=cleaned['category'],
            priority=cleaned['priority'], patient_reference=cleaned['patient_reference'],
            created_at=now_iso()
        ).to_dict()
        self._notes.insert(0, note)
        self._save()
        self._service.audit.append(f"Created note {note['id']}", profile.name)
        return copy.deepcopy(note)

    def update(self, note_id: str, fields: Dict, acting_profile=None) -> Dict:
        """Merges edited fields over an existing note.

        Status, acknowledgements and the creation time are never changed by an edit.
        Fields outside `EDITABLE_FIELDS` are ignored.

        Args:
            note_id: The ID of the note to edit.
            fields: The fields to change.
            acting_profile: If given, the author snapshot is retaken from this profile.

        Returns:
            A copy of the updated note.
        """
        note = self._find(note_id)
        cleaned = _clean_fields({k: v for k, v in fields.items() if k in EDITABLE_FIELDS})
        note.update(cleaned)
        if acting_profile is not None:
            profile = _as_profile(acting_profile)
            note['author'] = profile.name
            note['author_role'] = profile.role
            note['license'] = profile.license
        note['updated_at'] = now_iso()
        self._save()
        actor = _as_profile(acting_profile).name if acting_profile is not None else None
        self._service.audit.append(f"Edited note {note_id}", actor)
        return copy.deepcopy(note)

    def acknowledge(self, note_id: str, acting_profile) -> Dict:
        """Records an acknowledgement and marks the note completed.

        Acknowledging a completed note adds another record; the history is never
        deduplicated.
        """
        note = self._find(note_id)
        profile = _as_profile(acting_profile)
        now = now_iso()
        ack = Acknowledgement(profile.name, profile.role, at=now).to_dict()
        if not isinstance(note.get('acknowledgements'), list):
            note['acknowledgements'] = []
        note['acknowledgements'].append(ack)
        note['status'] = 'completed'
        note['updated_at'] = now
        self._save()
        self._service.audit.append(f"Acknowledged note {note_id} by {profile.name}", profile.name)
        return copy.deepcopy(note)

    def delete(self, note_id: str) -> None:
        note = self._find(note_id)
        self._notes = [n for n in self._notes if n is not note]
        self._save()
        self._service.audit.append(f"Deleted note {note_id}")

    def clear_all(self) -> None:
        logger.info("Clearing %d notes", len(self._notes))
        self._notes = []
        self._save()
        self._service.audit.append("Cleared all notes")

    def get(self, note_id: str) -> Dict:
        return copy.deepcopy(self._find(note_id))

    def replace(self, notes: List) -> None:
        """Overwrites the whole collection as-is, used by bundle import."""
        self._notes = copy.deepcopy(notes)
        self._save()

    def list(self) -> List[Dict]:
        return copy.deepcopy(self._notes)

    def count(self) -> int:
        return len(self._notes)

    def ambiguous_ids(self) -> Set:
        """Returns the ids that can't address a single note.

        Imported notes may lack an id or share one. Operations by id would act on
        the first match only, so such notes can only be removed by `clear_all`.
        The result holds every repeated id, plus None when any note has no id.
        """
        seen, repeated = set(), set()
        for note in self._notes:
            note_id = note_id_of(note)
            if note_id is None or note_id in seen:
                repeated.add(note_id)
            seen.add(note_id)
        return repeated

    def summary(self) -> Dict[str, int]:
        """Counts notes in total and per status."""
        notes = [n for n in self._notes if isinstance(n, dict)]
        return {
            "total": len(self._notes),
            "active": sum(1 for n in notes if n.get('status') == 'active'),
            "completed": sum(1 for n in notes if n.get('status') == 'completed'),
        }

    def query(self, status: Optional[str] = ALL, priority: Optional[str] = ALL,
              category: Optional[str] = ALL, text: Optional[str] = '') -> List[Dict]:
        """Filters the notes for display, keeping newest-first order.

        Status, priority and category must match exactly unless they are 'all'. The
        search text matches case-insensitively against the message, patient
        reference or author; an empty search matches every note.

        Returns:
            A list of note copies.
        """
        search_term = (text or '').strip().lower()

        def note_matches(note):
            if not isinstance(note, dict):
                return False
            if status and status != ALL and note.get('status') != status:
                return False
            if priority and priority != ALL and note.get('priority') != priority:
                return False
            if category and category != ALL and note.get('category') != category:
                return False
            if search_term:
                return any(
                    search_term in str(note.get(field) or '').lower()
                    for field in ('message', 'patient_reference', 'author')
                )
            return True

        return [copy.deepcopy(n) for n in self._notes if note_matches(n)]
