"""
This module defines the primary data models for the TeamNotes application.

These classes structure the data managed by the `TeamNotesService` components and
persisted by the `LocalStore`. Instances are converted to plain dictionaries
(`to_dict`) before they are stored, so the persisted documents stay JSON-serializable.
"""
# teamnotes/modules/models.py

from datetime import datetime, timezone
import uuid

CATEGORIES = ("Clinical", "Dispensing", "Stock", "Handover", "Admin", "Other")
PRIORITIES = ("low", "medium", "high")
STATUSES = ("active", "completed")
ROLES = ("guest", "pharmacist", "technician", "dispenser", "assistant")

DEFAULT_CATEGORY = "Other"
DEFAULT_PRIORITY = "low"
DEFAULT_NAME = "Guest"
DEFAULT_ROLE = "guest"


def generate_id(prefix: str) -> str:
    """Returns a short identifier such as 'N3f9a1c2' for the given prefix."""
    return prefix + uuid.uuid4().hex[:8]


def now_iso() -> str:
    """Returns the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class Profile:
    """Represents the acting user's display identity.

    Attributes:
        name (str): The display name, 'Guest' when unset.
        role (str): One of `ROLES`, 'guest' when unset.
        license (str): An optional registration number.
    """
    def __init__(self, name=None, role=None, license=None):
        self.name = str(name or "").strip() or DEFAULT_NAME
        self.role = str(role or "").strip() or DEFAULT_ROLE
        self.license = str(license or "").strip()

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(name=data.get('name'), role=data.get('role'), license=data.get('license'))

    def to_dict(self):
        return {"name": self.name, "role": self.role, "license": self.license}


class Acknowledgement:
    """A record of a named actor marking a note as handled.

    Attributes:
        ack_id (str): A unique identifier with the 'A' prefix.
        actor_name (str): The name of the acknowledging profile.
        actor_role (str): The role of the acknowledging profile.
        at (str): The ISO-formatted time of the acknowledgement.
    """
    def __init__(self, actor_name, actor_role, at=None, ack_id=None):
        self.ack_id = ack_id or generate_id('A')
        self.actor_name = actor_name
        self.actor_role = actor_role
        self.at = at or now_iso()

    def to_dict(self):
        return {"id": self.ack_id, "actor_name": self.actor_name, "actor_role": self.actor_role, "at": self.at}


class AuditEntry:
    """A single human-readable line in the audit trail.

    Attributes:
        entry_id (str): A unique identifier with the 'L' prefix.
        text (str): The description of the action.
        at (str): The ISO-formatted time of the action.
        actor_name (str): The name of the profile that performed the action.
    """
    def __init__(self, text, actor_name, at=None, entry_id=None):
        self.entry_id = entry_id or generate_id('L')
        self.text = text
        self.actor_name = actor_name
        self.at = at or now_iso()

    def to_dict(self):
        return {"id": self.entry_id, "text": self.text, "at": self.at, "actor_name": self.actor_name}


class Note:
    """Represents a single shift note.

    Attributes:
        note_id (str): A unique identifier with the 'N' prefix.
        author (str): The name of the profile that saved the note.
        author_role (str): The role of that profile.
        license (str): The registration number of that profile, if any.
        category (str): One of `CATEGORIES`.
        priority (str): One of `PRIORITIES`.
        patient_reference (str): An optional free-text patient reference.
        message (str): The body of the note.
        status (str): 'active' until acknowledged, then 'completed'.
        created_at (str): The ISO-formatted creation time.
        updated_at (str): The ISO-formatted time of the last change.
        acknowledgements (list): Acknowledgement dictionaries, oldest first.
    """
    def __init__(self, message, profile, category=DEFAULT_CATEGORY, priority=DEFAULT_PRIORITY,
                 patient_reference="", note_id=None, created_at=None):
        # A unique ID and timestamp are generated if they are not provided.
        self.note_id = note_id or generate_id('N')
        self.author = profile.name
        self.author_role = profile.role
        self.license = profile.license
        self.category = category
        self.priority = priority
        self.patient_reference = patient_reference
        self.message = message
        self.status = "active"
        self.created_at = created_at or now_iso()
        self.updated_at = self.created_at
        self.acknowledgements = []

    def to_dict(self):
        return {
            "id": self.note_id,
            "author": self.author,
            "author_role": self.author_role,
            "license": self.license,
            "category": self.category,
            "priority": self.priority,
            "patient_reference": self.patient_reference,
            "message": self.message,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "acknowledgements": list(self.acknowledgements),
        }


def note_id_of(note):
    """Returns the note's id, or None if it is missing or not a non-empty string."""
    note_id = note.get('id') if isinstance(note, dict) else None
    return note_id if isinstance(note_id, str) and note_id else None


def invariant_violations(note) -> list:
    """Lists the ways a stored note dictionary breaks the note invariants.

    Imported notes are accepted as-is, so this is used to report problems
    rather than to reject data.

    Args:
        note: A note dictionary, possibly from an untrusted bundle.

    Returns:
        list: Human-readable descriptions, empty when the note is well-formed.
    """
    if not isinstance(note, dict):
        return ["is not an object"]
    problems = []
    if note_id_of(note) is None:
        problems.append("has no id")
    if not str(note.get('message') or '').strip():
        problems.append("has an empty message")
    if note.get('status') not in STATUSES:
        problems.append(f"has unknown status {note.get('status')!r}")
    acks = note.get('acknowledgements')
    if not isinstance(acks, list):
        problems.append("has no acknowledgement list")
    elif note.get('status') == 'completed' and not acks:
        problems.append("is completed without an acknowledgement")
    return problems
