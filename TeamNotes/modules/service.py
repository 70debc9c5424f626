"""
This module provides the `TeamNotesService`, the single controller that owns the
application state of TeamNotes.

It is responsible for:
- Resolving settings and building the encrypted `LocalStore`.
- Constructing the components (`ProfileManager`, `AuditLog`, `NoteRepository`,
  `TransferService`) and handing each one a reference to itself, so components can
  reach the store, the audit log and the current profile.
- Exposing convenience methods the UI uses for actions that need the current profile.
"""
# teamnotes/modules/service.py

import logging

from modules.audit import AuditLog
from modules.config import load_settings
from modules.encryption import build_encryptor
from modules.notes import NoteRepository
from modules.profiles import ProfileManager
from modules.storage import LocalStore
from modules.transfer import TransferService

logger = logging.getLogger(__name__)


class TeamNotesService:
    """Owns all notes, audit and profile state for one running session."""

    def __init__(self, settings=None, encryptor=None):
        """Initializes the store and every component.

        Args:
            settings (Settings, optional): Runtime configuration; read from the
                environment when omitted.
            encryptor (optional): A Fernet-compatible encryptor; built from the
                configured key file when omitted.
        """
        self.settings = settings or load_settings()
        if encryptor is None:
            encryptor = build_encryptor(self.settings.key_file)
        self.store = LocalStore(self.settings.data_dir, encryptor)
        # Profiles load first: the audit log asks them for the acting name.
        self.profiles = ProfileManager(self)
        self.audit = AuditLog(self)
        self.notes = NoteRepository(self)
        self.transfer = TransferService(self)
        logger.info("TeamNotes loaded %d notes from %s", self.notes.count(), self.settings.data_dir)

    def add_note(self, fields):
        """Creates a note authored by the current profile."""
        return self.notes.create(fields, self.profiles.current())

    def edit_note(self, note_id, fields):
        """Saves an edit under the current profile."""
        return self.notes.update(note_id, fields, self.profiles.current())

    def acknowledge_note(self, note_id):
        """Acknowledges a note as the current profile."""
        return self.notes.acknowledge(note_id, self.profiles.current())
