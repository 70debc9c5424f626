"""
This module defines the exceptions raised by the TeamNotes core.

Every error derives from `TeamNotesError`, so the GUI can catch one type and show
the message to the user. An operation that raises has not changed any state.
"""
# teamnotes/modules/errors.py

class TeamNotesError(Exception):
    """Base class for errors raised by the TeamNotes core."""


class ValidationError(TeamNotesError):
    """Raised when a required field is empty or a value is outside its allowed set."""


class NotFoundError(TeamNotesError):
    """Raised when an operation targets a note id or profile name that does not exist."""


class FormatError(TeamNotesError):
    """Raised when an import payload cannot be parsed as a data bundle."""
