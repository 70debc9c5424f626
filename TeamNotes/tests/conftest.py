"""
Pytest configuration file for the TeamNotes test suite.

This file defines shared fixtures used across the test files:
- `settings` points the data directory and key file at a temporary directory, so
  tests never touch real data.
- `encryptor` provides a Fernet instance with a fresh key.
- `clock` replaces the note timestamps with a strictly increasing fake clock, so
  tests can compare `created_at` and `updated_at` reliably.
- `service` builds an isolated `TeamNotesService` from the fixtures above.
"""
from datetime import datetime, timedelta, timezone

import pytest
from cryptography.fernet import Fernet

from modules import notes as notes_module
from modules.config import Settings
from modules.service import TeamNotesService

ALEX = {"name": "Alex", "role": "pharmacist", "license": "2081234"}
SAM = {"name": "Sam", "role": "technician", "license": ""}


@pytest.fixture
def settings(tmp_path):
    """Provides settings rooted in the test's temporary directory."""
    return Settings(data_dir=str(tmp_path / "data"), key_file=str(tmp_path / "secret.key"))


@pytest.fixture
def encryptor():
    return Fernet(Fernet.generate_key())


@pytest.fixture
def clock(monkeypatch):
    """Makes every note timestamp one second later than the previous one."""
    start = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    ticks = {"count": 0}

    def fake_now():
        ticks["count"] += 1
        return (start + timedelta(seconds=ticks["count"])).isoformat()

    monkeypatch.setattr(notes_module, "now_iso", fake_now)
    return fake_now


@pytest.fixture
def service(settings, encryptor, clock):
    """Provides a fresh service with empty storage for each test."""
    return TeamNotesService(settings, encryptor)


@pytest.fixture
def alex_service(service):
    """
    Provides a service whose current profile is Alex, with Sam also saved.

    Returns:
        TeamNotesService: The prepared service.
    """
    service.profiles.set_current(SAM)
    service.profiles.set_current(ALEX)
    return service
