"""
This module defines the `ProfileManager`, which tracks who is currently acting.

A profile is display metadata only (name, role, license number). It is copied into
notes and audit entries at the moment of each action. Previously saved profiles are
remembered in a small directory keyed by name so the user can switch between them.
"""
# teamnotes/modules/profiles.py

from __future__ import annotations

from typing import Dict, List

from modules.errors import NotFoundError, ValidationError
from modules.models import Profile, ROLES
from modules.storage import PROFILE_KEY, USERS_KEY


class ProfileManager:
    """Manages the active profile and the directory of saved profiles."""

    def __init__(self, teamnotes_service) -> None:
        """Initializes the manager from the store of the main `TeamNotesService`.

        Args:
            teamnotes_service: An instance of the main TeamNotesService.
        """
        self._service = teamnotes_service
        self._profile: Dict = self._service.store.load(PROFILE_KEY) or {}
        self._directory: List[Dict] = self._service.store.load(USERS_KEY)

    def current(self) -> Dict:
        """Returns the active profile with defaults filled in for unset fields."""
        return Profile.from_dict(self._profile).to_dict()

    def directory(self) -> List[Dict]:
        """Returns the saved profiles in the order they were first saved."""
        return [dict(p) for p in self._directory]

    def _find(self, name: str) -> int:
        for idx, entry in enumerate(self._directory):
            if entry.get('name') == name:
                return idx
        return -1

    def set_current(self, profile) -> Dict:
        """Replaces the active profile and remembers it in the directory.

        Args:
            profile: A dict with 'name', 'role' and 'license', or a `Profile`.

        Returns:
            A copy of the saved profile.

        Raises:
            ValidationError: If the role is not one of the known roles.
        """
        if not isinstance(profile, Profile):
            profile = Profile.from_dict(profile)
        if profile.role not in ROLES:
            raise ValidationError(f"Unknown role: {profile.role}")

        saved = profile.to_dict()
        self._profile = dict(saved)
        self._service.store.save(PROFILE_KEY, self._profile)

        # Last save wins on a name collision.
        idx = self._find(saved['name'])
        if idx >= 0:
            self._directory[idx] = dict(saved)
        else:
            self._directory.append(dict(saved))
        self._service.store.save(USERS_KEY, self._directory)

        self._service.audit.append('Profile saved', saved['name'])
        return dict(saved)

    def reset(self) -> None:
        """Clears the active profile back to Guest; the directory is kept."""
        self._profile = {}
        self._service.store.remove(PROFILE_KEY)
        self._service.audit.append('Profile reset')

    def switch_to(self, name: str) -> Dict:
        """Makes a saved profile the active one.

        Raises:
            NotFoundError: If no profile with `name` has been saved.
        """
        idx = self._find(name)
        if idx < 0:
            raise NotFoundError(f"No saved profile named {name!r}")
        self._profile = dict(self._directory[idx])
        self._service.store.save(PROFILE_KEY, self._profile)
        self._service.audit.append(f'Switched to profile {name}')
        return self.current()

    def forget(self, name: str) -> None:
        """Removes a saved profile from the directory without touching the active one."""
        idx = self._find(name)
        if idx < 0:
            raise NotFoundError(f"No saved profile named {name!r}")
        del self._directory[idx]
        self._service.store.save(USERS_KEY, self._directory)
        self._service.audit.append(f'Removed saved profile {name}')

    def replace_current(self, profile: Dict) -> None:
        """Overwrites the active profile as-is, used by bundle import."""
        self._profile = dict(profile)
        self._service.store.save(PROFILE_KEY, self._profile)
