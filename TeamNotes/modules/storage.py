"""
This module provides the persistent key/value store for the TeamNotes application.

Each of the four fixed keys is kept as its own encrypted JSON document in the data
directory, so saving one collection never rewrites the others. Documents that are
missing, empty, corrupt or encrypted with a different key load as the key's
default value.
"""
# teamnotes/modules/storage.py

import copy
import json
import logging
import os

from cryptography.fernet import InvalidToken

logger = logging.getLogger(__name__)

NOTES_KEY = 'tna_notes_v1'
AUDIT_KEY = 'tna_audit_v1'
PROFILE_KEY = 'tna_profile_v1'
USERS_KEY = 'tna_users_v1'

DEFAULTS = {
    NOTES_KEY: [],
    AUDIT_KEY: [],
    PROFILE_KEY: {},
    USERS_KEY: [],
}


class LocalStore:
    """Reads and writes JSON-serializable values under the fixed storage keys."""

    def __init__(self, data_dir: str, encryptor):
        """Initializes the store.

        Args:
            data_dir (str): Directory for the per-key documents, created if missing.
            encryptor: An object with Fernet-compatible `encrypt`/`decrypt` methods.
        """
        self.data_dir = data_dir
        self._encryptor = encryptor
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, key: str) -> str:
        if key not in DEFAULTS:
            raise KeyError(f"Unknown storage key: {key}")
        return os.path.join(self.data_dir, f"{key}.json")

    def load(self, key: str):
        """Loads and decrypts the value stored under `key`.

        Returns:
            The stored value, or a fresh copy of the key's default if the document
            doesn't exist or can't be read.
        """
        path = self._path(key)
        try:
            with open(path, 'r') as f:
                encrypted_data = f.read()
            if not encrypted_data:
                return copy.deepcopy(DEFAULTS[key])
            decrypted_data = self._encryptor.decrypt(encrypted_data.encode()).decode()
            return json.loads(decrypted_data)
        except FileNotFoundError:
            return copy.deepcopy(DEFAULTS[key])
        except (InvalidToken, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Could not load %s (%s). Starting with an empty value.", path, e.__class__.__name__)
            return copy.deepcopy(DEFAULTS[key])

    def save(self, key: str, value) -> None:
        """Encrypts and writes `value` under `key`."""
        path = self._path(key)
        data_to_encrypt = json.dumps(value, indent=4)
        encrypted_data = self._encryptor.encrypt(data_to_encrypt.encode())
        with open(path, 'w') as f:
            f.write(encrypted_data.decode())

    def remove(self, key: str) -> None:
        """Deletes the document for `key`; later loads return the default."""
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
