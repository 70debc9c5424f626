"""
This module handles the encryption key for the application's data files.

It uses the `cryptography` library (specifically Fernet symmetric encryption) so the
documents written by the `LocalStore` are not readable at rest. The module is
responsible for:
- Generating a secret key if one does not already exist.
- Storing and loading the secret key from the configured key file.
- Building the `Fernet` encryptor used by the store.

Security Note: The key file is critical. It must be kept secure and should not be
committed to version control.
"""
# teamnotes/modules/encryption.py

import logging
import os

from cryptography.fernet import Fernet

logger = logging.getLogger(__name__)


def write_key(key_file: str) -> None:
    """Generates a new Fernet key and saves it to `key_file`."""
    parent = os.path.dirname(key_file)
    if parent:
        os.makedirs(parent, exist_ok=True)
    key = Fernet.generate_key()
    with open(key_file, "wb") as f:
        f.write(key)


def load_key(key_file: str) -> bytes:
    """Loads the Fernet key from `key_file`.

    Returns:
        bytes: The encryption key.
    """
    with open(key_file, "rb") as f:
        return f.read()


def build_encryptor(key_file: str) -> Fernet:
    """Returns a Fernet instance for `key_file`, generating the key on first run.

    Args:
        key_file (str): Path of the key file.

    Returns:
        Fernet: The encryptor shared by every storage key.
    """
    try:
        key = load_key(key_file)
    except FileNotFoundError:
        logger.warning("Encryption key %s not found. Generating a new one.", key_file)
        write_key(key_file)
        key = load_key(key_file)
    return Fernet(key)
