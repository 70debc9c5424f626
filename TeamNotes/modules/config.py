"""
Runtime settings for the TeamNotes application.

All configuration is resolved here from environment variables so the rest of the
code consumes a single `Settings` object instead of reading the environment itself.
"""
# teamnotes/modules/config.py

import logging
import os
from dataclasses import dataclass

DEFAULT_DATA_DIR = "data"
DEFAULT_KEY_FILE = "secret.key"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    """Resolved runtime configuration.

    Attributes:
        data_dir (str): Directory holding one encrypted JSON document per storage key.
        key_file (str): Path of the Fernet key used to encrypt those documents.
        log_level (str): Name of the root logging level.
    """
    data_dir: str = DEFAULT_DATA_DIR
    key_file: str = DEFAULT_KEY_FILE
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(env=None) -> Settings:
    """Builds `Settings` from `TEAMNOTES_*` environment variables.

    Args:
        env (dict, optional): A mapping to read instead of `os.environ`.

    Returns:
        Settings: The resolved configuration, with defaults for unset variables.
    """
    env = os.environ if env is None else env
    return Settings(
        data_dir=env.get("TEAMNOTES_DATA_DIR") or DEFAULT_DATA_DIR,
        key_file=env.get("TEAMNOTES_KEY_FILE") or DEFAULT_KEY_FILE,
        log_level=(env.get("TEAMNOTES_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configures the root logger once; later calls leave existing handlers alone."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
