"""Project configuration settings.

Constants for the record format, storage layout and logging. Anything that
can be overridden from the environment is read through a function so the
override is honoured at call time (tests monkeypatch the environment).
"""

from pathlib import Path
import os

# Security / crypto
KEY_LENGTH = 32  # AES-256
NONCE_LENGTH = 16  # stored nonce size; existing .diary files use 16
AUTH_TAG_LENGTH = 16  # GCM tag length

# Storage layout
DEFAULT_DATA_DIR = Path("diary_data")
METADATA_FILENAME = "metadata.json"
ENTRIES_DIRNAME = "entries"
ENTRY_SUFFIX = ".diary"

# Backups
BACKUP_PREFIX = "diary_"

# Logging
LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def data_dir() -> Path:
	"""Resolve the data directory, honouring DIARY_PATH."""
	env_path = os.environ.get("DIARY_PATH")
	return Path(env_path) if env_path else DEFAULT_DATA_DIR


def log_level() -> str:
	"""Resolve the log level, honouring DIARY_LOG_LEVEL."""
	return os.environ.get("DIARY_LOG_LEVEL", LOG_LEVEL).upper()


__all__ = [
	'KEY_LENGTH','NONCE_LENGTH','AUTH_TAG_LENGTH',
	'DEFAULT_DATA_DIR','METADATA_FILENAME','ENTRIES_DIRNAME','ENTRY_SUFFIX',
	'BACKUP_PREFIX','LOG_LEVEL','LOG_FORMAT','data_dir','log_level'
]
