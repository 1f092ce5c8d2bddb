"""Configuration package for diarybox.

`config.settings` is the single source of the constants; they are re-exported
here so `from config import KEY_LENGTH` keeps working.
"""

from .settings import (
	KEY_LENGTH, NONCE_LENGTH, AUTH_TAG_LENGTH,
	DEFAULT_DATA_DIR, METADATA_FILENAME, ENTRIES_DIRNAME, ENTRY_SUFFIX,
	BACKUP_PREFIX, LOG_LEVEL, LOG_FORMAT, data_dir, log_level
)

__all__ = [
	'KEY_LENGTH', 'NONCE_LENGTH', 'AUTH_TAG_LENGTH',
	'DEFAULT_DATA_DIR', 'METADATA_FILENAME', 'ENTRIES_DIRNAME', 'ENTRY_SUFFIX',
	'BACKUP_PREFIX', 'LOG_LEVEL', 'LOG_FORMAT', 'data_dir', 'log_level'
]
