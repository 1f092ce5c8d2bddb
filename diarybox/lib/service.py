"""Request/response surface over the entry repository.

Every call returns a plain dict with a ``success`` flag; failures carry an
``error`` code (``not_found``, ``auth``, ``storage`` or ``invalid``). Wrong
password and corrupted data both map to ``auth``.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List
from .crypto import DiaryCrypto, AuthFailure, derive_key
from .utils import EntryRepository, NotFoundError, AuthError, StorageError, write_atomic

log = logging.getLogger(__name__)

Result = Dict[str, Any]

def _fail(code: str) -> Result:
	return {'success': False, 'error': code}

class DiaryService:
	def __init__(self, repository: EntryRepository):
		self.repo = repository

	def list_entries(self) -> List[Dict[str, Any]]:
		return [d.to_dict() for d in self.repo.list()]

	def create_entry(self, title: str, text: str, password: str) -> Result:
		if not text or not password:
			return _fail('invalid')
		try:
			d = self.repo.create(title, text, password)
		except StorageError:
			return _fail('storage')
		return {'success': True, 'descriptor': d.to_dict()}

	def read_entry(self, filename: str, password: str) -> Result:
		if not password:
			return _fail('invalid')
		try:
			return {'success': True, 'text': self.repo.read(filename, password)}
		except NotFoundError:
			return _fail('not_found')
		except AuthError:
			return _fail('auth')
		except StorageError:
			return _fail('storage')

	def update_entry(self, filename: str, new_title: str, new_text: str, password: str, verify: bool = False) -> Result:
		if not new_text or not password:
			return _fail('invalid')
		try:
			self.repo.update(filename, new_title, new_text, password, verify=verify)
		except NotFoundError:
			return _fail('not_found')
		except AuthError:
			return _fail('auth')
		except StorageError:
			return _fail('storage')
		return {'success': True}

	def delete_entry(self, filename: str) -> Result:
		try:
			self.repo.delete(filename)
		except NotFoundError:
			return _fail('invalid')
		except StorageError:
			return _fail('storage')
		return {'success': True}

	def export_file(self, path: Path, text: str, password: str) -> Result:
		"""Seal ``text`` into a standalone .diary file outside the index."""
		if not text or not password:
			return _fail('invalid')
		path = Path(path)
		try:
			write_atomic(path, DiaryCrypto().seal_text(text, derive_key(password)))
		except OSError as e:
			log.error(f"Failed to export to {path}: {e}")
			return _fail('storage')
		log.info(f"Exported entry -> {path}")
		return {'success': True, 'path': str(path)}

	def import_file(self, path: Path, password: str) -> Result:
		"""Open a standalone .diary file."""
		if not password:
			return _fail('invalid')
		path = Path(path)
		if not path.is_file():
			return _fail('not_found')
		try:
			record = path.read_text(encoding='utf-8')
			return {'success': True, 'text': DiaryCrypto().open_text(record, derive_key(password))}
		except (AuthFailure, UnicodeDecodeError):
			log.warning(f"Could not open {path}")
			return _fail('auth')
		except OSError as e:
			log.error(f"Failed to read {path}: {e}")
			return _fail('storage')
