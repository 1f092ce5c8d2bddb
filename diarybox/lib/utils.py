"""Storage layer: metadata index + encrypted entry files.

Layout under the data directory:
	metadata.json           {"entries": [descriptor, ...]} in creation order
	entries/<ts>.diary      hex sealed record, nothing else

The two artifacts are written independently. A failure between the entry
write and the metadata save leaves them out of step; nothing is rolled back.
"""
from __future__ import annotations
import json, os, time, logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Any
from config.settings import METADATA_FILENAME, ENTRIES_DIRNAME, ENTRY_SUFFIX
from .crypto import DiaryCrypto, AuthFailure, derive_key

log = logging.getLogger(__name__)

class DiaryError(Exception): ...
class NotFoundError(DiaryError): ...
class AuthError(DiaryError): ...
class StorageError(DiaryError): ...

def now_iso() -> str:
	return datetime.now(timezone.utc).isoformat()

@dataclass
class EntryDescriptor:
	id: int
	title: str
	date: str
	filename: str
	modified: Optional[str] = None

	@classmethod
	def from_dict(cls, raw: Dict[str, Any]) -> 'EntryDescriptor':
		try:
			return cls(int(raw['id']), str(raw['title']), str(raw['date']), str(raw['filename']), raw.get('modified'))
		except (KeyError, TypeError, ValueError) as e:
			raise StorageError(f'Malformed entry descriptor: {e}') from e

	def to_dict(self) -> Dict[str, Any]:
		d = asdict(self)
		if d['modified'] is None:
			d.pop('modified')
		return d

	def edit(self, title: str):
		self.title = title
		self.modified = now_iso()


def write_atomic(path: Path, text: str) -> None:
	tmp = path.with_suffix(path.suffix + '.tmp')
	try:
		tmp.write_text(text, encoding='utf-8')
		os.replace(tmp, path)
	except OSError:
		tmp.unlink(missing_ok=True)
		raise


class MetadataStore:
	def __init__(self, path: Path):
		self.path = Path(path)

	def exists(self) -> bool:
		return self.path.exists()

	def load(self) -> Dict[str, Any]:
		if not self.exists():
			self.save({'entries': []})
		try:
			doc = json.loads(self.path.read_text(encoding='utf-8'))
		except OSError as e:
			log.error(f"Failed to read metadata {self.path}: {e}")
			raise StorageError(f'Cannot read metadata: {e}') from e
		except json.JSONDecodeError as e:
			raise StorageError(f'Metadata is not valid JSON: {e}') from e
		if not isinstance(doc, dict) or not isinstance(doc.get('entries'), list):
			raise StorageError('Metadata document has no entries list')
		if not all(isinstance(e, dict) for e in doc['entries']):
			raise StorageError('Metadata entries must be objects')
		return doc

	def save(self, doc: Dict[str, Any]) -> None:
		try:
			self.path.parent.mkdir(parents=True, exist_ok=True)
			write_atomic(self.path, json.dumps(doc, indent=2, ensure_ascii=False))
		except OSError as e:
			log.error(f"Failed to save metadata {self.path}: {e}")
			raise StorageError(f'Cannot write metadata: {e}') from e
		log.info(f"Metadata saved -> {self.path}")

	def descriptors(self) -> List[EntryDescriptor]:
		return [EntryDescriptor.from_dict(e) for e in self.load()['entries']]

	def list_descending(self) -> List[EntryDescriptor]:
		# sorted() is stable: equal dates keep creation order
		return sorted(self.descriptors(), key=lambda d: d.date, reverse=True)


class EntryRepository:
	"""Create/read/update/delete encrypted diary entries under one data directory."""

	def __init__(self, root: Path):
		self.root = Path(root)
		self.entries_dir = self.root / ENTRIES_DIRNAME
		self.metadata = MetadataStore(self.root / METADATA_FILENAME)
		self.crypto = DiaryCrypto()
		self._last_ts = 0

	def _path(self, filename: str) -> Path:
		if not filename or filename in ('.', '..') or Path(filename).name != filename or '/' in filename or '\\' in filename:
			raise NotFoundError(f'Invalid entry filename: {filename!r}')
		return self.entries_dir / filename

	def _next_timestamp(self) -> int:
		ts = max(time.time_ns() // 1000, self._last_ts + 1)
		while (self.entries_dir / f"{ts}{ENTRY_SUFFIX}").exists():
			ts += 1
		self._last_ts = ts
		return ts

	def _write_entry(self, path: Path, record: str) -> None:
		try:
			self.entries_dir.mkdir(parents=True, exist_ok=True)
			write_atomic(path, record)
		except OSError as e:
			log.error(f"Failed to write entry {path.name}: {e}")
			raise StorageError(f'Cannot write entry: {e}') from e

	def _read_entry(self, path: Path) -> str:
		if not path.is_file():
			raise NotFoundError(f'No entry file: {path.name}')
		try:
			return path.read_text(encoding='utf-8')
		except UnicodeDecodeError:
			raise AuthError('Wrong password or corrupted file')
		except OSError as e:
			log.error(f"Failed to read entry {path.name}: {e}")
			raise StorageError(f'Cannot read entry: {e}') from e

	def _open(self, path: Path, password: str) -> str:
		record = self._read_entry(path)
		try:
			return self.crypto.open_text(record, derive_key(password))
		except AuthFailure as e:
			log.warning(f"Could not open entry {path.name}")
			raise AuthError('Wrong password or corrupted file') from e

	def create(self, title: str, plaintext: str, password: str) -> EntryDescriptor:
		doc = self.metadata.load()
		record = self.crypto.seal_text(plaintext, derive_key(password))
		ts = self._next_timestamp()
		d = EntryDescriptor(id=ts, title=title, date=now_iso(), filename=f"{ts}{ENTRY_SUFFIX}")
		self._write_entry(self.entries_dir / d.filename, record)
		doc['entries'].append(d.to_dict())
		try:
			self.metadata.save(doc)
		except StorageError:
			log.error(f"Entry file {d.filename} written without a descriptor")
			raise
		log.info(f"Entry created -> {d.filename}")
		return d

	def read(self, filename: str, password: str) -> str:
		return self._open(self._path(filename), password)

	def update(self, filename: str, new_title: str, new_plaintext: str, password: str, verify: bool = False) -> None:
		"""Re-encrypt an entry and retitle it.

		The new content replaces the file wholesale. Without ``verify`` the old
		password is not checked, so updating with a different password makes the
		entry readable only under the new one.
		"""
		path = self._path(filename)
		if not path.is_file():
			raise NotFoundError(f'No entry file: {filename}')
		if verify:
			self._open(path, password)
		doc = self.metadata.load()
		self._write_entry(path, self.crypto.seal_text(new_plaintext, derive_key(password)))
		for i, raw in enumerate(doc['entries']):
			if raw.get('filename') == filename:
				d = EntryDescriptor.from_dict(raw)
				d.edit(new_title)
				doc['entries'][i] = d.to_dict()
				break
		else:
			log.warning(f"Entry {filename} updated but has no descriptor")
			return
		self.metadata.save(doc)
		log.info(f"Entry updated -> {filename}")

	def delete(self, filename: str) -> None:
		path = self._path(filename)
		try:
			path.unlink(missing_ok=True)
		except OSError as e:
			log.error(f"Failed to remove entry {filename}: {e}")
			raise StorageError(f'Cannot remove entry: {e}') from e
		doc = self.metadata.load()
		kept = [e for e in doc['entries'] if e.get('filename') != filename]
		if len(kept) != len(doc['entries']):
			doc['entries'] = kept
			self.metadata.save(doc)
		log.info(f"Entry deleted -> {filename}")

	def get(self, filename: str) -> Optional[EntryDescriptor]:
		return next((d for d in self.metadata.descriptors() if d.filename == filename), None)

	def list(self) -> List[EntryDescriptor]:
		return self.metadata.list_descending()
