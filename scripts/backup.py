"""Simple backup utility script.

Copies the whole diary data directory (metadata + sealed entries). Entries stay
encrypted in the copy.

Usage (from repo root):
  python -m scripts.backup --dest backups/
"""
from __future__ import annotations
import shutil
from datetime import datetime
from pathlib import Path
import click
from config import settings

def backup_data_dir(source: Path, dest: Path) -> Path:
	dest.mkdir(parents=True, exist_ok=True)
	stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
	target = dest / f"{settings.BACKUP_PREFIX}{stamp}"
	shutil.copytree(source, target)
	return target

@click.command()
@click.option('--dest', type=click.Path(file_okay=False, path_type=Path), default=Path('backups'), help='Destination directory for backups.')
def main(dest: Path):
	source = settings.data_dir()
	if not (source / settings.METADATA_FILENAME).exists():
		click.echo(f"No diary at {source}; nothing to backup.")
		raise SystemExit(1)
	target = backup_data_dir(source, dest)
	click.echo(f"Backup written: {target}")

if __name__ == '__main__':  # pragma: no cover
	main()
