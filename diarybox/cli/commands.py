"""CLI commands implemented with click.

Each command builds a DiaryService for the data directory (``--data-dir`` or
``DIARY_PATH``) and passes the entry filename explicitly; there is no
"current entry" kept between invocations.
"""
from __future__ import annotations
import logging, click
from pathlib import Path
from config import settings
from diarybox.lib.crypto import check_password_strength
from diarybox.lib.service import DiaryService
from diarybox.lib.utils import EntryRepository, StorageError

ERROR_TEXT = {
	'not_found': 'No such entry',
	'auth': 'Wrong password or corrupted file',
	'storage': 'Could not access the diary storage',
	'invalid': 'Text and password must not be empty',
}

def _echo_error(result: dict) -> None:
	click.echo(f"Error: {ERROR_TEXT.get(result.get('error'), 'Operation failed')}")

@click.group()
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None, help='Diary data directory (default: $DIARY_PATH or ./diary_data).')
@click.pass_context
def cli(ctx, data_dir):
	"""diarybox: encrypted personal journal"""
	logging.basicConfig(level=settings.log_level(), format=settings.LOG_FORMAT)
	ctx.obj = DiaryService(EntryRepository(data_dir or settings.data_dir()))

@cli.command('pw-strength')
@click.argument('password')
def pw_strength_cmd(password):
	score, fb = check_password_strength(password)
	click.echo(f"Score: {score} -> {fb}")

@cli.command('list')
@click.pass_obj
def list_entries(svc):
	"""List entries, newest first."""
	try:
		items = svc.list_entries()
	except StorageError as e:
		click.echo(f'Error: {e}')
		raise SystemExit(1)
	if not items:
		click.echo('(empty)')
		return
	for d in items:
		flag = f" (edited {d['modified']})" if d.get('modified') else ''
		click.echo(f"{d['filename']}\t{d['date']}\t{d['title']}{flag}")

@cli.command('new')
@click.option('--title', prompt=True)
@click.option('--text', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def new_entry(svc, title, text, password):
	"""Write a new encrypted entry."""
	_score, fb = check_password_strength(password)
	click.echo(f"Password: {fb}")
	r = svc.create_entry(title, text, password)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(f"Saved entry {r['descriptor']['filename']}.")

@cli.command('show')
@click.argument('filename')
@click.option('--password', prompt=True, hide_input=True)
@click.pass_obj
def show_entry(svc, filename, password):
	"""Decrypt and print an entry."""
	r = svc.read_entry(filename, password)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(r['text'])

@cli.command('edit')
@click.argument('filename')
@click.option('--title', prompt=True)
@click.option('--text', prompt=True)
@click.option('--password', prompt=True, hide_input=True)
@click.option('--verify/--no-verify', default=True, help='Require the current password to open the entry before overwriting.')
@click.pass_obj
def edit_entry(svc, filename, title, text, password, verify):
	"""Replace an entry's title and text."""
	r = svc.update_entry(filename, title, text, password, verify=verify)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(f'Updated {filename}.')

@cli.command('delete')
@click.argument('filename')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation.')
@click.pass_obj
def delete_entry(svc, filename, yes):
	"""Delete an entry and its index record."""
	if not yes:
		click.confirm(f'Delete {filename}? This cannot be undone', abort=True)
	r = svc.delete_entry(filename)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(f'Deleted {filename}.')

@cli.command('export')
@click.argument('path', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--text', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def export_cmd(svc, path, text, password):
	"""Seal text into a standalone .diary file."""
	r = svc.export_file(path, text, password)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(f"Saved to {r['path']}")

@cli.command('open')
@click.argument('path', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--password', prompt=True, hide_input=True)
@click.pass_obj
def open_cmd(svc, path, password):
	"""Decrypt a standalone .diary file."""
	r = svc.import_file(path, password)
	if not r['success']:
		_echo_error(r)
		raise SystemExit(1)
	click.echo(r['text'])
