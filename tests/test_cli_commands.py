from click.testing import CliRunner
from diarybox.cli.commands import cli
from diarybox.lib.utils import EntryRepository

def _new(runner, title='Title', text='Content body', pw='pw'):
    return runner.invoke(cli, ['new'], input=f'{title}\n{text}\n{pw}\n{pw}\n')

def test_cli_new_and_list(monkeypatch, tmp_path):
    monkeypatch.setenv('DIARY_PATH', str(tmp_path / 'diary'))
    runner = CliRunner()
    add = _new(runner)
    assert add.exit_code == 0
    assert 'Saved entry' in add.output
    lst = runner.invoke(cli, ['list'])
    assert lst.exit_code == 0
    assert 'Title' in lst.output

def test_cli_list_empty(tmp_path):
    r = CliRunner().invoke(cli, ['--data-dir', str(tmp_path / 'd'), 'list'])
    assert r.exit_code == 0
    assert '(empty)' in r.output

def test_cli_show_and_wrong_password(tmp_path):
    data = tmp_path / 'diary'
    fn = EntryRepository(data).create('T', 'Secret body', 'pw').filename
    runner = CliRunner()
    ok = runner.invoke(cli, ['--data-dir', str(data), 'show', fn], input='pw\n')
    assert ok.exit_code == 0 and 'Secret body' in ok.output
    bad = runner.invoke(cli, ['--data-dir', str(data), 'show', fn], input='nope\n')
    assert bad.exit_code == 1
    assert 'Wrong password or corrupted file' in bad.output

def test_cli_edit_verifies_by_default(tmp_path):
    data = tmp_path / 'diary'
    fn = EntryRepository(data).create('T', 'old', 'pw').filename
    runner = CliRunner()
    bad = runner.invoke(cli, ['--data-dir', str(data), 'edit', fn], input='T2\nnew\nwrong\n')
    assert bad.exit_code == 1
    ok = runner.invoke(cli, ['--data-dir', str(data), 'edit', fn], input='T2\nnew\npw\n')
    assert ok.exit_code == 0
    assert EntryRepository(data).read(fn, 'pw') == 'new'

def test_cli_delete_confirm(tmp_path):
    data = tmp_path / 'diary'
    fn = EntryRepository(data).create('T', 'body', 'pw').filename
    runner = CliRunner()
    no = runner.invoke(cli, ['--data-dir', str(data), 'delete', fn], input='n\n')
    assert no.exit_code != 0
    assert EntryRepository(data).get(fn) is not None
    yes = runner.invoke(cli, ['--data-dir', str(data), 'delete', fn, '--yes'])
    assert yes.exit_code == 0
    assert EntryRepository(data).list() == []

def test_cli_export_open(tmp_path):
    path = tmp_path / 'out.diary'
    runner = CliRunner()
    ex = runner.invoke(cli, ['--data-dir', str(tmp_path / 'd'), 'export', str(path)], input='Dear diary\npw\npw\n')
    assert ex.exit_code == 0 and path.exists()
    op = runner.invoke(cli, ['--data-dir', str(tmp_path / 'd'), 'open', str(path)], input='pw\n')
    assert op.exit_code == 0 and 'Dear diary' in op.output
