from dataclasses import replace
import os
import os.path
from pathlib import Path
import pytest
from jot.api import Jot
from jot.conf import JotConf
from jot.errors import Error, ExitFailure, NoteIOError, OperationInterrupted, PathOutsideBaseDirError, SpawnError,\
    SyncStageFailure
from jot.models import Failure, Interrupted, StreamPolicy, Success, SyncStage, Synced, UpToDate


@pytest.fixture
def jot(fs, conf, runner):
    fs.create_dir('/notes')
    return Jot(conf, runner)


def test_new_creates_empty_file(jot, runner):
    seen_by_editor = []

    def editor(call):
        seen_by_editor.append(Path(call.argv[-1]).read_text())
        return Success()

    runner.results['$EDITOR'] = editor
    assert jot.new('journal/today.md') == UpToDate()
    assert Path('/notes/journal/today.md').read_text() == ''
    assert seen_by_editor == ['']
    assert runner.calls[0].argv == ['vi', '/notes/journal/today.md']
    assert runner.labels == ['$EDITOR', 'git pull', 'git add', 'git diff']


def test_new_does_not_truncate(jot, fs):
    fs.create_file('/notes/existing.md', contents='keep me')
    jot.new('existing.md')
    assert Path('/notes/existing.md').read_text() == 'keep me'


def test_new_absolute_path(jot, runner):
    jot.new('/notes/abs.md')
    assert Path('/notes/abs.md').exists()
    assert runner.calls[0].argv == ['vi', '/notes/abs.md']


def test_new_outside_base_dir(jot, runner):
    with pytest.raises(PathOutsideBaseDirError):
        jot.new('/elsewhere/note.md')
    with pytest.raises(PathOutsideBaseDirError):
        jot.new('../escape.md')
    assert not Path('/elsewhere/note.md').exists()
    assert not Path('/escape.md').exists()
    assert runner.calls == []


def test_new_on_directory(jot, fs, runner):
    fs.create_dir('/notes/folder')
    with pytest.raises(NoteIOError):
        jot.new('folder')
    assert runner.calls == []


def test_edit_with_path(jot, runner):
    runner.results['git diff'] = Failure(1)
    outcome = jot.edit('todo.md')
    assert isinstance(outcome, Synced)
    editor = runner.calls[0]
    assert editor.label == '$EDITOR'
    assert editor.argv == ['vi', '/notes/todo.md']
    assert editor.policy == StreamPolicy(stdin=False, stdout=False, stderr=True)
    assert editor.cwd == '/notes'
    assert 'finder' not in runner.labels


def test_edit_uses_finder(jot, runner):
    runner.results['finder'] = Success('notes/todo.md\n')
    jot.edit()
    assert runner.labels[:2] == ['finder', '$EDITOR']
    assert runner.calls[1].argv == ['vi', '/notes/notes/todo.md']


def test_edit_finder_path_outside_base_dir_is_accepted(jot, runner):
    runner.results['finder'] = Success('/tmp/scratch.md\n')
    jot.edit()
    assert runner.calls[1].argv == ['vi', '/tmp/scratch.md']


def test_edit_finder_prints_nothing(jot, runner):
    runner.results['finder'] = Success('\n')
    with pytest.raises(Error, match='finder did not print a path'):
        jot.edit()
    assert runner.labels == ['finder']


def test_edit_finder_failure(jot, runner):
    runner.results['finder'] = Failure(1)
    with pytest.raises(ExitFailure):
        jot.edit()
    assert runner.labels == ['finder']


def test_edit_without_sync(jot, runner):
    jot = Jot(replace(jot.conf, edit_syncs=False), runner)
    assert jot.edit('todo.md') is None
    assert runner.labels == ['$EDITOR']


def test_editor_failure_still_syncs(jot, runner):
    runner.results['$EDITOR'] = Failure(1, None, 'E37: No write since last change')
    with pytest.raises(ExitFailure) as info:
        jot.edit('todo.md')
    assert info.value.exit_code == 1
    assert 'E37' in str(info.value)
    assert 'git pull' in runner.labels


def test_editor_interrupted_aborts(jot, runner):
    runner.results['$EDITOR'] = Interrupted()
    with pytest.raises(OperationInterrupted):
        jot.edit('todo.md')
    assert runner.labels == ['$EDITOR']


def test_editor_spawn_error_aborts(jot, runner):
    runner.results['$EDITOR'] = SpawnError('$EDITOR', 'vi todo.md', FileNotFoundError('vi'))
    with pytest.raises(SpawnError):
        jot.edit('todo.md')
    assert runner.labels == ['$EDITOR']


def test_list(jot, runner):
    runner.results['lister'] = Success('a.md\nb.md\n')
    assert jot.list() == 'a.md\nb.md\n'
    assert runner.calls[0].argv == ['/bin/sh', '-c', 'tree .']
    assert jot.list('journal') == 'a.md\nb.md\n'
    assert runner.calls[1].argv == ['/bin/sh', '-c', 'tree journal']


def test_list_failure(jot, runner):
    runner.results['lister'] = Failure(2, 'partial')
    with pytest.raises(ExitFailure) as info:
        jot.list()
    assert info.value.exit_code == 2


def test_sync(jot, runner):
    assert jot.sync() == UpToDate()


def test_sync_failure(jot, runner):
    runner.results['git push'] = Failure(1)
    runner.results['git diff'] = Failure(1)
    with pytest.raises(SyncStageFailure, match='sync failed while pushing') as info:
        jot.sync()
    assert info.value.stage == SyncStage.PUSH
    assert not info.value.interrupted


def test_base_dir_is_standardized(tmp_path, runner, monkeypatch):
    base = os.path.realpath(tmp_path)
    jot = Jot(JotConf(base_dir=base + '/', edit_syncs=False), runner)
    jot.new('ok.md')
    assert os.path.isfile(os.path.join(base, 'ok.md'))
    assert runner.calls[0].argv == ['vi', os.path.join(base, 'ok.md')]

    monkeypatch.chdir(base)
    os.mkdir('notes')
    jot = Jot(JotConf(base_dir='notes', edit_syncs=False), runner)
    assert jot.conf.base_dir == os.path.join(base, 'notes')
    jot.new('inside.md')
    assert os.path.isfile(os.path.join(base, 'notes', 'inside.md'))
    with pytest.raises(PathOutsideBaseDirError):
        jot.new('../outside.md')
    assert not os.path.exists(os.path.join(base, 'outside.md'))


def test_for_user(fs, monkeypatch):
    monkeypatch.delenv('JOT_CONFIG', raising=False)
    fs.create_file('/conf/jot.yml', contents='base-dir: /notes/\nfinder: fzf')
    jot = Jot.for_user('/conf/jot.yml', lister='tree')
    assert jot.conf == JotConf(base_dir='/notes', finder='fzf', lister='tree')
    assert jot.resolver.conf is jot.conf
    assert jot.sync_engine.conf is jot.conf
