"""Provides the main entry point for using the library, :class:`Jot`"""

from __future__ import annotations
import logging
import os
import os.path
from typing import Optional
from jot.conf import JotConf
from jot.errors import Error, NoteIOError, OperationInterrupted, PathOutsideBaseDirError, SyncStageFailure
from jot.models import Interrupted, SyncFailed, SyncOutcome
from jot.resolver import InvocationResolver
from jot.runner import Runner, SubprocessRunner, check_result, join_invocation, EDITOR_ENV_VARNAME
from jot.sync import SyncEngine

logger = logging.getLogger(__name__)


class Jot:
    """Main entry point for working programmatically with your notes.

    Each public method corresponds to a command of the command-line tool. Methods raise subclasses of
    :exc:`jot.errors.Error` when an external program fails or is interrupted, and abort at the first failure.

    .. attribute:: conf
       :type: jot.conf.JotConf

       Standardized on construction, so ``base_dir`` is always an absolute, resolved path.

    .. attribute:: runner
       :type: jot.runner.Runner

       Used for every child process. Defaults to a :class:`jot.runner.SubprocessRunner` using the current
       environment.

    Example:

    .. code-block:: python

       from jot.api import Jot
       jot = Jot.for_user()
       print(jot.list())
    """

    @staticmethod
    def for_user(path: str = None, **overrides) -> Jot:
        """Creates an instance using :meth:`jot.conf.JotConf.for_user`.

        Raises :exc:`jot.errors.ConfError` if the configuration is invalid.
        """
        return Jot(JotConf.for_user(path, **overrides))

    def __init__(self, conf: JotConf, runner: Runner = None):
        self.conf = conf.standardize()
        self.runner = runner or SubprocessRunner(shell_flag=self.conf.shell_cmd_flag)
        self.resolver = InvocationResolver(self.conf, self.runner)
        self.sync_engine = SyncEngine(self.conf, self.runner)

    def note_path(self, path: str) -> str:
        """Resolves a path relative to the base directory, leaving absolute paths alone."""
        return os.path.join(self.conf.base_dir, os.path.expanduser(path))

    def new(self, path: str) -> Optional[SyncOutcome]:
        """Creates an empty note at the given path if nothing is there yet, then calls :meth:`edit` on it.

        Relative paths are relative to the base directory. Existing files are left untouched. Missing parent
        directories are created.

        Raises :exc:`jot.errors.PathOutsideBaseDirError` if the path is not inside the base directory, and
        :exc:`jot.errors.NoteIOError` if the file cannot be created (for example, because the path is a directory).
        """
        full_path = self.note_path(path)
        resolved = os.path.realpath(full_path)
        if os.path.commonpath([resolved, self.conf.base_dir]) != self.conf.base_dir:
            raise PathOutsideBaseDirError(full_path, self.conf.base_dir)
        if os.path.isdir(full_path):
            raise NoteIOError(f'failed to create a file at {path}: it is a directory', full_path)
        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            # 'a' rather than 'w' so an existing note is not truncated
            with open(full_path, 'a'):
                pass
        except OSError as ex:
            raise NoteIOError(f'failed to create a file at {path}', full_path, ex) from ex
        logger.info('created %s', full_path)
        return self.edit(path)

    def edit(self, path: str = None) -> Optional[SyncOutcome]:
        """Opens the note at the given path in ``$EDITOR``, then syncs if ``edit_syncs`` is configured.

        If no path is given, the finder is run to choose one. The path does not need to exist.

        The sync runs even if the editor exits with an error, and that error is raised afterward. If the
        editor cannot be started or is interrupted, nothing is synced.

        Returns the outcome of the sync, or None if no sync was configured.
        """
        if path is None:
            path = self.resolver.resolve_finder()
            if not path:
                raise Error('finder did not print a path')
        full_path = self.note_path(path)

        result = self.runner.run_editor(full_path, cwd=self.conf.base_dir)
        label = f'${EDITOR_ENV_VARNAME}'
        if isinstance(result, Interrupted):
            raise OperationInterrupted(label)
        outcome = self.sync() if self.conf.edit_syncs else None
        check_result(label, join_invocation(label, [full_path]), result)
        return outcome

    def list(self, subpath: str = None) -> str:
        """Runs the lister on the given path, or the whole base directory, and returns its output unchanged."""
        return self.resolver.resolve_lister(subpath or '.')

    def sync(self) -> SyncOutcome:
        """Pulls, stages all changes, commits and pushes.

        Returns :class:`jot.models.UpToDate` or :class:`jot.models.Synced`. Raises
        :exc:`jot.errors.SyncStageFailure` naming the stage that failed.
        """
        outcome = self.sync_engine.run()
        if isinstance(outcome, SyncFailed):
            raise SyncStageFailure(outcome.stage, outcome.error)
        return outcome
