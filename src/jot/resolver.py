"""Turns the configured finder and lister invocations into results."""

import logging
from jot.conf import JotConf
from jot.runner import Runner, check_result, join_invocation

logger = logging.getLogger(__name__)


class InvocationResolver:
    """Runs the finder and lister invocations from a :class:`jot.conf.JotConf`.

    Both run in the base directory through ``$SHELL``. Only their stdout is used as data; an invocation is
    considered to have failed only if it exits with a non-zero status.

    Failures raise :exc:`jot.errors.ExitFailure`, and interruptions raise
    :exc:`jot.errors.OperationInterrupted`.
    """

    def __init__(self, conf: JotConf, runner: Runner):
        self.conf = conf
        self.runner = runner

    def _run(self, label: str, command_line: str, *args: str) -> str:
        result = self.runner.run_shell(label, command_line, args, capture_std=self.conf.capture_std,
                                       cwd=self.conf.base_dir)
        return check_result(label, join_invocation(command_line, args), result).stdout

    def resolve_finder(self) -> str:
        """Runs the finder and returns the path it printed, with trailing whitespace removed.

        The path is not checked for existence, since the finder may name a note that is about to be created.
        Nor is it checked to be a single line.
        """
        path = self._run('finder', self.conf.finder).rstrip()
        logger.debug('finder chose %r', path)
        return path

    def resolve_lister(self, path: str) -> str:
        """Runs the lister with ``path`` (relative to the base directory) appended and returns its stdout as-is."""
        return self._run('lister', self.conf.lister, path)
