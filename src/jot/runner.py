"""Runs external programs: user-configured invocations through the shell, plus git and the editor directly.

The most important class is :class:`Runner`.
"""

import logging
import os
import shlex
import subprocess
from typing import List, Mapping, Optional, Sequence
from jot.errors import EnvironmentVariableError, ExitFailure, OperationInterrupted, SpawnError
from jot.models import ExecutionResult, Failure, Interrupted, StreamPolicy

logger = logging.getLogger(__name__)

SHELL_ENV_VARNAME = 'SHELL'
EDITOR_ENV_VARNAME = 'EDITOR'
GIT_CMD = 'git'


def join_invocation(command_line: str, args: Sequence[str] = ()) -> str:
    """Appends arguments to a shell command line, quoting each so the shell sees it as one word."""
    return ' '.join([command_line] + [shlex.quote(a) for a in args])


def quote_argv(argv: Sequence[str]) -> str:
    return ' '.join(shlex.quote(a) for a in argv)


def check_result(label: str, invocation: str, result: ExecutionResult) -> ExecutionResult:
    """Returns the result if it is a success, otherwise raises the matching error.

    Raises :exc:`jot.errors.OperationInterrupted` for :class:`jot.models.Interrupted` and
    :exc:`jot.errors.ExitFailure` for :class:`jot.models.Failure`.
    """
    if isinstance(result, Interrupted):
        raise OperationInterrupted(label)
    if isinstance(result, Failure):
        raise ExitFailure(label, invocation, result.exit_code, result.stdout, result.stderr)
    return result


class Runner:
    """Base class for running child processes. Subclasses only need to implement :meth:`execute`.

    Each call spawns exactly one child process and blocks until it exits. Nothing is retried. The child gets
    the environment given to the constructor, which defaults to the environment of the jot process.

    .. attribute:: shell_flag
       :type: str

       Flag that makes ``$SHELL`` run its next argument as a command line.
    """

    def __init__(self, shell_flag: str = '-c', env: Mapping[str, str] = None):
        self.shell_flag = shell_flag
        self.env = os.environ if env is None else env

    def execute(self, label: str, argv: List[str], policy: StreamPolicy, cwd: str = None) -> ExecutionResult:
        """Runs ``argv`` (without a shell) and classifies its exit status.

        ``label`` is a human-readable name for the program, used in log and error messages.

        Raises :exc:`jot.errors.SpawnError` if the process cannot be started.
        """
        raise NotImplementedError()

    def getenv(self, varname: str) -> str:
        """Returns the value of a variable in the child environment, or raises
        :exc:`jot.errors.EnvironmentVariableError` if it is unset or empty."""
        value = self.env.get(varname)
        if not value:
            raise EnvironmentVariableError(varname)
        return value

    def shell_argv(self, command_line: str, args: Sequence[str] = ()) -> List[str]:
        return [self.getenv(SHELL_ENV_VARNAME), self.shell_flag, join_invocation(command_line, args)]

    def run_shell(self, label: str, command_line: str, args: Sequence[str] = (), capture_std: bool = False,
                  cwd: str = None) -> ExecutionResult:
        """Runs a user-configured invocation through ``$SHELL``, with ``args`` appended to the command line.

        stdout is captured. stdin and stderr are inherited unless ``capture_std`` is True.
        """
        return self.execute(label, self.shell_argv(command_line, args), StreamPolicy.shell(capture_std), cwd)

    def run_git(self, args: Sequence[str], cwd: str = None) -> ExecutionResult:
        """Runs git directly. All standard streams are inherited, so git can prompt and report for itself."""
        return self.execute(f'{GIT_CMD} {args[0]}', [GIT_CMD] + list(args), StreamPolicy.git(), cwd)

    def run_editor(self, path: str, cwd: str = None) -> ExecutionResult:
        """Opens ``$EDITOR`` on the path. stdin and stdout are inherited and stderr is captured.

        ``$EDITOR`` may contain arguments, like ``code --wait``; it is split the way a shell would split it.
        """
        argv = shlex.split(self.getenv(EDITOR_ENV_VARNAME)) + [path]
        return self.execute(f'${EDITOR_ENV_VARNAME}', argv, StreamPolicy.editor(), cwd)


class SubprocessRunner(Runner):
    """Runs child processes with :class:`subprocess.Popen`.

    Captured output is read as bytes and decoded with :func:`os.fsdecode`, so line endings are left alone and
    undecodable bytes survive as surrogate escapes; :func:`os.fsencode` gives back the exact bytes.
    """

    def execute(self, label: str, argv: List[str], policy: StreamPolicy, cwd: str = None) -> ExecutionResult:
        invocation = quote_argv(argv)
        logger.debug('running %s: %s (cwd: %s, %s)', label, invocation, cwd, policy)
        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                env=self.env,
                stdin=subprocess.PIPE if policy.stdin else None,
                stdout=subprocess.PIPE if policy.stdout else None,
                stderr=subprocess.PIPE if policy.stderr else None,
            )
        except OSError as ex:
            raise SpawnError(label, invocation, ex) from ex
        with proc:
            while True:
                try:
                    stdout, stderr = proc.communicate()
                    break
                except KeyboardInterrupt:
                    # Ctrl+C goes to the whole foreground process group; let the child decide how to exit.
                    logger.debug('interrupted while waiting for %s', label)
        result = ExecutionResult.classify(proc.returncode, _decode(stdout), _decode(stderr))
        logger.debug('%s exited with code %s', label, proc.returncode)
        return result


def _decode(data: Optional[bytes]) -> Optional[str]:
    return None if data is None else os.fsdecode(data)
