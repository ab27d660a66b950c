"""Exceptions raised by jot.

Everything raised deliberately derives from :exc:`Error`, so the command-line layer can report
it and exit with a non-zero status.
"""

from typing import Optional


class Error(Exception):
    pass


class ConfError(Error):
    """Raised when configuration is missing or invalid."""


class EnvironmentVariableError(Error):
    """Raised when a required environment variable such as ``$EDITOR`` is not set."""
    def __init__(self, varname: str):
        super().__init__(f'failed to find ${varname} in environment')
        self.varname = varname


class SpawnError(Error):
    """Raised when a child process could not be started at all."""
    def __init__(self, label: str, invocation: str, cause: OSError):
        super().__init__(f'failed to execute {label}: `{invocation}`: {cause}')
        self.label = label
        self.invocation = invocation
        self.cause = cause


class ExitFailure(Error):
    """Raised when a child process ran but exited with a non-zero status other than 130."""
    def __init__(self, label: str, invocation: str, exit_code: int,
                 stdout: Optional[str] = None, stderr: Optional[str] = None):
        self.label = label
        self.invocation = invocation
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._message())

    def _message(self) -> str:
        message = f'{self.label} (`{self.invocation}`) exited unsuccessfully with non-zero exit code ({self.exit_code})'
        if self.stdout:
            message += f'\n\tstdout:\n\t"{self.stdout.rstrip()}"'
        if self.stderr is not None:
            message += f'\n\tstderr:\n\t"{self.stderr.rstrip()}"'
        return message


class OperationInterrupted(Error):
    """Raised when a child process was interrupted, typically by Ctrl+C (exit code 130).

    The current operation is always aborted, but the command-line layer does not print anything
    for this error when ``quiet_on_ctrl_c`` is set.
    """
    def __init__(self, label: str):
        super().__init__(f'{label} was interrupted')
        self.label = label


class NoteIOError(Error):
    """Raised when a filesystem operation on a note, such as creating it, fails."""
    def __init__(self, message: str, path: str, cause: OSError = None):
        super().__init__(f'{message}: {cause}' if cause else message)
        self.path = path
        self.cause = cause


class PathOutsideBaseDirError(Error):
    """Raised when a note path given to ``new`` does not resolve to a location inside the base directory."""
    def __init__(self, path: str, base_dir: str):
        super().__init__(f'given path must be below base_dir ({base_dir}); {path} is not')
        self.path = path
        self.base_dir = base_dir


class SyncStageFailure(Error):
    """Raised when one of the sync stages failed.

    ``stage`` is a :class:`jot.models.SyncStage` telling how far the sync progressed. ``error`` is the
    underlying :exc:`ExitFailure`, :exc:`OperationInterrupted` or :exc:`SpawnError`.
    """
    def __init__(self, stage, error: Error):
        super().__init__(f'sync failed while {stage.gerund}, please fix the issue and run jot sync\n{error}')
        self.stage = stage
        self.error = error

    @property
    def interrupted(self) -> bool:
        return isinstance(self.error, OperationInterrupted)
