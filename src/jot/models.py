"""Defines classes for representing the outcomes of running external programs and of syncing.

The most important classes are :class:`ExecutionResult`, :class:`StreamPolicy` and :class:`SyncOutcome`.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import signal
from typing import Optional

CTRL_C_EXIT_CODE = 130
"""Exit status shells and most interactive programs use after being interrupted with Ctrl+C."""


@dataclass(frozen=True)
class StreamPolicy:
    """Says which standard streams of a child process are captured.

    Streams that are not captured are inherited from the jot process, so the child can talk to the terminal
    directly. A captured stdin is an empty pipe that is closed immediately.
    """

    stdin: bool = False
    """True to capture stdin, False to inherit it."""

    stdout: bool = False
    """True to capture stdout, False to inherit it."""

    stderr: bool = False
    """True to capture stderr, False to inherit it."""

    @classmethod
    def shell(cls, capture_std: bool) -> StreamPolicy:
        """Policy for finder and lister invocations.

        stdout is always captured since it carries the result. stdin and stderr are inherited so that
        programs like fzf can draw their UI, unless ``capture_std`` is set.
        """
        return cls(stdin=capture_std, stdout=True, stderr=capture_std)

    @classmethod
    def editor(cls) -> StreamPolicy:
        return cls(stdin=False, stdout=False, stderr=True)

    @classmethod
    def git(cls) -> StreamPolicy:
        return cls(stdin=False, stdout=False, stderr=False)


@dataclass(frozen=True)
class ExecutionResult:
    """Base class for the outcome of running one child process.

    Use :meth:`classify` to build the right subclass from an exit status.
    """

    @property
    def ok(self) -> bool:
        return False

    @staticmethod
    def classify(exit_code: int, stdout: Optional[str] = None, stderr: Optional[str] = None) -> ExecutionResult:
        """Maps an exit status to :class:`Success`, :class:`Interrupted` or :class:`Failure`.

        Negative statuses follow the :mod:`subprocess` convention of meaning the child was killed by that
        signal; being killed by SIGINT counts as an interruption.
        """
        if exit_code == 0:
            return Success(stdout or '')
        if exit_code in (CTRL_C_EXIT_CODE, -signal.SIGINT):
            return Interrupted()
        return Failure(exit_code, stdout, stderr)


@dataclass(frozen=True)
class Success(ExecutionResult):
    stdout: str = ''
    """Captured stdout, or an empty string if it was inherited."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure(ExecutionResult):
    exit_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    """Captured stderr, or None if the child inherited it."""


@dataclass(frozen=True)
class Interrupted(ExecutionResult):
    exit_code: int = CTRL_C_EXIT_CODE


class SyncStage(Enum):
    """The stages of a sync, in the order they run."""

    PULL = 'pull'
    STAGE = 'stage'
    COMMIT = 'commit'
    PUSH = 'push'

    @property
    def gerund(self) -> str:
        return {
            SyncStage.PULL: 'pulling',
            SyncStage.STAGE: 'staging',
            SyncStage.COMMIT: 'committing',
            SyncStage.PUSH: 'pushing',
        }[self]

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class SyncOutcome:
    """Base class for the result of :meth:`jot.sync.SyncEngine.run`."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class UpToDate(SyncOutcome):
    """The pull succeeded and there was nothing to commit, so no commit or push was made."""


@dataclass(frozen=True)
class Synced(SyncOutcome):
    commit_message: Optional[str] = None
    """Message of the commit that was pushed, or None if the user wrote it interactively."""


@dataclass(frozen=True)
class SyncFailed(SyncOutcome):
    stage: SyncStage
    error: Exception
    """Usually a :exc:`jot.errors.ExitFailure`, :exc:`jot.errors.OperationInterrupted`
    or :exc:`jot.errors.SpawnError`."""

    @property
    def ok(self) -> bool:
        return False
