"""Synchronizes the notes directory with its git remote.

The most important class is :class:`SyncEngine`.
"""

from datetime import datetime, timedelta
import logging
from typing import Callable, List, Optional, Tuple
from jot.conf import JotConf
from jot.errors import Error
from jot.models import ExecutionResult, Failure, Success, SyncFailed, SyncOutcome, SyncStage, Synced,\
    UpToDate
from jot.runner import Runner, check_result, quote_argv, GIT_CMD

logger = logging.getLogger(__name__)

SOMETHING_STAGED_EXIT_CODE = 1


def rfc3339_timestamp(moment: datetime) -> str:
    """Formats a datetime as RFC3339 with seconds precision, such as ``2024-03-01T10:15:00+01:00``.

    Naive datetimes are taken to be local time. UTC is written as ``Z``.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.isoformat(timespec='seconds')
    if moment.utcoffset() == timedelta(0):
        text = text[:-len('+00:00')] + 'Z'
    return text


def _now() -> datetime:
    return datetime.now().astimezone()


class SyncEngine:
    """Runs pull, stage, commit and push against the repository at the base directory, in that order.

    Each stage either succeeds or raises, which ends the sync with a :class:`jot.models.SyncFailed`; stages after a
    failure are never attempted, and nothing is retried. If there is nothing to commit once changes are staged,
    the sync ends early with :class:`jot.models.UpToDate` and nothing is pushed.

    A failed push leaves the new local commit unpushed. Running sync again after fixing the problem will not
    push it either if there are no further changes; use ``git push`` in that case.

    git inherits all standard streams, so merge conflicts, credential prompts and the interactive commit
    message editor all go straight to the terminal.
    """

    def __init__(self, conf: JotConf, runner: Runner, clock: Callable[[], datetime] = None):
        self.conf = conf
        self.runner = runner
        self.clock = clock or _now

    def _git(self, stage: SyncStage, *args: str) -> ExecutionResult:
        logger.info('%s: git %s', stage.gerund, ' '.join(args))
        return self.runner.run_git(list(args), cwd=self.conf.base_dir)

    def _step(self, stage: SyncStage, *args: str) -> None:
        check_result(f'{GIT_CMD} {args[0]}', quote_argv([GIT_CMD] + list(args)), self._git(stage, *args))

    def pull(self) -> None:
        self._step(SyncStage.PULL, 'pull', self.conf.git_remote_name, self.conf.git_upstream_branch)

    def stage(self) -> None:
        self._step(SyncStage.STAGE, 'add', '--all')

    def commit(self) -> SyncOutcome:
        """Commits staged changes, or returns :class:`jot.models.UpToDate` if nothing is staged."""
        args = ('diff', '--cached', '--quiet')
        result = self._git(SyncStage.COMMIT, *args)
        if isinstance(result, Success):
            logger.info('nothing to commit')
            return UpToDate()
        if not (isinstance(result, Failure) and result.exit_code == SOMETHING_STAGED_EXIT_CODE):
            check_result(f'{GIT_CMD} diff', quote_argv([GIT_CMD] + list(args)), result)

        if self.conf.git_custom_commit_msg:
            message = None
            self._step(SyncStage.COMMIT, 'commit')
        else:
            message = rfc3339_timestamp(self.clock())
            self._step(SyncStage.COMMIT, 'commit', '-m', message)
        return Synced(message)

    def push(self) -> None:
        self._step(SyncStage.PUSH, 'push', self.conf.git_remote_name, self.conf.git_upstream_branch)

    def stages(self) -> List[Tuple[SyncStage, Callable[[], Optional[SyncOutcome]]]]:
        return [
            (SyncStage.PULL, self.pull),
            (SyncStage.STAGE, self.stage),
            (SyncStage.COMMIT, self.commit),
            (SyncStage.PUSH, self.push),
        ]

    def run(self) -> SyncOutcome:
        """Runs every stage in order and returns the outcome.

        Stage failures, including git not being installed, are returned as :class:`jot.models.SyncFailed`
        rather than raised.
        """
        synced = None
        for stage, step in self.stages():
            try:
                outcome = step()
            except Error as ex:
                outcome = SyncFailed(stage, ex)
            if isinstance(outcome, Synced):
                synced = outcome
            elif outcome is not None:
                if not outcome.ok:
                    logger.info('sync failed while %s', stage.gerund)
                return outcome
        logger.info('synced with %s/%s', self.conf.git_remote_name, self.conf.git_upstream_branch)
        return synced
