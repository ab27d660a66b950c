import signal
from jot.models import ExecutionResult, Failure, Interrupted, StreamPolicy, Success, SyncFailed, SyncStage, Synced,\
    UpToDate


def test_classify():
    assert ExecutionResult.classify(0, 'out\n', None) == Success('out\n')
    assert ExecutionResult.classify(0) == Success('')
    assert ExecutionResult.classify(130, 'partial', 'err') == Interrupted()
    assert ExecutionResult.classify(-signal.SIGINT) == Interrupted()
    assert ExecutionResult.classify(2, 'out', 'err') == Failure(2, 'out', 'err')
    assert ExecutionResult.classify(1) == Failure(1, None, None)
    assert ExecutionResult.classify(-signal.SIGTERM) == Failure(-signal.SIGTERM)


def test_ok():
    assert Success().ok
    assert not Failure(1).ok
    assert not Interrupted().ok
    assert UpToDate().ok
    assert Synced('msg').ok
    assert not SyncFailed(SyncStage.PUSH, Exception()).ok


def test_stream_policies():
    assert StreamPolicy.shell(False) == StreamPolicy(stdin=False, stdout=True, stderr=False)
    assert StreamPolicy.shell(True) == StreamPolicy(stdin=True, stdout=True, stderr=True)
    assert StreamPolicy.editor() == StreamPolicy(stdin=False, stdout=False, stderr=True)
    assert StreamPolicy.git() == StreamPolicy(stdin=False, stdout=False, stderr=False)


def test_sync_stage():
    assert [str(s) for s in SyncStage] == ['pull', 'stage', 'commit', 'push']
    assert SyncStage.COMMIT.gerund == 'committing'
