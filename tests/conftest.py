from dataclasses import dataclass
from typing import List
import pytest
from jot.conf import JotConf
from jot.models import StreamPolicy, Success
from jot.runner import Runner


@dataclass
class Call:
    label: str
    argv: List[str]
    policy: StreamPolicy
    cwd: str


class FakeRunner(Runner):
    """Records calls instead of running anything.

    ``results`` maps a label such as ``'finder'`` or ``'git push'`` to the result to return, to an exception
    to raise, or to a function taking the :class:`Call` and returning either. Unlisted labels succeed with empty
    output.
    """
    def __init__(self, env=None):
        super().__init__(env={'SHELL': '/bin/sh', 'EDITOR': 'vi'} if env is None else env)
        self.results = {}
        self.calls = []

    def execute(self, label, argv, policy, cwd=None):
        call = Call(label, argv, policy, cwd)
        self.calls.append(call)
        result = self.results.get(label, Success(''))
        if callable(result):
            result = result(call)
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def labels(self):
        return [c.label for c in self.calls]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def conf():
    return JotConf(base_dir='/notes', finder='fzf', lister='tree')
