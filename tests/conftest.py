import os

import pytest

from Engine.executor import ProcessOrchestrator
from Engine.history import History
from Engine.path_resolver import parse_search_path
from Engine.session import Session


@pytest.fixture
def session(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return Session(
        search_path=parse_search_path(os.environ.get("PATH", "")),
        home=str(home),
        environment=dict(os.environ),
        history=History(),
    )


@pytest.fixture
def orchestrator(session):
    return ProcessOrchestrator(session)


@pytest.fixture
def bin_dirs(tmp_path):
    """Two empty directories to use as a search path"""
    first = tmp_path / "bin1"
    second = tmp_path / "bin2"
    first.mkdir()
    second.mkdir()
    return first, second


class ScriptedReader:
    """Line provider that replays a fixed list, then reports end of input"""

    def __init__(self, lines):
        self.lines = list(lines)

    def read(self):
        if not self.lines:
            return None
        return self.lines.pop(0)


@pytest.fixture
def scripted_reader():
    return ScriptedReader
