import dns.resolver
import httpx
import pytest

from wordbuster.core.config import ScanConfig
from wordbuster.core.models import FilterPolicy, Mode
from wordbuster.reporters.console import Log


class RecordingLog(Log):
    """Log that keeps every line instead of printing it."""

    def __init__(self, verbose: int = 1):
        self.lines = []
        super().__init__(verbose=verbose, writer=self.lines.append)


class FakeResolver:
    """dnspython-like resolver backed by a dict of (name, rtype) -> addresses."""

    def __init__(self, records=None, errors=None):
        self.records = records or {}
        self.errors = errors or {}
        self.queries = []

    def resolve(self, name, rtype):
        self.queries.append((name, rtype))
        if (name, rtype) in self.errors:
            raise self.errors[(name, rtype)]
        if (name, rtype) not in self.records:
            raise dns.resolver.NXDOMAIN()
        return list(self.records[(name, rtype)])


@pytest.fixture
def log():
    return RecordingLog()


@pytest.fixture
def make_wordlist(tmp_path):
    counter = {"n": 0}

    def _make(words, name=None):
        counter["n"] += 1
        path = tmp_path / (name or f"wordlist{counter['n']}.txt")
        path.write_text("\n".join(words) + "\n", encoding="utf-8")
        return str(path)

    return _make


@pytest.fixture
def make_client():
    def _make(handler):
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def make_config():
    def _make(mode, url, wordlists, **kwargs):
        kwargs.setdefault("filters", FilterPolicy.build(exclude_codes=["404"]))
        return ScanConfig(mode=Mode(mode), url=url, wordlists=list(wordlists), **kwargs)

    return _make
