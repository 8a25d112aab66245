"""Shared data models for the enumeration engine."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Hashable, Iterable, List, Optional, Tuple, Union

from wordbuster.core.errors import ConfigError


class Mode(str, Enum):
    DIR = "dir"
    DNS = "dns"
    VHOST = "vhost"
    FUZZ = "fuzz"


class StopReason(str, Enum):
    COMPLETED = "completed"
    UNREACHABLE = "unreachable"          # first outcome of the run failed
    EXIT_ON_ERROR = "exit-on-error"
    SOURCE_ERROR = "source-error"        # candidate generation broke mid-run


@dataclass(frozen=True)
class Candidate:
    """One probe to perform. Never mutated after generation."""
    mode: Mode
    target: str            # URL, absolute domain or virtual host
    method: str = "GET"
    url: str = ""          # request URL; only differs from target in vhost mode
    body: str = ""
    headers: Tuple[Tuple[str, str], ...] = ()
    payload: Tuple[str, ...] = ()

    @property
    def request_url(self) -> str:
        return self.url or self.target


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of executing exactly one Candidate."""
    candidate: Candidate
    status: Union[int, bool, None] = None
    reason: str = ""
    elapsed: float = 0.0
    body: Optional[str] = None
    addresses: Tuple[str, ...] = ()
    ignored: bool = False
    extra: str = ""        # redirect location, if any
    error: Optional[str] = None

    @classmethod
    def failed(cls, candidate: Candidate, exc: BaseException, elapsed: float = 0.0) -> "ProbeOutcome":
        return cls(candidate=candidate, elapsed=elapsed,
                   error=f"{type(exc).__name__}: {exc}")

    @property
    def status_text(self) -> str:
        if self.status is None:
            return "ERR"
        return f"{self.status} {self.reason}".strip()


@dataclass(frozen=True)
class FilterPolicy:
    """Include/exclude rules over status codes and body substrings.

    Include and exclude sets on the same axis are mutually exclusive.
    """
    include_codes: FrozenSet[str] = frozenset()
    exclude_codes: FrozenSet[str] = frozenset()
    include_strings: FrozenSet[str] = frozenset()
    exclude_strings: FrozenSet[str] = frozenset()

    def __post_init__(self):
        if self.include_codes and self.exclude_codes:
            raise ConfigError(
                "include and exclude status codes cannot be combined")
        if self.include_strings and self.exclude_strings:
            raise ConfigError(
                "include and ignore body strings cannot be combined")

    @classmethod
    def build(cls, include_codes: Iterable[str] = (), exclude_codes: Iterable[str] = (),
              include_strings: Iterable[str] = (), exclude_strings: Iterable[str] = ()) -> "FilterPolicy":
        return cls(frozenset(include_codes), frozenset(exclude_codes),
                   frozenset(include_strings), frozenset(exclude_strings))

    @property
    def wants_body(self) -> bool:
        return bool(self.include_strings or self.exclude_strings)

    def accepts_status(self, status) -> bool:
        code = str(status)
        if self.include_codes:
            return code in self.include_codes
        return code not in self.exclude_codes

    def accepts_body(self, body: Optional[str]) -> bool:
        text = body or ""
        if self.include_strings:
            return any(s in text for s in self.include_strings)
        return not any(s in text for s in self.exclude_strings)

    def accepts(self, status, body: Optional[str] = None) -> bool:
        return self.accepts_status(status) and self.accepts_body(body)


@dataclass(frozen=True)
class CsrfToken:
    raw_value: str


@dataclass(frozen=True)
class AcceptedResult:
    key: Hashable
    outcome: ProbeOutcome

    def __str__(self):
        c = self.outcome.candidate
        return f"{c.method} {self.outcome.status_text} {c.target}"


@dataclass
class RunStats:
    dispatched_count: int = 0
    completed_count: int = 0
    start_time: float = field(default_factory=time.monotonic)

    def elapsed_seconds(self) -> int:
        return int(time.monotonic() - self.start_time)

    def throughput(self) -> Optional[float]:
        """Completed probes per second, None while under one second."""
        seconds = self.elapsed_seconds()
        if seconds <= 0:
            return None
        return self.completed_count / seconds

    def throughput_label(self) -> str:
        rate = self.throughput()
        if rate is None:
            return "warming up..."
        return str(int(rate))


@dataclass
class RunReport:
    results: List[AcceptedResult]
    stats: RunStats
    stop_reason: StopReason = StopReason.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.stop_reason is not StopReason.COMPLETED
