"""Abstract base for all enumeration modes."""

from abc import ABC, abstractmethod
from typing import Dict, Hashable, Iterator, List, Optional

import httpx

from wordbuster.core.models import Candidate, CsrfToken, ProbeOutcome


def status_tabs(status_text: str) -> str:
    """Tab padding that keeps the target column aligned."""
    return "\t" * {3: 1, 2: 2, 1: 3, 0: 4}.get(len(status_text) // 8, 0)


class BaseMode(ABC):
    """Every mode must implement candidates(), probe(), accept() and identity()."""

    name: str = "unnamed"

    def __init__(self, config):
        self.config = config

    # ── public API ──────────────────────────────────────────────

    @abstractmethod
    def candidates(self) -> Iterator[Candidate]:
        """Yield the candidates to probe, in wordlist order."""
        ...

    @abstractmethod
    def probe(self, prober, candidate: Candidate) -> ProbeOutcome:
        """Execute one candidate through *prober*."""
        ...

    @abstractmethod
    def accept(self, outcome: ProbeOutcome) -> bool:
        """Return True if the outcome is worth reporting."""
        ...

    @abstractmethod
    def identity(self, outcome: ProbeOutcome) -> Hashable:
        """Dedup key of an accepted outcome."""
        ...

    @abstractmethod
    def describe(self, outcome: ProbeOutcome) -> List[str]:
        """Human-readable lines for an accepted outcome."""
        ...

    @abstractmethod
    def to_record(self, outcome: ProbeOutcome) -> Dict:
        """Serializable form of an accepted outcome."""
        ...

    # ── optional hooks ──────────────────────────────────────────

    def prepare(self, client: httpx.Client, logger=None) -> Optional[CsrfToken]:
        """Pre-flight run once before dispatch. Returns the CSRF token, if any."""
        return None

    def count(self) -> int:
        """Number of candidates, computed from wordlist sizes only."""
        return len(self.wordlist)
