"""Directories and files enumeration."""

from typing import Dict, Hashable, Iterator, List

from wordbuster.core.models import Candidate, Mode, ProbeOutcome
from wordbuster.core.wordlist import expand_paths
from wordbuster.modes.base import BaseMode, status_tabs


class DirMode(BaseMode):

    name = "dir"

    def __init__(self, config, wordlist):
        super().__init__(config)
        self.wordlist = wordlist

    def candidates(self) -> Iterator[Candidate]:
        cfg = self.config
        headers = tuple(cfg.http_headers)
        for url in expand_paths(self.wordlist, cfg.url, cfg.extensions, cfg.append_slash):
            yield Candidate(Mode.DIR, target=url, method=cfg.http_method,
                            body=cfg.http_body, headers=headers)

    def count(self) -> int:
        cfg = self.config
        per_word = 1 + len([e for e in cfg.extensions if e]) + int(cfg.append_slash)
        return len(self.wordlist) * per_word

    def probe(self, prober, candidate: Candidate) -> ProbeOutcome:
        return prober.send(candidate, keep_body=self.config.filters.wants_body)

    def accept(self, outcome: ProbeOutcome) -> bool:
        return self.config.filters.accepts(outcome.status, outcome.body)

    def identity(self, outcome: ProbeOutcome) -> Hashable:
        c = outcome.candidate
        return (c.method, outcome.status, c.target)

    def describe(self, outcome: ProbeOutcome) -> List[str]:
        status = outcome.status_text
        line = f"{outcome.candidate.method}\t{status}{status_tabs(status)}{outcome.candidate.target}"
        if outcome.extra:
            line += f"\n\t\t\t\t\t\t=> {outcome.extra}"
        return [line]

    def to_record(self, outcome: ProbeOutcome) -> Dict:
        return {
            "method": outcome.candidate.method,
            "url": outcome.candidate.target,
            "status": outcome.status,
            "extra": outcome.extra,
        }
